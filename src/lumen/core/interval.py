"""Parametric intervals bounding valid ray intersection distances.

An Interval is the half-open range [t_min, t_max) of ray parameters that a
hit query accepts. The scene-wide closest-hit search shrinks t_max as closer
hits are found.
"""

import math

import taichi as ti

# Lower bound for scattered-ray queries. Keeps a bounced ray from hitting the
# surface it just left due to floating-point error at its origin.
T_MIN = 0.001

# Upper bound for unbounded queries
T_MAX = math.inf


@ti.dataclass
class Interval:
    """Half-open range [t_min, t_max) of accepted ray parameters.

    Attributes:
        t_min: Inclusive lower bound.
        t_max: Exclusive upper bound. May be infinite.
    """

    t_min: ti.f64
    t_max: ti.f64


@ti.func
def make_interval(t_min: ti.f64, t_max: ti.f64) -> Interval:
    """Create an interval from its bounds."""
    return Interval(t_min=t_min, t_max=t_max)


@ti.func
def interval_contains(interval: Interval, t: ti.f64) -> ti.i32:
    """Return 1 if t lies in [t_min, t_max), 0 otherwise."""
    return interval.t_min <= t and t < interval.t_max


@ti.func
def with_max(interval: Interval, t_max: ti.f64) -> Interval:
    """Return a copy of the interval with a tighter upper bound."""
    return Interval(t_min=interval.t_min, t_max=t_max)
