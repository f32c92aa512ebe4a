"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure, vector helpers and random sampling
    interval: Half-open parametric intervals for hit queries
    integrator: Path integrator (ray_color) and the render kernel
    renderer: Batched render loop with progress reporting

All compute-intensive operations use Taichi kernels on the CPU backend.
"""

from .interval import T_MAX, T_MIN, Interval, interval_contains, make_interval, with_max
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    random_in_unit_sphere,
    random_on_hemisphere,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from lumen.core.integrator or lumen.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_on_hemisphere",
    "Interval",
    "make_interval",
    "interval_contains",
    "with_max",
    "T_MIN",
    "T_MAX",
]
