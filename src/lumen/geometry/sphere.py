"""Sphere primitive with robust ray-sphere intersection.

This module provides a Sphere dataclass and its intersection function. The
two roots are computed with the reformulated quadratic from Ray Tracing Gems
to avoid catastrophic cancellation when b^2 is nearly equal to 4ac.

A negative radius is a deliberate special case: intersection is unchanged
(only r^2 enters the quadratic) but the outward normal (p - C) / r flips to
point inward. Nesting a negative-radius sphere inside a dielectric sphere
models a hollow glass shell.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.core.ray import vec3
    >>> from lumen.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=vec3(0, 0, -1), radius=0.5, material_id=0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from lumen.core.interval import Interval, interval_contains
from lumen.core.ray import Ray, ray_at, vec3
from lumen.geometry.hittable import HitRecord, make_hit_record, make_miss_record


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The signed radius. Its magnitude is the geometric radius;
            a negative value flips the outward normal.
        material_id: Index of the sphere's material in the material table.
    """

    center: vec3
    radius: ti.f64
    material_id: ti.i32


@ti.func
def _solve_quadratic_robust(h: ti.f64, a: ti.f64, c: ti.f64, sqrt_d: ti.f64):
    """Solve a*t^2 + 2*h*t + c = 0 using a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant)) never subtracts nearly equal values
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-12:
        # h and the discriminant both vanish
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(sphere: Sphere, ray: Ray, interval: Interval) -> HitRecord:
    """Intersect a ray with a sphere.

    The intersection solves |O + tD - C|^2 = r^2, which expands to

        a*t^2 + 2*h*t + c = 0

    with a = D.D, h = (O - C).D and c = |O - C|^2 - r^2. A negative
    discriminant h^2 - a*c means the ray misses.

    The near root is tested first and the far root only if the near one
    falls outside the interval. This selects the front surface when the
    ray starts outside and the back surface when it starts inside, and lets
    the scene's closest-hit search converge on the nearest surface.

    Args:
        sphere: The sphere to test.
        ray: The ray. Its direction need not be normalized.
        interval: Accepted range [t_min, t_max) of ray parameters.

    Returns:
        A HitRecord. Check the hit field to determine if an intersection
        was found.
    """
    oc = ray.origin - sphere.center
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = interval_contains(interval, t)
        if not valid:
            t = t1
            valid = interval_contains(interval, t)

        if valid:
            point = ray_at(ray, t)
            # Sign of the radius decides whether this points out or in
            outward_normal = (point - sphere.center) / sphere.radius
            result = make_hit_record(ray.direction, point, outward_normal, t, sphere.material_id)

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f64, material_id: ti.i32) -> Sphere:
    """Create a sphere from center, radius and material index."""
    return Sphere(center=center, radius=radius, material_id=material_id)
