"""Dielectric (glass/water) material implementation.

This module implements transparent materials that both reflect and refract
light.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for the angle-dependent reflectance
    - Total internal reflection when (n1 / n2) * sin(theta1) > 1

Each scatter event picks reflection or refraction at random, weighted by the
Schlick reflectance, so that averaging many samples blends the two. Glass
absorbs nothing: the attenuation is always white.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.materials.dielectric import Dielectric, scatter_dielectric
    >>> glass = Dielectric(refractive_index=1.5)
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     refractive_index, incident_direction, rec
    >>> # )
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from lumen.core.ray import normalize, reflect, refract, schlick_reflectance, vec3
from lumen.geometry.hittable import HitRecord


@dataclass(frozen=True)
class Dielectric:
    """Dielectric (glass/water) material.

    Attributes:
        refractive_index: Index of refraction relative to the surrounding
            medium. Common values: water 1.33, glass 1.5, diamond 2.4.
            Values below 1 model a less dense pocket (e.g. an air bubble
            in water).
    """

    refractive_index: float = 1.5

    def __post_init__(self) -> None:
        object.__setattr__(self, "refractive_index", float(self.refractive_index))
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Refractive index = {self.refractive_index} must be positive."
            )


@ti.func
def refraction_ratio(refractive_index: ti.f64, front_face: ti.i32) -> ti.f64:
    """Relative index across the interface for the travel direction.

    Entering from outside (front_face=1) gives 1/index, leaving the
    material gives index.
    """
    ratio = refractive_index
    if front_face == 1:
        ratio = 1.0 / refractive_index
    return ratio


@ti.func
def cannot_refract(ratio: ti.f64, cos_theta: ti.f64) -> ti.i32:
    """Return 1 when Snell's law has no solution (total internal reflection)."""
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)
    return ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(refractive_index: ti.f64, incident_direction: vec3, rec: HitRecord):
    """Scatter a ray off (or through) a dielectric surface.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        rec: The hit record of the surface. Its normal faces the incoming
            ray and its front_face flag selects the refraction ratio.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted direction.
        - attenuation: White (1, 1, 1).
        - did_scatter: Always 1.
    """
    ratio = refraction_ratio(refractive_index, rec.front_face)
    unit_direction = normalize(incident_direction)

    cos_theta = tm.min(-tm.dot(unit_direction, rec.normal), 1.0)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    reflectance = schlick_reflectance(cos_theta, ratio)
    if cannot_refract(ratio, cos_theta) or ti.random(ti.f64) < reflectance:
        scattered_direction = reflect(unit_direction, rec.normal)
    else:
        scattered_direction = refract(unit_direction, rec.normal, ratio)

    attenuation = vec3(1.0, 1.0, 1.0)
    did_scatter = 1
    return scattered_direction, attenuation, did_scatter
