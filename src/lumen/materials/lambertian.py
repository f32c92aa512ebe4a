"""Lambertian (ideal diffuse) material implementation.

Diffuse surfaces scatter light in a cosine-weighted distribution around the
surface normal. The scatter direction is the normal plus a random unit
vector, which produces exactly that distribution without building a local
frame. Lambertian surfaces never absorb a ray; energy loss comes only from
the albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.materials.lambertian import Lambertian, scatter_lambertian
    >>> ground = Lambertian(albedo=(0.8, 0.8, 0.0))
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(albedo, rec)
"""

from dataclasses import dataclass

import taichi as ti

from lumen.core.ray import near_zero, random_unit_vector, vec3
from lumen.geometry.hittable import HitRecord


def validate_albedo(albedo: tuple[float, float, float]) -> None:
    """Check that every albedo component lies in [0, 1].

    Raises:
        ValueError: If the albedo does not have three components or any
            component is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@dataclass(frozen=True)
class Lambertian:
    """Lambertian (ideal diffuse) material.

    Attributes:
        albedo: The diffuse reflectance color (R, G, B), each in [0, 1].
    """

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", tuple(float(c) for c in self.albedo))
        validate_albedo(self.albedo)


@ti.func
def lambertian_direction(normal: vec3, offset: vec3) -> vec3:
    """Diffuse scatter direction for a given random unit offset.

    Returns normal + offset, or the normal itself when the offset almost
    cancels it out.
    """
    scattered_direction = normal + offset
    if near_zero(scattered_direction):
        scattered_direction = normal
    return scattered_direction


@ti.func
def scatter_lambertian(albedo: vec3, rec: HitRecord):
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        rec: The hit record of the surface.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: normal + random unit vector, or the normal
          itself when that sum degenerates to (nearly) zero.
        - attenuation: The albedo.
        - did_scatter: Always 1.
    """
    scattered_direction = lambertian_direction(rec.normal, random_unit_vector())
    did_scatter = 1
    return scattered_direction, albedo, did_scatter
