"""Metal (specular reflective) material implementation.

Metals reflect the incoming ray about the surface normal. A fuzz parameter
perturbs the mirror direction by a random vector scaled by the fuzz, which
models a rough surface. Rays perturbed below the surface are absorbed.

The reflection formula is:
    R = V - 2(V . N)N

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.materials.metal import Metal, scatter_metal
    >>> gold = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.0)
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metal(
    >>> #     albedo, fuzz, incident_direction, rec
    >>> # )
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from lumen.core.ray import normalize, random_unit_vector, reflect, vec3
from lumen.geometry.hittable import HitRecord
from lumen.materials.lambertian import validate_albedo


@dataclass(frozen=True)
class Metal:
    """Metal (specular reflective) material.

    Attributes:
        albedo: The reflective color (R, G, B), each in [0, 1].
        fuzz: Surface roughness in [0, 1]. 0 is a perfect mirror.
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", tuple(float(c) for c in self.albedo))
        object.__setattr__(self, "fuzz", float(self.fuzz))
        validate_albedo(self.albedo)
        if self.fuzz < 0.0 or self.fuzz > 1.0:
            raise ValueError(
                f"Fuzz = {self.fuzz} is outside [0, 1]. "
                "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f64, incident_direction: vec3, rec: HitRecord):
    """Scatter a ray off a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: The surface roughness in [0, 1]. 0 = perfect mirror.
        incident_direction: The incoming ray direction (any length).
        rec: The hit record of the surface.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The fuzzed mirror direction (not normalized).
        - attenuation: The albedo.
        - did_scatter: 1 if the direction leaves the surface, 0 if absorbed.
    """
    reflected = reflect(normalize(incident_direction), rec.normal)
    scattered_direction = reflected + fuzz * random_unit_vector()

    # Excessive fuzz can push the ray into the surface
    did_scatter = 1
    if tm.dot(scattered_direction, rec.normal) <= 0.0:
        did_scatter = 0

    return scattered_direction, albedo, did_scatter
