"""Material table and scatter dispatch.

Materials are small immutable values (Lambertian, Metal, Dielectric). On the
kernel side they live in one struct-of-arrays table indexed by material_id,
tagged with a MaterialType that selects the scattering function. Hit records
carry only the material_id, so every primitive sharing a material refers to
the same table slot.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.materials.material import add_material, Metal
    >>> material_id = add_material(Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.1))
    >>> # Use scatter_material(material_id, direction, rec) in a kernel
"""

from enum import IntEnum
from typing import Union

import taichi as ti

from lumen.core.ray import vec3
from lumen.geometry.hittable import HitRecord
from lumen.materials.dielectric import Dielectric, scatter_dielectric
from lumen.materials.lambertian import Lambertian, scatter_lambertian
from lumen.materials.metal import Metal, scatter_metal

Material = Union[Lambertian, Metal, Dielectric]


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used by scatter_material() to pick the scattering function.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


def material_type_of(material: Material) -> MaterialType:
    """Get the MaterialType tag for a material value.

    Raises:
        TypeError: If the value is not one of the supported materials.
    """
    if isinstance(material, Lambertian):
        return MaterialType.LAMBERTIAN
    if isinstance(material, Metal):
        return MaterialType.METAL
    if isinstance(material, Dielectric):
        return MaterialType.DIELECTRIC
    raise TypeError(f"Unsupported material: {material!r}")


# =============================================================================
# Material Field Storage
# =============================================================================

MAX_MATERIALS = 1024

# Unused columns of a row keep their last written value and are never read
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear the material table.

    Resets the material count to zero. Existing rows are overwritten when
    new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Append a material to the table.

    Args:
        material: A Lambertian, Metal or Dielectric value.

    Returns:
        The material_id of the new row.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        TypeError: If the value is not a supported material.
    """
    mat_type = material_type_of(material)

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[idx] = int(mat_type)
    if mat_type == MaterialType.LAMBERTIAN:
        material_albedos[idx] = material.albedo
    elif mat_type == MaterialType.METAL:
        material_albedos[idx] = material.albedo
        material_fuzz[idx] = material.fuzz
    else:
        material_refractive_indices[idx] = material.refractive_index

    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the table."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a material_id.

    Returns:
        The material type as an integer (see MaterialType), or -1 for an
        invalid material_id.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def scatter_material(material_id: ti.i32, incident_direction: vec3, rec: HitRecord):
    """Dispatch to the scattering function of a material.

    Args:
        material_id: The index of the hit surface's material.
        incident_direction: The incoming ray direction.
        rec: The hit record of the surface.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        did_scatter is 0 when the ray is absorbed. An invalid material_id
        absorbs the ray.
    """
    mat_type = get_material_type(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian(
            material_albedos[material_id], rec
        )

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal(
            material_albedos[material_id],
            material_fuzz[material_id],
            incident_direction,
            rec,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            material_refractive_indices[material_id], incident_direction, rec
        )

    return scattered_direction, attenuation, did_scatter
