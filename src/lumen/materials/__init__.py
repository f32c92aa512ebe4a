"""Materials module for light scattering.

Components:
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like materials with refraction and Schlick reflectance
    material: Material table and scatter dispatch

Each material is an immutable host-side value. Its scatter function returns
(scattered_direction, attenuation, did_scatter), with did_scatter = 0
meaning the ray was absorbed.
"""

from .dielectric import Dielectric, cannot_refract, refraction_ratio, scatter_dielectric
from .lambertian import Lambertian, lambertian_direction, scatter_lambertian, validate_albedo
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialType,
    add_material,
    clear_materials,
    get_material_count,
    get_material_type,
    material_type_of,
    scatter_material,
)
from .metal import Metal, scatter_metal

__all__ = [
    # Material values
    "Material",
    "Lambertian",
    "Metal",
    "Dielectric",
    "validate_albedo",
    # Scattering
    "lambertian_direction",
    "scatter_lambertian",
    "scatter_metal",
    "scatter_dielectric",
    "refraction_ratio",
    "cannot_refract",
    # Material table
    "MaterialType",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material_count",
    "get_material_type",
    "material_type_of",
    "scatter_material",
]
