"""Scene module for scene management and ray-scene queries.

Components:
    intersection: Kernel-side sphere storage and closest-hit search
    manager: Scene collection, sphere descriptors and JSON scene files
    presets: Ready-made scenes

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for sphere data
    - One material table row per distinct material value
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    query_scene,
)
from .manager import (
    Scene,
    SphereDescriptor,
    clear_storage,
    load_scene_file,
    material_from_dict,
    material_to_dict,
    save_scene_file,
)
from .presets import create_showcase_scene, create_two_sphere_scene

__all__ = [
    # Intersection module
    "MAX_SPHERES",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "query_scene",
    # Manager module
    "Scene",
    "SphereDescriptor",
    "clear_storage",
    "load_scene_file",
    "save_scene_file",
    "material_from_dict",
    "material_to_dict",
    # Presets
    "create_showcase_scene",
    "create_two_sphere_scene",
]
