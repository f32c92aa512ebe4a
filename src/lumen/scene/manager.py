"""Scene collection coordinating spheres and materials.

A Scene is a plain ordered list of SphereDescriptors built on the host. Before
a render or a host-side hit query it is uploaded into the kernel-side sphere
storage and material table. Identical material values share one material
slot, so three spheres made of the same glass refer to a single table row.

Scenes can be exported to and loaded from dictionaries (and JSON files) of
the form

    {
        "camera": {"image_width": 400, "lookfrom": [-2, 2, 1], ...},
        "spheres": [
            {"center": [0, 0, -1], "radius": 0.5,
             "material": {"type": "lambertian", "albedo": [0.1, 0.2, 0.5]}},
            ...
        ]
    }

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.scene.manager import Scene, SphereDescriptor
    >>> from lumen.materials.lambertian import Lambertian
    >>> scene = Scene()
    >>> scene.add(SphereDescriptor((0, 0, -1), 0.5, Lambertian((0.1, 0.2, 0.5))))
    >>> scene.hit((0, 0, 0), (0, 0, -1)).t
    0.5
"""

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lumen.camera.camera import Camera, camera_from_dict, camera_to_dict
from lumen.core.interval import T_MAX, T_MIN
from lumen.geometry.hittable import Hit
from lumen.materials.dielectric import Dielectric
from lumen.materials.lambertian import Lambertian
from lumen.materials.material import Material, add_material, clear_materials
from lumen.materials.metal import Metal
from lumen.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_owner,
    query_scene,
    set_owner,
)

logger = logging.getLogger(__name__)


def clear_storage() -> None:
    """Clear the kernel-side sphere storage and material table."""
    clear_scene()
    clear_materials()


@dataclass(frozen=True)
class SphereDescriptor:
    """A sphere placed in a scene.

    Attributes:
        center: The center point (x, y, z).
        radius: The signed radius. Must be non-zero; a negative radius makes
            the surface normals point inward (hollow glass shells).
        material: The material the sphere is made of.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Center must have 3 components, got {len(self.center)}")
        object.__setattr__(self, "center", tuple(float(c) for c in self.center))
        object.__setattr__(self, "radius", float(self.radius))
        if self.radius == 0.0:
            raise ValueError("Sphere radius must be non-zero")
        if not isinstance(self.material, (Lambertian, Metal, Dielectric)):
            raise ValueError(f"Unsupported material: {self.material!r}")


class Scene:
    """Ordered, mutable collection of spheres.

    The closest hit over the scene does not depend on insertion order; the
    order only decides which of two spheres at exactly the same distance
    wins (the one added first).

    Example:
        >>> scene = Scene()
        >>> glass = Dielectric(1.5)
        >>> scene.add(SphereDescriptor((-1, 0, -1), 0.5, glass))
        >>> scene.add(SphereDescriptor((-1, 0, -1), -0.4, glass))
        >>> len(scene)
        2
    """

    def __init__(self, spheres: Iterable[SphereDescriptor] = ()) -> None:
        self._spheres: list[SphereDescriptor] = []
        self._synced = False
        self.extend(spheres)

    def add(self, sphere: SphereDescriptor) -> None:
        """Append a sphere to the scene.

        Raises:
            RuntimeError: If the scene would exceed the sphere capacity.
        """
        if len(self._spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        self._spheres.append(sphere)
        self._synced = False

    def extend(self, spheres: Iterable[SphereDescriptor]) -> None:
        """Append several spheres in order."""
        for sphere in spheres:
            self.add(sphere)

    def clear(self) -> None:
        """Remove every sphere from the scene."""
        self._spheres.clear()
        self._synced = False

    def __len__(self) -> int:
        return len(self._spheres)

    def __iter__(self) -> Iterator[SphereDescriptor]:
        return iter(self._spheres)

    def __repr__(self) -> str:
        return f"Scene({len(self._spheres)} spheres)"

    @property
    def materials(self) -> list[Material]:
        """Distinct materials in first-use order."""
        return list(dict.fromkeys(sphere.material for sphere in self._spheres))

    # =========================================================================
    # Kernel-side Upload
    # =========================================================================

    def upload(self) -> None:
        """Copy the scene into the kernel-side storage.

        Does nothing when this scene is already the one stored and has not
        changed since the last upload.

        Raises:
            RuntimeError: If the material table capacity is exceeded.
        """
        if self._synced and get_owner() is self:
            return

        clear_storage()
        material_ids: dict[Material, int] = {}
        for sphere in self._spheres:
            material_id = material_ids.get(sphere.material)
            if material_id is None:
                material_id = add_material(sphere.material)
                material_ids[sphere.material] = material_id
            add_sphere(sphere.center, sphere.radius, material_id)

        set_owner(self)
        self._synced = True
        logger.debug(
            "Uploaded %d spheres with %d materials", len(self._spheres), len(material_ids)
        )

    def hit(self, origin, direction, t_min: float = T_MIN, t_max: float = T_MAX) -> Hit | None:
        """Find the closest intersection of a ray with the scene.

        Args:
            origin: The ray origin as (x, y, z).
            direction: The ray direction as (x, y, z). Need not be normalized.
            t_min: Smallest accepted ray parameter (inclusive).
            t_max: Largest accepted ray parameter (exclusive).

        Returns:
            A Hit for the nearest surface with t in [t_min, t_max), or None.
        """
        self.upload()
        return query_scene(origin, direction, t_min, t_max)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "spheres": [
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": material_to_dict(sphere.material),
                }
                for sphere in self._spheres
            ]
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from a dictionary.

        Args:
            data: Dictionary with a 'spheres' list. Other keys are ignored.

        Raises:
            ValueError: If a sphere or material entry is invalid.
        """
        scene = cls()
        for i, sphere_config in enumerate(data.get("spheres", [])):
            try:
                center = sphere_config["center"]
                radius = sphere_config["radius"]
                material_config = sphere_config["material"]
            except KeyError as err:
                raise ValueError(f"Sphere {i} is missing required key {err}") from err
            scene.add(SphereDescriptor(center, radius, material_from_dict(material_config)))
        return scene


def material_to_dict(material: Material) -> dict[str, Any]:
    """Export a material to a dictionary with a 'type' tag."""
    if isinstance(material, Lambertian):
        return {"type": "lambertian", "albedo": list(material.albedo)}
    if isinstance(material, Metal):
        return {"type": "metal", "albedo": list(material.albedo), "fuzz": material.fuzz}
    return {"type": "dielectric", "refractive_index": material.refractive_index}


def material_from_dict(config: dict[str, Any]) -> Material:
    """Build a material from a dictionary with a 'type' tag.

    Raises:
        ValueError: If the type is unknown or the parameters are invalid.
    """
    mat_type = str(config.get("type", "")).lower()
    if mat_type == "lambertian":
        return Lambertian(albedo=tuple(config.get("albedo", (0.5, 0.5, 0.5))))
    if mat_type == "metal":
        return Metal(
            albedo=tuple(config.get("albedo", (0.8, 0.8, 0.8))),
            fuzz=config.get("fuzz", 0.0),
        )
    if mat_type == "dielectric":
        return Dielectric(refractive_index=config.get("refractive_index", 1.5))
    raise ValueError(f"Unknown material type: {mat_type}")


def load_scene_file(path: str | Path) -> tuple[Scene, Camera | None]:
    """Load a scene (and its camera block, if any) from a JSON file.

    Args:
        path: Path to the JSON scene file.

    Returns:
        Tuple of (scene, camera). camera is None when the file has no
        'camera' object.

    Raises:
        ValueError: If the file content is not a valid scene.
    """
    path = Path(path)
    with path.open() as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as err:
            raise ValueError(f"Invalid scene file {path}: {err}") from err

    if not isinstance(data, dict):
        raise ValueError(f"Invalid scene file {path}: expected a JSON object")

    scene = Scene.from_dict(data)
    camera = camera_from_dict(data["camera"]) if "camera" in data else None
    logger.info("Loaded %d spheres from %s", len(scene), path)
    return scene, camera


def save_scene_file(path: str | Path, scene: Scene, camera: Camera | None = None) -> None:
    """Write a scene (and optionally its camera) to a JSON file."""
    data = scene.to_dict()
    if camera is not None:
        data = {"camera": camera_to_dict(camera), **data}
    path = Path(path)
    with path.open("w") as f:
        json.dump(data, f, indent=2)
    logger.info("Saved %d spheres to %s", len(scene), path)
