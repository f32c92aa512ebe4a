"""Scene-level sphere storage and closest-hit testing.

Spheres live in Taichi fields in struct-of-arrays layout. The scene query
walks them in insertion order and narrows the accepted interval to the
closest hit found so far, so the result is the nearest surface regardless of
the order the spheres were added in.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.scene.intersection import add_sphere, clear_scene, query_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> hit = query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> hit.t
    0.5
"""

import taichi as ti

from lumen.core.interval import T_MAX, T_MIN, Interval, make_interval, with_max
from lumen.core.ray import Ray, vec3
from lumen.geometry.hittable import Hit, HitRecord, make_miss_record
from lumen.geometry.sphere import Sphere, hit_sphere

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Identity of the Scene whose spheres currently occupy the fields
_owner = None


def clear_scene() -> None:
    """Clear all spheres from the scene storage.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    global _owner
    num_spheres[None] = 0
    _owner = None


def add_sphere(center, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene storage.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The signed radius of the sphere.
        material_id: The material table index for this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene storage."""
    return int(num_spheres[None])


def get_owner():
    """Return the object that last claimed the scene storage, if any."""
    return _owner


def set_owner(scene) -> None:
    """Record which object's spheres currently occupy the scene storage."""
    global _owner
    _owner = scene


@ti.func
def get_sphere(i: ti.i32) -> Sphere:
    """Load sphere i from the field storage."""
    return Sphere(
        center=sphere_centers[i],
        radius=sphere_radii[i],
        material_id=sphere_material_ids[i],
    )


@ti.func
def intersect_scene(ray: Ray, interval: Interval) -> HitRecord:
    """Test a ray against every sphere in the scene.

    Each sphere is queried over [interval.t_min, closest_so_far), and
    closest_so_far shrinks on every hit.

    Args:
        ray: The ray to trace.
        interval: Accepted range of ray parameters.

    Returns:
        The closest HitRecord, or a miss record if nothing was hit.
    """
    closest_so_far = interval.t_max
    result = make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        rec = hit_sphere(get_sphere(i), ray, with_max(interval, closest_so_far))
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result


# =============================================================================
# Host-side Queries
# =============================================================================

_query_result = HitRecord.field(shape=())


@ti.kernel
def _query_kernel(origin: vec3, direction: vec3, t_min: ti.f64, t_max: ti.f64):
    ray = Ray(origin=origin, direction=direction)
    _query_result[None] = intersect_scene(ray, make_interval(t_min, t_max))


def query_scene(origin, direction, t_min: float = T_MIN, t_max: float = T_MAX) -> Hit | None:
    """Run a closest-hit query against the spheres currently stored.

    Args:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z). Need not be normalized.
        t_min: Smallest accepted ray parameter (inclusive).
        t_max: Largest accepted ray parameter (exclusive).

    Returns:
        A Hit for the nearest intersection, or None on a miss.
    """
    _query_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        float(t_min),
        float(t_max),
    )
    if _query_result.hit[None] == 0:
        return None

    point = _query_result.point[None]
    normal = _query_result.normal[None]
    return Hit(
        t=float(_query_result.t[None]),
        point=(float(point[0]), float(point[1]), float(point[2])),
        normal=(float(normal[0]), float(normal[1]), float(normal[2])),
        front_face=bool(_query_result.front_face[None]),
        material_id=int(_query_result.material_id[None]),
    )
