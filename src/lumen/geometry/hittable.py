"""Hit records and the hittable protocol.

Anything a ray can intersect (a single sphere or the whole scene) exposes a
closest-hit query with the shape

    hit(..., ray: Ray, interval: Interval) -> HitRecord

that returns the record with the smallest t inside the interval, or a record
with hit == 0 when nothing is hit. Every implementation must build its record
with make_hit_record() so the normal always faces against the incoming ray.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from lumen.core.ray import vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray intersected a surface, 0 on a miss.
        t: The ray parameter of the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal, always oriented against the incoming
            ray (dot(normal, ray.direction) <= 0). Only valid if hit == 1.
        front_face: 1 if the ray approached from outside the surface
            (against the outward normal), 0 if it hit from inside.
        material_id: Index of the surface material in the material table.
            -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def face_normal(direction: vec3, outward_normal: vec3):
    """Orient an outward normal against the ray direction.

    Args:
        direction: The incoming ray direction.
        outward_normal: The geometric normal pointing out of the surface
            (unit length).

    Returns:
        A tuple (front_face, normal) where front_face is 1 when the ray
        hits the outside of the surface and normal faces against the ray.
    """
    front_face = 0
    normal = -outward_normal
    if tm.dot(direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal


@ti.func
def make_hit_record(
    direction: vec3,
    point: vec3,
    outward_normal: vec3,
    t: ti.f64,
    material_id: ti.i32,
) -> HitRecord:
    """Build a hit record, orienting the normal against the ray."""
    front_face, normal = face_normal(direction, outward_normal)
    return HitRecord(
        hit=1,
        t=t,
        point=point,
        normal=normal,
        front_face=front_face,
        material_id=material_id,
    )


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@dataclass(frozen=True)
class Hit:
    """Host-side copy of a successful hit query.

    Attributes:
        t: The ray parameter of the intersection.
        point: The intersection point (x, y, z).
        normal: Unit normal facing against the incoming ray.
        front_face: True if the ray hit the outside of the surface.
        material_id: Index of the surface material.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    front_face: bool
    material_id: int
