"""Geometry module for the hittable protocol and shape primitives.

Components:
    hittable: HitRecord structure, normal orientation and the host-side Hit
    sphere: Sphere primitive with ray-sphere intersection

Intersection routines are Taichi functions returning a HitRecord whose hit
field is 0 on a miss.
"""

from .hittable import Hit, HitRecord, face_normal, make_hit_record, make_miss_record
from .sphere import Sphere, hit_sphere, make_sphere

__all__ = [
    "Hit",
    "HitRecord",
    "face_normal",
    "make_hit_record",
    "make_miss_record",
    "Sphere",
    "hit_sphere",
    "make_sphere",
]
