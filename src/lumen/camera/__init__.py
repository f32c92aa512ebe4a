"""Camera module for view configuration and ray generation.

Components:
    camera: Look-at camera with jittered per-pixel ray generation

Pixel coordinates run left to right (i) and top to bottom (j).
"""

from .camera import (
    Camera,
    CameraGeometry,
    camera_from_dict,
    camera_to_dict,
    compute_geometry,
    get_camera_info,
    get_ray,
    pixel_sample_square,
    setup_camera,
)

__all__ = [
    "Camera",
    "CameraGeometry",
    "compute_geometry",
    "camera_from_dict",
    "camera_to_dict",
    "setup_camera",
    "get_ray",
    "pixel_sample_square",
    "get_camera_info",
]
