"""Look-at camera generating jittered primary rays.

The camera is configured with a position (lookfrom), a target (lookat), an up
hint (vup) and a vertical field of view. From these it derives an orthonormal
basis:
- w: points from lookat toward lookfrom (opposite the view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits at the focal distance |lookfrom - lookat|. Its width is
derived from the integer image dimensions rather than the requested aspect
ratio, so the pixels stay square after the image height is truncated.

Pixel (i, j) has i running left to right and j running top to bottom. Each
call to get_ray(i, j) jitters the sample point uniformly within the pixel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.camera.camera import Camera, setup_camera, get_ray
    >>> camera = Camera(image_width=400, lookfrom=(-2, 2, 1), lookat=(0, 0, -1))
    >>> setup_camera(camera)
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(200, 112)  # Jittered ray through the image center
"""

import math
from dataclasses import asdict, dataclass, fields

import numpy as np
import taichi as ti

from lumen.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Configuration
# =============================================================================


def _as_count(name: str, value) -> int:
    """Convert a whole-number setting to int.

    Raises:
        ValueError: If the value is not a whole number.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} = {value!r} must be a whole number") from None
    if isinstance(value, bool) or not number.is_integer():
        raise ValueError(f"{name} = {value!r} must be a whole number")
    return int(number)


@dataclass
class Camera:
    """Camera and render configuration.

    Attributes:
        image_width: Rendered image width in pixels.
        aspect_ratio: Requested width / height. Only used to derive the
            integer image height.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of ray bounces.
        vfov: Vertical field of view in degrees.
        lookfrom: Camera position in world space.
        lookat: Point the camera looks at.
        vup: Up direction hint. Must not be parallel to the view direction.
    """

    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    vfov: float = 20.0
    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)

    def __post_init__(self) -> None:
        self.image_width = _as_count("Image width", self.image_width)
        self.samples_per_pixel = _as_count("Samples per pixel", self.samples_per_pixel)
        self.max_depth = _as_count("Max depth", self.max_depth)
        self.aspect_ratio = float(self.aspect_ratio)
        self.vfov = float(self.vfov)
        self.lookfrom = tuple(float(c) for c in self.lookfrom)
        self.lookat = tuple(float(c) for c in self.lookat)
        self.vup = tuple(float(c) for c in self.vup)
        # Raises on invalid settings
        compute_geometry(self)

    @property
    def image_height(self) -> int:
        """Image height in pixels, int(width / aspect_ratio)."""
        return int(self.image_width / self.aspect_ratio)

    def render(self, scene, callback=None) -> np.ndarray:
        """Render a scene with this camera.

        Args:
            scene: The Scene to render.
            callback: Optional progress callback receiving
                (completed_pixels, total_pixels).

        Returns:
            Float64 array of shape (image_height, image_width, 3) holding
            color values in [0, 256).
        """
        from lumen.core.renderer import Renderer

        return Renderer(self, scene).render(callback=callback)


@dataclass(frozen=True)
class CameraGeometry:
    """Derived camera geometry, fixed for a whole render.

    Attributes:
        image_width: Image width in pixels.
        image_height: Image height in pixels.
        center: Ray origin for every primary ray.
        u: Unit vector pointing right in the image plane.
        v: Unit vector pointing up in the image plane.
        w: Unit vector pointing backward, opposite the view direction.
        pixel_delta_u: Offset from one pixel to the next along a row.
        pixel_delta_v: Offset from one pixel to the next down a column.
        pixel00_loc: Center of the upper-left pixel.
    """

    image_width: int
    image_height: int
    center: np.ndarray
    u: np.ndarray
    v: np.ndarray
    w: np.ndarray
    pixel_delta_u: np.ndarray
    pixel_delta_v: np.ndarray
    pixel00_loc: np.ndarray


def compute_geometry(camera: Camera) -> CameraGeometry:
    """Derive the viewport and basis vectors from a camera configuration.

    Raises:
        ValueError: If the configuration cannot produce an image.
    """
    if camera.image_width <= 0:
        raise ValueError(f"Image width = {camera.image_width} must be positive")
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"Aspect ratio = {camera.aspect_ratio} must be positive")
    if camera.samples_per_pixel <= 0:
        raise ValueError(f"Samples per pixel = {camera.samples_per_pixel} must be positive")
    if camera.max_depth < 0:
        raise ValueError(f"Max depth = {camera.max_depth} must not be negative")
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Vertical field of view = {camera.vfov} must be in (0, 180)")

    image_width = int(camera.image_width)
    image_height = camera.image_height
    if image_height < 1:
        raise ValueError(
            f"Image height truncates to {image_height} for width {image_width} "
            f"and aspect ratio {camera.aspect_ratio}"
        )

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    view = lookfrom - lookat
    focal_length = float(np.linalg.norm(view))
    if focal_length == 0.0:
        raise ValueError("lookfrom and lookat must be different points")

    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * focal_length
    viewport_width = viewport_height * (image_width / image_height)

    w = view / focal_length
    u = np.cross(vup, w)
    u_norm = float(np.linalg.norm(u))
    if u_norm < 1e-12:
        raise ValueError("vup must not be parallel to the view direction")
    u = u / u_norm
    v = np.cross(w, u)

    # Viewport edges, with viewport_v running down the image
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = lookfrom - focal_length * w - viewport_u / 2.0 - viewport_v / 2.0
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    return CameraGeometry(
        image_width=image_width,
        image_height=image_height,
        center=lookfrom,
        u=u,
        v=v,
        w=w,
        pixel_delta_u=pixel_delta_u,
        pixel_delta_v=pixel_delta_v,
        pixel00_loc=pixel00_loc,
    )


def camera_to_dict(camera: Camera) -> dict:
    """Export a camera to a JSON-friendly dictionary."""
    data = asdict(camera)
    for key in ("lookfrom", "lookat", "vup"):
        data[key] = list(data[key])
    return data


def camera_from_dict(data: dict, base: Camera | None = None) -> Camera:
    """Build a camera from a dictionary of field values.

    Args:
        data: Mapping of Camera field names to values.
        base: Camera supplying values for missing keys. Defaults are used
            when omitted.

    Raises:
        ValueError: If the mapping has unknown keys or invalid values.
    """
    known = {f.name for f in fields(Camera)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown camera settings: {', '.join(sorted(unknown))}")
    values = asdict(base) if base is not None else {}
    values.update(data)
    return Camera(**values)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_camera(camera: Camera) -> CameraGeometry:
    """Upload the camera geometry to the kernel-side fields.

    Must be called before any kernel uses get_ray().

    Returns:
        The derived CameraGeometry.
    """
    geometry = compute_geometry(camera)
    _camera_center[None] = geometry.center.tolist()
    _pixel00_loc[None] = geometry.pixel00_loc.tolist()
    _pixel_delta_u[None] = geometry.pixel_delta_u.tolist()
    _pixel_delta_v[None] = geometry.pixel_delta_v.tolist()
    return geometry


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def pixel_sample_square() -> vec3:
    """Random offset (px, py, 0) with px, py in [-0.5, 0.5)."""
    return vec3(ti.random(ti.f64) - 0.5, ti.random(ti.f64) - 0.5, 0.0)


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate a jittered ray through pixel (i, j).

    Args:
        i: Column index, 0 at the left edge.
        j: Row index, 0 at the top edge.

    Returns:
        A ray from the camera center through a random point inside the
        pixel. The direction is not normalized.
    """
    offset = pixel_sample_square()
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(i, ti.f64) + offset.x) * _pixel_delta_u[None]
        + (ti.cast(j, ti.f64) + offset.y) * _pixel_delta_v[None]
    )
    origin = _camera_center[None]
    return make_ray(origin, pixel_sample - origin)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v.
    """
    info = {}
    for name, value in (
        ("center", _camera_center[None]),
        ("pixel00_loc", _pixel00_loc[None]),
        ("pixel_delta_u", _pixel_delta_u[None]),
        ("pixel_delta_v", _pixel_delta_v[None]),
    ):
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    return info
