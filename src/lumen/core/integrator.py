"""Path tracing integrator and render kernel.

The integrator estimates the color seen along a ray by following it through
the scene. At every surface the material either absorbs the ray or scatters
it, multiplying the path throughput by its attenuation. A ray that escapes
the scene picks up the sky gradient. A path that runs out of bounces before
escaping contributes black.

The recursive formulation

    ray_color(ray, depth) =
        black                                    if depth <= 0
        attenuation * ray_color(scattered, depth - 1)   on a scattering hit
        black                                    on an absorbing hit
        sky(ray)                                 on a miss

is evaluated as a loop that carries the product of attenuations, since
Taichi functions are inlined and cannot recurse.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.core.integrator import trace_ray
    >>> trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), depth=1)  # Empty scene
    (0.5, 0.7, 1.0)
"""

import taichi as ti
import taichi.math as tm

from lumen.camera.camera import get_ray
from lumen.core.interval import T_MAX, T_MIN, make_interval
from lumen.core.ray import Ray, make_ray, normalize, vec3
from lumen.materials.material import scatter_material
from lumen.scene.intersection import intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Sky gradient endpoints
SKY_HORIZON = vec3(1.0, 1.0, 1.0)
SKY_ZENITH = vec3(0.5, 0.7, 1.0)

# Output range of write_color is [0, 256 * MAX_INTENSITY)
MAX_INTENSITY = 0.999


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Blend white and light blue by the height of the unit direction."""
    unit_direction = normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * SKY_HORIZON + a * SKY_ZENITH


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> vec3:
    """Estimate the color carried back along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Number of scene queries the path may make. Zero returns
            black without touching the scene.

    Returns:
        The path's color estimate.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray

    # Cleared once the path has been resolved
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(current, make_interval(T_MIN, T_MAX))

            if rec.hit == 0:
                color = throughput * sky_color(current.direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = scatter_material(
                    rec.material_id, current.direction, rec
                )
                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    current = make_ray(rec.point, scattered_direction)

    return color


@ti.func
def write_color(pixel_color_sum: vec3, samples_per_pixel: ti.i32) -> vec3:
    """Convert a sum of samples into an output intensity.

    Averages the samples, applies gamma 2 (square root), clamps to
    [0, MAX_INTENSITY] and scales by 256.
    """
    scale = 1.0 / ti.cast(samples_per_pixel, ti.f64)
    gamma_corrected = ti.sqrt(pixel_color_sum * scale)
    return 256.0 * tm.clamp(gamma_corrected, 0.0, MAX_INTENSITY)


@ti.func
def sample_pixel(i: ti.i32, j: ti.i32, samples_per_pixel: ti.i32, max_depth: ti.i32) -> vec3:
    """Sum samples_per_pixel jittered path samples through pixel (i, j)."""
    pixel_color = vec3(0.0, 0.0, 0.0)
    for _ in range(samples_per_pixel):
        pixel_color += ray_color(get_ray(i, j), max_depth)
    return pixel_color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def render_rows(
    image: ti.types.ndarray(dtype=vec3, ndim=2),
    row_start: ti.i32,
    row_end: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
):
    """Render rows [row_start, row_end) into an image buffer.

    The outer loop runs in parallel over pixels. Each pixel writes only its
    own slot of the buffer.

    Args:
        image: Buffer of shape (height, width) with vec3 entries, row 0 at
            the top.
        row_start: First row to render.
        row_end: One past the last row to render.
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Bounce budget per path.
    """
    width = image.shape[1]
    for j, i in ti.ndrange((row_start, row_end), width):
        color_sum = sample_pixel(i, j, samples_per_pixel, max_depth)
        image[j, i] = write_color(color_sum, samples_per_pixel)


@ti.kernel
def _trace_kernel(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    return ray_color(make_ray(origin, direction), depth)


@ti.kernel
def _render_pixel_kernel(
    i: ti.i32, j: ti.i32, samples_per_pixel: ti.i32, max_depth: ti.i32
) -> vec3:
    return write_color(sample_pixel(i, j, samples_per_pixel, max_depth), samples_per_pixel)


# =============================================================================
# Host-side Helpers
# =============================================================================


def trace_ray(origin, direction, depth: int, scene=None) -> tuple[float, float, float]:
    """Trace one path and return its linear color.

    Useful for inspecting the integrator outside a full render.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z).
        depth: Bounce budget.
        scene: Scene to upload first. When omitted the spheres already in
            the kernel-side storage are used.

    Returns:
        Tuple of (R, G, B) before averaging and gamma correction.
    """
    if scene is not None:
        scene.upload()
    color = _trace_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        depth,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def render_pixel(
    i: int, j: int, samples_per_pixel: int = 1, max_depth: int = 50
) -> tuple[float, float, float]:
    """Render a single pixel with the uploaded camera and scene.

    setup_camera() must have been called and the scene uploaded.

    Args:
        i: Column index, 0 at the left.
        j: Row index, 0 at the top.
        samples_per_pixel: Samples averaged for the pixel.
        max_depth: Bounce budget per path.

    Returns:
        Tuple of (R, G, B) output intensities in [0, 256).
    """
    color = _render_pixel_kernel(i, j, samples_per_pixel, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))
