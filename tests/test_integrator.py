"""Unit tests for the path tracing integrator.

Tests cover:
- Sky gradient for escaping rays
- Depth budget (zero depth and exhausted paths are black)
- Attenuation along scattering paths
- Sample averaging, gamma correction and clamping in write_color
- Single-pixel rendering through the camera
"""

import math

import pytest
import taichi as ti


def _sky(direction):
    """Expected sky color for a direction."""
    y = direction[1] / math.sqrt(sum(c * c for c in direction))
    a = 0.5 * (y + 1.0)
    return [(1.0 - a) + a * 0.5, (1.0 - a) + a * 0.7, 1.0]


def _write_color(color_sum, samples_per_pixel):
    """Run write_color in a kernel."""
    from lumen.core.integrator import write_color
    from lumen.core.ray import vec3

    result = ti.field(dtype=vec3, shape=())

    @ti.kernel
    def test_kernel(color_sum: vec3, samples_per_pixel: ti.i32):
        result[None] = write_color(color_sum, samples_per_pixel)

    test_kernel(vec3(*color_sum), samples_per_pixel)
    return result[None].to_numpy().tolist()


class TestSkyColor:
    """Tests for rays that escape an empty scene."""

    @pytest.mark.parametrize(
        "direction",
        [(0.0, 1.0, 0.0), (0.0, -1.0, 0.0), (1.0, 0.0, 0.0), (0.3, 0.4, -2.0)],
    )
    def test_sky_gradient(self, direction):
        """Test the sky blends white to light blue by height."""
        from lumen.core.integrator import trace_ray

        assert list(trace_ray((0.0, 0.0, 0.0), direction, depth=1)) == pytest.approx(
            _sky(direction)
        )

    def test_endpoints(self):
        """Test straight down is white and straight up is light blue."""
        from lumen.core.integrator import trace_ray

        assert trace_ray((0, 0, 0), (0, -1, 0), 1) == pytest.approx((1.0, 1.0, 1.0))
        assert trace_ray((0, 0, 0), (0, 5, 0), 1) == pytest.approx((0.5, 0.7, 1.0))


class TestDepthBudget:
    """Tests for the bounce limit."""

    def test_zero_depth_is_black(self):
        """Test depth 0 returns black even for rays that would see the sky."""
        from lumen.core.integrator import trace_ray

        assert trace_ray((0, 0, 0), (0, 1, 0), 0) == (0.0, 0.0, 0.0)

    def test_exhausted_path_is_black(self, two_sphere_scene):
        """Test a hit with no bounces left contributes nothing."""
        from lumen.core.integrator import trace_ray

        scene, _ = two_sphere_scene
        assert trace_ray((0, 0, 0), (0, 0, -1), 1, scene=scene) == (0.0, 0.0, 0.0)

    def test_miss_unaffected_by_depth(self, two_sphere_scene):
        """Test a ray missing everything sees the sky at any depth."""
        from lumen.core.integrator import trace_ray

        scene, _ = two_sphere_scene
        for depth in (1, 5, 50):
            color = trace_ray((0, 0, 0), (0, 1, 0), depth, scene=scene)
            assert color == pytest.approx((0.5, 0.7, 1.0))


class TestAttenuation:
    """Tests for throughput along scattering paths."""

    def test_mirror_bounce_tints_sky(self):
        """Test one perfect mirror bounce multiplies the sky by the albedo."""
        from lumen.core.integrator import trace_ray
        from lumen.materials.metal import Metal
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene([SphereDescriptor((0, 0, -2), 1.0, Metal((0.8, 0.6, 0.2), 0.0))])
        # Head-on reflection sends the ray back along +z into the sky
        color = trace_ray((0, 0, 0), (0, 0, -1), 2, scene=scene)
        sky = _sky((0.0, 0.0, 1.0))
        assert color == pytest.approx((0.8 * sky[0], 0.6 * sky[1], 0.2 * sky[2]))

    def test_glass_passes_light_unchanged(self):
        """Test a glass sphere viewed head-on keeps the sky's color."""
        from lumen.core.integrator import trace_ray
        from lumen.materials.dielectric import Dielectric
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene([SphereDescriptor((0, 0, -2), 1.0, Dielectric(1.5))])
        color = trace_ray((0, 0, 0), (0, 0, -1), 10, scene=scene)
        # Straight through or straight back, both horizontal
        assert color == pytest.approx(tuple(_sky((0.0, 0.0, 1.0))))

    def test_diffuse_darkens(self, two_sphere_scene):
        """Test bounces off diffuse spheres never brighten the sky."""
        from lumen.core.integrator import trace_ray

        scene, _ = two_sphere_scene
        for _ in range(20):
            color = trace_ray((0, 0, 0), (0, 0, -1), 50, scene=scene)
            assert all(0.0 <= c <= 1.0 for c in color)
            # Every albedo and the sky carry no more red than green
            assert color[0] <= color[1]


class TestWriteColor:
    """Tests for write_color."""

    def test_average_and_gamma(self):
        """Test samples are averaged then square-rooted and scaled."""
        result = _write_color((1.0, 0.25, 0.0), 4)
        assert result == pytest.approx([256.0 * 0.5, 256.0 * 0.25, 0.0])

    def test_clamped_below_256(self):
        """Test bright values clamp to 256 * 0.999."""
        result = _write_color((4.0, 9.0, 1.0), 1)
        assert result == pytest.approx([255.744, 255.744, 255.744])

    def test_single_sample(self):
        """Test a single sample is only gamma corrected."""
        result = _write_color((0.81, 0.0, 0.04), 1)
        assert result == pytest.approx([256.0 * 0.9, 0.0, 256.0 * 0.2])


class TestRenderPixel:
    """Tests for render_pixel."""

    def test_empty_scene_pixel_is_sky(self):
        """Test a pixel of an empty scene is the gamma-corrected sky."""
        from lumen.camera.camera import Camera, setup_camera
        from lumen.core.integrator import render_pixel

        setup_camera(Camera(image_width=100, aspect_ratio=1.0, vfov=1.0))
        color = render_pixel(50, 50, samples_per_pixel=4, max_depth=5)

        # A narrow view straight down -z sees the horizon color
        sky = _sky((0.0, 0.0, -1.0))
        assert color == pytest.approx(tuple(256.0 * math.sqrt(c) for c in sky), rel=1e-3)

    def test_center_pixel_black_at_depth_one(self, two_sphere_scene):
        """Test the center of the two-sphere scene is black with one bounce."""
        from lumen.camera.camera import setup_camera
        from lumen.core.integrator import render_pixel

        scene, camera = two_sphere_scene
        scene.upload()
        setup_camera(camera)
        color = render_pixel(200, 112, samples_per_pixel=8, max_depth=1)
        assert color == (0.0, 0.0, 0.0)

    def test_center_pixel_lit_at_depth_two(self, two_sphere_scene):
        """Test a second bounce lets some light reach the center sphere."""
        from lumen.camera.camera import setup_camera
        from lumen.core.integrator import render_pixel

        scene, camera = two_sphere_scene
        scene.upload()
        setup_camera(camera)
        color = render_pixel(200, 112, samples_per_pixel=16, max_depth=2)
        assert sum(color) > 0.0
        assert all(0.0 <= c < 256.0 for c in color)
