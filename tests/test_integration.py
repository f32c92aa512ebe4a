"""Integration tests for complete rendering.

Tests cover:
- The two-sphere scene at full width with the depth budget
- The showcase scene with every material kind
- Scene file to image file pipeline
"""

import numpy as np
import pytest


class TestTwoSphereScene:
    """End-to-end renders of the ground-plus-sphere scene."""

    def test_single_bounce_is_black(self, two_sphere_scene):
        """Test one bounce leaves the whole default view black.

        Every primary ray in the narrow default view hits the small sphere.
        Scattering would need a second query, which the depth budget does
        not allow.
        """
        from lumen.camera.camera import Camera

        scene, _ = two_sphere_scene
        camera = Camera(image_width=400, samples_per_pixel=1, max_depth=1)
        image = camera.render(scene)

        assert image.shape == (225, 400, 3)
        assert image[112, 200].tolist() == [0.0, 0.0, 0.0]
        assert not image.any()

    def test_wide_view_sees_sky_at_depth_one(self, two_sphere_scene):
        """Test rays that escape still see the sky with one bounce."""
        from lumen.camera.camera import Camera

        scene, _ = two_sphere_scene
        camera = Camera(image_width=40, samples_per_pixel=1, max_depth=1, vfov=90.0)
        image = camera.render(scene)

        # Top center looks above the small sphere
        assert image[0, 20].tolist() != [0.0, 0.0, 0.0]
        # Center still lands on the small sphere
        assert image[11, 20].tolist() == [0.0, 0.0, 0.0]

    def test_second_bounce_lights_the_sphere(self, two_sphere_scene):
        """Test two bounces give the small sphere a bluish tint."""
        from lumen.camera.camera import Camera

        scene, _ = two_sphere_scene
        camera = Camera(image_width=40, samples_per_pixel=16, max_depth=2)
        image = camera.render(scene)

        center = image[9:13, 18:22].reshape(-1, 3).mean(axis=0)
        assert center.sum() > 0.0
        assert center[2] > center[0]


class TestShowcaseScene:
    """End-to-end render of the five-sphere demo scene."""

    def test_small_render(self):
        """Test a low-resolution render is finite and lit."""
        from lumen.scene.presets import create_showcase_scene

        scene, camera = create_showcase_scene(image_width=48, samples_per_pixel=4, max_depth=10)
        image = camera.render(scene)

        assert image.shape == (27, 48, 3)
        assert np.isfinite(image).all()
        assert (image >= 0.0).all()
        assert (image < 256.0).all()
        assert image.mean() > 50.0

    def test_renders_differ_only_by_noise(self):
        """Test two renders agree in layout while their noise differs."""
        from lumen.scene.presets import create_showcase_scene

        scene, camera = create_showcase_scene(image_width=32, samples_per_pixel=2, max_depth=5)
        first = camera.render(scene)
        second = camera.render(scene)

        assert first.shape == second.shape
        assert not np.array_equal(first, second)
        assert abs(first.mean() - second.mean()) < 20.0


class TestFilePipeline:
    """Scene file in, image file out."""

    def test_scene_file_to_ppm(self, tmp_path):
        """Test a saved scene renders to a readable PPM."""
        from lumen.preview.export import read_ppm_header, save_image
        from lumen.scene.manager import load_scene_file, save_scene_file
        from lumen.scene.presets import create_showcase_scene

        scene, camera = create_showcase_scene(image_width=20, samples_per_pixel=1, max_depth=3)
        scene_path = tmp_path / "showcase.json"
        save_scene_file(scene_path, scene, camera)

        loaded_scene, loaded_camera = load_scene_file(scene_path)
        image = loaded_camera.render(loaded_scene)
        output = save_image(image, tmp_path / "showcase.ppm")

        assert read_ppm_header(output) == (20, 11, 255)
        assert len(output.read_text().splitlines()) == 3 + 20 * 11

    @pytest.mark.parametrize("depth", [0, 1])
    def test_shallow_depth_pipeline(self, tmp_path, two_sphere_scene, depth):
        """Test black renders still export well-formed files."""
        from lumen.camera.camera import Camera
        from lumen.preview.export import read_ppm_header, save_image

        scene, _ = two_sphere_scene
        image = Camera(image_width=16, samples_per_pixel=1, max_depth=depth).render(scene)
        output = save_image(image, tmp_path / "black.ppm")

        assert read_ppm_header(output) == (16, 9, 255)
        assert set(output.read_text().splitlines()[3:]) == {"0 0 0"}
