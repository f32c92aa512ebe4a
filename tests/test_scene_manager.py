"""Unit tests for the Scene collection.

Tests cover:
- SphereDescriptor validation
- Adding, iterating and clearing scenes
- Uploading to kernel-side storage with shared materials
- Host-side hit queries
- Scene serialization (to_dict, from_dict, JSON files)
"""

import json

import pytest


@pytest.fixture
def materials():
    """One material of each kind."""
    from lumen.materials.dielectric import Dielectric
    from lumen.materials.lambertian import Lambertian
    from lumen.materials.metal import Metal

    return {
        "diffuse": Lambertian((0.1, 0.2, 0.5)),
        "gold": Metal((0.8, 0.6, 0.2), 0.0),
        "glass": Dielectric(1.5),
    }


class TestSphereDescriptor:
    """Tests for SphereDescriptor validation."""

    def test_coerces_values(self, materials):
        """Test center and radius are stored as floats."""
        from lumen.scene.manager import SphereDescriptor

        sphere = SphereDescriptor([0, 1, -2], 1, materials["diffuse"])
        assert sphere.center == (0.0, 1.0, -2.0)
        assert isinstance(sphere.radius, float)

    def test_negative_radius_allowed(self, materials):
        """Test hollow shells use negative radii."""
        from lumen.scene.manager import SphereDescriptor

        assert SphereDescriptor((0, 0, 0), -0.4, materials["glass"]).radius == -0.4

    def test_zero_radius_rejected(self, materials):
        """Test a degenerate sphere raises ValueError."""
        from lumen.scene.manager import SphereDescriptor

        with pytest.raises(ValueError):
            SphereDescriptor((0, 0, 0), 0.0, materials["diffuse"])

    def test_bad_center_rejected(self, materials):
        """Test a center without 3 components raises ValueError."""
        from lumen.scene.manager import SphereDescriptor

        with pytest.raises(ValueError):
            SphereDescriptor((0, 0), 1.0, materials["diffuse"])

    def test_bad_material_rejected(self):
        """Test a non-material raises ValueError."""
        from lumen.scene.manager import SphereDescriptor

        with pytest.raises(ValueError):
            SphereDescriptor((0, 0, 0), 1.0, "glass")


class TestSceneCollection:
    """Tests for building scenes on the host."""

    def test_add_and_iterate(self, materials):
        """Test spheres keep insertion order."""
        from lumen.scene.manager import Scene, SphereDescriptor

        a = SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"])
        b = SphereDescriptor((1, 0, -1), 0.5, materials["gold"])
        scene = Scene([a])
        scene.add(b)

        assert len(scene) == 2
        assert list(scene) == [a, b]
        assert repr(scene) == "Scene(2 spheres)"

    def test_clear(self, materials):
        """Test clear empties the scene."""
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene([SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"])])
        scene.clear()
        assert len(scene) == 0

    def test_distinct_materials(self, materials):
        """Test equal material values are listed once, in first-use order."""
        from lumen.materials.dielectric import Dielectric
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene(
            [
                SphereDescriptor((-1, 0, -1), 0.5, Dielectric(1.5)),
                SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"]),
                SphereDescriptor((-1, 0, -1), -0.4, Dielectric(1.5)),
            ]
        )
        assert scene.materials == [Dielectric(1.5), materials["diffuse"]]

    def test_capacity(self, materials, monkeypatch):
        """Test adding past the sphere capacity raises RuntimeError."""
        import lumen.scene.manager as manager

        monkeypatch.setattr(manager, "MAX_SPHERES", 2)
        scene = manager.Scene()
        sphere = manager.SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"])
        scene.add(sphere)
        scene.add(sphere)
        with pytest.raises(RuntimeError):
            scene.add(sphere)


class TestSceneUpload:
    """Tests for copying scenes into kernel-side storage."""

    def test_upload_counts(self, materials):
        """Test shared materials occupy one table row."""
        from lumen.materials.material import get_material_count
        from lumen.scene.intersection import get_owner, get_sphere_count
        from lumen.scene.presets import create_showcase_scene

        scene, _ = create_showcase_scene()
        scene.upload()

        assert get_sphere_count() == 5
        # Ground, center, glass (shared by two spheres) and gold
        assert get_material_count() == 4
        assert get_owner() is scene

    def test_upload_skipped_when_synced(self, materials, monkeypatch):
        """Test a second upload of an unchanged scene does nothing."""
        import lumen.scene.manager as manager

        scene = manager.Scene([manager.SphereDescriptor((0, 0, -1), 0.5, materials["gold"])])
        scene.upload()

        calls = []
        monkeypatch.setattr(manager, "add_sphere", lambda *args: calls.append(args))
        scene.upload()
        assert calls == []

    def test_upload_after_change(self, materials):
        """Test modifying a scene makes the next upload refresh storage."""
        from lumen.scene.intersection import get_sphere_count
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene([SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"])])
        scene.upload()
        scene.add(SphereDescriptor((1, 0, -1), 0.5, materials["gold"]))
        scene.upload()
        assert get_sphere_count() == 2

    def test_other_scene_takes_over(self, materials):
        """Test uploading a second scene replaces the first one's spheres."""
        from lumen.scene.intersection import get_owner, get_sphere_count
        from lumen.scene.manager import Scene, SphereDescriptor

        first = Scene([SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"])])
        second = Scene(
            [
                SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"]),
                SphereDescriptor((1, 0, -1), 0.5, materials["gold"]),
            ]
        )
        first.upload()
        second.upload()
        assert get_sphere_count() == 2
        first.upload()
        assert get_sphere_count() == 1
        assert get_owner() is first


class TestSceneHit:
    """Tests for Scene.hit."""

    def test_hit_reports_material(self, materials):
        """Test the hit carries the material id of the sphere hit."""
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene(
            [
                SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"]),
                SphereDescriptor((0, 0, -3), 0.5, materials["gold"]),
            ]
        )
        near = scene.hit((0, 0, 0), (0, 0, -1))
        far = scene.hit((0, 0, -2), (0, 0, -1), t_min=0.1)

        assert near.t == pytest.approx(0.5)
        assert near.material_id == 0
        assert far.t == pytest.approx(0.5)
        assert far.material_id == 1

    def test_miss_returns_none(self, materials):
        """Test a ray that misses everything returns None."""
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene([SphereDescriptor((0, 0, -1), 0.5, materials["diffuse"])])
        assert scene.hit((0, 0, 0), (0, 1, 0)) is None

    def test_empty_scene(self):
        """Test an empty scene never hits."""
        from lumen.scene.manager import Scene

        assert Scene().hit((0, 0, 0), (0, 0, -1)) is None


class TestSceneSerialization:
    """Tests for dictionary and JSON round trips."""

    def test_to_dict(self, materials):
        """Test the exported layout."""
        from lumen.scene.manager import Scene, SphereDescriptor

        scene = Scene([SphereDescriptor((0, 0, -1), 0.5, materials["gold"])])
        assert scene.to_dict() == {
            "spheres": [
                {
                    "center": [0.0, 0.0, -1.0],
                    "radius": 0.5,
                    "material": {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.0},
                }
            ]
        }

    def test_showcase_round_trip(self):
        """Test from_dict(to_dict()) rebuilds the same spheres."""
        from lumen.scene.manager import Scene
        from lumen.scene.presets import create_showcase_scene

        scene, _ = create_showcase_scene()
        rebuilt = Scene.from_dict(scene.to_dict())
        assert list(rebuilt) == list(scene)

    def test_material_defaults(self):
        """Test omitted material parameters fall back to defaults."""
        from lumen.materials.dielectric import Dielectric
        from lumen.materials.metal import Metal
        from lumen.scene.manager import material_from_dict

        assert material_from_dict({"type": "Dielectric"}) == Dielectric(1.5)
        assert material_from_dict({"type": "metal", "albedo": [0.8, 0.6, 0.2]}).fuzz == 0.0
        assert isinstance(material_from_dict({"type": "metal"}), Metal)

    def test_unknown_material_type(self):
        """Test an unknown material type raises ValueError."""
        from lumen.scene.manager import material_from_dict

        with pytest.raises(ValueError, match="Unknown material type"):
            material_from_dict({"type": "phosphorescent"})

    def test_invalid_material_parameters(self):
        """Test invalid material values surface as ValueError."""
        from lumen.scene.manager import material_from_dict

        with pytest.raises(ValueError):
            material_from_dict({"type": "metal", "fuzz": 2.0})

    def test_missing_sphere_key(self):
        """Test a sphere entry without a radius raises ValueError."""
        from lumen.scene.manager import Scene

        data = {"spheres": [{"center": [0, 0, -1], "material": {"type": "lambertian"}}]}
        with pytest.raises(ValueError, match="radius"):
            Scene.from_dict(data)

    def test_save_and_load_file(self, tmp_path):
        """Test a scene and camera survive a JSON file round trip."""
        from lumen.scene.manager import load_scene_file, save_scene_file
        from lumen.scene.presets import create_showcase_scene

        scene, camera = create_showcase_scene(image_width=64, samples_per_pixel=4)
        path = tmp_path / "scene.json"
        save_scene_file(path, scene, camera)

        loaded_scene, loaded_camera = load_scene_file(path)
        assert list(loaded_scene) == list(scene)
        assert loaded_camera == camera
        assert list(json.loads(path.read_text())) == ["camera", "spheres"]

    def test_load_without_camera(self, tmp_path, materials):
        """Test a file with no camera block yields camera None."""
        from lumen.scene.manager import Scene, SphereDescriptor, load_scene_file, save_scene_file

        path = tmp_path / "scene.json"
        save_scene_file(path, Scene([SphereDescriptor((0, 0, -1), 0.5, materials["glass"])]))

        scene, camera = load_scene_file(path)
        assert len(scene) == 1
        assert camera is None

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    def test_load_invalid_file(self, tmp_path, content):
        """Test malformed files raise ValueError."""
        from lumen.scene.manager import load_scene_file

        path = tmp_path / "scene.json"
        path.write_text(content)
        with pytest.raises(ValueError):
            load_scene_file(path)
