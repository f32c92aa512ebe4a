"""Ready-made scenes.

create_showcase_scene() builds the classic demo: a yellow-green ground, a
blue diffuse center sphere, a hollow glass sphere on the left and a polished
gold sphere on the right, seen from above and to the left.

create_two_sphere_scene() builds the minimal ground-plus-sphere scene viewed
from the origin along -z.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.scene.presets import create_showcase_scene
    >>> scene, camera = create_showcase_scene()
    >>> image = camera.render(scene)
"""

from lumen.camera.camera import Camera
from lumen.materials.dielectric import Dielectric
from lumen.materials.lambertian import Lambertian
from lumen.materials.metal import Metal
from lumen.scene.manager import Scene, SphereDescriptor

# =============================================================================
# Materials
# =============================================================================

GROUND = Lambertian(albedo=(0.8, 0.8, 0.0))
CENTER = Lambertian(albedo=(0.1, 0.2, 0.5))
GLASS = Dielectric(refractive_index=1.5)
GOLD = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.0)

# Ground sphere large enough to look flat from the camera
GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0


def create_two_sphere_scene(**camera_overrides) -> tuple[Scene, Camera]:
    """Create a small diffuse sphere resting on a large ground sphere.

    Args:
        **camera_overrides: Camera fields replacing the defaults.

    Returns:
        Tuple of (scene, camera). The camera looks from the origin down -z.
    """
    scene = Scene(
        [
            SphereDescriptor(GROUND_CENTER, GROUND_RADIUS, GROUND),
            SphereDescriptor((0.0, 0.0, -1.0), 0.5, CENTER),
        ]
    )
    return scene, Camera(**camera_overrides)


def create_showcase_scene(**camera_overrides) -> tuple[Scene, Camera]:
    """Create the five-sphere demo scene.

    The left sphere is glass with a negative-radius sphere inside it, which
    turns it into a thin hollow shell.

    Args:
        **camera_overrides: Camera fields replacing the defaults.

    Returns:
        Tuple of (scene, camera).
    """
    scene = Scene(
        [
            SphereDescriptor(GROUND_CENTER, GROUND_RADIUS, GROUND),
            SphereDescriptor((0.0, 0.0, -1.0), 0.5, CENTER),
            SphereDescriptor((-1.0, 0.0, -1.0), 0.5, GLASS),
            SphereDescriptor((-1.0, 0.0, -1.0), -0.4, GLASS),
            SphereDescriptor((1.0, 0.0, -1.0), 0.5, GOLD),
        ]
    )

    camera_settings = {
        "lookfrom": (-2.0, 2.0, 1.0),
        "lookat": (0.0, 0.0, -1.0),
        "vup": (0.0, 1.0, 0.0),
    }
    camera_settings.update(camera_overrides)
    return scene, Camera(**camera_settings)
