"""CPU Monte Carlo path tracer built on Taichi.

This package renders scenes made of spheres by tracing jittered camera rays
through every pixel and following them as they bounce off surfaces:
- Lambertian (diffuse), metal (fuzzy mirror) and dielectric (glass) materials
- Closest-hit search over an ordered list of spheres
- Per-pixel Monte Carlo averaging with gamma correction
- Plain-text PPM and PNG output

Taichi must be initialized before importing any subpackage, since those
modules declare Taichi fields at import time:

    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from lumen.scene.presets import create_showcase_scene
    >>> from lumen.core.renderer import Renderer

Subpackages:
    core: Vectors, rays, intervals, the path integrator and the render loop
    geometry: The hittable protocol and the sphere primitive
    materials: Lambertian, metal and dielectric scattering
    scene: Scene collection, kernel-side storage and preset scenes
    camera: Camera configuration and jittered ray generation
    preview: Image export and Matplotlib preview
"""

__version__ = "0.1.0"
