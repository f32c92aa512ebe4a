"""Pytest configuration for lumen tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the fields declared by lumen modules at import time.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear kernel-side spheres and materials around each test."""
    # Import here so Taichi is initialized first
    from lumen.scene.manager import clear_storage

    clear_storage()
    yield
    clear_storage()


@pytest.fixture
def two_sphere_scene():
    """The ground-plus-sphere scene and its default camera."""
    from lumen.scene.presets import create_two_sphere_scene

    return create_two_sphere_scene()
