"""Pytest configuration for rayt tests.

Provides shared fixtures for all test modules, including Taichi
initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, material and render-target state around each test."""
    # Import here so that Taichi is initialized before fields are allocated
    from rayt.core.integrator import clear_render_target
    from rayt.materials.registry import clear_materials
    from rayt.scene.intersection import clear_scene
    from rayt.scene.scene import reset_active_scene

    def _clear_all():
        clear_scene()
        clear_materials()
        clear_render_target()
        reset_active_scene()

    _clear_all()
    yield
    _clear_all()
