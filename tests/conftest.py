"""
Pytest fixtures and configuration for Sphere Renderer tests.
"""

import numpy as np
import pytest
from sphere_renders.color import Color
from sphere_renders.core import Renderer
from sphere_renders.scene import GlobalLight, Scene, Sphere


GREEN = Color(0.4, 1.0, 0.4)


def make_reference_scene(intensity=5.0, width=800, height=600, skybox=None):
    """One green sphere straight ahead of the camera under a global light."""
    return Scene(
        width=width,
        height=height,
        fov=90.0,
        skybox=skybox if skybox is not None else Color.black(),
        objects=(Sphere(center=[0.0, 0.0, -5.0], radius=1.0, color=GREEN, albedo=1.0),),
        lights=(GlobalLight(color=Color.white(), intensity=intensity),),
    )


@pytest.fixture
def origin():
    """Camera position."""
    return np.array([0.0, 0.0, 0.0])


@pytest.fixture
def forward():
    """Straight down the viewing axis."""
    return np.array([0.0, 0.0, -1.0])


@pytest.fixture
def reference_scene():
    return make_reference_scene()


@pytest.fixture
def small_scene():
    """Reduced-size reference scene for full-frame renders."""
    return make_reference_scene(width=40, height=30)


@pytest.fixture
def renderer(reference_scene):
    return Renderer(reference_scene)


def assert_color_close(actual, expected, rtol=1e-6, atol=1e-6, err_msg=""):
    """Assert that two colors are close, with helpful error messages."""
    if isinstance(actual, Color):
        actual = actual.as_array()
    if isinstance(expected, Color):
        expected = expected.as_array()
    np.testing.assert_allclose(
        actual, expected, rtol=rtol, atol=atol,
        err_msg=f"Color mismatch: {err_msg}"
    )
