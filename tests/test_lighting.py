import numpy as np
import pytest
from conftest import GREEN, assert_color_close
from sphere_renders.color import Color
from sphere_renders.core import Renderer
from sphere_renders.rendering import HitResult, HitSelector, LightingModel
from sphere_renders.scene import (
    DirectionalLight, GlobalLight, Plane, Scene, Sphere, SphericalLight,
)

TARGET = Sphere(center=[0.0, 0.0, -5.0], radius=1.0, color=Color.white(), albedo=1.0)


def _color_along_axis(objects, lights, skybox=None):
    scene = Scene(objects=objects, lights=lights, skybox=skybox or Color.black())
    return Renderer(scene).get_color(np.zeros(3), np.array([0.0, 0.0, -1.0]))


def test_light_directions():
    point = np.array([[0.0, 0.0, -4.0]])

    directional = DirectionalLight(direction=[0.0, 0.0, -2.0], color=Color.white(), intensity=1.0)
    np.testing.assert_allclose(directional.direction_from(point), [[0.0, 0.0, 1.0]])

    spherical = SphericalLight(position=[0.0, 3.0, -4.0], color=Color.white(), intensity=1.0)
    np.testing.assert_allclose(spherical.direction_from(point), [[0.0, 1.0, 0.0]])

    # Negated normalized point relative to the world origin
    ambient = GlobalLight(color=Color.white(), intensity=1.0)
    np.testing.assert_allclose(ambient.direction_from(np.array([[3.0, 0.0, -4.0]])), [[-0.6, 0.0, 0.8]])


def test_directional_light_lambert():
    sphere = Sphere(center=[0.0, 0.0, -5.0], radius=1.0, color=GREEN, albedo=0.5)
    light = DirectionalLight(direction=[0.0, 0.0, -1.0], color=Color.white(), intensity=2.0)

    color = _color_along_axis((sphere,), (light,))
    expected = GREEN.as_array() * 2.0 * 0.5 / np.pi
    assert_color_close(color, expected)


def test_light_from_behind_contributes_nothing():
    light = DirectionalLight(direction=[0.0, 0.0, 1.0], color=Color.white(), intensity=10.0)
    color = _color_along_axis((TARGET,), (light,))
    assert_color_close(color, [0.0, 0.0, 0.0])


def test_occluded_light_contributes_zero():
    light = SphericalLight(position=[0.0, 5.0, 0.0], color=Color.white(), intensity=1.0)
    cos_term = 4.0 / np.sqrt(41.0)

    lit = _color_along_axis((TARGET,), (light,))
    assert_color_close(lit, np.full(3, cos_term / np.pi))

    # Sits on the segment between the hit point (0, 0, -4) and the light, off the camera axis
    occluder = Sphere(center=[0.0, 2.5, -2.0], radius=0.5, color=Color.white())
    shadowed = _color_along_axis((TARGET, occluder), (light,))
    assert_color_close(shadowed, [0.0, 0.0, 0.0], atol=0.0)


def test_only_occluded_light_is_dropped():
    blocked = SphericalLight(position=[0.0, 5.0, 0.0], color=Color(1.0, 0.0, 0.0), intensity=1.0)
    open_light = DirectionalLight(direction=[0.0, 0.0, -1.0], color=Color(0.0, 0.0, 1.0), intensity=1.0)
    occluder = Sphere(center=[0.0, 2.5, -2.0], radius=0.5, color=Color.white())

    color = _color_along_axis((TARGET, occluder), (blocked, open_light))
    assert_color_close(color, [0.0, 0.0, 1.0 / np.pi])


def test_lights_accumulate_before_albedo_scaling():
    sphere = Sphere(center=[0.0, 0.0, -5.0], radius=1.0, color=Color.white(), albedo=0.25)
    lights = (
        DirectionalLight(direction=[0.0, 0.0, -1.0], color=Color.white(), intensity=1.5),
        GlobalLight(color=Color(1.0, 0.5, 0.0), intensity=2.0),
    )
    color = _color_along_axis((sphere,), lights)
    expected = (np.array([1.5, 1.5, 1.5]) + np.array([2.0, 1.0, 0.0])) * 0.25 / np.pi
    assert_color_close(color, expected)


def test_unbounded_linear_color():
    light = GlobalLight(color=Color.white(), intensity=100.0)
    color = _color_along_axis((TARGET,), (light,))
    assert np.all(color > 1.0), "Linear colors are only clamped at pixel conversion."


def test_miss_returns_skybox():
    sky = Color(0.2, 0.2, 0.95)
    scene = Scene(objects=(TARGET,), lights=(GlobalLight(color=Color.white(), intensity=5.0),), skybox=sky)
    color = Renderer(scene).get_color(np.zeros(3), np.array([0.0, 1.0, 0.0]))
    assert_color_close(color, sky, atol=0.0)


def test_hit_without_lights_is_black():
    color = _color_along_axis((TARGET,), (), skybox=Color.white())
    assert_color_close(color, [0.0, 0.0, 0.0], atol=0.0)


def test_plane_shading_and_shadow():
    floor = Plane(center=[0.0, -1.0, 0.0], normal=[0.0, -1.0, 0.0], color=Color(0.5, 0.5, 0.5), albedo=1.0)
    sun = DirectionalLight(direction=[0.0, -1.0, 0.0], color=Color.white(), intensity=1.0)
    scene = Scene(objects=(floor,), lights=(sun,))
    selector = HitSelector(scene)
    lighting = LightingModel(scene, selector)

    hits = HitResult(
        distance=np.array([1.0]),
        object_index=np.array([0]),
        hit_point=np.array([[0.0, -1.0, -3.0]]),
    )
    assert_color_close(lighting.get_surface_color(hits)[0], np.full(3, 0.5 / np.pi))

    # A sphere resting above the floor blocks the overhead light
    shaded_scene = Scene(objects=(floor, Sphere(center=[0.0, 1.0, -3.0], radius=0.5, color=Color.white())),
                         lights=(sun,))
    shaded = LightingModel(shaded_scene, HitSelector(shaded_scene)).get_surface_color(hits)
    assert_color_close(shaded[0], [0.0, 0.0, 0.0], atol=0.0)


def test_global_light_pseudo_ambient(renderer):
    """Surfaces facing the world origin receive the full global light."""
    color = renderer.cast_ray(400, 300)
    # Center pixel hits (nearly) head-on: cos ~= 1
    assert color.green == pytest.approx(5.0 / np.pi, rel=1e-3)
    assert color.red == pytest.approx(0.4 * 5.0 / np.pi, rel=1e-3)


def test_global_light_hit_at_world_origin():
    """A hit exactly at the origin has no global light direction and stays black."""
    sphere = Sphere(center=[0.0, 0.0, -1.0], radius=1.0, color=Color.white(), albedo=1.0)
    scene = Scene(objects=(sphere,), lights=(GlobalLight(color=Color.white(), intensity=5.0),))

    color = Renderer(scene).get_color(np.zeros(3), np.array([0.0, 0.0, -1.0]))

    assert np.all(np.isfinite(color))
    np.testing.assert_array_equal(color, [0.0, 0.0, 0.0])
