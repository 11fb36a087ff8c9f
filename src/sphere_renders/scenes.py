"""
Scene construction helpers: the built-in reference scene and JSON scene files.

Scene file format::

    {
        "width": 500, "height": 500, "fov": 90.0,
        "skybox": [0.2, 0.2, 0.95],
        "objects": [
            {"type": "sphere", "center": [0, 0, -5], "radius": 1.0,
             "color": [0.4, 1.0, 0.4], "albedo": 1.0},
            {"type": "plane", "center": [0, -2, 0], "normal": [0, -1, 0],
             "color": [0.5, 0.5, 0.5], "albedo": 0.5}
        ],
        "lights": [
            {"type": "directional", "direction": [0, -1, -1], "color": [1, 1, 1], "intensity": 3.0},
            {"type": "spherical", "position": [0, 3, -5], "color": [1, 1, 1], "intensity": 2.0},
            {"type": "global", "color": [1, 1, 1], "intensity": 5.0}
        ]
    }
"""
import json
import logging

from sphere_renders import constants
from sphere_renders.color import Color
from sphere_renders.scene import (
    DirectionalLight, GlobalLight, Plane, Scene, SceneError, Sphere, SphericalLight,
)

logger = logging.getLogger(__name__)


def default_scene(width=constants.DEFAULT_WIDTH, height=constants.DEFAULT_HEIGHT,
                  fov=constants.DEFAULT_FOV):
    """Three spheres under a blue sky, lit by a global light."""
    return Scene(
        width=width,
        height=height,
        fov=fov,
        skybox=Color(*constants.SKY_BLUE),
        objects=(
            Sphere(center=[-1.0, 0.0, -5.0], radius=1.0, color=Color(0.4, 1.0, 0.4), albedo=1.0),
            Sphere(center=[-3.0, -1.0, -5.0], radius=1.0, color=Color(1.0, 0.4, 0.5), albedo=0.5),
            Sphere(center=[1.0, -1.0, -7.0], radius=2.0, color=Color.white(), albedo=1.0),
        ),
        lights=(
            SphericalLight(position=[0.0, -3.0, -5.0], color=Color(1.0, 0.1, 0.1), intensity=0.0),
            DirectionalLight(direction=[0.3, -3.0, -1.0], color=Color.white(), intensity=0.0),
            GlobalLight(color=Color.white(), intensity=5.0),
        ),
    )


def _require(data, key, kind):
    try:
        return data[key]
    except KeyError:
        raise SceneError(f"{kind} is missing required field '{key}'") from None


def _object_from_dict(data):
    if not isinstance(data, dict):
        raise SceneError(f"Object entry must be an object, got {data!r}")
    kind = data.get("type", "sphere")
    if kind == "sphere":
        return Sphere(
            center=_require(data, "center", kind),
            radius=_require(data, "radius", kind),
            color=_require(data, "color", kind),
            albedo=data.get("albedo", 1.0),
        )
    if kind == "plane":
        return Plane(
            center=_require(data, "center", kind),
            normal=_require(data, "normal", kind),
            color=_require(data, "color", kind),
            albedo=data.get("albedo", 1.0),
        )
    raise SceneError(f"Unknown object type: {kind!r}")


def _light_from_dict(data):
    if not isinstance(data, dict):
        raise SceneError(f"Light entry must be an object, got {data!r}")
    kind = _require(data, "type", "light")
    color = data.get("color", constants.WHITE)
    intensity = _require(data, "intensity", kind)
    if kind == "directional":
        return DirectionalLight(direction=_require(data, "direction", kind), color=color, intensity=intensity)
    if kind == "spherical":
        return SphericalLight(position=_require(data, "position", kind), color=color, intensity=intensity)
    if kind == "global":
        return GlobalLight(color=color, intensity=intensity)
    raise SceneError(f"Unknown light type: {kind!r}")


def scene_from_dict(data, width=None, height=None, fov=None):
    """
    Build and validate a Scene from plain data.

    Explicit width/height/fov arguments override the values in `data`.
    """
    if not isinstance(data, dict):
        raise SceneError(f"Scene description must be an object, got {type(data).__name__}")
    for key in ("objects", "lights"):
        if not isinstance(data.get(key, []), list):
            raise SceneError(f"'{key}' must be a list, got {type(data[key]).__name__}")
    return Scene(
        width=width if width is not None else data.get("width", constants.DEFAULT_WIDTH),
        height=height if height is not None else data.get("height", constants.DEFAULT_HEIGHT),
        fov=fov if fov is not None else data.get("fov", constants.DEFAULT_FOV),
        skybox=data.get("skybox", constants.BLACK),
        objects=tuple(_object_from_dict(o) for o in data.get("objects", [])),
        lights=tuple(_light_from_dict(l) for l in data.get("lights", [])),
    )


def _color_list(color):
    return [color.red, color.green, color.blue]


def scene_to_dict(scene):
    """Inverse of scene_from_dict."""
    objects = []
    for obj in scene.objects:
        if isinstance(obj, Sphere):
            objects.append({"type": "sphere", "center": obj.center.tolist(), "radius": obj.radius,
                            "color": _color_list(obj.color), "albedo": obj.albedo})
        else:
            objects.append({"type": "plane", "center": obj.center.tolist(), "normal": obj.normal.tolist(),
                            "color": _color_list(obj.color), "albedo": obj.albedo})

    lights = []
    for light in scene.lights:
        entry = {"color": _color_list(light.color), "intensity": light.intensity}
        if isinstance(light, DirectionalLight):
            entry.update(type="directional", direction=light.direction.tolist())
        elif isinstance(light, SphericalLight):
            entry.update(type="spherical", position=light.position.tolist())
        else:
            entry.update(type="global")
        lights.append(entry)

    return {
        "width": scene.width,
        "height": scene.height,
        "fov": scene.fov,
        "skybox": _color_list(scene.skybox),
        "objects": objects,
        "lights": lights,
    }


def load_scene(path, **overrides):
    """Read a JSON scene file. Raises SceneError on malformed content."""
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SceneError(f"{path}: not a UTF-8 JSON document ({e})") from e
    scene = scene_from_dict(data, **overrides)
    logger.info("Loaded scene %s: %d objects, %d lights", path, len(scene.objects), len(scene.lights))
    return scene


def save_scene(scene, path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=2)
