"""
Immutable scene model for the Sphere Renderer.

Objects and lights are closed variant sets. Each variant is a small frozen
dataclass sharing a common interface:

    Objects: intersect(ray_origins, ray_directions), surface_normal(hit_points),
             color, albedo
    Lights:  direction_from(points), intensity, color

All parameters are validated at construction so that rendering a Scene never
fails on bad input.
"""
from dataclasses import dataclass, field

import numpy as np

from sphere_renders import constants
from sphere_renders.color import Color
from sphere_renders.intersections import intersect_plane, intersect_sphere


class SceneError(ValueError):
    """Raised when a scene element is constructed with invalid parameters."""


def _as_vector(value, name):
    try:
        vec = np.array(value, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise SceneError(f"{name} must be a 3-vector, got {value!r}") from e
    if vec.shape != (3,):
        raise SceneError(f"{name} must be a 3-vector, got shape {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise SceneError(f"{name} must be finite, got {vec}")
    vec.flags.writeable = False
    return vec


def _as_unit_vector(value, name):
    vec = _as_vector(value, name)
    norm = np.linalg.norm(vec)
    if norm < 1e-12:
        raise SceneError(f"{name} must be non-zero")
    unit = vec / norm
    unit.flags.writeable = False
    return unit


def _as_float(value, name):
    if isinstance(value, bool):
        raise SceneError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SceneError(f"{name} must be a number, got {value!r}") from e


def _as_color(value, name):
    if isinstance(value, Color):
        color = value
    else:
        try:
            color = Color.from_array(value)
        except (TypeError, ValueError) as e:
            raise SceneError(f"{name} must be an RGB triple, got {value!r}") from e
    if not np.all(np.isfinite(color.as_array())):
        raise SceneError(f"{name} must be finite, got {color}")
    return color


def _check_albedo(albedo):
    if not 0.0 <= albedo <= 1.0:
        raise SceneError(f"albedo must be in [0, 1], got {albedo}")


def _check_intensity(intensity):
    if not intensity >= 0.0:
        raise SceneError(f"intensity must be >= 0, got {intensity}")


def _normalize_rows(vectors):
    with np.errstate(divide='ignore', invalid='ignore'):
        return vectors / np.linalg.norm(vectors, axis=-1, keepdims=True)


# --- Objects -----------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Sphere:
    center: np.ndarray
    radius: float
    color: Color
    albedo: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "center", _as_vector(self.center, "center"))
        object.__setattr__(self, "color", _as_color(self.color, "color"))
        object.__setattr__(self, "radius", _as_float(self.radius, "radius"))
        object.__setattr__(self, "albedo", _as_float(self.albedo, "albedo"))
        if not self.radius > 0.0:
            raise SceneError(f"radius must be > 0, got {self.radius}")
        _check_albedo(self.albedo)

    def intersect(self, ray_origins, ray_directions):
        return intersect_sphere(ray_origins, ray_directions, self.center, self.radius)

    def surface_normal(self, hit_points):
        return _normalize_rows(np.asarray(hit_points) - self.center)


@dataclass(frozen=True, eq=False)
class Plane:
    """
    Infinite plane through `center`.

    `normal` points away from the lit side, so rays travelling along it hit
    the plane and the shading normal is its negation.
    """
    center: np.ndarray
    normal: np.ndarray
    color: Color
    albedo: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "center", _as_vector(self.center, "center"))
        object.__setattr__(self, "normal", _as_unit_vector(self.normal, "normal"))
        object.__setattr__(self, "color", _as_color(self.color, "color"))
        object.__setattr__(self, "albedo", _as_float(self.albedo, "albedo"))
        _check_albedo(self.albedo)

    def intersect(self, ray_origins, ray_directions):
        return intersect_plane(ray_origins, ray_directions, self.center, self.normal)

    def surface_normal(self, hit_points):
        hit_points = np.asarray(hit_points)
        return np.broadcast_to(-self.normal, hit_points.shape).copy()


# --- Lights ------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class DirectionalLight:
    """Light at infinity travelling along `direction`."""
    direction: np.ndarray
    color: Color
    intensity: float

    def __post_init__(self):
        object.__setattr__(self, "direction", _as_unit_vector(self.direction, "direction"))
        object.__setattr__(self, "color", _as_color(self.color, "color"))
        object.__setattr__(self, "intensity", _as_float(self.intensity, "intensity"))
        _check_intensity(self.intensity)

    def direction_from(self, points):
        points = np.asarray(points)
        return np.broadcast_to(-self.direction, points.shape).copy()


@dataclass(frozen=True, eq=False)
class SphericalLight:
    """Point light. Intensity does not fall off with distance."""
    position: np.ndarray
    color: Color
    intensity: float

    def __post_init__(self):
        object.__setattr__(self, "position", _as_vector(self.position, "position"))
        object.__setattr__(self, "color", _as_color(self.color, "color"))
        object.__setattr__(self, "intensity", _as_float(self.intensity, "intensity"))
        _check_intensity(self.intensity)

    def direction_from(self, points):
        return _normalize_rows(self.position - np.asarray(points))


@dataclass(frozen=True, eq=False)
class GlobalLight:
    """
    Pseudo-ambient light with no position.

    The direction to the light is the negated, normalized surface point
    itself, measured from the world origin (where the camera sits). Surfaces
    facing the camera are lit; the result depends on where the origin is.
    """
    color: Color
    intensity: float

    def __post_init__(self):
        object.__setattr__(self, "color", _as_color(self.color, "color"))
        object.__setattr__(self, "intensity", _as_float(self.intensity, "intensity"))
        _check_intensity(self.intensity)

    def direction_from(self, points):
        return -_normalize_rows(np.asarray(points, dtype=np.float64))


OBJECT_TYPES = (Sphere, Plane)
LIGHT_TYPES = (DirectionalLight, SphericalLight, GlobalLight)


# --- Scene -------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Scene:
    """
    Read-only snapshot of everything needed to render one frame.

    Attributes:
        width, height: Image size in pixels
        fov: Horizontal-scaled field of view in degrees, in (0, 180)
        objects: Ordered tuple of Sphere/Plane
        lights: Ordered tuple of lights
        skybox: Background color for rays that hit nothing
    """
    width: int = constants.DEFAULT_WIDTH
    height: int = constants.DEFAULT_HEIGHT
    fov: float = constants.DEFAULT_FOV
    objects: tuple = field(default_factory=tuple)
    lights: tuple = field(default_factory=tuple)
    skybox: Color = field(default_factory=Color.black)

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise SceneError(f"{name} must be a positive integer, got {value!r}")
            object.__setattr__(self, name, int(value))
        object.__setattr__(self, "fov", _as_float(self.fov, "fov"))
        if not 0.0 < self.fov < 180.0:
            raise SceneError(f"fov must be in (0, 180) degrees, got {self.fov}")

        objects = tuple(self.objects)
        for obj in objects:
            if not isinstance(obj, OBJECT_TYPES):
                raise SceneError(f"Unsupported object type: {type(obj).__name__}")
        lights = tuple(self.lights)
        for light in lights:
            if not isinstance(light, LIGHT_TYPES):
                raise SceneError(f"Unsupported light type: {type(light).__name__}")

        object.__setattr__(self, "objects", objects)
        object.__setattr__(self, "lights", lights)
        object.__setattr__(self, "skybox", _as_color(self.skybox, "skybox"))

    @property
    def aspect_ratio(self):
        return self.width / self.height
