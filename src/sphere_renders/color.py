"""
Linear-light color model and gamma transfer for the Sphere Renderer.

Colors are kept in linear space and are never clamped by arithmetic. Clamping
to [0, 1] happens only when a color is converted to a displayable pixel.
"""
from dataclasses import dataclass

import numpy as np

from sphere_renders import constants


def gamma_encode(linear):
    """Linear light -> display value. Works on floats and arrays."""
    return np.power(linear, 1.0 / constants.GAMMA)


def gamma_decode(encoded):
    """Display value -> linear light. Works on floats and arrays."""
    return np.power(encoded, constants.GAMMA)


def encode_pixels(colors):
    """
    Convert linear colors to 8-bit RGBA pixels.

    Args:
        colors: (..., 3) array of linear RGB values (any range)

    Returns:
        (..., 4) uint8 array with alpha fully opaque
    """
    colors = np.asarray(colors, dtype=np.float64)
    clamped = np.clip(colors, 0.0, 1.0)
    rgb = np.rint(gamma_encode(clamped) * 255.0).astype(np.uint8)
    alpha = np.full(rgb.shape[:-1] + (1,), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


@dataclass(frozen=True)
class Color:
    """
    An RGB triple in linear light.

    Attributes:
        red, green, blue: Unbounded channel values
    """
    red: float
    green: float
    blue: float

    @classmethod
    def black(cls):
        return cls(*constants.BLACK)

    @classmethod
    def white(cls):
        return cls(*constants.WHITE)

    @classmethod
    def from_array(cls, values):
        r, g, b = (float(v) for v in values)
        return cls(r, g, b)

    @classmethod
    def from_rgba(cls, rgba):
        """Decode an 8-bit RGBA (or RGB) pixel back to linear light."""
        r, g, b = (float(gamma_decode(c / 255.0)) for c in tuple(rgba)[:3])
        return cls(r, g, b)

    def as_array(self) -> np.ndarray:
        return np.array([self.red, self.green, self.blue], dtype=np.float64)

    def add(self, other: "Color") -> "Color":
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def multiply(self, other: "Color") -> "Color":
        """Component-wise product (filtering one color by another)."""
        return Color(self.red * other.red, self.green * other.green, self.blue * other.blue)

    def scale(self, factor: float) -> "Color":
        return Color(self.red * factor, self.green * factor, self.blue * factor)

    def clamp(self) -> "Color":
        return Color.from_array(np.clip(self.as_array(), 0.0, 1.0))

    def to_rgba(self) -> tuple[int, int, int, int]:
        """Clamp, gamma-encode and quantize to an opaque 8-bit pixel."""
        r, g, b, a = encode_pixels(self.as_array())
        return int(r), int(g), int(b), int(a)
