"""
Camera ray generation.

The camera sits at the world origin looking down -z with +y up. Image row 0
is the top of the frame.
"""
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class Ray:
    origin: np.ndarray
    direction: np.ndarray


def _sensor_scale(scene):
    return np.tan(np.deg2rad(scene.fov) / 2.0)


def create_prime(x, y, scene) -> Ray:
    """Primary ray through the center of pixel (x, y)."""
    fov_adjustment = _sensor_scale(scene)
    sensor_x = (((x + 0.5) / scene.width) * 2.0 - 1.0) * scene.aspect_ratio * fov_adjustment
    sensor_y = (1.0 - ((y + 0.5) / scene.height) * 2.0) * fov_adjustment

    direction = np.array([sensor_x, sensor_y, -1.0])
    return Ray(origin=np.zeros(3), direction=direction / np.linalg.norm(direction))


def prime_directions(scene, row_start=0, row_stop=None):
    """
    Vectorized primary ray directions for a band of image rows.

    Args:
        scene: Scene providing width, height and fov
        row_start: First image row (inclusive)
        row_stop: Last image row (exclusive), defaults to scene.height

    Returns:
        (rows * width, 3) array of unit directions in row-major pixel order
    """
    if row_stop is None:
        row_stop = scene.height

    fov_adjustment = _sensor_scale(scene)
    xs = np.arange(scene.width, dtype=np.float64)
    ys = np.arange(row_start, row_stop, dtype=np.float64)

    sensor_x = (((xs + 0.5) / scene.width) * 2.0 - 1.0) * scene.aspect_ratio * fov_adjustment
    sensor_y = (1.0 - ((ys + 0.5) / scene.height) * 2.0) * fov_adjustment
    px, py = np.meshgrid(sensor_x, sensor_y)

    dirs = np.stack([px, py, -np.ones_like(px)], axis=-1).reshape(-1, 3)
    return dirs / np.linalg.norm(dirs, axis=1, keepdims=True)
