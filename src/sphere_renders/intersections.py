"""
Ray-geometry intersection calculations for the Sphere renderer.

All solvers are vectorized: ray origins may be a single (3,) point shared by
every ray or an (N, 3) array, and directions are (N, 3) unit vectors (or a
single (3,) direction). Misses are reported as inf.
"""
import numpy as np
from sphere_renders import constants


def _dot(a, b):
    return np.sum(a * b, axis=-1)


def intersect_sphere(ray_origins, ray_directions, center, radius):
    """
    Vectorized intersection solver for ray and sphere.

    Only the near root is returned. A ray starting inside the sphere has a
    negative near root and is reported as a miss.

    Args:
        ray_origins: (3,) or (N, 3) ray origins
        ray_directions: (3,) or (N, 3) unit ray directions
        center: (3,) sphere center
        radius: Sphere radius

    Returns:
        Array of intersection distances (inf where no intersection)
    """
    is_single = ray_directions.ndim == 1
    if is_single:
        ray_directions = ray_directions[None, :]

    ray_origins = np.asarray(ray_origins, dtype=np.float64)
    r_sq = radius * radius

    # Closest approach of the ray line to the center
    to_center = center - ray_origins
    adjacent = _dot(to_center, ray_directions)
    perp_sq = _dot(to_center, to_center) - adjacent**2

    diff = ray_origins - center
    root_term = _dot(ray_directions, diff)
    with np.errstate(invalid='ignore'):
        disc_root = np.sqrt(root_term**2 + r_sq - _dot(diff, diff))
    t_near = -root_term - disc_root

    # NaN fails both comparisons and ends up a miss
    hit_mask = ~(perp_sq > r_sq) & (t_near >= 0.0)
    t = np.where(hit_mask, t_near, np.inf)

    return t[0] if is_single else t


def intersect_plane(ray_origins, ray_directions, center, normal):
    """
    Vectorized intersection solver for ray and one-sided infinite plane.

    Args:
        ray_origins: (3,) or (N, 3) ray origins
        ray_directions: (3,) or (N, 3) unit ray directions
        center: (3,) any point on the plane
        normal: (3,) unit normal pointing away from the lit side

    Returns:
        Array of intersection distances (inf where no intersection)
    """
    is_single = ray_directions.ndim == 1
    if is_single:
        ray_directions = ray_directions[None, :]

    ray_origins = np.asarray(ray_origins, dtype=np.float64)

    denom = _dot(ray_directions, normal)
    facing = denom > constants.PLANE_EPSILON

    t = np.full(ray_directions.shape[0], np.inf)
    if np.any(facing):
        offset = _dot(center - ray_origins, normal)
        offset = np.broadcast_to(offset, denom.shape)
        t_cand = offset[facing] / denom[facing]
        t_facing = np.full(t_cand.shape, np.inf)
        m = t_cand >= 0.0
        t_facing[m] = t_cand[m]
        t[facing] = t_facing

    return t[0] if is_single else t
