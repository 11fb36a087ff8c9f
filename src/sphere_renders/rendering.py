"""
Data structures and interfaces for the Sphere rendering pipeline.
"""
import functools
from dataclasses import dataclass

import numpy as np

from sphere_renders import constants


class IncomparableDistanceError(ArithmeticError):
    """Raised when intersection distances cannot be ordered (NaN)."""


@dataclass(frozen=True)
class Intersection:
    """
    Nearest hit of a single ray.

    Attributes:
        object_index: Index of the hit object in scene.objects
        distance: Distance along the ray to the hit point
    """
    object_index: int
    distance: float

    def compare_by_distance(self, other: "Intersection") -> int:
        """Three-way comparison on distance. NaN is an error, never a tie."""
        if np.isnan(self.distance) or np.isnan(other.distance):
            raise IncomparableDistanceError(
                f"Cannot order intersection distances {self.distance} and {other.distance}")
        if self.distance < other.distance:
            return -1
        if self.distance > other.distance:
            return 1
        return 0


@dataclass
class HitResult:
    """
    Result of nearest-hit selection for a batch of rays.

    Attributes:
        distance: Distance to hit point (N,) shape array, inf for misses
        object_index: Index into scene.objects (N,) shape array, -1 for misses
        hit_point: 3D coordinates of hit point (N, 3) shape, NaN for misses
    """
    distance: np.ndarray
    object_index: np.ndarray
    hit_point: np.ndarray

    def __post_init__(self):
        """Validate array shapes."""
        if self.distance.ndim != 1:
            raise ValueError(f"distance must be 1D array, got shape {self.distance.shape}")
        if self.object_index.shape != self.distance.shape:
            raise ValueError(f"object_index shape {self.object_index.shape} doesn't match distance shape {self.distance.shape}")
        if self.hit_point.shape != self.distance.shape + (3,):
            raise ValueError(f"hit_point must be (N,3) array, got shape {self.hit_point.shape}")

    @property
    def hit_mask(self):
        return self.object_index >= 0

    def intersection(self, i):
        """The i-th ray's hit as an Intersection, or None on a miss."""
        if self.object_index[i] < 0:
            return None
        return Intersection(int(self.object_index[i]), float(self.distance[i]))


class HitSelector:
    """
    Determines which object each ray hits first.

    Every object is tested against every ray. Among hits, the smallest
    distance wins and ties go to the object listed first.
    """

    def __init__(self, scene):
        self.scene = scene

    def select_nearest(self, ray_origins, ray_directions) -> HitResult:
        """
        Find the nearest intersection for each ray.

        Args:
            ray_origins: (3,) shared origin or (N, 3) per-ray origins
            ray_directions: (N, 3) array of unit ray directions

        Returns:
            HitResult for all rays

        Raises:
            IncomparableDistanceError: if any object reports a NaN distance
        """
        if ray_directions.ndim == 1:
            ray_directions = ray_directions[None, :]
        ray_origins = np.asarray(ray_origins, dtype=np.float64)
        n_rays = ray_directions.shape[0]

        if not self.scene.objects:
            return HitResult(
                distance=np.full(n_rays, np.inf),
                object_index=np.full(n_rays, -1),
                hit_point=np.full((n_rays, 3), np.nan),
            )

        # (M objects, N rays)
        t_candidates = np.stack(
            [np.atleast_1d(obj.intersect(ray_origins, ray_directions)) for obj in self.scene.objects])
        if np.any(np.isnan(t_candidates)):
            raise IncomparableDistanceError("Intersection distance is NaN")

        # argmin returns the first minimum, so ties keep collection order
        nearest = np.argmin(t_candidates, axis=0)
        t_min = t_candidates[nearest, np.arange(n_rays)]
        valid_hits = np.isfinite(t_min)

        hit_points = np.full((n_rays, 3), np.nan)
        if np.any(valid_hits):
            origins = np.broadcast_to(ray_origins, ray_directions.shape)
            hit_points[valid_hits] = (origins[valid_hits] +
                                      t_min[valid_hits, None] * ray_directions[valid_hits])

        return HitResult(
            distance=t_min,
            object_index=np.where(valid_hits, nearest, -1),
            hit_point=hit_points,
        )

    def trace_ray(self, ray):
        """
        Nearest Intersection for a single ray, or None when nothing is hit.

        Raises:
            IncomparableDistanceError: if any object reports a NaN distance
        """
        candidates = []
        for i, obj in enumerate(self.scene.objects):
            distance = float(obj.intersect(ray.origin, ray.direction))
            if np.isnan(distance):
                raise IncomparableDistanceError(f"Intersection distance with object {i} is NaN")
            if distance != np.inf:
                candidates.append(Intersection(i, distance))
        if not candidates:
            return None
        return min(candidates, key=functools.cmp_to_key(Intersection.compare_by_distance))


class LightingModel:
    """
    Lambertian shading with hard shadows.

    Each light contributes color * light color * max(N.L, 0) * intensity
    unless a shadow ray toward it hits any object. The sum is scaled by
    albedo / pi.
    """

    def __init__(self, scene, hit_selector):
        self.scene = scene
        self.hit_selector = hit_selector

    def get_surface_color(self, hits: HitResult) -> np.ndarray:
        """
        Calculate linear colors for all rays.

        Args:
            hits: HitResult from nearest-hit selection

        Returns:
            (N, 3) array of linear RGB colors, skybox where nothing was hit
        """
        n_rays = hits.distance.shape[0]
        colors = np.tile(self.scene.skybox.as_array(), (n_rays, 1))

        hit_mask = hits.hit_mask
        if not np.any(hit_mask):
            return colors

        hit_idx = hits.object_index[hit_mask]
        points = hits.hit_point[hit_mask]

        normals = np.zeros_like(points)
        base_colors = np.zeros_like(points)
        albedo = np.zeros(points.shape[0])
        for i in np.unique(hit_idx):
            obj = self.scene.objects[i]
            m = hit_idx == i
            normals[m] = obj.surface_normal(points[m])
            base_colors[m] = obj.color.as_array()
            albedo[m] = obj.albedo

        shadow_origins = points + normals * constants.SHADOW_BIAS
        total = np.zeros_like(points)
        for light in self.scene.lights:
            light_dirs = light.direction_from(points)
            shadow_hits = self.hit_selector.select_nearest(shadow_origins, light_dirs)
            visible = ~shadow_hits.hit_mask

            # fmax treats NaN (degenerate light direction) as no light
            cos_term = np.fmax(np.sum(normals * light_dirs, axis=1), 0.0)
            light_power = cos_term * light.intensity
            contribution = base_colors * light.color.as_array()[None, :] * light_power[:, None]
            total[visible] += contribution[visible]

        colors[hit_mask] = total * (albedo / np.pi)[:, None]
        return colors
