import functools
import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed

import numpy as np
import PIL.Image

from sphere_renders.camera import Ray, create_prime, prime_directions
from sphere_renders.color import Color, encode_pixels
from sphere_renders.rendering import HitSelector, LightingModel

logger = logging.getLogger(__name__)


def _render_band(scene, row_start, row_stop):
    """Worker entry point: render rows [row_start, row_stop) of the scene."""
    return row_start, row_stop, Renderer(scene).render_rows(row_start, row_stop)


class Renderer:
    def __init__(self, scene):
        """
        Initialize the renderer for one immutable scene.

        Coordinate System:
        - Origin (0,0,0): The camera position.
        - -Z: Viewing direction.
        - +Y: Up. Image row 0 is the top of the frame.
        """
        self.scene = scene
        self.hit_selector = HitSelector(scene)
        self.lighting = LightingModel(scene, self.hit_selector)

    def trace(self, ray_origins, ray_directions):
        """Vectorized nearest-hit query. Returns a HitResult."""
        return self.hit_selector.select_nearest(ray_origins, ray_directions)

    def trace_ray(self, ray: Ray):
        """Nearest Intersection of a single ray, or None."""
        return self.hit_selector.trace_ray(ray)

    def get_color(self, ray_origin, ray_directions):
        """
        Calculate the linear color for each ray.
        vectorized for N rays.
        """
        is_single = ray_directions.ndim == 1
        if is_single:
            ray_directions = ray_directions[None, :]

        hits = self.trace(ray_origin, ray_directions)
        colors = self.lighting.get_surface_color(hits)

        return colors[0] if is_single else colors

    def cast_ray(self, x, y) -> Color:
        """Linear (pre-gamma) color of pixel (x, y)."""
        ray = create_prime(x, y, self.scene)
        return Color.from_array(self.get_color(ray.origin, ray.direction))

    def render_rows(self, row_start, row_stop):
        """Render a band of rows to a (rows, width, 4) uint8 RGBA array."""
        dirs = prime_directions(self.scene, row_start, row_stop)
        colors = self.get_color(np.zeros(3), dirs)
        pixels = encode_pixels(colors)
        logger.debug("Rendered rows %d-%d", row_start, row_stop)
        return pixels.reshape(row_stop - row_start, self.scene.width, 4)

    @functools.lru_cache(maxsize=4)
    def _render_cached(self, workers):
        scene = self.scene
        t0 = time.perf_counter()

        if workers <= 1 or scene.height < 2:
            frame = self.render_rows(0, scene.height)
        else:
            frame = np.zeros((scene.height, scene.width, 4), dtype=np.uint8)
            n_bands = min(scene.height, workers * 4)
            bounds = np.linspace(0, scene.height, n_bands + 1).astype(int)
            with ProcessPoolExecutor(max_workers=workers) as exe:
                futures = [exe.submit(_render_band, scene, int(start), int(stop))
                           for start, stop in zip(bounds[:-1], bounds[1:]) if stop > start]
                for f in as_completed(futures):
                    start, stop, band = f.result()
                    frame[start:stop] = band

        logger.info("Rendered %dx%d frame (%d objects, %d lights, %d workers) in %.2fs",
                    scene.width, scene.height, len(scene.objects), len(scene.lights),
                    max(workers, 1), time.perf_counter() - t0)
        frame.flags.writeable = False
        return frame

    def render(self, workers=1):
        """
        Render the full frame.

        Rows are split into bands and rendered in worker processes when
        workers > 1. Each band writes a disjoint slice of the output, so the
        result is identical for any worker count.

        Returns:
            (height, width, 4) uint8 RGBA array, row-major
        """
        return self._render_cached(int(workers)).copy()

    def render_image(self, workers=1):
        """Render the frame as a PIL RGBA image."""
        return PIL.Image.fromarray(self.render(workers))
