import dataclasses
import os

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Polygon

from sphere_renders import constants
from sphere_renders.core import Renderer
from sphere_renders.scene import DirectionalLight, GlobalLight, Sphere, SphericalLight
from sphere_renders.scenes import default_scene


def _frustum_points(scene, axis, depth):
    """2D camera wedge in the (x, z) or (y, z) plane, camera at the origin."""
    half = np.tan(np.deg2rad(scene.fov) / 2.0)
    if axis == 0:
        half *= scene.aspect_ratio
    return [(0.0, 0.0), (-half * depth, -depth), (half * depth, -depth)]


def _scene_extent(scene):
    extent = 2.0
    for obj in scene.objects:
        if isinstance(obj, Sphere):
            extent = max(extent, np.max(np.abs(obj.center)) + obj.radius)
    for light in scene.lights:
        if isinstance(light, SphericalLight):
            extent = max(extent, np.max(np.abs(light.position)))
    return 1.2 * extent


def _draw_projection(ax, scene, axis, extent):
    """Project the scene onto the plane spanned by `axis` (0=x, 1=y) and z."""
    label = "xy"[axis]
    ax.set_aspect('equal')
    ax.set_xlim(-extent, extent)
    ax.set_ylim(-extent, extent * 0.25)
    ax.set_xlabel(label)
    ax.set_ylabel("z")

    wedge = Polygon(_frustum_points(scene, axis, extent), closed=True,
                    color='gray', alpha=0.15, zorder=1)
    ax.add_patch(wedge)
    ax.plot(0, 0, 'k^', markersize=8, zorder=10)

    for obj in scene.objects:
        color = np.clip(obj.color.as_array(), 0.0, 1.0)
        if isinstance(obj, Sphere):
            ax.add_patch(Circle((obj.center[axis], obj.center[2]), obj.radius,
                                color=color, alpha=0.8, zorder=5))
        else:
            # Trace of the plane in this projection
            n = obj.normal
            direction = np.array([-n[2], n[axis]])
            if np.linalg.norm(direction) < 1e-9:
                continue
            direction /= np.linalg.norm(direction)
            p = np.array([obj.center[axis], obj.center[2]])
            ends = np.array([p - 2 * extent * direction, p + 2 * extent * direction])
            ax.plot(ends[:, 0], ends[:, 1], color=color, linewidth=2, zorder=4)

    for light in scene.lights:
        if isinstance(light, SphericalLight):
            col = constants.LIGHT_COLORS["spherical"]
            ax.plot(light.position[axis], light.position[2], '*', color=col, markersize=14, zorder=9)
        elif isinstance(light, DirectionalLight):
            col = constants.LIGHT_COLORS["directional"]
            d = light.direction
            start = -np.array([d[axis], d[2]]) * extent * 0.8
            ax.annotate("", xy=start + np.array([d[axis], d[2]]) * extent * 0.3, xytext=start,
                        arrowprops=dict(arrowstyle="->", color=col, linewidth=2), zorder=9)


def create_layout_figure(scene=None, with_render=True):
    """Top view, side view and (optionally) a small render of the scene."""
    scene = scene if scene is not None else default_scene()
    n_panels = 3 if with_render else 2
    fig = plt.figure(figsize=(6 * n_panels, 6))
    extent = _scene_extent(scene)

    ax1 = fig.add_subplot(1, n_panels, 1)
    ax1.set_title("Top View")
    _draw_projection(ax1, scene, 0, extent)

    ax2 = fig.add_subplot(1, n_panels, 2)
    ax2.set_title("Side View")
    _draw_projection(ax2, scene, 1, extent)

    n_global = sum(isinstance(light, GlobalLight) for light in scene.lights)
    if n_global:
        fig.suptitle(f"{n_global} global light(s) (not drawn)")

    if with_render:
        ax3 = fig.add_subplot(1, n_panels, 3)
        ax3.set_title("Render")
        ax3.axis('off')
        # Preview at reduced resolution keeps plotting fast
        scale = min(1.0, 200.0 / max(scene.width, scene.height))
        preview = Renderer(dataclasses.replace(
            scene,
            width=max(1, int(scene.width * scale)),
            height=max(1, int(scene.height * scale)),
        )).render()
        ax3.imshow(preview)

    return fig


def save_layout_plot(scene, path):
    fig = create_layout_figure(scene)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(path)
    plt.close(fig)


if __name__ == "__main__":
    os.makedirs("output", exist_ok=True)
    print("Saving layout plot to output/scene_layout.png...")
    save_layout_plot(default_scene(), os.path.join("output", "scene_layout.png"))
    print("Done.")
