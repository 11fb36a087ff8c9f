import argparse
import logging
import os
import sys
import time

from sphere_renders import constants
from sphere_renders.core import Renderer
from sphere_renders.scene import SceneError
from sphere_renders.scenes import default_scene, load_scene

logger = logging.getLogger("sphere_renders")


def build_scene(args):
    """Scene from --scene (or the built-in scene) with CLI size/fov overrides."""
    if args.scene:
        return load_scene(args.scene, width=args.width, height=args.height, fov=args.fov)
    return default_scene(
        width=args.width or constants.DEFAULT_WIDTH,
        height=args.height or constants.DEFAULT_HEIGHT,
        fov=args.fov or constants.DEFAULT_FOV,
    )


def render_to_file(scene, path, workers=1):
    """Render the scene and save it as an image (format from the extension)."""
    print(f"Rendering {scene.width}x{scene.height} ({len(scene.objects)} objects, {len(scene.lights)} lights)...")
    t0 = time.time()
    image = Renderer(scene).render_image(workers=workers)
    print(f"  Complete in {time.time() - t0:.2f}s")

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    image.save(path)
    print(f"Render complete: {path}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Sphere Renderer CLI")
    parser.add_argument("--scene", help="JSON scene file (default: built-in three-sphere scene)")
    parser.add_argument("--output", default=os.path.join("output", "render.png"), help="Output image path")
    parser.add_argument("--width", type=int, help="Override image width in pixels")
    parser.add_argument("--height", type=int, help="Override image height in pixels")
    parser.add_argument("--fov", type=float, help="Override field of view in degrees")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes for rendering")
    parser.add_argument("--ui", action="store_true", help="Launch the interactive Gradio UI")
    parser.add_argument("--plot", action="store_true", help="Save a top/side layout plot of the scene instead of rendering")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        scene = build_scene(args)
    except (OSError, SceneError) as e:
        logger.error("Could not build scene: %s", e)
        return 1

    if args.ui:
        from sphere_renders.ui import create_ui
        print("Launching UI...")
        demo = create_ui(scene)
        demo.launch()
        return 0

    try:
        if args.plot:
            from sphere_renders.tools.visualize_scene import save_layout_plot
            save_layout_plot(scene, args.output)
            print(f"Layout plot saved: {args.output}")
        else:
            render_to_file(scene, args.output, workers=args.workers)
    except OSError as e:
        logger.error("Could not write %s: %s", args.output, e)
        return 1
    return 0


def run_ui():
    """Entry point for sphere-ui command."""
    sys.exit(main(sys.argv[1:] + ["--ui"]))


if __name__ == "__main__":
    sys.exit(main())
