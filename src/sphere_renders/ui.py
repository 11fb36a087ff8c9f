import dataclasses

import gradio as gr

from .core import Renderer
from .scenes import default_scene

# Keep the previous frame visible while a new one renders
CSS = """
.gradio-container { background-color: #0b0f19 !important; color: #e5e7eb !important; }
#output_img { background-color: #0b0f19 !important; border-radius: 8px; overflow: hidden; border: none !important; }
#output_img img { object-fit: contain; }

.generating, .pending {
    opacity: 1 !important;
    filter: none !important;
    transition: none !important;
}

.loading, .progress-view, .loader, .spinner {
    display: none !important;
    visibility: hidden !important;
}
"""


def _light_label(i, light):
    kind = type(light).__name__.replace("Light", "")
    return f"Light {i + 1} ({kind}) Intensity"


def create_ui(scene=None):
    base_scene = scene if scene is not None else default_scene()
    aspect = base_scene.height / base_scene.width

    def render_frame(fov, resolution, *intensities):
        lights = tuple(dataclasses.replace(light, intensity=float(value))
                       for light, value in zip(base_scene.lights, intensities))
        width = int(resolution)
        height = max(1, int(round(resolution * aspect)))
        frame_scene = dataclasses.replace(base_scene, width=width, height=height,
                                          fov=float(fov), lights=lights)
        return Renderer(frame_scene).render_image()

    with gr.Blocks(title="Sphere Renderer") as demo:
        gr.Markdown("# Sphere Renderer")
        gr.Markdown("Ray traced spheres with Lambertian shading and hard shadows.")

        with gr.Row():
            with gr.Column(scale=1):
                with gr.Group():
                    gr.Markdown("### 🎥 Camera Settings")
                    fov_slider = gr.Slider(minimum=10, maximum=170, value=base_scene.fov, label="Field of View (FOV)")
                    res_slider = gr.Slider(minimum=64, maximum=1024, value=min(base_scene.width, 512), step=64,
                                           label="Render Resolution", info="Lower for speed, higher for quality")
                    reset_btn = gr.Button("🔄 Reset Viewport", variant="secondary")

                with gr.Group():
                    gr.Markdown("### 💡 Lights")
                    light_sliders = [
                        gr.Slider(minimum=0, maximum=20, value=light.intensity, step=0.1,
                                  label=_light_label(i, light))
                        for i, light in enumerate(base_scene.lights)
                    ]

            with gr.Column(scale=2):
                output_img = gr.Image(label="Viewport", interactive=False, elem_id="output_img")

        inputs = [fov_slider, res_slider] + light_sliders

        def reset_view():
            return ([base_scene.fov, min(base_scene.width, 512)] +
                    [light.intensity for light in base_scene.lights])

        reset_btn.click(fn=reset_view, outputs=inputs)

        for input_comp in inputs:
            input_comp.change(fn=render_frame, inputs=inputs, outputs=output_img,
                              trigger_mode="always_last", show_progress="hidden")

        demo.load(fn=render_frame, inputs=inputs, outputs=output_img, show_progress="hidden")

    return demo


if __name__ == "__main__":
    demo = create_ui()
    demo.launch(css=CSS)
