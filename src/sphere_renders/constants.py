"""
Rendering constants and defaults for the Sphere Renderer.
"""

# Display transfer (approximation, not the sRGB curve)
GAMMA = 1.5

# Shadow rays start this far along the surface normal to avoid self-hits
SHADOW_BIAS = 0.01

# Rays closer than this to parallel with a plane never hit it
PLANE_EPSILON = 1e-6

# Camera defaults
DEFAULT_WIDTH = 500
DEFAULT_HEIGHT = 500
DEFAULT_FOV = 90.0

# Named colors (linear RGB)
BLACK = (0.0, 0.0, 0.0)
WHITE = (1.0, 1.0, 1.0)
SKY_BLUE = (0.2, 0.2, 0.95)

# Layout plot colors per light type
LIGHT_COLORS = {
    "directional": [1.0, 0.6, 0.0],  # Orange
    "spherical": [1.0, 0.2, 0.2],    # Red
    "global": [0.6, 0.0, 1.0],       # Purple
}
