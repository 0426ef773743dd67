# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties, default window sizes, or the colors used to tag boundary
collisions. Tunable physics lives in config.json / config.py instead.
"""

# Visualization settings
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
WINDOW_TITLE = "Particle Simulation with Dynamic Wind"
FPS = 60
BACKGROUND_COLOR = (0, 0, 0) # Black

# --- Text Overlay ---
HINT_TEXT = "Press 'P' for Particles 'Arrow' for Wind direction and 'L' for Zoom"
HINT_FONT_SIZE = 20
HINT_POSITION = (5, 5)
# Seconds until the hint line has fully faded out.
HINT_FADE_DURATION = 12.0
TEXT_COLOR = (255, 255, 255)

# --- Collision Tag Colors ---
# A particle shows the color of the last boundary it struck.
LEFT_EDGE_COLOR = (0, 0, 255)     # Blue
RIGHT_EDGE_COLOR = (255, 0, 0)    # Red
TOP_EDGE_COLOR = (0, 255, 0)      # Green
BOTTOM_EDGE_COLOR = (255, 255, 255) # White

# Spawn colors of the two physics presets.
MAGENTA = (255, 0, 255)
YELLOW = (255, 255, 0)

# Full opacity for the alpha channel.
MAX_ALPHA = 255

# --- Audio ---
# Amplitude used when a sound cannot be sampled (0-1).
PLACEHOLDER_SAMPLE_LEVEL = 0.5
