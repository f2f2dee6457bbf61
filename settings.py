"""
Scene Constants
===============
Central registry for every fixed number the holiday scene uses.

The scene is not configurable at runtime: counts, ranges, camera values and
timings are literals chosen once and shared by the generator, the
simulation subsystems and the renderer.

Exports are grouped per subsystem; all values are plain floats/ints, colours
are RGBA float tuples in the ``[0, 1]`` range.
"""
from __future__ import annotations

import math
from typing import Tuple

Color = Tuple[float, float, float, float]

# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------
WINDOW_TITLE = "Merry Christmas"
INITIAL_WINDOW_SIZE: Tuple[int, int] = (1280, 720)
TARGET_FPS = 60

# ---------------------------------------------------------------------------
# Camera
# ---------------------------------------------------------------------------
FOV = 350.0
CAMERA_Z = 400.0
ROTATION_SPEED = 0.003  # radians per tick
CENTER_LIFT = 100.0  # tree centre sits this far above the viewport centre

# ---------------------------------------------------------------------------
# Tree dimensions
# ---------------------------------------------------------------------------
TREE_HEIGHT_RATIO = 0.9
TREE_HEIGHT_CAP = 900.0
TREE_RADIUS_RATIO = 0.5
TREE_RADIUS_CAP = 450.0

# ---------------------------------------------------------------------------
# Ribbons
# ---------------------------------------------------------------------------
RIBBON_PARTICLES = 1600
RED_RIBBON_PARTICLES = 1600
RIBBON_TURNS = 7
RIBBON_WIDTH = 25.0
RED_RIBBON_WIDTH = 20.0
RIBBON_RADIUS_OFFSET = 30.0
RED_RIBBON_RADIUS_OFFSET = 35.0
RED_RIBBON_PHASE = math.pi / 1.5
RIBBON_DELAY_BASE = 500.0
RIBBON_DELAY_SPAN = 2000.0

# ---------------------------------------------------------------------------
# Foliage
# ---------------------------------------------------------------------------
FOLIAGE_PARTICLES = 7000
FOLIAGE_LAYERS = 12
FOLIAGE_DEPTH_BIAS = 1.5
FOLIAGE_RADIAL_BIAS = 0.6
FOLIAGE_DELAY_BASE = 200.0
FOLIAGE_DELAY_SPAN = 2500.0
FOLIAGE_DELAY_JITTER = 500.0

# ---------------------------------------------------------------------------
# Ornaments
# ---------------------------------------------------------------------------
ORNAMENT_COUNT = 350
ORNAMENT_SWATCHES = ("#ff3333", "#ffd700", "#4169e1", "#e0e0e0")
ORNAMENT_DELAY_BASE = 1000.0
ORNAMENT_DELAY_SPAN = 2000.0

# ---------------------------------------------------------------------------
# Floor galaxy
# ---------------------------------------------------------------------------
FLOOR_PARTICLES = 1000
FLOOR_SPREAD = 1.5
FLOOR_JITTER = 50.0
FLOOR_THICKNESS = 15.0
FLOOR_DELAY_SPAN = 1000.0

# ---------------------------------------------------------------------------
# Star topper
# ---------------------------------------------------------------------------
STAR_COLOR = "#fffef0"
STAR_RADIUS = 22.0
STAR_LIFT = 25.0
STAR_DELAY = 3500.0
SPARKLE_COUNT = 6
SPARKLE_COLOR = "#fffcd1"
SPARKLE_RING_MIN = 25.0
SPARKLE_RING_SPAN = 15.0
SPARKLE_HEIGHT_SPREAD = 20.0
SPARKLE_ALPHA = 0.8
SPARKLE_DELAY_BASE = 3800.0
SPARKLE_DELAY_SPAN = 500.0

# ---------------------------------------------------------------------------
# Snow
# ---------------------------------------------------------------------------
SNOW_COUNT = 400
SNOW_SPEED_RANGE = (0.5, 2.0)
SNOW_RADIUS_RANGE = (1.0, 3.0)
SNOW_ALPHA_RANGE = (0.1, 0.5)
SNOW_RESPAWN_Y = -10.0

# ---------------------------------------------------------------------------
# Fireworks
# ---------------------------------------------------------------------------
FIREWORK_LAUNCH_CHANCE = 0.02
FIREWORK_LAUNCH_MARGIN = 0.1  # launch within the middle 80% of the width
FIREWORK_APEX_RANGE = (0.1, 0.6)  # target apex as a fraction of height
FIREWORK_SPEED_RANGE = (8.0, 13.0)
FIREWORK_RISE_GRAVITY = 0.05
FIREWORK_SPARK_COUNT_RANGE = (100, 150)
FIREWORK_SPARK_SPEED_RANGE = (3.0, 9.0)
FIREWORK_SPARK_DECAY_RANGE = (0.005, 0.015)
FIREWORK_SPARK_GRAVITY = 0.03
FIREWORK_SPARK_DRAG = 0.98
FIREWORK_GLINT_CHANCE = 0.1
FIREWORK_GLINT_SCALE = 1.5
FIREWORK_HEAD_RADIUS = 2.0
FIREWORK_SPARK_RADIUS = 1.5

# ---------------------------------------------------------------------------
# Intro and timing (milliseconds)
# ---------------------------------------------------------------------------
INTRO_DURATION_MS = 2000.0
INTRO_SPIRAL_ANGLE = 4.0 * math.pi
FLOOR_GLOW_FADE_MS = 2000.0
CAPTION_DELAY_MS = 4000.0
CAPTION_FADE_MS = 2000.0

# ---------------------------------------------------------------------------
# Frame colours
# ---------------------------------------------------------------------------
TRAIL_COLOR: Color = (2 / 255.0, 2 / 255.0, 5 / 255.0, 0.4)
SNOW_COLOR: Color = (1.0, 1.0, 1.0, 1.0)
FLOOR_GLOW_INNER: Color = (1.0, 220 / 255.0, 100 / 255.0, 0.3)
FLOOR_GLOW_MID: Color = (1.0, 150 / 255.0, 50 / 255.0, 0.1)
FLOOR_GLOW_SQUASH = 0.3

# ---------------------------------------------------------------------------
# Caption
# ---------------------------------------------------------------------------
CAPTION_TEXT = "Merry Christmas"
CAPTION_FONT_FACES = "greatvibes,segoescript,brushscriptmt,urwchanceryl,cursive"
CAPTION_FONT_RATIO = 0.15
CAPTION_FONT_CAP = 100
CAPTION_BASELINE_OFFSET = 40.0
CAPTION_GRADIENT_TOP_OFFSET = 120.0
CAPTION_GRADIENT_BOTTOM_OFFSET = 20.0
CAPTION_GLOW_COLOR: Color = (1.0, 170 / 255.0, 0.0, 1.0)
CAPTION_GLOW_BLUR = 20.0
