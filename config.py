###############################################################
# config.py — paths, dimensions, colours and layout presets
###############################################################
"""
Central registry for file paths and tunable constants.

Every section renderer reads its dimensions, colours and simulation
presets from here so that a chart can be re-tuned without touching the
drawing code. Environment variables are read once at import.
"""
import os
from pathlib import Path

from force_layout import ForceConfig
from legend_filter import OpacityLevel


# ============================================================
# PATHS
# ============================================================

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
TEMPLATE_PATH = BASE_DIR / "rough_template.html"


# ============================================================
# ENVIRONMENT
# ============================================================

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
LOG_LEVEL = os.getenv("OLYMPICS_LOG_LEVEL", "INFO")


# ============================================================
# SHARED LOOK
# ============================================================

HAND_FONT = "Indie Flower, cursive"
AXIS_STROKE_WIDTH = 8
AXIS_FONT_SIZE = 18

PINK = "#ff006e"
PURPLE = "#81568F"
ORANGE = "#f8961e"
GREEN = "#43aa8b"
BLUE = "#219ebc"
LIME = "#90be6d"
INK = "#22223b"

# legend filter levels
HIGHLIGHTED = OpacityLevel(fill=0.8, stroke=1.0)
DIMMED = OpacityLevel(fill=0.06, stroke=0.1)


# ============================================================
# FIRST PARTICIPATION
# ============================================================

FIRST_TIME_WIDTH = 2000
FIRST_TIME_HEIGHT = 480
FIRST_TIME_MARGIN = {"top": 35, "right": 60, "bottom": 27, "left": 40}
FIRST_TIME_NODE_RADIUS = 5
FIRST_TIME_PLAYED_RADIUS = 6
FIRST_TIME_START = (250 + 40, 150 + 35)

CONTINENT_COLOURS = {
    "Asia": PINK,
    "Europe": PURPLE,
    "Africa": ORANGE,
    "North America": GREEN,
    "South America": "#1aa3c9",
    "Oceania": LIME,
    "missing": "#1f1f45",
}
CONTINENT_LABELS = {"missing": "no longer exists / renamed / other"}

# countries on both sides of the Europe/Asia border get a gradient fill
MULTI_CONTINENT_COUNTRIES = (
    "Armenia", "Azerbaijan", "Cyprus", "Georgia", "Kazakhstan", "Russia", "Turkey",
)

FIRST_TIME_FORCES = ForceConfig(
    x_strength=0.03,
    y_strength=0.01,
    collision_radius=10,
    alpha_decay=0.001,
    max_ticks=2400,
)
FIRST_TIME_FRAME_STRIDE = 12


# ============================================================
# SUSTAINABILITY TIMELINE
# ============================================================

TIMELINE_WIDTH = 1100
TIMELINE_HEIGHT = 500
TIMELINE_MARGIN = {"top": 20, "right": 50, "bottom": 0, "left": 50}
TIMELINE_POSITIVE = "#2fb98a"
TIMELINE_NEGATIVE = "#ff9410"
TIMELINE_EVENT_DIAMETER = 80


# ============================================================
# GENDER PIES
# ============================================================

PIES_WIDTH = 1170
PIES_HEIGHT = 600 + 70
PIE_SIZE = 145
PIE_INNER_RADIUS = 23
PIE_OUTER_RADIUS = PIE_SIZE / 2 - 10
PIE_PAD_ANGLE = 0.1
PIE_CORNER_RADIUS = 15
PIES_PER_ROW = 8
PIES_MAX_YEARS = 28

REVEAL_PIE_SIZE = 400
REVEAL_INNER_RADIUS = 60
REVEAL_BUTTON_COLOUR = "#AB2E64"

COLOUR_FEMALE = PINK
COLOUR_MALE = "#00a3d6"


# ============================================================
# PARALYMPICS
# ============================================================

PARA_WIDTH = 1300
PARA_HEIGHT = 500
PARA_MARGIN = {"top": 60, "right": 20, "bottom": 0, "left": 40}
PARA_BARS_COLOUR = BLUE
PARA_SPORTS_LOW = PINK
PARA_SPORTS_HIGH = ORANGE
PARA_SPORT_RADIUS = 10
PARA_SPORT_ROWS = 22

PARA_SPORT_FORCES = ForceConfig(
    x_strength=0.5,
    y_strength=0.1,
    collision_radius=PARA_SPORT_RADIUS + 1,
    max_ticks=400,
)
PARA_FRAME_STRIDE = 4
