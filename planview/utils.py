from __future__ import annotations
import math
from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor

# ===== Viewport / zoom =====
DEFAULT_SCALE = 10.0      # px per foot
MIN_SCALE = 2.0
MAX_SCALE = 50.0
ZOOM_STEP = 1.2           # +/- buttons
WHEEL_ZOOM_IN = 1.1
WHEEL_ZOOM_OUT = 0.9
KEY_PAN_STEP = 20.0       # px per arrow key press
DEFAULT_OFFSET = QPointF(50.0, 50.0)

# ===== Plan geometry =====
GRID_FEET = 5.0
STAIR_STEPS = 10
DIM_GAP = 20.0            # px between plan edge and dimension run
DIM_TICK = 5.0
DIM_LABEL_GAP = 15.0
LABEL_LINE_GAP = 8.0
TITLE_POS = QPointF(10.0, -20.0)

# ===== Colors =====
BG_COLOR = QColor("#ffffff")
GRID_COLOR = QColor("#e5e7eb")
GRID_WIDTH = 0.5
ROOM_BORDER = QColor("#9ca3af")
TEXT_COLOR = QColor("#1f2937")
AREA_TEXT_COLOR = QColor("#6b7280")
DIMENSION_COLOR = QColor("#ef4444")
DOOR_COLOR = QColor("#8b4513")
WINDOW_COLOR = QColor("#60a5fa")
OPENING_CUT = QColor("#ffffff")
PLACEHOLDER_BG = QColor("#f9fafb")
PLACEHOLDER_TEXT = QColor("#6b7280")

WALL_COLORS = {
    "exterior": QColor("#1a1a2e"),
    "interior": QColor("#374151"),
    "partition": QColor("#6b7280"),
}

ROOM_COLORS = {
    "bedroom": QColor("#bfdbfe"),
    "master bedroom": QColor("#93c5fd"),
    "living room": QColor("#fde68a"),
    "lounge": QColor("#fde68a"),
    "kitchen": QColor("#fed7aa"),
    "bathroom": QColor("#a5f3fc"),
    "toilet": QColor("#a5f3fc"),
    "dining": QColor("#d9f99d"),
    "office": QColor("#e9d5ff"),
    "garage": QColor("#d1d5db"),
    "store": QColor("#e5e7eb"),
    "lobby": QColor("#fce7f3"),
    "corridor": QColor("#f3f4f6"),
    "staircase": QColor("#fecaca"),
}
DEFAULT_ROOM_COLOR = QColor("#f9fafb")
CORRIDOR_COLOR = ROOM_COLORS["corridor"]
STAIRS_COLOR = ROOM_COLORS["staircase"]

FONT_FAMILY = "Arial"


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(v, hi))


def clamp_scale(v: float) -> float:
    return clamp(v, MIN_SCALE, MAX_SCALE)


def room_color(room_type: str) -> QColor:
    """Palette lookup by room type; unknown types get DEFAULT_ROOM_COLOR."""
    return ROOM_COLORS.get((room_type or "").lower(), DEFAULT_ROOM_COLOR)


def wall_color(wall_type: str) -> QColor:
    return WALL_COLORS.get(wall_type, WALL_COLORS["interior"])


def normalize_rotation(deg: float) -> float:
    return deg % 360.0


def format_feet(value: float) -> str:
    return f"{value:.1f}'"


def round_half_up(value: float) -> int:
    """Nearest integer with .5 going up (round() in Python goes to even)."""
    return math.floor(value + 0.5)
