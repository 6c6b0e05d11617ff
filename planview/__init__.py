from .models import (LayoutError, Rect, Opening, RoomLayout, WallLayout, Circulation,
                     BoundingBox, FloorLayout, LayoutResult, DisplayFlags, ViewMode)
from .state import ViewportState
from .pipeline import render_plan, scoped_transform
from .surface import PlanSurface
from .view import PlanCanvas
from .hud import ZoomHUD, ScaleBadge
from .layout_io import load_layout, parse_layout
from .settings import ViewerSettings

__all__ = [
    "LayoutError", "Rect", "Opening", "RoomLayout", "WallLayout", "Circulation",
    "BoundingBox", "FloorLayout", "LayoutResult", "DisplayFlags", "ViewMode",
    "ViewportState", "render_plan", "scoped_transform", "PlanSurface",
    "PlanCanvas", "ZoomHUD", "ScaleBadge", "load_layout", "parse_layout", "ViewerSettings",
]
