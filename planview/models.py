from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .utils import round_half_up


class LayoutError(ValueError):
    """Raised when a layout payload cannot be turned into a FloorLayout."""


def _num(data: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    raw = data.get(key, default)
    if raw is None:
        raise LayoutError(f"missing numeric field '{key}'")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise LayoutError(f"field '{key}' is not a number: {raw!r}") from None
    if not math.isfinite(value):
        raise LayoutError(f"field '{key}' is not finite: {raw!r}")
    return value


def _seq(data: Dict[str, Any], key: str) -> list:
    # missing arrays are empty, not errors
    raw = data.get(key)
    return list(raw) if raw else []


def _mapping(raw: Any, what: str) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise LayoutError(f"{what} must be an object, got {type(raw).__name__}")
    return raw


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rect":
        data = _mapping(data, "rect")
        return cls(_num(data, "x", 0.0), _num(data, "y", 0.0),
                   _num(data, "width"), _num(data, "height"))


@dataclass
class Opening:
    """Door or window anchored at (x, y), rotated by `rotation` degrees."""
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    type: str = "single"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Opening":
        data = _mapping(data, "opening")
        return cls(_num(data, "x", 0.0), _num(data, "y", 0.0),
                   _num(data, "width"), _num(data, "height"),
                   _num(data, "rotation", 0.0), str(data.get("type", "single")))


@dataclass
class RoomLayout:
    name: str
    type: str
    x: float
    y: float
    width: float
    height: float
    doors: List[Opening] = field(default_factory=list)
    windows: List[Opening] = field(default_factory=list)
    id: str = ""

    @property
    def area(self) -> int:
        return round_half_up(self.width * self.height)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoomLayout":
        data = _mapping(data, "room")
        name = str(data.get("name", ""))
        return cls(
            name=name,
            type=str(data.get("type", name)),
            x=_num(data, "x", 0.0), y=_num(data, "y", 0.0),
            width=_num(data, "width"), height=_num(data, "height"),
            doors=[Opening.from_dict(d) for d in _seq(data, "doors")],
            windows=[Opening.from_dict(w) for w in _seq(data, "windows")],
            id=str(data.get("id", "")),
        )


@dataclass
class WallLayout:
    x1: float
    y1: float
    x2: float
    y2: float
    thickness: float
    type: str = "interior"  # "exterior" | "interior" | "partition"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WallLayout":
        data = _mapping(data, "wall")
        return cls(_num(data, "x1"), _num(data, "y1"), _num(data, "x2"), _num(data, "y2"),
                   _num(data, "thickness"), str(data.get("type", "interior")))


@dataclass
class Circulation:
    corridors: List[Rect] = field(default_factory=list)
    stairs: Optional[Rect] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Circulation":
        if not data:
            return cls()
        data = _mapping(data, "circulation")
        stairs = data.get("stairs")
        return cls(
            corridors=[Rect.from_dict(c) for c in _seq(data, "corridors")],
            stairs=Rect.from_dict(stairs) if stairs else None,
        )


@dataclass
class BoundingBox:
    width: float
    height: float


@dataclass
class FloorLayout:
    """One floor as produced by the layout engine. Never mutated by the renderer."""
    level: str
    bounding_box: BoundingBox
    rooms: List[RoomLayout] = field(default_factory=list)
    walls: List[WallLayout] = field(default_factory=list)
    circulation: Circulation = field(default_factory=Circulation)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FloorLayout":
        data = _mapping(data, "floor layout")
        bbox = _mapping(data.get("boundingBox", data.get("bounding_box")), "boundingBox")
        width, height = _num(bbox, "width"), _num(bbox, "height")
        if width <= 0 or height <= 0:
            raise LayoutError(f"boundingBox must be positive, got {width} x {height}")
        return cls(
            level=str(data.get("level", "")),
            bounding_box=BoundingBox(width, height),
            rooms=[RoomLayout.from_dict(r) for r in _seq(data, "rooms")],
            walls=[WallLayout.from_dict(w) for w in _seq(data, "walls")],
            circulation=Circulation.from_dict(data.get("circulation")),
        )


@dataclass
class LayoutResult:
    floors: List[FloorLayout] = field(default_factory=list)
    plot_width: float = 0.0
    plot_height: float = 0.0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def floor(self, index: int) -> Optional[FloorLayout]:
        if 0 <= index < len(self.floors):
            return self.floors[index]
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutResult":
        data = _mapping(data, "layout result")
        # a bare floor is accepted as a one-floor result
        if "floors" not in data:
            return cls(floors=[FloorLayout.from_dict(data)])
        plot = _mapping(data.get("plotDimensions") or {}, "plotDimensions")
        return cls(
            floors=[FloorLayout.from_dict(f) for f in _seq(data, "floors")],
            plot_width=_num(plot, "width", 0.0),
            plot_height=_num(plot, "height", 0.0),
            errors=[str(e) for e in _seq(data, "errors")],
            warnings=[str(w) for w in _seq(data, "warnings")],
        )


@dataclass
class DisplayFlags:
    show_grid: bool = True
    show_dimensions: bool = True
    show_room_labels: bool = True
    scale: float = 10.0  # initial pixels per foot


class ViewMode:
    EMPTY = "empty"
    RENDERED = "rendered"
