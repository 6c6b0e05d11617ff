from __future__ import annotations
from typing import Optional
from PySide6.QtCore import QPointF
from .utils import (DEFAULT_SCALE, DEFAULT_OFFSET, ZOOM_STEP, WHEEL_ZOOM_IN, WHEEL_ZOOM_OUT,
                    clamp_scale)


class ViewportState:
    """Interactive transform of the viewport: px-per-foot scale plus a pixel pan offset.

    All mutation goes through the transition methods below; the scale is clamped
    to [MIN_SCALE, MAX_SCALE] at each of them. The offset is not bounded.
    """

    def __init__(self, initial_scale: float = DEFAULT_SCALE, offset: Optional[QPointF] = None):
        self.initial_scale = clamp_scale(float(initial_scale))
        self.scale = self.initial_scale
        self.offset = QPointF(offset if offset is not None else DEFAULT_OFFSET)
        self.is_dragging = False
        self.drag_start = QPointF(0.0, 0.0)

    def to_px(self, feet: float) -> float:
        return feet * self.scale

    def to_plan(self, pos: QPointF) -> QPointF:
        """Surface point (logical px) -> plan point (feet)."""
        return QPointF((pos.x() - self.offset.x()) / self.scale,
                       (pos.y() - self.offset.y()) / self.scale)

    # ---- pan ----
    def pan_start(self, pos: QPointF):
        self.is_dragging = True
        self.drag_start = QPointF(pos) - self.offset

    def pan_move(self, pos: QPointF) -> bool:
        if not self.is_dragging:
            return False
        self.offset = QPointF(pos) - self.drag_start
        return True

    def pan_end(self):
        self.is_dragging = False

    def pan_by(self, dx: float, dy: float):
        self.offset = self.offset + QPointF(dx, dy)

    # ---- zoom ----
    def _set_scale(self, value: float) -> bool:
        new_scale = clamp_scale(value)
        changed = new_scale != self.scale
        self.scale = new_scale
        return changed

    def wheel_zoom(self, angle_delta: float) -> bool:
        # negative delta = wheel rolled toward the user = zoom out
        if angle_delta == 0:
            return False
        factor = WHEEL_ZOOM_OUT if angle_delta < 0 else WHEEL_ZOOM_IN
        return self._set_scale(self.scale * factor)

    def zoom_in(self) -> bool:
        return self._set_scale(self.scale * ZOOM_STEP)

    def zoom_out(self) -> bool:
        return self._set_scale(self.scale / ZOOM_STEP)

    def reset(self):
        self.scale = self.initial_scale
        self.offset = QPointF(DEFAULT_OFFSET)
        self.is_dragging = False

    def __repr__(self) -> str:
        return (f"ViewportState(scale={self.scale:.3f}, offset=({self.offset.x():.1f}, "
                f"{self.offset.y():.1f}), dragging={self.is_dragging})")
