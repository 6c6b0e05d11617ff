from __future__ import annotations
import logging
from dataclasses import replace
from typing import Optional

from PySide6.QtCore import Qt, QRectF, Signal
from PySide6.QtGui import QPainter, QFont, QWheelEvent, QMouseEvent, QKeyEvent
from PySide6.QtWidgets import QWidget

from .models import DisplayFlags, FloorLayout, LayoutResult, ViewMode
from .state import ViewportState
from .surface import PlanSurface
from .pipeline import render_plan
from .hud import ZoomHUD, ScaleBadge
from .utils import PLACEHOLDER_BG, PLACEHOLDER_TEXT, KEY_PAN_STEP, clamp_scale

log = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Load a layout to view the floor plan"
PLACEHOLDER_HINT = "The floor plan will appear here as soon as one is available"

_KEY_PAN = {
    int(Qt.Key_Left):  (KEY_PAN_STEP, 0.0),
    int(Qt.Key_Right): (-KEY_PAN_STEP, 0.0),
    int(Qt.Key_Up):    (0.0, KEY_PAN_STEP),
    int(Qt.Key_Down):  (0.0, -KEY_PAN_STEP),
}


class PlanCanvas(QWidget):
    """Interactive raster viewport for one FloorLayout.

    Every state change (layout, scale, offset, display flags, size) repaints the
    whole plan into the backing surface synchronously; paintEvent only blits it.
    """
    scaleChanged = Signal(float)
    layoutChanged = Signal(object)  # FloorLayout | None
    cursorMoved = Signal(float, float)  # plan feet under the pointer

    def __init__(self, flags: Optional[DisplayFlags] = None, parent: QWidget | None = None):
        super().__init__(parent)
        self.flags = replace(flags) if flags else DisplayFlags()
        self.state = ViewportState(self.flags.scale)
        self.floor: Optional[FloorLayout] = None
        self.surface: Optional[PlanSurface] = None
        self.mode = ViewMode.EMPTY

        self.setMinimumSize(320, 240)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setCursor(Qt.OpenHandCursor)
        self.setMouseTracking(True)
        self.setAttribute(Qt.WA_OpaquePaintEvent, True)

        self.hud = ZoomHUD(self)
        self.badge = ScaleBadge(self)

    # ---- data binding ----
    def set_layout(self, floor: Optional[FloorLayout]):
        """Replace the bound layout wholesale; None returns to the empty state."""
        self.floor = floor
        self.mode = ViewMode.RENDERED if floor is not None else ViewMode.EMPTY
        if floor is not None:
            log.debug("bound layout %r (%d rooms, %d walls)", floor.level, len(floor.rooms), len(floor.walls))
        else:
            log.debug("layout cleared")
        self.redraw()
        self.layoutChanged.emit(floor)

    def set_result(self, result: Optional[LayoutResult], floor_index: int = 0):
        self.set_layout(result.floor(floor_index) if result else None)

    def set_flags(self, **changes):
        """Update display flags, e.g. set_flags(show_grid=False). `scale` sets the reset scale."""
        self.flags = replace(self.flags, **changes)
        if "scale" in changes:
            self.state.initial_scale = clamp_scale(float(changes["scale"]))
        self.redraw()

    # ---- control surface ----
    def zoom_in(self):
        if self.state.zoom_in():
            self._scale_changed()

    def zoom_out(self):
        if self.state.zoom_out():
            self._scale_changed()

    def reset_view(self):
        self.state.reset()
        self.setCursor(Qt.OpenHandCursor)
        self._scale_changed()

    def export_image(self, mime_type: str = "image/png", quality: float = 1.0) -> Optional[str]:
        """Data URI of the current frame, or None while no surface is mounted."""
        if self.surface is None:
            return None
        uri = self.surface.to_data_uri(mime_type, quality)
        log.debug("exported %s, %d chars", mime_type, len(uri))
        return uri

    def save_image(self, path: str, quality: float = 1.0) -> bool:
        if self.surface is None:
            return False
        return self.surface.save(path, quality)

    # ---- rendering ----
    def device_ratio(self) -> float:
        try:
            ratio = float(self.devicePixelRatioF())
        except (AttributeError, RuntimeError, TypeError, ValueError) as exc:
            log.warning("devicePixelRatioF unavailable, defaulting to 1.0: %s", exc)
            ratio = 1.0
        return ratio if ratio > 0.0 else 1.0

    def redraw(self):
        if self.floor is not None:
            if self.surface is None:
                self.surface = PlanSurface(self.width(), self.height(), self.device_ratio())
            with self.surface.painter() as p:
                render_plan(p, self.floor, self.state.scale, self.state.offset,
                            self.flags, self.surface.logical)
        self.update()

    def _scale_changed(self):
        self.badge.set_scale(self.state.scale)
        self.scaleChanged.emit(self.state.scale)
        self.redraw()

    # ---- Qt events ----
    def resizeEvent(self, event):
        super().resizeEvent(event)
        size = event.size()
        # backing store first, then the repaint
        if self.surface is not None:
            self.surface.resize(size.width(), size.height(), self.device_ratio())
        self.redraw()
        self.hud.reposition()
        self.badge.reposition()

    def paintEvent(self, event):
        p = QPainter(self)
        if self.mode == ViewMode.EMPTY or self.surface is None:
            p.fillRect(self.rect(), PLACEHOLDER_BG)
            p.setPen(PLACEHOLDER_TEXT)
            f = QFont(); f.setPixelSize(18); f.setBold(True); p.setFont(f)
            r = QRectF(self.rect())
            p.drawText(r.adjusted(0, 0, 0, -24), Qt.AlignCenter, PLACEHOLDER_TITLE)
            f.setPixelSize(13); f.setBold(False); p.setFont(f)
            p.drawText(r.adjusted(0, 24, 0, 0), Qt.AlignCenter, PLACEHOLDER_HINT)
        else:
            s = self.surface.logical
            p.drawImage(QRectF(0, 0, s.width(), s.height()), self.surface.image)
        p.end()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() in (Qt.LeftButton, Qt.MiddleButton):
            self.state.pan_start(event.position())
            self.setCursor(Qt.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        if self.floor is not None:
            pt = self.state.to_plan(event.position())
            self.cursorMoved.emit(pt.x(), pt.y())
        if self.state.pan_move(event.position()):
            self.redraw()
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        self._end_pan()
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        self._end_pan()
        super().leaveEvent(event)

    def _end_pan(self):
        if self.state.is_dragging:
            self.state.pan_end()
            self.setCursor(Qt.OpenHandCursor)

    def wheelEvent(self, event: QWheelEvent):
        d = event.angleDelta()
        # horizontal-only scrolling (and Alt, which Qt reports on x) still zooms
        if self.state.wheel_zoom(d.y() or d.x()):
            self._scale_changed()
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        key = int(event.key())
        if key in _KEY_PAN:
            self.state.pan_by(*_KEY_PAN[key])
            self.redraw()
        elif key in (Qt.Key_Plus, Qt.Key_Equal):
            self.zoom_in()
        elif key == Qt.Key_Minus:
            self.zoom_out()
        elif key == Qt.Key_0:
            self.reset_view()
        else:
            super().keyPressEvent(event)
            return
        event.accept()
