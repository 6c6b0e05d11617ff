"""Tests for planview/view.py: the interactive canvas and its control surface."""
import base64
import pytest
from PySide6.QtCore import Qt, QEvent, QPoint, QPointF, QSize
from PySide6.QtGui import QImage, QMouseEvent, QWheelEvent, QKeyEvent, QResizeEvent

from planview.view import PlanCanvas
from planview.models import DisplayFlags, ViewMode
from planview.hud import scale_text
from planview.utils import MIN_SCALE, MAX_SCALE


@pytest.fixture
def canvas(qapp):
    c = PlanCanvas()
    c.resize(400, 300)
    yield c
    c.close()


def _decode(uri: str) -> QImage:
    header, payload = uri.split(",", 1)
    img = QImage()
    assert img.loadFromData(base64.b64decode(payload))
    return img


def _mouse(kind, x, y, button=Qt.LeftButton):
    pos = QPointF(x, y)
    buttons = button if kind != QEvent.MouseButtonRelease else Qt.NoButton
    return QMouseEvent(kind, pos, pos, button, buttons, Qt.NoModifier)


def _wheel(dy, dx=0):
    pos = QPointF(100, 100)
    return QWheelEvent(pos, pos, QPoint(0, 0), QPoint(dx, dy), Qt.NoButton, Qt.NoModifier,
                       Qt.NoScrollPhase, False)


class TestViewMode:
    def test_starts_empty(self, canvas):
        assert canvas.mode == ViewMode.EMPTY
        assert canvas.surface is None

    def test_layout_renders(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        assert canvas.mode == ViewMode.RENDERED
        assert canvas.surface is not None

    def test_null_layout_back_to_empty(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        canvas.set_layout(None)
        assert canvas.mode == ViewMode.EMPTY

    def test_layout_changed_signal(self, canvas, bedroom_layout):
        seen = []
        canvas.layoutChanged.connect(seen.append)
        canvas.set_layout(bedroom_layout)
        canvas.set_layout(None)
        assert seen == [bedroom_layout, None]

    def test_set_result_picks_floor(self, canvas, two_floor_result):
        canvas.set_result(two_floor_result, 1)
        assert canvas.floor is two_floor_result.floors[1]
        canvas.set_result(two_floor_result, 5)
        assert canvas.floor is None
        assert canvas.mode == ViewMode.EMPTY

    def test_zero_room_layout_is_rendered(self, canvas):
        from planview.models import FloorLayout, BoundingBox
        canvas.set_layout(FloorLayout("Roof", BoundingBox(10, 10)))
        assert canvas.mode == ViewMode.RENDERED


class TestExport:
    def test_none_before_layout(self, canvas):
        assert canvas.export_image() is None
        assert canvas.save_image("unused.png") is False

    def test_png_after_render(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        uri = canvas.export_image()
        assert uri.startswith("data:image/png;base64,")
        img = _decode(uri)
        dpr = canvas.device_ratio()
        assert img.width() == round(400 * dpr)
        assert img.height() == round(300 * dpr)

    def test_still_available_after_clear(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        canvas.set_layout(None)
        assert canvas.export_image() is not None

    def test_jpeg(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        uri = canvas.export_image("image/jpeg", 0.9)
        assert uri.startswith("data:image/jpeg;base64,")
        assert not _decode(uri).isNull()

    def test_unknown_type_falls_back_to_png(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        assert canvas.export_image("image/x-nope").startswith("data:image/png;base64,")

    def test_save_image(self, canvas, bedroom_layout, tmp_path):
        canvas.set_layout(bedroom_layout)
        path = tmp_path / "plan.png"
        assert canvas.save_image(str(path))
        assert path.stat().st_size > 0


class TestControls:
    def test_zoom_buttons_clamped(self, canvas):
        for _ in range(40):
            canvas.zoom_in()
        assert canvas.state.scale == MAX_SCALE
        for _ in range(80):
            canvas.zoom_out()
        assert canvas.state.scale == MIN_SCALE

    def test_scale_changed_signal(self, canvas):
        seen = []
        canvas.scaleChanged.connect(seen.append)
        canvas.zoom_in()
        assert seen == [pytest.approx(12.0)]
        assert canvas.badge.text() == scale_text(canvas.state.scale)

    def test_reset_view(self, qapp):
        c = PlanCanvas(DisplayFlags(scale=16))
        c.zoom_in(); c.state.pan_by(120, 40)
        c.reset_view()
        assert c.state.scale == 16
        assert (c.state.offset.x(), c.state.offset.y()) == (50, 50)
        c.close()

    def test_flags_scale_sets_reset_target(self, canvas):
        canvas.set_flags(scale=20)
        canvas.reset_view()
        assert canvas.state.scale == 20

    def test_set_flags_toggles(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        canvas.set_flags(show_grid=False, show_dimensions=False)
        assert not canvas.flags.show_grid
        assert not canvas.flags.show_dimensions
        assert canvas.flags.show_room_labels

    def test_flags_copied(self, qapp):
        flags = DisplayFlags()
        c = PlanCanvas(flags)
        c.set_flags(show_grid=False)
        assert flags.show_grid
        c.close()


class TestInput:
    def test_drag_pans(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        canvas.mousePressEvent(_mouse(QEvent.MouseButtonPress, 100, 100))
        assert canvas.state.is_dragging
        canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 140, 90))
        canvas.mouseReleaseEvent(_mouse(QEvent.MouseButtonRelease, 140, 90))
        assert not canvas.state.is_dragging
        assert (canvas.state.offset.x(), canvas.state.offset.y()) == (90, 40)

    def test_move_without_press(self, canvas):
        canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 300, 300, Qt.NoButton))
        assert (canvas.state.offset.x(), canvas.state.offset.y()) == (50, 50)

    def test_leave_ends_drag(self, canvas):
        canvas.mousePressEvent(_mouse(QEvent.MouseButtonPress, 10, 10))
        canvas.leaveEvent(QEvent(QEvent.Leave))
        assert not canvas.state.is_dragging

    def test_wheel_zoom(self, canvas):
        canvas.wheelEvent(_wheel(-120))
        assert canvas.state.scale == pytest.approx(9.0)
        canvas.wheelEvent(_wheel(120))
        assert canvas.state.scale == pytest.approx(9.9)

    def test_horizontal_wheel_zooms(self, canvas):
        canvas.wheelEvent(_wheel(0, -120))
        assert canvas.state.scale == pytest.approx(9.0)
        canvas.wheelEvent(_wheel(0, 0))
        assert canvas.state.scale == pytest.approx(9.0)

    def test_cursor_reports_plan_feet(self, canvas, bedroom_layout):
        seen = []
        canvas.cursorMoved.connect(lambda x, y: seen.append((x, y)))
        canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 80, 110, Qt.NoButton))
        assert seen == []
        canvas.set_layout(bedroom_layout)
        canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 80, 110, Qt.NoButton))
        assert seen == [(pytest.approx(3.0), pytest.approx(6.0))]

    def test_wheel_event_consumed(self, canvas):
        ev = _wheel(120)
        canvas.wheelEvent(ev)
        assert ev.isAccepted()

    def test_arrow_keys_pan(self, canvas):
        canvas.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_Left, Qt.NoModifier))
        canvas.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_Up, Qt.NoModifier))
        assert (canvas.state.offset.x(), canvas.state.offset.y()) == (70, 70)

    def test_resize_rebuilds_surface(self, canvas, bedroom_layout):
        canvas.set_layout(bedroom_layout)
        canvas.resizeEvent(QResizeEvent(QSize(800, 500), QSize(400, 300)))
        dpr = canvas.device_ratio()
        assert canvas.surface.image.width() == round(800 * dpr)
        assert canvas.surface.image.height() == round(500 * dpr)
        assert canvas.surface.logical.width() == 800

    def test_resize_before_layout(self, canvas):
        canvas.resizeEvent(QResizeEvent(QSize(800, 500), QSize(400, 300)))
        assert canvas.surface is None


class TestHud:
    def test_scale_text(self):
        assert scale_text(10) == "Scale: 1:10 | 10.0px/ft"
        assert scale_text(2) == "Scale: 1:50 | 2.0px/ft"
        assert scale_text(8) == "Scale: 1:13 | 8.0px/ft"

    def test_buttons_drive_canvas(self, canvas):
        canvas.hud.btn_in.click()
        assert canvas.state.scale == pytest.approx(12.0)
        canvas.hud.btn_fit.click()
        assert canvas.state.scale == 10
