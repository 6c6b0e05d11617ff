"""Layered floor-plan painter.

`render_plan` repaints everything, back to front, in a fixed order:
background, grid, rooms, walls, doors, windows, room labels, dimensions,
corridors, stairs, title. Later layers may cover earlier ones. There is no
partial repaint; a redraw is the whole sequence.

Plan coordinates are feet with a top-left origin. Each layer multiplies by
`scale` itself, and the pan offset is applied once as a painter translation,
so every layer shares one transform.
"""
from __future__ import annotations
import logging
import math
from contextlib import contextmanager
from typing import Iterator, List, NamedTuple, Optional, Tuple

from PySide6.QtCore import Qt, QPointF, QRectF, QSizeF
from PySide6.QtGui import QFont, QPainter, QPen

from .models import BoundingBox, DisplayFlags, FloorLayout, Opening, Rect, RoomLayout, WallLayout
from .utils import (BG_COLOR, GRID_COLOR, GRID_WIDTH, GRID_FEET, ROOM_BORDER, TEXT_COLOR,
                    AREA_TEXT_COLOR, DIMENSION_COLOR, DOOR_COLOR, WINDOW_COLOR, OPENING_CUT,
                    CORRIDOR_COLOR, STAIRS_COLOR, STAIR_STEPS, DIM_GAP, DIM_TICK, DIM_LABEL_GAP,
                    LABEL_LINE_GAP, TITLE_POS, FONT_FAMILY,
                    room_color, wall_color, normalize_rotation, format_feet)

log = logging.getLogger(__name__)

Segment = Tuple[QPointF, QPointF]


class DimensionRun(NamedTuple):
    line: Segment
    ticks: Tuple[Segment, Segment]
    label: str
    label_pos: QPointF
    vertical: bool


@contextmanager
def scoped_transform(painter: QPainter) -> Iterator[QPainter]:
    """save() on entry, restore() on exit, even when the body raises."""
    painter.save()
    try:
        yield painter
    finally:
        painter.restore()


def _font(px: int, bold: bool = False) -> QFont:
    f = QFont(FONT_FAMILY)
    f.setPixelSize(px)
    f.setBold(bold)
    return f


def _draw_centered_text(painter: QPainter, center: QPointF, text: str):
    box = QRectF(center.x() - 500.0, center.y() - 50.0, 1000.0, 100.0)
    painter.drawText(box, Qt.AlignCenter, text)


# ===== Geometry =====

def grid_lines(bbox: BoundingBox, scale: float) -> Tuple[List[float], List[float]]:
    """Pixel positions of vertical (xs) and horizontal (ys) grid lines, bounds inclusive."""
    nx = int(math.floor(bbox.width / GRID_FEET))
    ny = int(math.floor(bbox.height / GRID_FEET))
    xs = [i * GRID_FEET * scale for i in range(nx + 1)]
    ys = [j * GRID_FEET * scale for j in range(ny + 1)]
    return xs, ys


def room_rect(room: RoomLayout, scale: float) -> QRectF:
    return QRectF(room.x * scale, room.y * scale, room.width * scale, room.height * scale)


def rect_px(rect: Rect, scale: float) -> QRectF:
    return QRectF(rect.x * scale, rect.y * scale, rect.width * scale, rect.height * scale)


def dimension_runs(bbox: BoundingBox, scale: float) -> Tuple[DimensionRun, DimensionRun]:
    """Bottom (width) and right (height) dimension runs of the bounding box."""
    w, h = bbox.width * scale, bbox.height * scale

    by = h + DIM_GAP
    bottom = DimensionRun(
        line=(QPointF(0, by), QPointF(w, by)),
        ticks=((QPointF(0, by - DIM_TICK), QPointF(0, by + DIM_TICK)),
               (QPointF(w, by - DIM_TICK), QPointF(w, by + DIM_TICK))),
        label=format_feet(bbox.width),
        label_pos=QPointF(w / 2, by + DIM_LABEL_GAP),
        vertical=False,
    )

    rx = w + DIM_GAP
    right = DimensionRun(
        line=(QPointF(rx, 0), QPointF(rx, h)),
        ticks=((QPointF(rx - DIM_TICK, 0), QPointF(rx + DIM_TICK, 0)),
               (QPointF(rx - DIM_TICK, h), QPointF(rx + DIM_TICK, h))),
        label=format_feet(bbox.height),
        label_pos=QPointF(rx + DIM_LABEL_GAP, h / 2),
        vertical=True,
    )
    return bottom, right


def stair_treads(stairs: Rect, scale: float, steps: int = STAIR_STEPS) -> List[float]:
    """Pixel y of the inner tread lines; `steps` treads need steps - 1 lines."""
    step_h = stairs.height / steps
    return [(stairs.y + i * step_h) * scale for i in range(1, steps)]


# ===== Layers =====

def draw_background(painter: QPainter, size: QSizeF):
    painter.fillRect(QRectF(0, 0, size.width(), size.height()), BG_COLOR)


def draw_grid(painter: QPainter, bbox: BoundingBox, scale: float):
    xs, ys = grid_lines(bbox, scale)
    w, h = bbox.width * scale, bbox.height * scale
    painter.setPen(QPen(GRID_COLOR, GRID_WIDTH))
    for x in xs:
        painter.drawLine(QPointF(x, 0), QPointF(x, h))
    for y in ys:
        painter.drawLine(QPointF(0, y), QPointF(w, y))


def draw_room(painter: QPainter, room: RoomLayout, scale: float):
    painter.setPen(QPen(ROOM_BORDER, 1))
    painter.setBrush(room_color(room.type))
    painter.drawRect(room_rect(room, scale))


def draw_wall(painter: QPainter, wall: WallLayout, scale: float):
    # square caps so adjoining segments meet flush
    painter.setPen(QPen(wall_color(wall.type), wall.thickness * scale, Qt.SolidLine, Qt.SquareCap))
    painter.drawLine(QPointF(wall.x1 * scale, wall.y1 * scale),
                     QPointF(wall.x2 * scale, wall.y2 * scale))


def draw_door(painter: QPainter, door: Opening, scale: float):
    w, h = door.width * scale, door.height * scale
    with scoped_transform(painter):
        painter.translate(door.x * scale, door.y * scale)
        painter.rotate(normalize_rotation(door.rotation))
        painter.fillRect(QRectF(0, -h / 2, w, h), OPENING_CUT)
        painter.setPen(QPen(DOOR_COLOR, 2))
        painter.setBrush(Qt.NoBrush)
        # quarter swing from straight up to the leaf, Qt angles are 1/16 deg
        painter.drawArc(QRectF(-w, -w, 2 * w, 2 * w), 0, 90 * 16)
        painter.drawLine(QPointF(0, 0), QPointF(w, 0))


def draw_window(painter: QPainter, window: Opening, scale: float):
    w, h = window.width * scale, window.height * scale
    with scoped_transform(painter):
        painter.translate(window.x * scale, window.y * scale)
        painter.rotate(normalize_rotation(window.rotation))
        painter.fillRect(QRectF(0, 0, w, h), WINDOW_COLOR)
        painter.setPen(QPen(OPENING_CUT, 2))
        painter.drawLine(QPointF(w / 2, 0), QPointF(w / 2, h))


def draw_room_label(painter: QPainter, room: RoomLayout, scale: float):
    c = room_rect(room, scale).center()
    painter.setPen(TEXT_COLOR)
    painter.setFont(_font(11, bold=True))
    _draw_centered_text(painter, QPointF(c.x(), c.y() - LABEL_LINE_GAP), room.name)
    painter.setPen(AREA_TEXT_COLOR)
    painter.setFont(_font(10))
    _draw_centered_text(painter, QPointF(c.x(), c.y() + LABEL_LINE_GAP), f"{room.area} sqft")


def draw_dimensions(painter: QPainter, bbox: BoundingBox, scale: float):
    painter.setPen(QPen(DIMENSION_COLOR, 1))
    painter.setFont(_font(10))
    for run in dimension_runs(bbox, scale):
        painter.drawLine(*run.line)
        for tick in run.ticks:
            painter.drawLine(*tick)
        if run.vertical:
            with scoped_transform(painter):
                painter.translate(run.label_pos)
                painter.rotate(-90)
                _draw_centered_text(painter, QPointF(0, 0), run.label)
        else:
            _draw_centered_text(painter, run.label_pos, run.label)


def draw_corridor(painter: QPainter, corridor: Rect, scale: float):
    painter.fillRect(rect_px(corridor, scale), CORRIDOR_COLOR)


def draw_stairs(painter: QPainter, stairs: Rect, scale: float):
    r = rect_px(stairs, scale)
    painter.fillRect(r, STAIRS_COLOR)
    painter.setPen(QPen(ROOM_BORDER, 1))
    for y in stair_treads(stairs, scale):
        painter.drawLine(QPointF(r.left(), y), QPointF(r.right(), y))
    painter.setPen(TEXT_COLOR)
    painter.setFont(_font(10, bold=True))
    _draw_centered_text(painter, r.center(), "STAIRS")


def draw_title(painter: QPainter, level: str):
    painter.setPen(TEXT_COLOR)
    painter.setFont(_font(16, bold=True))
    painter.drawText(TITLE_POS, f"{level} Floor Plan")


def render_plan(painter: QPainter, layout: FloorLayout, scale: float, offset: QPointF,
                flags: Optional[DisplayFlags] = None, size: Optional[QSizeF] = None):
    """Paint one full frame of `layout`. Same inputs give the same pixels."""
    flags = flags or DisplayFlags()
    if size is None:
        size = QSizeF(painter.device().width(), painter.device().height())

    draw_background(painter, size)

    with scoped_transform(painter):
        painter.translate(offset)
        bbox = layout.bounding_box

        if flags.show_grid:
            draw_grid(painter, bbox, scale)

        for room in layout.rooms:
            draw_room(painter, room, scale)

        for wall in layout.walls:
            draw_wall(painter, wall, scale)

        for room in layout.rooms:
            for door in room.doors:
                draw_door(painter, door, scale)

        for room in layout.rooms:
            for window in room.windows:
                draw_window(painter, window, scale)

        if flags.show_room_labels:
            for room in layout.rooms:
                draw_room_label(painter, room, scale)

        if flags.show_dimensions:
            draw_dimensions(painter, bbox, scale)

        for corridor in layout.circulation.corridors:
            draw_corridor(painter, corridor, scale)

        if layout.circulation.stairs is not None:
            draw_stairs(painter, layout.circulation.stairs, scale)

        draw_title(painter, layout.level)

    log.debug("rendered %s: %d rooms, %d walls at %.2f px/ft",
              layout.level, len(layout.rooms), len(layout.walls), scale)
