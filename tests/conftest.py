"""Shared fixtures: an offscreen QApplication and sample layouts."""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from planview.models import (FloorLayout, BoundingBox, RoomLayout, WallLayout, Opening,
                             Circulation, Rect, LayoutResult)


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def bedroom_layout():
    """40 x 30 ft plan holding a single 12 x 10 bedroom at the origin."""
    return FloorLayout(
        level="Ground",
        bounding_box=BoundingBox(40, 30),
        rooms=[RoomLayout(name="Bedroom", type="bedroom", x=0, y=0, width=12, height=10)],
    )


@pytest.fixture
def house_layout():
    """Three rooms, four exterior walls, one partition, a corridor and stairs."""
    rooms = [
        RoomLayout("Living Room", "living room", 0, 0, 20, 15,
                   doors=[Opening(8, 15, 3, 0.5, 0, "single")],
                   windows=[Opening(2, 0, 4, 0.5, 0, "double")]),
        RoomLayout("Kitchen", "kitchen", 20, 0, 20, 15,
                   doors=[Opening(20, 5, 3, 0.5, 90, "single")]),
        RoomLayout("Den", "media room", 0, 20, 20, 10,
                   windows=[Opening(0, 22, 4, 0.5, -90, "single")]),
    ]
    walls = [
        WallLayout(0, 0, 40, 0, 0.75, "exterior"),
        WallLayout(40, 0, 40, 30, 0.75, "exterior"),
        WallLayout(40, 30, 0, 30, 0.75, "exterior"),
        WallLayout(0, 30, 0, 0, 0.75, "exterior"),
        WallLayout(20, 0, 20, 15, 0.33, "partition"),
    ]
    return FloorLayout(
        level="First",
        bounding_box=BoundingBox(40, 30),
        rooms=rooms,
        walls=walls,
        circulation=Circulation(corridors=[Rect(0, 15, 40, 5)], stairs=Rect(30, 20, 8, 10)),
    )


@pytest.fixture
def two_floor_result(house_layout, bedroom_layout):
    return LayoutResult(floors=[house_layout, bedroom_layout], plot_width=40, plot_height=30)
