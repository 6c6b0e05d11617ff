#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
import sys, os, logging
from typing import Optional
from PySide6.QtCore import Qt, QSizeF
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QToolBar, QStatusBar, QFileDialog, QMessageBox,
    QStyle, QToolButton, QMenu, QWidgetAction, QLabel
)
from planview import PlanCanvas, LayoutResult, LayoutError, ViewerSettings, load_layout
from planview.utils import format_feet

log = logging.getLogger("floorplan_viewer")


def _ensure_ext(path: str, ext: str) -> str:
    ext = ext.lower()
    return path if path.lower().endswith(ext) else path + ext


class MainWindow(QMainWindow):
    def __init__(self, settings: Optional[ViewerSettings] = None):
        super().__init__()
        self.setWindowTitle("Floor Plan Viewer")
        self.resize(1280, 860)
        self.settings = settings or ViewerSettings()
        self.result: Optional[LayoutResult] = None
        self.floor_index = 0

        self.canvas = PlanCanvas(self.settings.display_flags())
        self.setCentralWidget(self.canvas)

        self._build_toolbar()
        self.setStatusBar(QStatusBar(self))
        self.cursor_label = QLabel("", self)
        self.statusBar().addPermanentWidget(self.cursor_label)
        self.canvas.cursorMoved.connect(self._show_cursor)
        self.canvas.scaleChanged.connect(lambda _s: self._update_status())
        self.canvas.layoutChanged.connect(lambda _l: self._update_status())
        self._update_status()

    def _sep_label(self, tb: QToolBar, text: str):
        lbl = QLabel(f"  {text}  ")
        lbl.setStyleSheet("color:#667085; font-weight:600;")
        wa = QWidgetAction(self)
        wa.setDefaultWidget(lbl)
        tb.addAction(wa)

    def _build_toolbar(self):
        tb = QToolBar("Toolbar", self)
        tb.setMovable(False)
        tb.setIconSize(QSizeF(18, 18).toSize())
        tb.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self.addToolBar(Qt.TopToolBarArea, tb)
        style = self.style()

        # ----- actions -----
        self.act_open = QAction(style.standardIcon(QStyle.SP_DirOpenIcon), "Open layout…", self)
        self.act_open.setShortcut(QKeySequence("Ctrl+O"))
        self.act_open.triggered.connect(self._open_layout_dialog)

        self.act_export_png = QAction(style.standardIcon(QStyle.SP_DialogSaveButton), "Export PNG…", self)
        self.act_export_png.setShortcut(QKeySequence("Ctrl+E"))
        self.act_export_png.triggered.connect(lambda: self._export_dialog("png"))

        self.act_export_jpg = QAction("Export JPEG…", self)
        self.act_export_jpg.triggered.connect(lambda: self._export_dialog("jpg"))

        self.act_zoom_in = QAction("Zoom in", self)
        self.act_zoom_in.setShortcut(QKeySequence(QKeySequence.ZoomIn))
        self.act_zoom_in.triggered.connect(self.canvas.zoom_in)

        self.act_zoom_out = QAction("Zoom out", self)
        self.act_zoom_out.setShortcut(QKeySequence(QKeySequence.ZoomOut))
        self.act_zoom_out.triggered.connect(self.canvas.zoom_out)

        self.act_reset = QAction(style.standardIcon(QStyle.SP_BrowserReload), "Reset view", self)
        self.act_reset.setShortcut(QKeySequence("Ctrl+0"))
        self.act_reset.triggered.connect(self.canvas.reset_view)

        flags = self.canvas.flags
        self.act_grid = QAction("Grid", self, checkable=True)
        self.act_grid.setChecked(flags.show_grid)
        self.act_grid.toggled.connect(lambda on: self._set_flag(show_grid=on))

        self.act_dims = QAction("Dimensions", self, checkable=True)
        self.act_dims.setChecked(flags.show_dimensions)
        self.act_dims.toggled.connect(lambda on: self._set_flag(show_dimensions=on))

        self.act_labels = QAction("Room labels", self, checkable=True)
        self.act_labels.setChecked(flags.show_room_labels)
        self.act_labels.toggled.connect(lambda on: self._set_flag(show_room_labels=on))

        self.act_prev = QAction(style.standardIcon(QStyle.SP_ArrowBack), "Previous floor", self)
        self.act_prev.setShortcut(QKeySequence("PgUp"))
        self.act_prev.triggered.connect(lambda: self._go_floor(self.floor_index - 1))

        self.act_next = QAction(style.standardIcon(QStyle.SP_ArrowForward), "Next floor", self)
        self.act_next.setShortcut(QKeySequence("PgDown"))
        self.act_next.triggered.connect(lambda: self._go_floor(self.floor_index + 1))

        # ----- menu buttons -----
        def add_menu_button(title: str, fallback, menu_builder):
            btn = QToolButton(self)
            btn.setText(title)
            btn.setIcon(style.standardIcon(fallback))
            btn.setPopupMode(QToolButton.InstantPopup)
            btn.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
            m = QMenu(btn); menu_builder(m)
            btn.setMenu(m)
            wa = QWidgetAction(self); wa.setDefaultWidget(btn)
            tb.addAction(wa)

        def build_file_menu(m: QMenu):
            m.addAction(self.act_open)
            m.addSeparator()
            m.addAction(self.act_export_png)
            m.addAction(self.act_export_jpg)
        add_menu_button("File", QStyle.SP_DirOpenIcon, build_file_menu)

        def build_view_menu(m: QMenu):
            m.addAction(self.act_grid)
            m.addAction(self.act_dims)
            m.addAction(self.act_labels)
            m.addSeparator()
            m.addAction(self.act_zoom_in)
            m.addAction(self.act_zoom_out)
            m.addAction(self.act_reset)
        add_menu_button("View", QStyle.SP_DesktopIcon, build_view_menu)

        tb.addSeparator()
        self._sep_label(tb, "Floor")
        tb.addAction(self.act_prev)
        tb.addAction(self.act_next)
        self._sync_floor_actions()

    # ---- layout ----
    def _open_layout_dialog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open layout", self.settings.last_dir, "Layout JSON (*.json)")
        if not path:
            return
        self.open_layout(path)

    def open_layout(self, path: str) -> bool:
        try:
            result = load_layout(path)
        except (OSError, LayoutError) as e:
            log.error("could not open %s: %s", path, e)
            QMessageBox.critical(self, "Open failed", str(e))
            return False
        self.settings.last_dir = os.path.dirname(os.path.abspath(path))
        self.set_result(result)
        self._status(f"Opened: {os.path.basename(path)}")
        return True

    def set_result(self, result: Optional[LayoutResult], floor_index: int = 0):
        self.result = result
        self.floor_index = floor_index
        self.canvas.set_result(result, floor_index)
        self._sync_floor_actions()

    def _go_floor(self, index: int):
        if not self.result or not (0 <= index < len(self.result.floors)):
            return
        self.floor_index = index
        self.canvas.set_result(self.result, index)
        self._sync_floor_actions()

    def _sync_floor_actions(self):
        n = len(self.result.floors) if self.result else 0
        self.act_prev.setEnabled(self.floor_index > 0)
        self.act_next.setEnabled(self.floor_index < n - 1)

    def _set_flag(self, **changes):
        self.canvas.set_flags(**changes)
        self.settings.save_display_flags(self.canvas.flags)

    # ---- export ----
    def _export_dialog(self, kind: str):
        if self.canvas.surface is None:
            QMessageBox.information(self, "Nothing to export", "Load a layout first.")
            return
        level = self.canvas.floor.level if self.canvas.floor else "floor"
        if kind == "png":
            name, filt, ext, quality = f"{level}-floor-plan.png", "PNG (*.png)", ".png", 1.0
        else:
            name, filt, ext, quality = f"{level}-floor-plan.jpg", "JPEG (*.jpg *.jpeg)", ".jpg", 0.9
        path, _ = QFileDialog.getSaveFileName(self, "Export image",
                                              os.path.join(self.settings.last_dir, name), filt)
        if not path:
            return
        if not path.lower().endswith((".jpg", ".jpeg")):
            path = _ensure_ext(path, ext)
        if self.canvas.save_image(path, quality):
            self._status(f"Exported: {os.path.basename(path)}")
        else:
            QMessageBox.critical(self, "Export failed", f"Could not write {path}")

    # ---- status ----
    def _status(self, text: str):
        self.statusBar().showMessage(text, 3000)

    def _show_cursor(self, x_ft: float, y_ft: float):
        self.cursor_label.setText(f"x {format_feet(x_ft)}  y {format_feet(y_ft)}")

    def _update_status(self):
        floor = self.canvas.floor
        n = len(self.result.floors) if self.result else 0
        where = (f"Level: {floor.level} ({self.floor_index + 1}/{n}) | Rooms: {len(floor.rooms)}"
                 if floor else "No layout")
        self.statusBar().showMessage(f"{where} | Scale: {self.canvas.state.scale:.1f} px/ft")


def main():
    app = QApplication(sys.argv)
    settings = ViewerSettings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    win = MainWindow(settings)
    win.show()
    if len(sys.argv) > 1:
        win.open_layout(sys.argv[1])
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
