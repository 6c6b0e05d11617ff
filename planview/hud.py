from __future__ import annotations
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QVBoxLayout, QToolButton, QLabel

from .utils import round_half_up

HUD_MARGIN = 16


def scale_text(scale: float) -> str:
    return f"Scale: 1:{round_half_up(100 / scale)} | {scale:.1f}px/ft"


class ZoomHUD(QWidget):
    """Zoom buttons (+, -, FIT) pinned to the bottom-right corner of the canvas."""

    def __init__(self, canvas):
        super().__init__(canvas)
        self.canvas = canvas
        self.setObjectName("ZoomHUD")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet("""
            QWidget#ZoomHUD { background: transparent; }
            QToolButton.zoom { background: #ffffff; border:1px solid #e5e7eb; border-radius:4px;
                               font-weight:700; }
            QToolButton.zoom:hover { background:#f9fafb; }
        """)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(8)

        self.btn_in = QToolButton(self)
        self.btn_out = QToolButton(self)
        self.btn_fit = QToolButton(self)
        buttons = [
            (self.btn_in,  "+",   "Zoom in",    canvas.zoom_in),
            (self.btn_out, "-",   "Zoom out",   canvas.zoom_out),
            (self.btn_fit, "FIT", "Reset view", canvas.reset_view),
        ]
        for btn, text, tooltip, slot in buttons:
            btn.setProperty("class", "zoom")
            btn.setText(text)
            btn.setToolTip(tooltip)
            btn.setFixedSize(32, 32)
            btn.clicked.connect(lambda _=False, fn=slot: fn())
            lay.addWidget(btn)

        self.adjustSize()
        self.show()
        self.raise_()

    def reposition(self):
        self.move(self.canvas.width() - self.width() - HUD_MARGIN,
                  self.canvas.height() - self.height() - HUD_MARGIN)


class ScaleBadge(QLabel):
    """Scale indicator in the bottom-left corner."""

    def __init__(self, canvas):
        super().__init__(canvas)
        self.canvas = canvas
        self.setObjectName("ScaleBadge")
        self.setStyleSheet("QLabel#ScaleBadge { background: rgba(255,255,255,0.9); border:1px solid #e5e7eb;"
                           " border-radius:4px; padding:2px 8px; font-size:11px; }")
        self.set_scale(canvas.state.scale)
        self.show()

    def set_scale(self, scale: float):
        self.setText(scale_text(scale))
        self.adjustSize()
        self.reposition()

    def reposition(self):
        self.move(HUD_MARGIN, self.canvas.height() - self.height() - HUD_MARGIN)
