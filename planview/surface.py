from __future__ import annotations
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QSizeF
from PySide6.QtGui import QImage, QImageWriter, QPainter

from .utils import BG_COLOR, clamp

log = logging.getLogger(__name__)

MIME_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
}
LOSSY_FORMATS = {"JPEG", "WEBP"}
SUFFIX_FORMATS = {".png": "PNG", ".jpg": "JPEG", ".jpeg": "JPEG", ".webp": "WEBP"}


def _writable(fmt: str) -> bool:
    return fmt.lower().encode() in {bytes(f).lower() for f in QImageWriter.supportedImageFormats()}


def resolve_format(mime_type: Optional[str]) -> Tuple[str, str]:
    """(mime, Qt format) to encode with; unknown or unavailable types fall back to PNG."""
    mime = (mime_type or "image/png").lower()
    fmt = MIME_FORMATS.get(mime)
    if fmt is None or not _writable(fmt):
        if mime != "image/png":
            log.warning("image type %r not available, exporting PNG instead", mime_type)
        return "image/png", "PNG"
    if mime == "image/jpg":
        mime = "image/jpeg"
    return mime, fmt


def qt_quality(fmt: str, quality: float) -> int:
    if fmt not in LOSSY_FORMATS:
        return -1
    return int(round(clamp(float(quality), 0.0, 1.0) * 100))


class PlanSurface:
    """Raster backing store sized in physical pixels (logical size x device pixel ratio)."""

    def __init__(self, width: float, height: float, dpr: float = 1.0):
        self.image = QImage()
        self.dpr = 1.0
        self.logical = QSizeF(0, 0)
        self.resize(width, height, dpr)

    def resize(self, width: float, height: float, dpr: float = 1.0):
        dpr = dpr if dpr > 0 else 1.0
        width, height = max(1.0, float(width)), max(1.0, float(height))
        phys_w, phys_h = max(1, round(width * dpr)), max(1, round(height * dpr))
        if self.image.isNull() or self.image.width() != phys_w or self.image.height() != phys_h:
            self.image = QImage(phys_w, phys_h, QImage.Format_ARGB32_Premultiplied)
            self.image.fill(BG_COLOR)
        self.dpr = dpr
        self.logical = QSizeF(width, height)
        log.debug("surface resized to %dx%d px (logical %.0fx%.0f, dpr %.2f)",
                  phys_w, phys_h, width, height, dpr)

    @contextmanager
    def painter(self) -> Iterator[QPainter]:
        """Painter in logical units: the device pixel ratio is applied as a uniform scale."""
        p = QPainter(self.image)
        try:
            p.setRenderHint(QPainter.Antialiasing, True)
            p.setRenderHint(QPainter.TextAntialiasing, True)
            p.scale(self.dpr, self.dpr)
            yield p
        finally:
            p.end()

    def to_data_uri(self, mime_type: str = "image/png", quality: float = 1.0) -> str:
        mime, fmt = resolve_format(mime_type)
        data = QByteArray()
        buf = QBuffer(data)
        buf.open(QIODevice.WriteOnly)
        try:
            self.image.save(buf, fmt, qt_quality(fmt, quality))
        finally:
            buf.close()
        encoded = bytes(data.toBase64()).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    def save(self, path: str, quality: float = 1.0) -> bool:
        fmt = SUFFIX_FORMATS.get(Path(path).suffix.lower(), "PNG")
        ok = self.image.save(path, fmt, qt_quality(fmt, quality))
        if not ok:
            log.error("could not write %s image to %s", fmt, path)
        return ok
