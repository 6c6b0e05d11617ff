from __future__ import annotations
from PySide6.QtCore import QSettings

from .models import DisplayFlags
from .utils import DEFAULT_SCALE, clamp_scale

ORGANIZATION = "PlanView"
APPLICATION = "Viewer"


def _bool(v, default: bool) -> bool:
    # QSettings hands back "true"/"false" strings on some backends
    if v is None:
        return default
    if isinstance(v, str):
        return v.lower() in ("1", "true", "yes", "on")
    return bool(v)


class ViewerSettings:
    """Persisted viewer preferences (display flags, initial scale, last folder, log level)."""

    def __init__(self, settings: QSettings | None = None):
        self._st = settings if settings is not None else QSettings(ORGANIZATION, APPLICATION)

    def display_flags(self) -> DisplayFlags:
        st = self._st
        try:
            scale = clamp_scale(float(st.value("view/scale", DEFAULT_SCALE)))
        except (TypeError, ValueError):
            scale = DEFAULT_SCALE
        return DisplayFlags(
            show_grid=_bool(st.value("view/grid"), True),
            show_dimensions=_bool(st.value("view/dimensions"), True),
            show_room_labels=_bool(st.value("view/labels"), True),
            scale=scale,
        )

    def save_display_flags(self, flags: DisplayFlags):
        st = self._st
        st.setValue("view/grid", flags.show_grid)
        st.setValue("view/dimensions", flags.show_dimensions)
        st.setValue("view/labels", flags.show_room_labels)
        st.setValue("view/scale", flags.scale)

    @property
    def last_dir(self) -> str:
        return str(self._st.value("files/last_dir", ""))

    @last_dir.setter
    def last_dir(self, path: str):
        self._st.setValue("files/last_dir", path)

    @property
    def log_level(self) -> str:
        return str(self._st.value("app/log_level", "INFO")).upper()

    def sync(self):
        self._st.sync()
