from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Union

from .models import LayoutError, LayoutResult

log = logging.getLogger(__name__)


def parse_layout(text: str) -> LayoutResult:
    """Parse layout-engine JSON: either {"floors": [...]} or a single floor object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LayoutError(f"invalid JSON at line {e.lineno}: {e.msg}") from e
    result = LayoutResult.from_dict(data)
    for w in result.warnings:
        log.warning("layout engine warning: %s", w)
    for err in result.errors:
        log.error("layout engine error: %s", err)
    return result


def load_layout(path: Union[str, Path]) -> LayoutResult:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        result = parse_layout(f.read())
    log.info("loaded %s: %d floor(s)", path.name, len(result.floors))
    return result
