"""Note file names derived from page titles."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

MAX_FILE_NAME_LENGTH = 100

_ILLEGAL = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")


def generate_file_name(title: str, now: Optional[datetime] = None) -> str:
    """
    Turn a title into a safe file name stem (no extension).

    Illegal path characters are dropped, whitespace collapsed and the
    result capped at 100 characters. Titles with nothing left fall back to
    ``web-clip-<timestamp>``.
    """
    name = _ILLEGAL.sub("", title or "")
    name = _WHITESPACE.sub(" ", name).strip()
    name = name[:MAX_FILE_NAME_LENGTH].strip()
    if name:
        return name
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return f"web-clip-{stamp}"
