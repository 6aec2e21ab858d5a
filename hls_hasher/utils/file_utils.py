"""Filesystem helpers for preparing output folders and safe names."""

from __future__ import annotations

import re
from pathlib import Path

INVALID_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|]")


def sanitize_filename(value: str, default: str = "file") -> str:
    """Removes characters that are invalid on most filesystems."""

    sanitized = INVALID_FILENAME_CHARS.sub("", value or "").strip().strip(".")
    return sanitized or default


def ensure_directory(path: str) -> str:
    """Creates a directory (and its parents) if needed."""

    Path(path).mkdir(parents=True, exist_ok=True)
    return path
