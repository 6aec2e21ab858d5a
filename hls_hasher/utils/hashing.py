"""Content hashing used to name every converted artifact."""

from __future__ import annotations

import hashlib


def content_hash(data: bytes | str) -> str:
    """Returns the lowercase hex SHA-256 digest of ``data`` (text is UTF-8 encoded)."""

    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def artifact_name(digest: str, extension: str) -> str:
    return f"{digest}.{extension}"
