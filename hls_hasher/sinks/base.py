"""The sink contract shared by every artifact destination."""

from __future__ import annotations

import posixpath
from typing import Awaitable, Callable

Sink = Callable[[str, bytes], Awaitable[None]]


def scoped_sink(sink: Sink, prefix: str) -> Sink:
    """Wraps ``sink`` so every relative path is written under ``prefix``."""

    async def write(path: str, content: bytes) -> None:
        await sink(posixpath.join(prefix, path), content)

    return write
