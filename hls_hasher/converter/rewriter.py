"""Line-scoped replacement of playlist references."""

from __future__ import annotations

from typing import Union

from ..errors import ParseFailure
from ..models import SegmentRef, VariantRef

Reference = Union[SegmentRef, VariantRef]


def replace_reference(text: str, reference: Reference, new_uri: str) -> str:
    """Returns ``text`` with the reference's URI swapped for ``new_uri``.

    Only the first literal occurrence on the reference's own line is
    replaced; every other byte of the document, line endings included, is
    preserved.
    """

    lines = text.splitlines(keepends=True)
    if reference.line >= len(lines) or reference.uri not in lines[reference.line]:
        raise ParseFailure(f"Line {reference.line + 1}: reference {reference.uri!r} not found")
    lines[reference.line] = lines[reference.line].replace(reference.uri, new_uri, 1)
    return "".join(lines)
