"""Rewrite HLS playlist trees into content-addressed (sha256-named) mirrors."""

from .converter import PlaylistConverter
from .errors import ConversionError, ParseFailure, ReadFailure, ResolveFailure, WriteFailure
from .models import Locator

__all__ = [
    "PlaylistConverter",
    "Locator",
    "ConversionError",
    "ReadFailure",
    "ParseFailure",
    "WriteFailure",
    "ResolveFailure",
]
