"""Playlist parsing, conversion, and encoding."""

from .hls_encoder import HLSEncoder
from .playlist_converter import LAYOUT_FLAT, LAYOUT_NESTED, LAYOUTS, PlaylistConverter
from .playlist_parser import PlaylistParser
from .rewriter import replace_reference
from .source_reader import SourceReader

__all__ = [
    "HLSEncoder",
    "PlaylistConverter",
    "PlaylistParser",
    "SourceReader",
    "replace_reference",
    "LAYOUTS",
    "LAYOUT_FLAT",
    "LAYOUT_NESTED",
]
