"""Tools for parsing HLS playlist text into master or media manifests."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from ..errors import ParseFailure
from ..models import Manifest, Resolution, SegmentRef, VariantRef

HEADER_TAG = "#EXTM3U"
STREAM_INF_TAG = "#EXT-X-STREAM-INF:"
EXTINF_TAG = "#EXTINF:"
UNFOLLOWED_URI_TAGS = (
    "#EXT-X-MEDIA:",
    "#EXT-X-I-FRAME-STREAM-INF:",
    "#EXT-X-KEY:",
    "#EXT-X-MAP:",
    "#EXT-X-SESSION-KEY:",
)

ATTRIBUTE_RE = re.compile(r'([A-Z0-9-]+)=("[^"\r\n]*"|[^",\s]*)')
RESOLUTION_RE = re.compile(r"^(\d+)x(\d+)$")


def parse_attribute_list(raw: str, line_number: int) -> Dict[str, str]:
    """Parses ``KEY=VALUE,KEY="quoted"`` pairs; quotes are stripped from values."""

    attributes: Dict[str, str] = {}
    position = 0
    raw = raw.strip()
    while position < len(raw):
        match = ATTRIBUTE_RE.match(raw, position)
        if not match:
            raise ParseFailure(f"Line {line_number + 1}: malformed attribute list {raw!r}")
        key, value = match.groups()
        if value.startswith('"'):
            value = value[1:-1]
        attributes[key] = value
        position = match.end()
        if position < len(raw):
            if raw[position] != ",":
                raise ParseFailure(f"Line {line_number + 1}: malformed attribute list {raw!r}")
            position += 1
            while position < len(raw) and raw[position] == " ":
                position += 1
    return attributes


class PlaylistParser:
    """Parses master and media playlists, keeping the line of every reference."""

    def parse(self, text: str) -> Manifest:
        lines = text.splitlines()
        segments: List[SegmentRef] = []
        playlists: List[VariantRef] = []

        header_seen = False
        pending_variant: Optional[Dict[str, str]] = None
        pending_segment: Optional[tuple[float, Optional[str]]] = None
        pending_line = -1

        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if index == 0:
                line = line.lstrip("\ufeff")
            if not line:
                continue

            if not header_seen:
                if line != HEADER_TAG:
                    raise ParseFailure(f"Line {index + 1}: playlist must start with {HEADER_TAG}")
                header_seen = True
                continue

            if line.startswith("#"):
                if line.startswith(STREAM_INF_TAG) or line.startswith(EXTINF_TAG):
                    if pending_variant is not None or pending_segment is not None:
                        raise ParseFailure(f"Line {pending_line + 1}: tag is not followed by a URI")
                    pending_line = index
                    if line.startswith(STREAM_INF_TAG):
                        pending_variant = parse_attribute_list(line[len(STREAM_INF_TAG):], index)
                    else:
                        pending_segment = self._parse_extinf(line[len(EXTINF_TAG):], index)
                elif line.startswith(UNFOLLOWED_URI_TAGS) and "URI=" in line:
                    logging.warning("Line %s: %s is left unchanged", index + 1, line.split(":", 1)[0])
                continue

            if pending_variant is not None:
                playlists.append(self._build_variant(line, index, pending_variant, pending_line))
                pending_variant = None
            elif pending_segment is not None:
                duration, title = pending_segment
                segments.append(SegmentRef(uri=line, line=index, duration=duration, title=title))
                pending_segment = None
            else:
                raise ParseFailure(f"Line {index + 1}: URI {line!r} has no preceding #EXTINF or #EXT-X-STREAM-INF")

        if not header_seen:
            raise ParseFailure(f"Playlist is empty or missing {HEADER_TAG}")
        if pending_variant is not None or pending_segment is not None:
            raise ParseFailure(f"Line {pending_line + 1}: tag is not followed by a URI")
        if playlists and segments:
            raise ParseFailure("Playlist mixes variant streams and media segments")

        if not playlists and not segments:
            logging.warning("Playlist has neither variant streams nor segments")
        return Manifest(segments=segments, playlists=playlists)

    def _parse_extinf(self, raw: str, index: int) -> tuple[float, Optional[str]]:
        duration_text, _, title = raw.partition(",")
        try:
            duration = float(duration_text.strip())
        except ValueError:
            raise ParseFailure(f"Line {index + 1}: #EXTINF duration {duration_text!r} is not a number") from None
        return duration, title.strip() or None

    def _build_variant(self, uri: str, index: int, attributes: Dict[str, str], tag_line: int) -> VariantRef:
        resolution = None
        if "RESOLUTION" in attributes:
            match = RESOLUTION_RE.match(attributes["RESOLUTION"])
            if not match:
                raise ParseFailure(f"Line {tag_line + 1}: RESOLUTION {attributes['RESOLUTION']!r} is not <width>x<height>")
            resolution = Resolution(width=int(match.group(1)), height=int(match.group(2)))

        bandwidth = None
        if "BANDWIDTH" in attributes:
            try:
                bandwidth = int(attributes["BANDWIDTH"])
            except ValueError:
                raise ParseFailure(f"Line {tag_line + 1}: BANDWIDTH {attributes['BANDWIDTH']!r} is not an integer") from None
        else:
            logging.warning("Line %s: #EXT-X-STREAM-INF has no BANDWIDTH", tag_line + 1)

        return VariantRef(
            uri=uri,
            line=index,
            attributes=attributes,
            name=attributes.get("NAME") or None,
            resolution=resolution,
            bandwidth=bandwidth,
        )
