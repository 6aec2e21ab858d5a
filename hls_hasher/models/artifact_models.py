"""Models for converted artifacts and blob server responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

PLAYLIST_EXTENSION = "m3u8"
SEGMENT_EXTENSION = "ts"


class ConvertedArtifact(BaseModel):
    """A hash-named file committed through a sink."""

    digest: str
    extension: str
    content: bytes

    @property
    def filename(self) -> str:
        return f"{self.digest}.{self.extension}"


class BlobDescriptor(BaseModel):
    """Upload response returned by a Blossom-style blob server."""

    url: str
    sha256: str
    size: int
    type: Optional[str] = None
    uploaded: Optional[int] = None
