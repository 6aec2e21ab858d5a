"""Pydantic models that describe parsed master and media playlists."""

from typing import Dict, List, Optional

from pydantic import BaseModel


class Resolution(BaseModel):
    """Pixel dimensions from a RESOLUTION attribute."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class SegmentRef(BaseModel):
    """A media segment reference inside a media playlist."""

    uri: str
    line: int
    duration: float
    title: Optional[str] = None


class VariantRef(BaseModel):
    """A variant stream reference inside a master playlist."""

    uri: str
    line: int
    attributes: Dict[str, str] = {}
    name: Optional[str] = None
    resolution: Optional[Resolution] = None
    bandwidth: Optional[int] = None

    def label(self, index: int) -> str:
        """Human-readable name used for logging and nested output folders."""

        if self.name:
            return self.name
        if self.resolution:
            return str(self.resolution)
        return f"variant{index}"


class Manifest(BaseModel):
    """Structure of one playlist document.

    A manifest is either a master playlist (``playlists`` populated) or a
    media playlist (``segments`` populated). Both lists may be empty for a
    terminal playlist with nothing to follow.
    """

    segments: List[SegmentRef] = []
    playlists: List[VariantRef] = []

    @property
    def is_master(self) -> bool:
        return bool(self.playlists)

    @property
    def is_media(self) -> bool:
        return bool(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.playlists and not self.segments
