"""Data models for locators, parsed playlists, and persisted artifacts."""

from .artifact_models import BlobDescriptor, ConvertedArtifact
from .locator import Locator, LocatorKind
from .playlist_models import Manifest, Resolution, SegmentRef, VariantRef

__all__ = [
    "Locator",
    "LocatorKind",
    "Manifest",
    "Resolution",
    "SegmentRef",
    "VariantRef",
    "ConvertedArtifact",
    "BlobDescriptor",
]
