"""API layer for Blossom-style blob servers."""

from .blob_api import BlobAPI

__all__ = ["BlobAPI"]
