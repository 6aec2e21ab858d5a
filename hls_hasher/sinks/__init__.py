"""Destinations for converted artifacts."""

from .base import Sink, scoped_sink
from .blob_sink import BlobUploadSink
from .directory_sink import DirectorySink

__all__ = ["Sink", "scoped_sink", "DirectorySink", "BlobUploadSink"]
