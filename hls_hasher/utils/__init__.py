"""Utility helpers for HTTP, hashing, and filesystem operations."""

from .file_utils import ensure_directory, sanitize_filename
from .hashing import artifact_name, content_hash
from .http_client import AuthenticationError, HttpClient

__all__ = [
    "HttpClient",
    "AuthenticationError",
    "content_hash",
    "artifact_name",
    "ensure_directory",
    "sanitize_filename",
]
