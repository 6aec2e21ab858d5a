"""API client for uploading content-addressed blobs."""

from __future__ import annotations

import logging
import mimetypes

import requests

from ..models import BlobDescriptor
from ..utils.hashing import content_hash
from ..utils.http_client import HttpClient

UPLOAD_PATH = "upload"

mimetypes.add_type("application/vnd.apple.mpegurl", ".m3u8")
mimetypes.add_type("video/mp2t", ".ts")


class BlobAPI:
    """Uploads blobs and checks which ones the server already stores."""

    def __init__(self, http_client: HttpClient) -> None:
        self._client = http_client

    def has_blob(self, sha256: str) -> bool:
        response = self._client.request_blob("HEAD", sha256)
        return response.status_code == 200

    def upload(self, filename: str, content: bytes) -> BlobDescriptor:
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        headers = {
            "content-type": content_type,
            "x-sha-256": content_hash(content),
        }
        response = self._client.request_blob("PUT", UPLOAD_PATH, data=content, headers=headers)
        try:
            response.raise_for_status()
            return BlobDescriptor(**response.json())
        except requests.RequestException as exc:  # pragma: no cover - network errors
            reason = response.headers.get("x-reason") or exc
            logging.error("Upload of %s failed: %s", filename, reason)
            raise

    def blob_url(self, filename: str) -> str:
        return self._client.blob_url(filename)
