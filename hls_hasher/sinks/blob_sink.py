"""Uploads converted artifacts to a blob server."""

from __future__ import annotations

import asyncio
import logging
import posixpath

import requests

from ..api.blob_api import BlobAPI
from ..errors import WriteFailure
from ..models import BlobDescriptor
from ..utils.http_client import AuthenticationError


class BlobUploadSink:
    """Sink that stores each artifact as a blob keyed by its sha256.

    Blob servers have a flat namespace, so only the basename of the relative
    path is used. Blobs the server already has are not uploaded again.
    """

    def __init__(self, blob_api: BlobAPI) -> None:
        self._blob_api = blob_api
        self.uploaded: list[BlobDescriptor] = []

    async def __call__(self, path: str, content: bytes) -> None:
        filename = posixpath.basename(path)
        digest = filename.split(".", 1)[0]
        try:
            if await asyncio.to_thread(self._blob_api.has_blob, digest):
                logging.info("Blob %s already on server", filename)
                return
            blob = await asyncio.to_thread(self._blob_api.upload, filename, content)
        except (AuthenticationError, requests.RequestException, ValueError) as exc:
            raise WriteFailure(f"Upload of {filename} failed: {exc}") from exc

        if blob.sha256 != digest:
            raise WriteFailure(f"Server stored {filename} as {blob.sha256}")
        self.uploaded.append(blob)
        logging.info("Uploaded %s %s", blob.sha256, blob.type)
