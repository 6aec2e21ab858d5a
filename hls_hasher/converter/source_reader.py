"""Reads playlists and segments from disk or over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import aiohttp

from ..errors import ReadFailure
from ..models import Locator
from ..utils.http_client import HttpClient


class SourceReader:
    """Fetches raw bytes for a locator, choosing network or file I/O by its kind."""

    def __init__(self, http_client: HttpClient, timeout: float | None = None) -> None:
        self._http_client = http_client
        self.timeout = timeout if timeout is not None else http_client.timeout

    async def read_bytes(self, locator: Locator) -> bytes:
        try:
            if locator.is_network:
                return await asyncio.wait_for(self._http_client.fetch_bytes(locator.value), self.timeout)
            return await asyncio.wait_for(asyncio.to_thread(Path(locator.value).read_bytes), self.timeout)
        except aiohttp.ClientResponseError as exc:
            logging.error("GET %s returned %s", locator, exc.status)
            raise ReadFailure(f"{locator}: HTTP {exc.status} {exc.message}") from exc
        except asyncio.TimeoutError as exc:
            logging.error("Reading %s timed out after %ss", locator, self.timeout)
            raise ReadFailure(f"{locator}: timed out after {self.timeout}s") from exc
        except aiohttp.ClientError as exc:
            logging.error("Download of %s failed: %s", locator, exc)
            raise ReadFailure(f"{locator}: {exc}") from exc
        except OSError as exc:
            logging.error("Reading %s failed: %s", locator, exc)
            raise ReadFailure(f"{locator}: {exc.strerror or exc}") from exc

    async def read_text(self, locator: Locator) -> str:
        """Reads a playlist as UTF-8 text, keeping its line endings intact."""

        data = await self.read_bytes(locator)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ReadFailure(f"{locator}: playlist is not valid UTF-8") from exc
