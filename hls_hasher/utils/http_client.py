"""Shared HTTP helpers for playlist/segment sources and blob servers."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional
from urllib.parse import urljoin

import aiohttp
import requests

USER_AGENT = "hls-hasher/0.1"

SOURCE_HEADERS: Dict[str, str] = {
    "user-agent": USER_AGENT,
    "accept": "*/*",
}

BLOB_HEADERS: Dict[str, str] = {
    "user-agent": USER_AGENT,
    "accept": "application/json",
}


class AuthenticationError(Exception):
    """Raised when the blob server rejects the provided authorization."""


class HttpClient:
    """Handles source downloads (aiohttp) and blob server requests (requests)."""

    def __init__(
        self,
        server: Optional[str] = None,
        authorization: Optional[str] = None,
        timeout: float = 30,
    ) -> None:
        self.server = server.rstrip("/") + "/" if server else None
        self.timeout = timeout
        self._blob_session = requests.Session()

        self._blob_headers = BLOB_HEADERS.copy()
        if authorization:
            self._blob_headers["authorization"] = authorization
        self._blob_session.headers.update(self._blob_headers)

        self._source_session: Optional[aiohttp.ClientSession] = None
        self._source_lock: Optional[asyncio.Lock] = None
        self._source_loop: Optional[asyncio.AbstractEventLoop] = None

    async def fetch_bytes(self, url: str) -> bytes:
        """Asynchronously download a playlist or segment body."""

        session = await self._get_source_session()
        async with session.get(url) as resp:
            resp.raise_for_status()
            return await resp.read()

    def request_blob(
        self,
        method: str,
        path: str,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Send a request to the configured blob server."""

        if not self.server:
            raise ValueError("No blob server configured")
        url = urljoin(self.server, path.lstrip("/"))
        try:
            response = self._blob_session.request(method, url, data=data, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:  # pragma: no cover - network errors
            logging.error("HTTP %s to %s failed: %s", method, url, exc)
            raise

        if response.status_code in {401, 403}:
            reason = response.headers.get("x-reason") or response.reason
            logging.error("Blob server rejected authorization (status %s).", response.status_code)
            raise AuthenticationError(f"Blob server refused {method} {path}: {reason}")
        return response

    def blob_url(self, filename: str) -> str:
        if not self.server:
            raise ValueError("No blob server configured")
        return urljoin(self.server, filename)

    async def _get_source_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        if self._source_session:
            if (
                self._source_session.closed
                or not self._source_loop
                or self._source_loop.is_closed()
                or self._source_loop is not current_loop
            ):
                await self._shutdown_source_session()

        if self._source_lock is None or self._source_loop is not current_loop:
            self._source_lock = asyncio.Lock()

        async with self._source_lock:
            if self._source_session and not self._source_session.closed:
                return self._source_session
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._source_session = aiohttp.ClientSession(
                timeout=timeout,
                headers=SOURCE_HEADERS.copy(),
            )
            self._source_loop = current_loop
        return self._source_session

    async def _shutdown_source_session(self) -> None:
        if self._source_session:
            try:
                await self._source_session.close()
            except (aiohttp.ClientError, RuntimeError) as exc:
                logging.debug("Ignoring error while closing source session: %s", exc)
        self._source_session = None
        self._source_loop = None

    async def aclose(self) -> None:
        """Close the aiohttp session from inside the running loop."""

        await self._shutdown_source_session()

    def close(self) -> None:
        self._blob_session.close()

        if self._source_session and not self._source_session.closed:
            try:
                asyncio.run(self._source_session.close())
            except RuntimeError:
                loop = asyncio.get_running_loop()
                loop.create_task(self._source_session.close())
        self._source_session = None
        self._source_loop = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
