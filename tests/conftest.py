"""Shared fixtures: in-memory sinks, on-disk HLS trees, and a local HTTP server."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Dict, List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from hls_hasher.converter import PlaylistConverter, SourceReader
from hls_hasher.utils.http_client import HttpClient

MASTER_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-INDEPENDENT-SEGMENTS
#EXT-X-STREAM-INF:BANDWIDTH=5500000,RESOLUTION=1920x1080,CODECS="avc1.640028,mp4a.40.2"
stream_0/playlist.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=3000000,RESOLUTION=1280x720,CODECS="avc1.64001f,mp4a.40.2"
stream_1/playlist.m3u8
"""

MEDIA_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-TARGETDURATION:10
#EXT-X-MEDIA-SEQUENCE:0
#EXT-X-PLAYLIST-TYPE:VOD
#EXTINF:10.000000,
data000.ts
#EXTINF:4.500000,
data001.ts
#EXT-X-ENDLIST
"""

URI_LINE = re.compile(r"^[^#\s].*$", re.MULTILINE)


class MemorySink:
    """Collects artifacts in a dict, remembering write order."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.order: List[str] = []

    async def __call__(self, path: str, content: bytes) -> None:
        self.files[path] = content
        self.order.append(path)

    def text(self, path: str) -> str:
        return self.files[path].decode("utf-8")


def playlist_uris(text: str) -> List[str]:
    return URI_LINE.findall(text)


def write_tree(root: Path, files: Dict[str, bytes | str]) -> Path:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            target.write_bytes(content.encode("utf-8"))
        else:
            target.write_bytes(content)
    return root


def hls_tree_files() -> Dict[str, bytes | str]:
    return {
        "master.m3u8": MASTER_PLAYLIST,
        "stream_0/playlist.m3u8": MEDIA_PLAYLIST,
        "stream_0/data000.ts": b"\x47" + b"1080p-segment-0" * 20,
        "stream_0/data001.ts": b"\x47" + b"1080p-segment-1" * 20,
        "stream_1/playlist.m3u8": MEDIA_PLAYLIST,
        "stream_1/data000.ts": b"\x47" + b"720p-segment-0" * 20,
        "stream_1/data001.ts": b"\x47" + b"720p-segment-1" * 20,
    }


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def hls_tree(tmp_path: Path) -> Path:
    """A two-rendition HLS tree as ffmpeg lays it out on disk."""

    return write_tree(tmp_path / "hls", hls_tree_files())


@pytest.fixture
def make_converter():
    def _make(workers: int = 1, layout: str = "flat", timeout: float = 5) -> PlaylistConverter:
        reader = SourceReader(HttpClient(timeout=timeout))
        return PlaylistConverter(reader, workers=workers, layout=layout)

    return _make


@pytest.fixture
def serve():
    """Runs ``scenario(server)`` while an aiohttp server serves ``files``.

    Missing paths answer 404; a path mapped to ``None`` never answers.
    """

    def _serve(files: Dict[str, bytes | str | None], scenario):
        async def handler(request: web.Request) -> web.Response:
            path = request.match_info["path"]
            if path not in files:
                raise web.HTTPNotFound()
            content = files[path]
            if content is None:
                await asyncio.sleep(2)
            if isinstance(content, str):
                content = content.encode("utf-8")
            return web.Response(body=content)

        async def runner():
            app = web.Application()
            app.router.add_get("/{path:.*}", handler)
            server = TestServer(app)
            await server.start_server()
            try:
                return await scenario(server)
            finally:
                await server.close()

        return asyncio.run(runner())

    return _serve
