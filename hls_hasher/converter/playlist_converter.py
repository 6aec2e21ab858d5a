"""Recursive converter that renames a playlist tree to content hashes."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from ..errors import ConversionError, ParseFailure, ResolveFailure, WriteFailure
from ..models import ConvertedArtifact, Locator, Manifest, SegmentRef, VariantRef
from ..models.artifact_models import PLAYLIST_EXTENSION, SEGMENT_EXTENSION
from ..sinks.base import Sink, scoped_sink
from ..utils.file_utils import sanitize_filename
from ..utils.hashing import artifact_name, content_hash
from .playlist_parser import PlaylistParser
from .rewriter import replace_reference
from .source_reader import SourceReader

LAYOUT_FLAT = "flat"
LAYOUT_NESTED = "nested"
LAYOUTS = (LAYOUT_FLAT, LAYOUT_NESTED)

RenamedSegment = Tuple[SegmentRef, str]


class PlaylistConverter:
    """Walks master and media playlists depth-first, writing hash-named artifacts.

    Every segment is stored as ``<sha256>.ts`` and every playlist as
    ``<sha256>.m3u8`` after its references have been rewritten, so a parent
    playlist learns a child's filename from the hash the child returns.
    """

    def __init__(
        self,
        reader: SourceReader,
        parser: Optional[PlaylistParser] = None,
        workers: int = 1,
        layout: str = LAYOUT_FLAT,
    ) -> None:
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown layout {layout!r}; expected one of {', '.join(LAYOUTS)}")
        self.workers = max(1, workers)
        self.layout = layout
        self._reader = reader
        self._parser = parser or PlaylistParser()

    async def convert(self, locator: str | Locator, sink: Sink) -> str:
        """Converts the playlist at ``locator`` and returns its sha256."""

        return await self._convert(Locator.parse(locator), sink, ())

    async def _convert(self, locator: Locator, sink: Sink, ancestors: Tuple[str, ...]) -> str:
        if locator.value in ancestors:
            raise ResolveFailure(f"{locator} references itself through its variants")

        base = locator.directory()
        text = await self._reader.read_text(locator)
        try:
            manifest = self._parser.parse(text)
        except ParseFailure as exc:
            raise ParseFailure(f"{locator}: {exc}") from exc

        updated = text
        if manifest.is_master:
            logging.info("Found %s variant playlists in %s", len(manifest.playlists), locator.name)
            for index, variant in enumerate(manifest.playlists):
                updated = await self._convert_variant(
                    updated, base, index, variant, sink, ancestors + (locator.value,)
                )
        elif manifest.is_media:
            logging.info("Found %s segments in %s", len(manifest.segments), locator.name)
            for segment, filename in await self._convert_segments(base, manifest, sink):
                updated = replace_reference(updated, segment, filename)

        playlist = ConvertedArtifact(
            digest=content_hash(updated),
            extension=PLAYLIST_EXTENSION,
            content=updated.encode("utf-8"),
        )
        await self._write(sink, playlist)
        return playlist.digest

    async def _convert_variant(
        self,
        updated: str,
        base: Locator,
        index: int,
        variant: VariantRef,
        sink: Sink,
        ancestors: Tuple[str, ...],
    ) -> str:
        variant_locator = base.resolve(variant.uri)
        label = variant.label(index)
        if self.layout == LAYOUT_NESTED:
            sink = scoped_sink(sink, sanitize_filename(label, default=f"variant{index}"))

        variant_hash = await self._convert(variant_locator, sink, ancestors)
        variant_path = artifact_name(variant_hash, PLAYLIST_EXTENSION)
        logging.info("Renamed variant playlist %s (%s): %s to %s", index + 1, label, variant_locator, variant_path)
        return replace_reference(updated, variant, variant_path)

    async def _convert_segments(self, base: Locator, manifest: Manifest, sink: Sink) -> List[RenamedSegment]:
        total = len(manifest.segments)
        if self.workers == 1:
            renamed: List[RenamedSegment] = []
            for index, segment in enumerate(manifest.segments):
                renamed.append(await self._convert_segment(base, index, total, segment, sink))
            return renamed

        sem = asyncio.Semaphore(self.workers)

        async def bounded(index: int, segment: SegmentRef) -> RenamedSegment:
            async with sem:
                return await self._convert_segment(base, index, total, segment, sink)

        tasks = [asyncio.ensure_future(bounded(index, segment)) for index, segment in enumerate(manifest.segments)]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _convert_segment(
        self,
        base: Locator,
        index: int,
        total: int,
        segment: SegmentRef,
        sink: Sink,
    ) -> RenamedSegment:
        segment_locator = base.resolve(segment.uri)
        data = await self._reader.read_bytes(segment_locator)
        artifact = ConvertedArtifact(digest=content_hash(data), extension=SEGMENT_EXTENSION, content=data)
        logging.info("Renamed segment %s/%s: %s to %s", index + 1, total, segment_locator, artifact.filename)
        await self._write(sink, artifact)
        return segment, artifact.filename

    async def _write(self, sink: Sink, artifact: ConvertedArtifact) -> None:
        try:
            await sink(artifact.filename, artifact.content)
        except ConversionError:
            raise
        except Exception as exc:
            logging.error("Sink failed to write %s: %s", artifact.filename, exc)
            raise WriteFailure(f"{artifact.filename}: {exc}") from exc
