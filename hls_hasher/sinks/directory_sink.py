"""Writes converted artifacts into a local output directory."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile

from ..errors import WriteFailure
from ..utils.file_utils import ensure_directory


class DirectorySink:
    """Persists ``(relative_path, content)`` pairs under ``output_dir``."""

    def __init__(self, output_dir: str) -> None:
        self.output_dir = output_dir
        self.written: list[str] = []

    async def __call__(self, path: str, content: bytes) -> None:
        target = os.path.normpath(os.path.join(self.output_dir, path))
        try:
            await asyncio.to_thread(self._write_file, target, content)
        except OSError as exc:
            logging.error("Writing %s failed: %s", target, exc)
            raise WriteFailure(f"{target}: {exc.strerror or exc}") from exc
        self.written.append(target)
        logging.info("%s", target)

    @staticmethod
    def _write_file(target: str, content: bytes) -> None:
        # Names are content hashes, so an existing file of the same size is the same artifact.
        if os.path.exists(target) and os.path.getsize(target) == len(content):
            logging.debug("Skipping existing %s", target)
            return
        directory = ensure_directory(os.path.dirname(target) or ".")
        # Duplicate segments can be written concurrently; each write needs its own temp file.
        with tempfile.NamedTemporaryFile(dir=directory, prefix=".part-", delete=False) as file_obj:
            tmp_path = file_obj.name
            file_obj.write(content)
        try:
            os.replace(tmp_path, target)
        except OSError:
            os.unlink(tmp_path)
            raise
