"""Encodes a source video into a multi-rendition HLS ladder with ffmpeg."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import List, NamedTuple, Optional

from ..errors import EncodingError
from ..utils.file_utils import ensure_directory

MASTER_PLAYLIST = "master.m3u8"


class Rendition(NamedTuple):
    width: int
    height: int
    video_bitrate: str
    max_rate: str
    buffer_size: str
    audio_bitrate: str


DEFAULT_LADDER = (
    Rendition(1920, 1080, "5000k", "5350k", "7500k", "192k"),
    Rendition(1280, 720, "2800k", "2996k", "4200k", "128k"),
    Rendition(854, 480, "1400k", "1498k", "2100k", "96k"),
)


class HLSEncoder:
    """Runs ffmpeg to produce ``master.m3u8`` plus one media playlist per rendition."""

    def __init__(self, ffmpeg_bin: Optional[str] = None, segment_seconds: int = 10) -> None:
        self.ffmpeg_bin = ffmpeg_bin
        self.segment_seconds = segment_seconds

    def build_command(
        self,
        ffmpeg_bin: str,
        input_path: str,
        output_dir: str,
        ladder: tuple[Rendition, ...] = DEFAULT_LADDER,
    ) -> List[str]:
        count = len(ladder)
        splits = "".join(f"[v{index}]" for index in range(count))
        scales = "; ".join(
            f"[v{index}]scale=w={rendition.width}:h={rendition.height}[v{index}out]"
            for index, rendition in enumerate(ladder)
        )
        command = [ffmpeg_bin, "-y", "-i", input_path, "-filter_complex", f"[0:v]split={count}{splits}; {scales}"]

        for index, rendition in enumerate(ladder):
            command += [
                "-map", f"[v{index}out]",
                f"-c:v:{index}", "libx264",
                f"-b:v:{index}", rendition.video_bitrate,
                f"-maxrate:v:{index}", rendition.max_rate,
                f"-bufsize:v:{index}", rendition.buffer_size,
            ]
        for index, rendition in enumerate(ladder):
            command += ["-map", "a:0", "-c:a", "aac", f"-b:a:{index}", rendition.audio_bitrate, "-ac", "2"]

        stream_map = " ".join(f"v:{index},a:{index}" for index in range(count))
        command += [
            "-f", "hls",
            "-hls_time", str(self.segment_seconds),
            "-hls_playlist_type", "vod",
            "-hls_flags", "independent_segments",
            "-hls_segment_type", "mpegts",
            "-hls_segment_filename", os.path.join(output_dir, "stream_%v", "data%03d.ts"),
            "-master_pl_name", MASTER_PLAYLIST,
            "-var_stream_map", stream_map,
            os.path.join(output_dir, "stream_%v", "playlist.m3u8"),
        ]
        return command

    def encode(self, input_path: str, output_dir: str) -> str:
        """Encodes ``input_path`` and returns the path of the master playlist."""

        if not os.path.isfile(input_path):
            raise EncodingError(f"Input video {input_path} does not exist")
        ffmpeg_bin = self.ffmpeg_bin or shutil.which("ffmpeg")
        if not ffmpeg_bin:
            raise EncodingError("ffmpeg not found on PATH")

        ensure_directory(output_dir)
        command = self.build_command(ffmpeg_bin, input_path, output_dir)
        logging.info("Encoding HLS via ffmpeg: %s", " ".join(command))
        try:
            subprocess.run(command, check=True)
        except (subprocess.CalledProcessError, OSError) as exc:
            logging.error("ffmpeg encode failed: %s", exc)
            raise EncodingError(f"ffmpeg failed for {input_path}: {exc}") from exc

        master_path = os.path.join(output_dir, MASTER_PLAYLIST)
        logging.info("Saved HLS output to %s", master_path)
        return master_path
