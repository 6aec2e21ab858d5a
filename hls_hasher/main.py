from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from .api.blob_api import BlobAPI
from .converter import LAYOUT_FLAT, LAYOUTS, HLSEncoder, PlaylistConverter, SourceReader
from .errors import ConversionError, EncodingError
from .sinks import BlobUploadSink, DirectorySink, Sink
from .utils.file_utils import ensure_directory
from .utils.http_client import HttpClient

load_dotenv()

DEFAULT_OUTPUT_DIR = "output"
DEFAULT_TIMEOUT = 30


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _add_conversion_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="A URL or path to the .m3u8 file")
    parser.add_argument(
        "--workers",
        type=int,
        default=_env_int("WORKERS") or 1,
        help="Number of segments fetched concurrently within one media playlist",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=_env_int("TIMEOUT") or DEFAULT_TIMEOUT,
        help="Seconds to wait for each playlist or segment read",
    )
    parser.add_argument(
        "--layout",
        choices=LAYOUTS,
        default=_env_str("LAYOUT") or LAYOUT_FLAT,
        help="Write variant artifacts flat into the output root or nested under per-variant folders",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rename HLS playlists and segments to their sha256 hashes.")
    parser.add_argument("--log-level", default=_env_str("LOG_LEVEL") or "INFO", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--debug", action="store_true", default=_env_bool("DEBUG"), help="Shortcut for --log-level DEBUG")
    commands = parser.add_subparsers(dest="command", required=True)

    encode = commands.add_parser("encode", help="Encode a video file into HLS")
    encode.add_argument("input", help="The video file")
    encode.add_argument(
        "output",
        nargs="?",
        default=_env_str("HLS_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
        help="Folder to output HLS playlists and chunks",
    )
    encode.add_argument("--ffmpeg-bin", default=_env_str("FFMPEG_BIN"), help="Path to the ffmpeg executable")

    convert = commands.add_parser("convert", help="Update an HLS playlist to use sha256 hashes instead of filenames")
    _add_conversion_options(convert)
    convert.add_argument(
        "output",
        nargs="?",
        default=_env_str("HLS_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
        help="Folder to output HLS playlists and chunks",
    )

    upload = commands.add_parser("upload", help="Convert and upload an HLS playlist to a blob server")
    _add_conversion_options(upload)
    upload.add_argument("server", nargs="?", default=_env_str("BLOSSOM_SERVER"), help="The server to upload to")
    upload.add_argument(
        "--auth",
        default=_env_str("BLOSSOM_AUTH"),
        help="Authorization header sent with every upload; must be a pre-signed 'Nostr <base64 event>' token",
    )
    return parser.parse_args(argv)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


async def run_conversion(args: argparse.Namespace, http_client: HttpClient, sink: Sink) -> str:
    reader = SourceReader(http_client, timeout=args.timeout)
    converter = PlaylistConverter(reader, workers=args.workers, layout=args.layout)
    try:
        return await converter.convert(args.input, sink)
    finally:
        await http_client.aclose()


def run_encode(args: argparse.Namespace) -> int:
    encoder = HLSEncoder(ffmpeg_bin=args.ffmpeg_bin)
    master_path = encoder.encode(args.input, args.output)
    logging.info("Encoded %s; convert it with: convert %s", args.input, master_path)
    return 0


def run_convert(args: argparse.Namespace) -> int:
    ensure_directory(args.output)
    sink = DirectorySink(args.output)
    with HttpClient(timeout=args.timeout) as http_client:
        master = asyncio.run(run_conversion(args, http_client, sink))
    logging.info("Wrote %s files to %s", len(sink.written), args.output)
    print(f"{master}.m3u8")
    return 0


def run_upload(args: argparse.Namespace) -> int:
    if not args.server:
        logging.error("Missing server; pass it as an argument or set BLOSSOM_SERVER.")
        return 2
    with HttpClient(server=args.server, authorization=args.auth, timeout=args.timeout) as http_client:
        blob_api = BlobAPI(http_client)
        sink = BlobUploadSink(blob_api)
        master = asyncio.run(run_conversion(args, http_client, sink))
        url = blob_api.blob_url(f"{master}.m3u8")
    logging.info("Uploaded %s new blobs", len(sink.uploaded))
    print(f"Uploaded HLS playlists, open {url}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging("DEBUG" if args.debug else args.log_level)

    handlers = {"encode": run_encode, "convert": run_convert, "upload": run_upload}
    try:
        return handlers[args.command](args)
    except (ConversionError, EncodingError) as exc:
        logging.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
