"""
Command-Line Interface (CLI) setup for audio_remux.

This module uses Python's `argparse` to define and parse the command-line
arguments that control the application's behavior.
"""
import argparse
import shlex
from pathlib import Path
from typing import List, Optional


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract and re-encode the audio of a media file, keeping subtitles in sync."
    )
    parser.add_argument("input", type=Path, help="Source media file.")
    parser.add_argument(
        "--temp", type=Path, default=None,
        help="Workspace directory for this run (default: '.audio_remux_<input stem>' next to the input)."
    )
    parser.add_argument(
        "--opus-mode", action="store_true",
        help="Keep one audio track for the subtitle skeleton and re-encode every track to Opus."
    )
    parser.add_argument(
        "--audio-params", type=str, default="",
        help='Extra ffmpeg audio options for standard mode, e.g. "-c:a libopus -b:a 192k".'
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Audio streams to re-encode at the same time in opus mode (default: from config, usually 1)."
    )
    parser.add_argument(
        "--probe", action="store_true",
        help="Only print the source's metadata (frames, fps, resolution, keyframes, ...)."
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO", choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level."
    )
    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Returns:
        argparse.Namespace: The parsed arguments. `audio_params` is split into a
                            list with shell quoting rules and `temp` is resolved.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.audio_params = shlex.split(args.audio_params)
    except ValueError as e:
        parser.error(f"Could not parse --audio-params: {e}")

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    if args.temp is None:
        args.temp = args.input.parent / f".audio_remux_{args.input.stem}"
    args.temp = args.temp.resolve()

    return args
