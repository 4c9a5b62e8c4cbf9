"""
Main entry point for audio_remux.

This script parses command-line arguments, configures logging, verifies the
external tools, and either prints the source's probe data or runs the audio
pipeline for it.
"""
import sys

from loguru import logger

from audio_remux.cli import get_args
from audio_remux.config.common import LOGGER_FORMAT
from audio_remux.domain.exceptions import AudioRemuxException
from audio_remux.domain.media import MediaFile
from audio_remux.pipeline.audio_pipeline import encode_audio
from audio_remux.utils.module_updater import Modules


# Configure the logger for initial setup.
# The level is overridden once the command-line arguments are parsed.
logger.remove()
logger.add(sys.stderr, level="INFO", format=LOGGER_FORMAT)


def print_probe(media_file: MediaFile):
    width, height = media_file.resolution()
    keyframes = media_file.keyframes()
    print(f"file:             {media_file.path}")
    print(f"frames:           {media_file.num_frames()}")
    print(f"frame rate:       {media_file.frame_rate():.3f}")
    print(f"resolution:       {width}x{height}")
    print(f"pixel format:     {media_file.pixel_format()}")
    print(f"transfer:         {media_file.transfer_characteristics()}")
    print(f"keyframes:        {len(keyframes)} (first: {keyframes[:10]})")
    print(f"has audio:        {media_file.has_audio()}")


def main() -> int:
    args = get_args()

    logger.remove()
    logger.add(sys.stderr, level=args.log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    try:
        if args.probe:
            print_probe(MediaFile(args.input))
            return 0

        tools = ["ffmpeg", "ffprobe", "opusenc"] if args.opus_mode else ["ffmpeg", "ffprobe"]
        if not Modules.verify_tools(tools):
            logger.error("Required external tools are missing; see the messages above.")
            return 2

        result = encode_audio(args.input, args.temp, args.opus_mode, args.audio_params, args.workers)
    except (AudioRemuxException, FileNotFoundError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    if result is None:
        logger.warning(f"No audio produced for {args.input.name}; the transcode will be video-only.")
    else:
        logger.success(f"Audio ready: {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
