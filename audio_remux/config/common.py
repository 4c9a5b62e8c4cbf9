"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants. It
also handles the loading of user-specific configuration from an external YAML
file, allowing the location of the external tools to be customised without
modifying the source code.
"""
from pathlib import Path

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# This block loads user-specific settings from a 'config.user.yaml' file located
# at the project root. Example:
#
#   paths:
#     ffmpeg_dir: /opt/ffmpeg/bin
#   audio:
#     stream_workers: 2

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# The directory containing the ffmpeg, ffprobe and opusenc executables. If not
# provided, the executables are expected to be on the system's PATH.
MODULE_PATH: Path | None = None

# How many audio streams may be re-encoded at the same time. 1 keeps the
# per-stream encoder strictly sequential.
STREAM_ENCODE_WORKERS = 1

if USER_CONFIG_PATH.is_file():
    try:
        with USER_CONFIG_PATH.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        paths_config = user_config.get("paths") or {}
        audio_config = user_config.get("audio") or {}

        ffmpeg_dir_str = paths_config.get("ffmpeg_dir")
        if ffmpeg_dir_str:
            MODULE_PATH = Path(ffmpeg_dir_str)
        if audio_config.get("stream_workers"):
            STREAM_ENCODE_WORKERS = max(1, int(audio_config["stream_workers"]))
    except (OSError, yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Could not load or parse '{USER_CONFIG_PATH}': {e}")
else:
    logger.debug(f"User config '{USER_CONFIG_PATH}' not found. Relying on system PATH for executables.")


# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{process} - <level>{message}</level>"
)


# --- Workspace Diagnostics ---

# Every external command run against a workspace is appended to this file.
COMMAND_TEXT = "cmd.txt"

# Soft failures (e.g. the top-level audio copy) are recorded here.
ERROR_TEXT = "error.txt"
