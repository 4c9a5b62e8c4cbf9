"""
Configuration settings related to audio processing.

This module defines the workspace filename conventions and the parameters of
the per-stream Opus re-encode. The filenames are shared between the per-stream
encoder and the remux composer, so they must only ever be changed here.
"""

# ======================================================================================
# Workspace Layout
# ======================================================================================

# Subdirectory of the workspace holding one lossy file per source audio stream.
AUDIO_DIR_NAME = "audio"

# Extension of the per-stream lossy files: <workspace>/audio/<index>.opus
LOSSY_EXTENSION = "opus"

# Extension of the intermediate and final containers.
CONTAINER_EXTENSION = "mkv"

# Single-track intermediate ("skeleton"): <workspace>/misc.mkv
SINGLE_TRACK_STEM = "misc"

# Standard-mode output and final remuxed output: <workspace>/audio.mkv
AUDIO_STEM = "audio"


# ======================================================================================
# Per-Stream Encoding Parameters
# ======================================================================================

# Lossless format the extraction stage writes to its stdout.
INTERMEDIATE_FORMAT = "flac"

# Stereo target. Other layouts scale from it with BITRATE_EXPONENT.
BASE_BITRATE_KBPS = 128
BITRATE_EXPONENT = 0.75
