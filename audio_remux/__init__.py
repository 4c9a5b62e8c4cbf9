"""
This file marks the 'audio_remux' directory as a Python package.

The package extracts, re-encodes and re-synchronizes the audio and subtitle
tracks of a source media file, and exposes a prober for the structural metadata
a video encoder needs (frame count, frame rate, resolution, keyframes, ...).

The public entry point most callers need is re-exported here:

    from audio_remux import encode_audio, MediaFile, Workspace
"""
from .domain.media import MediaFile, has_audio
from .domain.temp_models import AudioJob, Workspace
from .pipeline.audio_pipeline import AudioPipeline, encode_audio
from .services.remux_service import handle_opus

__version__ = "0.1.0"

__all__ = [
    "AudioJob",
    "AudioPipeline",
    "MediaFile",
    "Workspace",
    "encode_audio",
    "handle_opus",
    "has_audio",
]
