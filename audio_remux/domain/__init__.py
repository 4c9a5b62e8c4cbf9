"""
This package contains the core domain models of audio_remux.

The domain layer represents the media concepts the pipeline reasons about,
independent of how external tools are invoked.

Modules:
    exceptions.py: Custom exception types for probe, process and encoding failures.
    channel_layout.py: libavutil channel masks, layout classification and the
                       per-stream bitrate estimate.
    media.py: The `MediaFile` prober and the `StreamInfo` descriptor, wrapping `ffprobe`.
    temp_models.py: The `Workspace` of one run and the per-stream `AudioJob`.
"""
