"""
Utilities Package for audio_remux.

Helpers that are not specific to any single stage of the audio pipeline.

Modules:
    - process.py: `run_cmd` and `ProcessPipeline`, which run every encode and remux step.
    - command_builder.py: `FFmpegCommand`, an argument-group builder for ffmpeg.
    - ffmpeg_utils.py: Filter-graph path escaping and the y4m decode pipe command.
    - format_utils.py: Formatting of commands and sizes for log messages.
    - module_updater.py: Location and verification of ffmpeg, ffprobe and opusenc.
"""
