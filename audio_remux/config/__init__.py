"""
Configuration Package for audio_remux.

This package centralizes the static configuration settings for the application.
Keeping file naming conventions and encoder parameters here means the pipeline
code never hardcodes a filename that another stage depends on.

This package includes settings for:
- Common application settings like the logging format and diagnostics filenames.
- User-overridable paths for external tools (ffmpeg, ffprobe, opusenc).
- Workspace layout and audio encoding parameters.
"""
