"""
This package contains the audio pipeline of audio_remux.

A pipeline orchestrates the whole task for one source: it probes for audio,
runs the audio copy, and in single-track mode hands over to the per-stream
re-encode and remux.
"""
