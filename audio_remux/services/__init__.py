"""
Services Package for audio_remux.

A service performs one high-level task with the external tools, bridging the
pipeline and the domain models.

- **StreamAudioEncoder:** extracts each audio stream and encodes it with opusenc.
- **RemuxComposer / handle_opus:** merges the per-stream files with the skeleton's
  subtitles into the final container.
- **ErrorLog:** appends diagnostics to the workspace's error file.
"""
