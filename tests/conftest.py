"""
Pytest configuration and shared fixtures for audio_remux tests.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Make the flat-layout package importable without installing it.
sys.path.insert(0, str(Path(__file__).parent.parent))

from audio_remux.domain.temp_models import Workspace  # noqa: E402


def video_stream(index: int, width: int = 1920, height: int = 1080, **extra) -> Dict[str, Any]:
    stream = {
        "index": index,
        "codec_type": "video",
        "codec_name": "h264",
        "width": width,
        "height": height,
        "pix_fmt": "yuv420p",
        "avg_frame_rate": "24000/1001",
        "disposition": {"default": 0, "attached_pic": 0},
    }
    stream.update(extra)
    return stream


def audio_stream(index: int, channels: int = 2, layout: Optional[str] = "stereo", **extra) -> Dict[str, Any]:
    stream = {
        "index": index,
        "codec_type": "audio",
        "codec_name": "aac",
        "channels": channels,
        "disposition": {"default": 0},
    }
    if layout is not None:
        stream["channel_layout"] = layout
    stream.update(extra)
    return stream


def subtitle_stream(index: int, **extra) -> Dict[str, Any]:
    stream = {"index": index, "codec_type": "subtitle", "codec_name": "subrip"}
    stream.update(extra)
    return stream


class FakeProbe:
    """
    Stands in for `ffmpeg.probe`.

    The plain probe returns `{"streams": streams}`. Narrow probes (the ones
    passing `select_streams`) return `packet_probe` instead. Every call is
    recorded in `calls` as (filename, kwargs).
    """

    def __init__(self, streams: List[Dict[str, Any]], packet_probe: Optional[Dict[str, Any]] = None):
        self.streams = streams
        self.packet_probe = packet_probe or {}
        self.calls: List[tuple] = []
        self.error = None

    def __call__(self, filename, cmd="ffprobe", **kwargs):
        self.calls.append((filename, kwargs))
        if self.error is not None:
            raise self.error
        if "select_streams" in kwargs:
            return self.packet_probe
        return {"streams": self.streams, "format": {"filename": filename}}


@pytest.fixture
def fake_probe(monkeypatch):
    """
    Installs a FakeProbe with no streams; tests set `.streams` / `.packet_probe`.
    """
    probe = FakeProbe([])
    monkeypatch.setattr("audio_remux.domain.media.ffmpeg.probe", probe)
    return probe


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """An empty file standing in for a media source; only its existence matters to the fakes."""
    path = tmp_path / "movie.mkv"
    path.touch()
    return path


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    return Workspace(tmp_path / "work")
