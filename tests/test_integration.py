"""
End-to-end tests against the real ffmpeg, ffprobe and opusenc.

Skipped unless all three are on PATH.
"""

import shutil
import subprocess
from pathlib import Path

import ffmpeg
import pytest

from audio_remux.domain.media import MediaFile
from audio_remux.pipeline.audio_pipeline import encode_audio

pytestmark = pytest.mark.skipif(
    not all(shutil.which(tool) for tool in ("ffmpeg", "ffprobe", "opusenc")),
    reason="ffmpeg, ffprobe and opusenc are required",
)

SUBTITLES = """1
00:00:00,000 --> 00:00:01,000
Hello

2
00:00:01,000 --> 00:00:02,000
World
"""


@pytest.fixture(scope="module")
def sample_mkv(tmp_path_factory) -> Path:
    """
    A 2 second, 10 fps clip: video (keyframe every 5 frames) at index 0,
    two mono FLAC tracks at 1 and 2, and an SRT track at 3.
    """
    data_dir = tmp_path_factory.mktemp("data")
    srt_path = data_dir / "subs.srt"
    srt_path.write_text(SUBTITLES, encoding="utf-8")
    mkv_path = data_dir / "sample.mkv"

    cmd = [
        "ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
        "-f", "lavfi", "-i", "testsrc=duration=2:size=160x120:rate=10",
        "-f", "lavfi", "-i", "sine=frequency=440:duration=2",
        "-f", "lavfi", "-i", "sine=frequency=660:duration=2",
        "-i", str(srt_path),
        "-map", "0:v", "-map", "1:a", "-map", "2:a", "-map", "3:s",
        "-c:v", "mpeg4", "-g", "5", "-bf", "0", "-sc_threshold", "1000000000",
        "-c:a", "flac",
        "-c:s", "srt",
        str(mkv_path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        pytest.skip(f"Failed to create test file: {result.stderr[:200]}")
    return mkv_path


def codec_types(path: Path):
    return [s["codec_type"] for s in ffmpeg.probe(str(path))["streams"]]


class TestProbing:
    def test_metadata(self, sample_mkv):
        media = MediaFile(sample_mkv)
        assert [s.index for s in media.audio_streams] == [1, 2]
        assert media.has_audio()
        assert media.resolution() == (160, 120)
        assert media.frame_rate() == pytest.approx(10.0)
        assert media.num_frames() == 20

    def test_keyframes(self, sample_mkv):
        assert MediaFile(sample_mkv).keyframes() == [0, 5, 10, 15]


class TestEncodeAudio:
    def test_standard_mode(self, sample_mkv, tmp_path):
        result = encode_audio(sample_mkv, tmp_path / "work", opus_mode=False)
        assert result == tmp_path / "work" / "audio.mkv"
        assert codec_types(result) == ["audio", "audio", "subtitle"]
        assert (tmp_path / "work" / "cmd.txt").is_file()

    def test_opus_mode(self, sample_mkv, tmp_path):
        work = tmp_path / "work"
        result = encode_audio(sample_mkv, work, opus_mode=True)

        assert result == work / "audio.mkv"
        assert sorted(p.name for p in (work / "audio").iterdir()) == ["1.opus", "2.opus"]
        assert codec_types(work / "misc.mkv") == ["audio", "subtitle"]

        streams = ffmpeg.probe(str(result))["streams"]
        assert [s["codec_type"] for s in streams] == ["audio", "audio", "subtitle"]
        assert [s["codec_name"] for s in streams[:2]] == ["opus", "opus"]

    def test_opus_mode_rerun(self, sample_mkv, tmp_path):
        work = tmp_path / "work"
        encode_audio(sample_mkv, work, opus_mode=True)
        result = encode_audio(sample_mkv, work, opus_mode=True)
        assert codec_types(result) == ["audio", "audio", "subtitle"]
        assert len(list((work / "audio").iterdir())) == 2

    def test_video_only_source(self, tmp_path):
        video_only = tmp_path / "video_only.mkv"
        subprocess.run(
            [
                "ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
                "-f", "lavfi", "-i", "testsrc=duration=1:size=64x48:rate=5",
                "-c:v", "mpeg4", str(video_only),
            ],
            check=True,
            capture_output=True,
        )
        assert encode_audio(video_only, tmp_path / "work", opus_mode=True) is None
        assert not (tmp_path / "work").exists()
