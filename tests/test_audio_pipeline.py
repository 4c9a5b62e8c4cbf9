"""Tests for the top-level audio entry point."""

import subprocess

import pytest

from audio_remux.domain.exceptions import ProcessSpawnException, RemuxException
from audio_remux.domain.temp_models import Workspace
from audio_remux.pipeline import audio_pipeline
from audio_remux.pipeline.audio_pipeline import AudioPipeline, encode_audio

from conftest import audio_stream, subtitle_stream, video_stream


class Recorder:
    """Replaces run_cmd / handle_opus and remembers how they were called."""

    def __init__(self, returncode=0, stderr=""):
        self.returncode = returncode
        self.stderr = stderr
        self.cmds = []
        self.opus_calls = []

    def run_cmd(self, cmd, show_cmd=False, cmd_log_file_path=None, check=False):
        self.cmds.append(list(cmd))
        return subprocess.CompletedProcess(cmd, self.returncode, "", self.stderr)

    def handle_opus(self, source, merge_with, output, temp, max_workers=None):
        self.opus_calls.append((source, merge_with, output, temp, max_workers))
        return output


@pytest.fixture
def recorder(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr(audio_pipeline, "run_cmd", rec.run_cmd)
    monkeypatch.setattr(audio_pipeline, "handle_opus", rec.handle_opus)
    return rec


@pytest.fixture
def av_source(source_file, fake_probe):
    fake_probe.streams = [video_stream(0), audio_stream(1), audio_stream(2), subtitle_stream(3)]
    return source_file


class TestNoAudio:
    def test_returns_none_without_running_anything(self, source_file, fake_probe, tmp_path, recorder):
        fake_probe.streams = [video_stream(0), subtitle_stream(1)]
        assert encode_audio(source_file, tmp_path / "work", opus_mode=True) is None
        assert recorder.cmds == []
        assert recorder.opus_calls == []


class TestStandardMode:
    def test_copies_every_stream_with_params(self, av_source, tmp_path, recorder):
        work = tmp_path / "work"
        result = encode_audio(av_source, work, opus_mode=False, audio_params=["-c:a", "libopus", "-b:a", "192k"])

        assert result == work / "audio.mkv"
        assert work.is_dir()
        assert recorder.opus_calls == []
        assert recorder.cmds[0][1:] == [
            "-y", "-hide_banner", "-loglevel", "error",
            "-i", str(av_source),
            "-map_metadata", "0", "-vn", "-dn",
            "-map", "0",
            "-c", "copy",
            "-c:a", "libopus", "-b:a", "192k",
            str(work / "audio.mkv"),
        ]

    def test_soft_failure(self, av_source, tmp_path, recorder):
        recorder.returncode = 1
        recorder.stderr = "Unknown encoder 'libfoo'"
        work = tmp_path / "work"

        assert encode_audio(av_source, work, opus_mode=False, audio_params=["-c:a", "libfoo"]) is None

        error_text = (work / "error.txt").read_text(encoding="utf-8")
        assert "Unknown encoder 'libfoo'" in error_text
        assert "Return code: 1" in error_text

    def test_spawn_failure_is_soft(self, av_source, tmp_path, monkeypatch):
        def failing_run_cmd(cmd, **kwargs):
            raise ProcessSpawnException("Failed to start ffmpeg", cmd=cmd)

        monkeypatch.setattr(audio_pipeline, "run_cmd", failing_run_cmd)
        work = tmp_path / "work"
        assert encode_audio(av_source, work, opus_mode=False) is None
        assert "Failed to start ffmpeg" in (work / "error.txt").read_text(encoding="utf-8")


class TestOpusMode:
    def test_copy_keeps_first_audio_and_subtitles(self, av_source, tmp_path, recorder):
        work = tmp_path / "work"
        encode_audio(av_source, work, opus_mode=True, audio_params=["-c:a", "ignored"])

        cmd = recorder.cmds[0]
        maps = [cmd[i + 1] for i, arg in enumerate(cmd) if arg == "-map"]
        assert maps == ["0:a:0", "0:s?"]
        assert "ignored" not in cmd
        assert cmd[-1] == str(work / "misc.mkv")

    def test_hands_over_to_handle_opus(self, av_source, tmp_path, recorder):
        work = tmp_path / "work"
        result = encode_audio(av_source, work, opus_mode=True, max_workers=2)

        assert result == work / "audio.mkv"
        source, merge_with, output, temp, max_workers = recorder.opus_calls[0]
        assert source == av_source
        assert merge_with == work / "misc.mkv"
        assert output == work / "audio.mkv"
        assert temp == Workspace(work)
        assert max_workers == 2

    def test_copy_failure_skips_reencode(self, av_source, tmp_path, recorder):
        recorder.returncode = 1
        assert encode_audio(av_source, tmp_path / "work", opus_mode=True) is None
        assert recorder.opus_calls == []

    def test_remux_failure_propagates(self, av_source, tmp_path, recorder, monkeypatch):
        def failing_handle_opus(*args, **kwargs):
            raise RemuxException("Failed to remux audio")

        monkeypatch.setattr(audio_pipeline, "handle_opus", failing_handle_opus)
        with pytest.raises(RemuxException):
            encode_audio(av_source, tmp_path / "work", opus_mode=True)


class TestAudioPipeline:
    def test_copy_output(self, tmp_path):
        workspace = Workspace(tmp_path)
        assert AudioPipeline(tmp_path / "a.mkv", workspace, opus_mode=True).copy_output == tmp_path / "misc.mkv"
        assert AudioPipeline(tmp_path / "a.mkv", workspace).copy_output == tmp_path / "audio.mkv"

    def test_accepts_plain_path(self, tmp_path):
        assert AudioPipeline(tmp_path / "a.mkv", tmp_path).workspace == Workspace(tmp_path)
