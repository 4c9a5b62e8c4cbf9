"""Tests for the ffmpeg command builder and the filter/pipe helpers."""

import os
from pathlib import Path

import pytest

from audio_remux.utils.command_builder import FFmpegCommand
from audio_remux.utils.ffmpeg_utils import compose_ffmpeg_pipe, escape_path_in_filter
from audio_remux.utils.format_utils import formatted_size


class TestFFmpegCommand:
    def test_argument_order(self):
        command = FFmpegCommand("ffmpeg", ["-y", "-hide_banner"])
        first = command.add_input(Path("a.opus"))
        second = command.add_input("b.mkv", "-itsoffset", "1")
        command.add_output_options("-vn")
        command.add_map(f"{first}:a:0").add_map(f"{second}:s?")
        command.add_codec_options("-c", "copy")
        command.add_extra_args(["-metadata", "title=x"])

        assert (first, second) == (0, 1)
        assert command.build(Path("out.mkv")) == [
            "ffmpeg", "-y", "-hide_banner",
            "-i", "a.opus",
            "-itsoffset", "1", "-i", "b.mkv",
            "-vn",
            "-map", "0:a:0", "-map", "1:s?",
            "-c", "copy",
            "-metadata", "title=x",
            "out.mkv",
        ]

    def test_minimal(self):
        assert FFmpegCommand().build("-") == ["ffmpeg", "-"]


class TestEscapePathInFilter:
    def test_posix_path(self):
        escaped = escape_path_in_filter("/media/show [1080p], part.mkv", windows=False)
        assert escaped == r"/media/show \[1080p\]\, part.mkv"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX abspath semantics")
    def test_windows_rules(self):
        # abspath leaves an absolute POSIX path alone, so the colon survives to be escaped.
        escaped = escape_path_in_filter("/C:\\media\\a,b.mkv", windows=True)
        assert escaped == r"/C\\:/media/a\,b.mkv"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX abspath semantics")
    def test_relative_path_is_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert escape_path_in_filter("clip.mkv", windows=False) == f"{os.getcwd()}/clip.mkv"


class TestComposeFFmpegPipe:
    def test_layout(self):
        cmd = compose_ffmpeg_pipe(["-vf", "scale=1280:-2"], "yuv420p10le")
        assert cmd[1:] == [
            "-y", "-hide_banner", "-loglevel", "error", "-i", "-",
            "-vf", "scale=1280:-2",
            "-pix_fmt", "yuv420p10le", "-strict", "-1", "-f", "yuv4mpegpipe", "-",
        ]
        assert "ffmpeg" in os.path.basename(cmd[0])


class TestFormattedSize:
    def test_units(self):
        assert formatted_size(0) == "0 B"
        assert formatted_size(1536) == "1.50 KB"
        assert formatted_size(512) == "512 B"
        assert formatted_size(2048) == "2 KB"
        assert formatted_size(5 * 1024 ** 3) == "5 GB"
