"""Tests for locating and verifying the external tools."""

import sys

from audio_remux.utils import module_updater
from audio_remux.utils.module_updater import Modules


class TestToolPath:
    def test_bare_name_without_config(self, monkeypatch):
        monkeypatch.setattr(module_updater, "MODULE_PATH", None)
        assert Modules.tool_path("opusenc") == "opusenc"

    def test_configured_directory(self, tmp_path, monkeypatch):
        exe = tmp_path / ("ffprobe.exe" if sys.platform == "win32" else "ffprobe")
        exe.touch()
        monkeypatch.setattr(module_updater, "MODULE_PATH", tmp_path)
        assert Modules.tool_path("ffprobe") == str(exe)

    def test_missing_from_configured_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(module_updater, "MODULE_PATH", tmp_path)
        assert Modules.tool_path("opusenc") == "opusenc"


class TestVerifyTools:
    def test_missing_tool(self, monkeypatch):
        monkeypatch.setattr(module_updater, "MODULE_PATH", None)
        assert Modules.verify_tool("audio-remux-no-such-tool") is False

    def test_interpreter_as_tool(self, monkeypatch):
        monkeypatch.setattr(Modules, "tool_path", staticmethod(lambda name: sys.executable))
        monkeypatch.setattr(Modules, "VERSION_ARGS", {"python": ["--version"]})
        assert Modules.verify_tools() is True

    def test_failing_version_command(self, monkeypatch):
        monkeypatch.setattr(Modules, "tool_path", staticmethod(lambda name: sys.executable))
        monkeypatch.setattr(Modules, "VERSION_ARGS", {"python": ["-c", "import sys; sys.exit(1)"]})
        assert Modules.verify_tools(["python"]) is False
