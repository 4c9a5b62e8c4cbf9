"""
This module provides the Modules class to locate and verify the external tools
required by the application: ffmpeg, ffprobe and opusenc.
"""
import subprocess
import sys
from typing import Dict, Iterable, List, Optional

from loguru import logger

# Import paths from the user configuration file.
from ..config.common import MODULE_PATH


class Modules:
    """
    A utility class to handle operations related to external tools.

    It reads `paths.ffmpeg_dir` from the user's `config.user.yaml` to locate the
    executables and falls back to the system's PATH if no directory is
    configured or the tool is not found there.
    """

    # Arguments that make each tool print its version and exit 0.
    VERSION_ARGS: Dict[str, List[str]] = {
        "ffmpeg": ["-version"],
        "ffprobe": ["-version"],
        "opusenc": ["--version"],
    }

    @staticmethod
    def tool_path(name: str) -> str:
        """
        Determines the executable to invoke for `name`.

        It prioritizes the directory from the user configuration (`ffmpeg_dir`)
        and handles platform-specific executable names (e.g., adding '.exe' on
        Windows).

        Returns:
            The absolute path to the configured executable, or the bare name so
            the system's PATH is searched.
        """
        exe_name = f"{name}.exe" if sys.platform == "win32" else name

        if MODULE_PATH and MODULE_PATH.is_dir():
            configured_path = MODULE_PATH / exe_name
            if configured_path.is_file():
                return str(configured_path)
            logger.warning(f"`ffmpeg_dir` is configured, but '{exe_name}' was not found there. Falling back to system PATH.")

        return name

    @staticmethod
    def verify_tool(name: str) -> bool:
        """
        Verifies that a tool is installed, accessible, and can be executed.

        Runs the tool's version command and logs the first line of its output.
        """
        cmd = [Modules.tool_path(name)] + Modules.VERSION_ARGS.get(name, ["-version"])
        try:
            result = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"{name} version command failed (return code {e.returncode}):\n{e.stderr}")
            return False
        except FileNotFoundError:
            logger.error(
                f"{name} command not found. Please ensure it is installed and accessible.\n"
                "You can either add it to your system's PATH or set `paths.ffmpeg_dir` in 'config.user.yaml'."
            )
            return False

        version_output = (result.stdout or result.stderr).splitlines()
        logger.info(f"{name} version check successful: {version_output[0] if version_output else '(no output)'}")
        return True

    @staticmethod
    def verify_tools(names: Optional[Iterable[str]] = None) -> bool:
        """
        Runs the startup checks for `names` (all known tools by default).
        Typically called once when the application starts.
        """
        results = [Modules.verify_tool(name) for name in (names or Modules.VERSION_ARGS)]
        return all(results)
