"""
Helpers for handing paths and raw frames to ffmpeg from the video side of the
transcode: escaping a path for use inside a filter graph, and the command that
turns any input into a y4m stream on stdout for a video encoder to read.
"""
import os
from pathlib import Path
from typing import Iterable, List, Union

from .module_updater import Modules


def escape_path_in_filter(path: Union[str, Path], windows: bool = os.name == "nt") -> str:
    """
    Escapes a path so it can be embedded in an ffmpeg filter-graph string.

    The path is made absolute first. On Windows, backslashes become forward
    slashes and the drive colon is escaped, since ffmpeg's filter parser would
    otherwise read it as an option separator. `[`, `]` and `,` are structural
    in filter graphs on every platform and are always escaped.
    """
    escaped = os.path.abspath(str(path))
    if windows:
        escaped = escaped.replace("\\", "/").replace(":", r"\\:")
    return escaped.replace("[", r"\[").replace("]", r"\]").replace(",", r"\,")


def compose_ffmpeg_pipe(params: Iterable[str], pix_format: str) -> List[str]:
    """
    Builds the ffmpeg command that re-pipes stdin as yuv4mpegpipe on stdout.

    `params` are inserted between the input and the output format (typically
    filters such as `-vf scale=...`); `pix_format` is the pixel format the
    downstream encoder expects, e.g. "yuv420p10le".
    """
    cmd = [Modules.tool_path("ffmpeg"), "-y", "-hide_banner", "-loglevel", "error", "-i", "-"]
    cmd.extend(str(p) for p in params)
    cmd.extend(["-pix_fmt", pix_format, "-strict", "-1", "-f", "yuv4mpegpipe", "-"])
    return cmd
