"""
This module contains helper functions for formatting data into human-readable strings,
mostly for log messages.
"""
import os
import shlex
import subprocess
from typing import Sequence


def format_cmd(cmd_list: Sequence[str]) -> str:
    """
    Joins a command list into a string that can be pasted into a shell.

    Uses the Windows quoting rules on Windows and POSIX quoting elsewhere.
    """
    cmd_list = [str(part) for part in cmd_list]
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def formatted_size(size_bytes: int) -> str:
    """
    Renders a byte count with a binary unit for log messages.

    Whole values drop their decimals: 1536 is "1.50 KB", 2097152 is "2 MB".
    """
    size = float(max(size_bytes, 0))
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size < 1024 or unit == "TB":
            break
        size /= 1024

    if unit == "B":
        return f"{int(size)} B"
    text = f"{size:.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    return f"{text} {unit}"
