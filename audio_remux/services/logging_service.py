"""
This module provides the file-based diagnostics log of a workspace.

Console output goes through loguru. Failures the run survives (the top-level
audio copy failing, for instance) are also appended to a plain text file in the
workspace, so the reason a result came out video-only is still there after the
console scrolled away.
"""
from pathlib import Path
from typing import Union

from loguru import logger

from ..config.common import ERROR_TEXT
from ..domain.temp_models import Workspace


class ErrorLog:
    """
    Appends human-readable failure reports to `<workspace>/error.txt`.

    One `write()` call is one report: its lines, then a separator, so the file
    reads as a chronological record of what went wrong in the workspace.

    Attributes:
        log_file_path (Path): The text file reports are appended to.
    """

    separator: str = "=" * 50

    def __init__(self, workspace: Union[Workspace, Path], filename: str = ERROR_TEXT):
        root = workspace.root if isinstance(workspace, Workspace) else Path(workspace)
        self.log_file_path: Path = root / filename

    def write(self, *lines: str):
        if not lines:
            return

        report = "\n".join(lines) + f"\n{self.separator}\n"
        try:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
            with self.log_file_path.open("a", encoding="utf-8") as report_file:
                report_file.write(report)
        except OSError as e:
            # The report still reaches the console.
            logger.error(f"Could not append to {self.log_file_path}: {e}")
            for line in lines:
                logger.error(f"  | {line}")
