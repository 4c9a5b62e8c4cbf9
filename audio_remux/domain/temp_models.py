"""
Defines data models for the temporary state of one audio run: the extraction
workspace and the per-stream audio jobs that write into it.
"""
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .exceptions import WorkspaceException
from ..config.audio import (
    AUDIO_DIR_NAME,
    AUDIO_STEM,
    CONTAINER_EXTENSION,
    INTERMEDIATE_FORMAT,
    LOSSY_EXTENSION,
    SINGLE_TRACK_STEM,
)
from ..config.common import COMMAND_TEXT, ERROR_TEXT


class Workspace:
    """
    The directory scoped to one transcode run.

    The workspace is passed explicitly to every component instead of living in
    a module-level path, so two runs only collide if the caller hands them the
    same directory. Nothing in here is ever deleted; the caller owns the
    directory's lifecycle.

    Layout:
        <root>/audio/<stream index>.opus   one file per source audio stream
        <root>/misc.mkv                     single-track skeleton (opus mode)
        <root>/audio.mkv                    standard-mode output and final remux
        <root>/cmd.txt, <root>/error.txt    diagnostics

    Attributes:
        root (Path): The workspace directory.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"Workspace({str(self.root)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Workspace) and self.root == other.root

    def __hash__(self) -> int:
        return hash(self.root)

    @property
    def audio_dir(self) -> Path:
        return self.root / AUDIO_DIR_NAME

    @property
    def single_track_file(self) -> Path:
        return self.root / f"{SINGLE_TRACK_STEM}.{CONTAINER_EXTENSION}"

    @property
    def audio_file(self) -> Path:
        return self.root / f"{AUDIO_STEM}.{CONTAINER_EXTENSION}"

    @property
    def command_log(self) -> Path:
        return self.root / COMMAND_TEXT

    @property
    def error_log(self) -> Path:
        return self.root / ERROR_TEXT

    def stream_audio_file(self, stream_index: int) -> Path:
        return self.audio_dir / f"{stream_index}.{LOSSY_EXTENSION}"

    def ensure(self) -> Path:
        """Creates the workspace root if it is missing."""
        return self._mkdir(self.root)

    def ensure_audio_dir(self) -> Path:
        """Creates <root>/audio (and the root) if they are missing."""
        return self._mkdir(self.audio_dir)

    @staticmethod
    def _mkdir(directory: Path) -> Path:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create workspace directory {directory}: {e}")
            raise WorkspaceException(f"Cannot create workspace directory {directory}: {e}") from e
        return directory


@dataclass
class AudioJob:
    """
    One audio stream's trip through the extract-and-encode pipe.

    Attributes:
        stream_index (int): Absolute index of the source stream.
        channel_equivalent (float): Surround classification used for the bitrate.
        bitrate_kbps (int): Target handed to the Opus encoder.
        output_path (Path): <workspace>/audio/<stream_index>.opus
        intermediate_format (str): Lossless format streamed between the stages.
        intermediate_target (str): Where the extraction stage writes; "-" is its stdout.
    """

    stream_index: int
    channel_equivalent: float
    bitrate_kbps: int
    output_path: Path
    intermediate_format: str = INTERMEDIATE_FORMAT
    intermediate_target: str = "-"
