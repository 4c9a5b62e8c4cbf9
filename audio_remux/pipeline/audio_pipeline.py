from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from ..domain.exceptions import ProcessException
from ..domain.media import MediaFile
from ..domain.temp_models import Workspace
from ..services.logging_service import ErrorLog
from ..services.remux_service import handle_opus
from ..utils.command_builder import FFmpegCommand
from ..utils.format_utils import format_cmd
from ..utils.module_updater import Modules
from ..utils.process import run_cmd


class AudioPipeline:
    """
    Produces the audio (and subtitle) container for one source.

    Standard mode stream-copies every audio track, with the caller's extra
    audio parameters appended, into `<workspace>/audio.mkv`. Nothing else runs
    afterwards.

    Single-track ("opus") mode first copies only the first audio track plus the
    subtitles into `<workspace>/misc.mkv`, since carrying several tracks
    through this pass would desynchronize the subtitles. Every original audio
    track is then re-encoded on its own and merged with that skeleton into
    `<workspace>/audio.mkv`.

    Attributes:
        source (Path): The source media file.
        workspace (Workspace): The run's extraction workspace.
        opus_mode (bool): Single-track mode.
        audio_params (List[str]): Extra audio options for standard mode.
        max_workers (Optional[int]): Streams re-encoded at once in single-track mode.
    """

    def __init__(
        self,
        source: Path,
        workspace: Union[Workspace, Path],
        opus_mode: bool = False,
        audio_params: Sequence[str] = (),
        max_workers: Optional[int] = None,
    ):
        self.source = Path(source)
        self.workspace = workspace if isinstance(workspace, Workspace) else Workspace(workspace)
        self.opus_mode = opus_mode
        self.audio_params: List[str] = [str(p) for p in audio_params]
        self.max_workers = max_workers

    @property
    def copy_output(self) -> Path:
        return self.workspace.single_track_file if self.opus_mode else self.workspace.audio_file

    def build_copy_cmd(self) -> List[str]:
        command = FFmpegCommand(Modules.tool_path("ffmpeg"), ["-y", "-hide_banner", "-loglevel", "error"])
        command.add_input(self.source)
        command.add_output_options("-map_metadata", "0", "-vn", "-dn")
        if self.opus_mode:
            # One audio track only, to keep the subtitles in sync.
            command.add_map("0:a:0")
            command.add_map("0:s?")
        else:
            command.add_map("0")
        command.add_codec_options("-c", "copy")
        if not self.opus_mode:
            command.add_extra_args(self.audio_params)
        return command.build(self.copy_output)

    def _report_failure(self, cmd: List[str], returncode: Optional[int], stderr: str):
        logger.warning(
            f"FFmpeg failed to encode audio! (rc={returncode})\n{stderr.strip()}\nParams: {format_cmd(cmd)}"
        )
        ErrorLog(self.workspace).write(
            f"Audio encode failed for: {self.source}",
            f"Command: {format_cmd(cmd)}",
            f"Return code: {returncode}",
            f"Stderr: {stderr.strip()}",
        )

    def run(self) -> Optional[Path]:
        """
        Returns the audio container, or None if the source yields no audio.

        A source without audio and a failing audio copy both return None; the
        latter is logged as a warning so the transcode can carry on video-only.
        Once single-track mode reaches the re-encode and remux, failures raise.
        """
        media_file = MediaFile(self.source)
        if not media_file.has_audio():
            logger.info(f"No audio stream in {media_file.filename}; continuing without audio.")
            return None

        self.workspace.ensure()
        cmd = self.build_copy_cmd()
        try:
            result = run_cmd(cmd, show_cmd=__debug__, cmd_log_file_path=self.workspace.command_log)
        except ProcessException as e:
            self._report_failure(e.cmd or cmd, e.returncode, str(e))
            return None

        if result.returncode != 0:
            self._report_failure(cmd, result.returncode, result.stderr or "")
            return None

        if not self.opus_mode:
            logger.info(f"Audio copied to {self.copy_output}")
            return self.copy_output

        return handle_opus(
            self.source,
            self.copy_output,
            self.workspace.audio_file,
            self.workspace,
            max_workers=self.max_workers,
        )


def encode_audio(
    input: Union[str, Path],
    temp: Union[str, Path],
    opus_mode: bool,
    audio_params: Sequence[str] = (),
    max_workers: Optional[int] = None,
) -> Optional[Path]:
    """
    Encodes the audio of `input` into the workspace `temp`, blocking the calling thread.

    Returns the path of the audio container if the source has audio and it was
    encoded, or None otherwise.
    """
    return AudioPipeline(Path(input), Workspace(Path(temp)), opus_mode, audio_params, max_workers).run()
