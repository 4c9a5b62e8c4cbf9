"""
This module folds the per-stream Opus files back into one container.

In single-track ("opus") mode the first pass only keeps the first audio track,
because carrying several tracks through it would desynchronize the subtitles.
That single-track file is kept as a skeleton: it donates the synchronized
subtitle streams. The actual audio comes from re-encoding every original stream
independently, so no track is lost. The final merge is a pure stream copy.
"""
from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from ..domain.exceptions import ProcessException, RemuxException
from ..domain.media import MediaFile
from ..domain.temp_models import AudioJob, Workspace
from ..utils.command_builder import FFmpegCommand
from ..utils.module_updater import Modules
from ..utils.process import run_cmd
from .audio_encoder import StreamAudioEncoder


class RemuxComposer:
    """
    Builds and runs the audio/subtitle merge for one workspace.

    The merge takes one input per encoded stream, in ascending stream-index
    order, and the skeleton as the last input. Audio input `i` is mapped as
    `i:a:0`; every subtitle stream is taken from the skeleton (`N:s?`, absent
    subtitles are not an error).
    """

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def build_merge_cmd(self, jobs: Sequence[AudioJob], skeleton: Path, output: Path) -> List[str]:
        command = FFmpegCommand(Modules.tool_path("ffmpeg"), ["-y", "-hide_banner", "-v", "quiet"])
        audio_inputs = [
            command.add_input(job.output_path)
            for job in sorted(jobs, key=lambda j: j.stream_index)
        ]
        skeleton_input = command.add_input(skeleton)

        for input_index in audio_inputs:
            command.add_map(f"{input_index}:a:0")
        command.add_map(f"{skeleton_input}:s?")
        command.add_codec_options("-c", "copy")
        return command.build(output)

    def merge(self, jobs: Sequence[AudioJob], skeleton: Path, output: Path) -> Path:
        """
        Runs the merge and waits for it.

        Raises:
            RemuxException: If ffmpeg cannot be started or exits non-zero. Partial
                            output is left where it is.
        """
        cmd = self.build_merge_cmd(jobs, skeleton, output)
        logger.info(f"Remuxing {len(jobs)} audio stream(s) with subtitles from {Path(skeleton).name} -> {Path(output).name}")
        try:
            run_cmd(cmd, show_cmd=__debug__, cmd_log_file_path=self.workspace.command_log, check=True)
        except ProcessException as e:
            logger.error(f"Audio/subtitle remux failed (rc={e.returncode}): {e.stderr}")
            raise RemuxException(f"Failed to remux audio into {output}: {e}") from e
        return Path(output)


def handle_opus(
    source: Path,
    merge_with: Path,
    output: Path,
    temp: Union[Workspace, Path],
    max_workers: Optional[int] = None,
) -> Path:
    """
    Re-encodes every audio stream of `source` and merges them with the subtitles of `merge_with`.

    Args:
        source: The original source. Its audio streams are what gets re-encoded.
        merge_with: The single-track skeleton produced by `encode_audio`.
        output: Where the merged container is written.
        temp: The workspace directory (or a `Workspace`).
        max_workers: Streams re-encoded at once; defaults to the configured value.

    Returns:
        `output`.

    Raises:
        WorkspaceException, AudioEncodeException, RemuxException: Each aborts the run;
        once this function is entered there is no fallback.
    """
    workspace = temp if isinstance(temp, Workspace) else Workspace(temp)
    workspace.ensure_audio_dir()

    jobs = StreamAudioEncoder(MediaFile(Path(source)), workspace, max_workers).encode()
    return RemuxComposer(workspace).merge(jobs, Path(merge_with), Path(output))
