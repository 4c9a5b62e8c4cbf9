"""
This module defines the per-stream audio encoder.

Every audio stream of a source is re-encoded on its own: an ffmpeg process
extracts exactly that stream as FLAC onto its stdout, and opusenc reads the
pipe and writes `<workspace>/audio/<stream index>.opus` at a bitrate derived
from the stream's channel layout.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from loguru import logger

from ..config.common import STREAM_ENCODE_WORKERS
from ..domain.channel_layout import bitrate_for_equivalent, channel_equivalent
from ..domain.exceptions import AudioEncodeException, ProcessException
from ..domain.media import MediaFile, StreamInfo
from ..domain.temp_models import AudioJob, Workspace
from ..utils.command_builder import FFmpegCommand
from ..utils.format_utils import formatted_size
from ..utils.module_updater import Modules
from ..utils.process import ProcessPipeline


class StreamAudioEncoder:
    """
    Re-encodes every audio stream of a source into its own Opus file.

    Streams are processed in ascending absolute-index order. With the default
    single worker each pipe runs to completion before the next starts; more
    workers overlap the jobs but the returned list keeps the same order, which
    is the order the remux composer maps them in.

    A failed stream is never skipped: the remux expects one file per audio
    stream of the source, so any failure raises `AudioEncodeException`.

    Attributes:
        media_file (MediaFile): The probed source.
        workspace (Workspace): Where the per-stream files are written.
        max_workers (int): How many stream pipes may run at once.
    """

    def __init__(
        self,
        media_file: MediaFile,
        workspace: Workspace,
        max_workers: Optional[int] = None,
    ):
        self.media_file = media_file
        self.workspace = workspace
        self.max_workers = max(1, max_workers or STREAM_ENCODE_WORKERS)

    def build_job(self, stream: StreamInfo) -> AudioJob:
        equivalent = channel_equivalent(stream.channel_layout_bits, stream.channels)
        return AudioJob(
            stream_index=stream.index,
            channel_equivalent=equivalent,
            bitrate_kbps=bitrate_for_equivalent(equivalent),
            output_path=self.workspace.stream_audio_file(stream.index),
        )

    def build_jobs(self) -> List[AudioJob]:
        return [self.build_job(s) for s in sorted(self.media_file.audio_streams, key=lambda s: s.index)]

    def extract_cmd(self, job: AudioJob) -> List[str]:
        """ffmpeg stage: exactly one stream, no decode of anything else, FLAC on stdout."""
        command = FFmpegCommand(Modules.tool_path("ffmpeg"), ["-hide_banner", "-v", "quiet"])
        command.add_input(self.media_file.path)
        command.add_output_options("-vn", "-sn", "-dn")
        command.add_map(f"0:{job.stream_index}")
        command.add_extra_args(["-map_metadata", f"0:s:{job.stream_index}", "-f", job.intermediate_format])
        return command.build(job.intermediate_target)

    def encode_cmd(self, job: AudioJob) -> List[str]:
        """opusenc stage: reads stdin, VBR at the job's target bitrate."""
        return [
            Modules.tool_path("opusenc"),
            "--quiet",
            "--vbr",
            "--bitrate",
            str(job.bitrate_kbps),
            "-",
            str(job.output_path),
        ]

    def encode_job(self, job: AudioJob) -> AudioJob:
        logger.info(
            f"Encoding audio stream {job.stream_index} of {self.media_file.filename} "
            f"({job.channel_equivalent} ch) at {job.bitrate_kbps} kbps -> {job.output_path.name}"
        )
        pipeline = ProcessPipeline(
            self.extract_cmd(job),
            self.encode_cmd(job),
            show_cmd=__debug__,
            cmd_log_file_path=self.workspace.command_log,
        )
        try:
            pipeline.run()
        except ProcessException as e:
            logger.error(f"Audio stream {job.stream_index} failed ({type(e).__name__}): {e}\n{e.stderr}")
            raise AudioEncodeException(
                f"Failed to encode audio stream {job.stream_index} of {self.media_file.filename}: {e}"
            ) from e

        if job.output_path.exists():
            logger.debug(f"Stream {job.stream_index} encoded: {formatted_size(job.output_path.stat().st_size)}")
        return job

    def encode(self) -> List[AudioJob]:
        """
        Runs every job and returns them in ascending stream-index order.

        Raises:
            WorkspaceException: If the audio directory cannot be created.
            AudioEncodeException: If any stream fails.
        """
        self.workspace.ensure_audio_dir()
        jobs = self.build_jobs()
        if self.max_workers == 1 or len(jobs) <= 1:
            return [self.encode_job(job) for job in jobs]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self.encode_job, jobs))
