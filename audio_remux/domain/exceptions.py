"""
Defines custom exception types for audio_remux.

Probe errors, process failures and encoding failures each get their own branch
so callers can decide precisely what is fatal. The top-level audio copy catches
`ProcessException` and degrades to "no audio"; everything raised once the
per-stream re-encode or the remux has started is meant to abort the run.

All custom exceptions inherit from the base `AudioRemuxException`.
"""
from typing import List, Optional, Sequence


class AudioRemuxException(Exception):
    """Base class for all custom exceptions in audio_remux."""

    pass


# --- MediaFile / Probe Specific Exceptions ---
class MediaFileException(AudioRemuxException):
    """
    Base class for exceptions related to media file analysis (probing with ffprobe).
    """

    pass


class ProbeException(MediaFileException):
    """Raised when ffprobe cannot open or parse the container."""

    pass


class StreamNotFoundException(MediaFileException):
    """
    Raised when the container has no stream of the requested medium.

    Probing functions never guess a default, so asking for the frame rate of an
    audio-only file ends here.
    """

    pass


class DecoderException(MediaFileException):
    """
    Raised when a decoder context cannot be built from a stream's parameters.

    For ffprobe output this means the fields a decoder would report (pixel
    format, width, height) are missing from the stream header.
    """

    pass


# --- External Process Exceptions ---
class ProcessException(AudioRemuxException):
    """
    Base class for failures at an external-process boundary.

    Attributes:
        cmd (List[str]): The invocation that failed.
        returncode (Optional[int]): Exit status, or None if the process never ran.
        stderr (str): Captured standard error, if any.
    """

    def __init__(
        self,
        message: str,
        cmd: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.cmd: List[str] = [str(part) for part in cmd]
        self.returncode = returncode
        self.stderr = stderr


class ProcessSpawnException(ProcessException):
    """Raised when an executable cannot be started (missing binary, permissions)."""

    pass


class ProcessExitException(ProcessException):
    """Raised when a process ran but exited with a non-zero status."""

    pass


class BrokenPipeException(ProcessException):
    """
    Raised when the producer of a pipe was cut off by its consumer.

    The consumer exited successfully, but the producer was killed writing to a
    closed pipe, so the consumer's output cannot be trusted to be complete.
    """

    pass


# --- Encoding Specific Exceptions ---
class EncodingException(AudioRemuxException):
    """Base class for exceptions raised while producing audio outputs."""

    pass


class AudioEncodeException(EncodingException):
    """
    Raised when the per-stream extraction or Opus encode fails.

    This is fatal to the run: the remux expects exactly one output file per
    audio stream discovered in the source.
    """

    pass


class RemuxException(EncodingException):
    """Raised when the final audio/subtitle merge fails. There is no fallback."""

    pass


class WorkspaceException(AudioRemuxException):
    """Raised when the extraction workspace (or its audio/ directory) cannot be created."""

    pass
