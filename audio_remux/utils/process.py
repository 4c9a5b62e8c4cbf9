"""
This module runs the external tools.

`run_cmd` runs a single command to completion. `ProcessPipeline` runs a
producer/consumer pair connected by an OS pipe, which is how every audio stream
travels from the ffmpeg extraction stage into opusenc. Both translate the ways
a process can fail into the `ProcessException` family, so callers decide what
is fatal and what is not.
"""
import signal
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from ..domain.exceptions import (
    BrokenPipeException,
    ProcessExitException,
    ProcessSpawnException,
)
from .format_utils import format_cmd

_SIGPIPE = getattr(signal, "SIGPIPE", None)


def _log_command(cmd_list: Sequence[str], show_cmd: bool, cmd_log_file_path: Optional[Path]):
    display_cmd_str = format_cmd(cmd_list)
    if show_cmd:
        logger.debug(f"Executing command: {display_cmd_str}")

    if cmd_log_file_path:
        try:
            cmd_log_file_path.parent.mkdir(parents=True, exist_ok=True)
            with cmd_log_file_path.open("a", encoding="utf-8") as cmd_f:
                cmd_f.write(display_cmd_str + "\n")
        except OSError as e:
            logger.error(f"Failed to write command to log file {cmd_log_file_path}: {e}")


def _decode(data) -> str:
    if not data:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_cmd(
    cmd_parts: Sequence[str],
    show_cmd: bool = False,
    cmd_log_file_path: Optional[Path] = None,
    check: bool = False,
) -> subprocess.CompletedProcess:
    """
    Executes an external command and captures its output.

    Args:
        cmd_parts: The command to execute as a list of arguments.
        show_cmd: If True, the command will be logged at the DEBUG level before execution.
        cmd_log_file_path: If provided, the executed command string will be appended
                           to this file.
        check: If True, a non-zero exit status raises `ProcessExitException`.

    Returns:
        The `subprocess.CompletedProcess`, with stdout and stderr decoded as text.

    Raises:
        ProcessSpawnException: If the executable cannot be started.
        ProcessExitException: If `check` is set and the command exits non-zero.
    """
    cmd_list: List[str] = [str(part) for part in cmd_parts]
    if not cmd_list:
        raise ValueError("run_cmd received an empty command list.")

    _log_command(cmd_list, show_cmd, cmd_log_file_path)

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except OSError as e:
        logger.error(f"Error: could not start '{cmd_list[0]}'. Ensure it's in your system's PATH or configured correctly. ({e})")
        raise ProcessSpawnException(f"Failed to start {cmd_list[0]}: {e}", cmd=cmd_list) from e

    if result.stdout:
        logger.trace(f"Command stdout: {result.stdout[:500]}")
    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    if check and result.returncode != 0:
        raise ProcessExitException(
            f"{cmd_list[0]} exited with status {result.returncode}",
            cmd=cmd_list,
            returncode=result.returncode,
            stderr=result.stderr,
        )
    return result


class ProcessPipeline:
    """
    Runs two processes with the producer's stdout feeding the consumer's stdin.

    Both processes run concurrently; the OS pipe between them is the only
    buffer. `run()` blocks until both have exited. The producer's stderr goes
    to a temporary file rather than a second pipe, so a chatty producer can
    never stall on a full stderr buffer nobody is reading.

    Attributes:
        producer_cmd (List[str]): The upstream command, writing to stdout.
        consumer_cmd (List[str]): The downstream command, reading stdin.
    """

    def __init__(
        self,
        producer_cmd: Sequence[str],
        consumer_cmd: Sequence[str],
        show_cmd: bool = False,
        cmd_log_file_path: Optional[Path] = None,
    ):
        self.producer_cmd: List[str] = [str(part) for part in producer_cmd]
        self.consumer_cmd: List[str] = [str(part) for part in consumer_cmd]
        self.show_cmd = show_cmd
        self.cmd_log_file_path = cmd_log_file_path

    def __repr__(self) -> str:
        return f"ProcessPipeline({format_cmd(self.producer_cmd)} | {format_cmd(self.consumer_cmd)})"

    def run(self) -> Tuple[int, int]:
        """
        Spawns both stages, waits for both, and checks how they ended.

        Returns:
            The (producer, consumer) exit statuses, both 0.

        Raises:
            ProcessSpawnException: Either stage could not be started.
            ProcessExitException: Either stage exited non-zero. The consumer is
                                  checked first, since a dead consumer is what
                                  usually takes the producer down with it.
            BrokenPipeException: The consumer succeeded but the producer was
                                 killed writing into the closed pipe.
        """
        _log_command(self.producer_cmd + ["|"] + self.consumer_cmd, self.show_cmd, self.cmd_log_file_path)

        with tempfile.TemporaryFile() as producer_stderr:
            try:
                producer = subprocess.Popen(
                    self.producer_cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=producer_stderr,
                )
            except OSError as e:
                logger.error(f"Failed to start pipeline producer '{self.producer_cmd[0]}': {e}")
                raise ProcessSpawnException(
                    f"Failed to start {self.producer_cmd[0]}: {e}", cmd=self.producer_cmd
                ) from e

            try:
                consumer = subprocess.Popen(
                    self.consumer_cmd,
                    stdin=producer.stdout,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
            except OSError as e:
                producer.kill()
                producer.stdout.close()
                producer.wait()
                logger.error(f"Failed to start pipeline consumer '{self.consumer_cmd[0]}': {e}")
                raise ProcessSpawnException(
                    f"Failed to start {self.consumer_cmd[0]}: {e}", cmd=self.consumer_cmd
                ) from e

            # Only the consumer may hold the read end now, so the producer sees
            # SIGPIPE if the consumer goes away.
            producer.stdout.close()

            _, consumer_err = consumer.communicate()
            producer_rc = producer.wait()
            producer_stderr.seek(0)
            producer_err = _decode(producer_stderr.read())

        consumer_err = _decode(consumer_err)

        if consumer.returncode != 0:
            logger.debug(f"Pipeline consumer stderr (rc={consumer.returncode}): {consumer_err}")
            raise ProcessExitException(
                f"{self.consumer_cmd[0]} exited with status {consumer.returncode}",
                cmd=self.consumer_cmd,
                returncode=consumer.returncode,
                stderr=consumer_err,
            )
        if _SIGPIPE is not None and producer_rc == -_SIGPIPE:
            raise BrokenPipeException(
                f"{self.producer_cmd[0]} was cut off by a closed pipe",
                cmd=self.producer_cmd,
                returncode=producer_rc,
                stderr=producer_err,
            )
        if producer_rc != 0:
            logger.debug(f"Pipeline producer stderr (rc={producer_rc}): {producer_err}")
            raise ProcessExitException(
                f"{self.producer_cmd[0]} exited with status {producer_rc}",
                cmd=self.producer_cmd,
                returncode=producer_rc,
                stderr=producer_err,
            )
        return producer_rc, consumer.returncode
