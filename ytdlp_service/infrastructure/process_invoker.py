"""
Process Invoker

Runs the extraction tool as a child process with a hard deadline and a
cap on captured output. Raw process failures never leave this module:
they are classified into ExtractionError first.
"""

import logging
import os
import re
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ytdlp_service.domain.errors import truncate_diagnostic

from .error_classifier import FailureCondition, classify_failure

DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MAX_BUFFER = 10 * 1024 * 1024

_CHUNK_SIZE = 64 * 1024
_READER_JOIN_TIMEOUT = 2.0
_URL_PATTERN = re.compile(r"https?://\S+")

# The tool runs as leader of its own process group so the whole tree
# (ffmpeg, wrapper scripts) is killed with it.
_USE_PROCESS_GROUP = hasattr(os, "killpg")


def redact_urls(argv: Sequence[str]) -> str:
    """Render argv for logging with every http(s) URL hidden."""
    return " ".join(_URL_PATTERN.sub("[URL_HIDDEN]", str(arg)) for arg in argv)


class ProcessFailure(Exception):
    """Raw failure of a child process, before classification."""

    def __init__(
        self,
        condition: FailureCondition,
        stderr: str = "",
        returncode: Optional[int] = None,
        detail: str = "",
    ):
        super().__init__(detail or condition.value)
        self.condition = condition
        self.stderr = stderr
        self.returncode = returncode


@dataclass(frozen=True)
class ProcessResult:
    """Captured output of a successful run."""

    stdout: str
    stderr: str
    returncode: int
    duration_ms: int


def _kill(proc: subprocess.Popen) -> None:
    """Kill the child and every process in its group."""
    try:
        if _USE_PROCESS_GROUP:
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        # group already gone
        pass


class _StreamCollector(threading.Thread):
    """Drains one pipe into memory, aborting once ``limit`` bytes are exceeded."""

    def __init__(self, stream, limit: int, on_overflow: Callable[[], None], name: str):
        super().__init__(name=name, daemon=True)
        self.stream = stream
        self.limit = limit
        self.on_overflow = on_overflow
        self.chunks: List[bytes] = []
        self.size = 0
        self.overflowed = False

    def run(self) -> None:
        read = getattr(self.stream, "read1", self.stream.read)
        while True:
            try:
                chunk = read(_CHUNK_SIZE)
            except (OSError, ValueError):
                # pipe closed underneath us after a kill
                break
            if not chunk:
                break
            if self.size + len(chunk) > self.limit:
                self.overflowed = True
                self.on_overflow()
                break
            self.chunks.append(chunk)
            self.size += len(chunk)

    def text(self) -> str:
        return b"".join(self.chunks).decode("utf-8", errors="replace")


class ProcessInvoker:
    """
    Executes yt-dlp command lines.

    Each call owns its child process and its capture buffers; nothing is
    shared between concurrent calls except the logger.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def execute(
        self,
        argv: Sequence[str],
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_buffer: int = DEFAULT_MAX_BUFFER,
    ) -> str:
        """
        Run a command and return its stdout.

        Args:
            argv: Full command line, executable first
            timeout_ms: Deadline after which the child is killed
            max_buffer: Maximum bytes captured per stream

        Returns:
            Decoded stdout text

        Raises:
            ExtractionError: On any failure, already classified
        """
        self.logger.info(
            f"Executing yt-dlp command: {redact_urls(argv)} "
            f"(timeout={timeout_ms}ms, max_buffer={max_buffer})"
        )
        started = time.monotonic()

        try:
            result = self.run(argv, timeout_ms, max_buffer)
        except ProcessFailure as failure:
            error = classify_failure(failure.condition, failure.stderr, original_error=failure)
            self.logger.error(
                f"yt-dlp execution failed: code={error.code} "
                f"condition={failure.condition.value} returncode={failure.returncode} "
                f"duration={int((time.monotonic() - started) * 1000)}ms "
                f"detail={failure} stderr={error.diagnostic!r}"
            )
            raise error from failure

        if result.stderr and "WARNING" not in result.stderr:
            self.logger.warning(
                f"yt-dlp stderr output ({result.duration_ms}ms): "
                f"{truncate_diagnostic(result.stderr)}"
            )

        self.logger.info(
            f"yt-dlp command completed successfully in {result.duration_ms}ms "
            f"(output length: {len(result.stdout)})"
        )
        return result.stdout

    def run(self, argv: Sequence[str], timeout_ms: int, max_buffer: int) -> ProcessResult:
        """
        Run a command without classification.

        The child and its whole process group are killed on every exit
        path that leaves them running: deadline, output overflow, an
        exception in this thread, or descendants outliving the child.

        Raises:
            ValueError: If timeout_ms or max_buffer is not positive
            ProcessFailure: If the process could not start, timed out,
                overflowed its buffer or exited non-zero
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if max_buffer <= 0:
            raise ValueError("max_buffer must be positive")

        env = dict(os.environ)
        env["PYTHONIOENCODING"] = "utf-8"

        started = time.monotonic()
        try:
            proc = subprocess.Popen(
                list(argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=0,
                env=env,
                start_new_session=_USE_PROCESS_GROUP,
            )
        except FileNotFoundError as e:
            raise ProcessFailure(FailureCondition.NOT_FOUND, detail=str(e)) from e
        except OSError as e:
            raise ProcessFailure(FailureCondition.EXIT_STATUS, detail=str(e)) from e

        stdout_reader = _StreamCollector(proc.stdout, max_buffer, lambda: _kill(proc), "ytdlp-stdout-reader")
        stderr_reader = _StreamCollector(proc.stderr, max_buffer, lambda: _kill(proc), "ytdlp-stderr-reader")
        stdout_reader.start()
        stderr_reader.start()
        timed_out = False

        try:
            try:
                returncode = proc.wait(timeout=timeout_ms / 1000)
            except subprocess.TimeoutExpired:
                timed_out = True
                _kill(proc)
                returncode = proc.wait()
        finally:
            if proc.poll() is None:
                _kill(proc)
                proc.wait()
            self._drain(proc, (stdout_reader, stderr_reader))

        duration_ms = int((time.monotonic() - started) * 1000)
        stderr_text = stderr_reader.text()

        if timed_out:
            raise ProcessFailure(
                FailureCondition.TIMEOUT,
                stderr=stderr_text,
                returncode=returncode,
                detail=f"Process exceeded deadline of {timeout_ms}ms",
            )
        if stdout_reader.overflowed or stderr_reader.overflowed:
            raise ProcessFailure(
                FailureCondition.OUTPUT_LIMIT,
                stderr=stderr_text,
                returncode=returncode,
                detail=f"Process output exceeded {max_buffer} bytes",
            )
        if returncode != 0:
            raise ProcessFailure(
                FailureCondition.EXIT_STATUS,
                stderr=stderr_text,
                returncode=returncode,
                detail=f"Process exited with status {returncode}",
            )

        return ProcessResult(
            stdout=stdout_reader.text(),
            stderr=stderr_text,
            returncode=returncode,
            duration_ms=duration_ms,
        )

    def _drain(self, proc: subprocess.Popen, readers: Sequence[_StreamCollector]) -> None:
        """
        Wait for the pipe readers, killing the process group if a
        descendant still holds a pipe open after the child has exited.

        A pipe is closed only once its reader has finished with it.
        """
        self._join_all(readers)

        if any(reader.is_alive() for reader in readers):
            self.logger.warning(
                f"yt-dlp exited but a descendant still holds its output open (pid={proc.pid}); "
                "killing the process group"
            )
            _kill(proc)
            self._join_all(readers)

        for reader in readers:
            if reader.is_alive():
                self.logger.error(f"Abandoning {reader.name}: pipe still open after kill (pid={proc.pid})")
            else:
                reader.stream.close()

    @staticmethod
    def _join_all(readers: Sequence[_StreamCollector]) -> None:
        deadline = time.monotonic() + _READER_JOIN_TIMEOUT
        for reader in readers:
            reader.join(max(deadline - time.monotonic(), 0))
