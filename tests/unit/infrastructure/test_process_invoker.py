"""
Unit tests for ProcessInvoker.

Drives real child processes through ``sys.executable -c`` scripts so the
deadline, output cap and exit-status paths run for real.
"""

import logging
import os
import sys
import time

import pytest

from ytdlp_service.domain.errors import ExtractionError, ExtractionErrorKind
from ytdlp_service.infrastructure.error_classifier import FailureCondition
from ytdlp_service.infrastructure.process_invoker import (
    ProcessFailure,
    ProcessInvoker,
    redact_urls,
)


def python(script: str):
    return [sys.executable, "-c", script]


@pytest.fixture
def invoker():
    return ProcessInvoker(logging.getLogger("test.invoker"))


class TestExecute:
    """Test the classified entry point."""

    def test_returns_stdout(self, invoker):
        output = invoker.execute(python("print('{\"title\": \"X\"}')"), timeout_ms=10000)

        assert output.strip() == '{"title": "X"}'

    def test_child_output_is_utf8(self, invoker):
        output = invoker.execute(python("print('caf\\u00e9 \\u2713')"), timeout_ms=10000)

        assert output.strip() == "café ✓"

    def test_deadline_kills_child_and_raises_timeout(self, invoker):
        with pytest.raises(ExtractionError) as exc_info:
            invoker.execute(python("import time; time.sleep(30)"), timeout_ms=300)

        assert exc_info.value.kind is ExtractionErrorKind.TIMEOUT_ERROR
        assert exc_info.value.message == (
            "Request timed out. The video might be too large or the server is slow."
        )

    def test_missing_executable(self, invoker):
        with pytest.raises(ExtractionError) as exc_info:
            invoker.execute(["definitely-not-a-real-yt-dlp-binary", "--version"], timeout_ms=1000)

        assert exc_info.value.kind is ExtractionErrorKind.YTDLP_NOT_FOUND

    def test_non_zero_exit_is_classified_from_stderr(self, invoker):
        script = "import sys; sys.stderr.write('ERROR: [youtube] abc: Video unavailable\\n'); sys.exit(1)"

        with pytest.raises(ExtractionError) as exc_info:
            invoker.execute(python(script), timeout_ms=10000)

        assert exc_info.value.kind is ExtractionErrorKind.VIDEO_UNAVAILABLE
        assert "Video unavailable" in exc_info.value.diagnostic
        assert isinstance(exc_info.value.__cause__, ProcessFailure)

    def test_non_zero_exit_without_known_text(self, invoker):
        with pytest.raises(ExtractionError) as exc_info:
            invoker.execute(python("import sys; sys.exit(2)"), timeout_ms=10000)

        assert exc_info.value.kind is ExtractionErrorKind.YTDLP_ERROR

    def test_output_over_limit_aborts(self, invoker):
        script = "import sys; sys.stdout.write('x' * 100000); sys.stdout.flush()"

        with pytest.raises(ExtractionError) as exc_info:
            invoker.execute(python(script), timeout_ms=10000, max_buffer=1024)

        assert exc_info.value.kind is ExtractionErrorKind.YTDLP_ERROR
        assert isinstance(exc_info.value.__cause__, ProcessFailure)
        assert exc_info.value.__cause__.condition is FailureCondition.OUTPUT_LIMIT

    def test_stderr_on_success_is_logged_not_raised(self, invoker, caplog):
        script = "import sys; sys.stderr.write('some informational text\\n'); print('ok')"

        with caplog.at_level(logging.WARNING, logger="test.invoker"):
            output = invoker.execute(python(script), timeout_ms=10000)

        assert output.strip() == "ok"
        assert "some informational text" in caplog.text

    def test_warning_marker_on_stderr_is_not_logged(self, invoker, caplog):
        script = "import sys; sys.stderr.write('WARNING: falling back\\n'); print('ok')"

        with caplog.at_level(logging.WARNING, logger="test.invoker"):
            invoker.execute(python(script), timeout_ms=10000)

        assert "falling back" not in caplog.text

    def test_invocation_log_hides_urls(self, invoker, caplog):
        with caplog.at_level(logging.INFO, logger="test.invoker"):
            invoker.execute(python("print('ok')") + ["https://www.youtube.com/watch?v=secret"], timeout_ms=10000)

        assert "watch?v=secret" not in caplog.text
        assert "[URL_HIDDEN]" in caplog.text


class TestRun:
    """Test the unclassified runner."""

    def test_result_fields(self, invoker):
        result = invoker.run(python("import sys; print('out'); sys.stderr.write('err')"), 10000, 4096)

        assert result.stdout.strip() == "out"
        assert result.stderr == "err"
        assert result.returncode == 0
        assert result.duration_ms >= 0

    def test_timeout_condition(self, invoker):
        with pytest.raises(ProcessFailure) as exc_info:
            invoker.run(python("import time; time.sleep(30)"), 200, 4096)

        assert exc_info.value.condition is FailureCondition.TIMEOUT

    @pytest.mark.parametrize("timeout_ms,max_buffer", [(0, 1024), (1000, 0), (-5, 1024)])
    def test_rejects_non_positive_limits(self, invoker, timeout_ms, max_buffer):
        with pytest.raises(ValueError):
            invoker.run(python("print('ok')"), timeout_ms, max_buffer)


# Child spawns a long-lived grandchild that inherits both pipes and
# reports the grandchild's pid on stderr.
SPAWN_GRANDCHILD = (
    "import subprocess, sys\n"
    "child = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(20)'])\n"
    "sys.stderr.write(f'{child.pid}\\n')\n"
    "sys.stderr.flush()\n"
)


def _is_running(pid: int) -> bool:
    """False once the process is gone or a zombie."""
    try:
        with open(f"/proc/{pid}/stat") as stat:
            state = stat.read().rsplit(")", 1)[1].split()[0]
    except FileNotFoundError:
        return False
    return state != "Z"


def _wait_until_gone(pid: int, within: float = 3.0) -> bool:
    deadline = time.monotonic() + within
    while time.monotonic() < deadline:
        if not _is_running(pid):
            return True
        time.sleep(0.05)
    return False


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="process groups and /proc are Linux-specific")
class TestProcessTree:
    """Descendants of the tool must not outlive the deadline."""

    def test_deadline_holds_when_grandchild_keeps_pipes_open(self, invoker):
        started = time.monotonic()

        with pytest.raises(ExtractionError) as exc_info:
            invoker.execute(python(SPAWN_GRANDCHILD + "import time\ntime.sleep(30)\n"), timeout_ms=500)

        assert exc_info.value.kind is ExtractionErrorKind.TIMEOUT_ERROR
        assert time.monotonic() - started < 3.0

    def test_deadline_kills_grandchild(self, invoker):
        with pytest.raises(ProcessFailure) as exc_info:
            invoker.run(python(SPAWN_GRANDCHILD + "import time\ntime.sleep(30)\n"), 500, 4096)

        assert exc_info.value.condition is FailureCondition.TIMEOUT
        grandchild_pid = int(exc_info.value.stderr.split()[0])
        assert _wait_until_gone(grandchild_pid)

    def test_lingering_grandchild_is_killed_after_child_exits(self, invoker):
        started = time.monotonic()

        result = invoker.run(python(SPAWN_GRANDCHILD + "print('done')\n"), 10000, 4096)

        assert result.stdout.strip() == "done"
        assert time.monotonic() - started < 8.0
        assert _wait_until_gone(int(result.stderr.split()[0]))

    def test_child_runs_in_its_own_process_group(self, invoker):
        result = invoker.run(python("import os; print(os.getpgid(0))"), 10000, 4096)

        assert int(result.stdout) != os.getpgid(0)


def test_redact_urls():
    argv = ["yt-dlp", "--dump-json", "https://www.youtube.com/watch?v=abc", "http://x.com/y"]

    assert redact_urls(argv) == "yt-dlp --dump-json [URL_HIDDEN] [URL_HIDDEN]"
