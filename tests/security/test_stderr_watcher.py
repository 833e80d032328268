"""Tests for the stderr side channel."""

from scapdriver.security.models import DiagnosticKind
from scapdriver.security.stderr_watcher import watch_stderr


class TestWatchStderr:
    def test_no_lines(self):
        assert watch_stderr([]) is None

    def test_empty_lines(self):
        assert watch_stderr(["", ""]) is None

    def test_single_warning_for_all_lines(self):
        diag = watch_stderr(["OpenSCAP Error: a\n", "second line\n"])
        assert diag.kind == DiagnosticKind.STDERR
        assert diag.raw == "OpenSCAP Error: a\nsecond line\n"
        assert diag.message.startswith(
            "The 'oscap' process has written the following content to stderr:"
        )
        assert "second line" in diag.message

    def test_accepts_generator(self):
        diag = watch_stderr(line for line in ["x\n"])
        assert diag.raw == "x\n"
