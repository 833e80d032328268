"""Turns whatever oscap writes to stderr into a single warning per poll."""

from typing import Iterable, Optional

from .models import Diagnostic, DiagnosticKind


def watch_stderr(lines: Iterable[str]) -> Optional[Diagnostic]:
    # Lines keep their trailing newline, so plain concatenation is enough
    content = "".join(lines)
    if not content:
        return None
    return Diagnostic(
        kind=DiagnosticKind.STDERR,
        reason="The 'oscap' process has written the following content to stderr:",
        raw=content,
    )
