"""Receivers for what a running scan reports upward."""

import logging
from typing import List, Optional, Protocol, Tuple


class ScanEventSink(Protocol):
    """Called synchronously, in arrival order, while a scan runs."""

    def progress_report(self, rule_id: str, result: str) -> None: ...

    def warning_message(self, text: str) -> None: ...

    def error_message(self, text: str) -> None: ...

    def scan_finished(self, canceled: bool) -> None: ...


class LoggingSink:
    """Default sink: writes everything to the log."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def progress_report(self, rule_id: str, result: str) -> None:
        self.logger.info(f"{rule_id}: {result}")

    def warning_message(self, text: str) -> None:
        self.logger.warning(text)

    def error_message(self, text: str) -> None:
        self.logger.error(text)

    def scan_finished(self, canceled: bool) -> None:
        self.logger.info("Scan canceled" if canceled else "Scan finished")


class CollectingSink:
    """Keeps every callback so it can be inspected after the scan."""

    def __init__(self):
        self.progress: List[Tuple[str, str]] = []
        self.warnings: List[str] = []
        self.errors: List[str] = []
        self.finished: List[bool] = []

    def progress_report(self, rule_id: str, result: str) -> None:
        self.progress.append((rule_id, result))

    def warning_message(self, text: str) -> None:
        self.warnings.append(text)

    def error_message(self, text: str) -> None:
        self.errors.append(text)

    def scan_finished(self, canceled: bool) -> None:
        self.finished.append(canceled)
