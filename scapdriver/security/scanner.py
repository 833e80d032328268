"""Drives one oscap scan from prerequisite checks to completion.

The lifecycle of ScanOrchestrator.run():

1. Check prerequisites against the tool's CapabilitySet
2. Resolve oscap and build the argument list for the scan mode
3. If dry_run, log and return
4. Start the process and feed stdout through the progress decoder,
   checking for cancellation between chunks and polling stderr
5. Wait for exit and derive the final status
6. Signal completion, which resets all per-scan state exactly once
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .capabilities import PrerequisiteError, check_prerequisites
from .command_builder import build_scan_args
from .events import LoggingSink, ScanEventSink
from .models import (
    CapabilitySet,
    Diagnostic,
    DiagnosticKind,
    ProgressEvent,
    ScanConfig,
    ScanRequest,
    ScanResult,
    ScanStatus,
)
from .progress import DecoderOutput, ProgressDecoder, decode_text
from .runner import AsyncioProcessRunner, ProcessRunner, RunningProcess
from .stderr_watcher import watch_stderr
from .tool_manager import ToolManager

logger = logging.getLogger(__name__)

# oscap exits with 2 when evaluation succeeded but at least one rule failed
SUCCESS_RETURN_CODES = (0, 2)


class ScanCanceledError(Exception):
    """Scan output was requested from a scan that was canceled."""


class CancellationToken:
    """Flag set by the caller and polled by the orchestrator between chunks."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def reset(self) -> None:
        self._cancelled = False


class ScanOrchestrator:
    """Runs oscap scans for one installed tool, one scan at a time.

    Config keys:
        timeout: seconds before the scan is killed (default 3600)
        chunk_size: max stdout bytes read per iteration (default 4096)
        max_read_failures: consecutive stdout read errors before reading
            stops and the orchestrator waits for exit (default 3)
    """

    def __init__(
        self,
        capabilities: CapabilitySet,
        tool_manager: ToolManager,
        runner: Optional[ProcessRunner] = None,
        sink: Optional[ScanEventSink] = None,
        config: Optional[Union[ScanConfig, Dict[str, Any]]] = None,
    ):
        self.capabilities = capabilities
        self.tool_manager = tool_manager
        self.runner = runner or AsyncioProcessRunner()
        self.sink = sink or LoggingSink()
        if not isinstance(config, ScanConfig):
            config = ScanConfig(**(config or {}))
        self.config = config
        self.timeout = config.timeout
        self.chunk_size = config.chunk_size
        self.decoder = ProgressDecoder(capabilities)
        self.cancel_token = CancellationToken()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._last_request: Optional[ScanRequest] = None
        self._last_result: Optional[ScanResult] = None

    def cancel(self) -> None:
        # Runs on the event loop thread, no locking needed
        self.cancel_token.cancel()

    async def run(self, request: ScanRequest, dry_run: bool = False) -> ScanResult:
        result = ScanResult(mode=request.mode)
        self._last_request = request
        self._last_result = result

        try:
            await self._run(request, result, dry_run)
        finally:
            self._signal_completion(result)

        return result

    async def _run(self, request: ScanRequest, result: ScanResult, dry_run: bool) -> None:
        # 1. Prerequisites
        try:
            check_prerequisites(self.capabilities, request)
        except PrerequisiteError as e:
            self._fail(result, str(e))
            return

        # 2. Build command
        try:
            exe = self.tool_manager.get_tool_path()
        except FileNotFoundError as e:
            self._fail(result, str(e))
            return
        result.command = [str(exe)] + build_scan_args(request, self.capabilities)

        self.logger.info(f"Running {request.mode.value} scan: {' '.join(result.command)}")

        # 3. Dry run
        if dry_run:
            result.status = ScanStatus.COMPLETED
            result.raw_output = f"[DRY RUN] Would execute: {' '.join(result.command)}"
            self.logger.info(result.raw_output)
            return

        # 4. Execute
        result.status = ScanStatus.RUNNING
        result.started_at = datetime.now()
        process: Optional[RunningProcess] = None

        try:
            process = await self.runner.start(result.command)
            await asyncio.wait_for(self._pump(process, result), timeout=self.timeout)
        except asyncio.TimeoutError:
            result.status = ScanStatus.TIMED_OUT
            result.error_message = f"oscap timed out after {self.timeout}s"
            self.logger.error(result.error_message)
            self.sink.error_message(result.error_message)
            await self._stop(process)
            return
        except Exception as e:
            self._fail(result, f"Subprocess error: {e}", exc_info=True)
            await self._stop(process)
            return

        if result.status == ScanStatus.CANCELED:
            self.logger.info("oscap scan canceled")
            return

        # 5. Final status
        if result.return_code in SUCCESS_RETURN_CODES:
            result.status = ScanStatus.COMPLETED
            result.output_files = [
                path
                for path in (
                    request.result_file_path,
                    request.report_file_path,
                    request.arf_file_path,
                )
                if Path(path).is_file()
            ]
        else:
            self._fail(result, f"oscap exited with code {result.return_code}")
            return

        self.logger.info(
            f"oscap completed: {result.events_count} rules reported, "
            f"{len(result.warnings)} warnings, exit code {result.return_code}"
        )

    async def _pump(self, process: RunningProcess, result: ScanResult) -> None:
        """Read stdout until EOF or cancellation, then wait for exit."""
        read_failures = 0
        while True:
            if self.cancel_token.cancelled:
                result.status = ScanStatus.CANCELED
                await self._stop(process)
                return

            try:
                chunk = await process.read_stdout(self.chunk_size)
            except OSError as e:
                self._warn(
                    result,
                    Diagnostic(
                        kind=DiagnosticKind.IO,
                        reason=(
                            "Error: Could not read from stdout of running 'oscap' "
                            f"process: {e}."
                        ),
                        raw=self.decoder.state.buffer_text,
                    ),
                )
                read_failures += 1
                if (
                    process.returncode is not None
                    or read_failures >= self.config.max_read_failures
                ):
                    break
                await asyncio.sleep(0)
                continue

            read_failures = 0

            self._poll_stderr(process, result)
            if not chunk:
                break
            self._dispatch(self.decoder.feed(chunk), result)

        result.return_code = await process.wait()
        self._poll_stderr(process, result)

    def _dispatch(self, outputs: List[DecoderOutput], result: ScanResult) -> None:
        for output in outputs:
            if isinstance(output, ProgressEvent):
                result.progress_events.append(output)
                self.sink.progress_report(output.rule_id, output.result)
            else:
                self._warn(result, output)

    def _poll_stderr(self, process: RunningProcess, result: ScanResult) -> None:
        diagnostic = watch_stderr(process.drain_stderr_lines())
        if diagnostic is not None:
            self._warn(result, diagnostic)

    def _warn(self, result: ScanResult, diagnostic: Diagnostic) -> None:
        result.warnings.append(diagnostic)
        self.sink.warning_message(diagnostic.message)

    def _fail(self, result: ScanResult, message: str, exc_info: bool = False) -> None:
        result.status = ScanStatus.FAILED
        result.error_message = message
        self.logger.error(message, exc_info=exc_info)
        self.sink.error_message(message)

    async def _stop(self, process: Optional[RunningProcess]) -> None:
        if process is None:
            return
        process.kill()
        return_code = await process.wait()
        self.logger.debug(f"oscap stopped with code {return_code}")

    def _signal_completion(self, result: ScanResult) -> None:
        """Finish the scan and reset per-scan state for the next one."""
        result.completed_at = datetime.now()
        if result.started_at:
            result.duration_seconds = (
                result.completed_at - result.started_at
            ).total_seconds()
        if not self.decoder.enabled and self.decoder.raw_output:
            result.raw_output = decode_text(self.decoder.raw_output)

        self.decoder.reset()
        self.cancel_token.reset()
        self.sink.scan_finished(result.canceled)

    def get_results(self) -> bytes:
        return self._read_output("result_file_path")

    def get_report(self) -> bytes:
        return self._read_output("report_file_path")

    def get_arf(self) -> bytes:
        return self._read_output("arf_file_path")

    def _read_output(self, field_name: str) -> bytes:
        if self._last_result is None or self._last_request is None:
            raise RuntimeError("No scan has been run yet")
        if self._last_result.canceled:
            raise ScanCanceledError("The last scan was canceled and produced no output")
        return Path(getattr(self._last_request, field_name)).read_bytes()
