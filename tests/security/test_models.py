"""Tests for the scanning Pydantic models."""

import pytest
from pydantic import ValidationError

from scapdriver.security.models import (
    CapabilitySet,
    Diagnostic,
    DiagnosticKind,
    ProgressEvent,
    ScanMode,
    ScanRequest,
    ScanResult,
    ScanStatus,
)


class TestCapabilitySet:
    def test_defaults_support_nothing(self):
        caps = CapabilitySet()
        assert caps.version == ""
        assert caps.baseline_support is False
        assert caps.progress_reporting is False
        assert caps.arf_input is False

    def test_immutable(self, full_capabilities):
        with pytest.raises(ValidationError):
            full_capabilities.tailoring_support = False
        assert full_capabilities.tailoring_support is True


class TestScanRequest:
    def test_defaults(self, tmp_path):
        request = ScanRequest(
            input_file_path="in.xml",
            result_file_path="r.xml",
            report_file_path="r.html",
            arf_file_path="arf.xml",
        )
        assert request.mode == ScanMode.ONLINE_SCAN
        assert request.is_source_datastream is False
        assert request.has_tailoring is False
        assert request.profile_id is None

    def test_paths_required(self):
        with pytest.raises(ValidationError):
            ScanRequest(mode=ScanMode.ONLINE_SCAN)

    def test_mode_from_string(self, scan_request):
        data = scan_request.model_dump()
        data["mode"] = "offline_remediation"
        assert ScanRequest(**data).mode == ScanMode.OFFLINE_REMEDIATION


class TestDiagnostic:
    def test_protocol_message_includes_buffer(self):
        diag = Diagnostic(kind=DiagnosticKind.PROTOCOL, reason="Bad ':'.", raw="abc")
        assert diag.message == "Bad ':'. Read buffer is 'abc'."

    def test_stderr_message_includes_content(self):
        diag = Diagnostic(kind=DiagnosticKind.STDERR, reason="stderr:", raw="oops\n")
        assert diag.message == "stderr:\noops\n"


class TestScanResult:
    def test_defaults(self):
        result = ScanResult(mode=ScanMode.ONLINE_SCAN)
        assert result.status == ScanStatus.PENDING
        assert result.events_count == 0
        assert result.canceled is False
        assert result.scan_id

    def test_unique_ids(self):
        a = ScanResult(mode=ScanMode.ONLINE_SCAN)
        b = ScanResult(mode=ScanMode.ONLINE_SCAN)
        assert a.scan_id != b.scan_id

    def test_events_count_and_canceled(self):
        result = ScanResult(
            mode=ScanMode.ONLINE_SCAN,
            status=ScanStatus.CANCELED,
            progress_events=[
                ProgressEvent(rule_id="a", result="pass"),
                ProgressEvent(rule_id="b", result="fail"),
            ],
        )
        assert result.events_count == 2
        assert result.canceled is True
