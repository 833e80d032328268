"""Shared test fixtures for the scapdriver test suite."""

import pytest
from pathlib import Path

from scapdriver.security.models import CapabilitySet, ScanMode, ScanRequest


@pytest.fixture
def full_capabilities():
    """Capabilities of a current oscap build."""
    return CapabilitySet(
        version="1.3.5",
        baseline_support=True,
        online_remediation=True,
        arf_input=True,
        source_datastreams=True,
        tailoring_support=True,
        progress_reporting=True,
    )


@pytest.fixture
def scan_request(tmp_path):
    """Plain online scan of an XCCDF file, with outputs under tmp_path."""
    return ScanRequest(
        mode=ScanMode.ONLINE_SCAN,
        input_file_path=str(tmp_path / "ssg-xccdf.xml"),
        result_file_path=str(tmp_path / "results.xml"),
        report_file_path=str(tmp_path / "report.html"),
        arf_file_path=str(tmp_path / "arf.xml"),
    )


@pytest.fixture
def fixtures_dir():
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "security" / "fixtures"
