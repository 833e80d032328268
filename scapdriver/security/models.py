"""Pydantic v2 models for the oscap scanning subsystem."""

import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScanMode(str, Enum):
    ONLINE_SCAN = "online_scan"
    ONLINE_REMEDIATION = "online_remediation"
    OFFLINE_REMEDIATION = "offline_remediation"


class ScanStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"
    TIMED_OUT = "timed_out"


class DiagnosticKind(str, Enum):
    PROTOCOL = "protocol"
    STDERR = "stderr"
    IO = "io"


class CapabilitySet(BaseModel):
    """Features supported by one installed oscap build.

    Computed once per detected installation and never changed afterwards.
    The version string is only used in diagnostics.
    """

    version: str = ""
    baseline_support: bool = False
    online_remediation: bool = False
    arf_input: bool = False
    source_datastreams: bool = False
    tailoring_support: bool = False
    progress_reporting: bool = False

    model_config = ConfigDict(frozen=True)


class ToolInfo(BaseModel):
    """Resolved location of the oscap executable."""

    name: str
    exe_name: str
    path: Optional[Path] = None
    installed: bool = False


class ScanRequest(BaseModel):
    """What to scan and where the tool should put its output.

    Paths are opaque to this package; the caller owns staging them.
    """

    mode: ScanMode = ScanMode.ONLINE_SCAN
    is_source_datastream: bool = False
    datastream_id: Optional[str] = None
    component_id: Optional[str] = None
    has_tailoring: bool = False
    tailoring_file_path: Optional[str] = None
    profile_id: Optional[str] = None
    input_file_path: str
    result_file_path: str
    report_file_path: str
    arf_file_path: str


class ProgressEvent(BaseModel):
    """One completed rule evaluation as reported on stdout."""

    rule_id: str
    result: str

    model_config = ConfigDict(frozen=True)


class Diagnostic(BaseModel):
    """A non-fatal warning raised while watching a running scan."""

    kind: DiagnosticKind
    reason: str
    raw: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def message(self) -> str:
        if self.kind == DiagnosticKind.STDERR:
            return f"{self.reason}\n{self.raw}"
        return f"{self.reason} Read buffer is '{self.raw}'."


class ScanConfig(BaseModel):
    """Tuning for one orchestrator; values may arrive as strings from env overrides."""

    timeout: float = 3600
    chunk_size: int = Field(default=4096, gt=0)
    max_read_failures: int = Field(default=3, gt=0)


class ScanResult(BaseModel):
    """Outcome of a single oscap invocation."""

    scan_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    mode: ScanMode
    status: ScanStatus = ScanStatus.PENDING
    command: List[str] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    return_code: Optional[int] = None
    progress_events: List[ProgressEvent] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    raw_output: str = ""
    output_files: List[str] = Field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def events_count(self) -> int:
        return len(self.progress_events)

    @property
    def canceled(self) -> bool:
        return self.status == ScanStatus.CANCELED
