"""oscap scanning subsystem for scapdriver.

Gates scan requests on the capabilities of the installed oscap, builds its
command lines, and decodes the progress it reports while running.
"""

from .models import (
    CapabilitySet,
    Diagnostic,
    DiagnosticKind,
    ProgressEvent,
    ScanConfig,
    ScanMode,
    ScanRequest,
    ScanResult,
    ScanStatus,
    ToolInfo,
)
from .capabilities import (
    FeatureUnsupported,
    PrerequisiteError,
    UnsupportedToolVersion,
    check_prerequisites,
)
from .command_builder import (
    build_evaluation_args,
    build_offline_remediation_args,
    build_scan_args,
)
from .progress import DecoderState, ProgressDecoder, decode_chunk
from .stderr_watcher import watch_stderr
from .tool_manager import ToolManager
from .scanner import CancellationToken, ScanCanceledError, ScanOrchestrator

__all__ = [
    "CapabilitySet",
    "Diagnostic",
    "DiagnosticKind",
    "ProgressEvent",
    "ScanConfig",
    "ScanMode",
    "ScanRequest",
    "ScanResult",
    "ScanStatus",
    "ToolInfo",
    "FeatureUnsupported",
    "PrerequisiteError",
    "UnsupportedToolVersion",
    "check_prerequisites",
    "build_evaluation_args",
    "build_offline_remediation_args",
    "build_scan_args",
    "DecoderState",
    "ProgressDecoder",
    "decode_chunk",
    "watch_stderr",
    "ToolManager",
    "CancellationToken",
    "ScanCanceledError",
    "ScanOrchestrator",
]
