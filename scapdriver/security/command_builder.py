"""Build oscap argument lists for each scan mode.

Argument order matters: oscap takes the input file as the trailing positional
argument, so it is always appended last. Nothing here touches the filesystem.
"""

from typing import List

from .models import CapabilitySet, ScanMode, ScanRequest


def _append_output_args(args: List[str], request: ScanRequest) -> None:
    args.extend(["--results", request.result_file_path])
    args.extend(["--results-arf", request.arf_file_path])
    args.extend(["--report", request.report_file_path])


def build_evaluation_args(
    request: ScanRequest, capabilities: CapabilitySet
) -> List[str]:
    """Arguments for `oscap xccdf eval`, used by online scans and online remediation."""
    args = ["xccdf", "eval"]

    if request.is_source_datastream:
        if request.datastream_id:
            args.extend(["--datastream-id", request.datastream_id])
        if request.component_id:
            args.extend(["--xccdf-id", request.component_id])

    if request.tailoring_file_path:
        args.extend(["--tailoring-file", request.tailoring_file_path])

    if request.profile_id:
        args.extend(["--profile", request.profile_id])

    _append_output_args(args, request)

    if capabilities.progress_reporting:
        args.append("--progress")

    # The prerequisite gate rejects the unsupported case before we get here
    if request.mode == ScanMode.ONLINE_REMEDIATION and capabilities.online_remediation:
        args.append("--remediate")

    args.append(request.input_file_path)
    return args


def build_offline_remediation_args(
    request: ScanRequest, capabilities: CapabilitySet
) -> List[str]:
    """Arguments for `oscap xccdf remediate` over a previous result (ARF) file."""
    args = ["xccdf", "remediate"]

    _append_output_args(args, request)

    if capabilities.progress_reporting:
        args.append("--progress")

    args.append(request.input_file_path)
    return args


def build_scan_args(request: ScanRequest, capabilities: CapabilitySet) -> List[str]:
    if request.mode == ScanMode.OFFLINE_REMEDIATION:
        return build_offline_remediation_args(request, capabilities)
    return build_evaluation_args(request, capabilities)
