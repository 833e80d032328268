"""Prerequisite checks run before oscap is started.

Each check compares what a scan request needs against the CapabilitySet of
the installed tool. Checks run in a fixed order and the first failure wins.
"""

from typing import Optional

from .models import CapabilitySet, ScanMode, ScanRequest


class PrerequisiteError(Exception):
    """The installed oscap cannot run the requested scan."""

    def __init__(self, message: str, version: str):
        super().__init__(message)
        self.version = version


class UnsupportedToolVersion(PrerequisiteError):
    def __init__(self, version: str):
        super().__init__(
            "oscap tool doesn't support basic features required for scanning. "
            "Please make sure you have openscap 0.8.0 or newer. "
            f"oscap version was detected as '{version}'.",
            version,
        )


class FeatureUnsupported(PrerequisiteError):
    """A single optional feature is missing from the installed oscap."""

    # feature -> minimum openscap version, None where no release provides it
    MINIMUM_VERSIONS = {
        "online remediation": "0.9.5",
        "offline remediation input": None,
        "source datastreams": "0.9.0",
        "tailoring": "0.9.12",
    }

    def __init__(self, feature: str, version: str):
        self.feature = feature
        minimum = self.MINIMUM_VERSIONS.get(feature)
        if minimum:
            hint = (
                f"Please make sure you have openscap {minimum} or newer "
                f"if you want to use {feature}. "
            )
        else:
            hint = f"No known openscap release supports {feature} yet. "
        super().__init__(
            f"oscap tool doesn't support {feature}. {hint}"
            f"oscap version was detected as '{version}'.",
            version,
        )


def find_prerequisite_failure(
    capabilities: CapabilitySet, request: ScanRequest
) -> Optional[PrerequisiteError]:
    """Return the first failed prerequisite, or None if the scan may start."""
    version = capabilities.version

    if not capabilities.baseline_support:
        return UnsupportedToolVersion(version)

    if request.mode == ScanMode.ONLINE_REMEDIATION and not capabilities.online_remediation:
        return FeatureUnsupported("online remediation", version)

    if request.mode == ScanMode.OFFLINE_REMEDIATION and not capabilities.arf_input:
        return FeatureUnsupported("offline remediation input", version)

    if request.is_source_datastream and not capabilities.source_datastreams:
        return FeatureUnsupported("source datastreams", version)

    if request.has_tailoring and not capabilities.tailoring_support:
        return FeatureUnsupported("tailoring", version)

    return None


def check_prerequisites(capabilities: CapabilitySet, request: ScanRequest) -> None:
    """Raise the first failed prerequisite for this request."""
    failure = find_prerequisite_failure(capabilities, request)
    if failure is not None:
        raise failure
