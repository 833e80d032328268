from .config import ConfigManager
from .models import DriverConfig
from .security import (
    CapabilitySet,
    ScanMode,
    ScanRequest,
    ScanResult,
    ScanOrchestrator,
    ProgressDecoder,
)

__version__ = "1.0.0"
__all__ = [
    "ConfigManager",
    "DriverConfig",
    "CapabilitySet",
    "ScanMode",
    "ScanRequest",
    "ScanResult",
    "ScanOrchestrator",
    "ProgressDecoder",
]
