"""Locates the oscap executable."""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from .models import ToolInfo

logger = logging.getLogger(__name__)

OSCAP_TOOL = "oscap"


class ToolManager:
    """Resolves the oscap binary from config or the system PATH.

    Config shape (the `oscap` section of config.yaml):
        path: /usr/bin/oscap     # optional explicit location
        exe_name: oscap          # name looked up on PATH
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        configured = self.config.get("path")
        self._tool = ToolInfo(
            name=OSCAP_TOOL,
            exe_name=self.config.get("exe_name", OSCAP_TOOL),
            path=Path(configured) if configured else None,
        )

    def check_tool(self) -> ToolInfo:
        """Resolve the executable path and update installed accordingly."""
        tool = self._tool

        # 1. Explicit config path
        configured = self.config.get("path")
        if configured and Path(configured).is_file():
            tool.path = Path(configured).resolve()
            tool.installed = True
            logger.debug(f"{tool.name}: found at configured path {tool.path}")
            return tool

        # 2. System PATH
        system_path = shutil.which(tool.exe_name)
        if system_path:
            tool.path = Path(system_path).resolve()
            tool.installed = True
            logger.debug(f"{tool.name}: found on PATH at {tool.path}")
            return tool

        tool.installed = False
        tool.path = None
        logger.debug(f"{tool.name}: not found")
        return tool

    def get_tool_path(self) -> Path:
        """Resolved path to oscap. Raises if it cannot be found."""
        tool = self.check_tool()
        if not tool.installed or tool.path is None:
            raise FileNotFoundError(
                f"{tool.exe_name} not found. Install openscap-scanner "
                f"or set oscap.path in config.yaml."
            )
        return tool.path
