"""Process plumbing between the scan orchestrator and the oscap binary.

The orchestrator only talks to the ProcessRunner / RunningProcess protocols,
so tests and embedders can swap in their own transport.
"""

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class RunningProcess(Protocol):
    @property
    def returncode(self) -> Optional[int]: ...

    async def read_stdout(self, max_bytes: int) -> bytes:
        """Next available stdout bytes; b'' once stdout is closed."""

    def drain_stderr_lines(self) -> List[str]:
        """Complete stderr lines received since the previous call."""

    def kill(self) -> None: ...

    async def wait(self) -> int: ...


class ProcessRunner(Protocol):
    async def start(self, argv: Sequence[str]) -> RunningProcess: ...


class AsyncioProcess:
    """RunningProcess backed by asyncio.subprocess."""

    def __init__(self, process: asyncio.subprocess.Process):
        self._process = process
        self._stderr_lines: List[str] = []
        self._stderr_task = asyncio.ensure_future(self._collect_stderr())

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    async def _collect_stderr(self) -> None:
        while True:
            line = await self._process.stderr.readline()
            if not line:
                return
            self._stderr_lines.append(line.decode("utf-8", errors="replace"))

    async def read_stdout(self, max_bytes: int) -> bytes:
        return await self._process.stdout.read(max_bytes)

    def drain_stderr_lines(self) -> List[str]:
        lines, self._stderr_lines = self._stderr_lines, []
        return lines

    def kill(self) -> None:
        try:
            self._process.kill()
        except ProcessLookupError:
            logger.debug("Process already exited before kill")

    async def wait(self) -> int:
        return_code = await self._process.wait()
        await self._stderr_task
        return return_code


class AsyncioProcessRunner:
    """Spawns oscap with asyncio.create_subprocess_exec."""

    async def start(self, argv: Sequence[str]) -> AsyncioProcess:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        return AsyncioProcess(process)
