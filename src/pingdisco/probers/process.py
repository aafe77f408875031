"""
Liveness probe backed by the system ping command.

Needs no elevated privilege. Sends exactly one echo request and treats a
zero exit status as reachable.
"""

from __future__ import annotations

import asyncio
import logging
import math
import platform
import shutil
from typing import Optional

from .base import DEFAULT_PROBE_TIMEOUT, LivenessProber, ProbeTarget

logger = logging.getLogger(__name__)

# Extra wall-clock allowance before a hung ping process is killed
PROCESS_GRACE_SECONDS = 2.0


def build_ping_command(
    host: str,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
    system: Optional[str] = None,
) -> list[str]:
    """
    Build a single-packet ping command line for the given platform.

    Args:
        host: Address to ping
        timeout: Reply wait in seconds
        system: platform.system() value (detected when None)
    """
    system = (system or platform.system()).lower()
    timeout_ms = max(1, int(round(timeout * 1000)))

    if system == "windows":
        return ["ping", "-n", "1", "-w", str(timeout_ms), host]
    if system == "darwin":
        # macOS -W takes milliseconds
        return ["ping", "-c", "1", "-W", str(timeout_ms), host]
    return ["ping", "-c", "1", "-W", str(max(1, math.ceil(timeout))), host]


class PingProcessProber(LivenessProber):
    """Probe hosts by running one external ping per address."""

    def __init__(
        self,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        executable: str = "ping",
    ):
        super().__init__(timeout)
        self.executable = executable
        self._system = platform.system()

    @property
    def name(self) -> str:
        return "process"

    async def is_available(self) -> bool:
        """Check if the ping command is on PATH."""
        return shutil.which(self.executable) is not None

    async def probe(self, address: ProbeTarget) -> bool:
        host = str(address)
        cmd = build_ping_command(host, self.timeout, self._system)
        cmd[0] = self.executable

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            # ping missing or not executable
            logger.debug(f"Could not start ping for {host}: {e}")
            return False

        try:
            returncode = await asyncio.wait_for(
                proc.wait(),
                timeout=self.timeout + PROCESS_GRACE_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.debug(f"ping for {host} did not exit in time, killing it")
            proc.kill()
            await proc.wait()
            return False
        except asyncio.CancelledError:
            if proc.returncode is None:
                logger.debug(f"ping for {host} cancelled, killing it")
                proc.kill()
            raise

        return returncode == 0
