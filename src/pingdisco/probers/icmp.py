"""
Liveness probe using native ICMP echo via ping3.

Finer timeout control than the process probe, but opening an ICMP socket
may need elevated privilege (root, CAP_NET_RAW, or an allowed
net.ipv4.ping_group_range on Linux). Without it every host reads as
unreachable.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import ping3

from .base import DEFAULT_PROBE_TIMEOUT, LivenessProber, ProbeTarget

logger = logging.getLogger(__name__)


class ICMPSocketProber(LivenessProber):
    """Probe hosts with a single ICMP echo request each."""

    def __init__(
        self,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        super().__init__(timeout)
        self._executor = executor

    @property
    def name(self) -> str:
        return "icmp"

    def _ping(self, host: str) -> bool:
        """Send one echo request (blocking, runs in an executor)."""
        try:
            delay = ping3.ping(host, timeout=self.timeout)
        except Exception as e:
            logger.debug(f"ICMP probe of {host} failed: {e}")
            return False

        # ping3 returns seconds on success, None on timeout, False on error
        return isinstance(delay, float)

    async def probe(self, address: ProbeTarget) -> bool:
        host = str(address)
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, self._ping, host)
        except RuntimeError as e:
            # Executor already shut down
            logger.debug(f"ICMP probe of {host} not scheduled: {e}")
            return False
