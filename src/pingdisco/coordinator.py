"""
Subnet sweep coordination.

Probes every candidate address of a network range concurrently, resolves
names for the hosts that answer, waits for all work to finish and returns
the devices in a stable order.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
from typing import Iterator, Optional

from ._types import Device, ExclusionMode, NetworkRange, ScanResult, now_utc
from .enumerator import enumerate_candidates
from .probers import LivenessProber, PingProcessProber
from .resolver import HostnameResolver, ReverseDNSResolver

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 64


def sort_devices(devices: list[Device]) -> list[Device]:
    """Order devices by final octet, then by full address."""
    return sorted(devices, key=lambda d: d.sort_key)


class ScanCoordinator:
    """
    Runs one sweep per network range.

    A fixed pool of max_concurrency workers pulls addresses from one
    lazy candidate generator, so neither running probes nor pending
    tasks grow with the range size. The output is the same as with
    one task per address. Finished devices go into a queue that is
    drained once after every worker has finished.
    """

    def __init__(
        self,
        prober: Optional[LivenessProber] = None,
        resolver: Optional[HostnameResolver] = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        exclusion: ExclusionMode = ExclusionMode.FINAL_OCTET,
    ):
        """
        Initialize the coordinator.

        Args:
            prober: Liveness probe (external ping process by default)
            resolver: Hostname resolver (system reverse DNS by default)
            max_concurrency: Maximum concurrent probe/resolve pairs
            exclusion: Reserved-address rule for candidate enumeration
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

        self.prober = prober or PingProcessProber()
        self.resolver = resolver or ReverseDNSResolver()
        self.max_concurrency = max_concurrency
        self.exclusion = exclusion

    async def _check_address(
        self,
        address: ipaddress.IPv4Address,
        found: asyncio.Queue,
    ) -> None:
        """Probe one address and queue a Device if it answers."""
        try:
            online = await self.prober.probe(address)
        except Exception as e:
            logger.debug(f"Probe of {address} raised, treating as unreachable: {e}")
            online = False

        if not online:
            return

        try:
            hostname = await self.resolver.resolve(address)
        except Exception as e:
            logger.debug(f"Resolve of {address} raised, leaving it unnamed: {e}")
            hostname = ""

        found.put_nowait(Device(address=address, hostname=hostname or ""))

    async def _worker(
        self,
        candidates: Iterator[ipaddress.IPv4Address],
        found: asyncio.Queue,
    ) -> int:
        """Take addresses from the shared generator until it runs dry."""
        checked = 0
        for address in candidates:
            await self._check_address(address, found)
            checked += 1
        return checked

    async def scan(self, network_range: NetworkRange) -> ScanResult:
        """
        Sweep a network range.

        Returns:
            ScanResult with the reachable devices, sorted
        """
        started_at = now_utc()
        found: asyncio.Queue = asyncio.Queue()
        candidates = enumerate_candidates(network_range, self.exclusion)

        logger.info(
            f"Sweeping {network_range} with {self.prober.name} probe "
            f"(max {self.max_concurrency} concurrent)"
        )

        workers = [
            asyncio.create_task(self._worker(candidates, found))
            for _ in range(self.max_concurrency)
        ]
        checked = await asyncio.gather(*workers)

        devices: list[Device] = []
        while not found.empty():
            devices.append(found.get_nowait())

        result = ScanResult(
            network_range=network_range,
            devices=tuple(sort_devices(devices)),
            candidates_probed=sum(checked),
            started_at=started_at,
            completed_at=now_utc(),
        )

        logger.info(
            f"Sweep of {network_range} complete: {result.count} of "
            f"{result.candidates_probed} hosts online in {result.duration_seconds:.1f}s"
        )
        return result

    def scan_sync(self, network_range: NetworkRange) -> ScanResult:
        """Run a sweep from synchronous code."""
        return asyncio.run(self.scan(network_range))
