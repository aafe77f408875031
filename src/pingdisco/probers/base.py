"""
Base classes for liveness probes.
"""

from __future__ import annotations

import ipaddress
from abc import ABC, abstractmethod
from typing import Union

DEFAULT_PROBE_TIMEOUT = 1.0

ProbeTarget = Union[str, ipaddress.IPv4Address]


class LivenessProber(ABC):
    """
    Base class for liveness probes.

    A probe makes a single attempt per address and answers within its
    fixed timeout. Every failure mode (timeout, unreachable, missing tool,
    permission denied) is reported as unreachable; probes never raise.
    """

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT):
        self.timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this probe method."""
        pass

    @abstractmethod
    async def probe(self, address: ProbeTarget) -> bool:
        """Return True if the address answered within the timeout."""
        pass

    async def is_available(self) -> bool:
        """Check if this probe method can run on this host."""
        return True
