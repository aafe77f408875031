"""
Hostname resolution for reachable hosts.

Resolution is best effort: a host without a reverse DNS entry simply has
no name, and lookup failures are never surfaced to the sweep.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
from abc import ABC, abstractmethod
from typing import Optional, Union

logger = logging.getLogger(__name__)

ResolveTarget = Union[str, ipaddress.IPv4Address]


def clean_hostname(name: Optional[str]) -> str:
    """Strip the trailing root dot from a DNS name."""
    if not name:
        return ""
    if name.endswith("."):
        name = name[:-1]
    return name


class HostnameResolver(ABC):
    """Base class for hostname resolvers."""

    @abstractmethod
    async def resolve(self, address: ResolveTarget) -> str:
        """Return a display name for the address, or "" when none is known."""
        pass


class ReverseDNSResolver(HostnameResolver):
    """
    Resolve names with the system reverse DNS lookup.

    No caching and no custom timeout; the system resolver's own timeout
    applies.
    """

    def _lookup(self, host: str) -> str:
        try:
            primary, aliases, _ = socket.gethostbyaddr(host)
        except (OSError, UnicodeError) as e:
            logger.debug(f"Reverse lookup of {host} failed: {e}")
            return ""

        names = [n for n in [primary, *aliases] if n]
        if not names:
            return ""
        return clean_hostname(names[0])

    async def resolve(self, address: ResolveTarget) -> str:
        host = str(address)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._lookup, host)
