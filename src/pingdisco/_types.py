"""
Type definitions for the subnet sweep.

These dataclasses define the core domain model: the network range being
swept, the devices found reachable during a sweep, and the ordered result
of one sweep.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, Optional, Union

AddressLike = Union[str, int, ipaddress.IPv4Address]


def now_utc() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


class ProbeMethod(str, Enum):
    """How liveness is tested."""
    PROCESS = "process"  # External ping process, no privilege required
    ICMP = "icmp"        # Native ICMP echo, may require privilege


class ExclusionMode(str, Enum):
    """Which addresses of a range are treated as reserved."""
    FINAL_OCTET = "final_octet"  # Skip x.x.x.0 and x.x.x.255
    HOST_BITS = "host_bits"      # Skip all-zero / all-one host bits


@dataclass(frozen=True)
class NetworkRange:
    """
    An IPv4 network expressed as base address + subnet mask.

    The base is always network-aligned (base & mask == base). A base with
    host bits set is masked down on construction.
    """
    base: ipaddress.IPv4Address
    mask: ipaddress.IPv4Address

    def __post_init__(self) -> None:
        base = ipaddress.IPv4Address(self.base)
        mask = ipaddress.IPv4Address(self.mask)
        inverted = ~int(mask) & 0xFFFFFFFF
        if inverted & (inverted + 1):
            raise ValueError(f"Non-contiguous subnet mask: {mask}")
        aligned = ipaddress.IPv4Address(int(base) & int(mask))
        object.__setattr__(self, "base", aligned)
        object.__setattr__(self, "mask", mask)

    @classmethod
    def from_cidr(cls, cidr: str) -> "NetworkRange":
        """Build a range from CIDR notation, e.g. '192.168.1.0/24'."""
        network = ipaddress.IPv4Network(cidr.strip(), strict=False)
        return cls(network.network_address, network.netmask)

    @classmethod
    def from_address(cls, address: AddressLike, netmask: AddressLike) -> "NetworkRange":
        """Build the range containing an interface address."""
        return cls(ipaddress.IPv4Address(address), ipaddress.IPv4Address(netmask))

    @property
    def prefixlen(self) -> int:
        return bin(int(self.mask)).count("1")

    @property
    def host_bits(self) -> int:
        """Number of address bits not fixed by the mask."""
        return 32 - self.prefixlen

    @property
    def broadcast(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(int(self.base) | (~int(self.mask) & 0xFFFFFFFF))

    def contains(self, address: AddressLike) -> bool:
        """True if the address lies inside this range."""
        return int(ipaddress.IPv4Address(address)) & int(self.mask) == int(self.base)

    def __contains__(self, address: AddressLike) -> bool:
        return self.contains(address)

    def __str__(self) -> str:
        return f"{self.base}/{self.prefixlen}"


@dataclass(frozen=True)
class Device:
    """
    A host confirmed reachable during the current sweep.

    An empty hostname means reverse resolution yielded nothing, which is
    a normal outcome rather than an error.
    """
    address: ipaddress.IPv4Address
    hostname: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", ipaddress.IPv4Address(self.address))
        object.__setattr__(self, "hostname", self.hostname or "")

    @property
    def sort_key(self) -> tuple[int, int]:
        """Final octet first, full address as tie-break."""
        return (int(self.address) & 0xFF, int(self.address))

    def to_dict(self) -> dict:
        return {"address": str(self.address), "hostname": self.hostname}


@dataclass(frozen=True)
class ScanResult:
    """Ordered devices found by one sweep of a network range."""
    network_range: NetworkRange
    devices: tuple[Device, ...] = ()
    candidates_probed: int = 0
    started_at: datetime = field(default_factory=now_utc)
    completed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "devices", tuple(self.devices))

    @property
    def count(self) -> int:
        return len(self.devices)

    @property
    def duration_seconds(self) -> float:
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def __len__(self) -> int:
        return len(self.devices)

    def __iter__(self) -> Iterator[Device]:
        return iter(self.devices)

    def __getitem__(self, index: int) -> Device:
        return self.devices[index]

    def to_dict(self) -> dict:
        return {
            "network": str(self.network_range),
            "candidates_probed": self.candidates_probed,
            "devices_found": self.count,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "devices": [d.to_dict() for d in self.devices],
        }


@dataclass(frozen=True)
class NetworkInterface:
    """A local interface that is up, not loopback, and carries IPv4."""
    name: str
    address: ipaddress.IPv4Address
    netmask: ipaddress.IPv4Address

    @property
    def network_range(self) -> NetworkRange:
        return NetworkRange.from_address(self.address, self.netmask)
