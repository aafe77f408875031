"""
Candidate address enumeration.

Walks a network range from its aligned base address upwards, one address
at a time, and yields every address worth probing. Network and broadcast
addresses are skipped.

By default the skip rule only looks at the final octet (x.x.x.0 and
x.x.x.255), which matches /24 networks exactly. The HOST_BITS mode skips
the all-zero and all-one host patterns over the mask's real width instead.
"""

from __future__ import annotations

import ipaddress
from typing import Iterator

from ._types import ExclusionMode, NetworkRange

_MAX_ADDRESS = 0xFFFFFFFF


def _is_reserved(value: int, network_range: NetworkRange, mode: ExclusionMode) -> bool:
    if mode == ExclusionMode.HOST_BITS:
        # /31 and /32 have no network/broadcast pair to skip
        if network_range.host_bits < 2:
            return False
        host_mask = ~int(network_range.mask) & _MAX_ADDRESS
        host_part = value & host_mask
        return host_part == 0 or host_part == host_mask

    last_octet = value & 0xFF
    return last_octet == 0 or last_octet == 255


def enumerate_candidates(
    network_range: NetworkRange,
    exclusion: ExclusionMode = ExclusionMode.FINAL_OCTET,
) -> Iterator[ipaddress.IPv4Address]:
    """
    Yield candidate host addresses of a range in ascending order.

    Args:
        network_range: Range to walk
        exclusion: Which reserved addresses to skip

    Yields:
        IPv4Address values contained in the range, each exactly once
    """
    mask = int(network_range.mask)
    base = int(network_range.base)
    value = base

    while value <= _MAX_ADDRESS and value & mask == base:
        if not _is_reserved(value, network_range, exclusion):
            yield ipaddress.IPv4Address(value)
        value += 1


def count_candidates(
    network_range: NetworkRange,
    exclusion: ExclusionMode = ExclusionMode.FINAL_OCTET,
) -> int:
    """Number of addresses enumerate_candidates() yields for a range."""
    return sum(1 for _ in enumerate_candidates(network_range, exclusion))


class AddressRange:
    """
    Restartable view of a range's candidates.

    Each iteration starts again from the base address, so the same
    AddressRange can feed repeated sweeps.
    """

    def __init__(
        self,
        network_range: NetworkRange,
        exclusion: ExclusionMode = ExclusionMode.FINAL_OCTET,
    ):
        self.network_range = network_range
        self.exclusion = exclusion

    def __iter__(self) -> Iterator[ipaddress.IPv4Address]:
        return enumerate_candidates(self.network_range, self.exclusion)

    def __len__(self) -> int:
        return count_candidates(self.network_range, self.exclusion)

    def __repr__(self) -> str:
        return f"AddressRange({self.network_range}, exclusion={self.exclusion.value})"
