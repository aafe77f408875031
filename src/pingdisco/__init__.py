"""
pingdisco - discover reachable hosts on locally attached IPv4 subnets.

Every candidate address of a subnet is probed for liveness (one external
ping or one native ICMP echo, about a second each), reachable hosts get a
reverse DNS name where one exists, and the results come back sorted.

Architecture:
    enumerator   - candidate addresses of a network range
    probers      - liveness probes (process / icmp)
    resolver     - reverse DNS names for reachable hosts
    coordinator  - bounded concurrent sweep, barrier, ordering
    sweep_service - interfaces, CLI and on-demand HTTP API
"""

__version__ = "1.0.0"

from ._types import (
    Device,
    ExclusionMode,
    NetworkInterface,
    NetworkRange,
    ProbeMethod,
    ScanResult,
)
from .coordinator import ScanCoordinator
from .enumerator import AddressRange, enumerate_candidates

__all__ = [
    "__version__",
    "AddressRange",
    "Device",
    "ExclusionMode",
    "NetworkInterface",
    "NetworkRange",
    "ProbeMethod",
    "ScanCoordinator",
    "ScanResult",
    "enumerate_candidates",
]
