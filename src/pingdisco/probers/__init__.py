"""
Liveness probes.

Each probe implements the same interface:
- async probe(address) -> bool

Methods:
- process: run the system ping command once per address
- icmp: send a native ICMP echo request through ping3
"""

from __future__ import annotations

from typing import Union

from .._types import ProbeMethod
from .base import DEFAULT_PROBE_TIMEOUT, LivenessProber
from .icmp import ICMPSocketProber
from .process import PingProcessProber, build_ping_command


def create_prober(
    method: Union[str, ProbeMethod] = ProbeMethod.PROCESS,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> LivenessProber:
    """
    Build the liveness probe selected by configuration.

    Raises:
        ValueError: If the method is not a known probe method
    """
    method = ProbeMethod(method)
    if method == ProbeMethod.ICMP:
        return ICMPSocketProber(timeout=timeout)
    return PingProcessProber(timeout=timeout)


__all__ = [
    "DEFAULT_PROBE_TIMEOUT",
    "LivenessProber",
    "PingProcessProber",
    "ICMPSocketProber",
    "build_ping_command",
    "create_prober",
]
