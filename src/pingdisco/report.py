"""
Plain-text rendering of sweep results.
"""

from __future__ import annotations

import json
from typing import Iterable, Optional

from ._types import NetworkInterface, NetworkRange, ScanResult

BANNER = "Network Visualization Tool\n=========================="
SCANNING_MESSAGE = "Scanning for devices..."


def format_header(network_range: NetworkRange, interface: Optional[NetworkInterface] = None) -> str:
    lines = []
    if interface is not None:
        lines.append(f"Interface: {interface.name} ({interface.address})")
        lines.append(f"Network: {interface.address}/{network_range.prefixlen}")
    else:
        lines.append(f"Network: {network_range}")
    return "\n".join(lines)


def format_devices(result: ScanResult) -> str:
    """Render the device table, or a notice when nothing answered."""
    if not result.devices:
        return "No online devices found"

    lines = ["Online devices:", "---------------"]
    for device in result.devices:
        name = device.hostname or "(no hostname)"
        lines.append(f"  {str(device.address):<15} - {name}")
    lines.append("")
    lines.append(f"Total online devices: {result.count}")
    return "\n".join(lines)


def format_json(results: Iterable[ScanResult]) -> str:
    return json.dumps({"scans": [r.to_dict() for r in results]}, indent=2)
