"""
Local interface enumeration.

Lists the host's IPv4 interfaces that are up and not loopback, each with
its address and subnet mask. These are the networks a sweep can cover.
"""

from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Optional

import psutil

from ._types import NetworkInterface

logger = logging.getLogger(__name__)


class InterfaceEnumerationError(RuntimeError):
    """Raised when the host's network interfaces cannot be listed."""


def get_network_interfaces(name: Optional[str] = None) -> list[NetworkInterface]:
    """
    List up, non-loopback interfaces carrying an IPv4 address.

    Args:
        name: Only return entries for this interface name

    Returns:
        One NetworkInterface per IPv4 address, in interface order

    Raises:
        InterfaceEnumerationError: If the OS interface query fails
    """
    try:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
    except (OSError, RuntimeError) as e:
        raise InterfaceEnumerationError(f"Could not list network interfaces: {e}") from e

    interfaces: list[NetworkInterface] = []

    for iface, iface_addrs in addrs.items():
        if name and iface != name:
            continue

        iface_stats = stats.get(iface)
        if not iface_stats or not iface_stats.isup:
            continue

        for addr in iface_addrs:
            if addr.family != socket.AF_INET or not addr.address or not addr.netmask:
                continue

            try:
                ip = ipaddress.IPv4Address(addr.address)
                netmask = ipaddress.IPv4Address(addr.netmask)
            except ValueError:
                logger.debug(f"Skipping unparseable address on {iface}: {addr.address}")
                continue

            if ip.is_loopback:
                continue

            interfaces.append(NetworkInterface(name=iface, address=ip, netmask=netmask))

    logger.info(f"Found {len(interfaces)} usable IPv4 interface address(es)")
    return interfaces
