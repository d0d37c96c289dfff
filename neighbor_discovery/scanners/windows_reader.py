"""
Neighbor cache reader for Windows.

Reads ``arp -a`` for IPv4 and ``netsh interface ipv6 show neighbors`` for
IPv6. Windows prints hardware addresses with ``-`` separated octets.
"""

import ipaddress
from typing import List, Optional

from .base_reader import IPv6Neighbor, NeighborCacheReader
from ..core.data_models import NeighborEntry, NeighborState
from ..utils.network_utils import normalize_hardware_address, parse_ipv6

# "arp -a" type column
ARP_TYPES = {
    "dynamic": NeighborState.REACHABLE,
    "static": NeighborState.OTHER,
    "invalid": NeighborState.INCOMPLETE,
}

# "netsh ... show neighbors" type column; "(Router)" may follow
NETSH_STATES = {
    "reachable": NeighborState.REACHABLE,
    "stale": NeighborState.STALE,
    "delay": NeighborState.STALE,
    "probe": NeighborState.STALE,
    "incomplete": NeighborState.INCOMPLETE,
    "unreachable": NeighborState.INCOMPLETE,
    "permanent": NeighborState.OTHER,
}


class WindowsNeighborReader(NeighborCacheReader):
    """Parses the Windows ARP table and netsh IPv6 neighbor listing."""

    platform_name = "windows"

    @property
    def ipv4_command(self) -> List[str]:
        return ["arp", "-a"]

    @property
    def ipv6_command(self) -> List[str]:
        return ["netsh", "interface", "ipv6", "show", "neighbors"]

    def parse_ipv4_line(self, line: str) -> Optional[NeighborEntry]:
        # Format: "  192.168.1.1           00-11-22-33-44-55     dynamic"
        tokens = line.split()
        if len(tokens) != 3 or '-' not in tokens[1]:
            return None

        try:
            ip = ipaddress.IPv4Address(tokens[0])
        except ipaddress.AddressValueError:
            return None

        hardware_address = normalize_hardware_address(tokens[1])
        if hardware_address is None:
            return None

        state = ARP_TYPES.get(tokens[2].lower(), NeighborState.OTHER)
        return NeighborEntry(ip=ip, hardware_address=hardware_address, state=state)

    def parse_ipv6_line(self, line: str) -> Optional[IPv6Neighbor]:
        # Format: "fe80::1                                       00-11-22-33-44-55  Reachable (Router)"
        tokens = line.split()
        if len(tokens) < 3 or '-' not in tokens[1]:
            return None

        ip = parse_ipv6(tokens[0])
        if ip is None:
            return None

        hardware_address = normalize_hardware_address(tokens[1])
        if hardware_address is None:
            return None

        state = NETSH_STATES.get(tokens[2].lower(), NeighborState.OTHER)
        return IPv6Neighbor(ip=ip, hardware_address=hardware_address, state=state)
