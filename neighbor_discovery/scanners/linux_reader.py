"""
Neighbor cache reader for Linux.

Reads ``ip -4 neigh show`` and ``ip -6 neigh show`` from iproute2.
"""

import ipaddress
from typing import List, Optional, Tuple

from .base_reader import IPv6Neighbor, NeighborCacheReader
from ..core.data_models import NeighborEntry, NeighborState
from ..utils.network_utils import normalize_hardware_address, parse_ipv6

NUD_STATES = {
    "REACHABLE": NeighborState.REACHABLE,
    "STALE": NeighborState.STALE,
    "DELAY": NeighborState.STALE,
    "PROBE": NeighborState.STALE,
    "INCOMPLETE": NeighborState.INCOMPLETE,
    "FAILED": NeighborState.INCOMPLETE,
    "PERMANENT": NeighborState.OTHER,
    "NOARP": NeighborState.OTHER,
}


class LinuxNeighborReader(NeighborCacheReader):
    """Parses iproute2 neighbor listings."""

    platform_name = "linux"

    @property
    def ipv4_command(self) -> List[str]:
        return ["ip", "-4", "neigh", "show"]

    @property
    def ipv6_command(self) -> List[str]:
        return ["ip", "-6", "neigh", "show"]

    def _split_record(self, line: str) -> Optional[Tuple[str, str, NeighborState]]:
        """
        Split "<addr> dev <if> lladdr <mac> [router] <STATE>" into its parts.

        Lines without an lladdr (INCOMPLETE, FAILED) have no hardware
        address and are not records.
        """
        tokens = line.split()
        if len(tokens) < 5 or tokens[1] != "dev" or "lladdr" not in tokens:
            return None

        lladdr_index = tokens.index("lladdr")
        if lladdr_index + 1 >= len(tokens):
            return None

        hardware_address = normalize_hardware_address(tokens[lladdr_index + 1])
        if hardware_address is None:
            return None

        state = NUD_STATES.get(tokens[-1].upper(), NeighborState.OTHER)
        return tokens[0], hardware_address, state

    def parse_ipv4_line(self, line: str) -> Optional[NeighborEntry]:
        # Format: "192.168.1.1 dev eth0 lladdr 00:11:22:33:44:55 REACHABLE"
        record = self._split_record(line)
        if record is None:
            return None

        address, hardware_address, state = record
        try:
            ip = ipaddress.IPv4Address(address)
        except ipaddress.AddressValueError:
            return None
        return NeighborEntry(ip=ip, hardware_address=hardware_address, state=state)

    def parse_ipv6_line(self, line: str) -> Optional[IPv6Neighbor]:
        # Format: "fe80::1 dev eth0 lladdr 00:11:22:33:44:55 router STALE"
        record = self._split_record(line)
        if record is None:
            return None

        address, hardware_address, state = record
        ip = parse_ipv6(address)
        if ip is None:
            return None
        return IPv6Neighbor(ip=ip, hardware_address=hardware_address, state=state)
