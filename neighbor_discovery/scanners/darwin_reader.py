"""
Neighbor cache reader for macOS and the BSDs.

Reads ``arp -an`` for IPv4 and ``ndp -an`` for IPv6. Both print hardware
addresses with ``:`` separated octets and drop leading zeros ("0:1c:b3:9:85:15").
"""

import ipaddress
from typing import List, Optional

from .base_reader import IPv6Neighbor, NeighborCacheReader
from ..core.data_models import NeighborEntry, NeighborState
from ..utils.network_utils import normalize_hardware_address, parse_ipv6

# ndp "St" column
NDP_STATES = {
    "R": NeighborState.REACHABLE,
    "S": NeighborState.STALE,
    "D": NeighborState.STALE,
    "P": NeighborState.STALE,
    "I": NeighborState.INCOMPLETE,
}


class DarwinNeighborReader(NeighborCacheReader):
    """Parses BSD-style arp and ndp listings."""

    platform_name = "darwin"

    @property
    def ipv4_command(self) -> List[str]:
        return ["arp", "-an"]

    @property
    def ipv6_command(self) -> List[str]:
        return ["ndp", "-an"]

    def parse_ipv4_line(self, line: str) -> Optional[NeighborEntry]:
        # Format: "? (192.168.1.1) at 0:11:22:33:44:55 on en0 ifscope [ethernet]"
        # Unresolved: "? (192.168.1.5) at (incomplete) on en0 ifscope [ethernet]"
        tokens = line.split()
        if len(tokens) < 4 or tokens[2] != "at":
            return None

        address = tokens[1]
        if not (address.startswith("(") and address.endswith(")")):
            return None

        try:
            ip = ipaddress.IPv4Address(address[1:-1])
        except ipaddress.AddressValueError:
            return None

        hardware_address = normalize_hardware_address(tokens[3])
        if hardware_address is None or '-' in tokens[3]:
            return None

        # arp keeps no reachability state
        return NeighborEntry(ip=ip, hardware_address=hardware_address, state=NeighborState.OTHER)

    def parse_ipv6_line(self, line: str) -> Optional[IPv6Neighbor]:
        # Format: "fe80::1%en0    a4:91:b1:11:22:33    en0 23h59m58s S  R"
        # Static: "fe80::aede:48ff:fe00:1122%en0  ac:de:48:0:11:22  en0 permanent R"
        tokens = line.split()
        if len(tokens) < 5:
            return None

        ip = parse_ipv6(tokens[0])
        if ip is None:
            return None

        hardware_address = normalize_hardware_address(tokens[1])
        if hardware_address is None or '-' in tokens[1]:
            return None

        state = NDP_STATES.get(tokens[4].upper(), NeighborState.OTHER)
        return IPv6Neighbor(ip=ip, hardware_address=hardware_address, state=state)


class OpenBSDNeighborReader(DarwinNeighborReader):
    """
    OpenBSD variant: ``arp -an`` prints a column table instead of the
    ``? (ip) at mac`` form. ``ndp -an`` matches the other BSDs.
    """

    platform_name = "openbsd"

    def parse_ipv4_line(self, line: str) -> Optional[NeighborEntry]:
        # Header: "Host                                 Ethernet Address   Netif Expire    Flags"
        # Format: "192.168.1.1                          aa:bb:cc:dd:ee:ff    em0 19m58s"
        # Unresolved: "192.168.1.5                          (incomplete)         em0 expired"
        tokens = line.split()
        if len(tokens) < 3:
            return None

        try:
            ip = ipaddress.IPv4Address(tokens[0])
        except ipaddress.AddressValueError:
            return None

        hardware_address = normalize_hardware_address(tokens[1])
        if hardware_address is None or '-' in tokens[1]:
            return None

        return NeighborEntry(ip=ip, hardware_address=hardware_address, state=NeighborState.OTHER)
