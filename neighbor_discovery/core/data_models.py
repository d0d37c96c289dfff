"""
Core data models and enums for the Neighbor Discovery Module.

This module defines the subnet and address range types, the neighbor-table
entries produced by the platform readers and the device records emitted by
the report assembler.
"""

import ipaddress
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from ..utils.error_handler import ValidationError
from ..utils.network_utils import BROADCAST_HARDWARE_ADDRESS, ZERO_HARDWARE_ADDRESS

# Sweeps never cover more than a /24 worth of hosts
MAX_RANGE_SIZE = 254


class NeighborState(Enum):
    """State of a neighbor cache entry."""
    REACHABLE = "reachable"
    STALE = "stale"
    INCOMPLETE = "incomplete"
    OTHER = "other"


@dataclass(frozen=True)
class Subnet:
    """
    An IPv4 subnet in network-address form.

    Attributes:
        base_address: Network address; host bits are always zero
        prefix_length: Prefix length, 0..32
    """
    base_address: ipaddress.IPv4Address
    prefix_length: int

    def __post_init__(self):
        if not isinstance(self.base_address, ipaddress.IPv4Address):
            object.__setattr__(self, "base_address", ipaddress.IPv4Address(self.base_address))
        if not 0 <= self.prefix_length <= 32:
            raise ValidationError(f"Prefix length must be between 0 and 32, got {self.prefix_length}")
        if int(self.base_address) & ~self.netmask_int & 0xFFFFFFFF:
            raise ValidationError(
                f"{self.base_address}/{self.prefix_length} has host bits set; "
                f"use {self.from_address(self.base_address, self.prefix_length)}"
            )

    @classmethod
    def from_address(cls, address, prefix_length: int) -> "Subnet":
        """
        Build the subnet containing ``address``, clearing its host bits.

        Args:
            address: Any member address (string or IPv4Address)
            prefix_length: Prefix length, 0..32
        """
        if not 0 <= prefix_length <= 32:
            raise ValidationError(f"Prefix length must be between 0 and 32, got {prefix_length}")
        mask = (0xFFFFFFFF << (32 - prefix_length)) & 0xFFFFFFFF
        base = int(ipaddress.IPv4Address(address)) & mask
        return cls(ipaddress.IPv4Address(base), prefix_length)

    @property
    def netmask_int(self) -> int:
        return (0xFFFFFFFF << (32 - self.prefix_length)) & 0xFFFFFFFF

    @property
    def netmask(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(self.netmask_int)

    @property
    def usable_host_count(self) -> int:
        return max(2 ** (32 - self.prefix_length) - 2, 0)

    def contains(self, address) -> bool:
        """Masked comparison of ``address`` against the network address."""
        try:
            value = int(ipaddress.IPv4Address(address))
        except ipaddress.AddressValueError:
            return False
        return value & self.netmask_int == int(self.base_address)

    def __str__(self) -> str:
        return f"{self.base_address}/{self.prefix_length}"


class AddressRange:
    """
    Usable host addresses of a subnet, capped at ``MAX_RANGE_SIZE``.

    Addresses are computed on iteration, and iterating again starts over.
    Network and broadcast addresses are never produced.
    """

    def __init__(self, subnet: Subnet, limit: int = MAX_RANGE_SIZE):
        self.subnet = subnet
        self._count = min(subnet.usable_host_count, limit)

    def __iter__(self) -> Iterator[ipaddress.IPv4Address]:
        base = int(self.subnet.base_address)
        for offset in range(1, self._count + 1):
            yield ipaddress.IPv4Address((base + offset) & 0xFFFFFFFF)

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"AddressRange({self.subnet}, {self._count} addresses)"


@dataclass(frozen=True)
class NeighborEntry:
    """
    One parsed neighbor cache line.

    Attributes:
        ip: IPv4 address of the neighbor
        hardware_address: Normalized hardware address ("AA:BB:CC:DD:EE:FF")
        state: Cache state reported by the OS
    """
    ip: ipaddress.IPv4Address
    hardware_address: str
    state: NeighborState = NeighborState.OTHER

    @property
    def is_placeholder(self) -> bool:
        """True for unresolved or broadcast entries that do not name a device."""
        return (
            self.state == NeighborState.INCOMPLETE
            or self.hardware_address in (BROADCAST_HARDWARE_ADDRESS, ZERO_HARDWARE_ADDRESS)
        )


@dataclass(frozen=True)
class DeviceRecord:
    """
    A discovered device, one per distinct hardware address.

    Attributes:
        hostname: Reverse-DNS name, if any
        ipv4: IPv4 address from the neighbor cache
        ipv6: Link-local IPv6 address sharing the hardware address, if requested and found
        hardware_address: Normalized hardware address
        vendor: Vendor name from the OUI catalog, if known
    """
    hostname: Optional[str]
    ipv4: ipaddress.IPv4Address
    ipv6: Optional[ipaddress.IPv6Address]
    hardware_address: str
    vendor: Optional[str]

    def to_dict(self, include_ipv6: bool = True) -> Dict[str, Any]:
        data = {
            "hostname": self.hostname,
            "ipv4": str(self.ipv4),
            "hardware_address": self.hardware_address,
            "vendor": self.vendor,
        }
        if include_ipv6:
            data["ipv6"] = str(self.ipv6) if self.ipv6 else None
        return data


@dataclass
class DiscoveryStatistics:
    """
    Counters and timings collected during one discovery run.

    Attributes:
        neighbor_entries_read: IPv4 entries parsed from the neighbor cache
        ipv6_entries_read: Link-local IPv6 correlations found
        devices_reported: Records emitted after filtering and dedup
        probes_dispatched: Probes submitted to the sweep pool
        probes_completed: Probes that finished before the drain deadline
        errors_encountered: Handled neighbor command errors, by error type
        phase_times: Duration of each phase in seconds
    """
    neighbor_entries_read: int = 0
    ipv6_entries_read: int = 0
    devices_reported: int = 0
    probes_dispatched: int = 0
    probes_completed: int = 0
    errors_encountered: Dict[str, int] = field(default_factory=dict)
    phase_times: Dict[str, float] = field(default_factory=dict)


@dataclass
class DiscoveryResult:
    """
    Complete result of one discovery run.

    Attributes:
        subnet: Subnet the records were filtered to
        records: Discovered devices
        timestamp: When the run started
        include_ipv6: Whether IPv6 correlation was requested
        swept: Whether a probe sweep ran before reading the cache
        statistics: Run statistics
    """
    subnet: Subnet
    records: List[DeviceRecord]
    timestamp: datetime
    include_ipv6: bool = False
    swept: bool = False
    statistics: DiscoveryStatistics = field(default_factory=DiscoveryStatistics)
