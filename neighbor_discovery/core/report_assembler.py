"""
Report assembly: merges neighbor entries into one record per device.
"""

import ipaddress
from typing import Dict, Iterable, List, Optional

from .data_models import DeviceRecord, NeighborEntry, Subnet
from .hostname_resolver import HostnameResolver
from .vendor_catalog import OUICatalog
from ..utils.logger import Logger, get_logger


class ReportAssembler:
    """
    Builds DeviceRecords from raw neighbor entries.

    Entries are filtered to the target subnet and deduplicated by hardware
    address, keeping the first occurrence. Each surviving entry is enriched
    with its IPv6 correlation, vendor and hostname.
    """

    def __init__(self, catalog: OUICatalog, hostname_resolver: Optional[HostnameResolver] = None,
                 logger: Optional[Logger] = None):
        """
        Initialize the assembler.

        Args:
            catalog: Vendor catalog; loaded here if it has not been yet
            hostname_resolver: Reverse-DNS resolver (a default one if omitted)
            logger: Logger instance
        """
        self.catalog = catalog.load()
        self.hostname_resolver = hostname_resolver or HostnameResolver()
        self.logger = logger or get_logger(__name__)

    def assemble(self, ipv4_entries: Iterable[NeighborEntry],
                 ipv6_map: Optional[Dict[str, ipaddress.IPv6Address]],
                 subnet: Subnet) -> List[DeviceRecord]:
        """
        Produce one DeviceRecord per distinct in-subnet hardware address.

        Args:
            ipv4_entries: Parsed IPv4 neighbor entries, in cache order
            ipv6_map: Hardware address to link-local IPv6 address (may be empty or None)
            subnet: Target subnet

        Returns:
            List of DeviceRecord; callers must not depend on its order
        """
        ipv6_map = ipv6_map or {}

        unique: Dict[str, NeighborEntry] = {}
        for entry in ipv4_entries:
            if entry.is_placeholder:
                continue
            if not subnet.contains(entry.ip):
                self.logger.debug(f"Ignoring {entry.ip}: outside {subnet}")
                continue
            if entry.hardware_address in unique:
                self.logger.debug(
                    f"Ignoring {entry.ip}: {entry.hardware_address} already seen at "
                    f"{unique[entry.hardware_address].ip}"
                )
                continue
            unique[entry.hardware_address] = entry

        records = []
        for hardware_address, entry in unique.items():
            records.append(DeviceRecord(
                hostname=self.hostname_resolver.resolve(entry.ip),
                ipv4=entry.ip,
                ipv6=ipv6_map.get(hardware_address),
                hardware_address=hardware_address,
                vendor=self.catalog.lookup(hardware_address),
            ))

        return records
