"""
Core components for neighbor discovery functionality.
"""

from .data_models import (
    MAX_RANGE_SIZE,
    NeighborState,
    Subnet,
    AddressRange,
    NeighborEntry,
    DeviceRecord,
    DiscoveryStatistics,
    DiscoveryResult
)
from .network_detector import SubnetResolver, InterfaceCandidate, expand
from .vendor_catalog import OUICatalog
from .hostname_resolver import HostnameResolver
from .report_assembler import ReportAssembler

__all__ = [
    'MAX_RANGE_SIZE',
    'NeighborState',
    'Subnet',
    'AddressRange',
    'NeighborEntry',
    'DeviceRecord',
    'DiscoveryStatistics',
    'DiscoveryResult',
    'SubnetResolver',
    'InterfaceCandidate',
    'expand',
    'OUICatalog',
    'HostnameResolver',
    'ReportAssembler'
]
