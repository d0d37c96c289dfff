"""
Neighbor cache readers and the probe sweep.

This package contains the reader base class, one reader per operating system
family and the Prober used to warm the neighbor cache.
"""

import platform
from typing import Optional

from .base_reader import NeighborCacheReader, IPv6Neighbor
from .windows_reader import WindowsNeighborReader
from .linux_reader import LinuxNeighborReader
from .darwin_reader import DarwinNeighborReader, OpenBSDNeighborReader
from .prober import Prober, SweepResult, ping_probe, make_scapy_probe
from ..utils.error_handler import ConfigurationError

READERS = {
    "windows": WindowsNeighborReader,
    "linux": LinuxNeighborReader,
    "darwin": DarwinNeighborReader,
    "freebsd": DarwinNeighborReader,
    "openbsd": OpenBSDNeighborReader,
    "netbsd": DarwinNeighborReader,
}


def select_reader(system: Optional[str] = None, **kwargs) -> NeighborCacheReader:
    """
    Create the neighbor reader for the current (or given) platform.

    Args:
        system: Platform name as returned by platform.system()
        **kwargs: Passed to the reader constructor

    Returns:
        NeighborCacheReader for the platform

    Raises:
        ConfigurationError: If the platform has no reader
    """
    system = (system or platform.system()).lower()
    reader_class = READERS.get(system)
    if reader_class is None:
        raise ConfigurationError(
            f"Unsupported platform '{system}'; supported: {', '.join(sorted(READERS))}"
        )
    return reader_class(**kwargs)


__all__ = [
    'NeighborCacheReader',
    'IPv6Neighbor',
    'WindowsNeighborReader',
    'LinuxNeighborReader',
    'DarwinNeighborReader',
    'OpenBSDNeighborReader',
    'Prober',
    'SweepResult',
    'ping_probe',
    'make_scapy_probe',
    'select_reader',
    'READERS',
]
