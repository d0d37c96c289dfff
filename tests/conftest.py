"""Shared fixtures for the neighbor discovery tests."""

import ipaddress
from typing import Dict, List, Optional

import pytest

from neighbor_discovery.core.data_models import NeighborEntry
from neighbor_discovery.scanners import WindowsNeighborReader
from neighbor_discovery.utils.logger import Logger, LogLevel


@pytest.fixture(autouse=True)
def reset_log_level():
    """Log level is process-wide; keep tests independent of each other."""
    previous = Logger.min_level
    yield
    Logger.min_level = previous


@pytest.fixture
def oui_file(tmp_path):
    path = tmp_path / "oui.tsv"
    path.write_text(
        "# OUI prefix\tVendor name\n"
        "AA:BB:CC\tAcme Corp\n"
        "00:11:22\tCIMSYS Inc\n",
        encoding="utf-8",
    )
    return path


class StubReader(WindowsNeighborReader):
    """Windows grammar fed from canned text instead of a subprocess."""

    def __init__(self, ipv4_output: str = "", ipv6_output: str = "", **kwargs):
        super().__init__(**kwargs)
        self.ipv4_output = ipv4_output
        self.ipv6_output = ipv6_output

    def read_ipv4(self) -> List[NeighborEntry]:
        return self.parse_ipv4(self.ipv4_output)

    def read_ipv6(self) -> Dict[str, ipaddress.IPv6Address]:
        return self.parse_ipv6(self.ipv6_output)


class FakeDNS:
    """Hostname resolver stand-in with a fixed table; unknown IPs return None."""

    def __init__(self, names: Optional[Dict[str, str]] = None):
        self.names = names or {}
        self.enabled = True

    def resolve(self, ip) -> Optional[str]:
        return self.names.get(str(ip))


@pytest.fixture
def stub_reader_factory():
    return StubReader


@pytest.fixture
def fake_dns_factory():
    return FakeDNS
