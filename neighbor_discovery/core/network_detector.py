"""
Network detection for automatically determining the local subnet.

This module provides the SubnetResolver class, which picks the host's active
IPv4 interface and turns its address and netmask into a Subnet, and the
``expand`` function, which turns a Subnet into the bounded range of host
addresses a probe sweep covers.
"""

import ipaddress
import platform
import socket
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Set

import psutil

from .data_models import AddressRange, Subnet
from ..utils.error_handler import ConfigurationError, ErrorContext, ErrorSeverity, ErrorType
from ..utils.logger import Logger, get_logger
from ..utils.network_utils import netmask_to_prefix


@dataclass
class InterfaceCandidate:
    """
    An IPv4 address bound to a network interface.

    Attributes:
        name: Interface name as reported by the OS
        address: IPv4 address of the interface
        prefix_length: Prefix length derived from the netmask
    """
    name: str
    address: ipaddress.IPv4Address
    prefix_length: int


def expand(subnet: Subnet) -> AddressRange:
    """
    Produce the usable host addresses of a subnet.

    The range excludes the network and broadcast addresses and holds at most
    254 addresses regardless of prefix size. /31 and /32 give an empty range.

    Args:
        subnet: Subnet to expand

    Returns:
        AddressRange that can be iterated any number of times
    """
    return AddressRange(subnet)


class SubnetResolver:
    """
    Detects the local IPv4 subnet from host network configuration.

    Candidate interfaces are enumerated with psutil. The interface carrying
    the default route is preferred; otherwise the first non-loopback,
    non-link-local interface in enumeration order is used.
    """

    MIN_PREFIX = 1
    MAX_PREFIX = 30

    def __init__(self, logger: Optional[Logger] = None, system: Optional[str] = None):
        """
        Initialize the SubnetResolver.

        Args:
            logger: Logger instance
            system: Platform name override (defaults to platform.system())
        """
        self.logger = logger or get_logger(__name__)
        self.system = (system or platform.system()).lower()
        self.selected_interface: Optional[InterfaceCandidate] = None

    def resolve(self) -> Subnet:
        """
        Detect and return the local subnet.

        Returns:
            Subnet: Network address and prefix length of the chosen interface

        Raises:
            ConfigurationError: If no suitable IPv4 interface is found
        """
        candidates = self.get_candidates()
        if not candidates:
            context = ErrorContext(
                error_type=ErrorType.CONFIGURATION_ERROR,
                severity=ErrorSeverity.CRITICAL,
                operation="resolve",
                component="SubnetResolver",
            )
            raise ConfigurationError(
                "No usable network adapter found: need an up, non-loopback, "
                "non-link-local IPv4 interface with a prefix length between "
                f"{self.MIN_PREFIX} and {self.MAX_PREFIX}",
                context,
            )

        hints = self._default_route_hints()
        selected = None
        for candidate in candidates:
            if candidate.name in hints or str(candidate.address) in hints:
                selected = candidate
                self.logger.debug(f"Interface {candidate.name} carries the default route")
                break

        if selected is None:
            selected = candidates[0]
            self.logger.debug(f"No default-route interface matched; using first candidate {selected.name}")

        self.selected_interface = selected
        subnet = Subnet.from_address(selected.address, selected.prefix_length)
        self.logger.info(f"Detected interface: {selected.name} ({selected.address}/{selected.prefix_length})")
        self.logger.info(f"Local subnet: {subnet}")
        return subnet

    def get_candidates(self) -> List[InterfaceCandidate]:
        """
        Enumerate usable IPv4 interface addresses in system order.

        Returns:
            List[InterfaceCandidate]: Up, non-loopback, non-link-local
            addresses with a usable prefix length
        """
        try:
            addresses = psutil.net_if_addrs()
            stats = psutil.net_if_stats()
        except (OSError, RuntimeError) as e:
            self.logger.warning(f"Could not enumerate network interfaces: {e}")
            return []

        candidates = []
        for name, interface_addresses in addresses.items():
            interface_stats = stats.get(name)
            if interface_stats is not None and not interface_stats.isup:
                self.logger.debug(f"Skipping interface {name}: down")
                continue

            for address in interface_addresses:
                if address.family != socket.AF_INET or not address.address:
                    continue
                candidate = self._make_candidate(name, address.address, address.netmask)
                if candidate:
                    candidates.append(candidate)

        self.logger.debug(f"Found {len(candidates)} candidate interface addresses")
        return candidates

    def _make_candidate(self, name: str, address: str, netmask: Optional[str]) -> Optional[InterfaceCandidate]:
        try:
            ip = ipaddress.IPv4Address(address)
        except ipaddress.AddressValueError:
            return None

        if ip.is_loopback or ip.is_link_local or ip.is_multicast or ip.is_unspecified:
            self.logger.debug(f"Skipping {name} address {ip}: loopback or link-local")
            return None

        if not netmask:
            self.logger.debug(f"Skipping {name} address {ip}: no netmask")
            return None

        try:
            prefix_length = netmask_to_prefix(netmask)
        except ValueError:
            self.logger.debug(f"Skipping {name} address {ip}: bad netmask {netmask}")
            return None

        if not self.MIN_PREFIX <= prefix_length <= self.MAX_PREFIX:
            self.logger.debug(f"Skipping {name} address {ip}: unusable prefix /{prefix_length}")
            return None

        return InterfaceCandidate(name=name, address=ip, prefix_length=prefix_length)

    def _default_route_hints(self) -> Set[str]:
        """
        Interface names or addresses that carry the default route.

        Windows route tables name the interface by its address, the other
        platforms by interface name. A failed route query yields no hints.
        """
        try:
            if self.system == "windows":
                return self._get_windows_default_route()
            if self.system == "linux":
                return self._get_linux_default_route()
            return self._get_bsd_default_route()
        except (subprocess.SubprocessError, OSError) as e:
            self.logger.debug(f"Default route lookup failed: {e}")
            return set()

    def _get_linux_default_route(self) -> Set[str]:
        result = subprocess.run(
            ["ip", "route", "show", "default"],
            capture_output=True,
            text=True,
            timeout=10
        )

        # Parse output: "default via 192.168.1.1 dev eth0 proto dhcp metric 100"
        hints = set()
        for line in result.stdout.splitlines():
            parts = line.split()
            if parts and parts[0] == 'default' and 'dev' in parts:
                dev_index = parts.index('dev')
                if dev_index + 1 < len(parts):
                    hints.add(parts[dev_index + 1])
        return hints

    def _get_bsd_default_route(self) -> Set[str]:
        result = subprocess.run(
            ["route", "-n", "get", "default"],
            capture_output=True,
            text=True,
            timeout=10
        )

        # Parse output: "  interface: en0"
        hints = set()
        for line in result.stdout.splitlines():
            key, _, value = line.strip().partition(':')
            if key == 'interface' and value.strip():
                hints.add(value.strip())
        return hints

    def _get_windows_default_route(self) -> Set[str]:
        result = subprocess.run(
            ["route", "print", "-4", "0.0.0.0"],
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='ignore',
            timeout=10
        )

        # Rows: "0.0.0.0          0.0.0.0      192.168.1.1    192.168.1.100     25"
        hints = set()
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) >= 5 and parts[0] == '0.0.0.0' and parts[1] == '0.0.0.0':
                hints.add(parts[3])
        return hints
