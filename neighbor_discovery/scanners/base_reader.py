"""
Base neighbor cache reader for Neighbor Discovery Module.

This module defines the abstract base class every platform reader implements.
A reader runs the platform's neighbor-table command and turns each output
line into a typed entry or a skip, using a small per-platform line grammar.
"""

import ipaddress
import subprocess
from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Optional

from ..core.data_models import NeighborEntry, NeighborState
from ..utils.error_handler import ErrorContext, ErrorHandler, ErrorSeverity, ErrorType
from ..utils.logger import Logger, get_logger
from ..utils.network_utils import (
    BROADCAST_HARDWARE_ADDRESS,
    ZERO_HARDWARE_ADDRESS,
    is_link_local_v6,
)


class IPv6Neighbor(NamedTuple):
    """One parsed IPv6 neighbor line."""
    ip: ipaddress.IPv6Address
    hardware_address: str
    state: NeighborState


class NeighborCacheReader(ABC):
    """
    Abstract base class for platform neighbor-table readers.

    Subclasses supply the commands and a line parser for each address
    family. Parsers return None for anything that is not a complete record
    (headers, blank lines, unresolved placeholders); such lines are skipped
    and only reported at debug level.
    """

    platform_name = "generic"

    def __init__(self, logger: Optional[Logger] = None, command_timeout: int = 10,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the reader.

        Args:
            logger: Logger instance for parse diagnostics
            command_timeout: Seconds to wait for a neighbor-table command
            error_handler: ErrorHandler for command failures
        """
        self.logger = logger or get_logger(__name__)
        self.command_timeout = command_timeout
        self.error_handler = error_handler or ErrorHandler(self.logger)

    @property
    @abstractmethod
    def ipv4_command(self) -> List[str]:
        """Command listing the IPv4 ARP cache."""

    @property
    @abstractmethod
    def ipv6_command(self) -> List[str]:
        """Command listing the IPv6 neighbor cache."""

    @abstractmethod
    def parse_ipv4_line(self, line: str) -> Optional[NeighborEntry]:
        """
        Parse one line of IPv4 neighbor-table output.

        Args:
            line: Raw output line

        Returns:
            NeighborEntry, or None if the line is not an entry
        """

    @abstractmethod
    def parse_ipv6_line(self, line: str) -> Optional[IPv6Neighbor]:
        """
        Parse one line of IPv6 neighbor-table output.

        Args:
            line: Raw output line

        Returns:
            IPv6Neighbor, or None if the line is not an entry
        """

    def required_tools(self, include_ipv6: bool = False) -> List[str]:
        """Names of the external commands this reader runs."""
        tools = [self.ipv4_command[0]]
        if include_ipv6 and self.ipv6_command[0] not in tools:
            tools.append(self.ipv6_command[0])
        return tools

    def read_ipv4(self) -> List[NeighborEntry]:
        """Run the IPv4 neighbor-table command and parse its output."""
        return self.parse_ipv4(self._run_command(self.ipv4_command))

    def read_ipv6(self) -> Dict[str, ipaddress.IPv6Address]:
        """Run the IPv6 neighbor-table command and parse its output."""
        return self.parse_ipv6(self._run_command(self.ipv6_command))

    def parse_ipv4(self, output: str) -> List[NeighborEntry]:
        """
        Parse IPv4 neighbor-table output into entries.

        Incomplete and broadcast entries are dropped along with unparseable
        lines.

        Args:
            output: Full command output

        Returns:
            List of NeighborEntry in output order
        """
        entries = []
        for line in output.splitlines():
            if not line.strip():
                continue

            entry = self.parse_ipv4_line(line)
            if entry is None:
                self.logger.debug(f"Skipping neighbor line: {line.strip()!r}")
                continue
            if entry.is_placeholder:
                self.logger.debug(f"Skipping placeholder entry {entry.ip} ({entry.hardware_address}, {entry.state.value})")
                continue
            entries.append(entry)

        self._log_debug_count("IPv4", len(entries))
        return entries

    def parse_ipv6(self, output: str) -> Dict[str, ipaddress.IPv6Address]:
        """
        Parse IPv6 neighbor-table output into a hardware-address map.

        Only link-local (fe80::/10) neighbors are kept. When a hardware
        address appears more than once, the first line wins.

        Args:
            output: Full command output

        Returns:
            Dict mapping normalized hardware address to IPv6 address
        """
        mapping: Dict[str, ipaddress.IPv6Address] = {}
        for line in output.splitlines():
            if not line.strip():
                continue

            neighbor = self.parse_ipv6_line(line)
            if neighbor is None:
                self.logger.debug(f"Skipping neighbor line: {line.strip()!r}")
                continue
            if not is_link_local_v6(neighbor.ip):
                continue
            if (neighbor.state == NeighborState.INCOMPLETE
                    or neighbor.hardware_address in (BROADCAST_HARDWARE_ADDRESS, ZERO_HARDWARE_ADDRESS)):
                continue
            mapping.setdefault(neighbor.hardware_address, neighbor.ip)

        self._log_debug_count("IPv6 link-local", len(mapping))
        return mapping

    def _run_command(self, command: List[str]) -> str:
        """
        Run a neighbor-table command and return its stdout.

        A missing command, a timeout or an OS error is reported and yields
        empty output, which parses to no entries.
        """
        self.logger.debug(f"Running: {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='ignore',
                timeout=self.command_timeout
            )
        except FileNotFoundError as e:
            self._report_command_error(command, e, ErrorType.TOOL_MISSING_ERROR)
            return ""
        except (subprocess.TimeoutExpired, OSError) as e:
            self._report_command_error(command, e, ErrorType.SUBPROCESS_ERROR)
            return ""

        if result.returncode != 0:
            # "arp -a" exits non-zero on an empty table; keep whatever it printed
            self.logger.debug(
                f"{command[0]} exited with code {result.returncode}: {(result.stderr or '').strip()}"
            )
        return result.stdout or ""

    def _report_command_error(self, command: List[str], error: Exception, error_type: ErrorType) -> None:
        context = ErrorContext(
            error_type=error_type,
            severity=ErrorSeverity.MEDIUM,
            operation="read_neighbor_table",
            component=type(self).__name__,
            additional_info={"tool_name": command[0], "command": " ".join(command)}
        )
        self.error_handler.handle_error(error, context)

    def _log_debug_count(self, family: str, count: int) -> None:
        self.logger.debug(f"{self.platform_name}: parsed {count} {family} neighbor entries")
