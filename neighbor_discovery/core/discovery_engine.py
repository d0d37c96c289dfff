"""
Discovery Engine for Neighbor Discovery Module.

This module provides the DiscoveryEngine class that runs the discovery
pipeline: subnet resolution, optional probe sweep, neighbor cache reads and
report assembly.
"""

import time
from datetime import datetime
from typing import Dict, Optional

from .data_models import DiscoveryResult, DiscoveryStatistics, Subnet
from .hostname_resolver import HostnameResolver
from .network_detector import SubnetResolver, expand
from .report_assembler import ReportAssembler
from .vendor_catalog import OUICatalog
from ..config.config_loader import DiscoveryConfig
from ..scanners import NeighborCacheReader, Prober, select_reader
from ..utils.logger import Logger, get_logger


class DiscoveryEngine:
    """
    Orchestrates one neighbor discovery run.

    Phases run in a fixed order. The probe sweep, when requested, drains (or
    hits its deadline) before the neighbor cache is read. Only configuration
    and validation errors escape; everything else degrades the report.
    """

    def __init__(
        self,
        config: Optional[DiscoveryConfig] = None,
        reader: Optional[NeighborCacheReader] = None,
        subnet_resolver: Optional[SubnetResolver] = None,
        prober: Optional[Prober] = None,
        catalog: Optional[OUICatalog] = None,
        hostname_resolver: Optional[HostnameResolver] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the engine.

        Collaborators not passed in are built from ``config``. The prober is
        only built when a sweep is actually requested.

        Args:
            config: Discovery settings (defaults if omitted)
            reader: Platform neighbor reader
            subnet_resolver: Local subnet detector
            prober: Probe sweep implementation
            catalog: OUI vendor catalog
            hostname_resolver: Reverse-DNS resolver
            logger: Logger instance

        Raises:
            ConfigurationError: If the platform has no neighbor reader
        """
        self.config = config or DiscoveryConfig()
        self.logger = logger or get_logger(__name__)

        self.reader = reader or select_reader(
            logger=self.logger, command_timeout=self.config.neighbor.command_timeout
        )
        self.subnet_resolver = subnet_resolver or SubnetResolver(self.logger)
        self._prober = prober
        self.catalog = catalog or OUICatalog(self.config.resolution.oui_file, self.logger)
        self.hostname_resolver = hostname_resolver or HostnameResolver(
            enabled=self.config.resolution.resolve_hostnames, logger=self.logger
        )

    @property
    def prober(self) -> Prober:
        if self._prober is None:
            self._prober = Prober.from_config(self.config.sweep, self.logger)
        return self._prober

    def discover(self, subnet: Optional[Subnet] = None, include_ipv6: bool = False,
                 force: bool = False) -> DiscoveryResult:
        """
        Run the discovery pipeline.

        Args:
            subnet: Target subnet; detected from the host when omitted
            include_ipv6: Also read the IPv6 neighbor cache and attach link-local addresses
            force: Run a probe sweep before reading the cache

        Returns:
            DiscoveryResult with one record per in-subnet hardware address

        Raises:
            ConfigurationError: If no subnet is given and none can be detected
        """
        self.logger.section("NEIGHBOR DISCOVERY")
        started_at = datetime.now()
        statistics = DiscoveryStatistics()

        # Phase 1: target subnet
        phase_start = time.monotonic()
        if subnet is None:
            subnet = self.subnet_resolver.resolve()
            selected = self.subnet_resolver.selected_interface
            source = selected.name if selected else "auto-detected"
        else:
            source = "argument"
        statistics.phase_times["subnet"] = time.monotonic() - phase_start
        self.logger.subnet_info(str(subnet), source, force)

        # Catalog is populated before any concurrent stage runs
        self.catalog.load()

        # Phase 2: optional sweep
        if force:
            self._run_sweep(subnet, statistics)

        # Phase 3: neighbor cache
        phase_start = time.monotonic()
        self.logger.progress_start("Reading neighbor cache")
        errors_before = self.reader.error_handler.error_summary()
        ipv4_entries = self.reader.read_ipv4()
        statistics.neighbor_entries_read = len(ipv4_entries)

        ipv6_map = {}
        if include_ipv6:
            ipv6_map = self.reader.read_ipv6()
            statistics.ipv6_entries_read = len(ipv6_map)
        statistics.errors_encountered = self._new_errors(errors_before)
        statistics.phase_times["neighbor_cache"] = time.monotonic() - phase_start
        self.logger.progress_end(
            f"Read {len(ipv4_entries)} IPv4 entries"
            + (f" and {len(ipv6_map)} IPv6 link-local entries" if include_ipv6 else "")
        )

        # Phase 4: filter, dedup and enrich
        phase_start = time.monotonic()
        self.logger.progress_start("Resolving hostnames and vendors")
        assembler = ReportAssembler(self.catalog, self.hostname_resolver, self.logger)
        records = assembler.assemble(ipv4_entries, ipv6_map, subnet)
        statistics.devices_reported = len(records)
        statistics.phase_times["assembly"] = time.monotonic() - phase_start
        self.logger.progress_end(f"Found {len(records)} devices in {subnet}")

        return DiscoveryResult(
            subnet=subnet,
            records=records,
            timestamp=started_at,
            include_ipv6=include_ipv6,
            swept=force,
            statistics=statistics,
        )

    def _run_sweep(self, subnet: Subnet, statistics: DiscoveryStatistics) -> None:
        """Probe the subnet's host range to refresh the neighbor cache."""
        sweep_config = self.config.sweep
        addresses = expand(subnet)
        if len(addresses) == 0:
            self.logger.warning(f"{subnet} has no usable host addresses; skipping sweep")
            return

        if subnet.usable_host_count > len(addresses):
            self.logger.info(
                f"{subnet} has {subnet.usable_host_count} hosts; sweeping the first {len(addresses)}"
            )

        self.logger.progress_start(f"Probing {len(addresses)} addresses ({sweep_config.method})")
        result = self.prober.sweep(
            addresses,
            concurrency_limit=sweep_config.concurrency_limit,
            probe_timeout=sweep_config.probe_timeout,
        )
        statistics.probes_dispatched = result.dispatched
        statistics.probes_completed = result.completed
        statistics.phase_times["sweep"] = result.duration
        self.logger.progress_end(
            f"Sweep finished in {result.duration:.2f}s "
            f"({result.completed}/{result.dispatched} probes returned, {result.abandoned} abandoned)"
        )

    def _new_errors(self, before: Dict[str, int]) -> Dict[str, int]:
        """Errors the reader handled since ``before`` was taken, by type."""
        after = self.reader.error_handler.error_summary()
        return {
            error_type: count - before.get(error_type, 0)
            for error_type, count in after.items()
            if count > before.get(error_type, 0)
        }
