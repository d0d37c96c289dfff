"""
JSON Report Generator for Neighbor Discovery Module.

This module turns a DiscoveryResult into a structured JSON document and
writes it to a timestamped file, handling filename collisions.
"""

import ipaddress
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.data_models import DeviceRecord, DiscoveryResult
from .logger import Logger, get_logger


def _ip_sort_key(record: DeviceRecord) -> int:
    return int(ipaddress.IPv4Address(record.ipv4))


def devices_to_json(records: List[DeviceRecord], include_ipv6: bool = False) -> List[Dict[str, Any]]:
    """
    Convert device records to JSON-serializable dicts sorted by IPv4 address.

    Args:
        records: Discovered devices
        include_ipv6: Include the ``ipv6`` field in each record

    Returns:
        List of record dicts
    """
    return [record.to_dict(include_ipv6=include_ipv6)
            for record in sorted(records, key=_ip_sort_key)]


def to_json_data(result: DiscoveryResult) -> Dict[str, Any]:
    """
    Convert a DiscoveryResult to the report structure.

    Args:
        result: Discovery result

    Returns:
        Dict with ``scan_metadata``, ``statistics`` and ``devices``
    """
    statistics = result.statistics
    return {
        "scan_metadata": {
            "timestamp": result.timestamp.isoformat(),
            "subnet": str(result.subnet),
            "include_ipv6": result.include_ipv6,
            "swept": result.swept,
        },
        "statistics": {
            "neighbor_entries_read": statistics.neighbor_entries_read,
            "ipv6_entries_read": statistics.ipv6_entries_read,
            "devices_reported": statistics.devices_reported,
            "probes_dispatched": statistics.probes_dispatched,
            "probes_completed": statistics.probes_completed,
            "errors_encountered": dict(statistics.errors_encountered),
            "phase_times": {name: round(seconds, 3)
                            for name, seconds in statistics.phase_times.items()},
        },
        "devices": devices_to_json(result.records, result.include_ipv6),
    }


class JSONReporter:
    """
    Writes discovery results to JSON files.

    Files are named ``neighbor_discovery_YYYYMMDD_HHMMSS.json`` after the
    run's start time; an existing file gets a ``_1``, ``_2``... suffix.
    """

    MAX_COLLISIONS = 999

    def __init__(self, output_directory: str = "results", logger: Optional[Logger] = None):
        """
        Initialize the JSON reporter.

        Args:
            output_directory: Directory where JSON reports will be saved
            logger: Logger instance
        """
        self.output_directory = Path(output_directory)
        self.logger = logger or get_logger(__name__)

    def generate_report(self, result: DiscoveryResult) -> str:
        """
        Write a JSON report for a discovery run.

        Args:
            result: Discovery result

        Returns:
            str: Path to the generated JSON file

        Raises:
            OSError: If the directory or file cannot be written
        """
        self.output_directory.mkdir(parents=True, exist_ok=True)

        filepath = self._handle_file_collision(
            self.output_directory / self._generate_filename(result)
        )

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(to_json_data(result), f, indent=2, ensure_ascii=False)
        except OSError as e:
            self.logger.error(f"Failed to write JSON report to {filepath}: {e}")
            raise

        self.logger.info(f"JSON report written: {filepath}")
        return str(filepath)

    def _generate_filename(self, result: DiscoveryResult) -> str:
        # Format: neighbor_discovery_YYYYMMDD_HHMMSS.json
        return f"neighbor_discovery_{result.timestamp.strftime('%Y%m%d_%H%M%S')}.json"

    def _handle_file_collision(self, filepath: Path) -> Path:
        """
        Add an incremental suffix until the path does not exist.

        Args:
            filepath: Preferred file path

        Returns:
            Path: Unused file path
        """
        if not filepath.exists():
            return filepath

        for counter in range(1, self.MAX_COLLISIONS + 1):
            candidate = filepath.with_name(f"{filepath.stem}_{counter}{filepath.suffix}")
            if not candidate.exists():
                self.logger.debug(f"File collision detected, using filename: {candidate.name}")
                return candidate

        raise OSError(f"Too many file collisions for {filepath}")
