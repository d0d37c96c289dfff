"""
Configuration loader for Neighbor Discovery Module.
Handles loading and validation of the YAML configuration file with fallback to defaults.
"""

import yaml
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path

from ..utils.logger import Logger

DEFAULT_CONFIG_FILE = "discovery_config.yml"


@dataclass
class SweepConfig:
    """Configuration for the optional probe sweep."""
    method: str = "ping"  # ping, scapy
    concurrency_limit: int = 50
    probe_timeout: float = 1.0
    settle_delay: float = 0.5
    drain_timeout: float = 15.0
    interface: Optional[str] = None


@dataclass
class NeighborConfig:
    """Configuration for reading the neighbor cache."""
    command_timeout: int = 10


@dataclass
class ResolutionConfig:
    """Configuration for hostname and vendor enrichment."""
    resolve_hostnames: bool = True
    oui_file: Optional[str] = None


@dataclass
class DiscoveryConfig:
    """All settings for one discovery run."""
    sweep: SweepConfig = field(default_factory=SweepConfig)
    neighbor: NeighborConfig = field(default_factory=NeighborConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)


class ConfigLoader:
    """
    Loads and validates the YAML configuration file for neighbor discovery.
    Falls back to default settings when the file or a section is missing.
    """

    VALID_METHODS = ["ping", "scapy"]

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize ConfigLoader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to the config directory relative to this file.
        """
        if config_dir is None:
            self.config_dir = Path(__file__).parent
        else:
            self.config_dir = Path(config_dir)

        self.logger = Logger()

    def load(self, config_file: str = DEFAULT_CONFIG_FILE) -> DiscoveryConfig:
        """
        Load the discovery configuration from a YAML file.

        Args:
            config_file: Name of the configuration file

        Returns:
            DiscoveryConfig with loaded or default values
        """
        config_path = self.config_dir / config_file

        if not config_path.exists():
            self.logger.debug(f"Config file not found at {config_path}. Using default configuration.")
            return DiscoveryConfig()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing config file {config_path}: {e}")
            self.logger.warning("Using default configuration.")
            return DiscoveryConfig()
        except OSError as e:
            self.logger.error(f"Cannot read config file {config_path}: {e}")
            self.logger.warning("Using default configuration.")
            return DiscoveryConfig()

        if not isinstance(config_data, dict):
            self.logger.warning(f"Invalid config structure in {config_path}. Using default configuration.")
            return DiscoveryConfig()

        return DiscoveryConfig(
            sweep=self._build_sweep_config(self._section(config_data, 'sweep')),
            neighbor=self._build_neighbor_config(self._section(config_data, 'neighbor')),
            resolution=self._build_resolution_config(self._section(config_data, 'resolution')),
        )

    def _section(self, config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = config_data.get(name) or {}
        if not isinstance(section, dict):
            self.logger.warning(f"Config section '{name}' must be a mapping. Using defaults for it.")
            return {}
        return section

    def _build_sweep_config(self, data: Dict[str, Any]) -> SweepConfig:
        defaults = SweepConfig()
        return SweepConfig(
            method=self._validate_method(data.get('method', defaults.method)),
            concurrency_limit=self._validate_positive_int(
                data.get('concurrency_limit', defaults.concurrency_limit), 'concurrency_limit', defaults.concurrency_limit),
            probe_timeout=self._validate_positive_float(
                data.get('probe_timeout', defaults.probe_timeout), 'probe_timeout', defaults.probe_timeout),
            settle_delay=self._validate_non_negative_float(
                data.get('settle_delay', defaults.settle_delay), 'settle_delay', defaults.settle_delay),
            drain_timeout=self._validate_positive_float(
                data.get('drain_timeout', defaults.drain_timeout), 'drain_timeout', defaults.drain_timeout),
            interface=data.get('interface'),
        )

    def _build_neighbor_config(self, data: Dict[str, Any]) -> NeighborConfig:
        defaults = NeighborConfig()
        return NeighborConfig(
            command_timeout=self._validate_positive_int(
                data.get('command_timeout', defaults.command_timeout), 'command_timeout', defaults.command_timeout),
        )

    def _build_resolution_config(self, data: Dict[str, Any]) -> ResolutionConfig:
        defaults = ResolutionConfig()
        resolve_hostnames = data.get('resolve_hostnames', defaults.resolve_hostnames)
        if not isinstance(resolve_hostnames, bool):
            self.logger.warning(
                f"Invalid resolve_hostnames: {resolve_hostnames}. Must be true or false. Using default: {defaults.resolve_hostnames}")
            resolve_hostnames = defaults.resolve_hostnames

        oui_file = data.get('oui_file')
        if oui_file is not None:
            # Relative paths are taken relative to the config directory
            oui_path = Path(oui_file)
            if not oui_path.is_absolute():
                oui_path = self.config_dir / oui_path
            oui_file = str(oui_path)

        return ResolutionConfig(resolve_hostnames=resolve_hostnames, oui_file=oui_file)

    def _validate_positive_int(self, value: Any, field_name: str, default: int) -> int:
        """
        Validate that a value is a positive integer.

        Args:
            value: Value to validate
            field_name: Name of the field for error messages
            default: Default value to use if validation fails

        Returns:
            Validated integer value or default
        """
        try:
            int_value = int(value)
            if int_value <= 0:
                self.logger.warning(f"Invalid {field_name}: {value}. Must be positive. Using default: {default}")
                return default
            return int_value
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid {field_name}: {value}. Must be an integer. Using default: {default}")
            return default

    def _validate_positive_float(self, value: Any, field_name: str, default: float) -> float:
        try:
            float_value = float(value)
            if float_value <= 0:
                self.logger.warning(f"Invalid {field_name}: {value}. Must be positive. Using default: {default}")
                return default
            return float_value
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid {field_name}: {value}. Must be a number. Using default: {default}")
            return default

    def _validate_non_negative_float(self, value: Any, field_name: str, default: float) -> float:
        try:
            float_value = float(value)
            if float_value < 0:
                self.logger.warning(f"Invalid {field_name}: {value}. Must not be negative. Using default: {default}")
                return default
            return float_value
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid {field_name}: {value}. Must be a number. Using default: {default}")
            return default

    def _validate_method(self, method: str) -> str:
        """
        Validate the probe method.

        Args:
            method: Method to validate

        Returns:
            Validated method or default
        """
        if method not in self.VALID_METHODS:
            self.logger.warning(f"Invalid sweep method: {method}. Must be one of {self.VALID_METHODS}. Using default: ping")
            return "ping"
        return method

    def create_default_config(self, config_file: str = DEFAULT_CONFIG_FILE) -> Optional[Path]:
        """
        Write the default configuration file if it does not exist.

        Returns:
            Path of the created file, or None if it already existed or could not be written
        """
        config_path = self.config_dir / config_file
        if config_path.exists():
            return None

        defaults = SweepConfig()
        default_config = {
            'sweep': {
                'method': defaults.method,
                'concurrency_limit': defaults.concurrency_limit,
                'probe_timeout': defaults.probe_timeout,
                'settle_delay': defaults.settle_delay,
                'drain_timeout': defaults.drain_timeout,
                'interface': None,
            },
            'neighbor': {
                'command_timeout': NeighborConfig().command_timeout,
            },
            'resolution': {
                'resolve_hostnames': True,
                'oui_file': None,
            },
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                yaml.dump(default_config, f, default_flow_style=False, indent=2, sort_keys=False)
            self.logger.info(f"Created default config at {config_path}")
            return config_path
        except OSError as e:
            self.logger.error(f"Failed to create default config: {e}")
            return None
