"""
Main entry point for the Neighbor Discovery Module.

This module provides the command-line interface for the neighbor discovery
tool, including argument parsing, pre-flight checks, output rendering and
interrupt handling.
"""

import argparse
import json
import signal
import sys
from typing import List, Optional

from . import __version__
from .config.config_loader import ConfigLoader, DiscoveryConfig
from .core.data_models import DiscoveryResult, Subnet
from .core.discovery_engine import DiscoveryEngine
from .utils.error_handler import (
    ConfigurationError, ErrorContext, ErrorHandler, ErrorSeverity, ErrorType,
    NetworkDiscoveryError, ToolValidator, ValidationError
)
from .utils.json_reporter import JSONReporter, to_json_data
from .utils.logger import LogLevel, get_logger, set_log_level
from .utils.network_validator import parse_subnet_argument

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_VALIDATION = 2
EXIT_INTERRUPTED = 130


class NeighborDiscoveryApp:
    """
    Main application class for Neighbor Discovery Module.

    Handles pre-flight checks, the discovery run, output and shutdown.
    """

    def __init__(self):
        """Initialize the application."""
        self.logger = get_logger(__name__)
        self.error_handler = ErrorHandler(self.logger)
        self.engine: Optional[DiscoveryEngine] = None
        self._previous_handlers = {}

    def _signal_handler(self, signum: int, frame) -> None:
        """
        Turn SIGTERM into the same interrupt path as Ctrl+C.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        self.logger.warning(f"Received signal {signum}, stopping discovery")
        raise KeyboardInterrupt

    def _install_signal_handlers(self) -> None:
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                self._previous_handlers[signum] = signal.signal(signum, self._signal_handler)
            except ValueError:
                # Not in the main thread
                self.logger.debug("Signal handlers not installed outside the main thread")
                return

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def _perform_preflight_checks(self, config: DiscoveryConfig, include_ipv6: bool,
                                  force: bool) -> bool:
        """
        Check that the external commands this run needs are on PATH.

        Missing tools only produce warnings: the affected reader returns an
        empty table and the report is still produced.

        Returns:
            bool: True if every tool was found
        """
        tools = list(self.engine.reader.required_tools(include_ipv6))
        if force and config.sweep.method == "ping":
            tools.append("ping")

        validator = ToolValidator(self.error_handler)
        missing = [tool for tool in tools if not validator.validate_tool(tool)]
        if missing:
            self.logger.warning(f"Missing tools: {', '.join(missing)}; results may be incomplete")
            return False

        self.logger.debug("All pre-flight checks passed")
        return True

    def _load_config(self, args: argparse.Namespace) -> DiscoveryConfig:
        loader = ConfigLoader(args.config_dir)
        if args.write_default_config:
            created = loader.create_default_config()
            if created is None:
                self.logger.info(f"Configuration file already present in {loader.config_dir}")

        config = loader.load()
        if args.no_dns:
            config.resolution.resolve_hostnames = False
        return config

    def _render_table(self, result: DiscoveryResult) -> None:
        headers = ["Hostname", "IPv4", "Hardware address", "Vendor"]
        widths = [28, 15, 17, 30]
        if result.include_ipv6:
            headers.insert(2, "IPv6")
            widths.insert(2, 26)

        self.logger.section(f"DEVICES IN {result.subnet}")
        self.logger.table_header(headers, widths)
        for device in to_json_data(result)["devices"]:
            values = [device["hostname"] or "-", device["ipv4"],
                      device["hardware_address"], device["vendor"] or "-"]
            if result.include_ipv6:
                values.insert(2, device["ipv6"] or "-")
            self.logger.table_row(values, widths)

        self.logger.success(f"{len(result.records)} devices found")

    def _render_json(self, result: DiscoveryResult) -> None:
        print(json.dumps(to_json_data(result)["devices"], indent=2, ensure_ascii=False))

    def run(self, args: argparse.Namespace) -> int:
        """
        Run the neighbor discovery application.

        Args:
            args: Parsed command line arguments

        Returns:
            int: Exit code
        """
        self._install_signal_handlers()
        try:
            # Validate input before touching the network
            subnet: Optional[Subnet] = None
            if args.subnet:
                subnet = parse_subnet_argument(args.subnet)

            config = self._load_config(args)
            self.engine = DiscoveryEngine(config=config, logger=self.logger)
            self._perform_preflight_checks(config, args.ipv6, args.force)

            result = self.engine.discover(subnet=subnet, include_ipv6=args.ipv6, force=args.force)

            if args.format == "json":
                self._render_json(result)
            else:
                self._render_table(result)

            if args.output_dir:
                JSONReporter(args.output_dir, self.logger).generate_report(result)

            return EXIT_SUCCESS

        except ValidationError as e:
            self.error_handler.handle_error(e, e.error_context or ErrorContext(
                error_type=ErrorType.VALIDATION_ERROR,
                severity=ErrorSeverity.HIGH,
                operation="run",
                component="NeighborDiscoveryApp",
            ))
            return EXIT_VALIDATION
        except ConfigurationError as e:
            self.error_handler.handle_error(e, e.error_context or ErrorContext(
                error_type=ErrorType.CONFIGURATION_ERROR,
                severity=ErrorSeverity.HIGH,
                operation="run",
                component="NeighborDiscoveryApp",
            ))
            return EXIT_FAILURE
        except KeyboardInterrupt:
            self.logger.warning("Discovery interrupted by user")
            return EXIT_INTERRUPTED
        except (NetworkDiscoveryError, OSError) as e:
            self.logger.error(f"Neighbor discovery failed: {e}", exception=e)
            return EXIT_FAILURE
        finally:
            self._restore_signal_handlers()


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="neighbor-discovery",
        description="List devices on the local subnet from the OS neighbor cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  neighbor-discovery                          # Auto-detect the local subnet
  neighbor-discovery 192.168.1.0/24           # Report devices in a given subnet
  neighbor-discovery 192.168.1.0/24 --force   # Probe the subnet first
  neighbor-discovery --ipv6 --format json     # Include link-local IPv6, JSON output
  neighbor-discovery --output-dir ./reports   # Also write a JSON report file
        """
    )

    parser.add_argument(
        "subnet",
        nargs="?",
        help="Target subnet in CIDR notation (e.g. 192.168.1.0/24). "
             "Defaults to the subnet of the active interface"
    )

    parser.add_argument(
        "--ipv6",
        action="store_true",
        help="Attach link-local IPv6 addresses sharing each device's hardware address"
    )

    parser.add_argument(
        "--force",
        action="store_true",
        help="Probe every address in the subnet before reading the neighbor cache"
    )

    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        help="Also write a timestamped JSON report to this directory"
    )

    parser.add_argument(
        "--config-dir",
        type=str,
        help="Directory containing discovery_config.yml. "
             "Defaults to neighbor_discovery/config/"
    )

    parser.add_argument(
        "--write-default-config",
        action="store_true",
        help="Create discovery_config.yml with default values if it does not exist"
    )

    parser.add_argument(
        "--no-dns",
        action="store_true",
        help="Skip reverse-DNS hostname lookups"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Neighbor Discovery Module {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Neighbor Discovery Module.

    Args:
        argv: Command line arguments (sys.argv[1:] if None)

    Returns:
        int: Exit code (0 success, 1 failure, 2 invalid input, 130 interrupted)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Keep stdout machine-readable in json mode
    if args.format == "json":
        set_log_level(LogLevel.WARNING)
    elif args.verbose:
        set_log_level(LogLevel.DEBUG)
    else:
        set_log_level(LogLevel.INFO)

    app = NeighborDiscoveryApp()
    return app.run(args)


if __name__ == "__main__":
    sys.exit(main())
