"""
Error types and centralized error reporting for the Neighbor Discovery Module.

Only configuration and validation failures terminate a run. Probe failures,
unparseable neighbor-table lines and lookup misses degrade into a smaller or
less enriched report, so they are absorbed where they happen. Nothing here
retries: probes and lookups are one-shot.
"""

import shutil
from typing import Optional, Any, Dict
from enum import Enum
from dataclasses import dataclass

from .logger import Logger, get_logger


class ErrorType(Enum):
    """Enumeration for different types of errors."""
    CONFIGURATION_ERROR = "configuration_error"
    VALIDATION_ERROR = "validation_error"
    TOOL_MISSING_ERROR = "tool_missing_error"
    SUBPROCESS_ERROR = "subprocess_error"


class ErrorSeverity(Enum):
    """Enumeration for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """
    Context information for error handling.

    Attributes:
        error_type: Type of error that occurred
        severity: Severity level of the error
        operation: Operation that was being performed when error occurred
        component: Component/module where error occurred
        additional_info: Additional context information
    """
    error_type: ErrorType
    severity: ErrorSeverity
    operation: str
    component: str
    additional_info: Dict[str, Any] = None

    def __post_init__(self):
        if self.additional_info is None:
            self.additional_info = {}


class NetworkDiscoveryError(Exception):
    """Base exception class for Neighbor Discovery Module."""

    def __init__(self, message: str, error_context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.error_context = error_context


class ConfigurationError(NetworkDiscoveryError):
    """No usable network adapter, unsupported platform or unusable settings."""
    pass


class ValidationError(NetworkDiscoveryError):
    """Malformed user input, raised before any network activity."""
    pass


class ProbeFailure(NetworkDiscoveryError):
    """A single reachability probe failed or timed out."""

    def __init__(self, address: str, reason: str):
        super().__init__(f"Probe to {address} failed: {reason}")
        self.address = address
        self.reason = reason


class ErrorHandler:
    """
    Logs errors according to their context and prints troubleshooting hints.

    ``handle_error`` returns False for every error type: the module performs
    no retries, the return value only tells callers that the error was
    reported.
    """

    def __init__(self, logger: Optional[Logger] = None):
        """
        Initialize the ErrorHandler.

        Args:
            logger: Logger instance for error reporting
        """
        self.logger = logger or get_logger(__name__)
        self.error_statistics: Dict[ErrorType, int] = {error_type: 0 for error_type in ErrorType}

    def handle_error(self, error: Exception, context: ErrorContext) -> bool:
        """
        Handle an error based on its type and context.

        Args:
            error: The exception that occurred
            context: Error context information

        Returns:
            bool: Always False, nothing is retried
        """
        self.error_statistics[context.error_type] += 1
        self._log_error(error, context)

        if context.error_type == ErrorType.CONFIGURATION_ERROR:
            self._suggest_configuration_fixes(error, context)
        elif context.error_type == ErrorType.VALIDATION_ERROR:
            self._suggest_validation_fixes(error, context)
        elif context.error_type == ErrorType.TOOL_MISSING_ERROR:
            self._suggest_tool_installation(context.additional_info.get('tool_name', 'unknown'))

        return False

    def error_summary(self) -> Dict[str, int]:
        """
        Count of handled errors per type, omitting types with no errors.

        Returns:
            Dict mapping error type value to count
        """
        return {
            error_type.value: count
            for error_type, count in self.error_statistics.items()
            if count
        }

    def _log_error(self, error: Exception, context: ErrorContext) -> None:
        error_msg = f"Error in {context.component}.{context.operation}: {str(error)}"

        if context.severity == ErrorSeverity.CRITICAL:
            self.logger.error(error_msg, exception=error)
        elif context.severity == ErrorSeverity.HIGH:
            self.logger.error(error_msg)
        elif context.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(error_msg)
        else:
            self.logger.debug(error_msg)

    def _suggest_configuration_fixes(self, error: Exception, context: ErrorContext) -> None:
        """Provide configuration error solutions."""
        self.logger.info("Configuration error solutions:")
        self.logger.info("  • Check that a network adapter is up and has an IPv4 address")
        self.logger.info("  • Pass the target subnet explicitly, e.g. 192.168.1.0/24")
        self.logger.info("  • Check YAML syntax in discovery_config.yml")

    def _suggest_validation_fixes(self, error: Exception, context: ErrorContext) -> None:
        """Provide validation error solutions."""
        self.logger.info("Validation error solutions:")
        self.logger.info("  • Use CIDR notation: ddd.ddd.ddd.ddd/dd (e.g. 192.168.1.0/24)")
        self.logger.info("  • Octets must be 0-255 and the prefix length 0-32")

    def _suggest_tool_installation(self, tool_name: str) -> None:
        """Provide tool installation suggestions."""
        suggestions = {
            "ip": [
                "Ubuntu/Debian: sudo apt-get install iproute2",
                "CentOS/RHEL: sudo yum install iproute",
            ],
            "ping": [
                "Ubuntu/Debian: sudo apt-get install iputils-ping",
                "CentOS/RHEL: sudo yum install iputils",
            ],
            "ndp": [
                "ndp ships with macOS and the BSDs; check your PATH",
            ],
        }

        if tool_name in suggestions:
            self.logger.info(f"Installation suggestions for {tool_name}:")
            for suggestion in suggestions[tool_name]:
                self.logger.info(f"  • {suggestion}")
        else:
            self.logger.info(f"Please install {tool_name} using your system's package manager")


class ToolValidator:
    """Checks that the external commands a neighbor reader relies on exist."""

    def __init__(self, error_handler: ErrorHandler):
        self.error_handler = error_handler
        self.logger = error_handler.logger

    def validate_tool(self, tool_name: str) -> bool:
        """
        Check if a tool is available in the system PATH.

        Args:
            tool_name: Name of the tool to check

        Returns:
            bool: True if tool is available, False otherwise
        """
        tool_path = shutil.which(tool_name)
        if tool_path:
            self.logger.debug(f"Found {tool_name} at: {tool_path}")
            return True

        context = ErrorContext(
            error_type=ErrorType.TOOL_MISSING_ERROR,
            severity=ErrorSeverity.MEDIUM,
            operation="tool_availability_check",
            component="ToolValidator",
            additional_info={"tool_name": tool_name}
        )
        self.error_handler.handle_error(
            NetworkDiscoveryError(f"Tool {tool_name} not found in PATH"), context
        )
        return False
