"""
Validation of user-supplied subnet arguments.

Subnets arrive as CIDR strings on the command line. They are checked against
the ``ddd.ddd.ddd.ddd/dd`` shape first and then for octet and prefix ranges,
all before any network activity takes place.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.data_models import Subnet
from .error_handler import ErrorContext, ErrorHandler, ErrorSeverity, ErrorType, ValidationError
from .logger import Logger, get_logger

CIDR_PATTERN = re.compile(r'^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})/(\d{1,2})$')


@dataclass
class NetworkValidationResult:
    """
    Result of a subnet validation.

    Attributes:
        is_valid: Whether the validation passed
        subnet: Parsed subnet when valid
        error_message: Error message if validation failed
        suggestions: List of suggestions to fix validation issues
    """
    is_valid: bool
    subnet: Optional[Subnet] = None
    error_message: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


class NetworkValidator:
    """Validates CIDR subnet arguments and reports failures through the ErrorHandler."""

    def __init__(self, error_handler: Optional[ErrorHandler] = None, logger: Optional[Logger] = None):
        self.logger = logger or get_logger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)

    def validate_subnet(self, text: str) -> NetworkValidationResult:
        """
        Validate a subnet argument in CIDR notation.

        Host bits in the address part are accepted and cleared, so
        "192.168.1.77/24" validates to 192.168.1.0/24.

        Args:
            text: Subnet string (e.g., "192.168.1.0/24")

        Returns:
            NetworkValidationResult with validation outcome
        """
        if not text or not isinstance(text, str):
            return NetworkValidationResult(
                is_valid=False,
                error_message="Subnet must be a non-empty string",
                suggestions=["Provide a subnet in CIDR notation (e.g., 192.168.1.0/24)"]
            )

        match = CIDR_PATTERN.match(text.strip())
        if not match:
            return NetworkValidationResult(
                is_valid=False,
                error_message=f"Subnet '{text}' does not match ddd.ddd.ddd.ddd/dd",
                suggestions=["Use CIDR notation (e.g., 192.168.1.0/24)"]
            )

        octets = [int(group) for group in match.groups()[:4]]
        prefix_length = int(match.group(5))

        bad_octets = [octet for octet in octets if octet > 255]
        if bad_octets:
            return NetworkValidationResult(
                is_valid=False,
                error_message=f"Subnet '{text}' has octets out of range: {bad_octets}",
                suggestions=["Each octet must be between 0 and 255"]
            )

        if prefix_length > 32:
            return NetworkValidationResult(
                is_valid=False,
                error_message=f"Subnet '{text}' has prefix length {prefix_length}; maximum is 32",
                suggestions=["Use a prefix length between 0 and 32"]
            )

        subnet = Subnet.from_address(".".join(str(octet) for octet in octets), prefix_length)
        return NetworkValidationResult(is_valid=True, subnet=subnet)


def parse_subnet_argument(text: str, validator: Optional[NetworkValidator] = None) -> Subnet:
    """
    Parse a subnet argument or raise.

    Args:
        text: Subnet string in CIDR notation
        validator: Validator to use (a default one is created if omitted)

    Returns:
        Subnet in network-address form

    Raises:
        ValidationError: If the argument is malformed
    """
    validator = validator or NetworkValidator()
    result = validator.validate_subnet(text)
    if result.is_valid:
        return result.subnet

    context = ErrorContext(
        error_type=ErrorType.VALIDATION_ERROR,
        severity=ErrorSeverity.HIGH,
        operation="parse_subnet_argument",
        component="NetworkValidator",
        additional_info={"subnet": text, "suggestions": result.suggestions}
    )
    raise ValidationError(result.error_message, context)
