"""
Network utility functions for address validation and normalization.

This module provides helper functions shared by the neighbor readers, the
subnet resolver and the vendor catalog: IPv4/IPv6 validation, netmask
conversion and hardware address normalization.
"""

import ipaddress
import re
from typing import Optional

BROADCAST_HARDWARE_ADDRESS = "FF:FF:FF:FF:FF:FF"
ZERO_HARDWARE_ADDRESS = "00:00:00:00:00:00"

IPV6_LINK_LOCAL = ipaddress.IPv6Network("fe80::/10")

# One to two hex digits per octet; macOS drops leading zeros ("0:1c:b3:9:85:15")
_HARDWARE_ADDRESS_PATTERN = re.compile(
    r'^([0-9A-Fa-f]{1,2})([:-])([0-9A-Fa-f]{1,2})\2([0-9A-Fa-f]{1,2})\2'
    r'([0-9A-Fa-f]{1,2})\2([0-9A-Fa-f]{1,2})\2([0-9A-Fa-f]{1,2})$'
)


def is_valid_ip(ip_address: str) -> bool:
    """
    Check if a string represents a valid IPv4 address.

    Args:
        ip_address: String to validate as IPv4 address

    Returns:
        bool: True if valid IPv4 address, False otherwise
    """
    try:
        ipaddress.IPv4Address(ip_address)
        return True
    except ipaddress.AddressValueError:
        return False


def parse_ipv6(text: str) -> Optional[ipaddress.IPv6Address]:
    """
    Parse an IPv6 address, dropping any ``%scope`` suffix.

    Args:
        text: Address as printed by a neighbor-table command

    Returns:
        IPv6Address, or None if the text is not an IPv6 address
    """
    address = text.split('%', 1)[0]
    try:
        return ipaddress.IPv6Address(address)
    except ipaddress.AddressValueError:
        return None


def is_link_local_v6(address: ipaddress.IPv6Address) -> bool:
    """Check if an IPv6 address is in fe80::/10."""
    return address in IPV6_LINK_LOCAL


def netmask_to_prefix(netmask: str) -> int:
    """
    Convert a dotted decimal netmask to a prefix length.

    Args:
        netmask: Dotted decimal netmask (e.g., "255.255.255.0")

    Returns:
        int: Prefix length

    Raises:
        ValueError: If netmask is invalid
    """
    try:
        network = ipaddress.IPv4Network(f"0.0.0.0/{netmask}")
        return network.prefixlen
    except (ipaddress.AddressValueError, ipaddress.NetmaskValueError) as e:
        raise ValueError(f"Invalid netmask: {netmask}") from e


def normalize_hardware_address(text: str) -> Optional[str]:
    """
    Normalize a hardware address to uppercase, colon-separated form.

    Accepts ``:`` or ``-`` separated octets and zero-pads single digit
    octets, so "aa-bb-cc-dd-ee-ff" and "a:bb:c:dd:e:ff" both normalize.

    Args:
        text: Hardware address as printed by a neighbor-table command

    Returns:
        str like "AA:BB:CC:DD:EE:FF", or None if the text is not a MAC address
    """
    if not text:
        return None

    match = _HARDWARE_ADDRESS_PATTERN.match(text.strip())
    if not match:
        return None

    octets = [group for index, group in enumerate(match.groups()) if index != 1]
    return ":".join(octet.zfill(2).upper() for octet in octets)


def hardware_prefix(text: str) -> Optional[str]:
    """
    Extract the 3-octet OUI prefix of a hardware address.

    Separators (``:``, ``-``, ``.``) and case are ignored, so Cisco-style
    "aabb.cc11.2233" works as well.

    Args:
        text: Hardware address in any common notation

    Returns:
        str like "AA:BB:CC", or None if fewer than six hex digits are present
    """
    if not text:
        return None

    normalized = normalize_hardware_address(text)
    if normalized:
        return normalized[:8]

    digits = re.sub(r'[:\-.]', '', text.strip()).upper()
    if len(digits) < 6 or not re.fullmatch(r'[0-9A-F]+', digits):
        return None
    return f"{digits[0:2]}:{digits[2:4]}:{digits[4:6]}"
