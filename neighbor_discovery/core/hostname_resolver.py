"""
Best-effort reverse-DNS lookups for discovered devices.
"""

import socket
from typing import Optional

from ..utils.logger import Logger, get_logger


class HostnameResolver:
    """Resolves IP addresses to hostnames; any failure yields None."""

    def __init__(self, enabled: bool = True, logger: Optional[Logger] = None):
        self.enabled = enabled
        self.logger = logger or get_logger(__name__)

    def resolve(self, ip) -> Optional[str]:
        """
        Reverse-resolve an address.

        Args:
            ip: IPv4 or IPv6 address (string or ipaddress object)

        Returns:
            Hostname, or None when disabled or when no name could be found
        """
        if not self.enabled:
            return None

        try:
            hostname, _, _ = socket.gethostbyaddr(str(ip))
        except (socket.herror, socket.gaierror, socket.timeout, OSError, UnicodeError) as e:
            self.logger.debug(f"No hostname for {ip}: {e}")
            return None

        # Some resolvers echo the address back instead of failing
        if not hostname or hostname == str(ip):
            return None
        return hostname
