"""
Neighbor Discovery Module

Lists devices on the local IPv4 subnet by reading the operating system's
neighbor cache, optionally warming it with a probe sweep first. Records are
enriched with reverse-DNS hostnames, OUI vendor names and link-local IPv6
addresses.
"""

__version__ = "1.0.0"
__author__ = "Neighbor Discovery Team"
