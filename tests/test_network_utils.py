import ipaddress

import pytest

from neighbor_discovery.utils.network_utils import (
    hardware_prefix, is_link_local_v6, is_valid_ip, netmask_to_prefix,
    normalize_hardware_address, parse_ipv6
)


@pytest.mark.parametrize("text, expected", [
    ("aa-bb-cc-dd-ee-ff", "AA:BB:CC:DD:EE:FF"),
    ("AA:BB:CC:DD:EE:FF", "AA:BB:CC:DD:EE:FF"),
    ("0:1c:b3:9:85:15", "00:1C:B3:09:85:15"),
    ("aa:bb-cc:dd:ee:ff", None),
    ("aa:bb:cc:dd:ee", None),
    ("(incomplete)", None),
    ("", None),
])
def test_normalize_hardware_address(text, expected):
    assert normalize_hardware_address(text) == expected


@pytest.mark.parametrize("text", ["aa:bb:cc:11:22:33", "AA-BB-CC-11-22-33", "aabb.cc11.2233", "AABBCC"])
def test_hardware_prefix_ignores_case_and_separators(text):
    assert hardware_prefix(text) == "AA:BB:CC"


def test_hardware_prefix_rejects_short_or_non_hex():
    assert hardware_prefix("aa:bb") is None
    assert hardware_prefix("zz:zz:zz:zz:zz:zz") is None


def test_netmask_to_prefix():
    assert netmask_to_prefix("255.255.255.0") == 24
    assert netmask_to_prefix("255.255.252.0") == 22
    with pytest.raises(ValueError):
        netmask_to_prefix("255.0.255.0")


def test_parse_ipv6_strips_scope():
    assert parse_ipv6("fe80::1%en0") == ipaddress.IPv6Address("fe80::1")
    assert parse_ipv6("192.168.1.1") is None


def test_link_local_and_ipv4_checks():
    assert is_link_local_v6(ipaddress.IPv6Address("fe80::abcd"))
    assert not is_link_local_v6(ipaddress.IPv6Address("2001:db8::1"))
    assert is_valid_ip("10.0.0.1")
    assert not is_valid_ip("10.0.0.256")
