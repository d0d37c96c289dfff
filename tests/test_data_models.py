import ipaddress

import pytest

from neighbor_discovery.core.data_models import (
    AddressRange, DeviceRecord, NeighborEntry, NeighborState, Subnet
)
from neighbor_discovery.core.network_detector import expand
from neighbor_discovery.utils.error_handler import ValidationError


@pytest.mark.parametrize("prefix", range(0, 33))
def test_range_size_and_membership_for_every_prefix(prefix):
    subnet = Subnet.from_address("10.20.30.40", prefix)
    expected = min(max(2 ** (32 - prefix) - 2, 0), 254)
    broadcast = int(subnet.base_address) | (~subnet.netmask_int & 0xFFFFFFFF)
    addresses = list(expand(subnet))

    assert len(expand(subnet)) == expected
    assert len(addresses) == expected
    assert len(set(addresses)) == expected
    for address in addresses:
        assert subnet.contains(address)
        assert address != subnet.base_address
        assert int(address) != broadcast


@pytest.mark.parametrize("prefix, expected", [(24, 254), (25, 126), (30, 2), (31, 0), (32, 0), (0, 254)])
def test_range_size_examples(prefix, expected):
    assert len(expand(Subnet.from_address("192.168.1.0", prefix))) == expected


def test_range_excludes_network_and_broadcast():
    subnet = Subnet.from_address("192.168.1.0", 24)
    addresses = list(expand(subnet))

    assert addresses[0] == ipaddress.IPv4Address("192.168.1.1")
    assert addresses[-1] == ipaddress.IPv4Address("192.168.1.254")
    assert ipaddress.IPv4Address("192.168.1.0") not in addresses
    assert ipaddress.IPv4Address("192.168.1.255") not in addresses


def test_range_for_30_holds_the_two_hosts():
    subnet = Subnet.from_address("192.168.1.8", 30)
    assert [str(a) for a in expand(subnet)] == ["192.168.1.9", "192.168.1.10"]


def test_large_subnet_range_starts_after_network_address():
    subnet = Subnet.from_address("10.0.0.0", 16)
    addresses = list(expand(subnet))
    assert str(addresses[0]) == "10.0.0.1"
    assert str(addresses[-1]) == "10.0.0.254"


def test_range_can_be_iterated_twice():
    addresses = AddressRange(Subnet.from_address("192.168.5.0", 29))
    assert list(addresses) == list(addresses)


def test_from_address_masks_host_bits():
    subnet = Subnet.from_address("192.168.1.77", 24)
    assert str(subnet) == "192.168.1.0/24"
    assert str(subnet.netmask) == "255.255.255.0"


def test_subnet_rejects_host_bits():
    with pytest.raises(ValidationError):
        Subnet(ipaddress.IPv4Address("192.168.1.1"), 24)


def test_subnet_rejects_bad_prefix():
    with pytest.raises(ValidationError):
        Subnet.from_address("192.168.1.0", 33)


def test_subnet_contains():
    subnet = Subnet.from_address("192.168.1.0", 24)
    assert subnet.contains("192.168.1.200")
    assert subnet.contains(ipaddress.IPv4Address("192.168.1.0"))
    assert not subnet.contains("192.168.2.1")
    assert not subnet.contains("10.0.0.5")
    assert not subnet.contains("not-an-ip")


def test_neighbor_entry_placeholders():
    ip = ipaddress.IPv4Address("192.168.1.9")
    assert NeighborEntry(ip, "FF:FF:FF:FF:FF:FF").is_placeholder
    assert NeighborEntry(ip, "00:00:00:00:00:00").is_placeholder
    assert NeighborEntry(ip, "AA:BB:CC:DD:EE:FF", NeighborState.INCOMPLETE).is_placeholder
    assert not NeighborEntry(ip, "AA:BB:CC:DD:EE:FF", NeighborState.STALE).is_placeholder


def test_device_record_to_dict_omits_ipv6_unless_requested():
    record = DeviceRecord(
        hostname=None,
        ipv4=ipaddress.IPv4Address("192.168.1.1"),
        ipv6=ipaddress.IPv6Address("fe80::1"),
        hardware_address="AA:BB:CC:DD:EE:FF",
        vendor="Acme Corp",
    )
    assert "ipv6" not in record.to_dict(include_ipv6=False)
    assert record.to_dict()["ipv6"] == "fe80::1"
    assert record.to_dict()["ipv4"] == "192.168.1.1"
