import socket
import subprocess
from types import SimpleNamespace

import pytest

from neighbor_discovery.core.network_detector import SubnetResolver
from neighbor_discovery.utils.error_handler import ConfigurationError


def addr(address, netmask, family=socket.AF_INET):
    return SimpleNamespace(family=family, address=address, netmask=netmask, broadcast=None, ptp=None)


def stats(isup=True):
    return SimpleNamespace(isup=isup)


@pytest.fixture
def fake_interfaces(mocker):
    def install(addresses, up=None):
        up = up or {}
        mocker.patch("psutil.net_if_addrs", return_value=addresses)
        mocker.patch("psutil.net_if_stats", return_value={
            name: stats(up.get(name, True)) for name in addresses
        })
    return install


def completed(stdout):
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")


def test_prefers_default_route_interface(fake_interfaces, mocker):
    fake_interfaces({
        "lo": [addr("127.0.0.1", "255.0.0.0")],
        "docker0": [addr("172.17.0.1", "255.255.0.0")],
        "eth0": [addr("192.168.1.42", "255.255.255.0")],
    })
    mocker.patch("subprocess.run", return_value=completed(
        "default via 192.168.1.1 dev eth0 proto dhcp metric 100\n"
    ))

    resolver = SubnetResolver(system="Linux")
    subnet = resolver.resolve()

    assert str(subnet) == "192.168.1.0/24"
    assert resolver.selected_interface.name == "eth0"


def test_falls_back_to_first_candidate(fake_interfaces, mocker):
    fake_interfaces({
        "en0": [addr("10.1.2.3", "255.255.252.0")],
        "en1": [addr("192.168.1.42", "255.255.255.0")],
    })
    mocker.patch("subprocess.run", side_effect=FileNotFoundError("route"))

    assert str(SubnetResolver(system="Darwin").resolve()) == "10.1.0.0/22"


def test_bsd_route_output(fake_interfaces, mocker):
    fake_interfaces({
        "en0": [addr("10.1.2.3", "255.255.252.0")],
        "en1": [addr("192.168.1.42", "255.255.255.0")],
    })
    mocker.patch("subprocess.run", return_value=completed(
        "   route to: default\ndestination: default\n  interface: en1\n"
    ))

    assert str(SubnetResolver(system="Darwin").resolve()) == "192.168.1.0/24"


def test_windows_route_matches_interface_address(fake_interfaces, mocker):
    fake_interfaces({
        "Ethernet 2": [addr("10.0.5.7", "255.255.255.0")],
        "Wi-Fi": [addr("192.168.1.100", "255.255.255.0")],
    })
    mocker.patch("subprocess.run", return_value=completed(
        "Active Routes:\n"
        "Network Destination        Netmask          Gateway       Interface  Metric\n"
        "          0.0.0.0          0.0.0.0      192.168.1.1    192.168.1.100     25\n"
    ))

    resolver = SubnetResolver(system="Windows")
    assert str(resolver.resolve()) == "192.168.1.0/24"
    assert resolver.selected_interface.name == "Wi-Fi"


def test_skips_unusable_addresses(fake_interfaces, mocker):
    fake_interfaces({
        "lo": [addr("127.0.0.1", "255.0.0.0")],
        "eth0": [addr("169.254.10.1", "255.255.0.0"), addr("fe80::1", "ffff:ffff:ffff:ffff::", socket.AF_INET6)],
        "eth1": [addr("192.168.9.9", "255.255.255.255")],
        "eth2": [addr("192.168.8.8", None)],
        "eth3": [addr("10.9.9.9", "255.255.255.0")],
        "eth4": [addr("172.16.0.4", "255.255.0.0")],
    }, up={"eth3": False})
    mocker.patch("subprocess.run", return_value=completed(""))

    candidates = SubnetResolver(system="Linux").get_candidates()

    assert [c.name for c in candidates] == ["eth4"]
    assert candidates[0].prefix_length == 16


def test_no_candidates_is_a_configuration_error(fake_interfaces):
    fake_interfaces({"lo": [addr("127.0.0.1", "255.0.0.0")]})

    with pytest.raises(ConfigurationError) as exc_info:
        SubnetResolver(system="Linux").resolve()
    assert "No usable network adapter" in str(exc_info.value)
