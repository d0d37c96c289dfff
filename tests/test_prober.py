import subprocess
import threading
import time

import pytest

from neighbor_discovery.config.config_loader import SweepConfig
from neighbor_discovery.scanners.prober import Prober, make_scapy_probe, ping_probe
from neighbor_discovery.utils.error_handler import ConfigurationError, ProbeFailure

ADDRESSES = [f"192.168.1.{i}" for i in range(1, 6)]


class RecordingProbe:
    """Counts calls and the peak number of probes running at once."""

    def __init__(self, delay=0.05, fail_on=()):
        self.delay = delay
        self.fail_on = set(fail_on)
        self.calls = []
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def __call__(self, address, timeout):
        with self._lock:
            self.calls.append((address, timeout))
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            time.sleep(self.delay)
            if address in self.fail_on:
                raise ProbeFailure(address, "no reply")
        finally:
            with self._lock:
                self.in_flight -= 1


def test_sweep_with_small_pool_completes():
    probe = RecordingProbe(fail_on={"192.168.1.2", "192.168.1.4"})
    prober = Prober(probe=probe, settle_delay=0, drain_timeout=5.0)

    result = prober.sweep(ADDRESSES, concurrency_limit=2, probe_timeout=0.5)

    assert result.dispatched == 5
    assert result.completed == 5
    assert result.failed == 2
    assert result.abandoned == 0
    assert sorted(address for address, _ in probe.calls) == sorted(ADDRESSES)
    assert all(timeout == 0.5 for _, timeout in probe.calls)
    assert probe.peak <= 2


def test_sweep_returns_at_drain_deadline():
    release = threading.Event()

    def stuck_probe(address, timeout):
        release.wait(10)

    prober = Prober(probe=stuck_probe, settle_delay=0, drain_timeout=0.3)
    start = time.monotonic()
    try:
        result = prober.sweep(ADDRESSES, concurrency_limit=2, probe_timeout=1.0)
        elapsed = time.monotonic() - start
    finally:
        release.set()

    assert elapsed < 3.0
    assert result.completed == 0
    assert result.abandoned == 5


def test_sweep_waits_settle_delay(mocker):
    sleep = mocker.patch("neighbor_discovery.scanners.prober.time.sleep")
    prober = Prober(probe=lambda address, timeout: None, settle_delay=0.5)

    prober.sweep(ADDRESSES[:1])

    sleep.assert_called_once_with(0.5)


def test_empty_sweep_does_nothing():
    probe = RecordingProbe()
    result = Prober(probe=probe, settle_delay=0).sweep([])
    assert result.dispatched == 0
    assert probe.calls == []


def test_from_config_uses_ping_by_default():
    config = SweepConfig(settle_delay=0.1, drain_timeout=3.0)
    prober = Prober.from_config(config)
    assert prober.probe is ping_probe
    assert prober.settle_delay == 0.1
    assert prober.drain_timeout == 3.0


class TestPingProbe:
    def test_unix_command(self, mocker):
        mocker.patch("platform.system", return_value="Linux")
        run = mocker.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 0, "", ""))

        ping_probe("192.168.1.1", 1.0)

        assert run.call_args[0][0] == ["ping", "-c", "1", "-W", "1", "192.168.1.1"]

    def test_windows_command(self, mocker):
        mocker.patch("platform.system", return_value="Windows")
        run = mocker.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 0, "", ""))

        ping_probe("192.168.1.1", 0.5)

        assert run.call_args[0][0] == ["ping", "-n", "1", "-w", "500", "192.168.1.1"]

    @pytest.mark.parametrize("system", ["Darwin", "FreeBSD"])
    def test_millisecond_wait_on_macos_and_freebsd(self, mocker, system):
        mocker.patch("platform.system", return_value=system)
        run = mocker.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 0, "", ""))

        ping_probe("192.168.1.1", 1.0)

        assert run.call_args[0][0] == ["ping", "-c", "1", "-W", "1000", "192.168.1.1"]

    def test_openbsd_command(self, mocker):
        mocker.patch("platform.system", return_value="OpenBSD")
        run = mocker.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 0, "", ""))

        ping_probe("192.168.1.1", 2.0)

        assert run.call_args[0][0] == ["ping", "-c", "1", "-w", "2", "192.168.1.1"]

    def test_netbsd_uses_seconds(self, mocker):
        mocker.patch("platform.system", return_value="NetBSD")
        run = mocker.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 0, "", ""))

        ping_probe("192.168.1.1", 1.0)

        assert run.call_args[0][0] == ["ping", "-c", "1", "-W", "1", "192.168.1.1"]

    def test_no_reply_raises(self, mocker):
        mocker.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 1, "", ""))
        with pytest.raises(ProbeFailure):
            ping_probe("192.168.1.1", 1.0)

    def test_missing_ping_raises_probe_failure(self, mocker):
        mocker.patch("subprocess.run", side_effect=FileNotFoundError("ping"))
        with pytest.raises(ProbeFailure):
            ping_probe("192.168.1.1", 1.0)


def test_scapy_probe_requires_scapy(mocker):
    mocker.patch.dict("sys.modules", {"scapy.all": None})
    with pytest.raises(ConfigurationError):
        make_scapy_probe()
