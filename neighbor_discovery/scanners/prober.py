"""
Probe sweep for warming the OS neighbor cache.

The sweep sends one reachability probe per address through a bounded
thread pool. Probe results are irrelevant: each probe only makes the OS
resolve the target's hardware address so the following neighbor-table read
can see it.
"""

import platform
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..config.config_loader import SweepConfig
from ..utils.error_handler import ConfigurationError, ProbeFailure
from ..utils.logger import Logger, get_logger

ProbeFunction = Callable[[str, float], None]

# Platforms whose ping -W takes milliseconds instead of seconds
MILLISECOND_WAIT_SYSTEMS = ("darwin", "freebsd")


@dataclass
class SweepResult:
    """
    Outcome counters for one sweep; diagnostic only.

    Attributes:
        dispatched: Probes submitted to the pool
        completed: Probes that finished (successfully or not) before the deadline
        failed: Probes that raised or timed out
        abandoned: Probes still pending or queued when the drain deadline hit
        duration: Seconds from dispatch until the settle delay ended
    """
    dispatched: int = 0
    completed: int = 0
    failed: int = 0
    abandoned: int = 0
    duration: float = 0.0


def ping_probe(address: str, timeout: float) -> None:
    """
    Send a single ICMP echo request with the platform ping command.

    Args:
        address: Target IPv4 address
        timeout: Seconds to wait for a reply

    Raises:
        ProbeFailure: If ping fails, times out or is missing
    """
    system = platform.system().lower()
    wait_ms = str(max(int(timeout * 1000), 1))
    if system == "windows":
        # Windows ping: ping -n 1 -w <ms> IP
        cmd = ["ping", "-n", "1", "-w", wait_ms, address]
    elif system in MILLISECOND_WAIT_SYSTEMS:
        # macOS/FreeBSD ping: -W is in milliseconds
        cmd = ["ping", "-c", "1", "-W", wait_ms, address]
    elif system == "openbsd":
        # OpenBSD ping: -w <s> is the reply wait
        cmd = ["ping", "-c", "1", "-w", str(max(int(round(timeout)), 1)), address]
    else:
        # Linux/NetBSD ping: ping -c 1 -W <s> IP
        cmd = ["ping", "-c", "1", "-W", str(max(int(round(timeout)), 1)), address]

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout + 2
        )
    except subprocess.TimeoutExpired:
        raise ProbeFailure(address, "timeout")
    except OSError as e:
        raise ProbeFailure(address, str(e))

    if result.returncode != 0:
        raise ProbeFailure(address, f"no reply (exit code {result.returncode})")


def make_scapy_probe(interface: Optional[str] = None) -> ProbeFunction:
    """
    Build a probe that sends one ARP who-has frame with scapy.

    Sending raw frames usually needs root or CAP_NET_RAW.

    Args:
        interface: Interface to send on (scapy's default route interface if None)

    Returns:
        Probe function with the same signature as ``ping_probe``

    Raises:
        ConfigurationError: If scapy cannot be imported
    """
    try:
        from scapy.all import ARP, Ether, srp
    except ImportError as e:
        raise ConfigurationError(f"Sweep method 'scapy' needs the scapy package: {e}")

    def scapy_probe(address: str, timeout: float) -> None:
        frame = Ether(dst="ff:ff:ff:ff:ff:ff") / ARP(pdst=address)
        kwargs = {"timeout": timeout, "verbose": False}
        if interface:
            kwargs["iface"] = interface
        try:
            answered, _ = srp(frame, **kwargs)
        except (OSError, RuntimeError) as e:
            raise ProbeFailure(address, str(e))
        if not answered:
            raise ProbeFailure(address, "no ARP reply")

    return scapy_probe


class Prober:
    """
    Bounded concurrent probe sweep.

    All probes are submitted up front to a pool of ``concurrency_limit``
    workers. The sweep waits for the pool to drain up to ``drain_timeout``
    seconds, abandons whatever is still outstanding, then sleeps
    ``settle_delay`` seconds so the OS can finish updating its cache.
    """

    def __init__(self, probe: Optional[ProbeFunction] = None, settle_delay: float = 0.5,
                 drain_timeout: float = 15.0, logger: Optional[Logger] = None):
        """
        Initialize the prober.

        Args:
            probe: Callable taking (address, timeout) and raising on failure
            settle_delay: Seconds to wait after the sweep drains
            drain_timeout: Maximum seconds to wait for all probes
            logger: Logger instance
        """
        self.probe = probe or ping_probe
        self.settle_delay = settle_delay
        self.drain_timeout = drain_timeout
        self.logger = logger or get_logger(__name__)

    @classmethod
    def from_config(cls, config: SweepConfig, logger: Optional[Logger] = None) -> "Prober":
        """Build a prober for the configured method and timings."""
        probe = make_scapy_probe(config.interface) if config.method == "scapy" else ping_probe
        return cls(
            probe=probe,
            settle_delay=config.settle_delay,
            drain_timeout=config.drain_timeout,
            logger=logger,
        )

    def sweep(self, addresses: Iterable, concurrency_limit: int = 50,
              probe_timeout: float = 1.0) -> SweepResult:
        """
        Probe every address once; never raises for individual probes.

        Args:
            addresses: Addresses to probe (strings or ipaddress objects)
            concurrency_limit: Maximum probes in flight
            probe_timeout: Per-probe timeout in seconds

        Returns:
            SweepResult with dispatch and completion counters
        """
        targets = [str(address) for address in addresses]
        result = SweepResult(dispatched=len(targets))
        if not targets:
            return result

        start = time.monotonic()
        self.logger.debug(
            f"Sweeping {len(targets)} addresses",
            concurrency=concurrency_limit, timeout=probe_timeout
        )

        executor = ThreadPoolExecutor(max_workers=max(1, concurrency_limit),
                                      thread_name_prefix="probe")
        try:
            futures = [executor.submit(self.probe, target, probe_timeout) for target in targets]
            done, pending = wait(futures, timeout=self.drain_timeout)
        finally:
            # Abandon outstanding probes instead of blocking on them
            executor.shutdown(wait=False, cancel_futures=True)

        result.completed = len(done)
        result.abandoned = len(pending)
        for future in done:
            error = future.exception()
            if error is not None:
                result.failed += 1
                self.logger.debug(f"Probe failed: {error}")

        if pending:
            self.logger.debug(f"Drain deadline reached; abandoned {len(pending)} probes")

        if self.settle_delay > 0:
            time.sleep(self.settle_delay)

        result.duration = time.monotonic() - start
        return result
