from __future__ import annotations

import ipaddress
import logging
import socket
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional

from ..core.constants import (
    DEFAULT_DEVICE_PORT,
    DEFAULT_DISCOVERY_TIMEOUT_MS,
    DEFAULT_DISCOVERY_WORKERS,
    SECONDARY_DEVICE_PORT,
    UNKNOWN_HARDWARE_ADDRESS,
    WEB_PORTS,
)
from ..core.exceptions import DiscoveryCancelled, ValidationError
from .model import Terminal
from .sources import DiscoverySource

logger = logging.getLogger(__name__)

PortChecker = Callable[[str, int, int], bool]


def check_port(address: str, port: int, timeout_ms: int) -> bool:
    try:
        with socket.create_connection((address, port), timeout=timeout_ms / 1000):
            return True
    except OSError:
        return False


def local_ipv4() -> str:
    """Address of the interface used for the default route (no packet is sent)."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("8.8.8.8", 80))
        return sock.getsockname()[0]
    except OSError as e:
        raise ValidationError(f"Cannot determine local network address: {e}") from e
    finally:
        sock.close()


class NetworkScanner(DiscoverySource):
    """Finds terminals on a /24 by probing the device ports concurrently.

    Results are returned only once every probe has finished, so a cancelled
    scan never leaks a partial device list.
    """

    def __init__(
        self,
        *,
        max_workers: int = DEFAULT_DISCOVERY_WORKERS,
        timeout_ms: int = DEFAULT_DISCOVERY_TIMEOUT_MS,
        port_checker: PortChecker = check_port,
    ):
        self._max_workers = max(1, int(max_workers))
        self._timeout_ms = int(timeout_ms)
        self._check = port_checker

    def probe_host(self, address: str) -> Optional[Terminal]:
        if self._check(address, DEFAULT_DEVICE_PORT, self._timeout_ms):
            open_ports = [DEFAULT_DEVICE_PORT]
            follow_up_timeout = max(self._timeout_ms * 2 // 3, 1)
            for port in (*WEB_PORTS, SECONDARY_DEVICE_PORT):
                if self._check(address, port, follow_up_timeout):
                    open_ports.append(port)
            return Terminal(network_address=address, hardware_address=UNKNOWN_HARDWARE_ADDRESS, open_ports=tuple(open_ports))

        if self._check(address, SECONDARY_DEVICE_PORT, self._timeout_ms):
            return Terminal(
                network_address=address,
                hardware_address=UNKNOWN_HARDWARE_ADDRESS,
                open_ports=(SECONDARY_DEVICE_PORT,),
            )
        return None

    def hosts(self, network: Optional[str] = None) -> list[str]:
        if network is None:
            network = f"{local_ipv4()}/24"
        try:
            net = ipaddress.ip_network(network, strict=False)
        except ValueError as e:
            raise ValidationError(f"Invalid network {network!r}: {e}") from None
        return [str(h) for h in net.hosts()]

    def discover(self, network: Optional[str] = None, *, cancel: Optional[threading.Event] = None) -> list[Terminal]:
        return self.scan(self.hosts(network), cancel=cancel)

    def scan(self, addresses: Iterable[str], *, cancel: Optional[threading.Event] = None) -> list[Terminal]:
        addresses = list(addresses)
        logger.info("Scanning %d host(s) for terminals on port %d", len(addresses), DEFAULT_DEVICE_PORT)

        found: list[Terminal] = []
        executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="discovery")
        try:
            futures = [executor.submit(self.probe_host, a) for a in addresses]
            for future in as_completed(futures):
                if cancel is not None and cancel.is_set():
                    raise DiscoveryCancelled("Network discovery cancelled")
                terminal = future.result()
                if terminal:
                    logger.info("Found terminal at %s (ports: %s)", terminal.network_address, list(terminal.open_ports))
                    found.append(terminal)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        if cancel is not None and cancel.is_set():
            raise DiscoveryCancelled("Network discovery cancelled")
        if not found:
            logger.warning("No terminals found; add the device by address if it is known")
        found.sort(key=lambda t: ipaddress.ip_address(t.network_address))
        return found
