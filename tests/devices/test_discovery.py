from __future__ import annotations

import threading

import pytest

from src.attendance_sync.attendance_sync.core.exceptions import DiscoveryCancelled, ValidationError
from src.attendance_sync.attendance_sync.devices.discovery import NetworkScanner


def _checker(open_ports: dict[str, set[int]]):
    def check(address: str, port: int, timeout_ms: int) -> bool:
        return port in open_ports.get(address, set())

    return check


def test_scan_reports_terminals_with_their_open_ports():
    scanner = NetworkScanner(
        max_workers=4,
        port_checker=_checker({"10.0.0.9": {4370, 80}, "10.0.0.3": {4360}, "10.0.0.4": {80}}),
    )

    found = scanner.scan(["10.0.0.9", "10.0.0.3", "10.0.0.4", "10.0.0.5"])

    assert [t.network_address for t in found] == ["10.0.0.3", "10.0.0.9"]
    assert found[0].open_ports == (4360,)
    assert found[1].open_ports == (4370, 80)
    assert all(t.hardware_address == "Unknown" for t in found)
    assert all(t.stable_serial is None for t in found)


def test_secondary_port_is_probed_after_main_port():
    scanner = NetworkScanner(port_checker=_checker({"10.0.0.9": {4370, 4360, 8080}}))

    terminal = scanner.probe_host("10.0.0.9")

    assert terminal.open_ports == (4370, 8080, 4360)


def test_hosts_of_a_24_network():
    hosts = NetworkScanner().hosts("192.168.1.17/24")

    assert len(hosts) == 254
    assert hosts[0] == "192.168.1.1"
    assert hosts[-1] == "192.168.1.254"


def test_invalid_network_is_rejected():
    with pytest.raises(ValidationError):
        NetworkScanner().hosts("not-a-network")


def test_cancelled_scan_returns_nothing():
    cancel = threading.Event()
    cancel.set()
    scanner = NetworkScanner(port_checker=_checker({"10.0.0.9": {4370}}))

    with pytest.raises(DiscoveryCancelled):
        scanner.scan(["10.0.0.9"], cancel=cancel)


def test_scan_with_no_terminals_is_empty():
    assert NetworkScanner(port_checker=_checker({})).scan(["10.0.0.1", "10.0.0.2"]) == []
