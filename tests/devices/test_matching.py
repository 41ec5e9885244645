from __future__ import annotations

from datetime import datetime

from src.attendance_sync.attendance_sync.core.enums import MatchKind
from src.attendance_sync.attendance_sync.devices.matching import match_terminal, merge_observed
from src.attendance_sync.attendance_sync.devices.model import Terminal


def test_serial_match_wins_over_address():
    registry = [
        Terminal(network_address="10.0.0.5"),
        Terminal(network_address="10.0.0.9", stable_serial="SN1"),
    ]

    match = match_terminal(Terminal(network_address="10.0.0.5", stable_serial="SN1"), registry)

    assert match.kind is MatchKind.BY_SERIAL
    assert match.index == 1


def test_address_match_ignores_serial_bearing_entries():
    registry = [Terminal(network_address="10.0.0.5", stable_serial="SN1")]

    match = match_terminal(Terminal(network_address="10.0.0.5"), registry)

    assert match.kind is MatchKind.UNMATCHED
    assert not match.matched


def test_address_match_on_serial_less_entry():
    registry = [Terminal(network_address="10.0.0.5")]

    match = match_terminal(Terminal(network_address="10.0.0.5"), registry)

    assert match.kind is MatchKind.BY_ADDRESS
    assert match.index == 0


def test_unknown_serial_falls_back_to_serial_less_address_entry():
    registry = [Terminal(network_address="10.0.0.5")]

    match = match_terminal(Terminal(network_address="10.0.0.5", stable_serial="SN9"), registry)

    assert match.kind is MatchKind.BY_ADDRESS


def test_merge_updates_address_fills_blanks_and_keeps_user_fields():
    synced = datetime(2024, 1, 1, 8, 0)
    existing = Terminal(
        network_address="10.0.0.9",
        open_ports=(4370,),
        stable_serial="SN1",
        display_name=None,
        custom_name="Lobby",
        firmware_version="Ver 6.60",
        last_synced_at=synced,
    )
    observed = Terminal(
        network_address="10.0.0.5",
        hardware_address="00:17:61:aa:bb:cc",
        open_ports=(4370, 80),
        stable_serial="SN1",
        display_name="K40",
        custom_name="ignored",
        firmware_version="Ver 7.00",
    )

    merged = merge_observed(existing, observed)

    assert merged.network_address == "10.0.0.5"
    assert merged.hardware_address == "00:17:61:aa:bb:cc"
    assert merged.open_ports == (4370, 80)
    assert merged.display_name == "K40"
    assert merged.firmware_version == "Ver 6.60"
    assert merged.custom_name == "Lobby"
    assert merged.last_synced_at == synced


def test_designated_port_prefers_4370():
    assert Terminal(network_address="a", open_ports=(80, 4370)).designated_port == 4370
    assert Terminal(network_address="a", open_ports=(4360, 80)).designated_port == 4360
    assert Terminal(network_address="a").designated_port == 4370


def test_identity_key_is_serial_else_address():
    assert Terminal(network_address="10.0.0.5").identity_key == "10.0.0.5"
    assert Terminal(network_address="10.0.0.5", stable_serial="SN1").identity_key == "SN1"


def test_terminal_dict_round_trip_keeps_sync_stamp():
    t = Terminal(network_address="10.0.0.5", open_ports=(4370,), last_synced_at=datetime(2024, 1, 1, 9, 30))

    assert Terminal.from_dict(t.to_dict()) == t
