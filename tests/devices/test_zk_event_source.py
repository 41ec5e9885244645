from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest
from zk.exception import ZKNetworkError

from src.attendance_sync.attendance_sync.core.exceptions import TerminalUnreachable
from src.attendance_sync.attendance_sync.devices import zk_event_source
from src.attendance_sync.attendance_sync.devices.zk_event_source import ZKEventSource


class FakeConnection:
    def __init__(self, attendances, users):
        self._attendances = attendances
        self._users = users
        self.released = False

    def disable_device(self):
        return True

    def enable_device(self):
        return True

    def disconnect(self):
        self.released = True

    def get_serialnumber(self):
        return "SN1\x00"

    def get_device_name(self):
        return "K40"

    def get_firmware_version(self):
        return ""

    def get_users(self):
        return self._users

    def get_attendance(self):
        return self._attendances


def _install(monkeypatch, *, conn=None, error=None):
    calls = {}

    class FakeZK:
        def __init__(self, address, port=4370, **kwargs):
            calls["address"] = address
            calls["port"] = port
            calls.update(kwargs)

        def connect(self):
            if error:
                raise error
            return conn

    monkeypatch.setattr(zk_event_source, "ZK", FakeZK)
    return calls


def test_fetch_maps_attendance_to_raw_events(monkeypatch):
    users = [SimpleNamespace(uid=1, user_id="7", name="Ana"), SimpleNamespace(uid=2, user_id="8", name="Ben")]
    attendances = [
        SimpleNamespace(uid=1, user_id="7", timestamp=datetime(2024, 1, 10, 9, 0, 0), status=0, punch=0),
        SimpleNamespace(uid=9, user_id="42", timestamp=datetime(2024, 1, 10, 17, 30, 0), status=1, punch=1),
    ]
    conn = FakeConnection(attendances, users)
    calls = _install(monkeypatch, conn=conn)

    descriptor, events = ZKEventSource(timeout=5).fetch_events("10.0.0.5", 4370)

    assert calls["address"] == "10.0.0.5" and calls["port"] == 4370 and calls["timeout"] == 5
    assert descriptor.stable_serial == "SN1"
    assert descriptor.display_name == "K40"
    assert descriptor.firmware_version is None
    assert events[0].user_id == 7
    assert events[0].user_name == "Ana"
    assert (events[0].date, events[0].time) == ("2024-01-10", "09:00:00")
    assert events[1].user_name == "Unknown (ID: 42)"
    assert events[1].event == "Check Out"
    assert conn.released


def test_connect_failure_is_reported_as_unreachable(monkeypatch):
    _install(monkeypatch, error=ZKNetworkError("can't reach device (ping 10.0.0.6)"))

    with pytest.raises(TerminalUnreachable) as excinfo:
        ZKEventSource().fetch_events("10.0.0.6", 4370)

    assert excinfo.value.address == "10.0.0.6"
    assert "can't reach device" in str(excinfo.value)
