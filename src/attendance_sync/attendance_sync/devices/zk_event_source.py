from __future__ import annotations

import logging
from typing import Any

from zk import ZK
from zk.exception import ZKError

from ..core.constants import DEFAULT_DEVICE_TIMEOUT_SECONDS
from ..core.exceptions import TerminalUnreachable
from ..events.model import RawEvent
from .sources import EventSource
from .model import TerminalDescriptor

logger = logging.getLogger(__name__)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip().strip("\x00")
    return text or None


class ZKEventSource(EventSource):
    """EventSource over the ZKTeco protocol (pyzk)."""

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_DEVICE_TIMEOUT_SECONDS,
        password: int = 0,
        force_udp: bool = False,
    ):
        self._timeout = int(timeout)
        self._password = int(password)
        self._force_udp = force_udp

    def fetch_events(self, address: str, port: int) -> tuple[TerminalDescriptor, list[RawEvent]]:
        logger.info("Connecting to %s:%d", address, port)
        zk = ZK(address, port=int(port), timeout=self._timeout, password=self._password, force_udp=self._force_udp, ommit_ping=True)
        try:
            conn = zk.connect()
        except (ZKError, OSError) as e:
            raise TerminalUnreachable(address, port, str(e)) from e

        try:
            conn.disable_device()
            descriptor = TerminalDescriptor(
                stable_serial=_optional_text(conn.get_serialnumber()),
                display_name=_optional_text(conn.get_device_name()),
                firmware_version=_optional_text(conn.get_firmware_version()),
            )
            names = self._user_names(conn)
            attendances = conn.get_attendance() or []
            events = [self._to_raw_event(a, names) for a in attendances]
        except (ZKError, OSError) as e:
            raise TerminalUnreachable(address, port, str(e)) from e
        finally:
            try:
                conn.enable_device()
                conn.disconnect()
            except (ZKError, OSError) as e:
                logger.warning("Failed to release %s:%d cleanly: %s", address, port, e)

        logger.info("Fetched %d punch(es) from %s (serial %s)", len(events), address, descriptor.stable_serial or "?")
        return descriptor, events

    @staticmethod
    def _user_names(conn) -> dict[str, str]:
        try:
            users = conn.get_users() or []
        except ZKError as e:
            logger.warning("Failed to read users: %s (names will be missing)", e)
            return {}
        names: dict[str, str] = {}
        for u in users:
            if u.user_id:
                names[str(u.user_id)] = u.name
            names.setdefault(str(u.uid), u.name)
        return names

    @staticmethod
    def _to_raw_event(att, names: dict[str, str]) -> RawEvent:
        device_user = str(att.user_id or "").strip()
        uid = str(getattr(att, "uid", "") or "")
        if device_user:
            user_name = names.get(device_user) or names.get(uid) or f"Unknown (ID: {device_user})"
        else:
            user_name = names.get(uid) or f"Unknown (UID: {uid})"

        try:
            user_id = int(device_user)
        except ValueError:
            user_id = int(uid or 0)

        ts = att.timestamp
        return RawEvent(
            user_id=user_id,
            user_name=user_name,
            date=ts.strftime("%Y-%m-%d"),
            time=ts.strftime("%H:%M:%S"),
            status=int(att.status or 0),
            punch=int(att.punch or 0),
            timestamp=ts.isoformat(),
        )
