from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_DEVICE_PORT, UNKNOWN_HARDWARE_ADDRESS


@dataclass(frozen=True)
class Terminal:
    """A biometric attendance terminal.

    Identity is the device serial once known, otherwise the network address.
    """

    network_address: str
    hardware_address: str = UNKNOWN_HARDWARE_ADDRESS
    open_ports: tuple[int, ...] = field(default_factory=tuple)
    stable_serial: Optional[str] = None
    display_name: Optional[str] = None
    custom_name: Optional[str] = None
    firmware_version: Optional[str] = None
    last_synced_at: Optional[datetime] = None

    @property
    def identity_key(self) -> str:
        return self.stable_serial or self.network_address

    @property
    def designated_port(self) -> int:
        if DEFAULT_DEVICE_PORT in self.open_ports:
            return DEFAULT_DEVICE_PORT
        if self.open_ports:
            return self.open_ports[0]
        return DEFAULT_DEVICE_PORT

    @property
    def label(self) -> str:
        return self.custom_name or self.display_name or self.network_address

    def to_dict(self) -> dict[str, Any]:
        return {
            "network_address": self.network_address,
            "hardware_address": self.hardware_address,
            "open_ports": list(self.open_ports),
            "stable_serial": self.stable_serial,
            "display_name": self.display_name,
            "custom_name": self.custom_name,
            "firmware_version": self.firmware_version,
            "last_synced_at": self.last_synced_at.isoformat() if self.last_synced_at else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Terminal":
        synced = data.get("last_synced_at")
        return cls(
            network_address=str(data["network_address"]),
            hardware_address=str(data.get("hardware_address") or UNKNOWN_HARDWARE_ADDRESS),
            open_ports=tuple(int(p) for p in data.get("open_ports") or ()),
            stable_serial=data.get("stable_serial") or None,
            display_name=data.get("display_name") or None,
            custom_name=data.get("custom_name") or None,
            firmware_version=data.get("firmware_version") or None,
            last_synced_at=datetime.fromisoformat(synced) if synced else None,
        )


@dataclass(frozen=True)
class TerminalDescriptor:
    """What a terminal says about itself when read by an event source."""

    stable_serial: Optional[str] = None
    display_name: Optional[str] = None
    firmware_version: Optional[str] = None
