from __future__ import annotations

import threading
from typing import Optional, Protocol

from ..events.model import RawEvent
from .model import Terminal, TerminalDescriptor


class EventSource(Protocol):
    """Reads the punch log of one terminal.

    Raises TerminalUnreachable on connection, timeout or protocol failures.
    """

    def fetch_events(self, address: str, port: int) -> tuple[TerminalDescriptor, list[RawEvent]]:
        raise NotImplementedError


class DiscoverySource(Protocol):
    """Finds terminals on the network. Raises DiscoveryCancelled instead of returning a partial list."""

    def discover(self, network: Optional[str] = None, *, cancel: Optional[threading.Event] = None) -> list[Terminal]:
        raise NotImplementedError
