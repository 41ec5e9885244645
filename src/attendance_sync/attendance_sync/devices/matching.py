from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence

from ..core.constants import UNKNOWN_HARDWARE_ADDRESS
from ..core.enums import MatchKind
from .model import Terminal


@dataclass(frozen=True)
class Match:
    kind: MatchKind
    index: Optional[int] = None

    @property
    def matched(self) -> bool:
        return self.kind is not MatchKind.UNMATCHED


UNMATCHED = Match(kind=MatchKind.UNMATCHED)


def match_by_serial(serial: Optional[str], registry: Sequence[Terminal]) -> Match:
    if not serial:
        return UNMATCHED
    for i, t in enumerate(registry):
        if t.stable_serial == serial:
            return Match(kind=MatchKind.BY_SERIAL, index=i)
    return UNMATCHED


def match_by_address(address: str, registry: Sequence[Terminal]) -> Match:
    """Only serial-less entries can be claimed by an address coincidence."""
    for i, t in enumerate(registry):
        if t.network_address == address and not t.stable_serial:
            return Match(kind=MatchKind.BY_ADDRESS, index=i)
    return UNMATCHED


def match_terminal(observed: Terminal, registry: Sequence[Terminal]) -> Match:
    match = match_by_serial(observed.stable_serial, registry)
    if match.matched:
        return match
    return match_by_address(observed.network_address, registry)


def merge_observed(existing: Terminal, observed: Terminal) -> Terminal:
    """Apply a fresh observation to a registry entry.

    The address and open ports follow the observation; descriptive fields
    are only filled when empty; custom name and sync stamp are kept.
    """
    hardware_address = existing.hardware_address
    if hardware_address in ("", UNKNOWN_HARDWARE_ADDRESS) and observed.hardware_address:
        hardware_address = observed.hardware_address

    return replace(
        existing,
        network_address=observed.network_address,
        hardware_address=hardware_address,
        open_ports=observed.open_ports or existing.open_ports,
        stable_serial=existing.stable_serial or observed.stable_serial,
        display_name=existing.display_name or observed.display_name,
        firmware_version=existing.firmware_version or observed.firmware_version,
    )
