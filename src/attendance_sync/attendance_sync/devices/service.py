from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_ip_address, require_port
from ..core.constants import DEFAULT_DEVICE_PORT
from ..core.enums import MatchKind
from ..core.exceptions import DuplicateAddress, TerminalNotFound, ValidationError
from ..storage.event_history import EventHistoryRepository
from .matching import match_by_serial, match_terminal, merge_observed
from .model import Terminal, TerminalDescriptor
from .repository import TerminalRepository
from .sources import DiscoverySource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeReport:
    inserted: list[Terminal]
    updated: list[Terminal]

    @property
    def changed(self) -> int:
        return len(self.inserted) + len(self.updated)


class DeviceRegistryService:
    """Use case: keep exactly one registry entry per physical terminal."""

    def __init__(self, terminals: TerminalRepository, history: EventHistoryRepository):
        self._terminals = terminals
        self._history = history

    def list_terminals(self) -> list[Terminal]:
        return list(self._terminals.list_all())

    def get(self, identity_key: str) -> Terminal:
        return self._find(self._terminals.list_all(), identity_key)

    def merge_discovered(self, observed: Iterable[Terminal]) -> MergeReport:
        """Merge a completed discovery into the registry with a single write."""
        registry = list(self._terminals.list_all())
        inserted: list[Terminal] = []
        updated: list[Terminal] = []

        for obs in observed:
            match = match_terminal(obs, registry)
            if match.kind is MatchKind.UNMATCHED:
                fresh = replace(obs, custom_name=None, last_synced_at=None)
                registry.append(fresh)
                inserted.append(fresh)
                continue
            merged = merge_observed(registry[match.index], obs)
            registry[match.index] = merged
            updated.append(merged)
            logger.debug("Matched %s to %s (%s)", obs.network_address, merged.identity_key, match.kind.value)

        if inserted or updated:
            self._terminals.save_all(registry)
        logger.info("Discovery merge: %d new, %d updated terminal(s)", len(inserted), len(updated))
        return MergeReport(inserted=inserted, updated=updated)

    def refresh_from_discovery(
        self,
        source: DiscoverySource,
        network: Optional[str] = None,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> MergeReport:
        # A cancelled scan raises before anything is merged.
        return self.merge_discovered(source.discover(network, cancel=cancel))

    def add_manual(self, address: str, port: int = DEFAULT_DEVICE_PORT) -> Terminal:
        address = require_ip_address(address)
        port = require_port(port)
        registry = list(self._terminals.list_all())
        if any(t.network_address == address for t in registry):
            raise DuplicateAddress(f"A terminal at {address} is already registered")

        terminal = Terminal(network_address=address, hardware_address="Manual Connection", open_ports=(port,))
        registry.append(terminal)
        self._terminals.save_all(registry)
        logger.info("Registered terminal %s:%d manually", address, port)
        return terminal

    def remove(self, identity_key: str, *, purge_history: bool = False) -> Terminal:
        registry = list(self._terminals.list_all())
        target = self._find(registry, identity_key)
        registry.remove(target)
        self._terminals.save_all(registry)

        selection = [k for k in self._terminals.get_selection() if k != identity_key]
        self._terminals.save_selection(selection)
        if purge_history:
            self._history.delete(identity_key)
        logger.info("Removed terminal %s", identity_key)
        return target

    def rename(self, identity_key: str, custom_name: Optional[str]) -> Terminal:
        registry = list(self._terminals.list_all())
        target = self._find(registry, identity_key)
        name = (custom_name or "").strip() or None
        renamed = replace(target, custom_name=name)
        registry[registry.index(target)] = renamed
        self._terminals.save_all(registry)
        return renamed

    def select(self, identity_keys: Sequence[str]) -> list[Terminal]:
        registry = list(self._terminals.list_all())
        keys: list[str] = []
        for key in identity_keys:
            self._find(registry, key)
            if key not in keys:
                keys.append(key)
        self._terminals.save_selection(keys)
        return [self._find(registry, k) for k in keys]

    def selected(self) -> list[Terminal]:
        registry = list(self._terminals.list_all())
        by_key = {t.identity_key: t for t in registry}
        return [by_key[k] for k in self._terminals.get_selection() if k in by_key]

    def record_fetch(
        self,
        identity_key: str,
        descriptor: TerminalDescriptor,
        *,
        synced_at: datetime | None = None,
    ) -> Terminal:
        """Fold what a terminal reported about itself back into its entry.

        When the terminal reveals a serial, its identity key changes; a second
        entry already holding that serial absorbs this one, and selection and
        stored history follow the new key.
        """
        synced_at = synced_at or now_local()
        registry = list(self._terminals.list_all())
        current = self._find(registry, identity_key)

        if current.stable_serial and descriptor.stable_serial and current.stable_serial != descriptor.stable_serial:
            logger.warning(
                "Terminal %s reported serial %s; keeping registered serial",
                current.network_address, descriptor.stable_serial,
            )

        observed = replace(
            current,
            stable_serial=descriptor.stable_serial,
            display_name=descriptor.display_name,
            firmware_version=descriptor.firmware_version,
        )
        updated = replace(merge_observed(current, observed), last_synced_at=synced_at)

        owner = match_by_serial(updated.stable_serial, [t for t in registry if t is not current])
        if owner.matched and not current.stable_serial:
            others = [t for t in registry if t is not current]
            holder = others[owner.index]
            updated = replace(
                merge_observed(holder, updated),
                custom_name=holder.custom_name or current.custom_name,
                last_synced_at=synced_at,
            )
            registry = [updated if t is holder else t for t in others]
            logger.info("Terminal %s is %s; merged duplicate entry", identity_key, updated.identity_key)
        else:
            registry[registry.index(current)] = updated

        self._terminals.save_all(registry)

        new_key = updated.identity_key
        if new_key != identity_key:
            selection: list[str] = []
            for k in self._terminals.get_selection():
                k = new_key if k == identity_key else k
                if k not in selection:
                    selection.append(k)
            self._terminals.save_selection(selection)
            self._history.move(identity_key, new_key)
        return updated

    @staticmethod
    def _find(registry: Sequence[Terminal], identity_key: str) -> Terminal:
        if not identity_key:
            raise ValidationError("Terminal key is required")
        for t in registry:
            if t.identity_key == identity_key:
                return t
        raise TerminalNotFound(f"No terminal with key {identity_key!r}")
