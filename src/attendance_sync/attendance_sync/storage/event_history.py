from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..events.model import RawEvent
from .repository import KeyValueStore

logger = logging.getLogger(__name__)

EVENTS_KEY_PREFIX = "events:"


def _events_key(identity_key: str) -> str:
    return f"{EVENTS_KEY_PREFIX}{identity_key}"


class EventHistoryRepository:
    """Per-terminal punch history, keyed by the terminal's identity key."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def load(self, identity_key: str) -> list[RawEvent]:
        rows = self._store.get(_events_key(identity_key), []) or []
        return [RawEvent.from_dict(r) for r in rows]

    def load_many(self, identity_keys: Iterable[str]) -> list[RawEvent]:
        events: list[RawEvent] = []
        for key in identity_keys:
            events.extend(self.load(key))
        return events

    def merge(self, identity_key: str, events: Sequence[RawEvent]) -> int:
        """Add events not yet stored (same user and timestamp); returns the number added."""
        existing = self.load(identity_key)
        seen = {e.history_key for e in existing}
        added = 0
        for ev in events:
            if ev.history_key in seen:
                continue
            existing.append(ev)
            seen.add(ev.history_key)
            added += 1
        if added or not existing:
            self._store.set(_events_key(identity_key), [e.to_dict() for e in existing])
        logger.info("Stored %d new punch(es) for %s (%d total)", added, identity_key, len(existing))
        return added

    def move(self, old_key: str, new_key: str) -> None:
        if old_key == new_key:
            return
        moved = self.load(old_key)
        if moved:
            self.merge(new_key, moved)
        self._store.delete(_events_key(old_key))

    def delete(self, identity_key: str) -> bool:
        return self._store.delete(_events_key(identity_key))

    def identity_keys(self) -> list[str]:
        return [k[len(EVENTS_KEY_PREFIX):] for k in self._store.keys(EVENTS_KEY_PREFIX)]
