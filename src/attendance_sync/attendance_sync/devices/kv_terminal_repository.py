from __future__ import annotations

from typing import Sequence

from ..storage.repository import KeyValueStore
from .model import Terminal
from .repository import TerminalRepository

TERMINALS_KEY = "terminals"
SELECTION_KEY = "selection"


class KVTerminalRepository(TerminalRepository):
    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_all(self) -> Sequence[Terminal]:
        return [Terminal.from_dict(r) for r in self._store.get(TERMINALS_KEY, []) or []]

    def save_all(self, terminals: Sequence[Terminal]) -> None:
        self._store.set(TERMINALS_KEY, [t.to_dict() for t in terminals])

    def get_selection(self) -> Sequence[str]:
        return list(self._store.get(SELECTION_KEY, []) or [])

    def save_selection(self, identity_keys: Sequence[str]) -> None:
        self._store.set(SELECTION_KEY, list(identity_keys))
