from __future__ import annotations

from typing import Protocol, Sequence

from .model import Terminal


class TerminalRepository(Protocol):
    """Registry persistence. Services replace the whole list in one write."""

    def list_all(self) -> Sequence[Terminal]:
        raise NotImplementedError

    def save_all(self, terminals: Sequence[Terminal]) -> None:
        raise NotImplementedError

    def get_selection(self) -> Sequence[str]:
        raise NotImplementedError

    def save_selection(self, identity_keys: Sequence[str]) -> None:
        raise NotImplementedError
