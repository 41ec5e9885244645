from __future__ import annotations

import copy
from typing import Any, Optional, Sequence

from .repository import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store used by tests and `STORE_BACKEND=memory`."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self, prefix: str = "") -> Sequence[str]:
        return sorted(k for k in self._data if k.startswith(prefix))
