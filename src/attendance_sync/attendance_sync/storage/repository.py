from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence


class KeyValueStore(Protocol):
    """Persistent store for JSON-serialisable values.

    Implementations flush on every `set`/`delete` and raise StoreUnavailable
    when the backend cannot be reached.
    """

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def keys(self, prefix: str = "") -> Sequence[str]:
        raise NotImplementedError
