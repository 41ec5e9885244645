from __future__ import annotations

from typing import Protocol, Sequence

from .model import ApiKeyInfo, AttendanceRecordPayload, SyncOutcome


class SyncEndpoint(Protocol):
    """Remote HR attendance endpoint.

    Both calls raise InvalidCredential when the key is rejected and
    SyncTransportError when the request itself fails.
    """

    def push(self, api_key: str, records: Sequence[AttendanceRecordPayload]) -> SyncOutcome:
        raise NotImplementedError

    def verify(self, api_key: str) -> ApiKeyInfo:
        raise NotImplementedError
