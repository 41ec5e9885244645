from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import requests

from ..core.constants import (
    BULK_ATTENDANCE_PATH,
    DEFAULT_SYNC_API_URL,
    DEFAULT_SYNC_TIMEOUT_SECONDS,
    VERIFY_API_KEY_PATH,
)
from ..core.exceptions import InvalidCredential, SyncTransportError
from .endpoint import SyncEndpoint
from .model import ApiKeyInfo, AttendanceRecordPayload, SyncOutcome

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = (401, 403)


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class HttpSyncEndpoint(SyncEndpoint):
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_SYNC_API_URL,
        timeout: float = DEFAULT_SYNC_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = (base_url or DEFAULT_SYNC_API_URL).rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _post(self, path: str, api_key: str, payload: Any = None) -> requests.Response:
        url = f"{self._base_url}{path}"
        try:
            return self._session.post(
                url,
                json=payload,
                headers={"Authorization": f"Api-Key {api_key}"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise SyncTransportError(f"Connection failed: {e}") from e

    @staticmethod
    def _error_text(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or "Unknown error"
        if isinstance(data, dict) and isinstance(data.get("error"), str):
            return data["error"]
        return response.text or "Unknown error"

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.ok:
            return
        text = self._error_text(response)
        if response.status_code in AUTH_FAILURE_STATUSES:
            raise InvalidCredential(text)
        raise SyncTransportError(f"API Error ({response.status_code}): {text}", status_code=response.status_code)

    def push(self, api_key: str, records: Sequence[AttendanceRecordPayload]) -> SyncOutcome:
        logger.info("Bulk syncing %d record(s) to %s", len(records), self._base_url)
        response = self._post(BULK_ATTENDANCE_PATH, api_key, [r.to_dict() for r in records])
        self._raise_for_status(response)
        try:
            data = response.json()
        except ValueError as e:
            raise SyncTransportError(f"Failed to parse response: {e}", status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise SyncTransportError("Unexpected response body", status_code=response.status_code)

        outcome = SyncOutcome(
            accepted_count=_as_int(data.get("created_count")) + _as_int(data.get("updated_count")),
            skipped_count=_as_int(data.get("skipped_count")),
            failed_count=_as_int(data.get("failed_count")),
            errors=[e for e in data.get("errors") or [] if isinstance(e, str)],
        )
        logger.info(
            "Bulk sync complete: accepted=%d, skipped=%d, failed=%d",
            outcome.accepted_count, outcome.skipped_count, outcome.failed_count,
        )
        return outcome

    def verify(self, api_key: str) -> ApiKeyInfo:
        response = self._post(VERIFY_API_KEY_PATH, api_key)
        self._raise_for_status(response)
        try:
            data = response.json()
        except ValueError as e:
            raise SyncTransportError(f"Failed to parse response: {e}", status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise SyncTransportError("Unexpected response body", status_code=response.status_code)
        return ApiKeyInfo.from_json(data)
