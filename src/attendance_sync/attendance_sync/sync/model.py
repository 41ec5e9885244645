from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_time
from ..core.enums import LastPunch
from ..events.model import RawEvent
from ..reconciliation.model import DailySummary


@dataclass(frozen=True)
class SyncOutcome:
    """Per-record result of one push. Non-zero skipped/failed counts mean partial failure."""

    accepted_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed_count == 0 and self.skipped_count == 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["success"] = self.success
        return data


@dataclass(frozen=True)
class TerminalError:
    identity_key: str
    address: str
    message: str


@dataclass(frozen=True)
class FetchReport:
    summaries: list[DailySummary]
    events: list[RawEvent]
    errors: list[TerminalError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    fetched: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def partial(self) -> bool:
        return bool(self.errors) or self.cancelled


@dataclass(frozen=True)
class ApiKeyInfo:
    valid: bool
    app_name: Optional[str] = None
    app_identifier: Optional[str] = None
    platform: Optional[str] = None
    intent: Optional[str] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ApiKeyInfo":
        return cls(
            valid=bool(data.get("valid", False)),
            app_name=data.get("app_name"),
            app_identifier=data.get("app_identifier"),
            platform=data.get("platform"),
            intent=data.get("intent"),
        )


@dataclass(frozen=True)
class AttendanceRecordPayload:
    """Record shape accepted by the HR bulk attendance endpoint."""

    faculty: int
    date: str
    check_in_time: Optional[str]
    check_out_time: Optional[str]
    is_present: bool = True
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def to_payload(summary: DailySummary, employee_map: Optional[Mapping[int, int]] = None) -> AttendanceRecordPayload:
    """An open or unresolved session is never reported with a fixed check-out."""
    notes = None
    if summary.last_punch is LastPunch.ONGOING:
        notes = "Check-out pending (session in progress)"
    elif summary.last_punch is LastPunch.UNKNOWN:
        notes = "Missing check-out"

    check_out = summary.last_punch_time
    return AttendanceRecordPayload(
        faculty=int((employee_map or {}).get(summary.user_id, summary.user_id)),
        date=summary.date.isoformat(),
        check_in_time=format_time(summary.first_punch),
        check_out_time=format_time(check_out) if check_out is not None else None,
        is_present=True,
        notes=notes,
    )


@dataclass(frozen=True)
class SyncRun:
    report: FetchReport
    outcome: SyncOutcome
