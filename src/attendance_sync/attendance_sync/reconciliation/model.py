from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time, timedelta
from typing import Optional, Union

from ..core.enums import LastPunch


@dataclass(frozen=True)
class WorkInterval:
    """A check-in/check-out pair. `check_out` is None for a dangling punch."""

    check_in: time
    check_out: Optional[time] = None

    @property
    def is_complete(self) -> bool:
        return self.check_out is not None


@dataclass(frozen=True)
class DailySummary:
    """Derived read-model: one employee's attendance for one day."""

    user_id: int
    user_name: str
    date: date
    first_punch: time
    last_punch: Union[time, LastPunch]
    punch_count: int
    worked_duration: timedelta
    intervals: tuple[WorkInterval, ...] = ()

    @property
    def is_ongoing(self) -> bool:
        return self.last_punch is LastPunch.ONGOING

    @property
    def last_punch_time(self) -> Optional[time]:
        return self.last_punch if isinstance(self.last_punch, time) else None


@dataclass(frozen=True)
class ReconciliationResult:
    summaries: list[DailySummary]
    warnings: list[str] = field(default_factory=list)


def format_duration(value: timedelta) -> str:
    minutes = int(value.total_seconds()) // 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def summary_to_dict(s: DailySummary) -> dict:
    last = s.last_punch.value if isinstance(s.last_punch, LastPunch) else s.last_punch.strftime("%H:%M:%S")
    return {
        "user_id": s.user_id,
        "user_name": s.user_name,
        "date": s.date.strftime("%Y-%m-%d"),
        "first_punch": s.first_punch.strftime("%H:%M:%S"),
        "last_punch": last,
        "punch_count": s.punch_count,
        "worked_seconds": int(s.worked_duration.total_seconds()),
        "worked_hours": format_duration(s.worked_duration),
        "intervals": [
            {
                "check_in": i.check_in.strftime("%H:%M:%S"),
                "check_out": i.check_out.strftime("%H:%M:%S") if i.is_complete else None,
            }
            for i in s.intervals
        ],
    }
