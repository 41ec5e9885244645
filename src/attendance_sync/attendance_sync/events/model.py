from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, time
from typing import Any, Mapping

from ..core.enums import PunchStatus


@dataclass(frozen=True)
class RawEvent:
    """One physical punch as reported by a terminal.

    `date`, `time` and `timestamp` stay as the strings the terminal produced;
    they are only parsed by the normalizer.
    """

    user_id: int
    user_name: str
    date: str
    time: str
    status: int
    punch: int
    timestamp: str

    @property
    def event(self) -> str:
        return PunchStatus.label_for(self.status)

    @property
    def history_key(self) -> tuple[int, str]:
        return (self.user_id, self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawEvent":
        return cls(
            user_id=int(data["user_id"]),
            user_name=str(data.get("user_name") or ""),
            date=str(data.get("date") or ""),
            time=str(data.get("time") or ""),
            status=int(data.get("status") or 0),
            punch=int(data.get("punch") or 0),
            timestamp=str(data.get("timestamp") or ""),
        )


@dataclass(frozen=True)
class NormalizedEvent:
    """Canonical punch used for arithmetic (seconds since midnight)."""

    user_id: int
    user_name: str
    work_date: date
    time_of_day: time
    seconds: int
    sequence: int
