from __future__ import annotations

from enum import Enum


class PunchStatus(int, Enum):
    """Status codes reported by the terminal for each punch."""

    CHECK_IN = 0
    CHECK_OUT = 1
    BREAK_OUT = 2
    BREAK_IN = 3
    OT_IN = 4
    OT_OUT = 5

    @classmethod
    def label_for(cls, code: int) -> str:
        try:
            member = cls(int(code))
        except ValueError:
            return "Unknown"
        return {
            cls.CHECK_IN: "Check In",
            cls.CHECK_OUT: "Check Out",
            cls.BREAK_OUT: "Break Out",
            cls.BREAK_IN: "Break In",
            cls.OT_IN: "OT In",
            cls.OT_OUT: "OT Out",
        }[member]


class LastPunch(str, Enum):
    """Sentinels used when a day has no resolvable last punch."""

    ONGOING = "ongoing"
    UNKNOWN = "unknown"


class MatchKind(str, Enum):
    """How an observed terminal was matched against the registry."""

    UNMATCHED = "UNMATCHED"
    BY_SERIAL = "BY_SERIAL"
    BY_ADDRESS = "BY_ADDRESS"


class StoreBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
