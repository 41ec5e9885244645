from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Sequence, Union

from ...core.enums import LastPunch
from ...events.model import NormalizedEvent
from ..model import WorkInterval


@dataclass(frozen=True)
class PairingDecision:
    intervals: tuple[WorkInterval, ...]
    worked_seconds: int
    last_punch: Union[time, LastPunch]


class PairingPolicy(ABC):
    """Strategy Pattern: how kept punches of one day become work intervals."""

    @abstractmethod
    def pair(self, kept: Sequence[NormalizedEvent], *, work_date: date, now: datetime) -> PairingDecision:
        raise NotImplementedError
