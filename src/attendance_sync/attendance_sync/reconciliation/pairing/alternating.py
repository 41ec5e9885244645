from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ...common.datetime_utils import seconds_of_day
from ...core.enums import LastPunch
from ...events.model import NormalizedEvent
from ..model import WorkInterval
from .base import PairingDecision, PairingPolicy


class AlternatingPairing(PairingPolicy):
    """Kept punches alternate check-in, check-out (0-1, 2-3, ...).

    A dangling final punch is an open session when the day is today; on a
    past day it stays unresolved and adds no time.
    """

    def pair(self, kept: Sequence[NormalizedEvent], *, work_date: date, now: datetime) -> PairingDecision:
        intervals: list[WorkInterval] = []
        worked = 0

        for i in range(0, len(kept) - 1, 2):
            check_in, check_out = kept[i], kept[i + 1]
            worked += max(check_out.seconds - check_in.seconds, 0)
            intervals.append(WorkInterval(check_in=check_in.time_of_day, check_out=check_out.time_of_day))

        if len(kept) % 2 == 0:
            return PairingDecision(intervals=tuple(intervals), worked_seconds=worked, last_punch=kept[-1].time_of_day)

        dangling = kept[-1]
        intervals.append(WorkInterval(check_in=dangling.time_of_day))
        if work_date == now.date():
            elapsed = seconds_of_day(now.time()) - dangling.seconds
            if elapsed > 0:
                worked += elapsed
            return PairingDecision(intervals=tuple(intervals), worked_seconds=worked, last_punch=LastPunch.ONGOING)

        return PairingDecision(intervals=tuple(intervals), worked_seconds=worked, last_punch=LastPunch.UNKNOWN)
