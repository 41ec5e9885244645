from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_DEDUP_WINDOW_SECONDS
from ..core.exceptions import ValidationError
from ..events.model import NormalizedEvent, RawEvent
from ..events.normalizer import normalize_events
from .dedup import suppress_duplicates
from .model import DailySummary, ReconciliationResult
from .pairing.alternating import AlternatingPairing
from .pairing.base import PairingPolicy

logger = logging.getLogger(__name__)


class DailyReconciler:
    """Use case: raw punches -> one DailySummary per (user, date)."""

    def __init__(
        self,
        *,
        window_seconds: int = DEFAULT_DEDUP_WINDOW_SECONDS,
        pairing: Optional[PairingPolicy] = None,
    ):
        if int(window_seconds) < 0:
            raise ValidationError("Duplicate-suppression window cannot be negative")
        self._window = int(window_seconds)
        self._pairing = pairing or AlternatingPairing()

    @property
    def window_seconds(self) -> int:
        return self._window

    def reconcile(self, raw_events: Iterable[RawEvent], *, now: datetime | None = None) -> ReconciliationResult:
        now = now or now_local()
        batch = normalize_events(raw_events)

        groups: dict[tuple[int, date], list[NormalizedEvent]] = defaultdict(list)
        for ev in batch.events:
            groups[(ev.user_id, ev.work_date)].append(ev)

        summaries = [self._summarize(events, now=now) for events in groups.values()]
        summaries.sort(key=lambda s: (s.user_name, s.user_id))
        summaries.sort(key=lambda s: s.date, reverse=True)

        if batch.warnings:
            logger.warning("Reconciled %d day(s); dropped %d malformed punch(es)", len(summaries), len(batch.warnings))
        return ReconciliationResult(summaries=summaries, warnings=list(batch.warnings))

    def _summarize(self, events: list[NormalizedEvent], *, now: datetime) -> DailySummary:
        ordered = sorted(events, key=lambda e: (e.seconds, e.sequence))
        kept = suppress_duplicates(ordered, self._window)
        first = kept[0]
        decision = self._pairing.pair(kept, work_date=first.work_date, now=now)

        return DailySummary(
            user_id=first.user_id,
            user_name=self._display_name(ordered),
            date=first.work_date,
            first_punch=first.time_of_day,
            last_punch=decision.last_punch,
            punch_count=len(events),
            worked_duration=timedelta(seconds=decision.worked_seconds),
            intervals=decision.intervals,
        )

    @staticmethod
    def _display_name(events: list[NormalizedEvent]) -> str:
        # Terminals may report an empty name on some punches.
        for ev in events:
            if ev.user_name:
                return ev.user_name
        return ""
