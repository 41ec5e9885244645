from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..common.datetime_utils import parse_iso_date, parse_time_of_day, seconds_of_day
from ..core.exceptions import MalformedEvent
from .model import NormalizedEvent, RawEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedBatch:
    events: list[NormalizedEvent]
    warnings: list[str] = field(default_factory=list)


def normalize_event(raw: RawEvent, *, sequence: int = 0) -> NormalizedEvent:
    """Validate a raw punch and convert its time-of-day to a second offset.

    Raises MalformedEvent when the date or time cannot be parsed.
    """
    try:
        work_date = parse_iso_date(raw.date.strip())
    except (AttributeError, ValueError):
        raise MalformedEvent(
            f"event #{sequence} for user {raw.user_id}: invalid date {raw.date!r}", sequence=sequence
        ) from None
    try:
        time_of_day = parse_time_of_day(raw.time.strip())
    except (AttributeError, ValueError):
        raise MalformedEvent(
            f"event #{sequence} for user {raw.user_id}: invalid time {raw.time!r}", sequence=sequence
        ) from None

    return NormalizedEvent(
        user_id=int(raw.user_id),
        user_name=raw.user_name,
        work_date=work_date,
        time_of_day=time_of_day,
        seconds=seconds_of_day(time_of_day),
        sequence=sequence,
    )


def normalize_events(raw_events: Iterable[RawEvent]) -> NormalizedBatch:
    """Normalize a batch, dropping malformed events instead of failing."""
    events: list[NormalizedEvent] = []
    warnings: list[str] = []
    for sequence, raw in enumerate(raw_events):
        try:
            events.append(normalize_event(raw, sequence=sequence))
        except MalformedEvent as e:
            logger.warning("Dropping malformed punch: %s", e)
            warnings.append(str(e))
    return NormalizedBatch(events=events, warnings=warnings)
