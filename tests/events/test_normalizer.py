from __future__ import annotations

from datetime import date, time

import pytest

from src.attendance_sync.attendance_sync.core.exceptions import MalformedEvent
from src.attendance_sync.attendance_sync.events.model import RawEvent
from src.attendance_sync.attendance_sync.events.normalizer import normalize_event, normalize_events


def _raw(day: str = "2024-01-10", at: str = "09:00:00", user_id: int = 7) -> RawEvent:
    return RawEvent(
        user_id=user_id,
        user_name="Ana",
        date=day,
        time=at,
        status=0,
        punch=0,
        timestamp=f"{day}T{at}",
    )


def test_normalize_converts_time_to_second_offset():
    ev = normalize_event(_raw(at="09:00:05"), sequence=3)

    assert ev.work_date == date(2024, 1, 10)
    assert ev.time_of_day == time(9, 0, 5)
    assert ev.seconds == 9 * 3600 + 5
    assert ev.sequence == 3


def test_midnight_is_offset_zero():
    assert normalize_event(_raw(at="00:00:00")).seconds == 0


@pytest.mark.parametrize("bad_time", ["", "9am", "25:00:00", "12:60:00", "12:00"])
def test_unparseable_time_is_rejected(bad_time):
    with pytest.raises(MalformedEvent):
        normalize_event(_raw(at=bad_time))


def test_unparseable_date_is_rejected():
    with pytest.raises(MalformedEvent):
        normalize_event(_raw(day="2024-13-01"))


def test_batch_drops_malformed_events_and_keeps_going():
    batch = normalize_events([_raw(at="09:00:00"), _raw(at="not-a-time"), _raw(at="17:00:00")])

    assert [e.seconds for e in batch.events] == [9 * 3600, 17 * 3600]
    assert [e.sequence for e in batch.events] == [0, 2]
    assert len(batch.warnings) == 1
    assert "not-a-time" in batch.warnings[0]


def test_event_label_comes_from_status_code():
    assert _raw().event == "Check In"
    assert RawEvent(1, "A", "2024-01-10", "09:00:00", 5, 0, "").event == "OT Out"
    assert RawEvent(1, "A", "2024-01-10", "09:00:00", 42, 0, "").event == "Unknown"
