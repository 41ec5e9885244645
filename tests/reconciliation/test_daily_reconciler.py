from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

import pytest

from src.attendance_sync.attendance_sync.core.enums import LastPunch
from src.attendance_sync.attendance_sync.core.exceptions import ValidationError
from src.attendance_sync.attendance_sync.events.model import RawEvent
from src.attendance_sync.attendance_sync.reconciliation.model import summary_to_dict
from src.attendance_sync.attendance_sync.reconciliation.service import DailyReconciler

NOW = datetime(2024, 1, 12, 15, 0, 0)


def _raw(user_id: int, day: str, at: str, name: str = "") -> RawEvent:
    return RawEvent(
        user_id=user_id,
        user_name=name or f"User {user_id}",
        date=day,
        time=at,
        status=0,
        punch=0,
        timestamp=f"{day}T{at}",
    )


def test_scenario_duplicate_tap_and_full_day():
    events = [
        _raw(7, "2024-01-10", "09:00:00"),
        _raw(7, "2024-01-10", "09:00:05"),
        _raw(7, "2024-01-10", "17:30:00"),
    ]

    result = DailyReconciler(window_seconds=50).reconcile(events, now=NOW)

    assert len(result.summaries) == 1
    s = result.summaries[0]
    assert s.first_punch == time(9, 0, 0)
    assert s.last_punch == time(17, 30, 0)
    assert s.punch_count == 3
    assert s.worked_duration == timedelta(hours=8, minutes=30)
    assert len(s.intervals) == 1


def test_empty_input_gives_empty_output():
    result = DailyReconciler().reconcile([], now=NOW)

    assert result.summaries == []
    assert result.warnings == []


def test_multiple_pairs_are_summed():
    events = [
        _raw(1, "2024-01-10", "08:00:00"),
        _raw(1, "2024-01-10", "12:00:00"),
        _raw(1, "2024-01-10", "13:00:00"),
        _raw(1, "2024-01-10", "17:15:00"),
    ]

    s = DailyReconciler().reconcile(events, now=NOW).summaries[0]

    assert s.worked_duration == timedelta(hours=8, minutes=15)
    assert [i.check_out for i in s.intervals] == [time(12, 0), time(17, 15)]
    assert s.last_punch == time(17, 15)


def test_unsorted_input_is_ordered_by_time_of_day():
    events = [_raw(1, "2024-01-10", "17:00:00"), _raw(1, "2024-01-10", "09:00:00")]

    s = DailyReconciler().reconcile(events, now=NOW).summaries[0]

    assert s.first_punch == time(9, 0)
    assert s.worked_duration == timedelta(hours=8)


def test_odd_count_on_past_day_is_unresolved_and_adds_nothing():
    events = [
        _raw(1, "2024-01-10", "08:00:00"),
        _raw(1, "2024-01-10", "12:00:00"),
        _raw(1, "2024-01-10", "13:00:00"),
    ]

    s = DailyReconciler().reconcile(events, now=NOW).summaries[0]

    assert s.last_punch is LastPunch.UNKNOWN
    assert s.last_punch_time is None
    assert s.worked_duration == timedelta(hours=4)
    assert s.intervals[-1].check_out is None


def test_odd_count_today_is_ongoing_and_counts_live_time():
    events = [_raw(1, "2024-01-12", "09:00:00")]

    s = DailyReconciler().reconcile(events, now=NOW).summaries[0]

    assert s.last_punch is LastPunch.ONGOING
    assert s.is_ongoing
    assert s.worked_duration == timedelta(hours=6)


def test_ongoing_punch_later_than_now_adds_nothing():
    events = [_raw(1, "2024-01-12", "16:00:00")]

    s = DailyReconciler().reconcile(events, now=NOW).summaries[0]

    assert s.last_punch is LastPunch.ONGOING
    assert s.worked_duration == timedelta(0)


def test_single_event_on_past_day():
    s = DailyReconciler().reconcile([_raw(1, "2024-01-11", "09:00:00")], now=NOW).summaries[0]

    assert s.first_punch == time(9, 0)
    assert s.last_punch is LastPunch.UNKNOWN
    assert s.worked_duration == timedelta(0)
    assert s.punch_count == 1


def test_all_duplicates_collapse_to_single_punch_but_count_raw_taps():
    events = [_raw(1, "2024-01-10", t) for t in ("09:00:00", "09:00:10", "09:00:20", "09:00:30")]

    s = DailyReconciler().reconcile(events, now=NOW).summaries[0]

    assert s.punch_count == 4
    assert len(s.intervals) == 1
    assert s.last_punch is LastPunch.UNKNOWN


def test_pair_count_is_ceil_half_of_kept_and_first_punch_is_minimum():
    times = ["07:00:00", "07:00:30", "11:00:00", "11:30:00", "15:00:00"]
    events = [_raw(1, "2024-01-10", t) for t in times]

    s = DailyReconciler(window_seconds=50).reconcile(events, now=NOW).summaries[0]

    kept = 4
    assert len(s.intervals) == math.ceil(kept / 2)
    assert s.first_punch == time(7, 0)
    assert s.worked_duration >= timedelta(0)


def test_groups_by_user_and_date_and_sorts_by_date_desc_then_name():
    events = [
        _raw(2, "2024-01-10", "09:00:00", name="Zed"),
        _raw(1, "2024-01-10", "09:00:00", name="Amy"),
        _raw(1, "2024-01-11", "09:00:00", name="Amy"),
        _raw(3, "2024-01-11", "09:00:00", name="Bob"),
    ]

    summaries = DailyReconciler().reconcile(events, now=NOW).summaries

    assert [(s.date, s.user_name) for s in summaries] == [
        (date(2024, 1, 11), "Amy"),
        (date(2024, 1, 11), "Bob"),
        (date(2024, 1, 10), "Amy"),
        (date(2024, 1, 10), "Zed"),
    ]


def test_malformed_events_are_dropped_with_a_warning():
    events = [
        _raw(1, "2024-01-10", "09:00:00"),
        _raw(1, "2024-01-10", "99:99:99"),
        _raw(1, "2024-01-10", "17:00:00"),
    ]

    result = DailyReconciler().reconcile(events, now=NOW)

    assert len(result.warnings) == 1
    assert result.summaries[0].worked_duration == timedelta(hours=8)
    assert result.summaries[0].punch_count == 2


def test_custom_window():
    events = [_raw(1, "2024-01-10", "09:00:00"), _raw(1, "2024-01-10", "09:01:30")]

    s = DailyReconciler(window_seconds=120).reconcile(events, now=NOW).summaries[0]

    assert len(s.intervals) == 1
    assert s.intervals[0].check_out is None


def test_negative_window_is_rejected():
    with pytest.raises(ValidationError):
        DailyReconciler(window_seconds=-1)


def test_summary_dict_leaves_open_interval_without_check_out():
    events = [
        _raw(1, "2024-01-10", "08:00:00"),
        _raw(1, "2024-01-10", "12:00:00"),
        _raw(1, "2024-01-10", "13:00:00"),
    ]

    s = DailyReconciler().reconcile(events, now=NOW).summaries[0]
    data = summary_to_dict(s)

    assert [i.is_complete for i in s.intervals] == [True, False]
    assert data["intervals"] == [
        {"check_in": "08:00:00", "check_out": "12:00:00"},
        {"check_in": "13:00:00", "check_out": None},
    ]
    assert data["last_punch"] == "unknown"
