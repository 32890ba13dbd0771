from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

import pytest

from campus_attendance.core.enums import LifecycleState
from campus_attendance.lectures.lifecycle import evaluate, lecture_window, state_label


@pytest.mark.parametrize(
    "hour, minute, second, expected",
    [
        (8, 59, 59, LifecycleState.NOT_STARTED),
        (9, 0, 0, LifecycleState.LIVE),
        (9, 30, 0, LifecycleState.LIVE),
        (10, 0, 0, LifecycleState.LIVE),
        (10, 0, 1, LifecycleState.ENDED),
    ],
)
def test_window_boundaries_are_inclusive(lecture, at, hour, minute, second, expected):
    assert evaluate(lecture, at(hour, minute, second)) == expected


def test_other_days_are_judged_by_date(make_lecture):
    lec = make_lecture()
    day_before = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
    day_after = datetime(2026, 3, 3, 9, 30, tzinfo=timezone.utc)

    assert evaluate(lec, day_before) == LifecycleState.NOT_STARTED
    assert evaluate(lec, day_after) == LifecycleState.ENDED


def test_state_never_moves_backwards(lecture, at):
    order = [LifecycleState.NOT_STARTED, LifecycleState.LIVE, LifecycleState.ENDED]
    now = at(8, 0)
    seen = []
    while now <= at(11, 0):
        seen.append(order.index(evaluate(lecture, now)))
        now += timedelta(minutes=7)

    assert seen == sorted(seen)
    assert set(seen) == {0, 1, 2}


def test_evaluation_has_no_side_effects(lecture, at):
    first = evaluate(lecture, at(9, 15))
    assert evaluate(lecture, at(9, 15)) == first
    assert lecture.start_time == time(9, 0)


def test_naive_now_uses_naive_window(lecture):
    assert evaluate(lecture, datetime(2026, 3, 2, 9, 30)) == LifecycleState.LIVE


def test_explicit_zone_shifts_the_window(lecture):
    # 09:30 at UTC+7 is 02:30 UTC, well before an 09:00 UTC lecture
    local_now = datetime(2026, 3, 2, 9, 30, tzinfo=timezone(timedelta(hours=7)))
    assert evaluate(lecture, local_now) == LifecycleState.LIVE
    assert evaluate(lecture, local_now, tz=timezone.utc) == LifecycleState.NOT_STARTED


def test_window_carries_the_zone(lecture):
    start, end = lecture_window(lecture, timezone.utc)
    assert start == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    assert end - start == timedelta(hours=1)


def test_labels():
    assert state_label(LifecycleState.NOT_STARTED) == "Upcoming"
    assert state_label(LifecycleState.LIVE) == "Live Now"
    assert state_label(LifecycleState.ENDED) == "Ended"
