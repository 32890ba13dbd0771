"""Lecture session lifecycle.

A lecture is NOT_STARTED before its start instant, LIVE from start to end
(both inclusive) and ENDED afterwards. Both instants are built from the
lecture date in one time zone: the zone of `now` unless one is given.
The state is never stored; callers evaluate it again on every request.
"""
from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from ..core.enums import LifecycleState
from .model import Lecture

STATE_LABELS = {
    LifecycleState.NOT_STARTED: "Upcoming",
    LifecycleState.LIVE: "Live Now",
    LifecycleState.ENDED: "Ended",
}


def lecture_window(lecture: Lecture, tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
    start = datetime.combine(lecture.lecture_date, lecture.start_time, tzinfo=tz)
    end = datetime.combine(lecture.lecture_date, lecture.end_time, tzinfo=tz)
    return start, end


def evaluate(lecture: Lecture, now: datetime, *, tz: Optional[tzinfo] = None) -> LifecycleState:
    start, end = lecture_window(lecture, tz if tz is not None else now.tzinfo)
    if now < start:
        return LifecycleState.NOT_STARTED
    if now <= end:
        return LifecycleState.LIVE
    return LifecycleState.ENDED


def state_label(state: LifecycleState) -> str:
    return STATE_LABELS[state]
