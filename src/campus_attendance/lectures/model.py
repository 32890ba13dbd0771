from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True)
class Lecture:
    """Domain entity: a scheduled lecture with its attendance challenge.

    `attendance_answer` is stored normalized (trimmed, lower-cased).
    """

    lecture_id: int
    course_name: str
    course_code: str
    lecturer_id: int
    lecture_date: date
    start_time: time
    end_time: time
    location: str
    attendance_question: str
    attendance_answer: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewLecture:
    """Validated input for creating a lecture."""

    course_name: str
    course_code: str
    lecture_date: date
    start_time: time
    end_time: time
    location: str
    attendance_question: str
    attendance_answer: str
