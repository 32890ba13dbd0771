from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Enrollment:
    """A student's registration for one lecture. Unique per (lecture, student)."""

    enrollment_id: int
    lecture_id: int
    student_id: int
    enrolled_at: datetime
