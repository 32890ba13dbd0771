from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ParticipationStage, RejectionReason


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: the single attendance submission of a student for a lecture."""

    attendance_id: int
    lecture_id: int
    student_id: int
    student_answer: str
    is_correct: bool
    marked_at: datetime


@dataclass(frozen=True)
class RosterRow:
    """Read-model for the lecturer's attendance export."""

    student_id: int
    full_name: str
    email: str
    student_number: Optional[str]
    enrolled_at: datetime
    marked_at: Optional[datetime]
    student_answer: Optional[str]
    is_correct: Optional[bool]


@dataclass(frozen=True)
class Participation:
    """Where one student stands with one lecture."""

    lecture_id: int
    student_id: int
    is_enrolled: bool
    has_attended: bool

    @property
    def stage(self) -> ParticipationStage:
        if self.has_attended:
            return ParticipationStage.ATTENDED
        if self.is_enrolled:
            return ParticipationStage.ENROLLED
        return ParticipationStage.UNENROLLED


@dataclass(frozen=True)
class Verdict:
    is_correct: bool


@dataclass(frozen=True)
class Authorization:
    """Ok when `reason` is None, otherwise Rejected(reason)."""

    reason: Optional[RejectionReason] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class SubmissionResult:
    attendance_id: int
    is_correct: bool
    stage: ParticipationStage
