from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import Clock
from ..core.constants import DUPLICATE_ATTENDANCE_MESSAGE
from ..core.enums import AttendanceAction, LifecycleState, ParticipationStage, RejectionReason, Role
from ..core.exceptions import (
    AttendanceNotAllowedError,
    AuthorizationError,
    DuplicateAttendanceError,
    StoreError,
    ValidationError,
)
from ..enrollments.repository import EnrollmentRepository
from ..lectures.lifecycle import evaluate
from ..lectures.model import Lecture
from ..lectures.repository import LectureRepository
from .eligibility import eligibility
from .model import Participation, SubmissionResult
from .repository import AttendanceRepository
from .validator import authorize, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendancePrompt:
    lecture: Lecture
    state: LifecycleState
    action: AttendanceAction


class AttendanceService:
    """Use case: a student answers the attendance question while the lecture is live."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        enrollments: EnrollmentRepository,
        lectures: LectureRepository,
        clock: Clock,
    ):
        self._attendance = attendance
        self._enrollments = enrollments
        self._lectures = lectures
        self._clock = clock

    def get_lecture(self, lecture_id: int) -> Lecture:
        lecture = self._lectures.get_by_id(int(lecture_id))
        if not lecture:
            raise ValidationError("Lecture not found")
        return lecture

    def participation(self, *, lecture_id: int, student_id: int) -> Participation:
        enrollment = self._enrollments.get(lecture_id=int(lecture_id), student_id=int(student_id))
        record = self._attendance.get_for_student(lecture_id=int(lecture_id), student_id=int(student_id))
        return Participation(
            lecture_id=int(lecture_id),
            student_id=int(student_id),
            is_enrolled=enrollment is not None,
            has_attended=record is not None,
        )

    def prompt(self, *, student_id: int, lecture_id: int, now: Optional[datetime] = None) -> AttendancePrompt:
        """What the mark-attendance page should offer right now."""

        lecture = self.get_lecture(lecture_id)
        state = evaluate(lecture, now or self._clock.now())
        p = self.participation(lecture_id=lecture.lecture_id, student_id=student_id)
        return AttendancePrompt(lecture=lecture, state=state, action=eligibility(state, p.is_enrolled, p.has_attended))

    @staticmethod
    def _rejection(reason: RejectionReason, state: LifecycleState) -> Exception:
        if reason == RejectionReason.ALREADY_MARKED:
            return DuplicateAttendanceError(DUPLICATE_ATTENDANCE_MESSAGE)
        if reason == RejectionReason.NOT_ENROLLED:
            return AttendanceNotAllowedError(reason, "Enroll in this lecture before marking attendance")
        if state == LifecycleState.NOT_STARTED:
            return AttendanceNotAllowedError(reason, "Attendance is not available yet")
        return AttendanceNotAllowedError(reason, "Attendance for this lecture is closed")

    def submit(
        self,
        *,
        current_role: Role,
        student_id: int,
        lecture_id: int,
        answer: str,
        now: Optional[datetime] = None,
    ) -> SubmissionResult:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can mark attendance")

        # Checked before any store call.
        answer = (answer or "").strip()
        if not answer:
            raise ValidationError("Please enter an answer")

        lecture = self.get_lecture(lecture_id)
        now = now or self._clock.now()
        state = evaluate(lecture, now)
        participation = self.participation(lecture_id=lecture.lecture_id, student_id=student_id)

        decision = authorize(lecture, participation, state)
        if not decision.ok:
            logger.info(
                "Rejected attendance of student %s for lecture %s: %s",
                student_id,
                lecture.lecture_id,
                decision.reason.value,
            )
            raise self._rejection(decision.reason, state)

        verdict = validate(answer, lecture.attendance_answer)
        result = self._attendance.add(
            lecture_id=lecture.lecture_id,
            student_id=int(student_id),
            student_answer=answer,
            is_correct=verdict.is_correct,
            marked_at=now,
        )
        if result.is_duplicate:
            raise DuplicateAttendanceError(DUPLICATE_ATTENDANCE_MESSAGE)
        if not result.ok:
            raise StoreError("Failed to record attendance, please try again")

        logger.info(
            "Attendance recorded for student %s in lecture %s (correct=%s)",
            student_id,
            lecture.lecture_id,
            verdict.is_correct,
        )
        return SubmissionResult(
            attendance_id=int(result.value),
            is_correct=verdict.is_correct,
            stage=ParticipationStage.ATTENDED,
        )

    def roster_export_rows(self, *, current_role: Role, lecturer_id: int, lecture_id: int) -> list[dict]:
        if current_role != Role.LECTURER:
            raise AuthorizationError("You do not have permission")

        lecture = self.get_lecture(lecture_id)
        if lecture.lecturer_id != int(lecturer_id):
            raise AuthorizationError("You can only export your own lectures")

        out: list[dict] = []
        for r in self._attendance.get_roster(lecture.lecture_id):
            out.append(
                {
                    "course_code": lecture.course_code,
                    "lecture_date": lecture.lecture_date.strftime("%Y-%m-%d"),
                    "student_number": r.student_number or "",
                    "full_name": r.full_name,
                    "email": r.email,
                    "enrolled_at": r.enrolled_at.strftime("%Y-%m-%d %H:%M:%S"),
                    "marked_at": r.marked_at.strftime("%Y-%m-%d %H:%M:%S") if r.marked_at else "",
                    "answer": r.student_answer or "",
                    "result": "-" if r.is_correct is None else ("correct" if r.is_correct else "incorrect"),
                }
            )
        return out
