from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.eligibility import action_label, eligibility
from ..attendance.repository import AttendanceRepository
from ..attendance.validator import normalize_answer
from ..common.datetime_utils import Clock, format_clock, parse_clock_time, parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import DASHBOARD_SECTION_LIMIT
from ..core.enums import AttendanceAction, LifecycleState, Role
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from ..enrollments.repository import EnrollmentRepository
from ..users.repository import UserRepository
from .lifecycle import evaluate, lecture_window, state_label
from .model import Lecture, NewLecture
from .repository import LectureRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LectureCard:
    """A lecture as shown on a dashboard, evaluated at one instant."""

    lecture: Lecture
    state: LifecycleState
    lecturer_name: str = ""
    is_enrolled: bool = False
    has_attended: bool = False
    action: Optional[AttendanceAction] = None
    enrollment_count: int = 0
    attendance_count: int = 0

    @property
    def state_label(self) -> str:
        return state_label(self.state)

    @property
    def action_label(self) -> str:
        return action_label(self.action) if self.action else ""

    @property
    def time_range(self) -> str:
        return f"{format_clock(self.lecture.start_time)} - {format_clock(self.lecture.end_time)}"


@dataclass(frozen=True)
class StudentDashboard:
    cards: list[LectureCard]
    live: list[LectureCard] = field(default_factory=list)
    available: list[LectureCard] = field(default_factory=list)
    enrolled: list[LectureCard] = field(default_factory=list)
    stats: dict = field(default_factory=dict)


@dataclass(frozen=True)
class LecturerDashboard:
    cards: list[LectureCard]
    live: list[LectureCard] = field(default_factory=list)
    upcoming: list[LectureCard] = field(default_factory=list)
    recent: list[LectureCard] = field(default_factory=list)
    stats: dict = field(default_factory=dict)


def attendance_rate(total_attended: int, total_enrolled: int) -> int:
    if total_enrolled <= 0:
        return 0
    # Halves round up.
    return (200 * total_attended + total_enrolled) // (2 * total_enrolled)


class LectureService:
    def __init__(
        self,
        lectures: LectureRepository,
        enrollments: EnrollmentRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        clock: Clock,
    ):
        self._lectures = lectures
        self._enrollments = enrollments
        self._attendance = attendance
        self._users = users
        self._clock = clock

    def create_lecture(
        self,
        *,
        current_role: Role,
        lecturer_id: int,
        course_name: str,
        course_code: str,
        lecture_date: str,
        start_time: str,
        end_time: str,
        location: str,
        attendance_question: str,
        attendance_answer: str,
    ) -> int:
        if current_role != Role.LECTURER:
            raise AuthorizationError("Only lecturers can create lectures")

        new = NewLecture(
            course_name=require_non_empty(course_name, "Course name"),
            course_code=require_non_empty(course_code, "Course code"),
            lecture_date=parse_iso_date(require_non_empty(lecture_date, "Date")),
            start_time=parse_clock_time(require_non_empty(start_time, "Start time")),
            end_time=parse_clock_time(require_non_empty(end_time, "End time")),
            location=require_non_empty(location, "Location"),
            attendance_question=require_non_empty(attendance_question, "Attendance question"),
            attendance_answer=normalize_answer(require_non_empty(attendance_answer, "Attendance answer")),
        )
        if new.start_time >= new.end_time:
            raise ValidationError("End time must be after start time")

        result = self._lectures.create(lecturer_id=int(lecturer_id), lecture=new)
        if not result.ok:
            raise StoreError("Failed to create lecture, please try again")

        logger.info("Lecturer %s created lecture %s (%s)", lecturer_id, result.value, new.course_code)
        return int(result.value)

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or self._clock.now()

    def student_dashboard(self, *, student_id: int, now: Optional[datetime] = None) -> StudentDashboard:
        now = self._now(now)
        lectures = list(self._lectures.list_all())
        enrolled_ids = self._enrollments.lecture_ids_for_student(int(student_id))
        attended_ids = self._attendance.lecture_ids_for_student(int(student_id))
        names = self._users.get_names([lec.lecturer_id for lec in lectures])

        cards: list[LectureCard] = []
        for lec in lectures:
            state = evaluate(lec, now)
            is_enrolled = lec.lecture_id in enrolled_ids
            has_attended = lec.lecture_id in attended_ids
            cards.append(
                LectureCard(
                    lecture=lec,
                    state=state,
                    lecturer_name=names.get(lec.lecturer_id, "Unknown"),
                    is_enrolled=is_enrolled,
                    has_attended=has_attended,
                    action=eligibility(state, is_enrolled, has_attended),
                )
            )

        today = now.date()
        enrolled = [c for c in cards if c.is_enrolled]
        available = [c for c in cards if not c.is_enrolled]
        live = [c for c in enrolled if c.state == LifecycleState.LIVE]
        attended_today = [c for c in cards if c.lecture.lecture_date == today and c.has_attended]

        return StudentDashboard(
            cards=cards,
            live=live,
            available=available[:DASHBOARD_SECTION_LIMIT],
            enrolled=enrolled,
            stats={
                "enrolled": len(enrolled),
                "attended_today": len(attended_today),
                "live": len(live),
                "available": len(available),
            },
        )

    def lecturer_dashboard(self, *, lecturer_id: int, now: Optional[datetime] = None) -> LecturerDashboard:
        now = self._now(now)
        lectures = list(self._lectures.list_for_lecturer(int(lecturer_id)))
        ids = [lec.lecture_id for lec in lectures]
        enrollment_counts = self._enrollments.count_by_lecture(ids)
        attendance_counts = self._attendance.count_by_lecture(ids)
        names = self._users.get_names([int(lecturer_id)])

        cards = [
            LectureCard(
                lecture=lec,
                state=evaluate(lec, now),
                lecturer_name=names.get(lec.lecturer_id, "Unknown"),
                enrollment_count=int(enrollment_counts.get(lec.lecture_id, 0)),
                attendance_count=int(attendance_counts.get(lec.lecture_id, 0)),
            )
            for lec in lectures
        ]

        today = now.date()
        todays = [c for c in cards if c.lecture.lecture_date == today]
        live = [c for c in todays if c.state == LifecycleState.LIVE]
        upcoming = sorted(
            (c for c in cards if c.state == LifecycleState.NOT_STARTED),
            key=lambda c: lecture_window(c.lecture)[0],
        )
        total_enrolled = sum(c.enrollment_count for c in cards)
        total_attended = sum(c.attendance_count for c in cards)

        return LecturerDashboard(
            cards=cards,
            live=live,
            upcoming=upcoming[:DASHBOARD_SECTION_LIMIT],
            recent=cards[:DASHBOARD_SECTION_LIMIT],
            stats={
                "total_lectures": len(cards),
                "today": len(todays),
                "live": len(live),
                "attendance_rate": attendance_rate(total_attended, total_enrolled),
            },
        )

    def state_snapshot(self, *, viewer_id: int, role: Role, now: Optional[datetime] = None) -> dict:
        """Lifecycle states for the periodic refresh of a dashboard."""

        now = self._now(now)
        if role == Role.LECTURER:
            cards: Sequence[LectureCard] = self.lecturer_dashboard(lecturer_id=viewer_id, now=now).cards
        else:
            cards = self.student_dashboard(student_id=viewer_id, now=now).cards

        return {
            "now": now.isoformat(),
            "lectures": {
                str(c.lecture.lecture_id): {
                    "state": c.state.value,
                    "label": c.state_label,
                    "action": c.action.value if c.action else None,
                    "action_label": c.action_label,
                }
                for c in cards
            },
        }
