from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from campus_attendance.attendance.model import AttendanceRecord, RosterRow
from campus_attendance.common.datetime_utils import FixedClock
from campus_attendance.container import Container, wire
from campus_attendance.core.enums import Role, StoreErrorKind
from campus_attendance.core.results import StoreResult
from campus_attendance.enrollments.model import Enrollment
from campus_attendance.lectures.model import Lecture, NewLecture
from campus_attendance.users.model import User

LECTURE_DAY = date(2026, 3, 2)
LECTURER_ID = 1
STUDENT_ID = 2
OTHER_STUDENT_ID = 3


def _at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute, second, tzinfo=timezone.utc)


class InMemoryUsers:
    def __init__(self):
        self.users_by_id: dict[int, User] = {}
        self.fail_with: Optional[StoreErrorKind] = None

    def put(self, user: User) -> User:
        self.users_by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.email == email), None)

    def create_user(self, *, email, full_name, password_hash, role, student_number=None, department=None):
        if self.fail_with:
            return StoreResult.failure(self.fail_with)
        if self.get_by_email(email):
            return StoreResult.failure(StoreErrorKind.DUPLICATE)
        user_id = max(self.users_by_id, default=0) + 1
        self.put(User(user_id, email, full_name, password_hash, role, student_number, department))
        return StoreResult.success(user_id)

    def get_names(self, user_ids):
        return {i: self.users_by_id[i].full_name for i in user_ids if i in self.users_by_id}


class InMemoryLectures:
    def __init__(self):
        self.lectures: dict[int, Lecture] = {}
        self.fail_with: Optional[StoreErrorKind] = None

    def put(self, lecture: Lecture) -> Lecture:
        self.lectures[lecture.lecture_id] = lecture
        return lecture

    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        return self.lectures.get(lecture_id)

    def list_all(self):
        return sorted(self.lectures.values(), key=lambda l: (l.lecture_date, l.start_time))

    def list_for_lecturer(self, lecturer_id: int):
        mine = [l for l in self.lectures.values() if l.lecturer_id == lecturer_id]
        return sorted(mine, key=lambda l: (l.lecture_date, l.start_time), reverse=True)

    def create(self, *, lecturer_id: int, lecture: NewLecture):
        if self.fail_with:
            return StoreResult.failure(self.fail_with)
        lecture_id = max(self.lectures, default=0) + 1
        self.put(Lecture(lecture_id=lecture_id, lecturer_id=lecturer_id, **lecture.__dict__))
        return StoreResult.success(lecture_id)


class InMemoryEnrollments:
    def __init__(self):
        self.rows: dict[tuple[int, int], Enrollment] = {}
        self.fail_with: Optional[StoreErrorKind] = None
        self.add_calls = 0

    def get(self, *, lecture_id: int, student_id: int) -> Optional[Enrollment]:
        return self.rows.get((lecture_id, student_id))

    def add(self, *, lecture_id: int, student_id: int, enrolled_at: datetime):
        self.add_calls += 1
        if self.fail_with:
            return StoreResult.failure(self.fail_with)
        if (lecture_id, student_id) in self.rows:
            return StoreResult.failure(StoreErrorKind.DUPLICATE)
        enrollment_id = len(self.rows) + 1
        self.rows[(lecture_id, student_id)] = Enrollment(enrollment_id, lecture_id, student_id, enrolled_at)
        return StoreResult.success(enrollment_id)

    def lecture_ids_for_student(self, student_id: int):
        return {lec for (lec, stu) in self.rows if stu == student_id}

    def count_by_lecture(self, lecture_ids):
        return {i: sum(1 for (lec, _) in self.rows if lec == i) for i in lecture_ids}


class InMemoryAttendance:
    def __init__(self, enrollments: InMemoryEnrollments, users: InMemoryUsers):
        self.rows: dict[tuple[int, int], AttendanceRecord] = {}
        self.fail_with: Optional[StoreErrorKind] = None
        self.add_calls = 0
        self._enrollments = enrollments
        self._users = users

    def get_for_student(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        return self.rows.get((lecture_id, student_id))

    def add(self, *, lecture_id, student_id, student_answer, is_correct, marked_at):
        self.add_calls += 1
        if self.fail_with:
            return StoreResult.failure(self.fail_with)
        if (lecture_id, student_id) in self.rows:
            return StoreResult.failure(StoreErrorKind.DUPLICATE)
        attendance_id = len(self.rows) + 1
        self.rows[(lecture_id, student_id)] = AttendanceRecord(
            attendance_id, lecture_id, student_id, student_answer, is_correct, marked_at
        )
        return StoreResult.success(attendance_id)

    def lecture_ids_for_student(self, student_id: int):
        return {lec for (lec, stu) in self.rows if stu == student_id}

    def count_by_lecture(self, lecture_ids):
        return {i: sum(1 for (lec, _) in self.rows if lec == i) for i in lecture_ids}

    def get_roster(self, lecture_id: int):
        out = []
        for (lec, stu), enr in sorted(self._enrollments.rows.items()):
            if lec != lecture_id:
                continue
            user = self._users.get_by_id(stu)
            rec = self.rows.get((lec, stu))
            out.append(
                RosterRow(
                    student_id=stu,
                    full_name=user.full_name,
                    email=user.email,
                    student_number=user.student_number,
                    enrolled_at=enr.enrolled_at,
                    marked_at=rec.marked_at if rec else None,
                    student_answer=rec.student_answer if rec else None,
                    is_correct=rec.is_correct if rec else None,
                )
            )
        return out


@dataclass
class Stack:
    clock: FixedClock
    users: InMemoryUsers
    lectures: InMemoryLectures
    enrollments: InMemoryEnrollments
    attendance: InMemoryAttendance
    container: Container


def _make_lecture(lecture_id: int = 10, *, start=time(9, 0), end=time(10, 0), day=LECTURE_DAY, **overrides) -> Lecture:
    fields = dict(
        lecture_id=lecture_id,
        course_name="Data Structures",
        course_code="CS201",
        lecturer_id=LECTURER_ID,
        lecture_date=day,
        start_time=start,
        end_time=end,
        location="Hall B",
        attendance_question="What is the capital of France?",
        attendance_answer="paris",
    )
    fields.update(overrides)
    return Lecture(**fields)


@pytest.fixture
def stack() -> Stack:
    clock = FixedClock(_at(9, 30))
    users = InMemoryUsers()
    users.put(User(LECTURER_ID, "lecturer@campus.test", "Dr. Ada", generate_password_hash("lecturer123"), Role.LECTURER))
    users.put(User(STUDENT_ID, "student@campus.test", "Sam Student", generate_password_hash("student123"), Role.STUDENT, "S0001"))
    users.put(User(OTHER_STUDENT_ID, "other@campus.test", "Olu Other", generate_password_hash("other123"), Role.STUDENT, "S0002"))

    lectures = InMemoryLectures()
    enrollments = InMemoryEnrollments()
    attendance = InMemoryAttendance(enrollments, users)
    container = wire(
        clock=clock,
        users_repo=users,
        lectures_repo=lectures,
        enrollments_repo=enrollments,
        attendance_repo=attendance,
    )
    return Stack(clock, users, lectures, enrollments, attendance, container)


@pytest.fixture
def lecture(stack: Stack) -> Lecture:
    return stack.lectures.put(_make_lecture())


@pytest.fixture
def at():
    return _at


@pytest.fixture
def make_lecture():
    return _make_lecture
