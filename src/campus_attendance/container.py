from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock, resolve_timezone
from .database.connection import DatabaseConnection, DBConfig
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .enrollments.service import EnrollmentService
from .lectures.mysql_lecture_repository import MySQLLectureRepository
from .lectures.repository import LectureRepository
from .lectures.service import LectureService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    clock: Clock

    users_repo: UserRepository
    lectures_repo: LectureRepository
    enrollments_repo: EnrollmentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    lecture_service: LectureService
    enrollment_service: EnrollmentService
    attendance_service: AttendanceService


def wire(
    *,
    clock: Clock,
    users_repo: UserRepository,
    lectures_repo: LectureRepository,
    enrollments_repo: EnrollmentRepository,
    attendance_repo: AttendanceRepository,
) -> Container:
    """Build services on top of any set of repositories (MySQL in the app, fakes in tests)."""

    return Container(
        clock=clock,
        users_repo=users_repo,
        lectures_repo=lectures_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        lecture_service=LectureService(lectures_repo, enrollments_repo, attendance_repo, users_repo, clock),
        enrollment_service=EnrollmentService(enrollments_repo, lectures_repo, clock),
        attendance_service=AttendanceService(attendance_repo, enrollments_repo, lectures_repo, clock),
    )


def build_container(*, db_config: dict, campus_timezone: str = "UTC") -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        clock=SystemClock(resolve_timezone(campus_timezone)),
        users_repo=MySQLUserRepository(conn),
        lectures_repo=MySQLLectureRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
