from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.results import StoreResult
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, store_failure
from .model import Lecture, NewLecture
from .repository import LectureRepository

_LECTURE_COLUMNS = """
    lecture_id, course_name, course_code, lecturer_id, lecture_date, start_time, end_time,
    location, attendance_question, attendance_answer, created_at
"""


def _to_lecture(r: dict) -> Lecture:
    return Lecture(
        lecture_id=int(r["lecture_id"]),
        course_name=r["course_name"],
        course_code=r["course_code"],
        lecturer_id=int(r["lecturer_id"]),
        lecture_date=r["lecture_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        location=r["location"],
        attendance_question=r["attendance_question"],
        attendance_answer=r["attendance_answer"],
        created_at=r.get("created_at"),
    )


class MySQLLectureRepository(LectureRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lecture_id: int) -> Optional[Lecture]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LECTURE_COLUMNS} FROM lectures WHERE lecture_id=%s", (int(lecture_id),))
            r = fetchone(cur)
            return _to_lecture(r) if r else None

    def list_all(self) -> Sequence[Lecture]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LECTURE_COLUMNS} FROM lectures ORDER BY lecture_date ASC, start_time ASC")
            return [_to_lecture(r) for r in fetchall(cur)]

    def list_for_lecturer(self, lecturer_id: int) -> Sequence[Lecture]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LECTURE_COLUMNS}
                FROM lectures
                WHERE lecturer_id=%s
                ORDER BY lecture_date DESC, start_time DESC
                """,
                (int(lecturer_id),),
            )
            return [_to_lecture(r) for r in fetchall(cur)]

    def create(self, *, lecturer_id: int, lecture: NewLecture) -> StoreResult[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO lectures(
                        course_name, course_code, lecturer_id, lecture_date, start_time, end_time,
                        location, attendance_question, attendance_answer
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        lecture.course_name,
                        lecture.course_code,
                        int(lecturer_id),
                        lecture.lecture_date,
                        lecture.start_time,
                        lecture.end_time,
                        lecture.location,
                        lecture.attendance_question,
                        lecture.attendance_answer,
                    ),
                )
                return StoreResult.success(int(cur.lastrowid))
        except mysql.connector.Error as exc:
            return store_failure(exc)
