from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Sequence, Set

import mysql.connector

from ..core.results import StoreResult
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_failure
from .model import Enrollment
from .repository import EnrollmentRepository


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, lecture_id: int, student_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT enrollment_id, lecture_id, student_id, enrolled_at
                FROM lecture_enrollments
                WHERE lecture_id=%s AND student_id=%s
                """,
                (int(lecture_id), int(student_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Enrollment(
                enrollment_id=int(r["enrollment_id"]),
                lecture_id=int(r["lecture_id"]),
                student_id=int(r["student_id"]),
                enrolled_at=r["enrolled_at"],
            )

    def add(self, *, lecture_id: int, student_id: int, enrolled_at: datetime) -> StoreResult[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO lecture_enrollments(lecture_id, student_id, enrolled_at)
                    VALUES(%s,%s,%s)
                    """,
                    (int(lecture_id), int(student_id), enrolled_at.replace(tzinfo=None)),
                )
                return StoreResult.success(int(cur.lastrowid))
        except mysql.connector.Error as exc:
            return store_failure(exc)

    def lecture_ids_for_student(self, student_id: int) -> Set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT lecture_id FROM lecture_enrollments WHERE student_id=%s", (int(student_id),))
            return {int(r["lecture_id"]) for r in fetchall(cur)}

    def count_by_lecture(self, lecture_ids: Sequence[int]) -> Mapping[int, int]:
        ids = sorted({int(i) for i in lecture_ids})
        if not ids:
            return {}

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT lecture_id, COUNT(*) AS total
                FROM lecture_enrollments
                WHERE lecture_id IN ({placeholders})
                GROUP BY lecture_id
                """,
                tuple(ids),
            )
            return {int(r["lecture_id"]): int(r["total"]) for r in fetchall(cur)}
