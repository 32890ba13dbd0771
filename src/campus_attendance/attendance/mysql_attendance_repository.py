from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Sequence, Set

import mysql.connector

from ..core.results import StoreResult
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_failure
from .model import AttendanceRecord, RosterRow
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, lecture_id, student_id, student_answer, is_correct, marked_at
                FROM attendance_records
                WHERE lecture_id=%s AND student_id=%s
                """,
                (int(lecture_id), int(student_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceRecord(
                attendance_id=int(r["attendance_id"]),
                lecture_id=int(r["lecture_id"]),
                student_id=int(r["student_id"]),
                student_answer=r["student_answer"],
                is_correct=bool(r["is_correct"]),
                marked_at=r["marked_at"],
            )

    def add(
        self,
        *,
        lecture_id: int,
        student_id: int,
        student_answer: str,
        is_correct: bool,
        marked_at: datetime,
    ) -> StoreResult[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(lecture_id, student_id, student_answer, is_correct, marked_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(lecture_id), int(student_id), student_answer, int(bool(is_correct)), marked_at.replace(tzinfo=None)),
                )
                return StoreResult.success(int(cur.lastrowid))
        except mysql.connector.Error as exc:
            return store_failure(exc)

    def lecture_ids_for_student(self, student_id: int) -> Set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT lecture_id FROM attendance_records WHERE student_id=%s", (int(student_id),))
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
                FROM attendance_records
                WHERE lecture_id IN ({placeholders})
                GROUP BY lecture_id
                """,
                tuple(ids),
            )
            return {int(r["lecture_id"]): int(r["total"]) for r in fetchall(cur)}

    def get_roster(self, lecture_id: int) -> Sequence[RosterRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    u.user_id, u.full_name, u.email, u.student_number,
                    e.enrolled_at,
                    ar.marked_at, ar.student_answer, ar.is_correct
                FROM lecture_enrollments e
                JOIN users u ON u.user_id = e.student_id
                LEFT JOIN attendance_records ar
                    ON ar.lecture_id = e.lecture_id AND ar.student_id = e.student_id
                WHERE e.lecture_id=%s
                ORDER BY u.full_name ASC
                """,
                (int(lecture_id),),
            )
            return [
                RosterRow(
                    student_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    email=r["email"],
                    student_number=r.get("student_number"),
                    enrolled_at=r["enrolled_at"],
                    marked_at=r.get("marked_at"),
                    student_answer=r.get("student_answer"),
                    is_correct=None if r.get("is_correct") is None else bool(r["is_correct"]),
                )
                for r in fetchall(cur)
            ]
