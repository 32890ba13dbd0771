from __future__ import annotations

from typing import Mapping, Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.results import StoreResult
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_failure
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, full_name, password_hash, role, student_number, department, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        full_name=row["full_name"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        student_number=row.get("student_number"),
        department=row.get("department"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        student_number: Optional[str] = None,
        department: Optional[str] = None,
    ) -> StoreResult[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(email, full_name, password_hash, role, student_number, department)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (email, full_name, password_hash, role.value, student_number, department),
                )
                return StoreResult.success(int(cur.lastrowid))
        except mysql.connector.Error as exc:
            return store_failure(exc)

    def get_names(self, user_ids: Sequence[int]) -> Mapping[int, str]:
        ids = sorted({int(i) for i in user_ids})
        if not ids:
            return {}

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT user_id, full_name FROM users WHERE user_id IN ({placeholders})", tuple(ids))
            return {int(r["user_id"]): r["full_name"] for r in fetchall(cur)}
