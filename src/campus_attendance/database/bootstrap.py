"""Schema setup and demo accounts.

`schema.sql` is written for the default database name; the CREATE DATABASE and
USE lines are dropped so the configured database is used instead.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Optional, Union

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_DATABASE_LINE = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)

DEMO_ACCOUNTS = [
    ("lecturer@campus.test", "Demo Lecturer", "lecturer123", Role.LECTURER, None),
    ("student@campus.test", "Demo Student", "student123", Role.STUDENT, "S0001"),
]


def _drop_database_statements(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not _DATABASE_LINE.match(line))


def _iter_sql_statements(sql: str) -> Iterator[str]:
    """Split on ';' outside of quoted strings."""
    start = 0
    quote: Optional[str] = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        cur.close()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path] = SCHEMA_PATH) -> None:
    config = DBConfig.from_dict(db_config)
    ensure_database_exists(config)

    sql = _drop_database_statements(Path(schema_path).read_text(encoding="utf-8"))
    with db_cursor(DatabaseConnection(config), dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Schema applied to %s", config.describe())


def ensure_demo_accounts(db_config: dict) -> None:
    """Create the demo lecturer and student, resetting their passwords if they exist."""
    config = DBConfig.from_dict(db_config)
    with db_cursor(DatabaseConnection(config)) as (_, cur):
        for email, full_name, password, role, student_number in DEMO_ACCOUNTS:
            cur.execute(
                """
                INSERT INTO users (email, full_name, password_hash, role, student_number, department)
                VALUES (%s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    full_name = VALUES(full_name),
                    password_hash = VALUES(password_hash),
                    role = VALUES(role),
                    student_number = VALUES(student_number)
                """,
                (email, full_name, generate_password_hash(password), role.value, student_number, "Computer Science"),
            )
    logger.info("Demo accounts ready on %s", config.describe())


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
