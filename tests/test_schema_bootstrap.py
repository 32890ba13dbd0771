from __future__ import annotations

from campus_attendance.database.bootstrap import SCHEMA_PATH, _iter_sql_statements, _drop_database_statements


def test_split_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;y\";\nSELECT 1"
    assert list(_iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", 'SELECT "x;y"', "SELECT 1"]


def test_database_statements_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\nCREATE TABLE x (id INT);"
    assert list(_iter_sql_statements(_drop_database_statements(sql))) == ["CREATE TABLE x (id INT)"]


def test_schema_creates_the_four_tables():
    sql = _drop_database_statements(SCHEMA_PATH.read_text(encoding="utf-8"))
    creates = [s for s in _iter_sql_statements(sql) if "CREATE TABLE" in s.upper()]

    assert len(creates) == 4
    for table in ("users", "lectures", "lecture_enrollments", "attendance_records"):
        assert any(f"EXISTS {table} (" in s for s in creates)
