from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector

from ..common.datetime_utils import parse_clock_time
from ..core.constants import MYSQL_DUPLICATE_KEY_ERRNO
from ..core.enums import StoreErrorKind
from ..core.results import StoreResult
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection per unit of work: commit on success, roll back on any error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def classify_error(exc: mysql.connector.Error) -> StoreErrorKind:
    if getattr(exc, "errno", None) == MYSQL_DUPLICATE_KEY_ERRNO:
        return StoreErrorKind.DUPLICATE
    return StoreErrorKind.UNAVAILABLE


def store_failure(exc: mysql.connector.Error) -> StoreResult:
    kind = classify_error(exc)
    if kind == StoreErrorKind.DUPLICATE:
        logger.info("Store rejected duplicate row: %s", exc.msg)
    else:
        logger.error("Store write failed: %s", exc)
    return StoreResult.failure(kind, detail=str(exc))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns arrive as timedelta from the pure connector, as str or time elsewhere."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return (datetime.min + timedelta(seconds=seconds)).time()
    if isinstance(value, str):
        return parse_clock_time(value)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
