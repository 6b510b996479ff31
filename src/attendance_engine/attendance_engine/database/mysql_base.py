from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.enums import FailureKind
from ..core.exceptions import DomainError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


class PersistenceError(DomainError):
    def __init__(self, message: str):
        super().__init__(message, kind=FailureKind.PERSISTENCE_FAILED)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back and re-raise on error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.error("Database operation failed: %s", exc)
        raise PersistenceError(f"Lỗi cơ sở dữ liệu: {exc}") from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def paging_clause(page_size: Optional[int], offset: int) -> tuple[str, list[object]]:
    if page_size is None:
        return "", []
    return " LIMIT %s OFFSET %s", [int(page_size), int(offset)]
