from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection per unit of work: commit on success, rollback on error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        logger.debug("Rolling back transaction", exc_info=True)
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
