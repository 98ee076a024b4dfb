"""Small helpers shared by the MySQL repositories."""
from __future__ import annotations

import logging
from contextlib import closing, contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(connection, cursor)`` as one transaction.

    Commits when the block exits cleanly and rolls back on any exception,
    which is re-raised to the caller.
    """
    with closing(conn_factory.connect()) as conn:
        with closing(conn.cursor(dictionary=dictionary)) as cur:
            try:
                yield conn, cur
            except Exception:
                logger.debug("Rolling back transaction on %s", conn_factory.config.describe())
                conn.rollback()
                raise
            conn.commit()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or ())


def where_clause(clauses: Sequence[str]) -> str:
    return ("WHERE " + " AND ".join(clauses)) if clauses else ""


def limit_clause(offset: int, limit: Optional[int], params: list) -> str:
    """Append LIMIT/OFFSET placeholders; ``limit=None`` means no paging."""
    if limit is None:
        return ""
    params.extend([int(limit), int(offset)])
    return "LIMIT %s OFFSET %s"


def dec(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def update_set(fields: Dict[str, Any], allowed: Sequence[str]) -> Tuple[str, list]:
    """Build ``col=%s, ...`` for a whitelisted subset of columns."""
    cols = [c for c in allowed if c in fields]
    return ", ".join(f"{c}=%s" for c in cols), [fields[c] for c in cols]
