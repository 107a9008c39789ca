"""
Data access for the `test_items` table.

All statements are parameterized. PyMySQL errors are translated into
`OperationFailure` tagged with the step that failed.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence

import pymysql

from rds_probe.config import DEFAULT_RECENT_ITEMS_LIMIT
from rds_probe.domain.models import NewTestItem, TestItem
from rds_probe.errors import STEP_INSERT, STEP_SCHEMA, STEP_SELECT, OperationFailure

TABLE_DDL = """
CREATE TABLE IF NOT EXISTS test_items (
    id INT AUTO_INCREMENT PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    description TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
)
"""

INSERT_SQL = "INSERT INTO test_items (name, description) VALUES (%s, %s)"
SELECT_BY_ID_SQL = "SELECT * FROM test_items WHERE id = %s"
COUNT_SQL = "SELECT COUNT(*) AS total FROM test_items"
RECENT_SQL = "SELECT * FROM test_items ORDER BY created_at DESC LIMIT %s"


class TestItemRepository:
    """
    Thin wrapper over a DictCursor connection for the probe's fixed table.
    """

    __test__ = False

    def __init__(self, connection: Any) -> None:
        self._conn = connection

    @contextmanager
    def _cursor(self, step: str) -> Iterator[Any]:
        try:
            with self._conn.cursor() as cur:
                yield cur
        except pymysql.MySQLError as exc:
            raise OperationFailure(
                f"Database {step} operation failed: {exc}", step=step, cause=exc
            ) from exc

    def _execute(self, step: str, sql: str, params: Optional[Sequence[Any]] = None) -> List[dict]:
        with self._cursor(step) as cur:
            cur.execute(sql, params)
            return list(cur.fetchall())

    def ensure_schema(self) -> None:
        """Create `test_items` if it does not exist (idempotent)."""
        with self._cursor(STEP_SCHEMA) as cur:
            cur.execute(TABLE_DDL)

    def insert(self, item: NewTestItem) -> int:
        """Insert one row and return its auto-assigned id."""
        with self._cursor(STEP_INSERT) as cur:
            cur.execute(INSERT_SQL, (item.name, item.description))
            item_id = cur.lastrowid
        if not item_id:
            raise OperationFailure("Insert did not return a generated id", step=STEP_INSERT)
        return int(item_id)

    def get(self, item_id: int) -> TestItem:
        rows = self._execute(STEP_SELECT, SELECT_BY_ID_SQL, (item_id,))
        if not rows:
            raise OperationFailure(f"Inserted item {item_id} not found", step=STEP_SELECT)
        return TestItem.model_validate(rows[0])

    def count(self) -> int:
        rows = self._execute(STEP_SELECT, COUNT_SQL)
        return int(rows[0]["total"]) if rows else 0

    def recent(self, limit: int = DEFAULT_RECENT_ITEMS_LIMIT) -> List[TestItem]:
        """Most recent rows, newest `created_at` first."""
        rows = self._execute(STEP_SELECT, RECENT_SQL, (limit,))
        return [TestItem.model_validate(row) for row in rows]


__all__ = ["TABLE_DDL", "TestItemRepository"]
