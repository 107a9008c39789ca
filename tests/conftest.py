"""
Pytest configuration for the RDS probe handler.

Provides fixtures for:
- In-memory fakes for the Secrets Manager client and the PyMySQL connection
- A deterministic clock and a ready-to-use RequestHandler
- Real database settings for integration tests
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from botocore.exceptions import ClientError

from rds_probe.config import HandlerConfig
from rds_probe.handler import RequestHandler

DEV_SECRET_NAME = "dev/rds/credentials"
START_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

CREDENTIALS_PAYLOAD: Dict[str, Any] = {
    "host": "probe.abc123.eu-west-1.rds.amazonaws.com",
    "dbname": "probe",
    "username": "admin",
    "password": "s3cr3t-pa55",
    "port": 3306,
}


class FakeSecretsClient:
    """Stands in for `boto3.client("secretsmanager")`."""

    def __init__(self, secrets: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.secrets = secrets or {}
        self.requested: List[str] = []

    def get_secret_value(self, **kwargs: Any) -> Dict[str, Any]:
        secret_id = kwargs["SecretId"]
        self.requested.append(secret_id)
        if secret_id not in self.secrets:
            raise ClientError(
                {
                    "Error": {
                        "Code": "ResourceNotFoundException",
                        "Message": "Secrets Manager can't find the specified secret.",
                    }
                },
                "GetSecretValue",
            )
        return self.secrets[secret_id]


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn
        self._results: List[Dict[str, Any]] = []
        self.lastrowid: Optional[int] = None

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, sql: str, params: Any = None) -> int:
        if self._conn.closed:
            raise RuntimeError("connection already closed")
        statement = " ".join(sql.split())
        self._conn.statements.append((statement, params))

        for prefix, exc in self._conn.fail_on.items():
            if statement.startswith(prefix):
                raise exc

        if statement.startswith("CREATE TABLE IF NOT EXISTS test_items"):
            self._conn.db.table_exists = True
            self._results = []
        elif statement.startswith("INSERT INTO test_items"):
            self.lastrowid = self._conn.db.insert(*params)
            self._results = []
        elif statement.startswith("SELECT * FROM test_items WHERE id ="):
            self._results = [dict(r) for r in self._conn.db.rows if r["id"] == params[0]]
        elif statement.startswith("SELECT COUNT(*) AS total"):
            self._results = [{"total": len(self._conn.db.rows)}]
        elif statement.startswith("SELECT * FROM test_items ORDER BY created_at DESC LIMIT"):
            ordered = sorted(self._conn.db.rows, key=lambda r: r["created_at"], reverse=True)
            self._results = [dict(r) for r in ordered[: params[0]]]
        else:
            raise AssertionError(f"unexpected statement: {statement}")
        return len(self._results)

    def fetchall(self) -> List[Dict[str, Any]]:
        return list(self._results)


class FakeDatabase:
    """Shared in-memory `test_items` table; outlives individual connections."""

    def __init__(self, created_at: datetime = START_TIME.replace(tzinfo=None)) -> None:
        self.table_exists = False
        self.rows: List[Dict[str, Any]] = []
        self._next_created_at = created_at

    def insert(self, name: str, description: Optional[str]) -> int:
        row_id = len(self.rows) + 1
        self.rows.append(
            {
                "id": row_id,
                "name": name,
                "description": description,
                "created_at": self._next_created_at,
                "updated_at": self._next_created_at,
            }
        )
        self._next_created_at += timedelta(seconds=1)
        return row_id


class FakeConnection:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.closed = False
        self.statements: List[tuple] = []
        self.fail_on: Dict[str, Exception] = {}

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Replacement for `open_connection` that records every connection it opens."""

    def __init__(self, db: Optional[FakeDatabase] = None) -> None:
        self.db = db or FakeDatabase()
        self.connections: List[FakeConnection] = []
        self.calls: List[tuple] = []
        self.fail_on: Dict[str, Exception] = {}
        self.error: Optional[Exception] = None

    def __call__(self, credentials, timeout_seconds: int) -> FakeConnection:
        self.calls.append((credentials, timeout_seconds))
        if self.error is not None:
            raise self.error
        conn = FakeConnection(self.db)
        conn.fail_on = dict(self.fail_on)
        self.connections.append(conn)
        return conn


class FixedClock:
    def __init__(self, now: datetime = START_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def secret_response(payload: Any) -> Dict[str, Any]:
    return {"Name": DEV_SECRET_NAME, "SecretString": json.dumps(payload)}


@pytest.fixture
def credentials_payload() -> Dict[str, Any]:
    return dict(CREDENTIALS_PAYLOAD)


@pytest.fixture
def secrets_client() -> FakeSecretsClient:
    return FakeSecretsClient({DEV_SECRET_NAME: secret_response(CREDENTIALS_PAYLOAD)})


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def handler(
    secrets_client: FakeSecretsClient, connector: FakeConnector, clock: FixedClock
) -> RequestHandler:
    return RequestHandler(secrets_client, HandlerConfig(), connect=connector, clock=clock)


@pytest.fixture(scope="session")
def mysql_credentials_payload() -> Dict[str, Any]:
    """
    Credentials for a real MySQL instance used by integration tests.

    Can be overridden via environment variables in CI or local testing.
    """
    return {
        "host": os.getenv("DB_HOST", "127.0.0.1"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "username": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", "root"),
        "dbname": os.getenv("DB_NAME", "rds_probe"),
    }
