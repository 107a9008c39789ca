"""
Database connection factory for the RDS probe handler.

Opens one dedicated PyMySQL connection per invocation (no pooling) with bounded
connect/read/write timeouts, and provides `connection_scope`, which guarantees
the connection is closed on every exit path once it has been opened.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Generator

import pymysql
import pymysql.cursors
from pymysql.connections import Connection

from rds_probe.config import DEFAULT_DB_TIMEOUT_SECONDS
from rds_probe.domain.models import Credentials
from rds_probe.errors import STEP_CONNECT, OperationFailure
from rds_probe.utils.logging import get_logger

log = get_logger(__name__)

ConnectFn = Callable[[Credentials, int], Connection]


def open_connection(
    credentials: Credentials, timeout_seconds: int = DEFAULT_DB_TIMEOUT_SECONDS
) -> Connection:
    """
    Open a single synchronous MySQL connection.

    Parameters
    ----------
    credentials : Credentials
        Resolved database credentials.
    timeout_seconds : int
        Applied to connection establishment and to each socket read/write.

    Returns
    -------
    Connection
        A PyMySQL connection using DictCursor rows and autocommit.

    Raises
    ------
    OperationFailure
        On network, authentication or timeout errors.
    """
    try:
        return pymysql.connect(
            host=credentials.host,
            user=credentials.username,
            password=credentials.password.get_secret_value(),
            database=credentials.dbname,
            port=credentials.port,
            connect_timeout=timeout_seconds,
            read_timeout=timeout_seconds,
            write_timeout=timeout_seconds,
            charset="utf8mb4",
            cursorclass=pymysql.cursors.DictCursor,
            autocommit=True,
        )
    except (pymysql.MySQLError, OSError) as exc:
        raise OperationFailure(
            f"Unable to connect to {credentials.host}:{credentials.port}/{credentials.dbname}: {exc}",
            step=STEP_CONNECT,
            cause=exc,
        ) from exc


@contextmanager
def connection_scope(
    credentials: Credentials,
    timeout_seconds: int = DEFAULT_DB_TIMEOUT_SECONDS,
    connect: ConnectFn = open_connection,
) -> Generator[Connection, None, None]:
    """
    Context manager yielding an open connection that is always closed on exit.

    Example
    -------
        with connection_scope(credentials) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
    """
    conn = connect(credentials, timeout_seconds)
    log.info("Connected to RDS database", extra={"db_host": credentials.host})
    try:
        yield conn
    finally:
        try:
            conn.close()
        except Exception:
            # An error here must not mask the one already propagating.
            log.warning("Failed to close database connection", exc_info=True)
        else:
            log.info("Database connection closed")


__all__ = ["ConnectFn", "connection_scope", "open_connection"]
