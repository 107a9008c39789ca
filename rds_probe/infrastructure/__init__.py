"""
Infrastructure package for the RDS probe handler.

Centralizes I/O concerns: Secrets Manager access, the per-invocation MySQL
connection, and `test_items` data access. Keep this layer decoupled from
response building.
"""

from rds_probe.infrastructure.db_factory import connection_scope, open_connection
from rds_probe.infrastructure.repository import TestItemRepository
from rds_probe.infrastructure.secrets import build_secrets_client, fetch_credentials

__all__ = [
    "TestItemRepository",
    "build_secrets_client",
    "connection_scope",
    "fetch_credentials",
    "open_connection",
]
