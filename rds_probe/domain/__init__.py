"""
Domain package for the RDS probe handler.

Exports the credential, row and result models used by the infrastructure
layer and the request handler. Keep this package free of I/O.
"""

from rds_probe.domain.models import (
    Credentials,
    InvocationResult,
    NewTestItem,
    TestItem,
    generate_item,
)

__all__ = [
    "Credentials",
    "InvocationResult",
    "NewTestItem",
    "TestItem",
    "generate_item",
]
