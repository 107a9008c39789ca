"""
RDS Probe - a Lambda handler that verifies connectivity to an RDS MySQL database.

Each invocation resolves credentials from AWS Secrets Manager, opens a single
PyMySQL connection, ensures the `test_items` table exists, writes one row,
reads it back with the row count and most recent rows, and returns an
API-gateway-style JSON summary.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from rds_probe.config import HandlerConfig, Settings, get_settings
from rds_probe.domain.models import Credentials, InvocationResult, TestItem
from rds_probe.errors import OperationFailure
from rds_probe.handler import RequestHandler, lambda_handler
from rds_probe.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "HandlerConfig",
    "Settings",
    "get_settings",
    # Handler
    "RequestHandler",
    "lambda_handler",
    # Models and errors
    "Credentials",
    "InvocationResult",
    "OperationFailure",
    "TestItem",
    # Logging
    "configure_logging",
    "get_logger",
]
