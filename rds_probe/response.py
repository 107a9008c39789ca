"""
Builds the success and failure payloads returned by the request handler.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from rds_probe.domain.models import Credentials, InvocationResult, TestItem

SUCCESS_MESSAGE = "Successfully connected to RDS and performed database operations!"
FAILURE_MESSAGE = "Error connecting to RDS or performing database operations"

DATABASE_OPERATIONS = ("connection", "tableCreation", "insert", "select")

TROUBLESHOOTING: List[str] = [
    "Check if RDS instance is running",
    "Verify security group allows Lambda access on port 3306",
    "Ensure Secrets Manager has correct credentials",
    "Check VPC and subnet configuration",
    "Verify Lambda has the PyMySQL dependency packaged",
    "Check Lambda execution role permissions",
]


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ResponseBuilder:
    def __init__(self, environment_name: str) -> None:
        self.environment_name = environment_name

    def success(
        self,
        timestamp: datetime,
        inserted: TestItem,
        total: int,
        recent: Sequence[TestItem],
        credentials: Credentials,
        event: Any,
    ) -> InvocationResult:
        body: Dict[str, Any] = {
            "message": SUCCESS_MESSAGE,
            "timestamp": format_timestamp(timestamp),
            "environment": self.environment_name,
            "databaseOperations": {op: "successful" for op in DATABASE_OPERATIONS},
            "insertedItem": inserted.model_dump(mode="json"),
            "totalItems": total,
            "recentItems": [item.model_dump(mode="json") for item in recent],
            "credentials": credentials.redacted(),
            "event": event,
        }
        return InvocationResult(status_code=200, body=body)

    def failure(self, timestamp: datetime, error: BaseException) -> InvocationResult:
        body: Dict[str, Any] = {
            "message": FAILURE_MESSAGE,
            "error": str(error),
            "timestamp": format_timestamp(timestamp),
            "environment": self.environment_name,
            "troubleshooting": list(TROUBLESHOOTING),
        }
        return InvocationResult(status_code=500, body=body)


__all__ = ["ResponseBuilder", "TROUBLESHOOTING", "format_timestamp"]
