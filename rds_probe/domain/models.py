"""
Domain models for the RDS probe handler.

Defines the credential payload stored in Secrets Manager, the `test_items` row
shape, and the API-gateway-style result returned by each invocation.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, SecretStr

DEFAULT_MYSQL_PORT = 3306
JSON_HEADERS = {"Content-Type": "application/json"}


class Credentials(BaseModel):
    """
    Database credentials resolved from the `{env}/rds/credentials` secret.
    """

    host: str = Field(..., min_length=1, description="RDS endpoint hostname.")
    username: str = Field(..., min_length=1, description="Database user.")
    password: SecretStr = Field(..., description="Database password (never echoed).")
    dbname: str = Field(..., min_length=1, description="Database (schema) name.")
    port: int = Field(DEFAULT_MYSQL_PORT, gt=0, description="TCP port.")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    def redacted(self) -> Dict[str, Any]:
        """Connection details safe to return to callers; excludes the password."""
        return {
            "host": self.host,
            "database": self.dbname,
            "username": self.username,
            "port": self.port,
        }


class NewTestItem(BaseModel):
    """
    Values written by a single invocation before the database assigns an id.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

    model_config = {"frozen": True}


class TestItem(BaseModel):
    """
    Representation of a single row in the `test_items` table.
    """

    __test__ = False  # not a pytest class

    id: int = Field(..., description="Primary key (AUTO_INCREMENT).")
    name: str = Field(..., description="Generated item name.")
    description: Optional[str] = Field(None, description="Free-form description.")
    created_at: Optional[datetime] = Field(None, description="Row creation timestamp.")
    updated_at: Optional[datetime] = Field(None, description="Row update timestamp.")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }


class InvocationResult(BaseModel):
    """
    Outcome of one invocation: HTTP-style status plus a structured body.
    """

    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = Field(default_factory=lambda: dict(JSON_HEADERS))

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def to_lambda(self) -> Dict[str, Any]:
        """Render in the shape API Gateway proxy integrations expect."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": json.dumps(self.body, default=str),
        }


def generate_item(now: datetime) -> NewTestItem:
    """
    Build the synthetic row for an invocation started at `now` (UTC-aware).
    """
    epoch_ms = int(now.timestamp() * 1000)
    iso = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return NewTestItem(
        name=f"Test Item {epoch_ms}",
        description=f"This is a test item created at {iso}",
    )


__all__ = [
    "Credentials",
    "InvocationResult",
    "NewTestItem",
    "TestItem",
    "generate_item",
]
