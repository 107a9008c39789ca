"""
Secrets Manager access for the RDS probe handler.

Resolves the `{env}/rds/credentials` secret into a validated `Credentials`
model. The boto3 client is created by the caller (once per process) and passed
in, so tests can substitute any object exposing `get_secret_value`.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from rds_probe.domain.models import Credentials
from rds_probe.errors import STEP_SECRET, OperationFailure
from rds_probe.utils.logging import get_logger

log = get_logger(__name__)


class SecretsClient(Protocol):
    """The subset of the boto3 `secretsmanager` client this module uses."""

    def get_secret_value(self, **kwargs: Any) -> dict: ...


def build_secrets_client(region_name: Optional[str] = None) -> SecretsClient:
    """
    Create a boto3 Secrets Manager client.

    Parameters
    ----------
    region_name : str, optional
        AWS region; falls back to the standard boto3 resolution chain when None.
    """
    if region_name:
        return boto3.client("secretsmanager", region_name=region_name)
    return boto3.client("secretsmanager")


def _secret_payload(response: dict, secret_name: str) -> str:
    secret_string = response.get("SecretString")
    if secret_string:
        return secret_string

    secret_binary = response.get("SecretBinary")
    if secret_binary:
        if isinstance(secret_binary, bytes):
            return secret_binary.decode("utf-8")
        return str(secret_binary)

    raise OperationFailure(f"Secret '{secret_name}' has no value", step=STEP_SECRET)


def fetch_credentials(client: SecretsClient, secret_name: str) -> Credentials:
    """
    Fetch and validate database credentials from Secrets Manager.

    Parameters
    ----------
    client : SecretsClient
        boto3 `secretsmanager` client (or compatible fake).
    secret_name : str
        Secret id, e.g. "dev/rds/credentials".

    Returns
    -------
    Credentials
        Parsed credentials; the password is held as a SecretStr.

    Raises
    ------
    OperationFailure
        If the secret cannot be read, is empty, or is not a valid credential object.
    """
    try:
        response = client.get_secret_value(SecretId=secret_name)
    except ClientError as exc:
        code = exc.response.get("Error", {}).get("Code", "ClientError")
        raise OperationFailure(
            f"Unable to read secret '{secret_name}' ({code}): {exc}",
            step=STEP_SECRET,
            cause=exc,
        ) from exc
    except BotoCoreError as exc:
        raise OperationFailure(
            f"Unable to read secret '{secret_name}': {exc}", step=STEP_SECRET, cause=exc
        ) from exc

    raw = _secret_payload(response, secret_name)

    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise OperationFailure(
            f"Malformed secret payload in '{secret_name}': not valid JSON",
            step=STEP_SECRET,
            cause=exc,
        ) from exc

    if not isinstance(payload, dict):
        raise OperationFailure(
            f"Malformed secret payload in '{secret_name}': expected a JSON object",
            step=STEP_SECRET,
        )

    try:
        credentials = Credentials.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise OperationFailure(
            f"Malformed secret payload in '{secret_name}': invalid or missing {fields}",
            step=STEP_SECRET,
            cause=exc,
        ) from exc

    log.info(
        "Retrieved credentials from Secrets Manager",
        extra={
            "secret_name": secret_name,
            "db_host": credentials.host,
            "db_name": credentials.dbname,
            "db_user": credentials.username,
            "db_port": credentials.port,
        },
    )
    return credentials


__all__ = ["SecretsClient", "build_secrets_client", "fetch_credentials"]
