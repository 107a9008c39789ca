"""
Lambda request handler for the RDS probe.

Each invocation fetches credentials from Secrets Manager, opens one MySQL
connection, ensures the `test_items` table exists, inserts a generated row,
reads it back together with the row count and the most recent rows, closes
the connection, and returns an API-gateway-style JSON response.

Usage (Lambda):
    handler: rds_probe.handler.lambda_handler

Usage (tests / scripts):
    handler = RequestHandler(fake_client, HandlerConfig(environment_name="dev"))
    result = handler.handle({})
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

from rds_probe.config import HandlerConfig, get_settings
from rds_probe.domain.models import InvocationResult, generate_item
from rds_probe.errors import STEP_UNEXPECTED, OperationFailure
from rds_probe.infrastructure.db_factory import ConnectFn, connection_scope, open_connection
from rds_probe.infrastructure.repository import TestItemRepository
from rds_probe.infrastructure.secrets import SecretsClient, build_secrets_client, fetch_credentials
from rds_probe.response import ResponseBuilder
from rds_probe.utils.logging import configure_logging, get_logger

log = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RequestHandler:
    """
    Runs the fixed secret -> connect -> schema -> insert -> select -> close flow.

    Parameters
    ----------
    secrets_client : SecretsClient
        Process-scoped boto3 `secretsmanager` client (or compatible fake).
    config : HandlerConfig
        Environment name, timeouts and read limits.
    connect : ConnectFn
        Connection opener; defaults to PyMySQL via `open_connection`.
    clock : callable
        Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        secrets_client: SecretsClient,
        config: Optional[HandlerConfig] = None,
        *,
        connect: ConnectFn = open_connection,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.secrets_client = secrets_client
        self.config = config or HandlerConfig()
        self._connect = connect
        self._clock = clock
        self._responses = ResponseBuilder(self.config.environment_name)

    def handle(self, event: Any) -> InvocationResult:
        """Run one invocation. Never raises; failures become a 500 result."""
        started = self._clock()
        try:
            log.info("Event: %s", json.dumps(event, default=str))
            return self._run(event, started)
        except OperationFailure as failure:
            return self._fail(failure)
        except Exception as exc:
            failure = OperationFailure(str(exc) or type(exc).__name__, step=STEP_UNEXPECTED, cause=exc)
            return self._fail(failure)

    def __call__(self, event: Any, context: Any = None) -> Dict[str, Any]:
        return self.handle(event).to_lambda()

    def _run(self, event: Any, started: datetime) -> InvocationResult:
        credentials = fetch_credentials(self.secrets_client, self.config.secret_name)

        with connection_scope(credentials, self.config.db_timeout_seconds, self._connect) as conn:
            repo = TestItemRepository(conn)

            repo.ensure_schema()
            log.info("Test table created/verified")

            item_id = repo.insert(generate_item(started))
            log.info("Test item inserted", extra={"item_id": item_id})

            inserted = repo.get(item_id)
            total = repo.count()
            recent = repo.recent(self.config.recent_items_limit)
            log.info("Read back test items", extra={"total_items": total, "recent_items": len(recent)})

        return self._responses.success(
            timestamp=self._clock(),
            inserted=inserted,
            total=total,
            recent=recent,
            credentials=credentials,
            event=event,
        )

    def _fail(self, failure: OperationFailure) -> InvocationResult:
        log.error(
            "Invocation failed: %s",
            failure,
            exc_info=failure.cause or failure,
            extra={"step": failure.step, "environment": self.config.environment_name},
        )
        return self._responses.failure(self._clock(), failure)


@lru_cache(maxsize=1)
def get_handler() -> RequestHandler:
    """
    Build the process-wide handler on first use (Lambda cold start).
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    client = build_secrets_client(settings.aws_region)
    return RequestHandler(client, HandlerConfig.from_settings(settings))


def lambda_handler(event: Any, context: Any) -> Dict[str, Any]:
    return get_handler()(event, context)


__all__ = ["RequestHandler", "get_handler", "lambda_handler", "utc_now"]
