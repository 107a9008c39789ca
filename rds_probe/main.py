from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from rds_probe.config import HandlerConfig, get_settings
from rds_probe.handler import RequestHandler
from rds_probe.infrastructure.secrets import build_secrets_client
from rds_probe.reporter import print_result
from rds_probe.utils.logging import configure_logging

app = typer.Typer(help="RDS probe CLI: run the Lambda handler from a workstation.")


def _load_event(raw: Optional[str]) -> Any:
    if not raw:
        return {}
    if raw.startswith("@"):
        try:
            raw = Path(raw[1:]).read_text(encoding="utf-8")
        except OSError as exc:
            raise typer.BadParameter(f"cannot read event file: {exc}") from exc
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"event is not valid JSON: {exc}") from exc


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    config = HandlerConfig.from_settings(settings)
    typer.echo(
        f"environment={config.environment_name} secret={config.secret_name} | "
        f"region={settings.aws_region or 'default'} timeout={config.db_timeout_seconds}s "
        f"recent_limit={config.recent_items_limit}"
    )


@app.command()
def invoke(
    event: Optional[str] = typer.Option(
        None,
        "--event",
        "-e",
        help="Event JSON, or @path to a JSON file (default: {}).",
    ),
    environment: Optional[str] = typer.Option(
        None,
        "--environment",
        help="Override ENVIRONMENT (selects the {env}/rds/credentials secret).",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the raw Lambda response instead of a summary.",
    ),
) -> None:
    """
    Invoke the handler once against the real secret store and database.
    """
    payload = _load_event(event)
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=False)

    config = HandlerConfig.from_settings(settings)
    if environment:
        config = HandlerConfig(
            environment_name=environment,
            db_timeout_seconds=config.db_timeout_seconds,
            recent_items_limit=config.recent_items_limit,
        )

    handler = RequestHandler(build_secrets_client(settings.aws_region), config)
    result = handler.handle(payload)

    if as_json:
        typer.echo(json.dumps(result.to_lambda(), indent=2))
    else:
        print_result(result)

    if not result.ok:
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
