"""Click CLI for running, exercising and probing the edgechat dispatcher."""

from __future__ import annotations

import sys
from datetime import datetime

import click
import httpx
import uvicorn

from edgechat.chat.responder import ChatResponder
from edgechat.clock import fixed_clock, system_clock
from edgechat.dispatch.router import Dispatcher
from edgechat.models import RequestDescriptor
from edgechat.probe import run_probe
from edgechat.webhook.responder import WebhookResponder


@click.group()
def cli() -> None:
    """Edge chat router CLI."""


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8787, type=int, help="Bind port.")
@click.option("--log-level", default="info", help="Uvicorn log level.")
def serve(host: str, port: int, log_level: str) -> None:
    """Serve the dispatcher over HTTP (configured from the environment)."""
    uvicorn.run(
        "edgechat.server.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        log_level=log_level,
    )


@cli.command()
@click.argument("method")
@click.argument("path")
@click.option("--body", default=None, help="Raw request body, usually JSON.")
@click.option("--now", default=None, help="Freeze the clock at this ISO-8601 time.")
@click.option("--timezone", default="UTC", help="Time zone for date and time replies.")
def dispatch(method: str, path: str, body: str | None, now: str | None, timezone: str) -> None:
    """Run a single request through the dispatcher and print the response."""
    clock = system_clock
    if now is not None:
        try:
            clock = fixed_clock(datetime.fromisoformat(now))
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--now") from exc

    dispatcher = Dispatcher(
        chat=ChatResponder(clock=clock, timezone=timezone),
        webhook=WebhookResponder(clock=clock),
    )
    request = RequestDescriptor(
        method=method,
        path=path,
        raw_body=body.encode("utf-8") if body is not None else None,
    )
    result = dispatcher.dispatch(request)
    click.echo(result.model_dump_json(indent=2))


@cli.command()
@click.argument("base_url")
@click.option("--timeout", default=10.0, type=float, help="Per-request timeout in seconds.")
def probe(base_url: str, timeout: float) -> None:
    """Send the smoke scenarios to a running instance."""
    with httpx.Client(base_url=base_url, timeout=timeout) as client:
        results = run_probe(client)

    for result in results:
        mark = "PASS" if result.passed else "FAIL"
        click.echo(f"{mark}  {result.case.method:7} {result.case.path:14} {result.case.name}: {result.detail}")

    failed = sum(1 for r in results if not r.passed)
    click.echo(f"{len(results) - failed}/{len(results)} scenarios passed")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
