"""Command-line entry points for eventsink.

Usage:
    eventsink upload event.json      # archive one event read from a file
    cat event.json | eventsink upload -
    eventsink test                   # archive the fixed test event
    eventsink serve --port 2801      # run the HTTP surface

The OCI output is configured through OCI_* environment variables (a local
`.env` is honoured). Exit code 1 means the upload outcome was `error`.
"""

from __future__ import annotations

import json
import logging
import os
import socket

import click

from eventsink.events.payload import make_test_event
from eventsink.outputs.wiring import build_oci_output_if_configured, load_dotenv_if_enabled


def configure_logging() -> None:
    level = (os.getenv("EVENTSINK_LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level, logging.INFO),
    )
    # The OCI SDK logs every request at INFO
    logging.getLogger("oci").setLevel(logging.WARNING)


def _require_output():
    output = build_oci_output_if_configured()
    if output is None:
        raise click.ClickException("OCI output is not configured (set OCI_OBJECTSTORAGE_BUCKET)")
    return output


def _finish(output, result) -> None:
    output.context.dispatcher.close()
    if not result.ok:
        raise click.ClickException(result.error or "upload failed")
    click.echo(result.object_name)


@click.group()
def main() -> None:
    """Archive security events to OCI Object Storage."""
    configure_logging()
    load_dotenv_if_enabled()


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
def upload(source) -> None:
    """Upload one event read from SOURCE (`-` for stdin)."""
    try:
        payload = json.load(source)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"invalid event JSON: {exc}")
    if not isinstance(payload, dict):
        raise click.ClickException("event JSON must be an object")
    output = _require_output()
    _finish(output, output.upload(payload))


@main.command("test")
def send_test() -> None:
    """Upload the fixed test event."""
    output = _require_output()
    _finish(output, output.upload(make_test_event(hostname=socket.gethostname())))


@main.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=2801, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Run the HTTP surface under uvicorn."""
    import uvicorn

    uvicorn.run("eventsink.web.main:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":  # pragma: no cover
    main()
