"""
Root Typer application for the ezkonnect CLI.

Commands:
    ezkonnect serve      Start the REST API server
    ezkonnect --version  Print the installed version
"""

from __future__ import annotations

import typer
from typer import Typer

from ezkonnect.api.deps import get_settings

app = Typer(
    name="ezkonnect",
    help="Toggle and observe workload instrumentation.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        from ezkonnect import __version__

        typer.echo(f"ezkonnect-server {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ezkonnect CLI."""


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address [default: settings]"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port [default: settings]"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level [default: settings]"),
) -> None:
    """Start the ezkonnect REST API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    level = (log_level or settings.log_level).lower()

    typer.echo(f"Starting ezkonnect-server on {host}:{port}")
    uvicorn.run(
        "ezkonnect.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=level,
    )
