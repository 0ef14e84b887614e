"""Main CLI application using Typer."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from .output import (
    console,
    print_config,
    print_error,
    print_info,
    print_sent,
    print_success,
    sessions_table,
)

app = typer.Typer(
    name="ssekit",
    help="Server-Sent Events sessions: serve streams and push events to them",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

DEFAULT_SERVER = "http://localhost:8080"

ServerOption = Annotated[
    str,
    typer.Option("--server", "-S", envvar="SSEKIT_SERVER_URL", help="Server base URL"),
]


def _run(coro):
    """Run a client coroutine, turning ServerError into a clean exit."""
    from ..client import ServerError

    try:
        return asyncio.run(coro)
    except ServerError as e:
        print_error(f"{e.message}{f' ({e.detail})' if e.detail else ''}")
        raise typer.Exit(1) from None


@app.command("serve")
def serve(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind host")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Bind port")] = None,
    tick_interval: Annotated[
        Optional[float],
        typer.Option("--tick-interval", help="Send a demo 'sse-test' event every N seconds"),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Session config YAML file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Debug logging"),
    ] = False,
):
    """Run the SSE server."""
    import uvicorn

    from ..core.config import SessionConfig
    from ..web.app import create_app
    from ..web.config import WebConfig

    log_format = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=log_format)

    web_config = WebConfig.load()
    if host is not None:
        web_config.host = host
    if port is not None:
        web_config.port = port
    if tick_interval is not None:
        web_config.tick_interval = tick_interval

    session_config = SessionConfig.load(config_path=config_file)
    session_config.validate()

    console.print(
        f"[bold]ssekit[/bold] listening on http://{web_config.host}:{web_config.port}"
        "/api/events/connect"
    )
    uvicorn.run(
        create_app(web_config, session_config),
        host=web_config.host,
        port=web_config.port,
        log_level="debug" if verbose else "info",
    )


@app.command("push")
def push(
    session_id: Annotated[str, typer.Argument(help="Target session id")],
    event: Annotated[str, typer.Argument(help="Event name")],
    data: Annotated[str, typer.Argument(help="Payload")],
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Parse DATA as JSON before sending"),
    ] = False,
    server: ServerOption = DEFAULT_SERVER,
):
    """Push one event to an open session."""
    from ..client import ServerClient

    payload = data
    if as_json:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as e:
            print_error(f"DATA is not valid JSON: {e}")
            raise typer.Exit(1) from None

    async def _push():
        client = ServerClient(server)
        try:
            return await client.push(session_id, event, payload)
        finally:
            await client.close()

    result = _run(_push())
    print_sent(event, session_id, result.get("message_id"))


@app.command("sessions")
def sessions(server: ServerOption = DEFAULT_SERVER):
    """List open sessions."""
    from ..client import ServerClient

    async def _list():
        client = ServerClient(server)
        try:
            return await client.list_sessions()
        finally:
            await client.close()

    result = _run(_list())
    if not result["session_ids"]:
        print_info("No open sessions")
        return

    console.print(sessions_table(result["session_ids"]))


@app.command("close")
def close(
    session_id: Annotated[str, typer.Argument(help="Session id to close")],
    server: ServerOption = DEFAULT_SERVER,
):
    """Close an open session."""
    from ..client import ServerClient

    async def _close():
        client = ServerClient(server)
        try:
            await client.close_session(session_id)
        finally:
            await client.close()

    _run(_close())
    print_success(f"Closed {session_id}")


@app.command("config")
def show_config(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Session config YAML file"),
    ] = None,
):
    """Show the effective session configuration."""
    from ..core.config import SessionConfig

    config = SessionConfig.load(config_path=config_file)
    print_config("Session", config.to_dict())


@app.command("version")
def version():
    """Show version information."""
    from .. import __version__

    console.print(f"ssekit version: {__version__}")


def main() -> None:
    app()
