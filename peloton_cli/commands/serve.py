"""HTTP server command."""

from __future__ import annotations

from typing import Optional

import typer
import uvicorn
from loguru import logger

from peloton_cli.commands.common import get_state
from peloton_cli.server.app import create_app


def serve_command(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to"),
) -> None:
    """Serve /workouts.csv and /workouts.json over HTTP."""
    state = get_state(ctx)
    server_cfg = state.config.get("server", {})
    bind_host = host or str(server_cfg.get("host", "127.0.0.1"))
    bind_port = port or int(server_cfg.get("port", 8080))

    app = create_app(state.config)
    logger.info("Starting server on {}:{}", bind_host, bind_port)
    uvicorn.run(app, host=bind_host, port=bind_port, log_level="debug" if state.verbose else "info")
