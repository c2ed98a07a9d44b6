"""Shared command helpers."""

from __future__ import annotations

import json
from typing import Any, NoReturn, Optional, Tuple

import typer

from peloton_cli.batch import build_client
from peloton_cli.core.client import PelotonClient, PelotonError
from peloton_cli.core.config import resolve_credentials
from peloton_cli.core.models import UserProfile
from peloton_cli.core.state import CLIState


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def authenticate(
    state: CLIState,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> Tuple[PelotonClient, UserProfile]:
    """Login and return (client, profile)."""
    cfg_username, cfg_password = resolve_credentials(state.config)
    client = build_client(state.config)
    try:
        client.login(username or cfg_username, password or cfg_password)
        profile = client.fetch_profile()
    except PelotonError:
        client.close()
        raise
    return client, profile


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def fail(state: CLIState, exc: Exception, action: str) -> NoReturn:
    """Report an error in the selected output mode and exit 1."""
    if state.json_output:
        print_json_payload(state, {"status": "error", "message": str(exc)})
    elif state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"message\t{exc}")
    else:
        state.console.print(f"{action} failed: {exc}")
    raise typer.Exit(code=1)
