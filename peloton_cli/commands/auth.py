"""Authentication and profile commands."""

from __future__ import annotations

from contextlib import nullcontext
from typing import Optional

import typer
from rich.table import Table

from peloton_cli.commands.common import authenticate, fail, get_state, print_json_payload
from peloton_cli.core.client import PelotonError
from peloton_cli.core.constants import PASSWORD_ENV, USERNAME_ENV

PROFILE_FIELDS = (
    "id",
    "username",
    "name",
    "email",
    "location",
    "cycling_ftp",
    "total_workouts",
    "total_followers",
    "total_following",
)


def login_command(
    ctx: typer.Context,
    username: Optional[str] = typer.Option(None, help="Peloton username or email", envvar=USERNAME_ENV),
    password: Optional[str] = typer.Option(None, help="Peloton password", envvar=PASSWORD_ENV),
) -> None:
    """Verify credentials against the Peloton API."""
    state = get_state(ctx)

    try:
        status_ctx = state.console.status("Authenticating...") if not state.plain_output else nullcontext()
        with status_ctx:
            client, profile = authenticate(state, username=username, password=password)
            client.close()
    except PelotonError as exc:
        fail(state, exc, "Login")

    payload = {
        "status": "success",
        "authenticated": True,
        "user": {
            "id": profile.id,
            "username": profile.username,
            "email": profile.email,
        },
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("status\tsuccess")
        typer.echo(f"user_id\t{profile.id}")
        typer.echo(f"username\t{profile.username}")
        typer.echo(f"email\t{profile.email}")
        return

    state.console.print("Login successful")
    state.console.print(f"User: {profile.username} ({profile.id})")


def profile_command(ctx: typer.Context) -> None:
    """Show the authenticated user's profile."""
    state = get_state(ctx)

    try:
        client, profile = authenticate(state)
        client.close()
    except PelotonError as exc:
        fail(state, exc, "Profile")

    if state.json_output:
        print_json_payload(state, profile.to_dict())
        return

    if state.plain_output:
        for key in PROFILE_FIELDS:
            typer.echo(f"{key}\t{getattr(profile, key)}")
        return

    table = Table(title=f"Profile {profile.username}")
    table.add_column("Field")
    table.add_column("Value")
    for key in PROFILE_FIELDS:
        table.add_row(key, str(getattr(profile, key)))
    for count in profile.workout_counts:
        if count.count:
            table.add_row(f"workouts: {count.name}", str(count.count))
    state.console.print(table)
