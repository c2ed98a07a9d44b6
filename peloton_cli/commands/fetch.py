"""Workout history commands."""

from __future__ import annotations

from collections import Counter
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import typer
from rich.table import Table

from peloton_cli.batch import build_client, export_workouts, fetch_raw_csv
from peloton_cli.commands.common import authenticate, fail, get_state, print_json_payload
from peloton_cli.core.client import PelotonError
from peloton_cli.core.config import resolve_credentials, resolve_output_dir
from peloton_cli.core.models import WorkoutRecord
from peloton_cli.core.normalize import normalize, records_from_json, records_to_dicts, records_to_json
from peloton_cli.core.state import CLIState
from peloton_cli.exporters.json_export import write_bytes, write_text


def _summary(records: Sequence[WorkoutRecord]) -> Dict[str, Any]:
    by_discipline = Counter(record.fitness_discipline or "other" for record in records)
    return {
        "total": len(records),
        "by_discipline": dict(by_discipline),
        "total_output": sum(record.total_output for record in records),
    }


def _records_table(records: Sequence[WorkoutRecord], limit: int = 30) -> Table:
    table = Table(title=f"Workouts ({len(records)} total)")
    table.add_column("Date")
    table.add_column("Discipline")
    table.add_column("Instructor")
    table.add_column("Title")
    table.add_column("Length")
    table.add_column("Output")

    for record in records[:limit]:
        table.add_row(
            record.workout_timestamp,
            record.fitness_discipline,
            record.instructor_name,
            record.title,
            f"{record.length // 60} min" if record.length else "-",
            str(record.total_output) if record.total_output else "-",
        )
    return table


def _resolve_output_path(state_config: Dict[str, Any], output: Path) -> Path:
    if output.is_absolute() or output.parent != Path("."):
        return output.expanduser().resolve()
    return resolve_output_dir(state_config) / output


def _emit_records(state: CLIState, records: List[WorkoutRecord], output: Optional[Path]) -> None:
    if output is not None:
        path = write_text(_resolve_output_path(state.config, output), records_to_json(records))
        if state.json_output:
            print_json_payload(state, {"status": "exported", "file": str(path), "summary": _summary(records)})
        elif state.plain_output:
            typer.echo(f"total\t{len(records)}")
            typer.echo(f"file\t{path}")
        else:
            state.console.print(f"Exported {len(records)} workouts to: {path}")
        return

    if state.json_output:
        print_json_payload(state, records_to_dicts(records))
        return

    if state.plain_output:
        typer.echo(records_to_json(records))
        return

    state.console.print(_records_table(records))
    summary = _summary(records)
    state.console.print(f"Fetched {summary['total']} workouts")


def fetch_command(
    ctx: typer.Context,
    raw_csv: bool = typer.Option(False, "--csv", help="Output the raw CSV export instead of JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
) -> None:
    """Download the workout history and convert it to JSON."""
    state = get_state(ctx)
    username, password = resolve_credentials(state.config)

    status_ctx = state.console.status("Fetching workout history...") if not state.plain_output else nullcontext()
    try:
        with status_ctx, build_client(state.config) as client:
            if raw_csv:
                body = fetch_raw_csv(client, username, password)
            else:
                records = export_workouts(client, username, password)
    except PelotonError as exc:
        fail(state, exc, "Fetch")

    if not raw_csv:
        _emit_records(state, records, output)
        return

    if output is not None:
        path = write_bytes(_resolve_output_path(state.config, output), body)
        if state.json_output:
            print_json_payload(state, {"status": "exported", "file": str(path), "bytes": len(body)})
        elif state.plain_output:
            typer.echo(f"file\t{path}")
        else:
            state.console.print(f"Exported raw CSV to: {path}")
        return

    typer.echo(body.decode("utf-8", errors="replace"), nl=False)


def workouts_command(
    ctx: typer.Context,
    page: int = typer.Option(0, min=0, help="Page number"),
    limit: int = typer.Option(20, min=1, help="Workouts per page"),
) -> None:
    """Show one page of the JSON workouts listing."""
    state = get_state(ctx)

    try:
        client, profile = authenticate(state)
        with client:
            payload = client.fetch_workouts(profile.id, page=page, limit=limit)
    except PelotonError as exc:
        fail(state, exc, "Workouts")

    if state.json_output or state.plain_output:
        print_json_payload(state, payload)
        return

    items = payload.get("data") or []
    table = Table(title=f"Workouts page {page} ({len(items)} shown, {payload.get('total', '?')} total)")
    table.add_column("ID")
    table.add_column("Discipline")
    table.add_column("Status")
    table.add_column("Created")
    for item in items:
        if not isinstance(item, dict):
            continue
        table.add_row(
            str(item.get("id", "")),
            str(item.get("fitness_discipline", "")),
            str(item.get("status", "")),
            str(item.get("created_at", "")),
        )
    state.console.print(table)


def normalize_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Workout history CSV file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
) -> None:
    """Convert a downloaded workout history CSV to JSON without logging in.

    A ``.json`` file is read back as an earlier export instead.
    """
    state = get_state(ctx)
    if file.suffix.lower() == ".json":
        try:
            records = records_from_json(file.read_text(encoding="utf-8"))
        except ValueError as exc:
            fail(state, exc, "Normalize")
    else:
        records = normalize(file.read_bytes())
    _emit_records(state, records, output)
