"""Workout history CSV to JSON conversion."""

from __future__ import annotations

import json
import re
from dataclasses import replace
from typing import Any, Callable, Dict, List, Sequence, Tuple, Union

from peloton_cli.core.models import WorkoutRecord

Converter = Callable[[str], Any]

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _atoi(raw: str) -> int:
    """Parse a plain ASCII decimal integer with an optional sign."""
    if not _INTEGER.fullmatch(raw):
        raise ValueError(f"invalid integer: {raw!r}")
    return int(raw)


# Column order of the workout_history_csv export. Index in the row -> (field, converter).
COLUMNS: Tuple[Tuple[str, Converter], ...] = (
    ("workout_timestamp", str),
    ("live", str),
    ("instructor_name", str),
    ("length", _atoi),
    ("fitness_discipline", str),
    ("type", str),
    ("title", str),
    ("class_timestamp", str),
    ("total_output", _atoi),
    ("avg_watts", _atoi),
    ("avg_resistance", str),
    ("avg_cadence", _atoi),
    ("avg_speed", str),
    ("distance", str),
    ("calories_burned", str),
    ("avg_heartrate", str),
    ("avg_incline", str),
    ("avg_pace", str),
)

FIELD_NAMES: Tuple[str, ...] = tuple(name for name, _ in COLUMNS)
INTEGER_FIELDS = frozenset(name for name, convert in COLUMNS if convert is _atoi)


def parse_row(fields: Sequence[str]) -> WorkoutRecord:
    """Map one split CSV row onto a record.

    Columns past the known layout are ignored and missing columns keep their
    defaults. A value that fails integer conversion leaves the field at 0.
    """
    values: Dict[str, Any] = {}
    for (name, convert), raw in zip(COLUMNS, fields):
        try:
            values[name] = convert(raw)
        except ValueError:
            continue
    return replace(WorkoutRecord(), **values)


def normalize(raw_csv: Union[bytes, str]) -> List[WorkoutRecord]:
    """Convert a raw workout history export into records.

    Line 0 is the header and is always skipped. Lines whose first field is
    empty, such as the trailing blank line of the export, produce no record.
    Fields are split on bare commas; quoted values containing commas are not
    supported.
    """
    text = raw_csv.decode("utf-8", errors="replace") if isinstance(raw_csv, bytes) else raw_csv

    records: List[WorkoutRecord] = []
    for line in text.split("\n")[1:]:
        fields = line.split(",")
        if fields[0] == "":
            continue
        records.append(parse_row(fields))
    return records


def records_to_dicts(records: Sequence[WorkoutRecord]) -> List[Dict[str, Any]]:
    return [record.to_dict() for record in records]


def records_to_json(records: Sequence[WorkoutRecord]) -> str:
    """Serialize records as a two-space indented JSON array."""
    return json.dumps(records_to_dicts(records), indent=2)


def records_from_json(text: str) -> List[WorkoutRecord]:
    """Decode the output of :func:`records_to_json`."""
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON array of workout records")
    return [WorkoutRecord.from_dict(item) for item in payload if isinstance(item, dict)]
