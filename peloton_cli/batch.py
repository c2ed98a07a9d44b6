"""One-shot export entry points."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger

from peloton_cli.core.client import PelotonClient
from peloton_cli.core.config import load_config, resolve_credentials
from peloton_cli.core.models import WorkoutRecord
from peloton_cli.core.normalize import normalize, records_to_json


def build_client(config: Dict[str, Any]) -> PelotonClient:
    """Create a client with the configured API settings."""
    api_cfg = config.get("api", {})
    kwargs: Dict[str, Any] = {"timeout_seconds": int(api_cfg.get("timeout_seconds", 30))}
    if api_cfg.get("base_url"):
        kwargs["base_url"] = str(api_cfg["base_url"])
    return PelotonClient(**kwargs)


def fetch_raw_csv(client: PelotonClient, username: Optional[str], password: Optional[str]) -> bytes:
    """Login, look up the user and download the raw CSV export."""
    client.login(username, password)
    profile = client.fetch_profile()
    logger.debug("Fetching workout history for user {}", profile.id)
    return client.fetch_workouts_csv(profile.id)


def export_workouts(
    client: PelotonClient,
    username: Optional[str],
    password: Optional[str],
) -> List[WorkoutRecord]:
    """Run the full login -> profile -> CSV -> normalize flow."""
    records = normalize(fetch_raw_csv(client, username, password))
    logger.info("Normalized {} workouts", len(records))
    return records


def run_batch(config: Optional[Dict[str, Any]] = None) -> str:
    """Export the configured user's workouts as indented JSON.

    Every call logs in again with a new session. Client errors propagate.
    """
    cfg = config if config is not None else load_config()
    username, password = resolve_credentials(cfg)
    with build_client(cfg) as client:
        return records_to_json(export_workouts(client, username, password))


def lambda_handler(event: Any, context: Any) -> str:
    """AWS Lambda handler; the triggering event is not inspected."""
    del event, context
    return run_batch()
