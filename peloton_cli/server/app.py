"""HTTP endpoint serving the workout history."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from loguru import logger

from peloton_cli import __version__
from peloton_cli.batch import build_client, export_workouts, fetch_raw_csv
from peloton_cli.core.client import PelotonClient, PelotonError
from peloton_cli.core.config import load_config, resolve_credentials
from peloton_cli.core.normalize import records_to_json

ClientFactory = Callable[[Dict[str, Any]], PelotonClient]


def create_app(
    config: Optional[Dict[str, Any]] = None,
    client_factory: ClientFactory = build_client,
) -> FastAPI:
    """Build the app. Credentials are read once, here, not per request."""
    cfg = config if config is not None else load_config()
    username, password = resolve_credentials(cfg)

    app = FastAPI(title="peloton-cli", version=__version__)

    def _error(exc: PelotonError) -> PlainTextResponse:
        logger.error("Workout export failed: {}", exc)
        return PlainTextResponse(str(exc), status_code=500)

    @app.get("/workouts.csv")
    def workouts_csv() -> Response:
        """Raw CSV export as returned by the API."""
        try:
            with client_factory(cfg) as client:
                body = fetch_raw_csv(client, username, password)
        except PelotonError as exc:
            return _error(exc)
        return Response(content=body, status_code=200, headers={"Content-Type": "text/csv"})

    @app.get("/workouts.json")
    def workouts_json() -> Response:
        """Normalized workout records."""
        try:
            with client_factory(cfg) as client:
                records = export_workouts(client, username, password)
        except PelotonError as exc:
            return _error(exc)
        return Response(content=records_to_json(records), status_code=200, media_type="application/json")

    @app.get("/health")
    def health_check() -> Dict[str, str]:
        return {"status": "ok"}

    return app
