"""Peloton REST API client with cookie based session auth."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests
from loguru import logger

from peloton_cli.core.constants import (
    API_BASE,
    LOGIN_PATH,
    ME_PATH,
    WORKOUT_HISTORY_CSV_PATH,
    WORKOUTS_PATH,
)
from peloton_cli.core.cookies import cookie_names, new_session
from peloton_cli.core.models import ErrorResponse, UserProfile


class PelotonError(RuntimeError):
    """Base class for client failures."""


class AuthError(PelotonError):
    """Raised when login fails."""


class TransportError(PelotonError):
    """Raised when a request fails on the network or with an error status."""


class DecodeError(PelotonError):
    """Raised when a response body is not the expected JSON."""


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason or ""
    error = ErrorResponse.from_dict(payload)
    return error.message or error.details or str(payload)


class PelotonClient:
    """Thin wrapper around the Peloton REST API.

    One client owns one session; cookies captured by :meth:`login` are sent
    with every later request. Instances are not meant to be shared between
    threads.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = API_BASE,
        timeout_seconds: int = 30,
    ) -> None:
        self.session = session if session is not None else new_session()
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def __enter__(self) -> "PelotonClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("GET {}", url)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"Request failed for GET {path}: {exc}") from exc
        return response

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._get(path, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON from GET {path}: {exc}") from exc

    def login(self, username: Optional[str], password: Optional[str]) -> None:
        """Authenticate and keep the session cookies for later requests."""
        if not username or not password:
            raise AuthError(
                "Missing credentials. Provide --username/--password or "
                "PELOTON_USERNAME/PELOTON_PASSWORD."
            )

        payload = {
            "username_or_email": username,
            "password": password,
            "with_pubsub": False,
        }
        url = f"{self.base_url}{LOGIN_PATH}"
        logger.debug("POST {}", url)
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise AuthError(f"Login request failed: {exc}") from exc

        if not response.ok:
            raise AuthError(f"Login failed ({response.status_code}): {_error_message(response)}")
        accepted = cookie_names(self.session.cookies, set_by=response.cookies)
        if not accepted:
            raise AuthError("Login succeeded but no session cookie was returned")

        logger.info("Logged in, session cookies: {}", ", ".join(accepted))

    def fetch_profile(self) -> UserProfile:
        """Return the authenticated user's profile."""
        payload = self._get_json(ME_PATH)
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object from GET {ME_PATH}")
        return UserProfile.from_dict(payload)

    def fetch_workouts_csv(self, user_id: str) -> bytes:
        """Return the raw workout history export, unmodified."""
        return self._get(WORKOUT_HISTORY_CSV_PATH.format(user_id=user_id)).content

    def fetch_workouts(self, user_id: str, page: int = 0, limit: int = 20) -> Dict[str, Any]:
        """Return one page of the JSON workouts listing."""
        path = WORKOUTS_PATH.format(user_id=user_id)
        payload = self._get_json(path, params={"page": page, "limit": limit})
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object from GET {path}")
        return payload
