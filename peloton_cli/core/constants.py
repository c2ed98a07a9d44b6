"""Static constants for the Peloton CLI."""

from __future__ import annotations

API_BASE = "https://api.onepeloton.com"

LOGIN_PATH = "/auth/login"
ME_PATH = "/api/me"
WORKOUT_HISTORY_CSV_PATH = "/api/user/{user_id}/workout_history_csv"
WORKOUTS_PATH = "/api/user/{user_id}/workouts"

USERNAME_ENV = "PELOTON_USERNAME"
PASSWORD_ENV = "PELOTON_PASSWORD"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
