"""Configuration loading."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from loguru import logger

from peloton_cli.core.constants import (
    API_BASE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    PASSWORD_ENV,
    USERNAME_ENV,
)


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("PELOTON_CONFIG_FILE", "~/.config/peloton/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    return {
        "auth": {
            "username": None,
            "password": None,
            "username_env": USERNAME_ENV,
            "password_env": PASSWORD_ENV,
        },
        "api": {
            "base_url": API_BASE,
            "timeout_seconds": 30,
        },
        "server": {
            "host": DEFAULT_HOST,
            "port": DEFAULT_PORT,
        },
        "export": {
            "default_directory": "./workouts",
        },
        "logging": {
            "level": "INFO",
        },
    }


DEFAULT_CONFIG: Dict[str, Any] = _default_config()


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()

    if cfg_path.exists():
        cfg = _deep_merge(cfg, _read_config(cfg_path))

    level = cfg.get("logging", {}).get("level", "INFO")
    try:
        logger.level(str(level).upper())
    except ValueError as exc:
        raise ConfigError(f"Unknown logging.level {level!r} in {cfg_path}") from exc

    return cfg


def resolve_credentials(config: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """Return (username, password), environment first, then config file."""
    auth_cfg = config.get("auth", {})
    username_env = auth_cfg.get("username_env") or USERNAME_ENV
    password_env = auth_cfg.get("password_env") or PASSWORD_ENV

    username = os.getenv(username_env) or auth_cfg.get("username") or None
    password = os.getenv(password_env) or auth_cfg.get("password") or None
    return username, password


def resolve_output_dir(config: Dict[str, Any], explicit: Optional[Path] = None) -> Path:
    """Resolve output directory with CLI override first."""
    if explicit is not None:
        return explicit.expanduser().resolve()
    raw = os.getenv("PELOTON_OUTPUT_DIR") or config.get("export", {}).get(
        "default_directory",
        "./workouts",
    )
    return expand_path(raw)
