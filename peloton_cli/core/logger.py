"""Logger configuration."""

from __future__ import annotations

import sys

from loguru import logger


def setup_logger(level: str = "INFO") -> None:
    """Configure loguru with a single stderr sink.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
        level=level.upper(),
        colorize=True,
    )


def level_for(verbose: bool, quiet: bool, configured: str = "INFO") -> str:
    """Pick the effective level from CLI flags and config."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return configured.upper()
