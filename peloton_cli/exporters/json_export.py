"""File export helpers."""

from __future__ import annotations

from pathlib import Path


def write_text(path: Path, content: str) -> Path:
    """Write content with a trailing newline and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content if content.endswith("\n") else content + "\n")
    return path


def write_bytes(path: Path, content: bytes) -> Path:
    """Write raw bytes verbatim and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path
