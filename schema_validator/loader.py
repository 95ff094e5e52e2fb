"""
loader.py - read authored schemas from JSON files.

Public API
----------
load_schema(path) : parse the file and return a fresh ``dict``
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

__all__ = ["load_schema"]


def load_schema(path: str | Path) -> dict[str, Any]:
    """Read & parse a JSON schema, raising crisp errors on failure."""
    p = Path(path)
    try:
        with p.open(encoding="utf-8") as fd:
            data = json.load(fd)
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Schema not found: {p}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Schema in {p} must be a JSON object, got {type(data).__name__}")
    return data
