"""
utils.py – shared, low-level utilities for the schema-validator package.

This module consolidates common helpers for:
- Type checking (runtime type predicates, ISO-8601 date-time strings)
- Scalar formatting (JSON-flavoured stringification)
- Error paths (lazy rendering of path segments)
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Union

# --------------------------------------------------------------------------- #
# Sentinel                                                                    #
# --------------------------------------------------------------------------- #

class _Missing:
    """Marker for a field that is absent from the data (distinct from None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

# --------------------------------------------------------------------------- #
# Type Checking Helpers                                                       #
# --------------------------------------------------------------------------- #

def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    """True for finite real numbers; booleans are not numbers here."""
    if _is_bool(value) or not isinstance(value, numbers.Real):
        return False
    if isinstance(value, numbers.Integral):
        return True  # arbitrarily large ints overflow float conversion
    return math.isfinite(value)


def _is_whole_number(value: Any) -> bool:
    """True for integers and for floats without a fractional part (``3.0``)."""
    if not _is_number(value):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return float(value).is_integer()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


_DT_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{1,6})?(?:Z|[+\-]\d{2}:\d{2})$")

def _is_datetime(value: Any) -> bool:
    """Return True iff *value* is a valid ISO-8601 date-time string."""
    if not isinstance(value, str) or not _DT_RE.fullmatch(value):
        return False
    from datetime import datetime

    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return True
    except ValueError:
        return False


def _is_empty(value: Any) -> bool:
    """Empty in the "required" sense: None, blank string, empty container."""
    if value is None or value is MISSING:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) == 0
    return False

# --------------------------------------------------------------------------- #
# Formatting Helpers                                                          #
# --------------------------------------------------------------------------- #

def _format_scalar(v: Any) -> str:
    """Return a JSON-flavoured string for a scalar."""
    if v is True:   return "true"
    if v is False:  return "false"
    if v is None:   return "null"
    return str(v)


PathSegment = Union[str, int]

def _format_path(segments: Iterable[PathSegment]) -> str:
    """Render ``["addresses", 0, "street"]`` as ``addresses[0].street``."""
    out: list[str] = []
    for seg in segments:
        if isinstance(seg, int):
            out.append(f"[{seg}]")
        elif out:
            out.append(f".{seg}")
        else:
            out.append(seg)
    return "".join(out)


def _lookup(record: Any, dotted: str) -> Any:
    """Resolve ``a.b.c`` inside nested mappings; MISSING when any hop is absent."""
    current = record
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return MISSING
        current = current[part]
    return current
