"""
frame.py - validate tabular data held in a pandas DataFrame.

Each row is validated as one record. Missing cells (NaN / None / NaT) are
treated as absent fields so schema defaults apply to them.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from . import utils
from .validator import ValidationResult, Validator

__all__ = ["errors_frame", "validate_frame"]

ERROR_COLUMNS = ["row", "path", "id", "message"]


def _is_missing_cell(value: Any) -> bool:
    if utils._is_sequence(value) or utils._is_mapping(value):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def validate_frame(
    validator: Validator,
    frame: pd.DataFrame,
    *,
    drop_missing: bool = True,
) -> list[ValidationResult]:
    """Validate every row of *frame*; results follow row order."""
    if not isinstance(frame, pd.DataFrame):
        raise TypeError(f"Unsupported type for validate_frame: {type(frame).__name__}")

    results: list[ValidationResult] = []
    for row in frame.to_dict(orient="records"):
        record = {
            str(k): v for k, v in row.items()
            if not (drop_missing and _is_missing_cell(v))
        }
        results.append(validator.validate(record))
    return results


def errors_frame(
    results: Iterable[ValidationResult],
    *,
    index: Optional[Sequence[Any]] = None,
) -> pd.DataFrame:
    """Flatten per-row errors into one DataFrame (``row, path, id, message``).

    *index* supplies row labels (e.g. ``frame.index``); positions are used
    otherwise.
    """
    labels = list(index) if index is not None else None
    rows: list[dict[str, Any]] = []
    for pos, result in enumerate(results):
        if not result.errors:
            continue
        label = labels[pos] if labels is not None else pos
        for path, entry in result.errors.items():
            rows.append({"row": label, "path": path, "id": entry.id, "message": entry.value})
    return pd.DataFrame(rows, columns=ERROR_COLUMNS)
