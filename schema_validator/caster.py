"""
caster.py - best-effort coercion of scalar leaves
=================================================

Only used when a schema is compiled with ``cast: true``.

* number / integer targets: ``True`` -> 1, ``False`` -> 0, numeric strings
  are parsed as floats, ``None`` and NaN become 0 (NaN does not survive a
  JSON round trip; it comes back as ``null``). Non-numeric strings fail.
  Integer targets truncate toward zero.
* boolean targets: plain truthiness, never fails.
* string targets: JSON-flavoured stringification, never fails. Scalars use
  ``true`` / ``false`` / ``null``; lists and mappings are dumped as JSON.
"""

from __future__ import annotations

import json
import math
import numbers
import re
from typing import Any

from .compiler import FieldType
from .utils import _format_scalar, _is_mapping, _is_sequence

__all__ = ["CastError", "cast"]


class CastError(ValueError):
    """Raised when *value* cannot be coerced to *target*."""

    def __init__(self, value: Any, target: FieldType):
        self.value = value
        self.target = target
        super().__init__(f"cannot cast {value!r} to {target.value}")


_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$")


def _to_number(value: Any, target: FieldType) -> Any:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, numbers.Integral):
        return value
    if isinstance(value, numbers.Real):
        if math.isnan(value):
            return 0
        if math.isinf(value):
            raise CastError(value, target)
        return value
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        number = float(value)
        if math.isfinite(number):
            return number
    raise CastError(value, target)


def cast(value: Any, target: FieldType | str) -> Any:
    """Coerce *value* to the scalar type *target*.

    Containers are returned untouched; their leaves are cast one by one as the
    validator visits them.

    Raises
    ------
    CastError
        Numeric targets only, for values with no numeric reading.
    """
    target = FieldType.parse(target)

    if target in (FieldType.NUMBER, FieldType.INTEGER):
        number = _to_number(value, target)
        if target is FieldType.INTEGER:
            return int(math.trunc(number))
        return number

    if target is FieldType.BOOLEAN:
        return bool(value)

    if target is FieldType.STRING:
        if isinstance(value, str):
            return value
        if _is_mapping(value) or _is_sequence(value):
            return json.dumps(value, default=str)
        return _format_scalar(value)

    return value
