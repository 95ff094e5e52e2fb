"""
exceptions.py - fatal errors raised by schema-validator.

Per-field problems (type mismatches, failed casts, failed rules) are never
raised; they are collected into :class:`~schema_validator.validator.ValidationResult`.
"""

from __future__ import annotations

__all__ = [
    "SchemaError",
    "RuleSyntaxError",
    "StrictModeError",
]


class SchemaError(ValueError):
    """Raised when a schema is broken or a validation policy is violated."""


class RuleSyntaxError(SchemaError):
    """Raised when a ``validation`` rule string cannot be parsed."""

    def __init__(self, rule_string: str, reason: str):
        self.rule_string = rule_string
        self.reason = reason
        super().__init__(f"Malformed validation rule {rule_string!r}: {reason}")


class StrictModeError(SchemaError):
    """Raised when data carries properties a strict-mode schema does not declare."""

    PREFIX = "Properties not in schema are not allowed in strict mode:"

    def __init__(self, paths: list[str]):
        self.paths = list(paths)
        super().__init__(f"{self.PREFIX} {', '.join(self.paths)}")
