"""
validator.py - schema-driven validation engine
==============================================

Walks the data and the compiled schema in lockstep, depth first, and returns
a normalised copy of the data plus a flat map of path-qualified errors.

Public API
----------
SchemaError
    Base exception for fatal problems (broken schema, strict-mode violation).

Validator(schema, *, registry=None)
    Compile *schema* once; call :meth:`Validator.validate` as often as needed.

validate(data, *, schema, registry=None)
    One-shot helper: compile and validate in a single call.

Per field, in order: default substitution for absent values, optional cast,
type check, recursion into arrays / objects, then the declared rules (first
failure wins). A type or cast failure stops that field's pipeline; it never
stops its siblings.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from . import caster
from . import loader
from . import utils
from .compiler import FieldType, Mode, PropertySchema, SchemaRoot, compile_schema
from .exceptions import RuleSyntaxError, SchemaError, StrictModeError
from .rules import RuleRegistry, default_registry
from .utils import MISSING, PathSegment

__all__ = [
    "ErrorEntry",
    "RuleSyntaxError",
    "SchemaError",
    "StrictModeError",
    "ValidationResult",
    "Validator",
    "validate",
]

logger = logging.getLogger(__name__)

UNKNOWN_RULE_ID = "VALIDATION_UNKNOWN_RULE"

# --------------------------------------------------------------------------- #
# Results                                                                     #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class ErrorEntry:
    """One reported problem: a stable ``id`` and a readable message (``value``)."""

    id: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "value": self.value}


@dataclass
class ValidationResult:
    """Outcome of one :meth:`Validator.validate` call.

    ``errors`` is ``None`` (not an empty mapping) when nothing failed.
    """

    success: bool
    data: dict[str, Any]
    errors: Optional[dict[str, ErrorEntry]] = None

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "errors": None if self.errors is None else {p: e.to_dict() for p, e in self.errors.items()},
        }

# --------------------------------------------------------------------------- #
# Type checks                                                                 #
# --------------------------------------------------------------------------- #

_TYPE_CHECKS: dict[FieldType, Callable[[Any], bool]] = {
    FieldType.STRING:  utils._is_string,
    FieldType.INTEGER: utils._is_whole_number,
    FieldType.NUMBER:  utils._is_number,
    FieldType.BOOLEAN: utils._is_bool,
    FieldType.OBJECT:  utils._is_mapping,
    FieldType.ARRAY:   utils._is_sequence,
}

_TYPE_MESSAGES = {
    FieldType.STRING:  "Value is not a string",
    FieldType.INTEGER: "Value is not an integer",
    FieldType.NUMBER:  "Value is not a number",
    FieldType.BOOLEAN: "Value is not a boolean",
    FieldType.OBJECT:  "Value is not an object",
    FieldType.ARRAY:   "Value is not an array",
}

# --------------------------------------------------------------------------- #
# Core recursive walk                                                         #
# --------------------------------------------------------------------------- #

class _Run:
    """State for a single validation call: errors, orphans, the input record."""

    def __init__(self, schema: SchemaRoot, registry: RuleRegistry, record: Mapping[str, Any]):
        self.schema = schema
        self.registry = registry
        self.record = record
        self.errors: dict[str, ErrorEntry] = {}
        self.orphans: list[str] = []

    def error(self, path: list[PathSegment], error_id: str, message: str) -> None:
        # one entry per path; the first problem found wins
        self.errors.setdefault(utils._format_path(path), ErrorEntry(error_id, message))

    def type_error(self, path: list[PathSegment], ftype: FieldType) -> None:
        self.error(path, ftype.error_id, _TYPE_MESSAGES[ftype])

    # -- rules ---------------------------------------------------------------

    def apply_rules(self, value: Any, prop: PropertySchema, path: list[PathSegment]) -> None:
        for descriptor in prop.rules:
            if descriptor.name not in self.registry:
                logger.warning(
                    "Unknown validation rule %r at %s", descriptor.name, utils._format_path(path)
                )
                self.error(path, UNKNOWN_RULE_ID, f"Unknown validation rule '{descriptor.name}'")
                return
            outcome = self.registry.evaluate(descriptor.name, value, descriptor.arguments, self.record)
            if not outcome.valid:
                self.error(path, outcome.error_id, outcome.message)
                return

    def apply_missing_rules(self, prop: PropertySchema, path: list[PathSegment]) -> None:
        for descriptor in prop.rules:
            if descriptor.name not in self.registry:
                continue
            rule = self.registry.get(descriptor.name)
            if not rule.check_missing:
                continue
            if not rule.evaluate(None, descriptor.arguments, self.record):
                self.error(path, rule.error_id, rule.message(descriptor.arguments))
                return

    # -- traversal -----------------------------------------------------------

    def visit_object(
        self,
        value: Mapping[str, Any],
        properties: Mapping[str, PropertySchema],
        path: list[PathSegment],
    ) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, prop in properties.items():
            child = self.visit(value[name] if name in value else MISSING, prop, path + [name])
            if child is not MISSING:
                out[name] = child

        extras = [k for k in value if k not in properties]
        if extras:
            if self.schema.mode is Mode.STRICT:
                self.orphans.extend(utils._format_path(path + [str(k)]) for k in extras)
            elif self.schema.mode is Mode.LOOSE:
                for k in extras:
                    out[k] = value[k]
        return out

    def visit(self, value: Any, prop: PropertySchema, path: list[PathSegment]) -> Any:
        # 1) absent ------------------------------------------------------------
        if value is MISSING:
            if prop.has_default:
                return copy.deepcopy(prop.default)
            if prop.properties is not None and not prop.is_array:
                nested = self.visit_object({}, prop.properties, path)
                self.apply_missing_rules(prop, path)
                return nested if nested else MISSING
            self.apply_missing_rules(prop, path)
            return MISSING

        ftype = prop.field_type

        # 2) cast --------------------------------------------------------------
        if self.schema.cast and prop.is_scalar:
            try:
                value = caster.cast(value, ftype)
            except caster.CastError:
                self.type_error(path, ftype)
                return value

        # 3) type check --------------------------------------------------------
        if not _TYPE_CHECKS[ftype](value):
            self.type_error(path, ftype)
            return value

        # 4) / 5) recursion ----------------------------------------------------
        if prop.is_array:
            if prop.item_schema is None:
                out = list(value)
            else:
                out = [self.visit(item, prop.item_schema, path + [idx]) for idx, item in enumerate(value)]
        elif prop.properties is not None:
            out = self.visit_object(value, prop.properties, path)
        elif ftype is FieldType.OBJECT:
            out = dict(value)
        else:
            out = value

        # 6) rules -------------------------------------------------------------
        self.apply_rules(out, prop, path)
        return out

# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #

class Validator:
    """Compiled schema plus the registry its rules are resolved against."""

    def __init__(self, schema: Any, *, registry: Optional[RuleRegistry] = None):
        self.schema: SchemaRoot = compile_schema(schema)
        self.registry = registry if registry is not None else default_registry

    @classmethod
    def load(cls, path: str | Path, *, registry: Optional[RuleRegistry] = None) -> "Validator":
        """Build a validator from a JSON schema file."""
        return cls(loader.load_schema(path), registry=registry)

    def validate(self, data: Mapping[str, Any]) -> ValidationResult:
        """Validate *data* and return a fresh :class:`ValidationResult`.

        Raises
        ------
        StrictModeError
            ``mode`` is ``strict`` and *data* holds undeclared properties.
        TypeError
            *data* is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Unsupported type for validate: {type(data).__name__}")

        run = _Run(self.schema, self.registry, data)
        out = run.visit_object(data, self.schema.properties, [])

        if run.orphans:
            logger.warning("Strict mode rejected undeclared properties: %s", run.orphans)
            raise StrictModeError(run.orphans)

        errors = run.errors or None
        logger.debug("Validated record: %d error(s)", len(run.errors))
        return ValidationResult(success=errors is None, data=out, errors=errors)


def validate(
    data: Mapping[str, Any],
    *,
    schema: Any,
    registry: Optional[RuleRegistry] = None,
) -> ValidationResult:
    """Compile *schema* and validate *data* against it in one call."""
    return Validator(schema, registry=registry).validate(data)
