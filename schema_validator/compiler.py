"""
compiler.py - authored schema -> immutable compiled schema tree
==============================================================

Authored schemas are plain mappings::

    {
        "mode": "filter",            # strict | loose | filter (default)
        "cast": False,               # best-effort coercion of scalar leaves
        "properties": {
            "age":    {"type": "int", "validation": "betweenNumber[0,130]"},
            "skills": {"type": "array", "schema": {"type": "string"}},
            "tags":   {"type": "string", "array": True},
            "address": {"type": "object", "properties": {...}},
        },
    }

:func:`compile_schema` resolves type synonyms, normalises both array
notations into one shape, parses every ``validation`` rule string and copies
everything it keeps, so the result never aliases caller-owned structures.

Public API
----------
`compile_schema(raw) -> SchemaRoot`
`SchemaRoot`, `PropertySchema`, `FieldType`, `Mode`
"""

from __future__ import annotations

import copy
import enum
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .exceptions import SchemaError
from .parser import RuleDescriptor, parse_rules
from .utils import MISSING, _format_path

__all__ = [
    "FieldType",
    "Mode",
    "PropertySchema",
    "SchemaRoot",
    "compile_schema",
]

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, Any] = MappingProxyType({})

# --------------------------------------------------------------------------- #
# Enumerations                                                                #
# --------------------------------------------------------------------------- #

class FieldType(str, enum.Enum):
    """Closed set of property types; synonyms resolve at compile time."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"

    @classmethod
    def parse(cls, name: Any) -> "FieldType":
        if isinstance(name, FieldType):
            return name
        if isinstance(name, str):
            key = name.strip().lower()
            key = _TYPE_ALIASES.get(key, key)
            try:
                return cls(key)
            except ValueError:
                pass
        raise SchemaError(f"unknown type {name!r}")

    @property
    def is_scalar(self) -> bool:
        return self not in (FieldType.OBJECT, FieldType.ARRAY)

    @property
    def error_id(self) -> str:
        return f"VALIDATION_ERROR_NOT_{self.name}"


_TYPE_ALIASES = {
    "int": "integer",
    "float": "number",
    "bool": "boolean",
}


class Mode(str, enum.Enum):
    """Policy for data keys an object schema does not declare."""

    STRICT = "strict"
    LOOSE = "loose"
    FILTER = "filter"

# --------------------------------------------------------------------------- #
# Compiled tree                                                               #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class PropertySchema:
    """Compiled definition of one field."""

    field_type: FieldType
    is_array: bool = False
    properties: Optional[Mapping[str, "PropertySchema"]] = None
    item_schema: Optional["PropertySchema"] = None
    rules: tuple[RuleDescriptor, ...] = ()
    default: Any = MISSING
    extras: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def is_scalar(self) -> bool:
        return not self.is_array and self.field_type.is_scalar

    def to_dict(self) -> dict[str, Any]:
        """Render back into the authored shape (canonical spelling)."""
        out: dict[str, Any] = {"type": self.field_type.value}
        if self.item_schema is not None:
            out["schema"] = self.item_schema.to_dict()
        if self.properties is not None:
            out["properties"] = {k: v.to_dict() for k, v in self.properties.items()}
        if self.rules:
            out["validation"] = [r.to_dict() for r in self.rules]
        if self.has_default:
            out["default"] = copy.deepcopy(self.default)
        out.update(copy.deepcopy(dict(self.extras)))
        return out


@dataclass(frozen=True)
class SchemaRoot:
    """Top-level compiled schema. Read-only once built."""

    mode: Mode = Mode.FILTER
    cast: bool = False
    properties: Mapping[str, PropertySchema] = field(default_factory=lambda: _EMPTY)
    extras: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "mode": self.mode.value,
            "cast": self.cast,
            "properties": {k: v.to_dict() for k, v in self.properties.items()},
        }
        out.update(copy.deepcopy(dict(self.extras)))
        return out

# --------------------------------------------------------------------------- #
# Compilation                                                                 #
# --------------------------------------------------------------------------- #

_ROOT_KEYS = {"mode", "cast", "properties"}
_PROPERTY_KEYS = {"type", "array", "schema", "properties", "validation", "default"}


def _compile_rules(raw: Any, path: list[str]) -> tuple[RuleDescriptor, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return parse_rules(raw)
    if isinstance(raw, (list, tuple)):
        # already compiled: pass through (string items are parsed in place)
        rules: list[RuleDescriptor] = []
        for item in raw:
            if isinstance(item, str):
                rules.extend(parse_rules(item))
            else:
                try:
                    rules.append(RuleDescriptor.from_value(item))
                except (TypeError, KeyError) as exc:
                    raise SchemaError(f"{_format_path(path)}: invalid validation entry {item!r}") from exc
        return tuple(rules)
    raise SchemaError(
        f"{_format_path(path)}: 'validation' must be a string or a list, got {type(raw).__name__}"
    )


def _compile_properties(raw: Any, path: list[str]) -> Mapping[str, PropertySchema]:
    if raw is None:
        return _EMPTY
    if not isinstance(raw, Mapping):
        where = _format_path(path) or "schema"
        raise SchemaError(f"{where}: 'properties' must be a mapping, got {type(raw).__name__}")
    return MappingProxyType({
        str(name): _compile_property(spec, path + [str(name)])
        for name, spec in raw.items()
    })


def _compile_property(raw: Any, path: list[str]) -> PropertySchema:
    if isinstance(raw, PropertySchema):
        return raw
    if not isinstance(raw, Mapping):
        raise SchemaError(f"{_format_path(path)}: property definition must be a mapping")

    if "type" in raw:
        try:
            ftype = FieldType.parse(raw["type"])
        except SchemaError as exc:
            raise SchemaError(f"{_format_path(path)}: {exc}") from None
    elif "properties" in raw:
        ftype = FieldType.OBJECT  # implicit object when only `properties` is present
    else:
        raise SchemaError(f"{_format_path(path)}: property has no 'type'")

    extras = MappingProxyType(copy.deepcopy({k: v for k, v in raw.items() if k not in _PROPERTY_KEYS}))
    default = copy.deepcopy(raw["default"]) if "default" in raw else MISSING
    rules = _compile_rules(raw.get("validation"), path)

    # 1) `type: array` + optional `schema` describing the items -------------
    if ftype is FieldType.ARRAY:
        if raw.get("array"):
            raise SchemaError(f"{_format_path(path)}: 'array: true' cannot be combined with type 'array'")
        item_raw = raw.get("schema")
        item = _compile_property(item_raw, path) if item_raw is not None else None
        return PropertySchema(
            field_type=FieldType.ARRAY,
            is_array=True,
            item_schema=item,
            rules=rules,
            default=default,
            extras=extras,
        )

    properties = None
    if ftype is FieldType.OBJECT and "properties" in raw:
        properties = _compile_properties(raw["properties"], path)

    # 2) scalar/object `type` + `array: true` -> same shape as (1) ----------
    if raw.get("array"):
        item = PropertySchema(field_type=ftype, properties=properties, rules=rules)
        return PropertySchema(
            field_type=FieldType.ARRAY,
            is_array=True,
            item_schema=item,
            default=default,
            extras=extras,
        )

    return PropertySchema(
        field_type=ftype,
        properties=properties,
        rules=rules,
        default=default,
        extras=extras,
    )


def compile_schema(raw: Any) -> SchemaRoot:
    """Compile an authored schema mapping into a :class:`SchemaRoot`.

    Compiling an already-compiled schema (or its ``to_dict()`` rendering) is
    a no-op.

    Raises
    ------
    SchemaError
        Unknown type names, invalid ``mode``, malformed definitions.
    RuleSyntaxError
        A ``validation`` string cannot be parsed.
    """
    if isinstance(raw, SchemaRoot):
        return raw
    if not isinstance(raw, Mapping):
        raise SchemaError(f"schema must be a mapping, got {type(raw).__name__}")

    try:
        mode = Mode(raw.get("mode") or Mode.FILTER.value)
    except ValueError:
        raise SchemaError(
            f"invalid mode {raw.get('mode')!r}; expected one of {[m.value for m in Mode]}"
        ) from None

    root = SchemaRoot(
        mode=mode,
        cast=bool(raw.get("cast", False)),
        properties=_compile_properties(raw.get("properties"), []),
        extras=MappingProxyType(copy.deepcopy({k: v for k, v in raw.items() if k not in _ROOT_KEYS})),
    )
    logger.debug(
        "Compiled schema: %d properties, mode=%s, cast=%s",
        len(root.properties), root.mode.value, root.cast,
    )
    return root
