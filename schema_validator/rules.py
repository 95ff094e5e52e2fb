"""
rules.py - named validation rules
=================================

A rule is a predicate ``(value, arguments, record) -> bool`` plus a message
template. Rules are looked up by name when a field is validated, so new ones
are added by registering them; the validator itself knows no rule names.

    from schema_validator import register_rule

    register_rule(
        "startsWith",
        lambda value, args, record: value.startswith(args[0]),
        "Value should start with {0}",
    )

Templates substitute ``{0}``, ``{1}``... with the n-th argument (keyed
arguments render their value) and ``{key}`` with a keyed argument.

Public API
----------
`Rule`, `RuleOutcome`, `RuleRegistry`
`default_registry` - shared registry holding the built-in rules
`register_rule(name, predicate, message, **kwargs)` - add to `default_registry`
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from . import utils
from .exceptions import SchemaError
from .parser import Argument, KeyedArgument

__all__ = [
    "Rule",
    "RuleOutcome",
    "RuleRegistry",
    "default_registry",
    "register_rule",
]

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Sequence[Argument], Mapping[str, Any]], bool]

# --------------------------------------------------------------------------- #
# Argument helpers                                                            #
# --------------------------------------------------------------------------- #

def positional(args: Iterable[Argument]) -> list[Any]:
    return [a for a in args if not isinstance(a, KeyedArgument)]


def keyed(args: Iterable[Argument]) -> dict[str, str]:
    return {a.key: a.value for a in args if isinstance(a, KeyedArgument)}


def _number_arg(rule: str, args: Sequence[Argument], index: int) -> float:
    values = positional(args)
    try:
        return float(values[index])
    except (IndexError, TypeError, ValueError):
        raise SchemaError(f"rule {rule!r} needs a numeric argument at position {index}") from None


_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

def render_message(template: str, args: Sequence[Argument]) -> str:
    """Substitute ``{0}``/``{key}`` placeholders; unknown ones stay as written."""
    named = keyed(args)

    def _sub(m: re.Match) -> str:
        token = m.group(1)
        if token.isdigit():
            idx = int(token)
            if idx < len(args):
                arg = args[idx]
                return arg.value if isinstance(arg, KeyedArgument) else utils._format_scalar(arg)
            return m.group(0)
        return named.get(token, m.group(0))

    return _PLACEHOLDER_RE.sub(_sub, template)


def _default_error_id(name: str) -> str:
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name)
    snake = re.sub(r"\W+", "_", snake)
    return f"VALIDATION_FAILED_{snake.upper()}"

# --------------------------------------------------------------------------- #
# Rule & registry                                                             #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class RuleOutcome:
    """Result of evaluating one rule against one value."""

    valid: bool
    error_id: str = ""
    message: str = ""


class Rule:
    """A named predicate with its message template."""

    def __init__(
        self,
        name: str,
        predicate: Predicate,
        message: str,
        *,
        error_id: Optional[str] = None,
        check_missing: bool = False,
    ):
        self.name = name
        self.predicate = predicate
        self.template = message
        self.error_id = error_id or _default_error_id(name)
        # also evaluated (with value None) when the field is absent
        self.check_missing = check_missing

    def evaluate(self, value: Any, args: Sequence[Argument], record: Mapping[str, Any]) -> bool:
        return bool(self.predicate(value, args, record))

    def message(self, args: Sequence[Argument]) -> str:
        return render_message(self.template, args)

    def __repr__(self) -> str:
        return f"Rule({self.name!r}, error_id={self.error_id!r})"


class RuleRegistry:
    """Mapping from rule name to :class:`Rule`."""

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: dict[str, Rule] = {}
        for r in rules:
            self._rules[r.name] = r

    def register(
        self,
        name: str,
        predicate: Predicate,
        message: str,
        *,
        error_id: Optional[str] = None,
        check_missing: bool = False,
    ) -> Rule:
        """Add (or replace) the rule *name* and return it."""
        if not name or not isinstance(name, str):
            raise ValueError("rule name must be a non-empty string")
        if name in self._rules:
            logger.debug("Replacing validation rule %r", name)
        else:
            logger.debug("Registering validation rule %r", name)
        new = Rule(name, predicate, message, error_id=error_id, check_missing=check_missing)
        self._rules[name] = new
        return new

    def rule(self, name: str, message: str, **kwargs: Any) -> Callable[[Predicate], Predicate]:
        """Decorator form of :meth:`register`."""
        def decorator(fn: Predicate) -> Predicate:
            self.register(name, fn, message, **kwargs)
            return fn
        return decorator

    def get(self, name: str) -> Rule:
        try:
            return self._rules[name]
        except KeyError:
            raise KeyError(f"unknown validation rule {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def names(self) -> list[str]:
        return sorted(self._rules)

    def copy(self) -> "RuleRegistry":
        """Independent registry with the same rules (for local extensions)."""
        return RuleRegistry(self._rules.values())

    def evaluate(
        self,
        name: str,
        value: Any,
        args: Sequence[Argument],
        record: Mapping[str, Any],
    ) -> RuleOutcome:
        r = self.get(name)
        if r.evaluate(value, args, record):
            return RuleOutcome(True)
        return RuleOutcome(False, r.error_id, r.message(args))


default_registry = RuleRegistry()


def register_rule(
    name: str,
    predicate: Predicate,
    message: str,
    *,
    error_id: Optional[str] = None,
    check_missing: bool = False,
) -> Rule:
    """Register *predicate* as rule *name* in :data:`default_registry`."""
    return default_registry.register(
        name, predicate, message, error_id=error_id, check_missing=check_missing
    )

# --------------------------------------------------------------------------- #
# Built-in rules                                                              #
# --------------------------------------------------------------------------- #

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_US_RE = re.compile(r"^(\+?1-?)?(\([2-9]([02-9]\d|1[02-9])\)|[2-9]([02-9]\d|1[02-9]))-?[2-9]\d{2}-?\d{4}$")
_PHONE_GB_RE = re.compile(
    r"^(?:(?:\(?(?:0(?:0|11)\)?[\s-]?\(?|\+)44\)?[\s-]?(?:\(?0\)?[\s-]?)?)|(?:\(?0))"
    r"(?:\d{2}\)?[\s-]?\d{4}[\s-]?\d{4}|\d{3}\)?[\s-]?\d{3}[\s-]?\d{3,4}"
    r"|\d{4}\)?[\s-]?(?:\d{5}|\d{3}[\s-]?\d{3})|\d{5}\)?[\s-]?\d{4,5})$"
)


@default_registry.rule("email", "Value is not a valid email address")
def _email(value, args, record):
    return isinstance(value, str) and bool(_EMAIL_RE.match(value))


@default_registry.rule("betweenNumber", "Value should be between {0} and {1}")
def _between_number(value, args, record):
    low = _number_arg("betweenNumber", args, 0)
    high = _number_arg("betweenNumber", args, 1)
    return utils._is_number(value) and low <= value <= high


@default_registry.rule("equals", "Value should be equal to {0}")
def _equals(value, args, record):
    other = positional(args)
    if not other:
        raise SchemaError("rule 'equals' needs the name of the field to compare with")
    return value == utils._lookup(record, str(other[0]))


def _matches(actual: Any, expected: str) -> bool:
    if actual is utils.MISSING:
        return False
    return actual == expected or utils._format_scalar(actual) == expected


@default_registry.rule("required", "Value is required", check_missing=True)
def _required(value, args, record):
    conditions = keyed(args)
    if conditions and not all(_matches(utils._lookup(record, k), v) for k, v in conditions.items()):
        return True
    return not utils._is_empty(value)


@default_registry.rule("phoneUS", "Value is not a valid US phone number")
def _phone_us(value, args, record):
    return isinstance(value, str) and bool(_PHONE_US_RE.match(re.sub(r"\s+", "", value)))


@default_registry.rule("phoneGB", "Value is not a valid GB phone number")
def _phone_gb(value, args, record):
    return isinstance(value, str) and bool(_PHONE_GB_RE.match(value.strip()))


@default_registry.rule("oneOf", "Value should be one of the allowed values")
def _one_of(value, args, record):
    allowed = positional(args)
    return value in allowed or utils._format_scalar(value) in allowed


@default_registry.rule("dateTime", "Value is not an ISO-8601 date-time")
def _date_time(value, args, record):
    return utils._is_datetime(value)


def _has_length(value: Any) -> bool:
    return utils._is_string(value) or utils._is_sequence(value) or utils._is_mapping(value)


@default_registry.rule("minLength", "Value should have a length of at least {0}")
def _min_length(value, args, record):
    return _has_length(value) and len(value) >= _number_arg("minLength", args, 0)


@default_registry.rule("maxLength", "Value should have a length of at most {0}")
def _max_length(value, args, record):
    return _has_length(value) and len(value) <= _number_arg("maxLength", args, 0)
