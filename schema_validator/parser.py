"""
parser.py - validation rule-string parser
=========================================

Property definitions carry their validation rules as one compact string::

    "phoneUS|required[email=no]|equals[phone2]"

Directives are separated by ``|``; each is either a bare ``name`` or
``name[args]`` where *args* is a comma-separated list of positional tokens
and ``key=value`` pairs (order preserved, mixing allowed).

Public API
----------
`parse_rules(rule_string: str) -> tuple[RuleDescriptor, ...]`
    Split *rule_string* into ordered, structured rule descriptors.

`RuleDescriptor` / `KeyedArgument`
    Immutable results of the parse.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Union

from .exceptions import RuleSyntaxError

__all__ = [
    "KeyedArgument",
    "RuleDescriptor",
    "parse_rules",
]

# --------------------------------------------------------------------------- #
# Descriptors                                                                 #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class KeyedArgument:
    """A ``key=value`` rule argument."""

    key: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}


Argument = Union[str, KeyedArgument]


@dataclass(frozen=True)
class RuleDescriptor:
    """One parsed validation directive: a rule name and its arguments."""

    name: str
    arguments: tuple[Argument, ...] = ()

    @property
    def positional(self) -> list[str]:
        return [a for a in self.arguments if not isinstance(a, KeyedArgument)]

    @property
    def keyed(self) -> dict[str, str]:
        return {a.key: a.value for a in self.arguments if isinstance(a, KeyedArgument)}

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "arguments": [a.to_dict() if isinstance(a, KeyedArgument) else a for a in self.arguments],
        }

    @classmethod
    def from_value(cls, value: Any) -> "RuleDescriptor":
        """Accept an existing descriptor or its ``to_dict()`` form."""
        if isinstance(value, RuleDescriptor):
            return value
        if isinstance(value, Mapping) and "name" in value:
            args: list[Argument] = []
            for arg in value.get("arguments") or ():
                if isinstance(arg, KeyedArgument):
                    args.append(arg)
                elif isinstance(arg, Mapping):
                    args.append(KeyedArgument(str(arg["key"]), str(arg["value"])))
                else:
                    args.append(arg)
            return cls(name=str(value["name"]), arguments=tuple(args))
        raise TypeError(f"Cannot build a rule descriptor from {value!r}")

# --------------------------------------------------------------------------- #
# Parsing                                                                     #
# --------------------------------------------------------------------------- #

_DIRECTIVE_RE = re.compile(r"^(?P<name>[^\[\]|]+?)(?:\[(?P<args>[^\[\]]*)\])?$")


def _unquote(token: str) -> str:
    """Drop one pair of matching surrounding quotes (``"no"`` -> ``no``)."""
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"'":
        return token[1:-1]
    return token


def _split_directives(rule_string: str) -> list[str]:
    """Split on top-level ``|`` while checking bracket balance."""
    parts: list[str] = []
    buf: list[str] = []
    depth = 0
    for ch in rule_string:
        if ch == "[":
            depth += 1
            if depth > 1:
                raise RuleSyntaxError(rule_string, "nested '[' is not supported")
        elif ch == "]":
            depth -= 1
            if depth < 0:
                raise RuleSyntaxError(rule_string, "']' without matching '['")
        elif ch == "|" and depth == 0:
            parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    if depth:
        raise RuleSyntaxError(rule_string, "unmatched '['")
    parts.append("".join(buf))
    return parts


def _parse_arguments(raw: str) -> tuple[Argument, ...]:
    if raw == "":
        return ()
    args: list[Argument] = []
    for token in raw.split(","):
        if "=" in token:
            key, value = token.split("=", 1)
            args.append(KeyedArgument(key, _unquote(value)))
        else:
            args.append(_unquote(token))
    return tuple(args)


def parse_rules(rule_string: str) -> tuple[RuleDescriptor, ...]:
    """Parse *rule_string* into an ordered tuple of :class:`RuleDescriptor`.

    Raises
    ------
    RuleSyntaxError
        For unbalanced or nested brackets, text after ``]`` and empty
        directive names.
    """
    if not isinstance(rule_string, str):
        raise TypeError(f"rule string must be str, got {type(rule_string).__name__}")
    if rule_string.strip() == "":
        return ()

    descriptors: list[RuleDescriptor] = []
    for part in _split_directives(rule_string):
        m = _DIRECTIVE_RE.match(part.strip())
        if m is None:
            raise RuleSyntaxError(rule_string, f"cannot parse directive {part!r}")
        name = m.group("name").strip()
        if not name:
            raise RuleSyntaxError(rule_string, "empty rule name")
        descriptors.append(RuleDescriptor(name, _parse_arguments(m.group("args") or "")))
    return tuple(descriptors)
