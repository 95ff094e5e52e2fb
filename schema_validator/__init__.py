"""
schema_validator – schema-driven validation, defaults and casting for untyped data.
"""
from .compiler import FieldType, Mode, PropertySchema, SchemaRoot, compile_schema
from .exceptions import RuleSyntaxError, SchemaError, StrictModeError
from .frame import errors_frame, validate_frame
from .loader import load_schema
from .parser import KeyedArgument, RuleDescriptor, parse_rules
from .rules import Rule, RuleRegistry, default_registry, register_rule
from .validator import ErrorEntry, ValidationResult, Validator, validate

__all__ = [
    "Validator",
    "ValidationResult",
    "ErrorEntry",
    "validate",
    "compile_schema",
    "SchemaRoot",
    "PropertySchema",
    "FieldType",
    "Mode",
    "parse_rules",
    "RuleDescriptor",
    "KeyedArgument",
    "Rule",
    "RuleRegistry",
    "default_registry",
    "register_rule",
    "load_schema",
    "validate_frame",
    "errors_frame",
    "SchemaError",
    "RuleSyntaxError",
    "StrictModeError",
]
