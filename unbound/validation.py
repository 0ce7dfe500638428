"""
Unbound Python SDK - Parameter Validation

Single-level, declarative type guard shared by every operation. A schema
maps parameter names to ``{"type": ..., "required": ...}`` where the type is
one of ``string``, ``number``, ``boolean``, ``object``, ``array`` or a list
of those meaning "any of".

Example:
    >>> validate({"to": "+15550001111"}, {"to": {"type": "string", "required": True}})
"""

from __future__ import annotations

from typing import Any, Mapping

from unbound.exceptions import InvalidParameterTypeError, MissingRequiredParameterError


Schema = Mapping[str, Mapping[str, Any]]

TYPE_NAMES = frozenset({"string", "number", "boolean", "object", "array"})


def type_of(value: Any) -> str:
    """Return the type category of a value."""
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return "object"


def _accepted(declared: Any) -> frozenset:
    if isinstance(declared, str):
        accepted = frozenset({declared})
    else:
        accepted = frozenset(declared)
    unknown = accepted - TYPE_NAMES
    if unknown:
        raise ValueError(f"Unknown parameter type(s) in schema: {', '.join(sorted(unknown))}")
    return accepted


def validate(values: Mapping[str, Any], schema: Schema) -> None:
    """
    Check ``values`` against ``schema``.

    Names present in ``values`` but not declared in ``schema`` are ignored.
    A value of None counts as absent.

    Raises:
        MissingRequiredParameterError: A required parameter is absent
        InvalidParameterTypeError: A present parameter has the wrong type
    """
    for name, spec in schema.items():
        value = values.get(name)
        if value is None:
            if spec.get("required", False):
                raise MissingRequiredParameterError(name)
            continue

        declared = spec.get("type")
        if declared is None:
            continue
        actual = type_of(value)
        if actual not in _accepted(declared):
            raise InvalidParameterTypeError(name, declared, actual)
