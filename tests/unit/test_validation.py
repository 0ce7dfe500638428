"""Unit tests for parameter validation."""

import pytest

from unbound.exceptions import (
    InvalidParameterTypeError,
    MissingRequiredParameterError,
    ValidationError,
)
from unbound.validation import type_of, validate


class TestTypeOf:
    """Tests for value type categories."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("x", "string"),
            (3, "number"),
            (2.5, "number"),
            (True, "boolean"),
            ([1], "array"),
            ((1, 2), "array"),
            ({"a": 1}, "object"),
        ],
    )
    def test_categories(self, value, expected):
        assert type_of(value) == expected


class TestValidate:
    """Tests for validate()."""

    def test_wrong_type_identifies_parameter(self):
        """A number where a string is required is rejected."""
        with pytest.raises(InvalidParameterTypeError) as exc_info:
            validate({"to": 123}, {"to": {"type": "string", "required": True}})

        error = exc_info.value
        assert error.parameter == "to"
        assert error.expected == "string"
        assert error.actual == "number"
        assert error.message == "Invalid type for parameter to: expected string, got number"
        assert isinstance(error, ValidationError)

    def test_missing_required(self):
        with pytest.raises(MissingRequiredParameterError) as exc_info:
            validate({}, {"to": {"type": "string", "required": True}})

        assert exc_info.value.parameter == "to"
        assert exc_info.value.message == "Missing required parameter to"

    def test_none_counts_as_absent(self):
        validate({"to": None}, {"to": {"type": "string"}})
        with pytest.raises(MissingRequiredParameterError):
            validate({"to": None}, {"to": {"type": "string", "required": True}})

    def test_bool_is_not_a_number(self):
        with pytest.raises(InvalidParameterTypeError) as exc_info:
            validate({"limit": True}, {"limit": {"type": "number"}})
        assert exc_info.value.actual == "boolean"

    def test_any_of_types(self):
        schema = {"body": {"type": ["object", "array"]}}
        validate({"body": {"a": 1}}, schema)
        validate({"body": [1, 2]}, schema)

        with pytest.raises(InvalidParameterTypeError) as exc_info:
            validate({"body": "text"}, schema)
        assert "expected object or array" in exc_info.value.message

    def test_undeclared_values_are_ignored(self):
        validate({"to": "+1", "extra": object()}, {"to": {"type": "string", "required": True}})

    def test_unknown_schema_type(self):
        with pytest.raises(ValueError):
            validate({"to": "x"}, {"to": {"type": "text"}})

    def test_repeatable(self):
        """Validation has no side effects on its inputs."""
        values = {"to": "+1"}
        schema = {"to": {"type": "string", "required": True}}
        validate(values, schema)
        validate(values, schema)
        assert values == {"to": "+1"}
