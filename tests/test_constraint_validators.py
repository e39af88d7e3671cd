"""Tests for constraint validators."""

import logging

import pytest

from spec_forms.errors import UnsupportedConstraint
from spec_forms.models.field_types import FieldType
from spec_forms.validators.constraint_validators import (
    CONSTRAINT_VALIDATORS,
    SUPPORTED_TYPES,
    supports_constraint,
    validate_constraint,
)
from spec_forms.validators.required import Dependency


class TestLengthConstraints:
    """Tests for minlength and maxlength."""

    def test_maxlength_boundary(self):
        """Test that the limit itself is accepted."""
        assert validate_constraint("maxlength", "aaaa", 5, "text")
        assert validate_constraint("maxlength", "aaaaa", 5, "text")
        assert not validate_constraint("maxlength", "aaaaaa", 5, "text")

    def test_minlength_boundary(self):
        assert not validate_constraint("minlength", "aa", 3, "text")
        assert validate_constraint("minlength", "aaa", 3, "text")

    def test_group_instance_count(self):
        """Test that length constraints on groups count instances."""
        assert validate_constraint("maxlength", [{}, {}], 2, FieldType.GROUP)
        assert not validate_constraint("maxlength", [{}, {}, {}], 2, FieldType.GROUP)
        assert not validate_constraint("minlength", [], 1, FieldType.GROUP)

    def test_unsupported_for_number(self):
        with pytest.raises(UnsupportedConstraint) as exc_info:
            validate_constraint("maxlength", 10, 5, "number")
        assert exc_info.value.message == "maxlength constraint is not supported for type number"


class TestRangeConstraints:
    """Tests for min, max and step."""

    def test_number_range(self):
        assert validate_constraint("min", 0, 0, "number")
        assert not validate_constraint("min", -1, 0, "number")
        assert validate_constraint("max", 17, 17, "number")
        assert not validate_constraint("max", 18, 17, "number")

    def test_missing_value_fails(self):
        """Test that an unset dependency never satisfies a range."""
        assert not validate_constraint("max", None, 17, "number")
        assert not validate_constraint("min", "ten", 1, "number")

    def test_date_range(self):
        assert validate_constraint("min", "2024-01-01", "2024-01-01", "date")
        assert not validate_constraint("min", "2023-12-31", "2024-01-01", "date")
        assert validate_constraint("max", "2023-12-31", "2024-01-01", "date")
        assert not validate_constraint("max", "not a date", "2024-01-01", "date")

    def test_unsupported_for_text(self):
        with pytest.raises(UnsupportedConstraint):
            validate_constraint("min", "a", 1, "text")

    def test_step(self):
        assert validate_constraint("step", 10, 5, "number")
        assert not validate_constraint("step", 11, 5, "number")
        assert validate_constraint("step", 0.3, 0.1, "number")

    def test_step_from_min(self):
        """Test that steps are counted from the minimum."""
        assert validate_constraint("step", 3, 2, "number", min=1)
        assert not validate_constraint("step", 4, 2, "number", min=1)

    def test_zero_step(self):
        assert not validate_constraint("step", 1, 0, "number")

    def test_step_unsupported_for_date(self):
        with pytest.raises(UnsupportedConstraint):
            validate_constraint("step", "2024-01-01", 1, "date")


class TestPatternConstraint:
    """Tests for pattern."""

    def test_pattern(self):
        assert validate_constraint("pattern", "ABC-123", r"^[A-Z]{3}-\d{3}$", "text")
        assert not validate_constraint("pattern", "abc-123", r"^[A-Z]{3}-\d{3}$", "text")

    def test_pattern_unsupported_for_textarea(self):
        with pytest.raises(UnsupportedConstraint):
            validate_constraint("pattern", "abc", "a", "textarea")


class TestOptionConstraints:
    """Tests for values, oneOf and equals."""

    options = [{"value": "fi", "label": "Finland"}, {"value": "se", "label": "Sweden"}]

    def test_values_single_option(self):
        assert validate_constraint("values", "fi", self.options, "select")
        assert not validate_constraint("values", "no", self.options, "radio-group")

    def test_values_checkbox_group_subset(self):
        assert validate_constraint("values", ["fi", "se"], self.options, "checkbox-group")
        assert validate_constraint("values", [], self.options, "checkbox-group")
        assert not validate_constraint("values", ["fi", "no"], self.options, "checkbox-group")

    def test_values_unsupported_for_text(self):
        with pytest.raises(UnsupportedConstraint):
            validate_constraint("values", "fi", self.options, "text")

    def test_one_of(self):
        assert validate_constraint("oneOf", "se", self.options, "text")
        assert validate_constraint("oneOf", 2, [1, 2, 3], "number")
        assert not validate_constraint("oneOf", "dk", self.options, "text")

    def test_equals(self):
        assert validate_constraint("equals", 10, 10, "number")
        assert not validate_constraint("equals", 5, 10, "number")

    def test_equals_does_not_mix_booleans_and_numbers(self):
        assert validate_constraint("equals", True, True, "checkbox")
        assert not validate_constraint("equals", True, 1, "checkbox")


class TestRequiredConstraint:
    """Tests for the required constraint."""

    def test_boolean(self):
        assert not validate_constraint("required", None, True, "text")
        assert validate_constraint("required", "x", True, "text")
        assert validate_constraint("required", None, False, "text")

    def test_conditional(self):
        condition = [{"type": "max", "field": "age", "value": 17}]
        minor = {"age": Dependency(value=16, field_type=FieldType.NUMBER)}
        adult = {"age": Dependency(value=18, field_type=FieldType.NUMBER)}
        assert not validate_constraint("required", "", condition, "text", dependencies=minor)
        assert validate_constraint("required", "", condition, "text", dependencies=adult)


class TestConstraintTable:
    """Tests for the constraint lookup tables."""

    def test_tables_agree(self):
        assert set(CONSTRAINT_VALIDATORS) == set(SUPPORTED_TYPES)

    def test_supports_constraint(self):
        assert supports_constraint("maxlength", "email")
        assert not supports_constraint("maxlength", "number")
        assert not supports_constraint("unknown", "text")
        assert not supports_constraint("min", "no-such-type")

    def test_unknown_constraint_passes(self, caplog):
        """Test that unknown constraint names are logged and ignored."""
        with caplog.at_level(logging.WARNING, logger="spec-forms"):
            assert validate_constraint("colour", "red", "blue", "text")
        assert "colour" in caplog.text
