"""Tests for field type validators."""

from datetime import date

import pytest

from spec_forms.models.field_types import FieldType
from spec_forms.validators.type_validators import (
    TYPE_VALIDATORS,
    is_number,
    parse_date,
    validate_type,
)


class TestTypeValidatorTable:
    """Tests for the type validator lookup table."""

    def test_every_type_has_a_validator(self):
        """Test that the table covers the closed set of field types."""
        assert set(TYPE_VALIDATORS) == set(FieldType)

    @pytest.mark.parametrize("field_type", list(FieldType))
    def test_none_is_accepted(self, field_type):
        """Test that emptiness is left to the required stage."""
        assert validate_type(field_type, None)

    def test_accepts_string_tags(self):
        assert validate_type("number", 3)
        assert not validate_type("number", "3")


class TestTextTypes:
    """Tests for string based types."""

    @pytest.mark.parametrize("field_type", ["text", "textarea", "password", "search"])
    def test_strings(self, field_type):
        assert validate_type(field_type, "hello")
        assert not validate_type(field_type, 5)

    def test_email(self):
        assert validate_type(FieldType.EMAIL, "ada@example.com")
        assert not validate_type(FieldType.EMAIL, "ada@example")
        assert not validate_type(FieldType.EMAIL, "not an email")

    def test_tel(self):
        assert validate_type(FieldType.TEL, "+358 40 123 4567")
        assert validate_type(FieldType.TEL, "(555) 123-4567")
        assert not validate_type(FieldType.TEL, "call me")
        assert not validate_type(FieldType.TEL, "+")

    def test_url(self):
        assert validate_type(FieldType.URL, "https://example.com/path")
        assert not validate_type(FieldType.URL, "example.com")


class TestNumberAndDate:
    """Tests for number and date types."""

    def test_is_number(self):
        """Test that booleans and NaN are not numbers."""
        assert is_number(0)
        assert is_number(-2.5)
        assert not is_number(True)
        assert not is_number(float("nan"))
        assert not is_number("1")

    def test_parse_date(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)
        assert parse_date(date(2020, 1, 1)) == date(2020, 1, 1)
        assert parse_date("2023-02-29") is None
        assert parse_date(20240101) is None

    def test_date_type(self):
        assert validate_type(FieldType.DATE, "2024-01-31")
        assert not validate_type(FieldType.DATE, "31.01.2024")


class TestOptionTypes:
    """Tests for checkbox and option based types."""

    def test_checkbox(self):
        assert validate_type(FieldType.CHECKBOX, True)
        assert validate_type(FieldType.CHECKBOX, False)
        assert not validate_type(FieldType.CHECKBOX, "yes")

    def test_checkbox_group(self):
        assert validate_type(FieldType.CHECKBOX_GROUP, ["a", "b"])
        assert not validate_type(FieldType.CHECKBOX_GROUP, "a")

    @pytest.mark.parametrize("field_type", [FieldType.RADIO_GROUP, FieldType.SELECT])
    def test_single_option(self, field_type):
        assert validate_type(field_type, "fi")
        assert validate_type(field_type, 3)
        assert not validate_type(field_type, ["fi"])

    def test_group(self):
        assert validate_type(FieldType.GROUP, [{"name": "Alice"}, {}])
        assert not validate_type(FieldType.GROUP, [1, 2])
        assert not validate_type(FieldType.GROUP, {"name": "Alice"})
