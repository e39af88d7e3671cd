"""
Type validators.

One predicate per field type answering whether a raw value is well formed
for that type. `None` is accepted by every predicate: emptiness is decided
by the required stage of the validation pipeline before types are checked.
"""

import math
import re
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any
from urllib.parse import urlparse

from spec_forms.models.field_types import FieldType

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TEL_PATTERN = re.compile(r"^\+?[0-9 ()\-.]*[0-9][0-9 ()\-.]*$")


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def _is_tel(value: Any) -> bool:
    return isinstance(value, str) and bool(TEL_PATTERN.match(value))


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def parse_date(value: Any) -> date | None:
    """Parse a date value or ISO `YYYY-MM-DD` string, None if not a date."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


def _is_date(value: Any) -> bool:
    return parse_date(value) is not None


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_list(value: Any) -> bool:
    return isinstance(value, list)


def _is_option(value: Any) -> bool:
    return isinstance(value, str) or is_number(value)


def _is_group(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, Mapping) for item in value)


TYPE_VALIDATORS: dict[FieldType, Callable[[Any], bool]] = {
    FieldType.TEXT: _is_string,
    FieldType.TEXTAREA: _is_string,
    FieldType.EMAIL: _is_email,
    FieldType.PASSWORD: _is_string,
    FieldType.SEARCH: _is_string,
    FieldType.TEL: _is_tel,
    FieldType.URL: _is_url,
    FieldType.NUMBER: is_number,
    FieldType.DATE: _is_date,
    FieldType.CHECKBOX: _is_bool,
    FieldType.CHECKBOX_GROUP: _is_list,
    FieldType.RADIO_GROUP: _is_option,
    FieldType.SELECT: _is_option,
    FieldType.GROUP: _is_group,
}


def validate_type(field_type: FieldType | str, value: Any) -> bool:
    """Check that `value` is well formed for `field_type`."""
    if value is None:
        return True
    return TYPE_VALIDATORS[FieldType(field_type)](value)
