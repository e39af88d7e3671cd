"""
Constraint validators.

Pure functions keyed by constraint name. Each one checks a value against a
constraint parameter for a given field type and raises `UnsupportedConstraint`
when the (constraint, type) pair has no defined semantics.

Values that cannot be compared (for example `None` coming from a dependency
that has not been filled in yet) make the constraint fail instead of raising.
"""

import logging
import operator
import re
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from spec_forms.errors import UnsupportedConstraint
from spec_forms.models.field_types import OPTION_TYPES, TEXT_LIKE_TYPES, FieldType
from spec_forms.validators.type_validators import is_number, parse_date

logger = logging.getLogger("spec-forms")

ALL_TYPES = frozenset(FieldType)

SUPPORTED_TYPES: dict[str, frozenset[FieldType]] = {
    "min": frozenset({FieldType.NUMBER, FieldType.DATE}),
    "max": frozenset({FieldType.NUMBER, FieldType.DATE}),
    "step": frozenset({FieldType.NUMBER}),
    "minlength": TEXT_LIKE_TYPES | {FieldType.GROUP},
    "maxlength": TEXT_LIKE_TYPES | {FieldType.GROUP},
    "pattern": TEXT_LIKE_TYPES - {FieldType.TEXTAREA},
    "values": OPTION_TYPES,
    "oneOf": ALL_TYPES,
    "equals": ALL_TYPES,
    "required": ALL_TYPES,
}


def _coerce_type(field_type: FieldType | str | None) -> FieldType | None:
    if field_type is None:
        return None
    try:
        return FieldType(field_type)
    except ValueError:
        return None


def supports_constraint(name: str, field_type: FieldType | str | None) -> bool:
    """Whether `name` has defined semantics for `field_type`."""
    return _coerce_type(field_type) in SUPPORTED_TYPES.get(name, frozenset())


def _check_supported(name: str, field_type: FieldType | str | None) -> FieldType:
    coerced = _coerce_type(field_type)
    if coerced not in SUPPORTED_TYPES[name]:
        raise UnsupportedConstraint(name, getattr(field_type, "value", str(field_type)))
    return coerced


def _compare_numbers(value: Any, limit: Any, op: Callable[[Any, Any], bool]) -> bool:
    if not is_number(value) or not is_number(limit):
        return False
    return op(value, limit)


def _compare_dates(value: Any, limit: Any, op: Callable[[Any, Any], bool]) -> bool:
    value_date = parse_date(value)
    limit_date = parse_date(limit)
    if value_date is None or limit_date is None:
        return False
    return op(value_date, limit_date)


def _to_decimal(value: Any) -> Decimal | None:
    if not is_number(value):
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def _option_values(options: Iterable[Any]) -> list[Any]:
    """Allowed values of an option list of `{value, label}` mappings."""
    return [
        option.get("value") if isinstance(option, Mapping) else option
        for option in options or []
    ]


def _strict_equals(value: Any, expected: Any) -> bool:
    # True == 1 in Python, but a checkbox and a number never match
    if isinstance(value, bool) != isinstance(expected, bool):
        return False
    return value == expected


def validate_min(value: Any, constraint_value: Any, field_type: Any, **_: Any) -> bool:
    field_type = _check_supported("min", field_type)
    if field_type == FieldType.DATE:
        return _compare_dates(value, constraint_value, operator.ge)
    return _compare_numbers(value, constraint_value, operator.ge)


def validate_max(value: Any, constraint_value: Any, field_type: Any, **_: Any) -> bool:
    field_type = _check_supported("max", field_type)
    if field_type == FieldType.DATE:
        return _compare_dates(value, constraint_value, operator.le)
    return _compare_numbers(value, constraint_value, operator.le)


def validate_step(value: Any, constraint_value: Any, field_type: Any, min: Any = None, **_: Any) -> bool:
    _check_supported("step", field_type)
    number = _to_decimal(value)
    step = _to_decimal(constraint_value)
    base = _to_decimal(min if min is not None else 0)
    if number is None or step is None or base is None or step == 0:
        return False
    return (number - base) % step == 0


def validate_minlength(value: Any, constraint_value: Any, field_type: Any, **_: Any) -> bool:
    _check_supported("minlength", field_type)
    if not isinstance(value, (str, list)):
        return False
    return _compare_numbers(len(value), constraint_value, operator.ge)


def validate_maxlength(value: Any, constraint_value: Any, field_type: Any, **_: Any) -> bool:
    _check_supported("maxlength", field_type)
    if not isinstance(value, (str, list)):
        return False
    return _compare_numbers(len(value), constraint_value, operator.le)


def validate_pattern(value: Any, constraint_value: Any, field_type: Any, **_: Any) -> bool:
    _check_supported("pattern", field_type)
    if not isinstance(value, str):
        return False
    return re.search(constraint_value, value) is not None


def validate_one_of(value: Any, constraint_value: Any, field_type: Any = None, **_: Any) -> bool:
    return any(_strict_equals(value, allowed) for allowed in _option_values(constraint_value))


def validate_values(value: Any, constraint_value: Any, field_type: Any, **_: Any) -> bool:
    field_type = _check_supported("values", field_type)
    if field_type == FieldType.CHECKBOX_GROUP:
        if not isinstance(value, list):
            return False
        return all(validate_one_of(item, constraint_value) for item in value)
    return validate_one_of(value, constraint_value)


def validate_equals(value: Any, constraint_value: Any, field_type: Any = None, **_: Any) -> bool:
    return _strict_equals(value, constraint_value)


def validate_required(
    value: Any,
    constraint_value: Any,
    field_type: Any = None,
    dependencies: Mapping[str, Any] | None = None,
    **_: Any,
) -> bool:
    """Satisfied when the field is not required, or is required and has a value."""
    from spec_forms.validators.required import is_empty, is_required

    if not is_required(constraint_value, dependencies or {}):
        return True
    return not is_empty(value)


CONSTRAINT_VALIDATORS: dict[str, Callable[..., bool]] = {
    "maxlength": validate_maxlength,
    "minlength": validate_minlength,
    "max": validate_max,
    "min": validate_min,
    "step": validate_step,
    "pattern": validate_pattern,
    "values": validate_values,
    "oneOf": validate_one_of,
    "required": validate_required,
    "equals": validate_equals,
}


def is_known_constraint(name: str) -> bool:
    return name in CONSTRAINT_VALIDATORS


def validate_constraint(
    name: str,
    value: Any,
    constraint_value: Any,
    field_type: FieldType | str | None,
    **options: Any,
) -> bool:
    """
    Validate `value` against the constraint `name`.

    Unknown constraint names are logged and treated as passing.

    Raises:
        UnsupportedConstraint: If `name` is not defined for `field_type`.
    """
    validator = CONSTRAINT_VALIDATORS.get(name)
    if validator is None:
        logger.warning(f"Unsupported constraint '{name}'")
        return True
    return bool(validator(value, constraint_value, field_type, **options))
