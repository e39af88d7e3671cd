"""Change handlers: turn a UI change event into the next field value."""

from collections.abc import Callable
from typing import Any

from spec_forms.models.field_types import FieldType

ChangeHandler = Callable[[Any, Any], Any]


def replace_value(value: Any, previous: Any = None) -> Any:
    return value


def toggle_value(value: Any, previous: Any = None) -> list[Any]:
    """Remove `value` from the previous list if present, append it otherwise."""
    values = list(previous or [])
    if value in values:
        return [item for item in values if item != value]
    return [*values, value]


def get_change_handler(field_type: FieldType | str) -> ChangeHandler:
    if FieldType(field_type) == FieldType.CHECKBOX_GROUP:
        return toggle_value
    return replace_value
