"""
Validators for spec-forms.

Pure building blocks used by the validation pipeline:
- Type validators (is a raw value well formed for a field type)
- Constraint validators (min, max, step, minlength, maxlength, pattern, ...)
- Required-condition evaluation (boolean / AND / OR-of-AND conditions)
- Change handlers (replace or toggle-in-set)
"""

from spec_forms.validators.change_handlers import (
    get_change_handler,
    replace_value,
    toggle_value,
)
from spec_forms.validators.constraint_validators import (
    CONSTRAINT_VALIDATORS,
    is_known_constraint,
    supports_constraint,
    validate_constraint,
)
from spec_forms.validators.required import (
    Dependency,
    is_empty,
    is_unset,
    is_required,
    required_field_names,
)
from spec_forms.validators.type_validators import (
    TYPE_VALIDATORS,
    validate_type,
)

__all__ = [
    # Types
    "TYPE_VALIDATORS",
    "validate_type",
    # Constraints
    "CONSTRAINT_VALIDATORS",
    "is_known_constraint",
    "supports_constraint",
    "validate_constraint",
    # Required conditions
    "Dependency",
    "is_empty",
    "is_unset",
    "is_required",
    "required_field_names",
    # Change handlers
    "get_change_handler",
    "replace_value",
    "toggle_value",
]
