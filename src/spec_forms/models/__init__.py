"""
Data models for spec-forms.

This module contains Pydantic models for:
- Form and field specifications (the declarative input)
- Field type tags
- Validation results
"""

from spec_forms.models.field_types import (
    FieldType,
    OPTION_TYPES,
    TEXT_LIKE_TYPES,
)
from spec_forms.models.specification import (
    DependencyConstraint,
    FieldSpecification,
    FormSpecification,
    RequiredCondition,
)
from spec_forms.models.validation_result import (
    FieldValidity,
    FormValidationResult,
)

__all__ = [
    # Field types
    "FieldType",
    "OPTION_TYPES",
    "TEXT_LIKE_TYPES",
    # Specifications
    "DependencyConstraint",
    "FieldSpecification",
    "FormSpecification",
    "RequiredCondition",
    # Validation
    "FieldValidity",
    "FormValidationResult",
]
