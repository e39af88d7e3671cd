"""
spec-forms: Declarative form validation engine.

Describe a form once as a specification document, and get live field
state from it: values, validity with stable error tags, required flags
driven by other fields' values, custom validator functions and
repeatable group sub-forms.

Simple Usage:
    from spec_forms import FormEngine

    engine = FormEngine({
        "name": "signup",
        "fields": [
            {"name": "username", "type": "text", "constraints": {"required": True, "maxlength": 20}},
            {"name": "age", "type": "number", "constraints": {"min": 0}},
        ],
    })

    await engine.set_field_value("username", "ada")
    result = await engine.validate()
    result.validity        # True, age is optional
    result.errors          # {"username": [], "age": []}

Registry Usage:
    from spec_forms import FormRegistry

    registry = FormRegistry(
        forms=[FormSpecification.from_file("signup.json")],
        functions={"validateSsn": validate_ssn},
    )
    engine = registry.create_engine("signup")

Tracing:
    from spec_forms.tracing import setup_tracing

    # Log traces of engine operations
    setup_tracing(console=True, verbose=True)

    # Or write to file
    setup_tracing(file_path="traces.jsonl")
"""

from spec_forms.orchestrator import (
    FieldView,
    FormEngine,
    FormEngineState,
)
from spec_forms.registry import FormRegistry
from spec_forms.fields import (
    Field,
    create_field,
    create_fields_for_group_instance,
)
from spec_forms.pipeline import (
    GroupOptions,
    validate_field,
)
from spec_forms.models.field_types import FieldType
from spec_forms.models.specification import (
    DependencyConstraint,
    FieldSpecification,
    FormSpecification,
    load_form_specification,
)
from spec_forms.models.validation_result import (
    FieldValidity,
    FormValidationResult,
)
from spec_forms.errors import (
    FieldNotFound,
    FormConfigurationError,
    InvalidSpecification,
    UnknownDependency,
    UnknownForm,
    UnknownFunction,
    UnknownGroup,
    UnsupportedConstraint,
)
from spec_forms.tracing import (
    setup_tracing,
    disable_tracing,
)

__all__ = [
    # Main interface
    "FormEngine",
    "FormEngineState",
    "FieldView",
    "FormRegistry",
    # Fields
    "Field",
    "GroupOptions",
    "create_field",
    "create_fields_for_group_instance",
    "validate_field",
    # Specifications
    "FieldType",
    "DependencyConstraint",
    "FieldSpecification",
    "FormSpecification",
    "load_form_specification",
    # Validation
    "FieldValidity",
    "FormValidationResult",
    # Errors
    "FormConfigurationError",
    "InvalidSpecification",
    "UnsupportedConstraint",
    "UnknownDependency",
    "UnknownFunction",
    "FieldNotFound",
    "UnknownGroup",
    "UnknownForm",
    # Tracing
    "setup_tracing",
    "disable_tracing",
]

__version__ = "0.1.0"
