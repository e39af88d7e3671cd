"""
Configuration errors for spec-forms.

These are raised while building fields and engines from a specification.
They signal a broken specification or a programming mistake and abort
construction. Validation failures of user input are never raised; see
`spec_forms.models.validation_result`.
"""


class FormConfigurationError(ValueError):
    """Base class for specification and engine configuration errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidSpecification(FormConfigurationError):
    """Raised when a specification document does not parse."""


class UnsupportedConstraint(FormConfigurationError):
    """Raised when a constraint has no semantics for a field type."""

    def __init__(self, constraint: str, field_type: str):
        self.constraint = constraint
        self.field_type = field_type
        super().__init__(f"{constraint} constraint is not supported for type {field_type}")


class UnknownDependency(FormConfigurationError):
    """Raised when a required condition references a field that does not exist."""


class UnknownFunction(FormConfigurationError):
    """Raised when a field names a custom validator missing from the registry."""


class FieldNotFound(FormConfigurationError):
    """Raised when setting the value of a field that does not exist."""


class UnknownGroup(FormConfigurationError):
    """Raised when adding an instance to something that is not a group field."""


class UnknownForm(FormConfigurationError):
    """Raised when a form name is not present in the registry."""
