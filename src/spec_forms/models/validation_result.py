"""
Validation result models.

These models carry validation failures as data: a failing field never
raises, it reports `validity=False` with a list of stable error tags
(`required`, `type`, a constraint name, or a custom function name).
"""

from pydantic import BaseModel, Field


class FieldValidity(BaseModel):
    """Result of validating a single field."""

    validity: bool = Field(..., description="Whether the field value is valid")
    errors: list[str] = Field(default_factory=list, description="Error tags")

    @classmethod
    def valid(cls) -> "FieldValidity":
        return cls(validity=True, errors=[])

    @classmethod
    def invalid(cls, *errors: str) -> "FieldValidity":
        return cls(validity=False, errors=list(errors))


class FormValidationResult(BaseModel):
    """Result of validating a whole form."""

    validity: bool = Field(..., description="Whether every field is valid")
    errors: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Top-level field name -> error tags",
    )
    group_errors: dict[str, list[dict[str, list[str]]]] = Field(
        default_factory=dict,
        description="Group name -> per-instance mapping of child field name -> error tags",
    )

    @property
    def error_count(self) -> int:
        """Get the number of error tags across all fields and group instances."""
        count = sum(len(tags) for tags in self.errors.values())
        for instances in self.group_errors.values():
            for instance in instances:
                count += sum(len(tags) for tags in instance.values())
        return count

    def get_field_errors(self, field_name: str) -> list[str]:
        """Get the error tags of a top-level field."""
        return self.errors.get(field_name, [])

    def invalid_fields(self) -> list[str]:
        """Names of top-level fields that reported errors."""
        return [name for name, tags in self.errors.items() if tags]
