"""
Form specification models.

A form specification is the declarative document the engine is built from:
an ordered list of field specifications with their types, display hints,
constraints and (for groups) nested per-instance field templates.

Example document:

    {
        "name": "registration",
        "fields": [
            {"name": "age", "type": "number", "constraints": {"min": 0}},
            {
                "name": "guardian",
                "type": "text",
                "html": {"label": "Guardian name"},
                "constraints": {
                    "required": [{"type": "max", "field": "age", "value": 17}]
                }
            }
        ]
    }
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from spec_forms.errors import InvalidSpecification
from spec_forms.models.field_types import FieldType


# Constraint keys that name custom functions instead of declarative rules
FUNCTION_CONSTRAINT_KEYS = ("clientSideFunctions", "serverSideFunctions")


class DependencyConstraint(BaseModel):
    """One condition of a required expression, checked against another field."""

    type: str = Field(..., description="Constraint name evaluated on the dependency, e.g. 'max'")
    field: str = Field(..., description="Name of the dependency field")
    value: Any = Field(default=None, description="Constraint parameter")


# bool | AND-list | OR-of-AND-lists (disjunctive normal form)
RequiredCondition = Union[
    StrictBool,
    list[list[DependencyConstraint]],
    list[DependencyConstraint],
]

_required_adapter: TypeAdapter = TypeAdapter(RequiredCondition)


class FieldSpecification(BaseModel):
    """Declarative description of a single form field."""

    name: str = Field(..., min_length=1, description="Field name/identifier")
    type: FieldType = Field(..., description="Field type tag")
    label: str | None = Field(default=None, description="Display label")
    placeholder: str | None = Field(default=None, description="Placeholder text")
    constraints: dict[str, Any] = Field(
        default_factory=dict,
        description="Constraint name -> parameter, in declaration order",
    )
    dependencies: list[str] = Field(
        default_factory=list,
        description="Fields read by this field's custom validator functions",
    )
    fields: list["FieldSpecification"] | None = Field(
        default=None,
        description="Per-instance field template (group fields only)",
    )

    @model_validator(mode="before")
    @classmethod
    def lift_html_hints(cls, data: Any) -> Any:
        """Accept display hints nested under an `html` object."""
        if isinstance(data, dict) and isinstance(data.get("html"), dict):
            data = dict(data)
            html = data.pop("html")
            data.setdefault("label", html.get("label"))
            data.setdefault("placeholder", html.get("placeholder"))
        return data

    @field_validator("constraints", mode="before")
    @classmethod
    def parse_constraints(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value

        constraints = dict(value)
        if "required" in constraints:
            condition = _required_adapter.validate_python(constraints["required"])
            if isinstance(condition, list):
                if not condition or any(isinstance(c, list) and not c for c in condition):
                    raise ValueError("required condition lists cannot be empty")
            constraints["required"] = condition

        for key in FUNCTION_CONSTRAINT_KEYS:
            if key in constraints:
                names = constraints[key]
                if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                    raise ValueError(f"{key} must be a list of function names")
        return constraints

    @model_validator(mode="after")
    def validate_group_fields(self):
        """Groups carry a field template, other types must not."""
        if self.type == FieldType.GROUP:
            if self.fields is None:
                raise ValueError(f"group field '{self.name}' must contain fields")
            _ensure_unique_names(self.fields, f"group '{self.name}'")
        elif self.fields is not None:
            raise ValueError(f"fields are only allowed on group fields, not {self.type.value}")
        return self

    @property
    def required_condition(self) -> RequiredCondition:
        """The parsed `required` constraint, False when absent."""
        return self.constraints.get("required", False)

    @property
    def function_names(self) -> list[str]:
        """Client side custom validator names, in declaration order."""
        return list(self.constraints.get("clientSideFunctions", []))

    def get_field(self, name: str) -> "FieldSpecification | None":
        """Get a child field specification of a group by name."""
        for child in self.fields or []:
            if child.name == name:
                return child
        return None


class FormSpecification(BaseModel):
    """
    Complete form specification.

    Field names are unique within the form and within each group's
    field template.
    """

    name: str = Field(..., min_length=1, description="Unique form identifier")
    title: str | None = Field(default=None, description="Form title")
    fields: list[FieldSpecification] = Field(..., description="Ordered form fields")

    @model_validator(mode="after")
    def validate_unique_names(self):
        _ensure_unique_names(self.fields, f"form '{self.name}'")
        return self

    def get_field(self, name: str) -> FieldSpecification | None:
        """Get a top-level field specification by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @property
    def group_names(self) -> list[str]:
        return [field.name for field in self.fields if field.type == FieldType.GROUP]

    @classmethod
    def from_json(cls, text: str | bytes) -> "FormSpecification":
        """Parse a specification from a JSON document."""
        return cls.model_validate_json(text)

    @classmethod
    def from_file(cls, path: str | Path) -> "FormSpecification":
        """Load a specification from a JSON file."""
        return cls.from_json(Path(path).read_text(encoding="utf-8"))


def _ensure_unique_names(fields: list[FieldSpecification], owner: str) -> None:
    seen: set[str] = set()
    for field in fields:
        if field.name in seen:
            raise ValueError(f"duplicate field name '{field.name}' in {owner}")
        seen.add(field.name)


def load_form_specification(source: "FormSpecification | Mapping[str, Any] | str | bytes | Path") -> FormSpecification:
    """
    Coerce a model, dict, JSON document or JSON file path into a FormSpecification.

    Raises:
        InvalidSpecification: If the document is not a valid form specification.
    """
    if isinstance(source, FormSpecification):
        return source
    try:
        if isinstance(source, Path):
            return FormSpecification.from_file(source)
        if isinstance(source, (str, bytes)):
            return FormSpecification.from_json(source)
        return FormSpecification.model_validate(source)
    except ValidationError as e:
        raise InvalidSpecification(f"Invalid form specification: {e}") from e
