"""
Runtime field construction.

`create_field` turns one field specification into a `Field`: the validator
closure bound to the form specification and function registry, the set of
fields it depends on, and the group/index tag for group instance members.

Every configuration problem of a specification surfaces here, so an engine
is never built from a specification it cannot validate.
"""

import logging
import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from spec_forms.errors import (
    InvalidSpecification,
    UnknownDependency,
    UnknownGroup,
    UnsupportedConstraint,
)
from spec_forms.models.field_types import FieldType
from spec_forms.models.specification import (
    FieldSpecification,
    FormSpecification,
)
from spec_forms.models.validation_result import FieldValidity
from spec_forms.pipeline import (
    NON_CONSTRAINT_KEYS,
    FunctionRegistry,
    GroupOptions,
    get_field_dependencies,
    get_function_validators,
    locate_field,
    resolve_field_value,
    validate_field,
)
from spec_forms.validators.change_handlers import ChangeHandler, get_change_handler
from spec_forms.validators.constraint_validators import is_known_constraint, supports_constraint
from spec_forms.validators.required import is_required, iter_condition_constraints, required_field_names

logger = logging.getLogger("spec-forms")

FieldValidator = Callable[[Mapping[str, Any]], Awaitable[FieldValidity]]


@dataclass(frozen=True)
class Field:
    """A field of a live form, derived from its specification."""

    name: str
    type: FieldType
    label: str | None
    placeholder: str | None
    constraints: Mapping[str, Any]
    dependencies: tuple[str, ...]
    spec: FieldSpecification = field(repr=False, compare=False)
    validator: FieldValidator = field(repr=False, compare=False)
    required_evaluator: Callable[[Mapping[str, Any]], bool] = field(repr=False, compare=False)
    group: str | None = None
    index: int | None = None

    @property
    def is_group(self) -> bool:
        return self.type == FieldType.GROUP

    @property
    def group_options(self) -> GroupOptions | None:
        if self.group is None:
            return None
        return GroupOptions(group=self.group, index=self.index)

    @property
    def change_handler(self) -> ChangeHandler:
        return get_change_handler(self.type)

    def read_value(self, values: Mapping[str, Any]) -> Any:
        """This field's value in a form value map."""
        return resolve_field_value(values, self.name, self.group_options)

    def is_required(self, values: Mapping[str, Any]) -> bool:
        return self.required_evaluator(values)

    async def validate(self, values: Mapping[str, Any]) -> FieldValidity:
        return await self.validator(values)


def _check_constraints(field_spec: FieldSpecification) -> None:
    for name, constraint_value in field_spec.constraints.items():
        if name in NON_CONSTRAINT_KEYS or not is_known_constraint(name):
            continue
        if not supports_constraint(name, field_spec.type):
            raise UnsupportedConstraint(name, field_spec.type.value)
        if name == "pattern":
            try:
                re.compile(constraint_value)
            except (re.error, TypeError) as e:
                raise InvalidSpecification(
                    f"Invalid pattern for field '{field_spec.name}': {e}"
                ) from e


def _check_dependencies(
    field_spec: FieldSpecification,
    form_spec: FormSpecification,
    group_options: GroupOptions | None,
) -> None:
    for constraint in iter_condition_constraints(field_spec.required_condition):
        dependency_spec, _ = locate_field(constraint.field, form_spec, group_options)
        if dependency_spec is None:
            raise UnknownDependency(
                f"Field '{field_spec.name}' depends on non-existing field '{constraint.field}'"
            )
        if is_known_constraint(constraint.type) and not supports_constraint(constraint.type, dependency_spec.type):
            raise UnsupportedConstraint(constraint.type, dependency_spec.type.value)

    for name in field_spec.dependencies:
        if locate_field(name, form_spec, group_options)[0] is None:
            raise UnknownDependency(
                f"Field '{field_spec.name}' depends on non-existing field '{name}'"
            )


def create_field(
    field_spec: FieldSpecification,
    form_spec: FormSpecification,
    functions: FunctionRegistry | None = None,
    group_options: GroupOptions | None = None,
) -> Field:
    """
    Build the runtime Field for a field specification.

    Args:
        field_spec: The field to build.
        form_spec: The specification owning the field.
        functions: Registry of custom validator functions by name.
        group_options: Group name and instance index when the field is a
            member of a group instance.

    Raises:
        UnsupportedConstraint: A constraint has no semantics for the type.
        UnknownDependency: A referenced field does not exist.
        UnknownFunction: A custom validator is missing from the registry.
        InvalidSpecification: A constraint parameter is malformed.
    """
    functions = functions if functions is not None else {}

    _check_constraints(field_spec)
    _check_dependencies(field_spec, form_spec, group_options)
    get_function_validators(field_spec, functions)

    if field_spec.type == FieldType.GROUP:
        # Surface configuration errors of the instance template up front
        create_fields_for_group_instance(field_spec, form_spec, functions, 0)

    dependencies = tuple(dict.fromkeys([
        *field_spec.dependencies,
        *required_field_names(field_spec.required_condition),
    ]))

    constraints = {
        key: value
        for key, value in field_spec.constraints.items()
        if key not in NON_CONSTRAINT_KEYS
    }

    async def validator(values: Mapping[str, Any]) -> FieldValidity:
        return await validate_field(field_spec, form_spec, functions, values, group_options)

    def required_evaluator(values: Mapping[str, Any]) -> bool:
        return is_required(
            field_spec.required_condition,
            get_field_dependencies(field_spec, form_spec, values, group_options),
        )

    return Field(
        name=field_spec.name,
        type=field_spec.type,
        label=field_spec.label,
        placeholder=field_spec.placeholder,
        constraints=MappingProxyType(constraints),
        dependencies=dependencies,
        spec=field_spec,
        validator=validator,
        required_evaluator=required_evaluator,
        group=group_options.group if group_options else None,
        index=group_options.index if group_options else None,
    )


def create_fields_for_group_instance(
    group_spec: FieldSpecification,
    form_spec: FormSpecification,
    functions: FunctionRegistry | None,
    index: int,
) -> list[Field]:
    """Build a fresh set of member fields for instance `index` of a group."""
    if group_spec.type != FieldType.GROUP:
        raise UnknownGroup(f"Field '{group_spec.name}' is not a group field")

    options = GroupOptions(group=group_spec.name, index=index)
    return [
        create_field(child_spec, form_spec, functions, options)
        for child_spec in group_spec.fields or []
    ]
