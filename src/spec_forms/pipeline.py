"""
Field validation pipeline.

A field is validated in ordered stages, stopping at the first stage that
fails:

1. required  - required and falsy (0 included) fails with `required`; not
               required and unset is valid without running the remaining
               stages, while an optional 0 goes on to be checked
2. type      - the type validator rejects the value: `type`
3. constraints - every declared constraint runs, each failure adds its name
4. functions - custom validators from the registry run concurrently, each
               falsy result adds the function name

Fields inside a group instance read their own value, and the values of
sibling fields they depend on, from `values[group][index]`.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from spec_forms.errors import UnknownFunction
from spec_forms.models.specification import (
    FUNCTION_CONSTRAINT_KEYS,
    FieldSpecification,
    FormSpecification,
)
from spec_forms.models.validation_result import FieldValidity
from spec_forms.validators.constraint_validators import validate_constraint
from spec_forms.validators.required import Dependency, is_unset, required_field_names
from spec_forms.validators.type_validators import validate_type

logger = logging.getLogger("spec-forms")

CustomValidator = Callable[[Any, Mapping[str, Any]], "bool | Awaitable[bool]"]
FunctionRegistry = Mapping[str, CustomValidator]

NON_CONSTRAINT_KEYS = ("required", *FUNCTION_CONSTRAINT_KEYS)


@dataclass(frozen=True)
class GroupOptions:
    """Position of a field inside a group instance."""

    group: str
    index: int


def instance_values(values: Mapping[str, Any], group_options: GroupOptions | None) -> Mapping[str, Any]:
    """The value map of one group instance, empty if it has no values yet."""
    if group_options is None:
        return {}
    instances = values.get(group_options.group) or []
    if 0 <= group_options.index < len(instances):
        return instances[group_options.index] or {}
    return {}


def scoped_values(values: Mapping[str, Any], group_options: GroupOptions | None) -> dict[str, Any]:
    """Top-level values overlaid with the values of the field's own instance."""
    if group_options is None:
        return dict(values)
    return {**values, **instance_values(values, group_options)}


def locate_field(
    name: str,
    form_spec: FormSpecification,
    group_options: GroupOptions | None = None,
) -> tuple[FieldSpecification | None, bool]:
    """
    Find the specification a field name refers to.

    Inside a group instance, sibling fields shadow top-level fields.

    Returns:
        (specification or None, whether it is a sibling in the same instance)
    """
    if group_options is not None:
        group_spec = form_spec.get_field(group_options.group)
        if group_spec is not None:
            sibling = group_spec.get_field(name)
            if sibling is not None:
                return sibling, True
    return form_spec.get_field(name), False


def resolve_field_value(
    values: Mapping[str, Any],
    name: str,
    group_options: GroupOptions | None = None,
) -> Any:
    if group_options is None:
        return values.get(name)
    return instance_values(values, group_options).get(name)


def get_field_dependencies(
    field_spec: FieldSpecification,
    form_spec: FormSpecification,
    values: Mapping[str, Any],
    group_options: GroupOptions | None = None,
) -> dict[str, Dependency]:
    """Current value and type of every field referenced by the required condition."""
    dependencies: dict[str, Dependency] = {}
    for name in required_field_names(field_spec.required_condition):
        dependency_spec, is_sibling = locate_field(name, form_spec, group_options)
        if dependency_spec is None:
            continue
        value = resolve_field_value(values, name, group_options if is_sibling else None)
        dependencies[name] = Dependency(value=value, field_type=dependency_spec.type)
    return dependencies


def evaluate_required_validity(
    field_spec: FieldSpecification,
    form_spec: FormSpecification,
    values: Mapping[str, Any],
    errors: list[str],
    group_options: GroupOptions | None = None,
) -> bool:
    condition = field_spec.constraints.get("required")
    if not condition:
        return True

    field_value = resolve_field_value(values, field_spec.name, group_options)
    satisfied = validate_constraint(
        "required",
        field_value,
        condition,
        field_spec.type,
        dependencies=get_field_dependencies(field_spec, form_spec, values, group_options),
    )
    if not satisfied:
        errors.append("required")
    return satisfied


def evaluate_type_validity(field_spec: FieldSpecification, field_value: Any, errors: list[str]) -> bool:
    if not validate_type(field_spec.type, field_value):
        errors.append("type")
        return False
    return True


def evaluate_constraint_validity(field_spec: FieldSpecification, field_value: Any, errors: list[str]) -> bool:
    """Run every declared constraint in order; all of them are evaluated."""
    constraints = field_spec.constraints
    is_valid = True
    for name, constraint_value in constraints.items():
        if name in NON_CONSTRAINT_KEYS:
            continue
        if not validate_constraint(
            name,
            field_value,
            constraint_value,
            field_spec.type,
            min=constraints.get("min"),
        ):
            errors.append(name)
            is_valid = False
    return is_valid


def get_function_validators(field_spec: FieldSpecification, functions: FunctionRegistry) -> list[CustomValidator]:
    validators = []
    for name in field_spec.function_names:
        if name not in functions:
            raise UnknownFunction(f"Custom validator '{name}' of field '{field_spec.name}' is not registered")
        validators.append(functions[name])
    return validators


async def _call_validator(func: CustomValidator, value: Any, all_values: Mapping[str, Any]) -> bool:
    result = func(value, all_values)
    if inspect.isawaitable(result):
        result = await result
    return bool(result)


async def evaluate_function_validity(
    field_spec: FieldSpecification,
    values: Mapping[str, Any],
    functions: FunctionRegistry,
    errors: list[str],
    group_options: GroupOptions | None = None,
) -> bool:
    """Run the field's custom validators concurrently."""
    validators = get_function_validators(field_spec, functions)
    if not validators:
        return True

    field_value = resolve_field_value(values, field_spec.name, group_options)
    all_values = scoped_values(values, group_options)
    results = await asyncio.gather(
        *(_call_validator(func, field_value, all_values) for func in validators),
        return_exceptions=True,
    )

    is_valid = True
    for name, result in zip(field_spec.function_names, results):
        if isinstance(result, Exception):
            logger.error(f"Custom validator '{name}' raised {type(result).__name__}: {result}")
            result = False
        if not result:
            errors.append(name)
            is_valid = False
    return is_valid


async def validate_field(
    field_spec: FieldSpecification,
    form_spec: FormSpecification,
    functions: FunctionRegistry,
    values: Mapping[str, Any],
    group_options: GroupOptions | None = None,
) -> FieldValidity:
    """
    Validate one field against a snapshot of all form values.

    Args:
        field_spec: Specification of the field to validate.
        form_spec: Owning form specification (dependency lookup).
        functions: Custom validator registry.
        values: Current value map of the whole form.
        group_options: Group name and instance index for group members.

    Returns:
        FieldValidity with the error tags of the first failing stage.
    """
    errors: list[str] = []

    if not evaluate_required_validity(field_spec, form_spec, values, errors, group_options):
        return FieldValidity(validity=False, errors=errors)

    field_value = resolve_field_value(values, field_spec.name, group_options)

    # Unset and not required: nothing else to check
    if is_unset(field_value):
        return FieldValidity(validity=True, errors=errors)

    if not evaluate_type_validity(field_spec, field_value, errors):
        return FieldValidity(validity=False, errors=errors)

    if not evaluate_constraint_validity(field_spec, field_value, errors):
        return FieldValidity(validity=False, errors=errors)

    is_valid = await evaluate_function_validity(field_spec, values, functions, errors, group_options)
    return FieldValidity(validity=is_valid, errors=errors)
