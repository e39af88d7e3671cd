"""
Form Engine.

This is the main entry point of spec-forms. It binds a form specification
and a custom validator registry, then tracks values, validity, error tags
and live required flags as values change.

Usage:
    engine = FormEngine(specification, functions={"validateSsn": validate_ssn})

    await engine.set_field_value("age", 16)
    engine.is_field_required("guardian")  # True

    members = engine.add_group_instance("children")
    await engine.set_field_value(members[0], "Alice")

    result = await engine.validate()
    payload = engine.get_field_values()
"""

import asyncio
import copy
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from spec_forms.config import FormEngineConfig, configure_logging, get_config
from spec_forms.errors import FieldNotFound, UnknownGroup
from spec_forms.fields import Field, create_field, create_fields_for_group_instance
from spec_forms.models.field_types import FieldType
from spec_forms.models.specification import FormSpecification, load_form_specification
from spec_forms.models.validation_result import FieldValidity, FormValidationResult
from spec_forms.pipeline import FunctionRegistry
from spec_forms.tracing import field_span, setup_tracing, traced_operation

logger = logging.getLogger("spec-forms.engine")


@dataclass(frozen=True)
class FormEngineState:
    """
    Published state of an engine.

    `validities`, `field_errors` and `fields_required` mirror the shape of
    `input_data`: a plain entry per top-level field, and for a group field a
    list holding one mapping per instance. A group field's own result goes
    to `group_validity` instead. Every mutation publishes a new
    state object built from fresh copies, so earlier snapshots never change.
    """

    input_data: Mapping[str, Any] = field(default_factory=dict)
    validities: Mapping[str, Any] = field(default_factory=dict)
    field_errors: Mapping[str, Any] = field(default_factory=dict)
    fields_required: Mapping[str, Any] = field(default_factory=dict)
    group_instances: Mapping[str, list[list[Field]]] = field(default_factory=dict)
    group_validity: Mapping[str, FieldValidity] = field(default_factory=dict)


@dataclass
class FieldView:
    """View-model of a field for presentation layers."""

    name: str
    type: FieldType
    label: str | None
    placeholder: str | None
    constraints: dict[str, Any]
    value: Any
    validity: bool | None
    errors: list[str]
    on_change: Callable[[Any], Awaitable[None]]
    group: str | None = None
    index: int | None = None
    add_instance: Callable[[], list[Field]] | None = None
    instances: list[list["FieldView"]] = field(default_factory=list)


def _read(mapping: Mapping[str, Any], target: Field, default: Any = None) -> Any:
    if target.group is None:
        return mapping.get(target.name, default)
    instances = mapping.get(target.group) or []
    if target.index < len(instances):
        return instances[target.index].get(target.name, default)
    return default


def _write(mapping: Mapping[str, Any], target: Field, value: Any) -> dict[str, Any]:
    """Copy `mapping` with the target field's entry set to `value`."""
    updated = dict(mapping)
    if target.group is None:
        updated[target.name] = value
        return updated

    instances = list(updated.get(target.group) or [])
    while len(instances) <= target.index:
        instances.append({})
    instance = dict(instances[target.index])
    instance[target.name] = value
    instances[target.index] = instance
    updated[target.group] = instances
    return updated


def _append_instance(mapping: Mapping[str, Any], group: str, instance: dict[str, Any]) -> dict[str, Any]:
    updated = dict(mapping)
    updated[group] = [*(updated.get(group) or []), instance]
    return updated


class FormEngine:
    """
    Live form bound to a specification.

    Calls against one engine must be serialized by the caller; the engine
    does no locking of its own.
    """

    def __init__(
        self,
        specification: FormSpecification | Mapping[str, Any] | str,
        functions: FunctionRegistry | None = None,
        config: FormEngineConfig | None = None,
    ):
        """
        Initialize the engine.

        Args:
            specification: Form specification as a model, dict or JSON text.
            functions: Custom validator functions by name. Each is called
                with `(value, all_values)` and returns a bool or an awaitable
                resolving to one.
            config: Engine configuration. If None, uses get_config().

        Raises:
            FormConfigurationError: If the specification is invalid.
        """
        self.config = config or get_config()
        configure_logging(self.config)
        setup_tracing(
            enabled=self.config.enable_tracing,
            console=self.config.trace_to_console,
            verbose=self.config.trace_verbose,
            file_path=self.config.trace_file,
        )

        self._functions: FunctionRegistry = MappingProxyType(dict(functions or {}))
        self.bind(specification)

    def bind(self, specification: FormSpecification | Mapping[str, Any] | str) -> None:
        """Rebuild fields and reset all state for a specification."""
        spec = load_form_specification(specification)
        fields = [create_field(field_spec, spec, self._functions) for field_spec in spec.fields]

        self.specification = spec
        self._fields = fields
        self._state = FormEngineState(
            fields_required={
                f.name: f.is_required({}) for f in fields if not f.is_group
            },
            group_instances={f.name: [] for f in fields if f.is_group},
        )
        logger.debug(f"Bound form '{spec.name}' with {len(fields)} fields")

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    @property
    def state(self) -> FormEngineState:
        """The currently published state snapshot."""
        return self._state

    @property
    def runtime_fields(self) -> list[Field]:
        """Top-level runtime fields, in specification order."""
        return list(self._fields)

    def group_instances(self, group_name: str) -> list[list[Field]]:
        if group_name not in self._state.group_instances:
            raise UnknownGroup(f"'{group_name}' is not a group field")
        return [list(instance) for instance in self._state.group_instances[group_name]]

    def _iter_all_fields(self) -> Iterator[Field]:
        yield from self._fields
        for instances in self._state.group_instances.values():
            for instance in instances:
                yield from instance

    def _resolve_field(
        self,
        field_ref: Any,
        group: str | None,
        index: int | None,
        allow_group: bool = False,
    ) -> Field:
        if isinstance(field_ref, str):
            name = field_ref
        else:
            name = field_ref.name
            group = group if group is not None else getattr(field_ref, "group", None)
            index = index if index is not None else getattr(field_ref, "index", None)

        if group is None:
            for candidate in self._fields:
                if candidate.name == name:
                    if candidate.is_group and not allow_group:
                        raise FieldNotFound(
                            f"Group field '{name}' has no value of its own, set the fields of its instances"
                        )
                    return candidate
            raise FieldNotFound(f"Cannot update non-existing field '{name}'")

        instances = self._state.group_instances.get(group)
        if instances is None or index is None or not 0 <= index < len(instances):
            raise FieldNotFound(f"Cannot update non-existing field '{name}' of {group}[{index}]")
        for candidate in instances[index]:
            if candidate.name == name:
                return candidate
        raise FieldNotFound(f"Cannot update non-existing field '{name}' of {group}[{index}]")

    def _depends_on(self, candidate: Field, changed: Field) -> bool:
        """Whether `candidate` reads the value of `changed`."""
        if candidate is changed or changed.name not in candidate.dependencies:
            return False
        if changed.group is not None:
            return candidate.group == changed.group and candidate.index == changed.index
        if candidate.group is None:
            return True
        # Group members see top-level fields unless a sibling shadows the name
        group_spec = self.specification.get_field(candidate.group)
        return group_spec is None or group_spec.get_field(changed.name) is None

    async def _run_validator(self, target: Field, values: Mapping[str, Any]) -> FieldValidity:
        data = {"field": target.name}
        if target.group is not None:
            data.update(group=target.group, index=target.index)
        with field_span("validate_field", data):
            return await target.validate(values)

    async def set_field_value(
        self,
        field_ref: Field | FieldView | str,
        value: Any,
        *,
        group: str | None = None,
        index: int | None = None,
    ) -> FieldValidity:
        """
        Set the value of a field and re-validate it and its dependents.

        The change handler of the field's type turns `value` into the new
        value (checkbox groups toggle `value` in their list). The field is
        validated against the updated values first; every field depending
        on it then gets its required flag and validity recomputed against
        the same values. All state is published at once.

        Args:
            field_ref: Field name, runtime Field or FieldView.
            value: Raw value from the presentation layer.
            group: Group name for group instance members addressed by name.
            index: Instance index for group instance members addressed by name.

        Returns:
            The validity of the changed field.

        Raises:
            FieldNotFound: If no such field exists.
        """
        target = self._resolve_field(field_ref, group, index)

        with traced_operation(
            f"{self.config.trace_name_prefix}.set_field_value",
            {"form": self.specification.name, "field": target.name},
        ):
            state = self._state
            new_value = target.change_handler(copy.deepcopy(value), _read(state.input_data, target))
            input_data = _write(state.input_data, target, new_value)

            own_result = await self._run_validator(target, input_data)
            validities = _write(state.validities, target, own_result.validity)
            field_errors = _write(state.field_errors, target, list(own_result.errors))
            fields_required = _write(state.fields_required, target, target.is_required(input_data))

            dependents = [f for f in self._iter_all_fields() if self._depends_on(f, target)]
            results = await asyncio.gather(
                *(self._run_validator(dependent, input_data) for dependent in dependents)
            )
            group_validity = dict(state.group_validity)
            for dependent, result in zip(dependents, results):
                if dependent.is_group:
                    # The per-instance maps under a group's name stay untouched
                    group_validity[dependent.name] = result
                    continue
                validities = _write(validities, dependent, result.validity)
                field_errors = _write(field_errors, dependent, list(result.errors))
                fields_required = _write(fields_required, dependent, dependent.is_required(input_data))

            self._state = replace(
                state,
                input_data=input_data,
                validities=validities,
                field_errors=field_errors,
                fields_required=fields_required,
                group_validity=group_validity,
            )

        if dependents:
            logger.debug(
                f"Field '{target.name}' changed, re-evaluated {', '.join(d.name for d in dependents)}"
            )
        return own_result

    def add_group_instance(self, group_name: str) -> list[Field]:
        """
        Append a new instance to a group field.

        Existing instances, their values and their validity are untouched.

        Returns:
            The member fields of the new instance.

        Raises:
            UnknownGroup: If `group_name` is not a group field.
        """
        group_spec = self.specification.get_field(group_name)
        if group_spec is None or group_spec.type != FieldType.GROUP:
            raise UnknownGroup(f"'{group_name}' is not a group field")

        state = self._state
        existing = state.group_instances.get(group_name, [])
        instance = create_fields_for_group_instance(
            group_spec, self.specification, self._functions, len(existing)
        )

        input_data = _append_instance(state.input_data, group_name, {})
        self._state = replace(
            state,
            input_data=input_data,
            validities=_append_instance(state.validities, group_name, {}),
            field_errors=_append_instance(state.field_errors, group_name, {}),
            fields_required=_append_instance(
                state.fields_required,
                group_name,
                {member.name: member.is_required(input_data) for member in instance},
            ),
            group_instances={**state.group_instances, group_name: [*existing, instance]},
        )
        logger.debug(f"Added instance {len(existing)} to group '{group_name}'")
        return list(instance)

    async def validate(self) -> FormValidationResult:
        """
        Validate every field against the current values.

        Covers all top-level fields and the members of every group instance
        created with add_group_instance. The results are also stored in the
        engine state.

        Returns:
            FormValidationResult with one `errors` entry per top-level field.
        """
        with traced_operation(
            f"{self.config.trace_name_prefix}.validate",
            {"form": self.specification.name},
        ):
            state = self._state
            values = state.input_data
            all_fields = list(self._iter_all_fields())
            results = await asyncio.gather(
                *(self._run_validator(f, values) for f in all_fields)
            )

        validities: dict[str, Any] = {}
        field_errors: dict[str, Any] = {}
        for group_name, instances in state.group_instances.items():
            if not instances:
                continue
            validities[group_name] = [{} for _ in instances]
            field_errors[group_name] = [{} for _ in instances]

        errors: dict[str, list[str]] = {}
        group_validity: dict[str, FieldValidity] = {}
        for target, result in zip(all_fields, results):
            if target.group is not None:
                validities[target.group][target.index][target.name] = result.validity
                field_errors[target.group][target.index][target.name] = list(result.errors)
                continue
            errors[target.name] = list(result.errors)
            if target.is_group:
                group_validity[target.name] = result
            else:
                validities[target.name] = result.validity
                field_errors[target.name] = list(result.errors)

        self._state = replace(
            state,
            validities=validities,
            field_errors=field_errors,
            group_validity=group_validity,
        )

        overall = all(result.validity for result in results)
        if not overall:
            logger.info(f"Form '{self.specification.name}' is invalid")
        return FormValidationResult(
            validity=overall,
            errors=errors,
            group_errors={
                group_name: copy.deepcopy(field_errors.get(group_name, []))
                for group_name in state.group_instances
            },
        )

    def get_field_values(self) -> dict[str, Any]:
        """Current values, top-level and per group instance, as an independent copy."""
        return copy.deepcopy(dict(self._state.input_data))

    def get_field_value(self, name: str, group: str | None = None, index: int | None = None) -> Any:
        target = self._resolve_field(name, group, index, allow_group=True)
        return copy.deepcopy(_read(self._state.input_data, target))

    def is_field_required(self, name: str, group: str | None = None, index: int | None = None) -> bool:
        """Current computed required flag of a field."""
        target = self._resolve_field(name, group, index, allow_group=True)
        if target.is_group:
            return target.is_required(self._state.input_data)
        return bool(_read(self._state.fields_required, target, False))

    def _view(self, target: Field, state: FormEngineState) -> FieldView:
        constraints = dict(target.constraints)
        if target.is_group:
            constraints["required"] = target.is_required(state.input_data)
            result = state.group_validity.get(target.name)
            validity = result.validity if result else None
            errors = list(result.errors) if result else []
            value = copy.deepcopy(state.input_data.get(target.name))
        else:
            constraints["required"] = bool(_read(state.fields_required, target, False))
            validity = _read(state.validities, target)
            errors = list(_read(state.field_errors, target, []))
            value = copy.deepcopy(_read(state.input_data, target))

        async def on_change(raw_value: Any) -> None:
            await self.set_field_value(target, raw_value)

        view = FieldView(
            name=target.name,
            type=target.type,
            label=target.label,
            placeholder=target.placeholder,
            constraints=constraints,
            value=value,
            validity=validity,
            errors=errors,
            on_change=on_change,
            group=target.group,
            index=target.index,
        )
        if target.is_group:
            view.add_instance = lambda: self.add_group_instance(target.name)
            view.instances = [
                [self._view(member, state) for member in instance]
                for instance in state.group_instances.get(target.name, [])
            ]
        return view

    @property
    def fields(self) -> list[FieldView]:
        """View-models of all top-level fields for the current state."""
        state = self._state
        return [self._view(target, state) for target in self._fields]
