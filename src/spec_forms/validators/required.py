"""
Required-condition evaluation.

A field's `required` constraint is one of:

- a boolean, returned as-is;
- a list of dependency constraints, all of which must hold (AND);
- a list of such lists, at least one of which must hold (OR of ANDs).

Each dependency constraint names another field, a constraint to run
against that field's current value, and the constraint parameter:

    {"type": "max", "field": "age", "value": 17}
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from spec_forms.models.field_types import FieldType
from spec_forms.models.specification import DependencyConstraint
from spec_forms.validators.constraint_validators import validate_constraint

logger = logging.getLogger("spec-forms")


@dataclass(frozen=True)
class Dependency:
    """Current value and declared type of a field another field depends on."""

    value: Any
    field_type: FieldType


def is_empty(value: Any) -> bool:
    """Whether a value fails the required check: any falsy value, 0 and NaN included."""
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


def is_unset(value: Any) -> bool:
    """
    Whether a field holds no value at all.

    Unlike `is_empty`, numeric 0 is a value here: an optional number set to
    0 still runs its type, constraint and function checks.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def _as_constraint(item: Any) -> DependencyConstraint:
    if isinstance(item, DependencyConstraint):
        return item
    return DependencyConstraint.model_validate(item)


def _is_dnf(condition: list[Any]) -> bool:
    return bool(condition) and all(isinstance(clause, list) for clause in condition)


def _evaluate_clause(clause: Iterable[Any], dependencies: Mapping[str, Dependency]) -> bool:
    for item in clause:
        constraint = _as_constraint(item)
        dependency = dependencies.get(constraint.field)
        if dependency is None:
            logger.debug(f"Dependency '{constraint.field}' is not available, condition does not hold")
            return False
        if not validate_constraint(
            constraint.type,
            dependency.value,
            constraint.value,
            dependency.field_type,
        ):
            return False
    return True


def is_required(condition: Any, dependencies: Mapping[str, Dependency]) -> bool:
    """
    Evaluate a required condition against the current dependency values.

    Args:
        condition: bool, AND-list or list of AND-lists.
        dependencies: Field name -> Dependency for every referenced field.
            Missing names make the constraints that reference them false.

    Returns:
        True if the field is currently required.
    """
    if condition is None:
        return False
    if isinstance(condition, bool):
        return condition
    if _is_dnf(condition):
        return any(_evaluate_clause(clause, dependencies) for clause in condition)
    return _evaluate_clause(condition, dependencies)


def iter_condition_constraints(condition: Any) -> Iterable[DependencyConstraint]:
    """Yield every dependency constraint of a condition, flattening OR clauses."""
    if condition is None or isinstance(condition, bool):
        return
    clauses = condition if _is_dnf(condition) else [condition]
    for clause in clauses:
        for item in clause:
            yield _as_constraint(item)


def required_field_names(condition: Any) -> list[str]:
    """Names of every field referenced by a condition, deduplicated in order."""
    names: list[str] = []
    for constraint in iter_condition_constraints(condition):
        if constraint.field not in names:
            names.append(constraint.field)
    return names
