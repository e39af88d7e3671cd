"""Tests for required-condition evaluation."""

import pytest

from spec_forms.models.field_types import FieldType
from spec_forms.models.specification import DependencyConstraint
from spec_forms.validators.required import (
    Dependency,
    is_empty,
    is_required,
    is_unset,
    iter_condition_constraints,
    required_field_names,
)


def numbers(**values):
    return {name: Dependency(value=value, field_type=FieldType.NUMBER) for name, value in values.items()}


AND_CONDITION = [
    {"type": "max", "field": "dependency1", "value": 17},
    {"type": "min", "field": "dependency2", "value": 80},
]

DNF_CONDITION = [
    AND_CONDITION,
    [{"type": "min", "field": "dependency1", "value": 25}],
]


class TestIsEmpty:
    """Tests for is_empty and is_unset."""

    @pytest.mark.parametrize("value", [None, "", [], (), {}, False, 0, 0.0, float("nan")])
    def test_empty(self, value):
        """Test that every falsy value fails the required check."""
        assert is_empty(value)

    @pytest.mark.parametrize("value", [1, -0.5, "a", ["a"], True, {"a": 1}])
    def test_not_empty(self, value):
        assert not is_empty(value)

    @pytest.mark.parametrize("value", [None, "", [], (), {}, False])
    def test_unset(self, value):
        assert is_unset(value)

    @pytest.mark.parametrize("value", [0, 0.0, "a", True])
    def test_zero_is_set(self, value):
        """Test that 0 is still a value for optional fields."""
        assert not is_unset(value)


class TestIsRequired:
    """Tests for is_required."""

    def test_boolean(self):
        assert is_required(True, {})
        assert not is_required(False, {})
        assert not is_required(None, {})

    @pytest.mark.parametrize("age,expected", [(16, True), (17, True), (18, False)])
    def test_single_condition(self, age, expected):
        condition = [{"type": "max", "field": "age", "value": 17}]
        assert is_required(condition, numbers(age=age)) is expected

    @pytest.mark.parametrize(
        "dep1,dep2,expected",
        [
            (16, 79, False),
            (16, 80, True),
            (16, 81, True),
            (17, 79, False),
            (17, 80, True),
            (18, 80, False),
            (18, 81, False),
        ],
    )
    def test_and_condition(self, dep1, dep2, expected):
        """Test that every constraint of a list must hold."""
        assert is_required(AND_CONDITION, numbers(dependency1=dep1, dependency2=dep2)) is expected

    @pytest.mark.parametrize(
        "dep1,dep2,expected",
        [
            (16, 79, False),
            (16, 80, True),
            (17, 81, True),
            (18, 80, False),
            (24, 81, False),
            (25, 79, True),
            (26, 80, True),
        ],
    )
    def test_dnf_condition(self, dep1, dep2, expected):
        """Test that any clause of a list of lists is enough."""
        assert is_required(DNF_CONDITION, numbers(dependency1=dep1, dependency2=dep2)) is expected

    def test_missing_dependency(self):
        """Test that an unavailable dependency makes its clause false."""
        assert not is_required(AND_CONDITION, numbers(dependency1=16))
        assert is_required(DNF_CONDITION, numbers(dependency1=30))

    def test_unset_dependency_value(self):
        assert not is_required([{"type": "max", "field": "age", "value": 17}], numbers(age=None))

    def test_parsed_constraints(self):
        condition = [DependencyConstraint(type="equals", field="country", value="fi")]
        dependencies = {"country": Dependency(value="fi", field_type=FieldType.SELECT)}
        assert is_required(condition, dependencies)


class TestConditionFields:
    """Tests for listing the fields referenced by a condition."""

    def test_flattens_clauses(self):
        constraints = list(iter_condition_constraints(DNF_CONDITION))
        assert [c.field for c in constraints] == ["dependency1", "dependency2", "dependency1"]

    def test_required_field_names(self):
        assert required_field_names(DNF_CONDITION) == ["dependency1", "dependency2"]
        assert required_field_names(True) == []
