"""
Form registry.

Holds named form specifications and the custom validator functions they
refer to, and builds engines by form name. The function registry is frozen
at construction and injected into every engine it builds.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from spec_forms.config import FormEngineConfig
from spec_forms.errors import UnknownForm
from spec_forms.models.specification import FormSpecification, load_form_specification
from spec_forms.orchestrator import FormEngine
from spec_forms.pipeline import FunctionRegistry


class FormRegistry:
    """Named form specifications plus the function registry they share."""

    def __init__(
        self,
        forms: Iterable[FormSpecification | Mapping[str, Any]] = (),
        functions: FunctionRegistry | None = None,
    ):
        self._forms: dict[str, FormSpecification] = {}
        self._functions: FunctionRegistry = MappingProxyType(dict(functions or {}))
        for form in forms:
            self.register_form(form)

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    @property
    def form_names(self) -> list[str]:
        return list(self._forms)

    def register_form(self, form: FormSpecification | Mapping[str, Any] | str) -> FormSpecification:
        """Store a form specification under its name, replacing any previous one."""
        spec = load_form_specification(form)
        self._forms[spec.name] = spec
        return spec

    def get_form(self, name: str) -> FormSpecification:
        if name not in self._forms:
            raise UnknownForm(f"Form '{name}' is not registered")
        return self._forms[name]

    def create_engine(self, name: str, config: FormEngineConfig | None = None) -> FormEngine:
        """Build an engine for a registered form."""
        return FormEngine(self.get_form(name), functions=self._functions, config=config)
