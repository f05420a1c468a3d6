"""Tests for the operator/function/variable registry."""

from __future__ import annotations

import pytest

from infixcalc.core import (
    DuplicateDefinitionError,
    FunctionDef,
    OperatorDef,
    Precedence,
    Registry,
    RegistryError,
)
from infixcalc.core.catalog import binary_rule, unary_rule


def _operator(symbol: str, arity: int = 2) -> OperatorDef:
    return OperatorDef(symbol, Precedence.MULTIPLY, binary_rule(lambda a, b: a % b), "a % b", arity)


def _function(name: str, arity: int = 1) -> FunctionDef:
    return FunctionDef(name, arity, unary_rule(lambda x: x), f"{name}(x)")


class TestRegistration:
    def test_register_operator(self) -> None:
        registry = Registry()
        registry.register_operator(_operator("%"))
        assert registry.is_operator("%")
        assert not registry.is_operator("+")

    def test_register_function(self) -> None:
        registry = Registry()
        registry.register_function(_function("identity"))
        assert registry.has_function("identity")
        assert registry.functions["identity"].usage == "identity(x)"

    def test_define_variable(self) -> None:
        registry = Registry()
        registry.define_variable("x", 3)
        assert registry.has_variable("x")
        assert registry.variables["x"] == 3.0
        assert isinstance(registry.variables["x"], float)


class TestDuplicates:
    def test_duplicate_operator(self, registry: Registry) -> None:
        with pytest.raises(DuplicateDefinitionError):
            registry.register_operator(_operator("+"))

    def test_duplicate_function(self, registry: Registry) -> None:
        with pytest.raises(DuplicateDefinitionError):
            registry.register_function(_function("sin"))

    def test_duplicate_variable(self, registry: Registry) -> None:
        with pytest.raises(DuplicateDefinitionError) as exc_info:
            registry.define_variable("PI", 3.0)
        assert exc_info.value.name == "PI"

    def test_duplicate_is_a_registry_error(self) -> None:
        assert issubclass(DuplicateDefinitionError, RegistryError)


class TestInvalidKeys:
    @pytest.mark.parametrize("symbol", ["", "**", " ", "(", ")", ",", "1", "."])
    def test_bad_operator_symbols(self, symbol: str) -> None:
        with pytest.raises(RegistryError):
            Registry().register_operator(_operator(symbol))

    def test_unary_operator_rejected(self) -> None:
        with pytest.raises(RegistryError):
            Registry().register_operator(_operator("%", arity=1))

    @pytest.mark.parametrize("name", ["", "a b", "f(", "a,b", "a+b", "12", "1.5"])
    def test_bad_names(self, registry: Registry, name: str) -> None:
        with pytest.raises(RegistryError):
            registry.define_variable(name, 1.0)
        with pytest.raises(RegistryError):
            registry.register_function(_function(name))

    def test_zero_arity_function_rejected(self) -> None:
        with pytest.raises(RegistryError):
            Registry().register_function(_function("now", arity=0))


class TestViews:
    def test_views_are_read_only(self, registry: Registry) -> None:
        with pytest.raises(TypeError):
            registry.variables["x"] = 1.0  # type: ignore[index]
        with pytest.raises(TypeError):
            registry.operators["%"] = _operator("%")  # type: ignore[index]


class TestWithVariables:
    def test_extends_and_overrides(self, registry: Registry) -> None:
        derived = registry.with_variables({"x": 2.0, "PI": 3.0})
        assert derived.variables["x"] == 2.0
        assert derived.variables["PI"] == 3.0
        assert derived.variables["E"] == registry.variables["E"]

    def test_base_is_untouched(self, registry: Registry) -> None:
        registry.with_variables({"x": 2.0, "PI": 3.0})
        assert not registry.has_variable("x")
        assert registry.variables["PI"] != 3.0

    def test_definitions_are_shared(self, registry: Registry) -> None:
        derived = registry.with_variables({})
        assert derived.functions["sin"] is registry.functions["sin"]
        derived.register_function(_function("identity"))
        assert not registry.has_function("identity")

    def test_invalid_name(self, registry: Registry) -> None:
        with pytest.raises(RegistryError) as exc_info:
            registry.with_variables({"ok": 1.0, "a-b": 1.0})
        assert exc_info.value.name == "a-b"
