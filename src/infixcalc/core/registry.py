"""
Registry of operators, functions and variables known to the compiler.

The registry is populated before compilation and only read afterwards.
Per-request variables are layered on top of a base registry with
``with_variables`` so the base set is never mutated by callers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from infixcalc.core.errors import DuplicateDefinitionError, RegistryError
from infixcalc.core.ir import FunctionDef, OperatorDef

logger = logging.getLogger(__name__)

OPEN_BRACKET = "("
CLOSE_BRACKET = ")"
ARGUMENT_SEPARATOR = ","
RESERVED_CHARS = frozenset({OPEN_BRACKET, CLOSE_BRACKET, ARGUMENT_SEPARATOR})


class Registry:
    """Operator-symbol, function-name and variable-name lookup tables."""

    def __init__(self) -> None:
        self._operators: dict[str, OperatorDef] = {}
        self._functions: dict[str, FunctionDef] = {}
        self._variables: dict[str, float] = {}

    # -- Views --

    @property
    def operators(self) -> Mapping[str, OperatorDef]:
        return MappingProxyType(self._operators)

    @property
    def functions(self) -> Mapping[str, FunctionDef]:
        return MappingProxyType(self._functions)

    @property
    def variables(self) -> Mapping[str, float]:
        return MappingProxyType(self._variables)

    def is_operator(self, char: str) -> bool:
        return char in self._operators

    def has_function(self, name: str) -> bool:
        return name in self._functions

    def has_variable(self, name: str) -> bool:
        return name in self._variables

    # -- Mutators --

    def register_operator(self, operator: OperatorDef) -> None:
        """Add a binary operator; its symbol must be a single free character."""
        symbol = operator.symbol
        if len(symbol) != 1 or symbol.isspace() or symbol in RESERVED_CHARS:
            raise RegistryError(f"Invalid operator symbol: {symbol!r}", symbol)
        if symbol.isdigit() or symbol == ".":
            raise RegistryError(f"Operator symbol clashes with number syntax: {symbol!r}", symbol)
        if operator.arity != 2:
            raise RegistryError(
                f"Operator {symbol!r} must take 2 operands, not {operator.arity}", symbol
            )
        if symbol in self._operators:
            raise DuplicateDefinitionError(f"Operator already registered: {symbol!r}", symbol)
        self._operators[symbol] = operator

    def register_function(self, function: FunctionDef) -> None:
        self._check_name(function.name, "function")
        if function.arity < 1:
            raise RegistryError(
                f"Function {function.name!r} must take at least 1 argument", function.name
            )
        if function.name in self._functions:
            raise DuplicateDefinitionError(
                f"Function already registered: {function.name!r}", function.name
            )
        self._functions[function.name] = function

    def define_variable(self, name: str, value: float) -> None:
        self._check_name(name, "variable")
        if name in self._variables:
            raise DuplicateDefinitionError(f"Variable already defined: {name!r}", name)
        self._variables[name] = float(value)

    def with_variables(self, values: Mapping[str, float]) -> Registry:
        """
        Return a registry whose variables are this one's overridden by ``values``.

        Operator and function definitions are shared; they are immutable.
        """
        derived = Registry()
        derived._operators = dict(self._operators)
        derived._functions = dict(self._functions)
        derived._variables = dict(self._variables)
        for name, value in values.items():
            derived._check_name(name, "variable")
            if name in derived._variables:
                logger.debug("Overriding variable %s", name)
            derived._variables[name] = float(value)
        return derived

    def _check_name(self, name: str, kind: str) -> None:
        if not name:
            raise RegistryError(f"Empty {kind} name", name)
        for char in name:
            if char.isspace() or char in RESERVED_CHARS or char in self._operators:
                raise RegistryError(f"Invalid character {char!r} in {kind} name {name!r}", name)
        # Such a word is always classified as a number and could never resolve.
        if all(char.isdigit() or char == "." for char in name):
            raise RegistryError(f"{kind.capitalize()} name looks like a number: {name!r}", name)
