"""
Evaluator for compiled infixcalc programs.

Evaluation starts at the last item of the program. Literals return their
value; operators and functions run their rule, which calls ``pull()`` to
obtain each operand. ``pull()`` reads the next item down and, if needed,
evaluates it recursively, so the flat program doubles as the expression tree.

For a binary operator the first pulled value is the right-hand operand:
``"7-2"`` compiles to ``(7, 2, -)`` and the rule computes
``second_pulled - first_pulled``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from infixcalc.core.catalog import default_registry
from infixcalc.core.compiler import DEFAULT_MAX_DEPTH, compile_expression
from infixcalc.core.errors import EvaluationFault, ExpressionError, ParseError
from infixcalc.core.ir import CompiledProgram, Item, Literal
from infixcalc.core.registry import Registry

logger = logging.getLogger(__name__)


class EvalCursor:
    """Read position over a program's items, moving from the last item down."""

    __slots__ = ("_items", "_position", "_depth", "_max_depth")

    def __init__(self, items: tuple[Item, ...], max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._items = items
        self._position = len(items)
        self._depth = 0
        self._max_depth = max_depth

    @property
    def remaining(self) -> int:
        """Number of items not yet consumed."""
        return self._position

    def pull(self) -> float:
        """Consume the next item and return its value."""
        if self._position == 0:
            raise EvaluationFault("Operand requested from an exhausted program")
        self._position -= 1
        item = self._items[self._position]

        if isinstance(item, Literal):
            return item.value

        if self._depth >= self._max_depth:
            raise EvaluationFault(f"Expression nests deeper than {self._max_depth}")
        self._depth += 1
        try:
            return float(item.definition.rule(self))
        finally:
            self._depth -= 1


def evaluate(program: CompiledProgram) -> float:
    """Evaluate a compiled program.

    Each call reads the program through a fresh cursor, so a saved program
    can be evaluated again without recompiling.

    Raises:
        EvaluationFault: If the program is malformed or nests too deeply for
            the interpreter stack. Programs compiled with a ``max_depth`` up
            to ``MAX_DEPTH_LIMIT`` never are.
    """
    cursor = EvalCursor(program.items, program.max_depth or DEFAULT_MAX_DEPTH)
    try:
        value = cursor.pull()
    except RecursionError as e:
        raise EvaluationFault(
            f"Expression {program.source!r} nests deeper than the interpreter stack allows"
        ) from e
    if cursor.remaining:
        raise EvaluationFault(f"{cursor.remaining} item(s) left after evaluating {program.source!r}")
    return value


def calculate(
    expression: str,
    registry: Registry | None = None,
    variables: Mapping[str, float] | None = None,
) -> float:
    """Compile and evaluate an expression in one step.

    Args:
        expression: Infix expression text.
        registry: Registry to compile against; the built-in catalog if omitted.
        variables: Extra variables layered over the registry's own.

    Raises:
        ExpressionError: If the expression does not compile.
    """
    if registry is None:
        registry = default_registry()
    if variables:
        registry = registry.with_variables(variables)

    compiled = compile_expression(expression, registry)
    if isinstance(compiled, ParseError):
        raise ExpressionError(compiled)
    return evaluate(compiled)
