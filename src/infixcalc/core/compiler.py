"""
Shunting-yard compiler for infixcalc expressions.

Converts an infix expression into a ``CompiledProgram`` in a single
left-to-right pass over the characters, using a transient operator stack
and an append-only output sequence.

Rules:
    - Operators pop stacked operators of greater or equal precedence
      (left associativity, ``2^3^2`` is ``(2^3)^2``).
    - '(' pushes a bracket marker that shields the operators below it.
    - ',' and ')' reduce to the nearest bracket marker; ')' also drops it.
    - An operator symbol at position 0, or right after an operator or '(',
      is a sign and becomes part of the following number.

The compiler never raises for bad input; the first problem found is
returned as a ``ParseError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from infixcalc.core.errors import ParseError
from infixcalc.core.ir import (
    CompiledProgram,
    FunctionDef,
    FunctionRef,
    Item,
    OperatorDef,
    OperatorRef,
    Precedence,
)
from infixcalc.core.registry import (
    ARGUMENT_SEPARATOR,
    CLOSE_BRACKET,
    OPEN_BRACKET,
    Registry,
)
from infixcalc.core.tokenizer import classify_word, strip_whitespace

logger = logging.getLogger(__name__)

# Each nesting level costs two interpreter frames during evaluation
# (``EvalCursor.pull`` and the rule), so the limit must stay well under
# the default recursion limit of 1000.
DEFAULT_MAX_DEPTH = 200
MAX_DEPTH_LIMIT = 300


@dataclass(slots=True)
class _StackEntry:
    """An operator, a pending function call or a bracket marker."""

    precedence: Precedence
    item: Item | None = None
    call: FunctionDef | None = None
    separators: int = 0


class _Compiler:
    """Single-use compiler state for one expression."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry
        self.output: list[Item] = []
        self.pending: list[_StackEntry] = []

    def run(self, source: str) -> ParseError | None:
        after_operator = False  # a following operator symbol is a sign
        operator_run = 0  # consecutive operators and open brackets
        word: list[str] = []

        for index, char in enumerate(source):
            is_operator = self.registry.is_operator(char)
            if is_operator and (after_operator or index == 0):
                if operator_run > 1:
                    return ParseError.other()
                is_operator = False

            if not is_operator and char not in (OPEN_BRACKET, CLOSE_BRACKET, ARGUMENT_SEPARATOR):
                word.append(char)
                after_operator = False
                operator_run = 0
                continue

            call: FunctionDef | None = None
            if word:
                flushed = self._flush_word("".join(word), char)
                if isinstance(flushed, ParseError):
                    return flushed
                if isinstance(flushed, FunctionRef):
                    call = flushed.definition
                word.clear()
                after_operator = False
                operator_run = 0

            if is_operator:
                self._push_operator(self.registry.operators[char])
                after_operator = True
                operator_run += 1
            elif char == OPEN_BRACKET:
                self.pending.append(_StackEntry(Precedence.OPEN_BRACKET, call=call))
                after_operator = True
                operator_run += 1
            else:
                error = self._reduce_to_bracket(close=char == CLOSE_BRACKET)
                if error is not None:
                    return error
                after_operator = False
                operator_run = 0

        if word:
            flushed = self._flush_word("".join(word), None)
            if isinstance(flushed, ParseError):
                return flushed

        while self.pending:
            entry = self.pending.pop()
            if entry.precedence is Precedence.OPEN_BRACKET:
                # Unbalanced '('
                return ParseError.other()
            assert entry.item is not None
            self.output.append(entry.item)
        return None

    def _flush_word(self, word: str, terminator: str | None) -> Item | ParseError:
        item = classify_word(word, terminator, self.registry)
        if isinstance(item, ParseError):
            return item
        if isinstance(item, FunctionRef):
            self.pending.append(_StackEntry(Precedence.FUNCTION, item=item))
        else:
            self.output.append(item)
        return item

    def _push_operator(self, operator: OperatorDef) -> None:
        while self.pending:
            top = self.pending[-1]
            if top.precedence is Precedence.OPEN_BRACKET or top.precedence < operator.precedence:
                break
            self.pending.pop()
            assert top.item is not None
            self.output.append(top.item)
        self.pending.append(_StackEntry(operator.precedence, item=OperatorRef(operator)))

    def _reduce_to_bracket(self, *, close: bool) -> ParseError | None:
        """Move operators to the output down to the nearest bracket marker."""
        while self.pending and self.pending[-1].precedence is not Precedence.OPEN_BRACKET:
            entry = self.pending.pop()
            assert entry.item is not None
            self.output.append(entry.item)
        if not self.pending:
            # No matching '('
            return ParseError.other()

        bracket = self.pending[-1]
        if not close:
            bracket.separators += 1
            return None

        self.pending.pop()
        if bracket.call is not None and bracket.separators + 1 != bracket.call.arity:
            return ParseError.other(bracket.call.name)
        if bracket.call is None and bracket.separators:
            # "(1, 2)" outside of a call
            return ParseError.other()
        return None


def check_operands(items: list[Item] | tuple[Item, ...], max_depth: int) -> ParseError | None:
    """
    Simulate evaluation depth over a postfix item sequence.

    Every operator and function must find enough operands, exactly one value
    must remain, and no subexpression may nest deeper than ``max_depth``.
    """
    heights: list[int] = []
    for item in items:
        arity = item.arity
        if len(heights) < arity:
            return ParseError.other(str(item))
        height = 1
        if arity:
            height += max(heights[-arity:])
            del heights[-arity:]
        if height > max_depth:
            logger.debug("Expression nests deeper than %d", max_depth)
            return ParseError.other()
        heights.append(height)

    if len(heights) != 1:
        return ParseError.other()
    return None


def compile_expression(
    expression: str,
    registry: Registry,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> CompiledProgram | ParseError:
    """
    Compile an infix expression against a populated registry.

    Args:
        expression: Expression text (e.g., "2 * sin(PI / 4) + x").
            Whitespace is ignored.
        registry: Operators, functions and variables to resolve words with.
        max_depth: Maximum nesting depth of the resulting expression tree.

    Returns:
        The compiled program, or the first ``ParseError`` encountered.
    """
    source = strip_whitespace(expression)
    compiler = _Compiler(registry)

    error = compiler.run(source)
    if error is None:
        error = check_operands(compiler.output, max_depth)
    if error is not None:
        logger.debug("Failed to compile %r: %s", source, error.describe())
        return error

    program = CompiledProgram(items=tuple(compiler.output), source=source, max_depth=max_depth)
    logger.debug("Compiled %r to %s", source, program.to_postfix())
    return program
