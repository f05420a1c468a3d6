"""
Compiled-program types for infixcalc.

A compiled expression is a flat tuple of items in postfix order. Literals
carry a value; operator and function references carry their definition and
pull their own operands from the program when evaluated.

Examples:
    "2+3*4"      → (2, 3, 4, *, +)
    "log(8, 2)"  → (8, 2, log)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infixcalc.core.evaluator import EvalCursor

Rule = Callable[["EvalCursor"], float]


class Precedence(IntEnum):
    """
    Ordering used by the compiler when reducing the operator stack.

    OPEN_BRACKET and FUNCTION are sentinels used only for stack control.
    """

    OPEN_BRACKET = 0
    ADD = 1
    MULTIPLY = 2
    EXPONENTIAL = 3
    FUNCTION = 4


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OperatorDef:
    """A binary infix operator bound to a single character."""

    symbol: str
    precedence: Precedence
    rule: Rule = field(repr=False, compare=False)
    usage: str = ""
    arity: int = 2


@dataclass(frozen=True, slots=True)
class FunctionDef:
    """A named function; ``arity`` is how many operands its rule pulls."""

    name: str
    arity: int
    rule: Rule = field(repr=False, compare=False)
    usage: str = ""


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Literal:
    """An already-known value: a number or a variable snapshot."""

    value: float

    @property
    def arity(self) -> int:
        return 0

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True, slots=True)
class OperatorRef:
    definition: OperatorDef

    @property
    def arity(self) -> int:
        return self.definition.arity

    def __str__(self) -> str:
        return self.definition.symbol


@dataclass(frozen=True, slots=True)
class FunctionRef:
    definition: FunctionDef

    @property
    def arity(self) -> int:
        return self.definition.arity

    def __str__(self) -> str:
        return self.definition.name


Item = Literal | OperatorRef | FunctionRef


@dataclass(frozen=True, slots=True)
class CompiledProgram:
    """
    The ordered item sequence produced by the compiler.

    Items are stored bottom-first: the last item is the root of the
    expression and is the first one the evaluator reads.
    """

    items: tuple[Item, ...]
    source: str = ""
    max_depth: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def to_postfix(self) -> str:
        """Render the program in postfix notation, e.g. ``2 3 4 * +``."""
        return " ".join(str(item) for item in self.items)
