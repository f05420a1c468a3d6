"""
Built-in operators, functions and constants.

Rules follow IEEE-754 double arithmetic: division by zero and domain errors
produce infinities or NaN instead of raising, so evaluating a compiled
program never fails because of the numbers involved.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from infixcalc.core.ir import FunctionDef, OperatorDef, Precedence
from infixcalc.core.registry import Registry

if TYPE_CHECKING:
    from infixcalc.core.evaluator import EvalCursor

CONSTANTS: dict[str, float] = {
    "PI": math.pi,
    "E": math.e,
}


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------


def ieee_divide(left: float, right: float) -> float:
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def ieee_power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent.is_integer() and exponent % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        # 0 to a negative power, or a negative base with a fractional exponent
        if base == 0.0:
            return math.inf
        return math.nan


def ieee_log(value: float, base: float = math.e) -> float:
    if math.isnan(value) or math.isnan(base) or value < 0 or base <= 0 or base == 1.0:
        return math.nan
    if value == 0.0:
        return -math.inf if base > 1 else math.inf
    if math.isinf(value):
        return math.inf if base > 1 else -math.inf
    if base == 10.0:
        return math.log10(value)
    if base == 2.0:
        return math.log2(value)
    return math.log(value, base)


def _finite_only(func: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a math function so non-finite or out-of-domain input yields NaN."""

    def wrapper(x: float) -> float:
        try:
            return float(func(x))
        except ValueError:
            return math.nan

    return wrapper


def _round_toward(func: Callable[[float], int]) -> Callable[[float], float]:
    def wrapper(x: float) -> float:
        if not math.isfinite(x):
            return x
        return float(func(x))

    return wrapper


def _sign(x: float) -> float:
    if math.isnan(x):
        return math.nan
    return float((x > 0) - (x < 0))


def _nan_aware(pick: Callable[[float, float], float]) -> Callable[[float, float], float]:
    def wrapper(x: float, y: float) -> float:
        if math.isnan(x) or math.isnan(y):
            return math.nan
        return pick(x, y)

    return wrapper


# ---------------------------------------------------------------------------
# Rule builders
# ---------------------------------------------------------------------------


def binary_rule(op: Callable[[float, float], float]) -> Callable[[EvalCursor], float]:
    """Build a rule calling ``op(left, right)``.

    The right operand is pulled first because it sits above the left one.
    """

    def rule(cursor: EvalCursor) -> float:
        right = cursor.pull()
        left = cursor.pull()
        return op(left, right)

    return rule


def unary_rule(op: Callable[[float], float]) -> Callable[[EvalCursor], float]:
    def rule(cursor: EvalCursor) -> float:
        return op(cursor.pull())

    return rule


def _log_rule(cursor: EvalCursor) -> float:
    # log(x, base): base is the last argument, so it is pulled first
    base = cursor.pull()
    value = cursor.pull()
    return ieee_log(value, base)


OPERATORS: tuple[OperatorDef, ...] = (
    OperatorDef("+", Precedence.ADD, binary_rule(lambda a, b: a + b), "val1 + val2"),
    OperatorDef("-", Precedence.ADD, binary_rule(lambda a, b: a - b), "val1 - val2"),
    OperatorDef("*", Precedence.MULTIPLY, binary_rule(lambda a, b: a * b), "val1 * val2"),
    OperatorDef("/", Precedence.MULTIPLY, binary_rule(ieee_divide), "val1 / val2"),
    OperatorDef("^", Precedence.EXPONENTIAL, binary_rule(ieee_power), "val1 ^ val2"),
)

FUNCTIONS: tuple[FunctionDef, ...] = (
    FunctionDef("sin", 1, unary_rule(_finite_only(math.sin)), "sin(x)"),
    FunctionDef("cos", 1, unary_rule(_finite_only(math.cos)), "cos(x)"),
    FunctionDef("tan", 1, unary_rule(_finite_only(math.tan)), "tan(x)"),
    FunctionDef("atan", 1, unary_rule(math.atan), "atan(x)"),
    FunctionDef("abs", 1, unary_rule(abs), "abs(x)"),
    FunctionDef("min", 2, binary_rule(_nan_aware(min)), "min(x,y)"),
    FunctionDef("max", 2, binary_rule(_nan_aware(max)), "max(x,y)"),
    FunctionDef("sqrt", 1, unary_rule(_finite_only(math.sqrt)), "sqrt(x)"),
    FunctionDef("log", 2, _log_rule, "log(x, base)"),
    FunctionDef("ln", 1, unary_rule(ieee_log), "ln(x)"),
    FunctionDef("log10", 1, unary_rule(lambda x: ieee_log(x, 10.0)), "log10(x)"),
    FunctionDef("sign", 1, unary_rule(_sign), "sign(x)"),
    FunctionDef("ceil", 1, unary_rule(_round_toward(math.ceil)), "ceil(x)"),
    FunctionDef("floor", 1, unary_rule(_round_toward(math.floor)), "floor(x)"),
)


def default_registry(extra_variables: Mapping[str, float] | None = None) -> Registry:
    """Build a registry seeded with the built-in catalog and constants.

    Args:
        extra_variables: Additional base variables (e.g. from settings).
            They may not redefine ``PI`` or ``E``.
    """
    registry = Registry()
    for operator in OPERATORS:
        registry.register_operator(operator)
    for function in FUNCTIONS:
        registry.register_function(function)
    for name, value in CONSTANTS.items():
        registry.define_variable(name, value)
    for name, value in (extra_variables or {}).items():
        registry.define_variable(name, value)
    return registry
