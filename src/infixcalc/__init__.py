"""
infixcalc - infix arithmetic expression compiler and evaluator.

Expressions with numbers, variables, multi-argument functions and binary
operators are compiled with a shunting-yard pass into a postfix program,
then evaluated to a single float.
"""

from __future__ import annotations

from ._version import get_version
from .core import (
    CompiledProgram,
    EvaluationFault,
    ExpressionError,
    InfixCalcError,
    ParseError,
    Registry,
    TargetType,
    calculate,
    compile_expression,
    default_registry,
    evaluate,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "CompiledProgram",
    "EvaluationFault",
    "ExpressionError",
    "InfixCalcError",
    "ParseError",
    "Registry",
    "TargetType",
    "calculate",
    "compile_expression",
    "default_registry",
    "evaluate",
]
