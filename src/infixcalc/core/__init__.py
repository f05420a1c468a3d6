"""
infixcalc expression engine.

Tokenizer, shunting-yard compiler and lazy stack evaluator.

Usage:
    from infixcalc.core import compile_expression, default_registry, evaluate

    program = compile_expression("2 * PI", default_registry())
    result = evaluate(program)
"""

from infixcalc.core.catalog import default_registry
from infixcalc.core.compiler import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT, compile_expression
from infixcalc.core.errors import (
    ConfigError,
    DuplicateDefinitionError,
    EvaluationFault,
    ExpressionError,
    InfixCalcError,
    ParseError,
    RegistryError,
    TargetType,
)
from infixcalc.core.evaluator import EvalCursor, calculate, evaluate
from infixcalc.core.ir import (
    CompiledProgram,
    FunctionDef,
    FunctionRef,
    Item,
    Literal,
    OperatorDef,
    OperatorRef,
    Precedence,
)
from infixcalc.core.registry import Registry

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "CompiledProgram",
    "ConfigError",
    "DuplicateDefinitionError",
    "EvalCursor",
    "EvaluationFault",
    "ExpressionError",
    "FunctionDef",
    "FunctionRef",
    "InfixCalcError",
    "Item",
    "Literal",
    "OperatorDef",
    "OperatorRef",
    "ParseError",
    "Precedence",
    "Registry",
    "RegistryError",
    "TargetType",
    "calculate",
    "compile_expression",
    "default_registry",
    "evaluate",
]
