"""
Request/response facade over the expression engine.

Every call builds its own registry, so a single ``ParserService`` can be
shared by concurrent requests without locking.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from infixcalc.config import Settings
from infixcalc.core.catalog import default_registry
from infixcalc.core.compiler import compile_expression
from infixcalc.core.errors import ParseError, RegistryError
from infixcalc.core.evaluator import evaluate
from infixcalc.core.registry import Registry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class VariableInfo(BaseModel):
    """A named value supplied by, or reported to, a caller."""

    name: str = Field(description="Variable name")
    value: float = Field(description="Current value")


class FunctionInfo(BaseModel):
    name: str = Field(description="Function name")
    usage: str = Field(description="Usage string, e.g. 'log(x, base)'")
    arity: int = Field(description="Number of arguments")


class OperatorInfo(BaseModel):
    symbol: str = Field(description="Operator character")
    usage: str = Field(description="Usage string, e.g. 'val1 + val2'")
    precedence: str = Field(description="Precedence class name")


class EvaluateRequest(BaseModel):
    expression: str = Field(min_length=1, description="Infix expression")
    variables: list[VariableInfo] = Field(default_factory=list)


class EvaluateResponse(BaseModel):
    """
    Outcome of an evaluation.

    ``error.target_type`` is ``None`` on success, in which case ``result``
    holds the value (``null`` in JSON when it is NaN or infinite).
    """

    result: float | None = None
    error: ParseError = Field(default_factory=ParseError.none)

    model_config = ConfigDict(frozen=True)

    @field_serializer("result")
    def _finite_or_null(self, value: float | None) -> float | None:
        if value is None or not math.isfinite(value):
            return None
        return value

    @property
    def ok(self) -> bool:
        return not self.error.is_error


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ParserService:
    """Evaluate expressions and describe the built-in catalog."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def _registry(self, variables: Iterable[VariableInfo] = ()) -> Registry:
        values = dict(self.settings.variables)
        values.update((info.name, info.value) for info in variables)
        registry = default_registry()
        if values:
            registry = registry.with_variables(values)
        return registry

    def evaluate_expression(
        self,
        expression: str,
        variables: Iterable[VariableInfo] = (),
    ) -> EvaluateResponse:
        """Compile and evaluate ``expression`` with the caller's variables.

        Raises:
            ValueError: If the expression is empty.
            EvaluationFault: On an internal compiler defect.
        """
        if not expression:
            raise ValueError("Expression was not defined")

        try:
            registry = self._registry(variables)
        except RegistryError as e:
            logger.info("Rejected variables for %r: %s", expression, e)
            return EvaluateResponse(error=ParseError.other(e.name))

        compiled = compile_expression(
            expression, registry, max_depth=self.settings.engine.max_depth
        )
        if isinstance(compiled, ParseError):
            return EvaluateResponse(error=compiled)

        return EvaluateResponse(result=evaluate(compiled))

    def available_variables(self) -> list[VariableInfo]:
        registry = self._registry()
        return [VariableInfo(name=name, value=value) for name, value in registry.variables.items()]

    def available_functions(self) -> list[FunctionInfo]:
        registry = self._registry()
        return [
            FunctionInfo(name=name, usage=function.usage, arity=function.arity)
            for name, function in registry.functions.items()
        ]

    def available_operators(self) -> list[OperatorInfo]:
        registry = self._registry()
        return [
            OperatorInfo(
                symbol=symbol,
                usage=operator.usage,
                precedence=operator.precedence.name.lower(),
            )
            for symbol, operator in registry.operators.items()
        ]
