"""
Error types for infixcalc compilation, registry management and evaluation.

Compilation never raises for bad user input: it returns a ``ParseError``
value, which is also the wire-level error contract of the service layer.
Exceptions are reserved for misuse of the registry and for internal faults.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TargetType(StrEnum):
    """The kind of element that caused a compile failure."""

    FUNCTION = "Function"
    VARIABLE = "Variable"
    NUMBER = "Number"
    FUNCTION_VARIABLE = "FunctionVariable"
    OTHER = "Other"
    NONE = "None"


_MESSAGES: dict[TargetType, str] = {
    TargetType.FUNCTION: "Unknown function '{target}'",
    TargetType.VARIABLE: "Unknown variable '{target}'",
    TargetType.NUMBER: "Invalid number '{target}'",
    TargetType.FUNCTION_VARIABLE: "Function '{target}' used without arguments",
    TargetType.OTHER: "Malformed expression",
    TargetType.NONE: "No error",
}


class ParseError(BaseModel):
    """
    Result of a failed (or, with ``TargetType.NONE``, successful) compilation.

    Examples:
        - ParseError(target_type=TargetType.VARIABLE, target="foo")
        - ParseError(target_type=TargetType.OTHER)  # unbalanced brackets
    """

    target_type: TargetType = Field(description="Kind of the offending element")
    target: str = Field(default="", description="Offending token, if any")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def none(cls) -> ParseError:
        """Sentinel meaning "no error"."""
        return cls(target_type=TargetType.NONE)

    @classmethod
    def other(cls, target: str = "") -> ParseError:
        return cls(target_type=TargetType.OTHER, target=target)

    @property
    def is_error(self) -> bool:
        return self.target_type is not TargetType.NONE

    def describe(self) -> str:
        """Format a user-facing message referencing the offending token."""
        message = _MESSAGES[self.target_type].format(target=self.target)
        if self.target_type is TargetType.OTHER and self.target:
            message += f" near '{self.target}'"
        return message

    def __str__(self) -> str:
        return self.describe()


class InfixCalcError(Exception):
    """Base exception for all infixcalc errors."""


class RegistryError(InfixCalcError):
    """
    Raised when an operator, function or variable cannot be registered.

    Examples:
    - Operator symbol longer than one character
    - Name containing brackets or operator symbols

    ``name`` holds the rejected symbol or name.
    """

    def __init__(self, message: str, name: str = "") -> None:
        self.name = name
        super().__init__(message)


class DuplicateDefinitionError(RegistryError):
    """Raised when a registry key is already taken."""


class EvaluationFault(InfixCalcError):
    """
    Raised when a compiled program cannot be evaluated.

    This never happens for programs produced by the compiler; it signals a
    defect in the compiler, not a problem with the user's expression.
    """


class ExpressionError(InfixCalcError):
    """Raised by convenience helpers when an expression fails to compile."""

    def __init__(self, error: ParseError) -> None:
        self.error = error
        super().__init__(error.describe())


class ConfigError(InfixCalcError):
    """Raised when settings cannot be loaded."""
