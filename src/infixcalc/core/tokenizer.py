"""
Word classifier for the infixcalc compiler.

The compiler accumulates runs of ordinary characters into words; this module
decides what a finished word denotes, using the special character that ended
it as a one-character lookahead.
"""

from __future__ import annotations

from infixcalc.core.errors import ParseError, TargetType
from infixcalc.core.ir import FunctionRef, Item, Literal
from infixcalc.core.registry import OPEN_BRACKET, Registry


def strip_whitespace(expression: str) -> str:
    """Remove every whitespace character, including inner ones."""
    return "".join(char for char in expression if not char.isspace())


def is_number_word(word: str, registry: Registry) -> bool:
    """True if every character is a digit, '.' or an operator symbol (a sign)."""
    return all(char.isdigit() or char == "." or registry.is_operator(char) for char in word)


def parse_number(word: str) -> float | None:
    """Parse a numeric word; ``None`` if it is not a valid double literal."""
    if not word.isascii():
        return None
    try:
        return float(word)
    except ValueError:
        return None


def classify_word(word: str, terminator: str | None, registry: Registry) -> Item | ParseError:
    """
    Classify ``word`` given the special character that terminated it.

    Args:
        word: Non-empty run of ordinary characters.
        terminator: The special character following the word, or ``None``
            at the end of the expression.
        registry: Known operators, functions and variables.

    Returns:
        A ``FunctionRef`` when the word is a call, a ``Literal`` for numbers
        and variables, otherwise the ``ParseError`` describing the failure.
    """
    if terminator == OPEN_BRACKET:
        # Only functions may be followed by '('
        function = registry.functions.get(word)
        if function is None:
            return ParseError(target_type=TargetType.FUNCTION, target=word)
        return FunctionRef(function)

    if is_number_word(word, registry):
        value = parse_number(word)
        if value is None:
            return ParseError(target_type=TargetType.NUMBER, target=word)
        return Literal(value)

    if registry.has_variable(word):
        return Literal(registry.variables[word])

    if registry.has_function(word):
        return ParseError(target_type=TargetType.FUNCTION_VARIABLE, target=word)

    return ParseError(target_type=TargetType.VARIABLE, target=word)
