"""
Diagnostic taxonomy for llcalc.

Every condition the evaluator can run into is represented here. Conditions that
end evaluation of the current line are raised as `CalcError` subclasses inside
the parser and caught by the session; conditions that only warn are recorded as
`Diagnostic` entries without unwinding.

Classes:
    Diagnostic: A reported condition (kind, message, input position).
    CalcError: Base class for conditions that terminate the current line.
    LexicalError: Accumulated input matched no token class.
    CalcSyntaxError: Lookahead outside a production's FIRST set, or a missing terminal.
    NestingTooDeepError: Expression nesting exceeded the configured depth limit.
    UnknownIdentifierError: A variable was read before being assigned.
    UnknownFunctionError: No catalog entry for the called name and arity.
    ArithmeticDegenerateError: Degenerate arithmetic with no value in the numeric domain.
"""

from typing import Any

LEXICAL = "LexicalError"
SYNTAX = "SyntaxError"
UNKNOWN_IDENTIFIER = "UnknownIdentifier"
UNKNOWN_FUNCTION = "UnknownFunction"
ARITHMETIC = "ArithmeticDegenerate"


class Diagnostic:
    """A single reported condition.

    Attributes:
        kind (str): One of the taxonomy names (e.g. "UnknownIdentifier").
        message (str): Human readable description.
        position (int): Cursor position in the input line where it was detected.
    """

    def __init__(self, kind: str, message: str, position: int = 0) -> None:
        self.kind = kind
        self.message = message
        self.position = position

    def __repr__(self) -> str:
        return f"Diagnostic({self.kind}, {self.message!r}, {self.position})"

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Diagnostic)
            and self.kind == other.kind
            and self.message == other.message
            and self.position == other.position
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.message, self.position))


class CalcError(Exception):
    """Base class for conditions that terminate evaluation of the current line.

    Attributes:
        kind (str): Taxonomy name used for the resulting `Diagnostic`.
        position (int | None): Cursor position where the condition was detected,
            or None when raised outside the scanner's view (e.g. by the numeric domain).
    """

    kind = SYNTAX

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def to_diagnostic(self, fallback: int = 0) -> Diagnostic:
        """Converts the error into a `Diagnostic`, using `fallback` when no position is known."""
        position = self.position if self.position is not None else fallback
        return Diagnostic(self.kind, self.message, position)


class LexicalError(CalcError):
    kind = LEXICAL


class CalcSyntaxError(CalcError):
    kind = SYNTAX


class NestingTooDeepError(CalcSyntaxError):
    pass


class UnknownIdentifierError(CalcError):
    kind = UNKNOWN_IDENTIFIER


class UnknownFunctionError(CalcError):
    kind = UNKNOWN_FUNCTION


class ArithmeticDegenerateError(CalcError):
    kind = ARITHMETIC


__all__ = [
    "ARITHMETIC",
    "ArithmeticDegenerateError",
    "CalcError",
    "CalcSyntaxError",
    "Diagnostic",
    "LEXICAL",
    "LexicalError",
    "NestingTooDeepError",
    "SYNTAX",
    "UNKNOWN_FUNCTION",
    "UNKNOWN_IDENTIFIER",
    "UnknownFunctionError",
    "UnknownIdentifierError",
]
