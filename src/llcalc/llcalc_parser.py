"""
llcalc Expression Evaluator

Predictive LL(1) recursive-descent parser that evaluates while it parses. Tokens
are pulled lazily from the Lexer one lookahead at a time; every production
returns the numeric value of what it recognized and no syntax tree is kept.

Grammar
-------
Four precedence levels, lowest first. Left recursion is removed by pairing each
level with a `_rest` production, implemented here as a loop::

    expr      := ('+' | '-')? term expr_rest
    expr_rest := (('+' | '-') term)*
    term      := pow_term term_rest
    term_rest := (('*' | '/' | '%') pow_term)*
    pow_term  := factor pow_rest
    pow_rest  := ('^' factor)*
    factor    := '(' expr ')'
               | NUMBER
               | IDENT '(' ')'
               | IDENT '(' expr ')'
               | IDENT '(' expr ',' expr ')'
               | IDENT '=' expr
               | IDENT

Semantics
---------
- A unary sign is accepted only at the start of an `expr` and applies to the
  first `term`, so `-2^2` is -4 and `2*-3` is rejected.
- `^` accumulates left to right: `2^3^2` is `(2^3)^2 = 64`.
- Assignment binds the value of the right-hand `expr` and returns it.
- All arithmetic goes through the session's NumericDomain.

Error handling
--------------
Conditions that end the line are raised as `CalcError` subclasses and caught by
the Session. A missing closing parenthesis and degenerate real arithmetic are
only reported in `diagnostics`; parsing continues.

Entry Points
------------
- `parse(line)`: Evaluate one line and return its value.
"""

import logging
from typing import Any

from llcalc.llcalc_constants import (
    DEFAULT_MAX_DEPTH,
    END,
    IDENT,
    INVALID,
    MAX_TOKEN_LENGTH,
    NUMBER,
)
from llcalc.llcalc_errors import (
    ARITHMETIC,
    SYNTAX,
    CalcError,
    CalcSyntaxError,
    Diagnostic,
    LexicalError,
    NestingTooDeepError,
    UnknownFunctionError,
    UnknownIdentifierError,
)
from llcalc.llcalc_functions import CATALOG, FunctionCatalog
from llcalc.llcalc_lexer import CharacterStream, Lexer, Token
from llcalc.llcalc_numeric import NumericDomain, RealDomain
from llcalc.llcalc_symbols import SymbolTable

logger = logging.getLogger(__name__)

PLUS = "PLUS"
SUB = "SUB"
MULT = "MULT"
DIV = "DIV"
MOD = "MOD"
POW = "POW"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
COMMA = "COMMA"
ASSIGN = "ASSIGN"

FIRST_TERM = frozenset({LPAREN, NUMBER, IDENT})
FOLLOW_EXPR = frozenset({RPAREN, END, COMMA})
FOLLOW_TERM = FOLLOW_EXPR | {PLUS, SUB}
FOLLOW_POW = FOLLOW_TERM | {MULT, DIV, MOD}


def describe(tok: Token) -> str:
    if tok.type == END:
        return "end of input"
    return f'{tok.type} "{tok.text}"'


class Parser:
    """
    Syntax-directed interpreter for one llcalc session.

    Attributes
    ----------
    symbols : SymbolTable
        Variables read and written by the expressions.
    domain : NumericDomain
        Numeric domain for literals and arithmetic.
    catalog : FunctionCatalog
        Built-in functions, looked up by name and arity.
    max_depth : int
        Maximum nesting of `expr` productions per line.
    lookahead : Token
        The single current token.
    diagnostics : list[Diagnostic]
        Conditions reported while evaluating the current line.
    """

    def __init__(
        self,
        symbols: SymbolTable,
        domain: NumericDomain | None = None,
        catalog: FunctionCatalog = CATALOG,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.symbols = symbols
        self.domain = domain if domain is not None else RealDomain()
        self.catalog = catalog
        self.max_depth = max_depth
        self.lexer = Lexer(CharacterStream(""), self.domain)
        self.lookahead: Token = Token(INVALID)
        self.depth = 0
        self.diagnostics: list[Diagnostic] = []
        self.operations = {
            "+": self.domain.add,
            "-": self.domain.sub,
            "*": self.domain.mul,
            "/": self.domain.div,
            "%": self.domain.mod,
            "^": self.domain.power,
        }

    @property
    def position(self) -> int:
        return self.lexer.stream.position

    def reset(self, line: str) -> None:
        """Points the scanner at the start of `line` and primes the lookahead."""
        self.lexer = Lexer(CharacterStream(line), self.domain)
        self.depth = 0
        self.diagnostics = []
        self.advance()

    def advance(self) -> Token:
        self.lookahead = self.lexer.next_token()
        return self.lookahead

    def report(self, diagnostic: Diagnostic) -> None:
        logger.info("%s at %d: %s", diagnostic.kind, diagnostic.position, diagnostic.message)
        self.diagnostics.append(diagnostic)

    def match(self, type_: str) -> bool:
        """Consumes the lookahead if it has the expected type, otherwise reports and leaves it."""
        tok = self.lookahead
        if tok.type != type_:
            self.report(
                Diagnostic(
                    SYNTAX,
                    f"Could not match symbol: expected {type_}, got {describe(tok)}",
                    tok.position,
                )
            )
            return False
        self.advance()
        return True

    def invalid_lookahead(self, production: str) -> CalcError:
        tok = self.lookahead
        if tok.type == INVALID and len(tok.text) > MAX_TOKEN_LENGTH:
            return LexicalError(
                f"Token longer than {MAX_TOKEN_LENGTH} characters", tok.position
            )
        if tok.type == INVALID:
            return LexicalError(f'Invalid input in lexer: "{tok.text}"', tok.position)
        return CalcSyntaxError(
            f"Invalid lookahead in {production}: {describe(tok)}", tok.position
        )

    def parse(self, line: str) -> Any:
        """Evaluates one line.

        Raises:
            CalcError: When evaluation of the line has to stop.
        """
        self.reset(line)
        if self.lookahead.type == END:
            return self.domain.zero

        value = self.expr()
        if self.lookahead.type != END:
            raise CalcSyntaxError(
                f"Unexpected trailing input: {describe(self.lookahead)}",
                self.lookahead.position,
            )
        return value

    # ------------------------------------------------------------------
    # arithmetic
    # ------------------------------------------------------------------
    def _arith(self, symbol: str, lhs: Any, rhs: Any) -> Any:
        result = self.operations[symbol](lhs, rhs)
        if self.domain.degenerate(result, lhs, rhs):
            fmt = self.domain.format
            self.report(
                Diagnostic(
                    ARITHMETIC,
                    f"Degenerate arithmetic: {fmt(lhs)} {symbol} {fmt(rhs)} = {fmt(result)}",
                    self.lookahead.position,
                )
            )
        return result

    def _call(self, name: str, args: list[Any], position: int) -> Any:
        fn = self.catalog.lookup(name, len(args))
        if fn is None:
            raise UnknownFunctionError(f'Unknown function: "{name}"', position)
        value = self.domain.coerce(fn(*(float(arg) for arg in args)))
        if self.domain.degenerate(value, *args):
            self.report(
                Diagnostic(
                    ARITHMETIC,
                    f"Degenerate result: {name}(...) = {self.domain.format(value)}",
                    position,
                )
            )
        return value

    # ------------------------------------------------------------------
    # productions
    # ------------------------------------------------------------------
    def expr(self) -> Any:
        """+,- terms (lowest precedence)."""
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise NestingTooDeepError(
                    f"Expression nested deeper than {self.max_depth} levels",
                    self.lookahead.position,
                )

            tok = self.lookahead
            if tok.type in FIRST_TERM:
                value = self.term()
            elif tok.type == PLUS:
                self.advance()
                value = self.term()
            elif tok.type == SUB:
                self.advance()
                value = self.domain.neg(self.term())
            elif tok.type == END:
                raise CalcSyntaxError("Unexpected end of input in expr", tok.position)
            else:
                raise self.invalid_lookahead("expr")

            return self.expr_rest(value)
        finally:
            self.depth -= 1

    def expr_rest(self, value: Any) -> Any:
        while True:
            tok = self.lookahead
            if tok.type == PLUS:
                self.advance()
                value = self._arith("+", value, self.term())
            elif tok.type == SUB:
                self.advance()
                value = self._arith("-", value, self.term())
            elif tok.type in FOLLOW_EXPR:
                return value
            else:
                raise self.invalid_lookahead("expr_rest")

    def term(self) -> Any:
        """*,/,% terms."""
        if self.lookahead.type not in FIRST_TERM:
            raise self.invalid_lookahead("term")
        return self.term_rest(self.pow_term())

    def term_rest(self, value: Any) -> Any:
        while True:
            tok = self.lookahead
            if tok.type == MULT:
                self.advance()
                value = self._arith("*", value, self.pow_term())
            elif tok.type == DIV:
                self.advance()
                value = self._arith("/", value, self.pow_term())
            elif tok.type == MOD:
                self.advance()
                value = self._arith("%", value, self.pow_term())
            elif tok.type in FOLLOW_TERM:
                return value
            else:
                raise self.invalid_lookahead("term_rest")

    def pow_term(self) -> Any:
        """^ terms."""
        if self.lookahead.type not in FIRST_TERM:
            raise self.invalid_lookahead("pow_term")
        return self.pow_rest(self.factor())

    def pow_rest(self, value: Any) -> Any:
        # each '^' takes the result so far as its base
        while True:
            tok = self.lookahead
            if tok.type == POW:
                self.advance()
                value = self._arith("^", value, self.factor())
            elif tok.type in FOLLOW_POW:
                return value
            else:
                raise self.invalid_lookahead("pow_rest")

    def factor(self) -> Any:
        """Parenthesized expression, literal, call, assignment or variable (highest precedence)."""
        tok = self.lookahead

        if tok.type == LPAREN:
            self.advance()
            value = self.expr()
            self.match(RPAREN)
            return value

        if tok.type == NUMBER:
            self.advance()
            return tok.value

        if tok.type == IDENT:
            name = tok.text
            self.advance()

            if self.lookahead.type == LPAREN:
                return self.call(name, tok.position)

            if self.lookahead.type == ASSIGN:
                self.advance()
                value = self.expr()
                self.symbols.assign_or_insert(name, value)
                return value

            sym = self.symbols.find(name)
            if sym is None:
                raise UnknownIdentifierError(f'Unknown identifier: "{name}"', tok.position)
            return sym.value

        raise self.invalid_lookahead("factor")

    def call(self, name: str, position: int) -> Any:
        """Function call; the lookahead is the opening parenthesis."""
        self.advance()

        if self.lookahead.type == RPAREN:
            self.advance()
            return self._call(name, [], position)

        args = [self.expr()]
        if self.lookahead.type == RPAREN:
            self.advance()
            return self._call(name, args, position)

        if self.lookahead.type == COMMA:
            self.advance()
            args.append(self.expr())
            self.match(RPAREN)
            return self._call(name, args, position)

        raise CalcSyntaxError(
            f'Invalid function call to "{name}": {describe(self.lookahead)}',
            self.lookahead.position,
        )


__all__ = ["Parser", "describe"]
