"""
Calculator session: the public surface of llcalc.

A Session owns one SymbolTable (seeded with `pi`), one Parser with its single
lookahead token, and the numeric domain chosen by its configuration. `parse`
never raises for bad input: it returns the domain's zero and leaves the reasons
in `diagnostics`.

Functions mirror the operations a host uses:
    init_parser(config) -> Session
    deinit_parser(session)
    parse(session, line) -> value
    print_symbols(session) -> str

Example:
    >>> session = init_parser()
    >>> parse(session, "x = 3 + 4")
    7.0
    >>> parse(session, "x * 2")
    14.0
    >>> deinit_parser(session)
"""

import logging
from typing import Any

from llcalc.llcalc_config import CalcConfig
from llcalc.llcalc_constants import BUILTIN_CONSTANTS
from llcalc.llcalc_errors import SYNTAX, CalcError, Diagnostic
from llcalc.llcalc_functions import CATALOG
from llcalc.llcalc_parser import Parser
from llcalc.llcalc_symbols import SymbolTable

logger = logging.getLogger(__name__)


class Session:
    """One interactive calculator session.

    Attributes:
        config (CalcConfig): Settings the session was created with.
        domain (NumericDomain): The session's numeric domain.
        symbols (SymbolTable): Variables, seeded with the built-in constants.
        parser (Parser): Evaluator bound to `symbols`.
        diagnostics (list[Diagnostic]): Conditions reported by the last `parse` call.
    """

    def __init__(self, config: CalcConfig | None = None) -> None:
        self.config = config if config is not None else CalcConfig()
        self.domain = self.config.domain()
        self.symbols = SymbolTable(
            {name: self.domain.coerce(value) for name, value in BUILTIN_CONSTANTS.items()}
        )
        self.parser = Parser(self.symbols, self.domain, CATALOG, self.config.max_depth)
        self.diagnostics: list[Diagnostic] = []
        self.closed = False
        logger.debug("session started with %r", self.config)

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.teardown()

    def _check_open(self) -> None:
        if self.closed:
            raise RuntimeError("Session has been torn down")

    def parse(self, line: str) -> Any:
        """Evaluates one line and returns its value, or the domain's zero on failure."""
        self._check_open()
        try:
            value = self.parser.parse(line)
        except CalcError as exc:
            self.parser.report(exc.to_diagnostic(self.parser.position))
            value = self.domain.zero
        except RecursionError:
            self.parser.report(
                Diagnostic(SYNTAX, "Expression nested too deeply", self.parser.position)
            )
            value = self.domain.zero
        self.diagnostics = list(self.parser.diagnostics)
        return value

    def format_number(self, value: Any) -> str:
        return self.domain.format(value)

    def dump_symbols(self) -> str:
        self._check_open()
        return self.symbols.format_all(self.format_number)

    def teardown(self) -> None:
        """Releases the symbol table. The session cannot be used afterwards."""
        if not self.closed:
            self.symbols.clear()
            self.closed = True
            logger.debug("session closed")


def init_parser(config: CalcConfig | None = None) -> Session:
    return Session(config)


def deinit_parser(session: Session) -> None:
    session.teardown()


def parse(session: Session, line: str) -> Any:
    return session.parse(line)


def print_symbols(session: Session) -> str:
    return session.dump_symbols()


__all__ = ["Session", "deinit_parser", "init_parser", "parse", "print_symbols"]
