"""
Interactive llcalc shell.

Reads one expression per line, prints its value, then any diagnostics as
`[error] >>> ...` lines. The symbol table can be printed after every line with
`show_symbols`, or on demand with `:symbols`.

Commands:
    exit, quit    leave the REPL
    :symbols      print the symbol table
    :verbose      toggle printing of the scanned tokens
    :help         list commands and functions
    # ...         comment line, ignored
"""

from llcalc.llcalc_config import CalcConfig
from llcalc.llcalc_functions import CATALOG
from llcalc.llcalc_lexer import tokenize
from llcalc.llcalc_session import Session

HELP_TEXT = """Commands:
    exit, quit    leave the REPL
    :symbols      print the symbol table
    :verbose      toggle token trace
    :help         show this help
Operators: + - * / % ^ ( ) , =
Functions: """


def format_symbol_table(session: Session) -> str:
    """Renders the symbol table with a header and tab-indented entries."""
    listing = session.dump_symbols()
    lines = ["Symbol table:"]
    lines.extend(f"\t{entry}" for entry in listing.splitlines())
    return "\n".join(lines)


def print_diagnostics(session: Session) -> None:
    for diagnostic in session.diagnostics:
        print(f"[error] >>> {diagnostic.message}")


def evaluate_line(session: Session, line: str, verbose: bool = False) -> str:
    """Evaluates one line, prints its result and diagnostics and returns the result text."""
    if verbose:
        print(f"[tokens] >>> {tokenize(line, session.domain)}")
    value = session.parse(line)
    result = session.format_number(value)
    print(result)
    print_diagnostics(session)
    return result


def start_repl(
    config: CalcConfig | None = None, show_symbols: bool = False, verbose: bool = False
) -> None:
    session = Session(config)
    print(f"llcalc REPL [numeric={session.domain.name}]. Type 'exit' or 'quit' to leave.")

    try:
        while True:
            try:
                line = input(">>> ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting llcalc REPL.")
                break

            src = line.strip()
            if src in ("exit", "quit"):
                print("Exiting llcalc REPL.")
                break
            if not src or src.startswith("#"):
                continue
            if src == ":symbols":
                print(format_symbol_table(session))
                continue
            if src == ":verbose":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if src == ":help":
                print(HELP_TEXT + ", ".join(CATALOG.names()))
                continue
            if src.startswith(":"):
                print(f"[error] >>> Unknown command: {src}")
                continue

            evaluate_line(session, src, verbose)
            if show_symbols:
                print(format_symbol_table(session))
    finally:
        session.teardown()


def main() -> None:
    start_repl(CalcConfig.load())


if __name__ == "__main__":
    main()
