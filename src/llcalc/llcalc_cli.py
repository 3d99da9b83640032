"""
llcalc CLI Entrypoint.

This module provides the command-line interface for evaluating llcalc expressions.

Features:
    - Evaluate a file with one expression per line, or an inline string.
    - Choose the numeric domain, output base, decimals and nesting limit.
    - Print the symbol table after evaluation.
    - Launch the interactive REPL when no source is given.

Example usage:
    llcalc
    llcalc -s "x = 3 + 4"
    llcalc -s "2^10" --integer --base 16
    llcalc session.calc --symbols --pretty

Settings not given on the command line fall back to the LLCALC_* environment
variables, then to the built-in defaults.
"""

import argparse
import logging
import sys
from typing import Any

from llcalc.llcalc_config import CalcConfig
from llcalc.llcalc_repl import format_symbol_table, print_diagnostics, start_repl
from llcalc.llcalc_session import Session


def run_llcalc(
    source: str,
    is_string: bool = False,
    config: CalcConfig | None = None,
    pretty: bool = False,
    symbols: bool = False,
) -> list[Any]:
    """
    Evaluate every non-empty line of `source` in a single session.

    Args:
        source (str): Expressions, or the path of a file holding them.
        is_string (bool): If True, treats `source` as expressions instead of a file path.
        config (CalcConfig | None): Session settings. Defaults to CalcConfig().
        pretty (bool): If True, prints a banner and `expr = result` lines.
        symbols (bool): If True, prints the symbol table after evaluation.

    Returns:
        list[Any]: The value of each evaluated line, in order.

    Side Effects:
        Prints results and diagnostics to stdout.
    """
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    results: list[Any] = []
    with Session(config) as session:
        if pretty:
            banner = "=" * 20
            print(f"{banner}\nllcalc [{session.domain.name}]\n{banner}")
        for line in source.splitlines():
            src = line.strip()
            if not src or src.startswith("#"):
                continue
            value = session.parse(src)
            results.append(value)
            text = session.format_number(value)
            print(f"{src} = {text}" if pretty else text)
            print_diagnostics(session)
        if symbols:
            print(format_symbol_table(session))
    return results


def main() -> None:
    """
    Entry point for the llcalc CLI.

    - Launches the REPL if no arguments are passed, no source is given, or `--repl` is specified.
    - Otherwise evaluates the source file or `-s` string.

    Supported flags:
        - `-s`, `--string`: Interpret source as expressions instead of a file path.
        - `--integer`: Evaluate in the integer domain instead of the real one.
        - `--base`: Output base for results (2-36).
        - `--decimals`: Fractional digits printed for reals.
        - `--max-depth`: Maximum expression nesting per line.
        - `--symbols`: Print the symbol table after evaluation (after every line in the REPL).
        - `-p`, `--pretty`: Print a banner and echo each expression.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Log scanner and evaluator activity; token trace in the REPL.
    """
    if len(sys.argv) == 1:
        start_repl(CalcConfig.load())
        return
    parser = argparse.ArgumentParser(prog="llcalc")
    parser.add_argument("source", nargs="?", help="Filename or expressions (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal expressions"
    )
    parser.add_argument(
        "--integer",
        dest="numeric",
        action="store_const",
        const="integer",
        help="Use the integer numeric domain (default: real)",
    )
    parser.add_argument("--base", type=int, help="Output base for results (default: 10)")
    parser.add_argument(
        "--decimals", type=int, help="Fractional digits printed for reals (default: 8)"
    )
    parser.add_argument(
        "--max-depth", type=int, help="Maximum expression nesting (default: 100)"
    )
    parser.add_argument(
        "--symbols", action="store_true", help="Print the symbol table after evaluation"
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show banner and echo expressions"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL instead of evaluating"
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    try:
        config = CalcConfig.load(
            {
                "numeric": args.numeric,
                "base": args.base,
                "decimals": args.decimals,
                "max_depth": args.max_depth,
            }
        )
    except ValueError as e:
        parser.error(str(e))

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    if args.repl or args.source is None:
        start_repl(config, show_symbols=args.symbols, verbose=args.verbose)
    else:
        run_llcalc(
            source=args.source,
            is_string=args.string,
            config=config,
            pretty=args.pretty,
            symbols=args.symbols,
        )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
