"""
Shared constants for the llcalc expression language.

Token kinds:
    NUMBER, IDENT, END and INVALID are produced by the scanner for literals,
    identifiers, end of line and unclassifiable input. Every other token kind
    is a single self-representing character listed in `token_hashmap`.

Exports:
    - token_hashmap: maps operator/punctuation characters to token kinds
    - operator_tokens: the operator/punctuation kinds in declaration order
    - BUILTIN_CONSTANTS: symbols seeded into every new session
    - defaults for configuration (numeric mode, base, decimals, depth limit)
"""

import math

NUMBER = "NUMBER"
IDENT = "IDENT"
END = "END"
INVALID = "INVALID"

token_hashmap: dict[str, str] = {
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
    "%": "MOD",
    "^": "POW",
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
    "=": "ASSIGN",
}

operator_tokens: list[str] = list(token_hashmap.values())

# skipped only while no candidate token has been started
WHITESPACE = " \t"
NEWLINE = "\n"

# longest text a single token may span
MAX_TOKEN_LENGTH = 256

BUILTIN_CONSTANTS: dict[str, float] = {"pi": math.pi}

NUMERIC_MODES = ("real", "integer")
DEFAULT_NUMERIC = "real"
DEFAULT_BASE = 10
DEFAULT_DECIMALS = 8
DEFAULT_MAX_DEPTH = 100

EPSILON = 1e-8

INTEGER_BITS = 64

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
