"""
Lexical analyzer for the llcalc expression language.

This module converts one input line into tokens, one token per call:

Classes:
    CharacterStream: Cursor over an input line with one character of put-back.
    Token: A single token with kind, matched text, numeric payload and position.
    Lexer: Produces tokens lazily from a CharacterStream.

Functions:
    next_token(line, cursor, domain): Stateless form of `Lexer.next_token`.
    tokenize(line, domain): Collects every token of a line, END excluded.

Features:
    - Longest-match recognition: the candidate text grows one character at a
      time and is re-classified as a number literal, an identifier or a
      single-character operator. When the next character makes the candidate
      unclassifiable, it is put back and the longest match so far is returned.
    - Spaces and tabs are skipped only before a candidate has started.
    - A newline before any candidate ends the line.
    - Unclassifiable input yields an INVALID token and consumes the offending
      character, so repeated calls always make progress.
    - A token spans at most MAX_TOKEN_LENGTH characters; longer text comes
      back as a single INVALID token.

Example:
    >>> lexer = Lexer(CharacterStream("pi*12"), RealDomain())
    >>> lexer.next_token()
    Token(IDENT, pi)
"""

import logging
from typing import Any

from llcalc.llcalc_constants import (
    END,
    IDENT,
    INVALID,
    MAX_TOKEN_LENGTH,
    NEWLINE,
    NUMBER,
    WHITESPACE,
    token_hashmap,
)
from llcalc.llcalc_numeric import NumericDomain, RealDomain

logger = logging.getLogger(__name__)

ASCII_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
ASCII_ALNUM = ASCII_LETTERS + "0123456789"


class CharacterStream:
    """
    Reads characters from a single input line.

    Attributes:
        source (str): The input line.
        position (int): Index of the next character to read.
    """

    def __init__(self, source: str, position: int = 0) -> None:
        self.source = source
        self.position = position

    def get(self) -> str | None:
        """Consumes and returns the next character, or None at end of input."""
        if self.position >= len(self.source):
            return None
        char = self.source[self.position]
        self.position += 1
        return char

    def peek(self) -> str | None:
        """Returns the next character without consuming it, or None at end of input."""
        if self.position >= len(self.source):
            return None
        return self.source[self.position]

    def putback(self) -> None:
        """Un-reads the last consumed character."""
        if self.position > 0:
            self.position -= 1

    def end_of_input(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token.

    Attributes:
        type (str): NUMBER, IDENT, END, INVALID or an operator kind from `token_hashmap`.
        text (str): The matched input text (empty for END).
        value (Any): Parsed literal value for NUMBER tokens, zero otherwise.
        position (int): Index of the token's first character in the line.
    """

    def __init__(self, type_: str, text: str = "", value: Any = 0, position: int = 0):
        self.type = type_
        self.text = text
        self.value = value
        self.position = position

    def __repr__(self) -> str:
        if self.type == NUMBER:
            return f"Token({self.type}, {self.value})"
        if self.type == END:
            return f"Token({self.type})"
        return f"Token({self.type}, {self.text})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.text == other.text
            and self.value == other.value
            and self.position == other.position
        )

    def __hash__(self) -> int:
        return hash((self.type, self.text, self.value, self.position))


def match_ident(text: str) -> bool:
    """First character alphabetic, the rest alphanumeric (ASCII only)."""
    if not text or text[0] not in ASCII_LETTERS:
        return False
    return all(ch in ASCII_ALNUM for ch in text[1:])


class Lexer:
    """Longest-match scanner over a CharacterStream.

    Attributes:
        stream (CharacterStream): The line being scanned.
        domain (NumericDomain): Decides which text is a number literal and its value.
    """

    def __init__(self, stream: CharacterStream, domain: NumericDomain | None = None) -> None:
        self.stream = stream
        self.domain = domain if domain is not None else RealDomain()

    def classify(self, text: str) -> str:
        """Classifies a candidate text in priority order: number, identifier, operator.

        Returns:
            str: The token kind, INVALID when nothing matches.
        """
        if self.domain.matches_literal(text):
            return NUMBER
        if match_ident(text):
            return IDENT
        return token_hashmap.get(text, INVALID)

    def build(self, kind: str, text: str, position: int) -> Token:
        """Creates the token for a finished match, parsing the value of NUMBER tokens."""
        if kind != NUMBER:
            return Token(kind, text, position=position)
        try:
            value = self.domain.parse_literal(text)
        except ValueError:
            logger.debug("unconvertible literal at %d", position)
            return Token(INVALID, text, position=position)
        return Token(NUMBER, text, value, position)

    def next_token(self) -> Token:
        """Consumes and returns the next token from the stream."""
        candidate = ""
        start = self.stream.position
        longest: tuple[str, str] | None = None

        while True:
            char = self.stream.get()
            if char is None:
                break

            if longest is None:
                if char in WHITESPACE:
                    start = self.stream.position
                    continue
                if char == NEWLINE:
                    return Token(END, position=start)

            candidate += char
            if len(candidate) > MAX_TOKEN_LENGTH:
                logger.debug("token longer than %d characters at %d", MAX_TOKEN_LENGTH, start)
                return Token(INVALID, candidate, position=start)

            kind = self.classify(candidate)
            if kind == INVALID:
                if longest is not None:
                    self.stream.putback()
                break

            longest = (kind, candidate)
            if self.stream.peek() is None:
                break

        if longest is not None:
            token = self.build(longest[0], longest[1], start)
            logger.debug("token %r at %d", token, start)
            return token
        if not candidate:
            return Token(END, position=self.stream.position)

        logger.debug("invalid input %r at %d", candidate, start)
        return Token(INVALID, candidate, position=start)


def next_token(
    line: str, cursor: int = 0, domain: NumericDomain | None = None
) -> tuple[Token, int]:
    """Scans one token of `line` starting at `cursor`.

    Returns:
        tuple[Token, int]: The token and the cursor just past it.
    """
    lexer = Lexer(CharacterStream(line, cursor), domain)
    token = lexer.next_token()
    return token, lexer.stream.position


def tokenize(line: str, domain: NumericDomain | None = None) -> list[Token]:
    """Collects every token of `line` up to, but excluding, END."""
    lexer = Lexer(CharacterStream(line), domain)
    tokens = []
    while True:
        token = lexer.next_token()
        if token.type == END:
            break
        tokens.append(token)
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "match_ident", "next_token", "tokenize"]
