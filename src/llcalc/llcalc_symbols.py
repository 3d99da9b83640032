"""
Symbol environment for llcalc sessions.

Classes:
    Symbol: A named numeric value.
    SymbolTable: Insertion-ordered collection of Symbols with unique names.

Assigning to an existing name overwrites its value in place and keeps its
position in the listing; assigning a new name appends it. There is no deletion
of single symbols; `clear` drops the whole table when a session ends.

Example:
    >>> table = SymbolTable()
    >>> table.assign_or_insert("x", 5.0)
    Symbol(x, 5.0)
    >>> table.find("x").value
    5.0
"""

from collections.abc import Callable, Iterator
from typing import Any


class Symbol:
    """A named value owned by a SymbolTable.

    Attributes:
        name (str): Identifier the value is bound to.
        value (Any): Value in the session's numeric domain.
    """

    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value

    def __repr__(self) -> str:
        return f"Symbol({self.name}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Symbol)
            and self.name == other.name
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.name, self.value))


class SymbolTable:
    """Mutable mapping from identifier name to Symbol, in insertion order."""

    def __init__(self, seed: dict[str, Any] | None = None) -> None:
        self._symbols: dict[str, Symbol] = {}
        for name, value in (seed or {}).items():
            self.assign_or_insert(name, value)

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(list(self._symbols.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def find(self, name: str) -> Symbol | None:
        """Returns the symbol bound to `name`, or None."""
        return self._symbols.get(name)

    def assign_or_insert(self, name: str, value: Any) -> Symbol:
        """Overwrites the value of an existing symbol or appends a new one.

        Returns:
            Symbol: The updated or newly created symbol.
        """
        sym = self.find(name)
        if sym is not None:
            sym.value = value
            return sym
        sym = Symbol(name, value)
        self._symbols[name] = sym
        return sym

    def names(self) -> list[str]:
        return list(self._symbols)

    def format_all(self, format_number: Callable[[Any], str] = str) -> str:
        """Lists every symbol as `name = value`, one per line, in insertion order."""
        return "\n".join(
            f"{sym.name} = {format_number(sym.value)}" for sym in self._symbols.values()
        )

    def clear(self) -> None:
        self._symbols.clear()


__all__ = ["Symbol", "SymbolTable"]
