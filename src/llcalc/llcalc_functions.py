"""
Built-in function catalog for llcalc.

The catalog is a fixed, read-only table keyed by `(name, arity)`:

    arity 1: sqrt, sin, cos, tan, asin, acos, atan, log (natural), log2, log10
    arity 2: atan2(y, x), pow(base, exponent)

No zero-argument functions are registered, so `f()` never resolves.

Every entry follows IEEE semantics instead of raising: math domain errors give
nan, overflow gives inf and the logarithms of zero give -inf. Results are plain
floats; the session's numeric domain converts them.
"""

import math
from collections.abc import Callable
from types import MappingProxyType

from llcalc.llcalc_numeric import RealDomain

MathFunction = Callable[..., float]

_real = RealDomain()


def _ieee(fn: MathFunction, at_zero: float | None = None) -> MathFunction:
    def call(*args: float) -> float:
        try:
            return float(fn(*args))
        except OverflowError:
            return math.inf
        except ValueError:
            if at_zero is not None and args[0] == 0:
                return at_zero
            return math.nan

    call.__name__ = fn.__name__
    return call


class FunctionCatalog:
    """Read-only dispatch table from `(name, arity)` to a math function."""

    def __init__(self, table: dict[tuple[str, int], MathFunction]) -> None:
        self._table = MappingProxyType(dict(table))

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def lookup(self, name: str, arity: int) -> MathFunction | None:
        """Returns the function registered for `name` with `arity` arguments, or None."""
        return self._table.get((name, arity))

    def arities(self, name: str) -> list[int]:
        return sorted(arity for fname, arity in self._table if fname == name)

    def names(self) -> list[str]:
        return sorted({name for name, _ in self._table})


CATALOG = FunctionCatalog(
    {
        ("sqrt", 1): _ieee(math.sqrt),
        ("sin", 1): _ieee(math.sin),
        ("cos", 1): _ieee(math.cos),
        ("tan", 1): _ieee(math.tan),
        ("asin", 1): _ieee(math.asin),
        ("acos", 1): _ieee(math.acos),
        ("atan", 1): _ieee(math.atan),
        ("log", 1): _ieee(math.log, at_zero=-math.inf),
        ("log2", 1): _ieee(math.log2, at_zero=-math.inf),
        ("log10", 1): _ieee(math.log10, at_zero=-math.inf),
        ("atan2", 2): _ieee(math.atan2),
        ("pow", 2): _real.power,
    }
)


__all__ = ["CATALOG", "FunctionCatalog", "MathFunction"]
