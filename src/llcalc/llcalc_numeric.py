"""
Numeric domains for llcalc.

A session evaluates every expression in exactly one numeric domain, chosen once
from configuration and never mixed at runtime:

Classes:
    NumericDomain: Interface shared by both domains.
    RealDomain: IEEE double precision. Degenerate operations (division by zero,
        overflow, math domain errors) yield inf/nan instead of raising.
    IntegerDomain: Signed fixed-width integers with two's complement wrap-around.
        Division truncates toward zero and the remainder follows the dividend.

Functions:
    to_base(number, base): Render a non-negative int in base 2..36.
    make_domain(numeric, base, decimals): Build the domain named by `numeric`.

Example:
    >>> domain = RealDomain()
    >>> domain.format(domain.div(2.0, 3.0))
    '0.66666667'
"""

import math
from typing import Any

from llcalc.llcalc_constants import (
    DEFAULT_BASE,
    DEFAULT_DECIMALS,
    DIGITS,
    EPSILON,
    INTEGER_BITS,
    NUMERIC_MODES,
)
from llcalc.llcalc_errors import ArithmeticDegenerateError


def to_base(number: int, base: int = DEFAULT_BASE) -> str:
    """Renders a non-negative integer in the given base using digits 0-9a-z.

    Args:
        number (int): The value to render. Must be >= 0.
        base (int): Target base between 2 and 36.

    Returns:
        str: The digit string, "0" for zero.
    """
    if not 2 <= base <= len(DIGITS):
        raise ValueError(f"Unsupported base: {base}")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, digit = divmod(number, base)
        digits.append(DIGITS[digit])
    return "".join(reversed(digits))


def is_decimal_digits(text: str) -> bool:
    return bool(text) and all(ch in "0123456789" for ch in text)


class NumericDomain:
    """Interface for the value domain of one session.

    Attributes:
        name (str): "real" or "integer".
        zero (Any): The default value returned on failure.
        base (int): Base used by `format`.
    """

    name = ""
    zero: Any = 0

    def __init__(self, base: int = DEFAULT_BASE) -> None:
        if not 2 <= base <= len(DIGITS):
            raise ValueError(f"Unsupported base: {base}")
        self.base = base

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base={self.base})"

    def matches_literal(self, text: str) -> bool:
        raise NotImplementedError

    def parse_literal(self, text: str) -> Any:
        raise NotImplementedError

    def coerce(self, value: float) -> Any:
        raise NotImplementedError

    def add(self, lhs: Any, rhs: Any) -> Any:
        raise NotImplementedError

    def sub(self, lhs: Any, rhs: Any) -> Any:
        raise NotImplementedError

    def mul(self, lhs: Any, rhs: Any) -> Any:
        raise NotImplementedError

    def div(self, lhs: Any, rhs: Any) -> Any:
        raise NotImplementedError

    def mod(self, lhs: Any, rhs: Any) -> Any:
        raise NotImplementedError

    def power(self, lhs: Any, rhs: Any) -> Any:
        raise NotImplementedError

    def neg(self, value: Any) -> Any:
        raise NotImplementedError

    def degenerate(self, result: Any, *operands: Any) -> bool:
        """Returns True when `result` is a degenerate value produced from regular operands."""
        return False

    def format(self, value: Any) -> str:
        raise NotImplementedError


class RealDomain(NumericDomain):
    """IEEE double precision domain.

    Attributes:
        decimals (int): Maximum number of fractional digits printed by `format`.
    """

    name = "real"
    zero = 0.0

    def __init__(self, base: int = DEFAULT_BASE, decimals: int = DEFAULT_DECIMALS) -> None:
        super().__init__(base)
        if decimals < 0:
            raise ValueError(f"Decimals must be >= 0, got {decimals}")
        self.decimals = decimals

    def __repr__(self) -> str:
        return f"RealDomain(base={self.base}, decimals={self.decimals})"

    def matches_literal(self, text: str) -> bool:
        """Digits with at most one decimal point."""
        if not text or text.count(".") > 1:
            return False
        return all(ch in "0123456789." for ch in text)

    def parse_literal(self, text: str) -> float:
        # a lone "." is a valid literal with value zero
        if text == ".":
            return 0.0
        return float(text)

    def coerce(self, value: float) -> float:
        return float(value)

    def add(self, lhs: float, rhs: float) -> float:
        return lhs + rhs

    def sub(self, lhs: float, rhs: float) -> float:
        return lhs - rhs

    def mul(self, lhs: float, rhs: float) -> float:
        return lhs * rhs

    def div(self, lhs: float, rhs: float) -> float:
        if rhs == 0:
            if lhs == 0 or math.isnan(lhs):
                return math.nan
            return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
        return lhs / rhs

    def mod(self, lhs: float, rhs: float) -> float:
        try:
            return math.fmod(lhs, rhs)
        except ValueError:
            return math.nan

    def power(self, lhs: float, rhs: float) -> float:
        try:
            return math.pow(lhs, rhs)
        except OverflowError:
            odd = float(rhs).is_integer() and int(rhs) % 2 == 1
            return -math.inf if lhs < 0 and odd else math.inf
        except ValueError:
            if lhs == 0:
                return math.inf
            return math.nan

    def neg(self, value: float) -> float:
        return -value

    def degenerate(self, result: float, *operands: float) -> bool:
        return not math.isfinite(result) and all(math.isfinite(op) for op in operands)

    def format(self, value: float) -> str:
        """Renders a real with up to `decimals` fractional digits.

        The last digit is rounded half-up with an EPSILON tolerance and the carry
        propagates into the integer part. Trailing zeros are stripped.
        """
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "-inf" if value < 0 else "inf"

        negative = value < 0
        value = abs(value)
        whole = math.floor(value)
        scale = self.base**self.decimals
        scaled = (value - whole) * scale
        units = math.floor(scaled)
        if scaled - units >= 0.5 - EPSILON:
            units += 1
        if units >= scale:
            whole += 1
            units -= scale

        text = to_base(whole, self.base)
        if units:
            fraction = to_base(units, self.base).rjust(self.decimals, "0").rstrip("0")
            text += "." + fraction
        if negative and text != "0":
            text = "-" + text
        return text


class IntegerDomain(NumericDomain):
    """Signed integer domain of `bits` width with wrap-around arithmetic."""

    name = "integer"
    zero = 0

    def __init__(self, base: int = DEFAULT_BASE, bits: int = INTEGER_BITS) -> None:
        super().__init__(base)
        self.bits = bits
        self.modulus = 1 << bits
        self.limit = 1 << (bits - 1)

    def wrap(self, value: int) -> int:
        value %= self.modulus
        if value >= self.limit:
            value -= self.modulus
        return value

    def matches_literal(self, text: str) -> bool:
        return is_decimal_digits(text)

    def parse_literal(self, text: str) -> int:
        return self.wrap(int(text))

    def coerce(self, value: float) -> int:
        if isinstance(value, float) and not math.isfinite(value):
            raise ArithmeticDegenerateError(
                f"Result {value} has no value in the integer domain"
            )
        return self.wrap(int(value))

    def add(self, lhs: int, rhs: int) -> int:
        return self.wrap(lhs + rhs)

    def sub(self, lhs: int, rhs: int) -> int:
        return self.wrap(lhs - rhs)

    def mul(self, lhs: int, rhs: int) -> int:
        return self.wrap(lhs * rhs)

    def _truncating_div(self, lhs: int, rhs: int) -> int:
        quotient = abs(lhs) // abs(rhs)
        return -quotient if (lhs < 0) != (rhs < 0) else quotient

    def div(self, lhs: int, rhs: int) -> int:
        if rhs == 0:
            raise ArithmeticDegenerateError("Division by zero")
        return self.wrap(self._truncating_div(lhs, rhs))

    def mod(self, lhs: int, rhs: int) -> int:
        if rhs == 0:
            raise ArithmeticDegenerateError("Remainder by zero")
        return self.wrap(lhs - rhs * self._truncating_div(lhs, rhs))

    def power(self, lhs: int, rhs: int) -> int:
        if rhs >= 0:
            return self.wrap(pow(lhs, rhs, self.modulus))
        if lhs == 0:
            raise ArithmeticDegenerateError("Zero raised to a negative power")
        # |lhs| > 1 truncates to zero, only +-1 survive
        return self.coerce(math.pow(lhs, rhs))

    def neg(self, value: int) -> int:
        return self.wrap(-value)

    def format(self, value: int) -> str:
        if value < 0:
            return "-" + to_base(-value, self.base)
        return to_base(value, self.base)


def make_domain(
    numeric: str, base: int = DEFAULT_BASE, decimals: int = DEFAULT_DECIMALS
) -> NumericDomain:
    """Builds the numeric domain named by `numeric` ("real" or "integer").

    Raises:
        ValueError: For an unknown mode name.
    """
    if numeric == "real":
        return RealDomain(base=base, decimals=decimals)
    if numeric == "integer":
        return IntegerDomain(base=base)
    raise ValueError(f"Unknown numeric mode: {numeric!r} (expected one of {NUMERIC_MODES})")


__all__ = [
    "IntegerDomain",
    "NumericDomain",
    "RealDomain",
    "is_decimal_digits",
    "make_domain",
    "to_base",
]
