"""
Configuration for llcalc sessions.

Settings are resolved once when a session starts, lowest priority first:

    1. built-in defaults (see llcalc_constants)
    2. environment variables LLCALC_NUMERIC, LLCALC_BASE, LLCALC_DECIMALS, LLCALC_MAX_DEPTH
    3. explicit overrides (command-line flags)

Example:
    >>> config = CalcConfig.load({"numeric": "integer"})
    >>> config.domain()
    IntegerDomain(base=10)
"""

import os
from collections.abc import Mapping
from typing import Any

from llcalc.llcalc_constants import (
    DEFAULT_BASE,
    DEFAULT_DECIMALS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_NUMERIC,
    DIGITS,
    NUMERIC_MODES,
)
from llcalc.llcalc_numeric import NumericDomain, make_domain

ENV_PREFIX = "LLCALC_"
MAX_DECIMALS = 16


class CalcConfig:
    """Validated session settings.

    Attributes:
        numeric (str): "real" or "integer".
        base (int): Output base for formatted numbers, 2..36.
        decimals (int): Fractional digits printed in the real domain, 0..16.
        max_depth (int): Maximum expression nesting per line.

    Raises:
        ValueError: If any setting is out of range.
    """

    def __init__(
        self,
        numeric: str = DEFAULT_NUMERIC,
        base: int = DEFAULT_BASE,
        decimals: int = DEFAULT_DECIMALS,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if numeric not in NUMERIC_MODES:
            raise ValueError(f"numeric must be one of {NUMERIC_MODES}, got {numeric!r}")
        if not 2 <= base <= len(DIGITS):
            raise ValueError(f"base must be between 2 and {len(DIGITS)}, got {base}")
        if not 0 <= decimals <= MAX_DECIMALS:
            raise ValueError(f"decimals must be between 0 and {MAX_DECIMALS}, got {decimals}")
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        self.numeric = numeric
        self.base = base
        self.decimals = decimals
        self.max_depth = max_depth

    def __repr__(self) -> str:
        return (
            f"CalcConfig(numeric={self.numeric!r}, base={self.base}, "
            f"decimals={self.decimals}, max_depth={self.max_depth})"
        )

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, CalcConfig) and self.as_dict() == other.as_dict()

    def as_dict(self) -> dict[str, Any]:
        return {
            "numeric": self.numeric,
            "base": self.base,
            "decimals": self.decimals,
            "max_depth": self.max_depth,
        }

    def domain(self) -> NumericDomain:
        return make_domain(self.numeric, base=self.base, decimals=self.decimals)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CalcConfig":
        return cls.load(environ=environ)

    @classmethod
    def load(
        cls,
        overrides: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "CalcConfig":
        """Builds a config from defaults, then the environment, then `overrides`.

        Override values of None are ignored so unset command-line flags fall through.
        """
        env = os.environ if environ is None else environ
        settings: dict[str, Any] = {}

        numeric = env.get(ENV_PREFIX + "NUMERIC")
        if numeric:
            settings["numeric"] = numeric.strip().lower()
        for key in ("base", "decimals", "max_depth"):
            raw = env.get(ENV_PREFIX + key.upper())
            if raw:
                try:
                    settings[key] = int(raw)
                except ValueError:
                    raise ValueError(
                        f"{ENV_PREFIX}{key.upper()} must be an integer, got {raw!r}"
                    ) from None

        for key, value in (overrides or {}).items():
            if value is not None:
                settings[key] = value

        return cls(**settings)


__all__ = ["CalcConfig", "ENV_PREFIX"]
