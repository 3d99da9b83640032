import os
from collections.abc import Iterator
from typing import Any

import pytest

from llcalc.llcalc_config import CalcConfig
from llcalc.llcalc_session import Session

# Start coverage in subprocesses when requested by the CI environment
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


@pytest.fixture  # type: ignore[misc]
def session() -> Iterator[Session]:
    with Session() as s:
        yield s


@pytest.fixture  # type: ignore[misc]
def integer_session() -> Iterator[Session]:
    with Session(CalcConfig(numeric="integer")) as s:
        yield s


@pytest.fixture  # type: ignore[misc]
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Any:
    for key in list(os.environ):
        if key.startswith("LLCALC_"):
            monkeypatch.delenv(key)
    return monkeypatch
