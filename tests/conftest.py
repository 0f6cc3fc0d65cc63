"""Shared pytest fixtures for fracbench tests.

Provides candidate factories and keeps global console/logging state from
leaking between tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

import pytest

from fracbench.candidates import reference
from fracbench.console import configure
from fracbench.domain.models import NamedFunction


def exact_fraction(n: int) -> float:
    """Independent oracle: ``n / 10**digits(n)``, with 0 -> 0.0."""
    return n / 10 ** len(str(n))


@pytest.fixture(autouse=True)
def _plain_console_and_clean_logging() -> Iterator[None]:
    configure(backend="plain")
    yield
    pkg_logger = logging.getLogger("fracbench")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.setLevel(logging.NOTSET)
    configure(backend="plain")


@pytest.fixture()
def truth() -> NamedFunction:
    """The registry's reference strategy."""
    return reference()


@pytest.fixture()
def make_candidate() -> Callable[..., NamedFunction]:
    """Factory for NamedFunction candidates; defaults to the exact oracle."""

    def _factory(
        name: str = "Exact", func: Callable[[int], float] = exact_fraction
    ) -> NamedFunction:
        return NamedFunction(name, func)

    return _factory


@pytest.fixture()
def make_diverging() -> Callable[..., NamedFunction]:
    """Factory for a candidate that returns ``exact + 1.0`` at the given inputs."""

    def _factory(*bad_inputs: int, name: str = "Diverging") -> NamedFunction:
        bad = frozenset(bad_inputs)

        def _func(n: int) -> float:
            value = exact_fraction(n)
            return value + 1.0 if n in bad else value

        return NamedFunction(name, _func)

    return _factory


@pytest.fixture()
def always_zero() -> NamedFunction:
    return NamedFunction("AlwaysZero", lambda n: 0.0)


@pytest.fixture()
def crashing() -> NamedFunction:
    """Candidate that raises ZeroDivisionError from input 7 onwards."""

    def _func(n: int) -> float:
        if n >= 7:
            return 1 / 0
        return exact_fraction(n)

    return NamedFunction("Crashing", _func)
