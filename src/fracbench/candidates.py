"""Candidate registry: the fixed, ordered set of transform strategies.

Every strategy maps a non-negative integer ``n`` to ``n / 10**digits(n)``
(``123 -> 0.123``).  Input ``0`` maps to ``0.0`` in every variant.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from fracbench.domain.models import NamedFunction
from fracbench.errors import UnknownCandidateError

REFERENCE_NAME = "SimpleString"


def simple_string(x: int) -> float:
    """Parse the decimal literal ``0.<digits>``."""
    return float("0." + str(x))


def string_math(x: int) -> float:
    return x / (10 ** len(str(x)))


def pure_math(x: int) -> float:
    # log10 is undefined at 0
    if x == 0:
        return 0.0
    return x / (10 ** (math.floor(math.log10(x)) + 1))


def weak_algorithm(x: int) -> float:
    f = float(x)
    while f >= 1.0:
        f /= 10.0
    return f


def medium_algorithm(x: int) -> float:
    f = x * 0.1
    while f >= 1.0:
        f *= 0.1
    return f


def recursive_divide(x: int) -> float:
    return _recursive_divide(x * 0.1)


def _recursive_divide(f: float) -> float:
    # at most ten levels deep for 32-bit inputs
    if f < 1.0:
        return f
    return _recursive_divide(f * 0.1)


def if_madness(x: int) -> float:
    if x >= 1000000000:
        return x * 0.0000000001
    elif x >= 100000000:
        return x * 0.000000001
    elif x >= 10000000:
        return x * 0.00000001
    elif x >= 1000000:
        return x * 0.0000001
    elif x >= 100000:
        return x * 0.000001
    elif x >= 10000:
        return x * 0.00001
    elif x >= 1000:
        return x * 0.0001
    elif x >= 100:
        return x * 0.001
    elif x >= 10:
        return x * 0.01
    else:
        return x * 0.1


_REGISTRY: tuple[NamedFunction, ...] = (
    NamedFunction("SimpleString", simple_string),
    NamedFunction("StringMath", string_math),
    NamedFunction("PureMath", pure_math),
    NamedFunction("WeakAlgorithm", weak_algorithm),
    NamedFunction("MediumAlgorithm", medium_algorithm),
    NamedFunction("RecursiveDivide", recursive_divide),
    NamedFunction("IfMadness", if_madness),
)


def candidate_names() -> tuple[str, ...]:
    return tuple(c.name for c in _REGISTRY)


def get_candidate(name: str) -> NamedFunction:
    """Look up a single strategy by display name."""
    for candidate in _REGISTRY:
        if candidate.name == name:
            return candidate
    raise UnknownCandidateError(name, candidate_names())


def reference() -> NamedFunction:
    """Return the ground-truth strategy."""
    return get_candidate(REFERENCE_NAME)


def list_candidates(names: Sequence[str] | None = None) -> list[NamedFunction]:
    """Return the registered strategies in registry order.

    Args:
        names: Optional subset to keep.  Registry order is preserved
            regardless of the order given here.

    Raises:
        UnknownCandidateError: If *names* contains an unregistered name.
    """
    if names is None:
        return list(_REGISTRY)
    wanted = set(names)
    for name in wanted:
        get_candidate(name)
    return [c for c in _REGISTRY if c.name in wanted]
