"""Core data models for fracbench."""

from __future__ import annotations

import math
from array import array
from dataclasses import dataclass, field
from enum import Enum

from fracbench.domain.protocols import Transform

# Maximum acceptable |reference - candidate| for a single input.
DEFAULT_TOLERANCE = 0.0001

# Largest non-negative 32-bit signed integer; the domain is [0, INT32_MAX].
INT32_MAX = 2**31 - 1


class OutcomeStatus(Enum):
    """Result of checking one candidate against the reference."""

    PASS = "pass"
    FAIL = "fail"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class NamedFunction:
    """A candidate transform identified by its display name."""

    name: str
    func: Transform = field(compare=False)

    def __call__(self, n: int) -> float:
        return self.func(n)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TestOutcome:
    """Per-candidate result of an equivalence check.

    A FAIL carries the first failing input together with both values and the
    signed error ``reference_value - candidate_value``.  When the candidate
    raised instead of returning, ``reason`` holds the exception text and the
    values are NaN.
    """

    __test__ = False  # not a pytest test class

    status: OutcomeStatus
    first_failing_input: int | None = None
    reference_value: float | None = None
    candidate_value: float | None = None
    error: float | None = None
    reason: str = ""

    @classmethod
    def passed(cls) -> TestOutcome:
        return cls(status=OutcomeStatus.PASS)

    @classmethod
    def failed(
        cls,
        n: int,
        reference_value: float,
        candidate_value: float,
        error: float,
        reason: str = "",
    ) -> TestOutcome:
        return cls(
            status=OutcomeStatus.FAIL,
            first_failing_input=n,
            reference_value=reference_value,
            candidate_value=candidate_value,
            error=error,
            reason=reason,
        )

    @classmethod
    def crashed(cls, n: int | None, exc: BaseException) -> TestOutcome:
        return cls(
            status=OutcomeStatus.FAIL,
            first_failing_input=n,
            reference_value=math.nan,
            candidate_value=math.nan,
            error=math.nan,
            reason=f"{type(exc).__name__}: {exc}",
        )

    @classmethod
    def incomplete(cls, reason: str = "") -> TestOutcome:
        return cls(status=OutcomeStatus.INCOMPLETE, reason=reason)

    @property
    def is_pass(self) -> bool:
        return self.status is OutcomeStatus.PASS

    @property
    def is_fail(self) -> bool:
        return self.status is OutcomeStatus.FAIL

    def describe(self) -> str:
        """One-line human readable summary."""
        if self.status is OutcomeStatus.PASS:
            return "pass"
        if self.status is OutcomeStatus.INCOMPLETE:
            return f"incomplete{f' ({self.reason})' if self.reason else ''}"
        if self.reason:
            return f"fail at {self.first_failing_input}: {self.reason}"
        return (
            f"fail at {self.first_failing_input}: "
            f"{self.reference_value:.20f} : {self.candidate_value:.20f}, "
            f"error is {self.error:.20f}"
        )


@dataclass
class TimingAccumulator:
    """Running total of elapsed nanoseconds for one candidate.

    Owned by the single benchmark thread; never shared between workers.
    """

    name: str
    total_ns: int = 0

    def add(self, elapsed_ns: int) -> None:
        self.total_ns += elapsed_ns


@dataclass(frozen=True)
class InputBatch:
    """One iteration's randomized inputs, shared by every candidate."""

    values: array

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class TestRunSummary:
    """Aggregate result of the parallel equivalence run."""

    __test__ = False

    failure_count: int
    results: dict[str, TestOutcome]
    elapsed_seconds: float
    incomplete: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.incomplete


@dataclass(frozen=True)
class BenchmarkRun:
    """Raw output of the shuffled timing benchmark."""

    totals: dict[str, int]
    batch_size: int
    iteration_count: int
    elapsed_seconds: float
    orders: tuple[tuple[str, ...], ...] = ()
    excluded: dict[str, str] = field(default_factory=lambda: dict[str, str]())

    @property
    def numbers_tested(self) -> int:
        return self.batch_size * self.iteration_count


@dataclass(frozen=True)
class RankedCandidate:
    """One line of the final speed ranking."""

    name: str
    total_ns: int
    throughput: float
    numbers_tested: int
    matches_reference: bool | None = None

    @property
    def total_seconds(self) -> float:
        return self.total_ns / 1_000_000_000
