"""Tests for the exhaustive equivalence checker."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

import pytest

from fracbench.candidates import pure_math
from fracbench.domain.models import INT32_MAX, NamedFunction, OutcomeStatus
from fracbench.equivalence import FULL_DOMAIN, check_equivalence
from fracbench.errors import CandidateError


class TestDomain:
    def test_full_domain_bounds(self) -> None:
        assert FULL_DOMAIN[0] == 0
        assert FULL_DOMAIN[-1] == INT32_MAX
        assert len(FULL_DOMAIN) == 2**31


class TestSelfEquivalence:
    @pytest.mark.parametrize("tolerance", [0.0, 1e-12, 0.0001, 5.0])
    def test_function_matches_itself(self, truth: NamedFunction, tolerance: float) -> None:
        outcome = check_equivalence(truth, truth, tolerance, domain=range(0, 5000))
        assert outcome.is_pass

    def test_identical_implementations(
        self, make_candidate: Callable[..., NamedFunction], truth: NamedFunction
    ) -> None:
        outcome = check_equivalence(truth, make_candidate(), 0.0001, domain=range(0, 1000))
        assert outcome.is_pass


class TestFirstFailure:
    def test_reports_smallest_divergence(
        self, make_diverging: Callable[..., NamedFunction], truth: NamedFunction
    ) -> None:
        candidate = make_diverging(700, 500)
        outcome = check_equivalence(truth, candidate, 0.0001, domain=range(0, 1000))

        assert outcome.status == OutcomeStatus.FAIL
        assert outcome.first_failing_input == 500
        assert outcome.reference_value == 0.5
        assert outcome.candidate_value == pytest.approx(1.5)
        assert outcome.error == pytest.approx(-1.0)

    def test_always_zero_fails_at_one(
        self, always_zero: NamedFunction, truth: NamedFunction
    ) -> None:
        outcome = check_equivalence(truth, always_zero, 0.0001, domain=range(1, 1000))

        assert outcome.is_fail
        assert outcome.first_failing_input == 1
        assert outcome.reference_value == 0.1
        assert outcome.candidate_value == 0.0
        assert outcome.error == pytest.approx(0.1)

    def test_within_tolerance_is_not_a_failure(self, truth: NamedFunction) -> None:
        nudged = NamedFunction("Nudged", lambda n: truth(n) + 0.00005)
        assert check_equivalence(truth, nudged, 0.0001, domain=range(0, 2000)).is_pass

    def test_nan_counts_as_failure(self, truth: NamedFunction) -> None:
        nan_at_3 = NamedFunction("NaN", lambda n: math.nan if n == 3 else truth(n))
        outcome = check_equivalence(truth, nan_at_3, 0.0001, domain=range(0, 10))
        assert outcome.is_fail
        assert outcome.first_failing_input == 3

    def test_arbitrary_sequence_domain(
        self, always_zero: NamedFunction, truth: NamedFunction
    ) -> None:
        outcome = check_equivalence(truth, always_zero, 0.0001, domain=[0, 0, 42, 7])
        assert outcome.first_failing_input == 42

    def test_empty_domain_passes(self, always_zero: NamedFunction, truth: NamedFunction) -> None:
        assert check_equivalence(truth, always_zero, 0.0001, domain=range(0)).is_pass


class TestProgress:
    def test_one_signal_per_block(self, truth: NamedFunction) -> None:
        calls: list[tuple[str, float]] = []
        check_equivalence(
            truth,
            truth,
            domain=range(0, 1000),
            progress=lambda label, pct: calls.append((label, pct)),
            progress_interval=100,
        )
        assert [label for label, _ in calls] == ["SimpleString"] * 10
        assert [pct for _, pct in calls] == pytest.approx([float(p) for p in range(0, 100, 10)])

    def test_stops_signalling_after_failure(
        self, always_zero: NamedFunction, truth: NamedFunction
    ) -> None:
        calls: list[float] = []
        check_equivalence(
            truth,
            always_zero,
            domain=range(1, 1001),
            progress=lambda label, pct: calls.append(pct),
            progress_interval=100,
        )
        assert calls == [0.0]


class TestErrors:
    def test_negative_tolerance(self, truth: NamedFunction) -> None:
        with pytest.raises(ValueError, match="tolerance"):
            check_equivalence(truth, truth, -0.1, domain=range(10))

    def test_nan_tolerance(self, truth: NamedFunction) -> None:
        with pytest.raises(ValueError, match="tolerance"):
            check_equivalence(truth, truth, math.nan, domain=range(10))

    def test_bad_progress_interval(self, truth: NamedFunction) -> None:
        with pytest.raises(ValueError, match="progress_interval"):
            check_equivalence(truth, truth, domain=range(10), progress_interval=0)

    def test_candidate_exception_is_wrapped(
        self, crashing: NamedFunction, truth: NamedFunction
    ) -> None:
        with pytest.raises(CandidateError) as excinfo:
            check_equivalence(truth, crashing, domain=range(0, 100))
        assert excinfo.value.name == "Crashing"
        assert excinfo.value.n == 7
        assert isinstance(excinfo.value.__cause__, ZeroDivisionError)

    def test_reference_exception_names_the_reference(
        self, make_candidate: Callable[..., NamedFunction]
    ) -> None:
        broken_reference = NamedFunction("BrokenTruth", lambda n: 1 / (n - 3))
        with pytest.raises(CandidateError) as excinfo:
            check_equivalence(broken_reference, make_candidate(), domain=range(0, 10))
        assert excinfo.value.name == "BrokenTruth"
        assert excinfo.value.n == 3

    def test_progress_sink_errors_are_not_blamed_on_the_candidate(
        self, truth: NamedFunction
    ) -> None:
        candidate = NamedFunction("PureMath", pure_math)

        def closed_stdout(label: str, percent: float) -> None:
            if percent > 30.0:
                raise BrokenPipeError("stdout closed")

        with pytest.raises(BrokenPipeError, match="stdout closed") as excinfo:
            check_equivalence(
                truth,
                candidate,
                domain=range(0, 300),
                progress=closed_stdout,
                progress_interval=100,
            )
        assert not isinstance(excinfo.value, CandidateError)


class TestLogging:
    def test_debug_line_per_block(
        self, caplog: pytest.LogCaptureFixture, truth: NamedFunction
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="fracbench.equivalence"):
            check_equivalence(truth, truth, domain=range(0, 1000), progress_interval=250)
        blocks = [r for r in caplog.records if "checking inputs from index" in r.getMessage()]
        assert len(blocks) == 4
        assert all(r.levelno == logging.DEBUG for r in blocks)
