"""Equivalence checker -- exhaustive comparison of a candidate with the reference.

Walks the input domain in ascending order and stops at the first input whose
outputs differ by more than the tolerance.  A single counterexample is enough
to reject a candidate, so no attempt is made to find the worst error.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fracbench.domain.models import DEFAULT_TOLERANCE, INT32_MAX, NamedFunction, TestOutcome
from fracbench.domain.protocols import ProgressSink
from fracbench.errors import CandidateError

logger = logging.getLogger(__name__)

# Every non-negative 32-bit signed integer, 0 through 2**31 - 1 inclusive.
FULL_DOMAIN = range(0, INT32_MAX + 1)

DEFAULT_PROGRESS_INTERVAL = 10_000_000


def check_equivalence(
    reference: NamedFunction,
    candidate: NamedFunction,
    tolerance: float = DEFAULT_TOLERANCE,
    *,
    domain: Sequence[int] = FULL_DOMAIN,
    progress: ProgressSink | None = None,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
) -> TestOutcome:
    """Compare *candidate* against *reference* on every input in *domain*.

    Args:
        reference: The ground-truth transform.
        candidate: The transform under test.
        tolerance: Maximum allowed ``abs(reference(n) - candidate(n))``.
        domain: Inputs to check, in the order they are evaluated.
        progress: Called with ``(candidate.name, percent)`` once before each
            block of *progress_interval* inputs.
        progress_interval: Inputs per progress signal.

    Returns:
        ``TestOutcome.passed()`` or a FAIL outcome for the first violation.
        A NaN difference counts as a violation.

    Raises:
        ValueError: If *tolerance* is negative or NaN, or *progress_interval* < 1.
        CandidateError: If either transform raises; ``name`` is the transform
            that raised and the original exception is chained as ``__cause__``.
            Errors from *progress* propagate unchanged.
    """
    if not tolerance >= 0:
        msg = f"tolerance must be >= 0, got {tolerance}"
        raise ValueError(msg)
    if progress_interval < 1:
        msg = f"progress_interval must be >= 1, got {progress_interval}"
        raise ValueError(msg)

    ref = reference.func
    cand = candidate.func
    total = len(domain)
    logger.debug("Checking %s against %s over %d inputs", candidate, reference, total)

    for block_start in range(0, total, progress_interval):
        if progress is not None:
            progress(candidate.name, block_start / total * 100.0)
        logger.debug("%s: checking inputs from index %d", candidate, block_start)
        for n in domain[block_start : block_start + progress_interval]:
            try:
                reference_value = ref(n)
            except Exception as exc:
                raise CandidateError(reference.name, n) from exc
            try:
                candidate_value = cand(n)
            except Exception as exc:
                raise CandidateError(candidate.name, n) from exc
            error = reference_value - candidate_value
            if not abs(error) <= tolerance:
                logger.info(
                    "%s diverges at %d: %.20f : %.20f, error is %.20f",
                    candidate,
                    n,
                    reference_value,
                    candidate_value,
                    error,
                )
                return TestOutcome.failed(n, reference_value, candidate_value, error)

    return TestOutcome.passed()
