"""Speed benchmark: shuffled, iterated timing of every candidate.

Each iteration draws a fresh random batch, shuffles the execution order, and
times each candidate's full pass over the batch one after another on the
calling thread.  Timed sections never overlap.
"""

from __future__ import annotations

import logging
import math
import time
from array import array
from collections.abc import Sequence

import numpy as np

from fracbench.console import console
from fracbench.domain.models import (
    DEFAULT_TOLERANCE,
    INT32_MAX,
    BenchmarkRun,
    InputBatch,
    NamedFunction,
    TestOutcome,
    TimingAccumulator,
)
from fracbench.equivalence import check_equivalence
from fracbench.errors import CandidateError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 134_217_728
DEFAULT_ITERATIONS = 100
DEFAULT_SPOT_CHECK_SIZE = 10_000


def make_batch(rng: np.random.Generator, batch_size: int) -> InputBatch:
    """Draw *batch_size* uniform integers from ``[0, 2**31 - 1]``.

    Values are copied straight out of the numpy buffer into a 4-byte
    ``array("i")`` that yields plain Python ints; at most two copies of the
    batch exist at once.
    """
    raw = rng.integers(0, INT32_MAX, size=batch_size, dtype=np.intc, endpoint=True)
    values = array("i")
    values.frombytes(raw)
    del raw
    return InputBatch(values)


def shuffled_order(
    candidates: Sequence[NamedFunction], rng: np.random.Generator
) -> list[NamedFunction]:
    """Return a uniformly random permutation of *candidates*."""
    return [candidates[i] for i in rng.permutation(len(candidates))]


def time_pass(candidate: NamedFunction, batch: InputBatch) -> int:
    """Apply *candidate* to every input and return the elapsed nanoseconds."""
    func = candidate.func
    values = batch.values
    start = time.perf_counter_ns()
    for n in values:
        func(n)
    return time.perf_counter_ns() - start


def throughput(total_ns: int, batch_size: int, iteration_count: int) -> float:
    """Operations per second over the whole run."""
    if total_ns <= 0:
        return math.inf
    return (batch_size * iteration_count) / (total_ns / 1_000_000_000)


def run_benchmark(
    candidates: Sequence[NamedFunction],
    batch_size: int = DEFAULT_BATCH_SIZE,
    iteration_count: int = DEFAULT_ITERATIONS,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> BenchmarkRun:
    """Time every candidate over *iteration_count* shuffled random batches.

    A candidate that raises during its timed pass is dropped from the rest of
    the run and listed in ``BenchmarkRun.excluded`` instead of ``totals``.

    Raises:
        ValueError: If *batch_size* or *iteration_count* is below 1, or two
            candidates share a name.
    """
    if batch_size < 1:
        msg = f"batch_size must be >= 1, got {batch_size}"
        raise ValueError(msg)
    if iteration_count < 1:
        msg = f"iteration_count must be >= 1, got {iteration_count}"
        raise ValueError(msg)
    names = [c.name for c in candidates]
    if len(set(names)) != len(names):
        msg = f"Candidate names must be unique, got {names}"
        raise ValueError(msg)

    if rng is None:
        rng = np.random.default_rng(seed)

    accumulators = {name: TimingAccumulator(name) for name in names}
    active = list(candidates)
    excluded: dict[str, str] = {}
    orders: list[tuple[str, ...]] = []

    logger.info(
        "Starting speed run: %d candidates, batch %d, %d iterations",
        len(active),
        batch_size,
        iteration_count,
    )
    run_start = time.perf_counter()

    for i in range(iteration_count):
        order = shuffled_order(active, rng)
        batch = make_batch(rng, batch_size)

        for candidate in order:
            try:
                elapsed_ns = time_pass(candidate, batch)
            except Exception as exc:
                reason = f"{type(exc).__name__}: {exc}"
                logger.warning("Excluding %s from the speed run: %s", candidate, reason)
                console.warning(f"{candidate} raised during timing and was excluded ({reason})")
                excluded[candidate.name] = reason
                active.remove(candidate)
                continue
            accumulators[candidate.name].add(elapsed_ns)
            logger.debug("Iteration %d: %s took %d ns", i + 1, candidate, elapsed_ns)
            console.info(f"{i + 1} : {candidate}")

        orders.append(tuple(c.name for c in order))
        console.progress(
            "speed",
            (i + 1) / iteration_count * 100.0,
            f"{i + 1} / {iteration_count} iterations completed. "
            f"Time elapsed: {time.perf_counter() - run_start:.4f} seconds",
        )

    elapsed = time.perf_counter() - run_start
    logger.info("Speed run finished in %.3f s", elapsed)
    return BenchmarkRun(
        totals={
            name: acc.total_ns for name, acc in accumulators.items() if name not in excluded
        },
        batch_size=batch_size,
        iteration_count=iteration_count,
        elapsed_seconds=elapsed,
        orders=tuple(orders),
        excluded=excluded,
    )


def spot_check(
    candidates: Sequence[NamedFunction],
    reference: NamedFunction,
    sample_size: int = DEFAULT_SPOT_CHECK_SIZE,
    tolerance: float = DEFAULT_TOLERANCE,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> dict[str, TestOutcome]:
    """Compare each candidate with *reference* on a random sample of inputs.

    Runs outside any timed section; used to annotate the speed ranking.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    sample = sorted(make_batch(rng, sample_size).values) if sample_size > 0 else []

    outcomes: dict[str, TestOutcome] = {}
    for candidate in candidates:
        try:
            outcomes[candidate.name] = check_equivalence(
                reference, candidate, tolerance, domain=sample
            )
        except CandidateError as exc:
            logger.error("%s crashed on input %s during spot check", exc.name, exc.n)
            outcomes[candidate.name] = TestOutcome.crashed(exc.n, exc.__cause__ or exc)
    return outcomes
