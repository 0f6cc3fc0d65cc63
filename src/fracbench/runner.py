"""Parallel test runner: one equivalence check per candidate on a worker pool."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import (
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)

from fracbench.console import console, report_progress
from fracbench.domain.models import (
    DEFAULT_TOLERANCE,
    NamedFunction,
    OutcomeStatus,
    TestOutcome,
    TestRunSummary,
)
from fracbench.domain.protocols import ProgressSink
from fracbench.equivalence import DEFAULT_PROGRESS_INTERVAL, FULL_DOMAIN, check_equivalence
from fracbench.errors import CandidateError

logger = logging.getLogger(__name__)

# Effectively "wait forever": a hung candidate delays the run instead of being cancelled.
DEFAULT_AWAIT_TIMEOUT = 2 * 24 * 60 * 60.0

POOL_KINDS = ("thread", "process")


class ResultTally:
    """Thread-safe failure counter and per-candidate result map."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._failures = 0
        self._results: dict[str, TestOutcome] = {}

    def record(self, name: str, outcome: TestOutcome) -> None:
        with self._lock:
            self._results[name] = outcome
            if outcome.is_fail:
                self._failures += 1

        if outcome.is_fail:
            console.error(f"Failed on : {name} ({outcome.describe()})")
        elif outcome.status is OutcomeStatus.INCOMPLETE:
            console.warning(f"Did not finish : {name} ({outcome.describe()})")
        else:
            console.success(f"Succeeded on : {name}")

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failures

    def snapshot(self) -> tuple[dict[str, TestOutcome], int]:
        """Return a consistent copy of the results and the failure count."""
        with self._lock:
            return dict(self._results), self._failures


def _check_task(
    reference: NamedFunction,
    candidate: NamedFunction,
    tolerance: float,
    domain: Sequence[int],
    progress: ProgressSink | None,
    progress_interval: int,
    tally: ResultTally | None,
) -> TestOutcome:
    """Run one equivalence check; never raises.

    Only an exception from one of the transforms is a FAIL.  Anything else
    (a broken progress sink, say) leaves the candidate INCOMPLETE.

    With a *tally* (thread pools) the outcome is recorded from the worker
    itself.  Process workers cannot share it, so the caller records instead.
    """
    try:
        outcome = check_equivalence(
            reference,
            candidate,
            tolerance,
            domain=domain,
            progress=progress,
            progress_interval=progress_interval,
        )
    except CandidateError as exc:
        logger.error(
            "Checking %s: %s crashed on input %s: %r", candidate, exc.name, exc.n, exc.__cause__
        )
        outcome = TestOutcome.crashed(exc.n, exc.__cause__ or exc)
    except Exception as exc:
        logger.exception("Equivalence check for %s did not finish", candidate)
        outcome = TestOutcome.incomplete(f"{type(exc).__name__}: {exc}")

    if tally is not None:
        tally.record(candidate.name, outcome)
    return outcome


def _make_executor(pool: str, workers: int) -> Executor:
    if pool == "thread":
        return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fracbench")
    if pool == "process":
        return ProcessPoolExecutor(max_workers=workers)
    msg = f"Unknown pool kind {pool!r} (expected one of {', '.join(POOL_KINDS)})"
    raise ValueError(msg)


def run_all(
    candidates: Sequence[NamedFunction],
    reference: NamedFunction,
    tolerance: float = DEFAULT_TOLERANCE,
    worker_count: int = 1,
    *,
    domain: Sequence[int] = FULL_DOMAIN,
    pool: str = "thread",
    await_timeout: float = DEFAULT_AWAIT_TIMEOUT,
    progress: ProgressSink | None = report_progress,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
) -> TestRunSummary:
    """Check every candidate against *reference* in parallel.

    The reference itself is never checked.  A failing or crashing candidate
    does not stop the others.  If *await_timeout* seconds pass before all
    checks finish, the unfinished candidates are reported as INCOMPLETE and
    the pool is abandoned; worker threads that are still running keep going
    until they finish on their own.

    For ``pool="process"`` the candidates and *progress* must be picklable
    (module-level functions).
    """
    workers = max(1, worker_count)
    to_check = [c for c in candidates if c.name != reference.name]
    names = [c.name for c in to_check]
    if len(set(names)) != len(names):
        msg = f"Candidate names must be unique, got {names}"
        raise ValueError(msg)
    tally = ResultTally()
    shared_tally = tally if pool == "thread" else None

    console.info(f"Functions to test: {len(to_check)}")
    logger.info(
        "Starting equivalence run: %d candidates, %d %s workers", len(to_check), workers, pool
    )
    start = time.perf_counter()

    executor = _make_executor(pool, workers)
    timed_out = False
    try:
        futures: dict[Future[TestOutcome], str] = {
            executor.submit(
                _check_task,
                reference,
                candidate,
                tolerance,
                domain,
                progress,
                progress_interval,
                shared_tally,
            ): candidate.name
            for candidate in to_check
        }
        try:
            for future in as_completed(futures, timeout=await_timeout):
                name = futures[future]
                try:
                    outcome = future.result()
                except Exception as exc:
                    # pool-level breakage (e.g. a pickling error or a dead worker process)
                    logger.error("Worker for %s failed: %r", name, exc)
                    tally.record(name, TestOutcome.incomplete(f"{type(exc).__name__}: {exc}"))
                    continue
                if shared_tally is None:
                    tally.record(name, outcome)
        except TimeoutError:
            timed_out = True
            logger.warning("Timed out after %.0f seconds waiting for workers", await_timeout)
            console.warning("Could not finish execution")
    finally:
        executor.shutdown(wait=not timed_out, cancel_futures=timed_out)

    elapsed = time.perf_counter() - start
    results, failures = tally.snapshot()
    for name in names:
        results.setdefault(name, TestOutcome.incomplete("timed out"))
    incomplete = tuple(
        name for name in names if results[name].status is OutcomeStatus.INCOMPLETE
    )

    logger.info("Equivalence run finished in %.3f s", elapsed)
    return TestRunSummary(
        failure_count=failures,
        results={name: results[name] for name in names},
        elapsed_seconds=elapsed,
        incomplete=incomplete,
    )
