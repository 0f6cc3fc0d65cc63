"""Result aggregation and console reporting for both run modes."""

from __future__ import annotations

import math
from collections.abc import Mapping

from fracbench.benchmark import throughput
from fracbench.console import console
from fracbench.domain.models import (
    BenchmarkRun,
    OutcomeStatus,
    RankedCandidate,
    TestOutcome,
    TestRunSummary,
)


def rank(
    run: BenchmarkRun,
    outcomes: Mapping[str, TestOutcome] | None = None,
) -> list[RankedCandidate]:
    """Order candidates slowest first so the fastest is reported last.

    When reference *outcomes* are given, candidates that disagree with the
    reference come before every candidate that agrees, so the last entry is
    always the fastest correct one.
    """
    entries: list[RankedCandidate] = []
    for name, total_ns in run.totals.items():
        matches: bool | None = None
        if outcomes is not None and name in outcomes:
            matches = outcomes[name].is_pass
        entries.append(
            RankedCandidate(
                name=name,
                total_ns=total_ns,
                throughput=throughput(total_ns, run.batch_size, run.iteration_count),
                numbers_tested=run.numbers_tested,
                matches_reference=matches,
            )
        )

    def _key(entry: RankedCandidate) -> tuple[int, int]:
        return (0 if entry.matches_reference is False else 1, -entry.total_ns)

    return sorted(entries, key=_key)


def format_ranking(entries: list[RankedCandidate]) -> list[str]:
    """Render ranking entries as human-readable lines."""
    lines: list[str] = []
    for entry in entries:
        per_second = "inf" if math.isinf(entry.throughput) else str(math.floor(entry.throughput))
        lines.append(f"{entry.numbers_tested} numbers in {entry.total_seconds:.4f} seconds")
        lines.append(f"{entry.name} crunched {per_second} numbers per second rounded down")
        if entry.matches_reference is False:
            lines.append(f"{entry.name} does not match the reference")
        lines.append("")
    return lines


def render_ranking(run: BenchmarkRun, entries: list[RankedCandidate]) -> None:
    """Print the final speed report."""
    console.panel(
        f"Speed test complete.  Total time taken: {run.elapsed_seconds:.4f} seconds.",
        title="Results",
        style="green",
    )
    for line in format_ranking(entries):
        console.info(line)

    def _agrees(entry: RankedCandidate) -> str:
        if entry.matches_reference is None:
            return "-"
        return "yes" if entry.matches_reference else "NO"

    console.table(
        ["Candidate", "Seconds", "Numbers/s", "Matches reference"],
        [
            [e.name, f"{e.total_seconds:.4f}", f"{e.throughput:,.0f}", _agrees(e)]
            for e in entries
        ],
        title="Ranking (fastest last)",
    )
    for name, reason in run.excluded.items():
        console.warning(f"{name} excluded: {reason}")


def render_test_summary(summary: TestRunSummary) -> None:
    """Print the end-of-run report for the equivalence run."""
    console.table(
        ["Candidate", "Result"],
        [[name, outcome.describe()] for name, outcome in summary.results.items()],
        title="Equivalence",
    )
    console.kv(
        {
            "Number of failures": str(summary.failure_count),
            "Testing took": f"{summary.elapsed_seconds} seconds",
        }
    )
    if not summary.complete:
        console.warning("Results are incomplete: " + ", ".join(summary.incomplete))
    elif summary.failure_count == 0:
        console.success("Every candidate matches the reference")
    else:
        failed = [
            name for name, o in summary.results.items() if o.status is OutcomeStatus.FAIL
        ]
        console.error("Failing candidates: " + ", ".join(failed))
