"""
fracbench CLI -- correctness and speed harness for the digit-fraction transforms.

Usage:
  fracbench test [num-threads]
  fracbench speed [integers-per-test] [iterations]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fracbench.benchmark import run_benchmark, spot_check
from fracbench.candidates import list_candidates, reference
from fracbench.config import BenchConfig, config_path, load_config
from fracbench.console import configure, console
from fracbench.errors import ConfigError
from fracbench.report import rank, render_ranking, render_test_summary
from fracbench.runner import run_all

logger = logging.getLogger("fracbench")

COMMANDS = ("test", "speed")

USAGE = """Usage:
    Test functions for equality: test [num-threads]
        e.x.: test 6
    Check function speed: speed [integers-per-test] [iterations]
        e.x.: speed 134217728 100"""


def _setup_logging(level: str, log_file: str | None = None) -> None:
    """Send package logs to stderr, and to *log_file* when configured."""
    formatter = logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fracbench")
    sub = parser.add_subparsers(dest="command")

    p_test = sub.add_parser("test", help="Test functions for equality")
    p_test.add_argument("threads", nargs="?", type=int, help="Worker count (min 1)")

    p_speed = sub.add_parser("speed", help="Check function speed")
    p_speed.add_argument("batch_size", nargs="?", type=int, help="Integers per iteration")
    p_speed.add_argument("iterations", nargs="?", type=int, help="Number of iterations")
    return parser


# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------


def cmd_test(args: argparse.Namespace, config: BenchConfig) -> int:
    """Check every candidate against the reference over the whole domain."""
    threads = max(1, args.threads if args.threads is not None else config.threads)
    console.info(f"Running test with : {threads} threads")

    truth = reference()
    summary = run_all(
        list_candidates(config.candidates),
        truth,
        config.tolerance,
        threads,
        pool=config.pool,
        await_timeout=config.await_timeout_seconds,
        progress_interval=config.progress_interval,
    )
    render_test_summary(summary)

    if config.exit_nonzero_on_failure and (summary.failure_count or not summary.complete):
        return 1
    return 0


def cmd_speed(args: argparse.Namespace, config: BenchConfig) -> int:
    """Rank candidates by throughput over shuffled random batches."""
    config = config.with_overrides(batch_size=args.batch_size, iterations=args.iterations)
    console.info(
        f"Starting speed test: {config.batch_size} random numbers per iteration, "
        f"{config.iterations} iterations"
    )

    candidates = list_candidates(config.candidates)
    run = run_benchmark(candidates, config.batch_size, config.iterations, seed=config.seed)

    outcomes = None
    if config.spot_check_size > 0:
        timed = [c for c in candidates if c.name in run.totals]
        outcomes = spot_check(
            timed, reference(), config.spot_check_size, config.tolerance, seed=config.seed
        )

    render_ranking(run, rank(run, outcomes))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``fracbench`` command."""
    args_list = [a.lower() for a in (sys.argv[1:] if argv is None else argv)]
    if not args_list or args_list[0] not in COMMANDS:
        print(USAGE)
        return 0

    args = _build_parser().parse_args(args_list)

    try:
        config = load_config(config_path())
        _setup_logging(config.log_level, config.log_file)
        configure(backend=config.console)
        if args.command == "test":
            return cmd_test(args, config)
        return cmd_speed(args, config)
    except ConfigError as exc:
        console.error(str(exc))
        return 2


if __name__ == "__main__":
    sys.exit(main())
