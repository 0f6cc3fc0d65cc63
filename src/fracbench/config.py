"""Run configuration: defaults, optional YAML file, and CLI overrides.

Lookup order for the YAML file:

1. the path in ``$FRACBENCH_CONFIG`` (must exist), else
2. ``fracbench.yaml`` in the working directory (optional).
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fracbench.benchmark import DEFAULT_BATCH_SIZE, DEFAULT_ITERATIONS, DEFAULT_SPOT_CHECK_SIZE
from fracbench.candidates import list_candidates
from fracbench.console import BACKENDS
from fracbench.domain.models import DEFAULT_TOLERANCE
from fracbench.equivalence import DEFAULT_PROGRESS_INTERVAL
from fracbench.errors import ConfigError
from fracbench.runner import DEFAULT_AWAIT_TIMEOUT, POOL_KINDS

CONFIG_FILE = "fracbench.yaml"
CONFIG_ENV = "FRACBENCH_CONFIG"

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_thread_count() -> int:
    """Available cores minus two, never below one."""
    return max(1, (os.cpu_count() or 1) - 2)


@dataclass(frozen=True)
class BenchConfig:
    """Settings shared by the ``test`` and ``speed`` commands."""

    tolerance: float = DEFAULT_TOLERANCE
    threads: int = field(default_factory=default_thread_count)
    batch_size: int = DEFAULT_BATCH_SIZE
    iterations: int = DEFAULT_ITERATIONS
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    await_timeout_seconds: float = DEFAULT_AWAIT_TIMEOUT
    pool: str = "thread"
    seed: int | None = None
    candidates: tuple[str, ...] | None = None
    exit_nonzero_on_failure: bool = False
    spot_check_size: int = DEFAULT_SPOT_CHECK_SIZE
    console: str = "auto"
    log_level: str = "WARNING"
    log_file: str | None = None

    def with_overrides(self, **changes: Any) -> BenchConfig:
        """Return a copy with non-None *changes* applied and validated."""
        present = {k: v for k, v in changes.items() if v is not None}
        return from_mapping(present, base=self)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return _is_int(value) or isinstance(value, float)


def _check(key: str, ok: bool, expected: str, value: object) -> None:
    if not ok:
        msg = f"Invalid value for {key!r}: expected {expected}, got {value!r}"
        raise ConfigError(msg)


def _validate(key: str, value: Any) -> Any:
    """Type- and range-check one setting; return the normalized value."""
    if key == "tolerance":
        _check(key, _is_number(value) and value >= 0, "a number >= 0", value)
        return float(value)
    if key in ("threads", "batch_size", "iterations", "progress_interval"):
        _check(key, _is_int(value) and value >= 1, "an integer >= 1", value)
        return value
    if key == "spot_check_size":
        _check(key, _is_int(value) and value >= 0, "an integer >= 0", value)
        return value
    if key == "await_timeout_seconds":
        _check(key, _is_number(value) and value > 0, "a number > 0", value)
        return float(value)
    if key == "pool":
        _check(key, value in POOL_KINDS, " or ".join(POOL_KINDS), value)
        return value
    if key == "console":
        _check(key, value in BACKENDS, " or ".join(BACKENDS), value)
        return value
    if key == "seed":
        _check(key, value is None or _is_int(value), "an integer or null", value)
        return value
    if key == "candidates":
        if value is None:
            return None
        _check(
            key,
            isinstance(value, list) and all(isinstance(v, str) for v in value),
            "a list of candidate names",
            value,
        )
        list_candidates(value)
        return tuple(value)
    if key == "exit_nonzero_on_failure":
        _check(key, isinstance(value, bool), "true or false", value)
        return value
    if key == "log_level":
        _check(key, isinstance(value, str) and value.upper() in LOG_LEVELS, "a log level", value)
        return value.upper()
    if key == "log_file":
        _check(key, value is None or isinstance(value, str), "a path or null", value)
        return value
    msg = f"Unknown configuration key {key!r}"
    raise ConfigError(msg)


def from_mapping(data: Mapping[str, Any], base: BenchConfig | None = None) -> BenchConfig:
    """Build a BenchConfig from a plain mapping, starting from *base*."""
    changes = {key: _validate(key, value) for key, value in data.items()}
    return dataclasses.replace(base or BenchConfig(), **changes)


def config_path(cwd: Path | None = None, environ: Mapping[str, str] | None = None) -> Path | None:
    """Resolve the YAML file to load, or None when there is none."""
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            msg = f"{CONFIG_ENV} points to a missing file: {path}"
            raise ConfigError(msg)
        return path
    candidate = (cwd or Path.cwd()) / CONFIG_FILE
    return candidate if candidate.is_file() else None


def load_config(path: Path | None) -> BenchConfig:
    """Load settings from *path*; defaults only when *path* is None."""
    if path is None:
        return BenchConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping at the top level"
        raise ConfigError(msg)
    logger.debug("Loaded configuration from %s", path)
    return from_mapping(data)
