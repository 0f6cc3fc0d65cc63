"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from fracbench import config as config_mod
from fracbench.config import (
    CONFIG_ENV,
    CONFIG_FILE,
    BenchConfig,
    config_path,
    default_thread_count,
    from_mapping,
    load_config,
)
from fracbench.errors import ConfigError, UnknownCandidateError


class TestDefaults:
    def test_reference_defaults(self) -> None:
        cfg = BenchConfig()
        assert cfg.tolerance == 0.0001
        assert cfg.batch_size == 134_217_728
        assert cfg.iterations == 100
        assert cfg.progress_interval == 10_000_000
        assert cfg.await_timeout_seconds == 2 * 24 * 60 * 60
        assert cfg.pool == "thread"
        assert cfg.candidates is None
        assert cfg.exit_nonzero_on_failure is False
        assert cfg.threads >= 1

    @pytest.mark.parametrize(("cores", "expected"), [(8, 6), (3, 1), (2, 1), (1, 1), (None, 1)])
    def test_thread_count(
        self, monkeypatch: pytest.MonkeyPatch, cores: int | None, expected: int
    ) -> None:
        monkeypatch.setattr(config_mod.os, "cpu_count", lambda: cores)
        assert default_thread_count() == expected


class TestFromMapping:
    def test_overrides(self) -> None:
        cfg = from_mapping(
            {
                "tolerance": 1,
                "threads": 3,
                "pool": "process",
                "seed": 42,
                "candidates": ["PureMath", "IfMadness"],
                "log_level": "debug",
                "exit_nonzero_on_failure": True,
            }
        )
        assert cfg.tolerance == 1.0
        assert isinstance(cfg.tolerance, float)
        assert cfg.threads == 3
        assert cfg.pool == "process"
        assert cfg.seed == 42
        assert cfg.candidates == ("PureMath", "IfMadness")
        assert cfg.log_level == "DEBUG"
        assert cfg.exit_nonzero_on_failure is True

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("tolerance", -1),
            ("tolerance", "small"),
            ("threads", 0),
            ("threads", True),
            ("batch_size", 1.5),
            ("iterations", -3),
            ("spot_check_size", -1),
            ("await_timeout_seconds", 0),
            ("pool", "fibers"),
            ("console", "fancy"),
            ("seed", "abc"),
            ("candidates", "PureMath"),
            ("exit_nonzero_on_failure", "yes"),
            ("log_level", "LOUD"),
            ("log_file", 3),
        ],
    )
    def test_rejects_bad_values(self, key: str, value: object) -> None:
        with pytest.raises(ConfigError, match=key):
            from_mapping({key: value})

    def test_rejects_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration key"):
            from_mapping({"colour": "blue"})

    def test_rejects_unknown_candidate(self) -> None:
        with pytest.raises(UnknownCandidateError):
            from_mapping({"candidates": ["PureMath", "Missing"]})

    def test_with_overrides_skips_none(self) -> None:
        base = BenchConfig(batch_size=10)
        cfg = base.with_overrides(batch_size=None, iterations=5)
        assert cfg.batch_size == 10
        assert cfg.iterations == 5

    def test_with_overrides_validates(self) -> None:
        with pytest.raises(ConfigError):
            BenchConfig().with_overrides(batch_size=0)


class TestLoadConfig:
    def test_none_gives_defaults(self) -> None:
        assert load_config(None) == BenchConfig()

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE
        path.write_text("tolerance: 0.001\niterations: 7\ncandidates:\n  - StringMath\n")
        cfg = load_config(path)
        assert cfg.tolerance == 0.001
        assert cfg.iterations == 7
        assert cfg.candidates == ("StringMath",)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE
        path.write_text("")
        assert load_config(path) == BenchConfig()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE
        path.write_text("tolerance: [1, 2\n")
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)


class TestConfigPath:
    def test_env_var_wins(self, tmp_path: Path) -> None:
        explicit = tmp_path / "custom.yaml"
        explicit.write_text("iterations: 2\n")
        (tmp_path / CONFIG_FILE).write_text("iterations: 3\n")
        assert config_path(tmp_path, {CONFIG_ENV: str(explicit)}) == explicit

    def test_env_var_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match=CONFIG_ENV):
            config_path(tmp_path, {CONFIG_ENV: str(tmp_path / "nope.yaml")})

    def test_working_directory_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILE).write_text("iterations: 3\n")
        assert config_path(tmp_path, {}) == tmp_path / CONFIG_FILE

    def test_no_file(self, tmp_path: Path) -> None:
        assert config_path(tmp_path, {}) is None
