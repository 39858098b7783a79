"""Tests for CacheTierConfig."""

from pathlib import Path

import pytest

from cachetier.core import CacheTierConfig

ENV_VARS = [
    "CT_LOG_LEVEL",
    "CT_LAZY_CACHING",
    "CT_CHUNK_SIZE",
    "CT_LOCK_TIMEOUT",
    "CT_STATE_BACKEND",
    "CT_STATE_FILE",
    "CT_METRICS",
    "CT_LOCAL_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestCacheTierConfig:
    def test_defaults(self):
        config = CacheTierConfig.from_env()

        assert config.log_level == "INFO"
        assert config.lazy_caching is False
        assert config.chunk_size == 1024
        assert config.lock_timeout == 30.0
        assert config.state_backend == "memory"
        assert config.metrics_type == "noop"
        assert config.local_dir == Path("/tmp/.cachetier/local")
        assert config.resolved_state_file == Path("/tmp/.cachetier/local/.cachetier-state.json")

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CT_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CT_LAZY_CACHING", "yes")
        monkeypatch.setenv("CT_CHUNK_SIZE", "4096")
        monkeypatch.setenv("CT_LOCK_TIMEOUT", "2.5")
        monkeypatch.setenv("CT_STATE_BACKEND", "json")
        monkeypatch.setenv("CT_STATE_FILE", str(tmp_path / "state.json"))
        monkeypatch.setenv("CT_METRICS", "logging")
        monkeypatch.setenv("CT_LOCAL_DIR", str(tmp_path / "local"))

        config = CacheTierConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.lazy_caching is True
        assert config.chunk_size == 4096
        assert config.lock_timeout == 2.5
        assert config.state_backend == "json"
        assert config.resolved_state_file == tmp_path / "state.json"
        assert config.metrics_type == "logging"
        assert config.local_dir == tmp_path / "local"

    def test_explicit_arguments(self, tmp_path):
        config = CacheTierConfig.from_env(
            state_backend="json",
            remote="s3://bucket/prefix",
            local_dir=tmp_path,
            region="eu-west-1",
        )

        assert config.state_backend == "json"
        assert config.remote == "s3://bucket/prefix"
        assert config.local_dir == tmp_path
        assert config.region == "eu-west-1"

    @pytest.mark.parametrize("value", ["", "0", "false", "no"])
    def test_lazy_caching_false_values(self, monkeypatch, value):
        monkeypatch.setenv("CT_LAZY_CACHING", value)

        assert CacheTierConfig.from_env().lazy_caching is False

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError, match="chunk_size"):
            CacheTierConfig(chunk_size=0)

    def test_negative_lock_timeout(self):
        with pytest.raises(ValueError, match="lock_timeout"):
            CacheTierConfig(lock_timeout=-1)

    def test_invalid_state_backend(self):
        with pytest.raises(ValueError, match="state backend"):
            CacheTierConfig(state_backend="redis")

    def test_invalid_metrics_backend(self):
        with pytest.raises(ValueError, match="metrics backend"):
            CacheTierConfig(metrics_type="cloudwatch")
