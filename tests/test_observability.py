"""Tests for the logging and metrics adapters."""

import logging

from cachetier.adapters import (
    LoggingMetricsAdapter,
    MemoryStorageAdapter,
    NoopMetricsAdapter,
    StdLoggerAdapter,
)
from cachetier.core import CachedStorage

from .helpers import put, read_all


class RecordingMetrics:
    def __init__(self):
        self.counters = {}

    def increment(self, name, value=1, tags=None):
        self.counters[name] = self.counters.get(name, 0) + value

    def gauge(self, name, value, tags=None):
        pass

    def timing(self, name, value, tags=None):
        pass


class TestStdLoggerAdapter:
    def test_fields_are_appended(self, caplog):
        logger = StdLoggerAdapter(name="cachetier.test", level="DEBUG")

        with caplog.at_level(logging.DEBUG, logger="cachetier.test"):
            logger.info("Cached identifier", id="a", size=5)

        assert "Cached identifier id=a size=5" in caplog.text

    def test_log_operation(self, caplog):
        logger = StdLoggerAdapter(name="cachetier.test", level="INFO")

        with caplog.at_level(logging.INFO, logger="cachetier.test"):
            logger.log_operation(op="cache", key="a", sizes={"copied": 5}, durations={"total": 0.5})

        assert "op=cache key=a cache_hit=False copied_size=5 total_duration=0.500s" in caplog.text

    def test_handler_added_once(self):
        StdLoggerAdapter(name="cachetier.once")
        StdLoggerAdapter(name="cachetier.once")

        assert len(logging.getLogger("cachetier.once").handlers) == 1


class TestMetricsAdapters:
    def test_noop_accepts_everything(self):
        metrics = NoopMetricsAdapter()
        metrics.increment("a")
        metrics.gauge("b", 1.0)
        metrics.timing("c", 0.1, tags={"x": "y"})

    def test_logging_metrics(self, caplog):
        metrics = LoggingMetricsAdapter(level="INFO")

        with caplog.at_level(logging.INFO, logger="cachetier.metrics"):
            metrics.increment("cachetier.read.hit")

        assert "counter cachetier.read.hit=1" in caplog.text

    def test_service_counters(self):
        remote = MemoryStorageAdapter()
        metrics = RecordingMetrics()
        service = CachedStorage(remote, MemoryStorageAdapter(), metrics=metrics)
        put(remote, "a", b"hello")

        read_all(service, "a")
        read_all(service, "a")

        assert metrics.counters == {
            "cachetier.read.miss": 1,
            "cachetier.cache.promoted": 1,
            "cachetier.read.hit": 1,
        }
