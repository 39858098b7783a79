"""Metrics adapters."""

import logging


class NoopMetricsAdapter:
    """Discards every metric."""

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        pass

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        pass

    def timing(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        pass


class LoggingMetricsAdapter:
    """Writes every metric to a logger, for local debugging."""

    def __init__(self, name: str = "cachetier.metrics", level: str = "DEBUG"):
        self.logger = logging.getLogger(name)
        self.level = logging.getLevelName(level.upper())

    def _emit(self, kind: str, name: str, value: float, tags: dict[str, str] | None) -> None:
        suffix = f" {tags}" if tags else ""
        self.logger.log(self.level, "%s %s=%s%s", kind, name, value, suffix)

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self._emit("counter", name, value, tags)

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self._emit("gauge", name, value, tags)

    def timing(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self._emit("timing", name, value, tags)
