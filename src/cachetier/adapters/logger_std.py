"""Standard library logging adapter."""

import logging
from typing import Any


class StdLoggerAdapter:
    """Logger port backed by the ``logging`` module.

    Keyword fields are appended to the message as ``key=value`` pairs.
    """

    def __init__(self, name: str = "cachetier", level: str = "INFO"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.upper())
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            self.logger.addHandler(handler)

    def _format(self, message: str, kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return message
        fields = " ".join(f"{key}={value}" for key, value in kwargs.items())
        return f"{message} {fields}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self.logger.debug(self._format(message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(self._format(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(self._format(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self.logger.error(self._format(message, kwargs))

    def log_operation(
        self,
        op: str,
        key: str,
        sizes: dict[str, int] | None = None,
        durations: dict[str, float] | None = None,
        cache_hit: bool = False,
    ) -> None:
        fields: dict[str, Any] = {"op": op, "key": key, "cache_hit": cache_hit}
        for name, size in (sizes or {}).items():
            fields[f"{name}_size"] = size
        for name, duration in (durations or {}).items():
            fields[f"{name}_duration"] = f"{duration:.3f}s"
        self.info("Operation completed", **fields)
