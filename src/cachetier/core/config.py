"""Centralized configuration for cachetier."""

import os
from dataclasses import dataclass, field
from pathlib import Path

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class CacheTierConfig:
    """All cachetier configuration in one place.

    Environment variables (all optional):
        CT_LOG_LEVEL:     Logging level. Default "INFO".
        CT_LAZY_CACHING:  "1"/"true"/"yes" to stop reads from populating the
                          local store. Default off.
        CT_CHUNK_SIZE:    Chunk size in bytes for explicit copies and skips.
                          Default 1024.
        CT_LOCK_TIMEOUT:  Seconds an explicit cache call waits for a read that is
                          already caching the same identifier. Default 30.
        CT_STATE_BACKEND: "memory" (default) or "json".
        CT_STATE_FILE:    Path of the JSON state file. Default
                          "<local_dir>/.cachetier-state.json".
        CT_METRICS:       Metrics backend: "noop" (default) or "logging".
        CT_LOCAL_DIR:     Local cache directory. Default "/tmp/.cachetier/local".
    """

    log_level: str = "INFO"
    lazy_caching: bool = False
    chunk_size: int = 1024
    lock_timeout: float = 30.0
    state_backend: str = "memory"
    state_file: Path | None = None
    metrics_type: str = "noop"
    local_dir: Path = Path("/tmp/.cachetier/local")

    # Connection params (typically passed by CLI, not env vars)
    remote: str | None = None
    endpoint_url: str | None = field(default=None, repr=False)
    region: str | None = None
    profile: str | None = None

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.lock_timeout < 0:
            raise ValueError(f"lock_timeout must not be negative, got {self.lock_timeout}")
        if self.state_backend not in ("memory", "json"):
            raise ValueError(f"Unknown state backend: {self.state_backend}")
        if self.metrics_type not in ("noop", "logging"):
            raise ValueError(f"Unknown metrics backend: {self.metrics_type}")

    @property
    def resolved_state_file(self) -> Path:
        """State file location, defaulting to a file inside the local directory."""
        if self.state_file is not None:
            return self.state_file
        return self.local_dir / ".cachetier-state.json"

    @classmethod
    def from_env(
        cls,
        *,
        log_level: str = "INFO",
        state_backend: str = "memory",
        remote: str | None = None,
        local_dir: Path | None = None,
        endpoint_url: str | None = None,
        region: str | None = None,
        profile: str | None = None,
    ) -> "CacheTierConfig":
        """Build config from environment variables + explicit overrides."""
        state_file = os.environ.get("CT_STATE_FILE")
        if local_dir is None:
            local_dir = Path(os.environ.get("CT_LOCAL_DIR", "/tmp/.cachetier/local"))
        return cls(
            log_level=os.environ.get("CT_LOG_LEVEL", log_level),
            lazy_caching=os.environ.get("CT_LAZY_CACHING", "").strip().lower() in _TRUE_VALUES,
            chunk_size=int(os.environ.get("CT_CHUNK_SIZE", "1024")),
            lock_timeout=float(os.environ.get("CT_LOCK_TIMEOUT", "30")),
            state_backend=os.environ.get("CT_STATE_BACKEND", state_backend),
            state_file=Path(state_file) if state_file else None,
            metrics_type=os.environ.get("CT_METRICS", "noop"),
            local_dir=local_dir,
            remote=remote,
            endpoint_url=endpoint_url,
            region=region,
            profile=profile,
        )
