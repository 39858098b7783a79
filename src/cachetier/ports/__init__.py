"""Port interfaces for cachetier."""

from .cache_state import CacheStatePort
from .logger import LoggerPort
from .metrics import MetricsPort
from .storage import StoragePort

__all__ = [
    "CacheStatePort",
    "LoggerPort",
    "MetricsPort",
    "StoragePort",
]
