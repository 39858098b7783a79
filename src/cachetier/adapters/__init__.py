"""Adapter implementations for cachetier ports."""

from .cache_state_json import JsonCacheStateAdapter, store_label
from .cache_state_memory import MemoryCacheStateAdapter
from .logger_std import StdLoggerAdapter
from .metrics import LoggingMetricsAdapter, NoopMetricsAdapter
from .storage_fs import FsStorageAdapter
from .storage_memory import MemoryStorageAdapter
from .storage_s3 import S3StorageAdapter

__all__ = [
    "FsStorageAdapter",
    "JsonCacheStateAdapter",
    "LoggingMetricsAdapter",
    "MemoryCacheStateAdapter",
    "MemoryStorageAdapter",
    "NoopMetricsAdapter",
    "S3StorageAdapter",
    "StdLoggerAdapter",
    "store_label",
]
