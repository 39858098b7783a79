"""Core domain logic for cachetier."""

from .config import CacheTierConfig
from .errors import (
    CacheTierError,
    InvalidStateError,
    NotFoundError,
    UnsupportedOperationError,
)
from .locks import KeyedLocks
from .service import CachedStorage
from .tee import TeeReader

__all__ = [
    "CachedStorage",
    "CacheTierConfig",
    "CacheTierError",
    "InvalidStateError",
    "KeyedLocks",
    "NotFoundError",
    "TeeReader",
    "UnsupportedOperationError",
]
