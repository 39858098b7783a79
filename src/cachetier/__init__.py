"""cachetier - Read-through caching decorator for byte storages."""

try:
    from ._version import version as __version__
except ImportError:
    # Package is not installed, so version is not available
    __version__ = "0.0.0+unknown"

from .core import CachedStorage, CacheTierConfig

__all__ = ["CachedStorage", "CacheTierConfig", "__version__"]
