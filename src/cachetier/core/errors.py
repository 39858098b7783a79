"""Core domain errors."""


class CacheTierError(Exception):
    """Base error for cachetier."""


class NotFoundError(CacheTierError):
    """Identifier not found in any store."""


class UnsupportedOperationError(CacheTierError, NotImplementedError):
    """Operation is not implemented by this store."""


class InvalidStateError(CacheTierError, RuntimeError):
    """Operation was called against a store in an unexpected state."""
