"""Storage port interface."""

from typing import BinaryIO, Protocol


class StoragePort(Protocol):
    """Port for a byte container keyed by string identifiers.

    Implementations raise ``OSError`` for I/O failures.
    """

    def contains(self, id: str) -> bool:
        """Check whether the identifier exists."""
        ...

    def open_output_stream(self, id: str) -> BinaryIO:
        """Open a writer that replaces the identifier's content once closed."""
        ...

    def open_input_stream(self, id: str) -> BinaryIO | None:
        """Open a reader for the identifier, or return None if it is absent."""
        ...

    def delete(self, id: str) -> bool:
        """Remove the identifier. Return whether it existed."""
        ...

    def delete_all(self) -> None:
        """Remove every identifier.

        Raises:
            UnsupportedOperationError: If the store cannot clear itself.
        """
        ...
