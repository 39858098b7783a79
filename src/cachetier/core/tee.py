"""Read-through tee stream that mirrors remote bytes into a local sink."""

import io
from collections.abc import Callable
from typing import BinaryIO

from ..ports import LoggerPort


class TeeReader(io.RawIOBase):
    """Readable stream that copies every byte it returns into a second sink.

    Each read pulls from ``source`` and then writes the same bytes to
    ``sink``. A failure to write the sink never reaches the reader: the
    stream latches ``write_protected`` and stops mirroring, while reads keep
    being served from ``source``.

    Closing runs a fixed sequence on every exit path: close ``source``,
    flush and close ``sink``, then call ``on_close(completed,
    write_protected)``. ``completed`` is only set once a read has returned
    an explicit end of data.
    """

    def __init__(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        on_close: Callable[[bool, bool], None],
        logger: LoggerPort,
        id: str = "",
        chunk_size: int = 1024,
    ):
        super().__init__()
        self._source = source
        self._sink = sink
        self._on_close = on_close
        self._logger = logger
        self._id = id
        self._chunk_size = chunk_size
        self._completed = False
        self._write_protected = False

    @property
    def completed(self) -> bool:
        """True once the source has reported end of data."""
        return self._completed

    @property
    def write_protected(self) -> bool:
        """True once mirroring into the sink has failed."""
        return self._write_protected

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def readinto(self, b) -> int | None:  # type: ignore[no-untyped-def, override]
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        size = len(b)
        data = self._source.read(size)
        if data is None:
            return None
        if not data:
            if size > 0:
                self._completed = True
            return 0
        n = len(data)
        b[:n] = data
        self._mirror(data)
        return n

    def skip(self, n: int) -> int:
        """Skip up to ``n`` bytes by reading them, so they are still mirrored.

        Returns the number of bytes actually skipped.
        """
        buffer = bytearray(self._chunk_size)
        view = memoryview(buffer)
        total = 0
        while total < n:
            count = self.readinto(view[: min(self._chunk_size, n - total)])
            if not count:
                break
            total += count
        return total

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        raise io.UnsupportedOperation("TeeReader cannot be rewound")

    def tell(self) -> int:
        raise io.UnsupportedOperation("TeeReader cannot be rewound")

    def mark(self, readlimit: int = 0) -> None:
        raise io.UnsupportedOperation("TeeReader does not support mark/reset")

    def reset(self) -> None:
        raise io.UnsupportedOperation("TeeReader does not support mark/reset")

    def mark_supported(self) -> bool:
        return False

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._source.close()
        finally:
            try:
                self._close_sink()
            finally:
                try:
                    self._on_close(self._completed, self._write_protected)
                finally:
                    super().close()

    def _mirror(self, data: bytes) -> None:
        if self._write_protected:
            return
        try:
            self._sink.write(data)
        except OSError as e:
            self._logger.debug("Cannot write to cache", id=self._id, error=str(e))
            self._write_protected = True

    def _close_sink(self) -> None:
        try:
            self._sink.flush()
        except OSError as e:
            self._logger.debug("Cannot flush cache", id=self._id, error=str(e))
            self._write_protected = True
        finally:
            try:
                self._sink.close()
            except OSError as e:
                self._logger.debug("Cannot close cache", id=self._id, error=str(e))
                self._write_protected = True
