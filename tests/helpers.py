"""Test doubles shared across test modules."""

import io

from cachetier.adapters import MemoryStorageAdapter


class FailingWriter(io.RawIOBase):
    """Writer whose operations fail from a chosen point on."""

    def __init__(self, fail_write=True, fail_flush=False, fail_close=False, fail_after=0):
        super().__init__()
        self.fail_write = fail_write
        self.fail_flush = fail_flush
        self.fail_close = fail_close
        self.fail_after = fail_after
        self.written = bytearray()
        self.write_calls = 0

    def writable(self):
        return True

    def write(self, b):
        self.write_calls += 1
        if self.fail_write and self.write_calls > self.fail_after:
            raise OSError("disk full")
        self.written.extend(b)
        return len(b)

    def flush(self):
        if self.fail_flush:
            raise OSError("flush failed")

    def close(self):
        if self.closed:
            return
        super().close()
        if self.fail_close:
            raise OSError("close failed")


class RecordingStorage:
    """Storage wrapper that records every call made to it."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    def contains(self, id):
        self.calls.append(("contains", id))
        return self.inner.contains(id)

    def open_output_stream(self, id):
        self.calls.append(("open_output_stream", id))
        return self.inner.open_output_stream(id)

    def open_input_stream(self, id):
        self.calls.append(("open_input_stream", id))
        return self.inner.open_input_stream(id)

    def delete(self, id):
        self.calls.append(("delete", id))
        return self.inner.delete(id)

    def delete_all(self):
        self.calls.append(("delete_all",))
        return self.inner.delete_all()


def put(storage, id, data):
    with storage.open_output_stream(id) as f:
        f.write(data)


def read_all(storage, id):
    stream = storage.open_input_stream(id)
    assert stream is not None
    with stream:
        return stream.read()


class SinkStorage(MemoryStorageAdapter):
    """Memory storage whose output streams are supplied by the test."""

    def __init__(self, make_sink, **kwargs):
        super().__init__(**kwargs)
        self.make_sink = make_sink
        self.sinks = []

    def open_output_stream(self, id):
        sink = self.make_sink()
        self.sinks.append(sink)
        return sink
