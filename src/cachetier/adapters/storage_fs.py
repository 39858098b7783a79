"""Filesystem storage adapter."""

import io
from pathlib import Path
from typing import BinaryIO
from urllib.parse import quote, unquote

from ..utils import delete_path, folder_size, move_file, temp_file

STAGING_DIR = ".staging"


class _AtomicFileWriter(io.FileIO):
    """File writer that moves its temp file over the target on close.

    Leaving a ``with`` block on an exception deletes the temp file instead.
    """

    def __init__(self, tmp_path: Path, target: Path):
        super().__init__(tmp_path, "wb")
        self._tmp_path = tmp_path
        self._target = target

    def close(self) -> None:
        if self.closed:
            return
        super().close()
        move_file(self._tmp_path, self._target)

    def abort(self) -> None:
        """Close and delete the temp file, leaving the target untouched."""
        if self.closed:
            return
        try:
            super().close()
        finally:
            delete_path(self._tmp_path)

    def __exit__(self, exc_type, exc, tb):  # type: ignore[no-untyped-def]
        if exc_type is not None:
            self.abort()
        else:
            self.close()


class FsStorageAdapter:
    """Storage keeping one file per identifier under a root directory.

    Identifiers are percent-encoded into file names. Writes land in a
    staging directory and are renamed into place when the stream closes,
    so readers never see a half-written file.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.staging_dir = self.root / STAGING_DIR
        self.root.mkdir(parents=True, exist_ok=True)

    @property
    def label(self) -> str:
        return f"fs:{self.root.resolve()}"

    def path_for(self, id: str) -> Path:
        """Path of the file holding ``id``."""
        if not id:
            raise ValueError("Identifier must not be empty")
        name = quote(id, safe="")
        # Keep names clear of the staging directory and of "." / ".."
        if name.startswith("."):
            name = "%2E" + name[1:]
        return self.root / name

    def contains(self, id: str) -> bool:
        return self.path_for(id).is_file()

    def open_output_stream(self, id: str) -> BinaryIO:
        target = self.path_for(id)
        tmp_path = temp_file(self.staging_dir)
        return _AtomicFileWriter(tmp_path, target)

    def open_input_stream(self, id: str) -> BinaryIO | None:
        try:
            return open(self.path_for(id), "rb")
        except FileNotFoundError:
            return None

    def delete(self, id: str) -> bool:
        try:
            self.path_for(id).unlink()
        except FileNotFoundError:
            return False
        return True

    def delete_all(self) -> None:
        for path in self._entries():
            if not delete_path(path):
                raise OSError(f"Can't delete {path}")

    def keys(self) -> list[str]:
        return sorted(unquote(path.name) for path in self._entries() if path.is_file())

    def _entries(self) -> list[Path]:
        # Encoded identifiers never start with a dot; other dot entries belong to the caller
        return [
            path
            for path in self.root.iterdir()
            if not path.name.startswith(".") or path == self.staging_dir
        ]

    def size(self) -> int:
        """Total bytes stored, staged writes included."""
        return folder_size(self.root)
