"""File manipulation helpers for filesystem-backed storages."""

import os
import shutil
import tempfile
import uuid
from pathlib import Path


def move_file(src: Path, dst: Path) -> None:
    """Atomically rename ``src`` to ``dst``, replacing ``dst`` if present.

    Both paths must be on the same filesystem.

    Raises:
        OSError: If the rename fails.
    """
    try:
        os.replace(src, dst)
    except OSError as e:
        raise OSError(
            f"Can't rename file {src} ({src.exists()}) to {dst} ({dst.exists()}): {e}"
        ) from e


def delete_path(path: Path) -> bool:
    """Delete a file or a directory tree.

    Returns True if ``path`` no longer exists afterwards, including when it
    never existed.
    """
    if not path.exists() and not path.is_symlink():
        return True
    if path.is_file() or path.is_symlink():
        path.unlink()
        return True
    if not path.is_dir():
        return False
    shutil.rmtree(path)
    return not path.exists()


def temp_name() -> str:
    """Return a unique name suitable for a temporary file."""
    return uuid.uuid4().hex


def temp_file(directory: Path) -> Path:
    """Create an empty, uniquely named file inside ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=temp_name(), dir=directory)
    os.close(fd)
    return Path(name)


def folder_size(directory: Path) -> int:
    """Total size in bytes of every file below ``directory``."""
    if not directory.exists():
        return 0
    total = 0
    for path in directory.rglob("*"):
        if path.is_file():
            total += path.stat().st_size
    return total


def move_all_files(src: Path, dst: Path) -> None:
    """Move every file below ``src`` to the same relative location below ``dst``."""
    for path in src.iterdir():
        target = dst / path.name
        if path.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            move_all_files(path, target)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            move_file(path, target)
