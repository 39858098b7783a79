"""JSON file cache state adapter."""

import json
import threading
from pathlib import Path

from ..ports import StoragePort
from ..utils import move_file, temp_file


def store_label(store: StoragePort) -> str:
    """Stable name for ``store`` across process restarts.

    Uses the store's ``label`` attribute when it has one, else its class.
    """
    label = getattr(store, "label", None)
    if label:
        return str(label)
    cls = type(store)
    return f"{cls.__module__}.{cls.__qualname__}"


class JsonCacheStateAdapter:
    """Tracks fully cached identifiers in a JSON file.

    The file maps a store label to the sorted list of identifiers fully
    cached in that store. Every change rewrites the file through a temp
    file and an atomic rename.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._cached: dict[str, set[str]] = self._load()

    def _load(self) -> dict[str, set[str]]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text())
        return {label: set(ids) for label, ids in data.items()}

    def _save(self) -> None:
        data = {label: sorted(ids) for label, ids in self._cached.items() if ids}
        tmp_path = temp_file(self.path.parent)
        try:
            tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True))
            move_file(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def is_fully_cached(self, store: StoragePort, id: str) -> bool:
        with self._lock:
            return id in self._cached.get(store_label(store), ())

    def set_fully_cached(self, store: StoragePort, id: str, value: bool) -> None:
        label = store_label(store)
        with self._lock:
            ids = self._cached.setdefault(label, set())
            if value == (id in ids):
                return
            if value:
                ids.add(id)
            else:
                ids.discard(id)
            self._save()

    def clear(self, store: StoragePort) -> None:
        with self._lock:
            if self._cached.pop(store_label(store), None):
                self._save()
