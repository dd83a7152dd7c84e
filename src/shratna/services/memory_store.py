"""In-memory property store."""

import threading
from typing import Optional

from ..interfaces import IPropertyStore


class InMemoryPropertyStore(IPropertyStore):
    """Dict-backed property store for testing and development.

    Values do not survive a restart. Tracks read/write counts so tests can
    assert how often the configuration touched the store.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()
        self.reads = 0
        self.writes = 0

    def read(self, name: str) -> Optional[str]:
        with self._lock:
            self.reads += 1
            return self._values.get(name)

    def write(self, name: str, value: str) -> None:
        with self._lock:
            self.writes += 1
            self._values[name] = value

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._values)

    def as_dict(self) -> dict[str, str]:
        """Return a copy of all stored values."""
        with self._lock:
            return dict(self._values)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __repr__(self) -> str:
        return f"InMemoryPropertyStore(entries={len(self)})"
