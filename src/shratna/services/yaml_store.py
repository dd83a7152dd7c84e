"""YAML file property store.

Stores properties as a flat mapping in a YAML file, so operators can
inspect and edit them with a text editor:

    shr-atna.auditRepository.endpoint: audit.example.org
    shr-atna.auditRepository.port: '514'
    shr.id.root: 1.3.6.1.4.1.99

The file is re-read on every lookup, so edits made while the process is
running are picked up immediately.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

import yaml

from ..interfaces import IPropertyStore

logger = logging.getLogger(__name__)


class YamlPropertyStore(IPropertyStore):
    """Property store persisted as a flat YAML mapping."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self._lock = threading.RLock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        # BaseLoader keeps every scalar as written: 1.10, yes and 0514
        # stay text instead of becoming 1.1, True and 332
        with open(self.path) as f:
            data = yaml.load(f, Loader=yaml.BaseLoader) or {}

        if not isinstance(data, dict):
            raise ValueError(
                f"Property file {self.path} must contain a mapping, "
                f"got {type(data).__name__}"
            )

        values = {}
        for key, value in data.items():
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(
                    f"Property {key} in {self.path} must be a scalar, "
                    f"got {type(value).__name__}"
                )
            values[key] = value
        return values

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True)
        os.replace(tmp_path, self.path)

    def read(self, name: str) -> Optional[str]:
        with self._lock:
            return self._load().get(name)

    def write(self, name: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[name] = value
            self._dump(data)
        logger.debug(f"Wrote property {name} to {self.path}")

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._load())

    def __repr__(self) -> str:
        return f"YamlPropertyStore(path={str(self.path)!r})"
