"""Local JSON file key-value store."""

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path

from food_scanner.services.storage import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Keeps every key in one JSON object on disk.

    Writes go through a fresh temporary file and ``os.replace`` while holding
    the store lock, so concurrent writers never clobber each other's keys.
    """

    path: Path
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )

    def get(self, key: str) -> object | None:
        """Return the stored value for a key."""
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: object) -> None:
        """Store a value and flush the file."""
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        """Remove a key and flush the file."""
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            _logger.warning("Ignoring unreadable store file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            json.dump(data, handle, indent=2)
        os.replace(handle.name, self.path)
