"""Key-value persistence interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Persistent store of JSON-serializable values by key."""

    def get(self, key: str) -> object | None:
        """Return the stored value for a key, if any."""

    def set(self, key: str, value: object) -> None:
        """Store a value under a key, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""
