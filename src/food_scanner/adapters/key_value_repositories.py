"""Repositories persisted through a key-value store."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime

from food_scanner.domain.accounts import UserCredential, UserSession
from food_scanner.domain.products import ScanHistoryEntry
from food_scanner.services.accounts import CredentialRepository
from food_scanner.services.insights import HistoryRepository
from food_scanner.services.storage import KeyValueStore

USERS_KEY = "users"
SESSION_KEY = "user"
HISTORY_KEY_PREFIX = "history:"

_logger = logging.getLogger(__name__)


@dataclass
class KeyValueCredentialRepository(CredentialRepository):
    """Credential list under ``users`` and the session under ``user``."""

    store: KeyValueStore

    def list_credentials(self) -> list[UserCredential]:
        """Return stored credentials, skipping malformed rows."""
        rows = self.store.get(USERS_KEY)
        credentials = []
        for row in rows if isinstance(rows, list) else []:
            if not isinstance(row, dict):
                continue
            email = row.get("email")
            password_hash = row.get("password_hash")
            if isinstance(email, str) and isinstance(password_hash, str):
                credentials.append(
                    UserCredential(email=email, password_hash=password_hash)
                )
        return credentials

    def save_credentials(self, credentials: list[UserCredential]) -> None:
        """Replace the stored credential list."""
        self.store.set(
            USERS_KEY,
            [
                {"email": item.email, "password_hash": item.password_hash}
                for item in credentials
            ],
        )

    def load_session(self) -> UserSession | None:
        """Return the persisted session, if it is well formed."""
        row = self.store.get(SESSION_KEY)
        if not isinstance(row, dict):
            return None
        email = row.get("email")
        role = row.get("role")
        if not isinstance(email, str) or role not in {"admin", "user"}:
            return None
        return UserSession(email=email, role=role)

    def save_session(self, session: UserSession) -> None:
        """Persist the current session."""
        self.store.set(SESSION_KEY, {"email": session.email, "role": session.role})

    def clear_session(self) -> None:
        """Remove the persisted session."""
        self.store.delete(SESSION_KEY)


@dataclass
class KeyValueHistoryRepository(HistoryRepository):
    """Scan history stored as one list per user."""

    store: KeyValueStore
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def list_entries(self, email: str) -> list[ScanHistoryEntry]:
        """Return a user's history, oldest first, skipping malformed rows."""
        rows = self.store.get(_history_key(email))
        entries = []
        for row in rows if isinstance(rows, list) else []:
            entry = _history_entry(row)
            if entry is not None:
                entries.append(entry)
        return entries

    def append_entry(self, email: str, entry: ScanHistoryEntry) -> None:
        """Append one scan to a user's history."""
        key = _history_key(email)
        with self._lock:
            rows = self.store.get(key)
            rows = list(rows) if isinstance(rows, list) else []
            rows.append(
                {
                    "barcode": entry.barcode,
                    "product_name": entry.product_name,
                    "score": entry.score,
                    "grade": entry.grade,
                    "scanned_at": entry.scanned_at.isoformat(),
                }
            )
            self.store.set(key, rows)

    def delete_entries(self, email: str) -> None:
        """Forget a user's history."""
        with self._lock:
            self.store.delete(_history_key(email))


def _history_key(email: str) -> str:
    return f"{HISTORY_KEY_PREFIX}{email}"


def _history_entry(row: object) -> ScanHistoryEntry | None:
    if not isinstance(row, dict):
        return None
    try:
        return ScanHistoryEntry(
            barcode=str(row["barcode"]),
            product_name=str(row["product_name"]),
            score=float(row["score"]),
            grade=row["grade"],
            scanned_at=datetime.fromisoformat(row["scanned_at"]),
        )
    except (KeyError, TypeError, ValueError):
        _logger.warning("Skipping malformed history row %r", row)
        return None
