"""Account, login and session lifecycle."""

import logging
import re
import secrets
import threading
from dataclasses import dataclass, field
from typing import Protocol

import bcrypt

from food_scanner.domain.accounts import UserCredential, UserSession
from food_scanner.errors import (
    CredentialValidationError,
    InvalidCredentialsError,
    UnknownUserError,
)

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_logger = logging.getLogger(__name__)


class CredentialRepository(Protocol):
    """Persistence interface for credentials and the current session."""

    def list_credentials(self) -> list[UserCredential]:
        """Return stored credentials in insertion order."""

    def save_credentials(self, credentials: list[UserCredential]) -> None:
        """Replace the stored credential list."""

    def load_session(self) -> UserSession | None:
        """Return the persisted session, if any."""

    def save_session(self, session: UserSession) -> None:
        """Persist the current session."""

    def clear_session(self) -> None:
        """Remove the persisted session."""


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)
    ).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("ascii"))
    except ValueError:
        _logger.warning("Stored password hash is malformed")
        return False


def normalize_email(email: str | None) -> str:
    """Strip and lower-case an email address."""
    return (email or "").strip().lower()


@dataclass
class SessionContext:
    """Holds the signed-in user for this profile."""

    repository: CredentialRepository
    current: UserSession | None = None

    def hydrate(self) -> UserSession | None:
        """Load the persisted session into memory."""
        self.current = self.repository.load_session()
        if self.current:
            _logger.info("Restored session for %s", self.current.email)
        return self.current

    def begin(self, session: UserSession) -> None:
        """Make a session current and persist it."""
        self.current = session
        self.repository.save_session(session)

    def end(self) -> None:
        """Clear the current session from memory and storage."""
        self.current = None
        self.repository.clear_session()

    @property
    def is_admin(self) -> bool:
        """True when the admin is signed in."""
        return self.current is not None and self.current.role == "admin"


@dataclass
class AccountService:
    """Signup, login and admin management of stored users.

    Every read-modify-write of the credential list runs under one lock, so
    concurrent signups and admin edits never drop each other's changes.
    """

    repository: CredentialRepository
    session_context: SessionContext
    admin_email: str
    admin_password: str
    hash_rounds: int = 12
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def signup(
        self, email: str, password: str, confirm_password: str
    ) -> UserCredential:
        """Register a new user."""
        normalized = normalize_email(email)
        errors = _email_errors(normalized) | _password_errors(password)
        if "password" not in errors and password != confirm_password:
            errors["confirm_password"] = "Passwords do not match."
        password_hash = (
            None if errors else hash_password(password, rounds=self.hash_rounds)
        )

        with self._lock:
            credentials = self.repository.list_credentials()
            if "email" not in errors and (
                self._is_admin_email(normalized)
                or _find(credentials, normalized) is not None
            ):
                errors["email"] = "User already exists."
            if errors or password_hash is None:
                raise CredentialValidationError(errors)

            credential = UserCredential(email=normalized, password_hash=password_hash)
            credentials.append(credential)
            self.repository.save_credentials(credentials)
        _logger.info("Registered user %s", normalized)
        return credential

    def login(self, email: str, password: str) -> UserSession:
        """Sign a user or the admin in and make the session current."""
        normalized = normalize_email(email)
        errors = {}
        if not normalized:
            errors["email"] = "Email is required."
        if not password:
            errors["password"] = "Password is required."
        if errors:
            raise CredentialValidationError(errors)

        if self._is_admin_email(normalized) and secrets.compare_digest(
            password.encode("utf-8"), self.admin_password.encode("utf-8")
        ):
            session = UserSession(email=normalized, role="admin")
        else:
            credential = _find(self.repository.list_credentials(), normalized)
            if credential is None or not verify_password(
                password, credential.password_hash
            ):
                _logger.info("Rejected login for %s", normalized)
                raise InvalidCredentialsError("Invalid credentials or user not registered.")
            session = UserSession(email=credential.email, role="user")

        self.session_context.begin(session)
        _logger.info("Signed in %s as %s", session.email, session.role)
        return session

    def logout(self) -> None:
        """End the current session."""
        self.session_context.end()

    def list_users(self) -> list[str]:
        """Return registered emails in stored order."""
        return [credential.email for credential in self.repository.list_credentials()]

    def update_user(
        self, email: str, new_email: str, new_password: str | None = None
    ) -> UserCredential:
        """Change a user's email and, when given, password."""
        current = normalize_email(email)
        normalized = normalize_email(new_email)
        errors = _email_errors(normalized)
        if new_password is not None:
            errors |= _password_errors(new_password)
        if "email" not in errors and self._is_admin_email(normalized):
            errors["email"] = "Another user already has this email."
        new_hash = (
            hash_password(new_password, rounds=self.hash_rounds)
            if new_password is not None and not errors
            else None
        )

        with self._lock:
            credentials = self.repository.list_credentials()
            index = _index_of(credentials, current)
            if index is None:
                raise UnknownUserError(current)
            if (
                "email" not in errors
                and normalized != current
                and _find(credentials, normalized) is not None
            ):
                errors["email"] = "Another user already has this email."
            if errors:
                raise CredentialValidationError(errors)

            updated = UserCredential(
                email=normalized,
                password_hash=new_hash or credentials[index].password_hash,
            )
            credentials[index] = updated
            self.repository.save_credentials(credentials)
        _logger.info("Updated user %s", normalized)
        return updated

    def delete_user(self, email: str) -> None:
        """Remove a registered user."""
        normalized = normalize_email(email)
        with self._lock:
            credentials = self.repository.list_credentials()
            index = _index_of(credentials, normalized)
            if index is None:
                raise UnknownUserError(normalized)
            del credentials[index]
            self.repository.save_credentials(credentials)
        _logger.info("Deleted user %s", normalized)

    def _is_admin_email(self, email: str) -> bool:
        return email == normalize_email(self.admin_email)


def _email_errors(email: str) -> dict[str, str]:
    if not email:
        return {"email": "Email is required."}
    if not _EMAIL_RE.match(email):
        return {"email": "Enter a valid email address."}
    return {}


def _password_errors(password: str) -> dict[str, str]:
    if not password:
        return {"password": "Password is required."}
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return {"password": f"Password must be at most {MAX_PASSWORD_BYTES} bytes."}
    return {}


def _find(credentials: list[UserCredential], email: str) -> UserCredential | None:
    index = _index_of(credentials, email)
    return credentials[index] if index is not None else None


def _index_of(credentials: list[UserCredential], email: str) -> int | None:
    for index, credential in enumerate(credentials):
        if credential.email == email:
            return index
    return None
