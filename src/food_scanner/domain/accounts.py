"""Account domain models."""

from dataclasses import dataclass
from typing import Literal

Role = Literal["admin", "user"]


@dataclass(frozen=True)
class UserCredential:
    """Stored credential for a registered user."""

    email: str
    password_hash: str


@dataclass(frozen=True)
class UserSession:
    """The signed-in user of the current profile."""

    email: str
    role: Role
