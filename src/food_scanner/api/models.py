"""Request bodies for the HTTP API."""

from pydantic import BaseModel


class SignupRequest(BaseModel):
    """Signup form."""

    email: str
    password: str
    confirm_password: str


class LoginRequest(BaseModel):
    """Login form; the admin signs in with the configured admin email."""

    email: str
    password: str


class ScanRequest(BaseModel):
    """Manual barcode entry."""

    barcode: str


class CompareRequest(BaseModel):
    """Two barcodes to compare."""

    first: str
    second: str


class UserUpdateRequest(BaseModel):
    """Admin edit of a stored user; omit ``password`` to keep it."""

    email: str
    password: str | None = None
