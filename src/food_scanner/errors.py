"""Domain exceptions."""


class FoodScannerError(Exception):
    """Base class for food scanner errors."""


class InvalidBarcodeError(FoodScannerError, ValueError):
    """Raised when a barcode fails validation before any lookup."""

    def __init__(self, barcode: str, message: str) -> None:
        super().__init__(message)
        self.barcode = barcode
        self.message = message


class ProductSourceError(FoodScannerError):
    """Raised when a product source cannot be reached."""

    def __init__(self, source: str, cause: Exception) -> None:
        super().__init__(f"Product source {source!r} failed: {cause}")
        self.source = source
        self.cause = cause


class BarcodeDecodeError(FoodScannerError):
    """Raised when an uploaded image cannot be read as an image."""


class CredentialValidationError(FoodScannerError):
    """Form validation failure with per-field messages."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors


class InvalidCredentialsError(FoodScannerError):
    """Raised when login credentials do not match."""


class UnknownUserError(FoodScannerError):
    """Raised when an admin action targets a missing user."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Unknown user: {email}")
        self.email = email
