"""Barcode decoding from uploaded images."""

import io
import logging
from dataclasses import dataclass
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from food_scanner.errors import BarcodeDecodeError

_logger = logging.getLogger(__name__)


class BarcodeReader(Protocol):
    """Interface for reading a barcode out of image bytes."""

    def decode(self, image_bytes: bytes) -> str | None:
        """Return the first barcode found, or None."""


@dataclass
class PyzbarBarcodeReader(BarcodeReader):
    """zbar-backed reader; converts to greyscale before decoding."""

    def decode(self, image_bytes: bytes) -> str | None:
        """Decode the first barcode in the image."""
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                greyscale = image.convert("L")
        except (UnidentifiedImageError, OSError) as exc:
            raise BarcodeDecodeError("Uploaded file is not a readable image") from exc

        # zbar is a native library; load it only once a real image arrives.
        from pyzbar.pyzbar import decode as pyzbar_decode  # noqa: PLC0415

        for symbol in pyzbar_decode(greyscale):
            data = symbol.data.decode("utf-8", errors="ignore").strip()
            if data:
                _logger.info("Decoded %s barcode %s", symbol.type, data)
                return data
        return None
