"""Product lookup across an ordered list of sources."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from food_scanner.adapters.off_client import OpenFoodFactsClient
from food_scanner.domain.nutrition import NutrientProfile
from food_scanner.domain.products import LookupResult, Product
from food_scanner.errors import InvalidBarcodeError, ProductSourceError
from food_scanner.services.cache import Cache
from food_scanner.services.ingredients import ingredient_labels

MIN_BARCODE_LENGTH = 6
MAX_BARCODE_LENGTH = 14

DEMO_BARCODE = "8901058816338"
DEMO_PRODUCT_PAYLOAD: dict[str, object] = {
    "product_name": "Demo Chocolate Bar",
    "brands": "DemoBrand",
    "quantity": "37 g",
    "image_url": None,
    "ingredients_text": (
        "Sugar, Wheat Flour, Cocoa Butter, Milk Solids, Cocoa Mass, "
        "Vegetable Fat, Emulsifier (Soy Lecithin), Salt"
    ),
    "nutriments": {
        "sugars_100g": 51,
        "fat_100g": 26,
        "saturated-fat_100g": 14,
        "salt_100g": 0.2,
        "proteins_100g": 7,
        "carbohydrates_100g": 64,
        "energy-kcal_100g": 518,
        "fiber_100g": 1,
    },
}

_logger = logging.getLogger(__name__)


class ProductSource(Protocol):
    """A place products can be looked up by barcode."""

    name: str

    async def fetch(self, barcode: str) -> Product | None:
        """Return the product, None on a miss, or raise ProductSourceError."""


def validate_barcode(barcode: str) -> str:
    """Return the normalized barcode or raise InvalidBarcodeError."""
    code = (barcode or "").strip()
    if not code:
        raise InvalidBarcodeError(barcode, "Please enter a barcode.")
    if not code.isdigit():
        raise InvalidBarcodeError(barcode, "A barcode contains digits only.")
    if not MIN_BARCODE_LENGTH <= len(code) <= MAX_BARCODE_LENGTH:
        raise InvalidBarcodeError(
            barcode,
            f"A barcode has {MIN_BARCODE_LENGTH} to {MAX_BARCODE_LENGTH} digits.",
        )
    return code


def product_from_payload(
    barcode: str, payload: Mapping[str, object], source: str
) -> Product:
    """Normalize an Open Food Facts product object."""
    name = (
        payload.get("product_name")
        or payload.get("product_name_en")
        or payload.get("generic_name")
        or payload.get("brands")
        or "Unknown Product"
    )
    nutriments = payload.get("nutriments")
    ingredients_text = payload.get("ingredients_text")
    return Product(
        barcode=barcode,
        name=str(name),
        brand=_optional_str(payload.get("brands")),
        quantity=_optional_str(payload.get("quantity")),
        image_url=_optional_str(
            payload.get("image_front_small_url") or payload.get("image_url")
        ),
        nutrients=NutrientProfile.from_nutriments(
            nutriments if isinstance(nutriments, Mapping) else None
        ),
        ingredient_labels=tuple(ingredient_labels(payload)),
        ingredients_text=ingredients_text if isinstance(ingredients_text, str) else None,
        source=source,
    )


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class OpenFoodFactsSource(ProductSource):
    """Product source backed by one Open Food Facts host."""

    name: str
    client: OpenFoodFactsClient
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def fetch(self, barcode: str) -> Product | None:
        """Look the barcode up, treating ``status: 0`` as a miss."""
        payload = await self._call_with_retry(barcode)
        product = payload.get("product")
        if payload.get("status") in (0, "0") or not isinstance(product, Mapping):
            return None
        return product_from_payload(barcode, product, source=self.name)

    async def _call_with_retry(self, barcode: str) -> dict[str, object]:
        """Call the client with a short retry."""
        attempt = 0
        while True:
            try:
                return await self.client.get_product(barcode)
            except (httpx.HTTPError, ValueError) as exc:
                attempt += 1
                _logger.warning(
                    "Lookup %s failed on %s (attempt %s/%s, status=%s): %s",
                    barcode,
                    self.name,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise ProductSourceError(self.name, exc) from exc
                await asyncio.sleep(self.retry_delay_seconds)


@dataclass
class DemoProductSource(ProductSource):
    """Offline source answering only for the demo barcode."""

    name: str = "demo"
    barcode: str = DEMO_BARCODE
    payload: dict[str, object] = field(default_factory=lambda: DEMO_PRODUCT_PAYLOAD)

    async def fetch(self, barcode: str) -> Product | None:
        """Return the demo record for the demo barcode."""
        if barcode != self.barcode:
            return None
        return product_from_payload(barcode, self.payload, source=self.name)


@dataclass
class ProductLookupService:
    """Try each source in order and stop at the first hit."""

    sources: Sequence[ProductSource]
    cache: Cache
    cache_ttl_seconds: int = 3600

    async def lookup(self, barcode: str) -> LookupResult:
        """Look a barcode up.

        A miss everywhere is ``not_found``; a miss where at least one source
        could not be reached is ``unavailable``.
        """
        code = validate_barcode(barcode)
        cache_key = f"off:product:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Product):
            return LookupResult(
                status="found", barcode=code, product=cached, source=cached.source
            )

        failed: list[str] = []
        for source in self.sources:
            try:
                product = await source.fetch(code)
            except ProductSourceError as exc:
                _logger.warning("Source %s unavailable: %s", exc.source, exc.cause)
                failed.append(source.name)
                continue
            if product is not None:
                self.cache.set(cache_key, product, ttl_seconds=self.cache_ttl_seconds)
                _logger.info("Lookup %s found via %s", code, source.name)
                return LookupResult(
                    status="found", barcode=code, product=product, source=source.name
                )

        status = "unavailable" if failed else "not_found"
        _logger.info("Lookup %s: %s", code, status)
        return LookupResult(status=status, barcode=code, failed_sources=tuple(failed))


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
