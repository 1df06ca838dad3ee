"""Open Food Facts product API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

_NOT_FOUND = 404


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts product lookups."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch the product envelope for a barcode."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client for one regional host."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode.

        Unknown barcodes come back as a 404 carrying a ``status: 0`` envelope;
        that is a miss, not a transport failure.
        """
        url = f"{self.base_url}/api/v2/product/{barcode}"
        response = await self.http_client.get(url, timeout=self.timeout_seconds)
        if response.status_code == _NOT_FOUND:
            return {"status": 0, "code": barcode}
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected product envelope for {barcode}")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
