"""Shared test fixtures."""

from dataclasses import dataclass, field

import httpx
import pytest

from food_scanner.adapters.barcode_reader import BarcodeReader
from food_scanner.adapters.key_value_repositories import (
    KeyValueCredentialRepository,
    KeyValueHistoryRepository,
)
from food_scanner.adapters.off_client import OpenFoodFactsClient
from food_scanner.config import Settings
from food_scanner.containers import AppContainer
from food_scanner.services.accounts import AccountService, SessionContext
from food_scanner.services.cache import InMemoryCache
from food_scanner.services.comparison import ComparisonService
from food_scanner.services.insights import InsightsService
from food_scanner.services.lookup import (
    DemoProductSource,
    OpenFoodFactsSource,
    ProductLookupService,
)
from food_scanner.services.scanner import ScannerService
from food_scanner.services.storage import KeyValueStore

OATS_BARCODE = "5000000000011"
COLA_BARCODE = "5449000000996"

OATS_PRODUCT = {
    "product_name": "Rolled Oats",
    "brands": "Mill Co",
    "quantity": "500 g",
    "ingredients": [{"text": "Wholegrain Oat Flakes", "percent": 100}],
    "nutriments": {
        "sugars_100g": 1.1,
        "fat_100g": 7,
        "saturated-fat_100g": 1.3,
        "salt_100g": 0.01,
        "proteins_100g": 13,
        "fiber_100g": 10,
        "carbohydrates_100g": 58,
        "energy-kcal_100g": 372,
    },
}

COLA_PRODUCT = {
    "product_name": "Cola",
    "brands": "Fizz",
    "ingredients_text": "Carbonated Water, Sugar, Colour (Caramel E150d), "
    "Phosphoric Acid, Natural Flavourings, Caffeine",
    "nutriments": {
        "sugars_100g": "10.6",
        "salt_100g": 0,
        "energy-kcal_100g": 42,
        "proteins_100g": "",
    },
}


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed key-value store for tests."""

    data: dict[str, object] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        return self.data.get(key)

    def set(self, key: str, value: object) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts host with canned products."""

    products: dict[str, dict[str, object]] = field(default_factory=dict)
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.calls.append(barcode)
        if self.error is not None:
            raise self.error
        product = self.products.get(barcode)
        if product is None:
            return {"status": 0, "code": barcode}
        return {"status": 1, "code": barcode, "product": product}


@dataclass
class FakeBarcodeReader(BarcodeReader):
    """Reader returning a fixed barcode or failing."""

    barcode: str | None = None
    error: Exception | None = None

    def decode(self, image_bytes: bytes) -> str | None:
        if self.error is not None:
            raise self.error
        return self.barcode


def network_error() -> httpx.ConnectError:
    return httpx.ConnectError("connection refused")


def build_lookup_service(
    regional: FakeOpenFoodFactsClient,
    global_client: FakeOpenFoodFactsClient,
    demo_fallback: bool = False,
) -> ProductLookupService:
    sources = [
        OpenFoodFactsSource("regional", regional, retry_delay_seconds=0),
        OpenFoodFactsSource("global", global_client, retry_delay_seconds=0),
    ]
    if demo_fallback:
        sources.append(DemoProductSource())
    return ProductLookupService(sources=sources, cache=InMemoryCache())


@pytest.fixture
def settings() -> Settings:
    return Settings(
        admin_email="admin",
        admin_password="admin-pass",
        password_hash_rounds=4,
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def regional_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient(products={OATS_BARCODE: OATS_PRODUCT})


@pytest.fixture
def global_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient(
        products={OATS_BARCODE: OATS_PRODUCT, COLA_BARCODE: COLA_PRODUCT}
    )


@pytest.fixture
def barcode_reader() -> FakeBarcodeReader:
    return FakeBarcodeReader(barcode=OATS_BARCODE)


@pytest.fixture
def insights_service(store: InMemoryKeyValueStore) -> InsightsService:
    return InsightsService(KeyValueHistoryRepository(store))


@pytest.fixture
def scanner_service(
    regional_client: FakeOpenFoodFactsClient,
    global_client: FakeOpenFoodFactsClient,
    barcode_reader: FakeBarcodeReader,
    insights_service: InsightsService,
) -> ScannerService:
    return ScannerService(
        lookup_service=build_lookup_service(
            regional_client, global_client, demo_fallback=True
        ),
        barcode_reader=barcode_reader,
        insights_service=insights_service,
    )


@pytest.fixture
def account_service(
    settings: Settings, store: InMemoryKeyValueStore
) -> AccountService:
    repository = KeyValueCredentialRepository(store)
    return AccountService(
        repository=repository,
        session_context=SessionContext(repository),
        admin_email=settings.admin_email,
        admin_password=settings.admin_password,
        hash_rounds=settings.password_hash_rounds,
    )


@pytest.fixture
def container(
    settings: Settings,
    account_service: AccountService,
    scanner_service: ScannerService,
    insights_service: InsightsService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_context=account_service.session_context,
        account_service=account_service,
        lookup_service=scanner_service.lookup_service,
        scanner_service=scanner_service,
        comparison_service=ComparisonService(scanner_service),
        insights_service=insights_service,
        close_resources=close_resources,
    )
