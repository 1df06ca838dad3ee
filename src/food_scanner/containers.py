"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from food_scanner.adapters.barcode_reader import BarcodeReader, PyzbarBarcodeReader
from food_scanner.adapters.json_file_store import JsonFileKeyValueStore
from food_scanner.adapters.key_value_repositories import (
    KeyValueCredentialRepository,
    KeyValueHistoryRepository,
)
from food_scanner.adapters.off_client import HttpxOpenFoodFactsClient
from food_scanner.adapters.supabase_key_value_store import SupabaseKeyValueStore
from food_scanner.config import Settings, parse_source_order
from food_scanner.services.accounts import AccountService, SessionContext
from food_scanner.services.cache import InMemoryCache
from food_scanner.services.comparison import ComparisonService
from food_scanner.services.insights import InsightsService
from food_scanner.services.lookup import (
    DemoProductSource,
    OpenFoodFactsSource,
    ProductLookupService,
    ProductSource,
)
from food_scanner.services.scanner import ScannerService
from food_scanner.services.storage import KeyValueStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_context: SessionContext
    account_service: AccountService
    lookup_service: ProductLookupService
    scanner_service: ScannerService
    comparison_service: ComparisonService
    insights_service: InsightsService
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the configured key-value store."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage needs SUPABASE_URL and SUPABASE_SERVICE_KEY")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client)
    return JsonFileKeyValueStore(Path(settings.storage_path))


def build_container(
    settings: Settings | None = None,
    barcode_reader: BarcodeReader | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    credential_repository = KeyValueCredentialRepository(store)
    session_context = SessionContext(credential_repository)
    account_service = AccountService(
        repository=credential_repository,
        session_context=session_context,
        admin_email=resolved_settings.admin_email,
        admin_password=resolved_settings.admin_password,
        hash_rounds=resolved_settings.password_hash_rounds,
    )

    base_urls = {
        "regional": resolved_settings.off_regional_base_url,
        "global": resolved_settings.off_global_base_url,
    }
    clients = {
        name: HttpxOpenFoodFactsClient.create(
            base_url=base_urls[name],
            user_agent=resolved_settings.off_user_agent,
            timeout_seconds=resolved_settings.http_timeout_seconds,
        )
        for name in parse_source_order(resolved_settings.lookup_sources)
    }
    sources: list[ProductSource] = [
        OpenFoodFactsSource(
            name=name,
            client=client,
            retry_attempts=resolved_settings.lookup_retry_attempts,
        )
        for name, client in clients.items()
    ]
    if resolved_settings.demo_fallback:
        sources.append(DemoProductSource())
    lookup_service = ProductLookupService(
        sources=sources,
        cache=InMemoryCache(),
        cache_ttl_seconds=resolved_settings.product_cache_ttl_seconds,
    )

    insights_service = InsightsService(KeyValueHistoryRepository(store))
    scanner_service = ScannerService(
        lookup_service=lookup_service,
        barcode_reader=barcode_reader or PyzbarBarcodeReader(),
        insights_service=insights_service,
    )
    comparison_service = ComparisonService(scanner_service)

    async def close_resources() -> None:
        for client in clients.values():
            await client.close()

    return AppContainer(
        settings=resolved_settings,
        session_context=session_context,
        account_service=account_service,
        lookup_service=lookup_service,
        scanner_service=scanner_service,
        comparison_service=comparison_service,
        insights_service=insights_service,
        close_resources=close_resources,
    )
