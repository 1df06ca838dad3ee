"""Scan orchestration: lookup, grading and ingredient classification."""

import asyncio
import logging
from dataclasses import dataclass, field, replace

from food_scanner.adapters.barcode_reader import BarcodeReader
from food_scanner.domain.products import LookupResult, ScanReport, ScanStatus
from food_scanner.errors import BarcodeDecodeError, InvalidBarcodeError
from food_scanner.services.grading import grade_nutrients
from food_scanner.services.ingredients import (
    classify_ingredients,
    summarize_classification,
)
from food_scanner.services.insights import InsightsService
from food_scanner.services.lookup import (
    DEMO_BARCODE,
    ProductLookupService,
    validate_barcode,
)

MESSAGES: dict[ScanStatus, str] = {
    "not_found": "Product not found. Try another barcode or the demo.",
    "unavailable": "Product database is unreachable. Please retry.",
    "decode_failed": "Could not decode a barcode from this image. Try a clearer photo.",
}

_logger = logging.getLogger(__name__)


@dataclass
class ScanSequencer:
    """Keeps only the newest completed scan as the latest result."""

    issued: int = 0
    applied: int = 0
    latest: ScanReport | None = None

    def next_ticket(self) -> int:
        """Reserve a sequence number for a scan that is starting."""
        self.issued += 1
        return self.issued

    def complete(self, report: ScanReport) -> bool:
        """Publish a finished scan unless a newer one already finished."""
        if report.sequence <= self.applied:
            return False
        self.applied = report.sequence
        self.latest = report
        return True


@dataclass
class ScannerService:
    """Turns barcodes and images into scan reports."""

    lookup_service: ProductLookupService
    barcode_reader: BarcodeReader
    insights_service: InsightsService | None = None
    sequencer: ScanSequencer = field(default_factory=ScanSequencer)
    demo_barcode: str = DEMO_BARCODE

    async def scan(self, barcode: str, user_email: str | None = None) -> ScanReport:
        """Look a barcode up and analyse the product.

        Raises InvalidBarcodeError before any network call for bad input.
        """
        ticket = self.sequencer.next_ticket()
        report = await self.analyse(barcode, sequence=ticket)
        return self._publish(report, user_email)

    async def analyse(self, barcode: str, sequence: int = 0) -> ScanReport:
        """Build a report without touching the latest scan or any history."""
        result = await self.lookup_service.lookup(barcode)
        return self._build_report(result, sequence)

    async def scan_demo(self, user_email: str | None = None) -> ScanReport:
        """Scan the demo barcode."""
        return await self.scan(self.demo_barcode, user_email)

    async def scan_image(
        self, image_bytes: bytes, user_email: str | None = None
    ) -> ScanReport:
        """Decode a barcode from an image and scan it.

        Decoding runs in a worker thread. Images that cannot be read, or whose
        symbol is not a product barcode (a QR link, say), produce a
        ``decode_failed`` report.
        """
        barcode = await self._decode(image_bytes)
        if barcode is None:
            ticket = self.sequencer.next_ticket()
            report = ScanReport(
                status="decode_failed",
                barcode=None,
                message=MESSAGES["decode_failed"],
                sequence=ticket,
            )
            return self._publish(report, user_email)
        return await self.scan(barcode, user_email)

    @property
    def latest(self) -> ScanReport | None:
        """The newest completed scan."""
        return self.sequencer.latest

    async def _decode(self, image_bytes: bytes) -> str | None:
        if not image_bytes:
            return None
        try:
            decoded = await asyncio.to_thread(self.barcode_reader.decode, image_bytes)
        except BarcodeDecodeError as exc:
            _logger.info("Image decode failed: %s", exc)
            return None
        if not decoded:
            return None
        try:
            return validate_barcode(decoded)
        except InvalidBarcodeError:
            _logger.info("Decoded symbol %r is not a product barcode", decoded)
            return None

    def _build_report(self, result: LookupResult, ticket: int) -> ScanReport:
        if result.status != "found" or result.product is None:
            return ScanReport(
                status=result.status,
                barcode=result.barcode,
                message=MESSAGES[result.status],
                sequence=ticket,
            )
        product = result.product
        entries = classify_ingredients(product.ingredient_labels)
        return ScanReport(
            status="found",
            barcode=product.barcode,
            message=None,
            sequence=ticket,
            product=product,
            grade=grade_nutrients(product.nutrients),
            ingredients=entries,
            summary=summarize_classification(entries),
        )

    def _publish(self, report: ScanReport, user_email: str | None) -> ScanReport:
        if not self.sequencer.complete(report):
            _logger.info("Discarding stale scan #%s", report.sequence)
            report = replace(report, stale=True)
        if user_email and self.insights_service and report.status == "found":
            self.insights_service.record(user_email, report)
        return report
