"""Side-by-side comparison of two products."""

from dataclasses import dataclass

from food_scanner.domain.products import ScanReport
from food_scanner.services.scanner import ScannerService


@dataclass(frozen=True)
class Comparison:
    """Two scan reports and how they differ."""

    first: ScanReport
    second: ScanReport
    nutrient_differences: dict[str, float]
    healthier_barcode: str | None


@dataclass
class ComparisonService:
    """Scans two barcodes and compares their grades and nutrients."""

    scanner_service: ScannerService

    async def compare(self, first: str, second: str) -> Comparison:
        """Compare two barcodes; differences are first minus second.

        Comparison lookups never replace the latest scan.
        """
        first_report = await self.scanner_service.analyse(first)
        second_report = await self.scanner_service.analyse(second)
        if first_report.product is None or second_report.product is None:
            return Comparison(first_report, second_report, {}, None)

        first_values = first_report.product.nutrients.as_dict()
        second_values = second_report.product.nutrients.as_dict()
        differences = {
            name: round(first_values[name] - second_values[name], 3)
            for name in first_values
        }
        healthier = None
        if first_report.grade and second_report.grade:
            if first_report.grade.score > second_report.grade.score:
                healthier = first_report.barcode
            elif second_report.grade.score > first_report.grade.score:
                healthier = second_report.barcode
        return Comparison(first_report, second_report, differences, healthier)
