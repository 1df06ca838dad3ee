"""Product lookup and scan models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from food_scanner.domain.ingredients import ClassificationSummary, IngredientEntry
from food_scanner.domain.nutrition import Grade, GradeResult, NutrientProfile

LookupStatus = Literal["found", "not_found", "unavailable"]
ScanStatus = Literal["found", "not_found", "unavailable", "decode_failed"]


@dataclass(frozen=True)
class Product:
    """Normalized product record."""

    barcode: str
    name: str
    brand: str | None
    quantity: str | None
    image_url: str | None
    nutrients: NutrientProfile
    ingredient_labels: tuple[str, ...]
    ingredients_text: str | None
    source: str


@dataclass(frozen=True)
class LookupResult:
    """Outcome of trying every product source for a barcode."""

    status: LookupStatus
    barcode: str
    product: Product | None = None
    source: str | None = None
    failed_sources: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScanReport:
    """Everything shown for one scanned barcode."""

    status: ScanStatus
    barcode: str | None
    message: str | None
    sequence: int
    product: Product | None = None
    grade: GradeResult | None = None
    ingredients: tuple[IngredientEntry, ...] = ()
    summary: ClassificationSummary = field(default_factory=ClassificationSummary)
    stale: bool = False


@dataclass(frozen=True)
class ScanHistoryEntry:
    """A found product recorded in a user's scan history."""

    barcode: str
    product_name: str
    score: float
    grade: Grade
    scanned_at: datetime
