"""Nutrition domain models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Literal

Grade = Literal["A", "B", "C", "D", "E", "F"]
NutrientLevel = Literal["low", "moderate", "high"]

_NUTRIMENT_KEYS = {
    "sugar": "sugars_100g",
    "fat": "fat_100g",
    "saturated_fat": "saturated-fat_100g",
    "salt": "salt_100g",
    "protein": "proteins_100g",
    "fiber": "fiber_100g",
    "carbohydrates": "carbohydrates_100g",
    "energy_kcal": "energy-kcal_100g",
}


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrient readings per 100 g of product."""

    sugar: float = 0.0
    fat: float = 0.0
    saturated_fat: float = 0.0
    salt: float = 0.0
    protein: float = 0.0
    fiber: float = 0.0
    carbohydrates: float = 0.0
    energy_kcal: float = 0.0

    @classmethod
    def from_nutriments(cls, nutriments: Mapping[str, object] | None) -> "NutrientProfile":
        """Build a profile from an Open Food Facts ``nutriments`` mapping."""
        source = nutriments or {}
        return cls(
            **{
                name: coerce_amount(source.get(key))
                for name, key in _NUTRIMENT_KEYS.items()
            }
        )

    def as_dict(self) -> dict[str, float]:
        """Return the readings keyed by field name."""
        return {field.name: getattr(self, field.name) for field in fields(self)}

    def macro_breakdown(self) -> dict[str, float]:
        """Return the grams used for the nutrient breakdown chart."""
        return {
            "fat": self.fat,
            "sugars": self.sugar,
            "protein": self.protein,
            "carbs": self.carbohydrates,
        }


@dataclass(frozen=True)
class GradeResult:
    """Score and grade computed for a nutrient profile."""

    score: float
    grade: Grade
    display_hint: str
    good_aspects: tuple[str, ...]
    concerns: tuple[str, ...]
    levels: dict[str, NutrientLevel]

    @property
    def rounded_score(self) -> int:
        """Score rounded for display."""
        return round(self.score)


def coerce_amount(value: object) -> float:
    """Convert an API nutrient value to float, treating junk as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0
