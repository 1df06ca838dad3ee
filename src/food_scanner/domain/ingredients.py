"""Ingredient classification models."""

from dataclasses import dataclass, field
from typing import Literal

IngredientTag = Literal["beneficial", "concerning", "neutral"]


@dataclass(frozen=True)
class KeywordRule:
    """Substring keyword mapped to a human-readable reason."""

    keyword: str
    reason: str


@dataclass(frozen=True)
class IngredientEntry:
    """A single ingredient label with its tag and reason."""

    text: str
    tag: IngredientTag
    reason: str


@dataclass(frozen=True)
class ClassificationSummary:
    """Concerning and beneficial entries grouped by reason."""

    concerning: dict[str, tuple[str, ...]] = field(default_factory=dict)
    beneficial: dict[str, tuple[str, ...]] = field(default_factory=dict)
