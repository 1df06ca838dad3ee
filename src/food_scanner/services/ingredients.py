"""Keyword-based ingredient classification.

Every label is lower-cased and matched by substring against two ordered rule
tables. Concerning rules are always tried first and the first matching rule
wins, so an ingredient that mentions both a sweetener and a fibre source is
reported as concerning. Labels that match nothing are neutral.
"""

from collections.abc import Iterable, Mapping, Sequence

from food_scanner.domain.ingredients import (
    ClassificationSummary,
    IngredientEntry,
    IngredientTag,
    KeywordRule,
)

MAX_EXAMPLES_PER_REASON = 3
NEUTRAL_REASON = "No specific concern detected; neutral ingredient."

CONCERNING_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(
        "high fructose",
        "High-fructose sweetener, linked to metabolic issues.",
    ),
    KeywordRule("fructose", "Added simple sugar, raises blood sugar and calories."),
    KeywordRule("glucose", "Added sugar, raises blood sugar quickly."),
    KeywordRule(
        "sugar",
        "Added sugar, increases calorie density and diabetes risk.",
    ),
    KeywordRule("syrup", "Sugar syrup, a concentrated high-calorie sweetener."),
    KeywordRule(
        "sucralose",
        "Artificial sweetener, often avoided as an artificial additive.",
    ),
    KeywordRule(
        "partially hydrogenated",
        "Source of trans fats, harmful for heart health.",
    ),
    KeywordRule(
        "hydrogenated",
        "May contain trans or otherwise unhealthy fats.",
    ),
    KeywordRule(
        "palm oil",
        "High in saturated fat, with environmental concerns.",
    ),
    KeywordRule(
        "trans fat",
        "Trans fats raise bad cholesterol and heart disease risk.",
    ),
    KeywordRule("monosodium", "Contains MSG, some people are sensitive to it."),
    KeywordRule(
        "salt",
        "Sodium source, can raise blood pressure if eaten often.",
    ),
    KeywordRule("sodium", "Sodium source, can raise blood pressure."),
    KeywordRule("preservative", "Contains preservatives, unwanted on a clean label."),
    KeywordRule(
        "colour",
        "Artificial colour, no nutritional benefit and a sensitivity concern.",
    ),
    KeywordRule("artificial flavour", "Artificial flavour, not a natural ingredient."),
    KeywordRule(
        "emulsifier",
        "Processed emulsifier, check the specific additive if sensitive.",
    ),
    KeywordRule("e-", "Additive code (E-number), a processed additive."),
)

BENEFICIAL_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("whole", "Whole ingredient, more fibre and nutrients."),
    KeywordRule("wholegrain", "Whole grain, fibre and slower carbs."),
    KeywordRule("oat", "Oats, a good source of soluble fibre."),
    KeywordRule("millet", "Millet, a nutrient-dense whole grain."),
    KeywordRule("lentil", "Lentil, plant protein and fibre."),
    KeywordRule("pea", "Pea, plant protein and fibre."),
    KeywordRule("almond", "Almond, healthy fats and protein."),
    KeywordRule("walnut", "Walnut, a source of healthy fats."),
    KeywordRule("protein", "Good source of protein."),
    KeywordRule("fiber", "Contains fibre, supports digestion."),
    KeywordRule("chia", "Chia, omega-3 and fibre."),
    KeywordRule("flax", "Flax, fibre and healthy fats."),
)


def split_ingredients_text(text: str | None) -> list[str]:
    """Split a comma-separated ingredients text into trimmed labels."""
    if not text:
        return []
    return [piece.strip() for piece in text.split(",") if piece.strip()]


def ingredient_labels(product: Mapping[str, object]) -> list[str]:
    """Extract ingredient labels from an Open Food Facts product payload."""
    raw = product.get("ingredients")
    if isinstance(raw, list) and raw:
        labels = []
        for item in raw:
            if isinstance(item, Mapping):
                labels.append(str(item.get("text") or item.get("name") or ""))
            else:
                labels.append("")
        return labels
    text = product.get("ingredients_text")
    return split_ingredients_text(text if isinstance(text, str) else None)


def classify_ingredient(
    label: str,
    concerning_rules: Sequence[KeywordRule] = CONCERNING_RULES,
    beneficial_rules: Sequence[KeywordRule] = BENEFICIAL_RULES,
) -> IngredientEntry:
    """Tag a single ingredient label."""
    lowered = label.lower()
    for tag, rules in (
        ("concerning", concerning_rules),
        ("beneficial", beneficial_rules),
    ):
        for rule in rules:
            if rule.keyword in lowered:
                return IngredientEntry(text=label, tag=tag, reason=rule.reason)
    return IngredientEntry(text=label, tag="neutral", reason=NEUTRAL_REASON)


def classify_ingredients(
    ingredients: Sequence[str] | str,
    concerning_rules: Sequence[KeywordRule] = CONCERNING_RULES,
    beneficial_rules: Sequence[KeywordRule] = BENEFICIAL_RULES,
) -> tuple[IngredientEntry, ...]:
    """Tag every ingredient label, preserving input order."""
    labels = (
        split_ingredients_text(ingredients)
        if isinstance(ingredients, str)
        else ingredients
    )
    return tuple(
        classify_ingredient(label, concerning_rules, beneficial_rules)
        for label in labels
    )


def summarize_classification(
    entries: Iterable[IngredientEntry],
) -> ClassificationSummary:
    """Group concerning and beneficial entries by reason."""
    groups: dict[IngredientTag, dict[str, list[str]]] = {
        "concerning": {},
        "beneficial": {},
    }
    for entry in entries:
        if entry.tag == "neutral":
            continue
        examples = groups[entry.tag].setdefault(entry.reason, [])
        if entry.text not in examples and len(examples) < MAX_EXAMPLES_PER_REASON:
            examples.append(entry.text)
    return ClassificationSummary(
        concerning={r: tuple(ex) for r, ex in groups["concerning"].items()},
        beneficial={r: tuple(ex) for r, ex in groups["beneficial"].items()},
    )
