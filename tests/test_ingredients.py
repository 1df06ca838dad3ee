"""Tests for ingredient classification."""

from food_scanner.domain.ingredients import IngredientEntry, KeywordRule
from food_scanner.services.ingredients import (
    NEUTRAL_REASON,
    classify_ingredient,
    classify_ingredients,
    ingredient_labels,
    split_ingredients_text,
    summarize_classification,
)


def test_chocolate_bar_ingredients() -> None:
    entries = classify_ingredients(["Sugar", "Wheat Flour", "Cocoa Butter", "Salt"])

    assert [entry.tag for entry in entries] == [
        "concerning",
        "neutral",
        "neutral",
        "concerning",
    ]
    assert "added sugar" in entries[0].reason.lower()
    assert "sodium" in entries[3].reason.lower()
    assert entries[1].reason == NEUTRAL_REASON


def test_concerning_rules_win_over_beneficial_rules() -> None:
    entry = classify_ingredient("Sugar-coated fiber flakes")

    assert entry.tag == "concerning"
    assert "sugar" in entry.reason.lower()


def test_first_matching_rule_wins() -> None:
    entry = classify_ingredient("High Fructose Corn Syrup")

    assert entry.reason.startswith("High-fructose sweetener")


def test_beneficial_ingredients() -> None:
    entries = classify_ingredients(["Rolled Oats", "Red Lentils", "Chia Seeds"])

    assert all(entry.tag == "beneficial" for entry in entries)
    assert entries[1].reason == "Lentil, plant protein and fibre."


def test_custom_rule_tables() -> None:
    rules = (KeywordRule("cocoa", "Cocoa product."),)

    entry = classify_ingredient("Cocoa Butter", concerning_rules=rules)

    assert entry == IngredientEntry("Cocoa Butter", "concerning", "Cocoa product.")


def test_comma_separated_text_is_split_and_trimmed() -> None:
    assert split_ingredients_text(" Sugar,  Milk ,, Salt ") == ["Sugar", "Milk", "Salt"]
    assert split_ingredients_text(None) == []

    entries = classify_ingredients("Sugar, Milk")

    assert [entry.text for entry in entries] == ["Sugar", "Milk"]


def test_labels_prefer_the_structured_ingredient_list() -> None:
    product = {
        "ingredients": [{"text": "Oat Flakes"}, {"name": "Salt"}, {"percent": 2}],
        "ingredients_text": "ignored",
    }

    assert ingredient_labels(product) == ["Oat Flakes", "Salt", ""]
    assert ingredient_labels({"ingredients": [], "ingredients_text": "A, B"}) == [
        "A",
        "B",
    ]


def test_classification_is_deterministic() -> None:
    labels = ["Glucose Syrup", "Whole Wheat", "Water", "Emulsifier (E-471)"]

    assert classify_ingredients(labels) == classify_ingredients(labels)


def test_summary_groups_by_reason_with_three_distinct_examples() -> None:
    entries = classify_ingredients(
        ["Sugar", "Cane Sugar", "Sugar", "Brown Sugar", "Icing Sugar", "Oats", "Water"]
    )

    summary = summarize_classification(entries)

    assert list(summary.concerning.values()) == [("Sugar", "Cane Sugar", "Brown Sugar")]
    assert list(summary.beneficial.values()) == [("Oats",)]


def test_summary_keeps_first_seen_reason_order() -> None:
    entries = classify_ingredients(["Salt", "Palm Oil", "Sea Salt"])

    summary = summarize_classification(entries)

    reasons = list(summary.concerning)
    assert reasons[0].startswith("Sodium source")
    assert reasons[1].startswith("High in saturated fat")
    assert summary.concerning[reasons[0]] == ("Salt", "Sea Salt")
