"""Tests for nutrient grading."""

import pytest

from food_scanner.domain.nutrition import NutrientProfile
from food_scanner.services.grading import (
    CANONICAL_WEIGHTS,
    LEGACY_WEIGHTS,
    compute_score,
    grade_for_score,
    grade_nutrients,
    nutrient_levels,
)

CHOCOLATE_BAR = NutrientProfile(
    sugar=51, fat=26, saturated_fat=14, salt=0.2, protein=7, fiber=1
)


def test_all_zero_profile_scores_full_marks() -> None:
    result = grade_nutrients(NutrientProfile())

    assert result.score == 100
    assert result.grade == "A"
    assert result.display_hint == "green"


def test_chocolate_bar_is_clamped_to_zero() -> None:
    result = grade_nutrients(CHOCOLATE_BAR)

    assert result.score == 0
    assert result.rounded_score == 0
    assert result.grade == "E"
    assert "High sugar, may spike blood sugar" in result.concerns
    assert "High saturated fat, unhealthy for the heart" in result.concerns


def test_score_is_clamped_to_one_hundred() -> None:
    result = grade_nutrients(NutrientProfile(protein=80, fiber=30))

    assert result.score == 100


def test_canonical_formula() -> None:
    profile = NutrientProfile(
        sugar=10, fat=5, saturated_fat=2, salt=1, protein=4, fiber=2
    )

    expected = 100 - 15 - 4 - 8 - 4 + 6 + 2.4
    assert compute_score(profile) == pytest.approx(expected)


def test_legacy_weights_ignore_fiber() -> None:
    with_fiber = NutrientProfile(sugar=10, fiber=10)
    without_fiber = NutrientProfile(sugar=10)

    assert compute_score(with_fiber, LEGACY_WEIGHTS) == compute_score(
        without_fiber, LEGACY_WEIGHTS
    )


@pytest.mark.parametrize(
    ("score", "grade"),
    [
        (100.0, "A"),
        (85.0, "A"),
        (84.99, "B"),
        (70.0, "B"),
        (69.99, "C"),
        (55.0, "C"),
        (54.99, "D"),
        (40.0, "D"),
        (39.99, "E"),
        (0.0, "E"),
    ],
)
def test_grade_boundaries_are_closed_below(score: float, grade: str) -> None:
    assert grade_for_score(score) == grade


@pytest.mark.parametrize("field", ["sugar", "saturated_fat", "salt", "fat"])
def test_score_never_increases_with_penalized_nutrients(field: str) -> None:
    base = {"sugar": 4.0, "fat": 3.0, "saturated_fat": 1.0, "salt": 0.5, "protein": 6.0}
    scores = []
    for amount in (0, 1, 5, 20, 80):
        values = dict(base, **{field: amount})
        scores.append(compute_score(NutrientProfile(**values), CANONICAL_WEIGHTS))

    assert scores == sorted(scores, reverse=True)


@pytest.mark.parametrize("field", ["protein", "fiber"])
def test_score_never_decreases_with_rewarded_nutrients(field: str) -> None:
    base = {"sugar": 30.0, "fat": 20.0, "saturated_fat": 8.0, "salt": 1.0}
    scores = []
    for amount in (0, 2, 10, 40, 90):
        values = dict(base, **{field: amount})
        scores.append(compute_score(NutrientProfile(**values)))

    assert scores == sorted(scores)


def test_good_aspects_for_a_lean_high_protein_product() -> None:
    result = grade_nutrients(NutrientProfile(protein=20, fiber=4, sugar=2))

    assert result.good_aspects[:3] == (
        "High in protein, helps muscle repair",
        "Contains dietary fiber, supports digestion",
        "Low sugar, fine as a daily choice",
    )
    assert result.concerns == ()


def test_nutrient_levels_use_traffic_light_thresholds() -> None:
    levels = nutrient_levels(
        NutrientProfile(sugar=5, fat=17.5, saturated_fat=5.01, salt=1.6)
    )

    assert levels == {
        "sugar": "low",
        "fat": "moderate",
        "saturated_fat": "high",
        "salt": "high",
    }


def test_profile_coerces_missing_and_junk_values() -> None:
    profile = NutrientProfile.from_nutriments(
        {
            "sugars_100g": "12.5",
            "fat_100g": None,
            "saturated-fat_100g": "n/a",
            "salt_100g": True,
            "proteins_100g": 3,
            "energy-kcal_100g": float("nan"),
        }
    )

    assert profile == NutrientProfile(sugar=12.5, protein=3)
    assert NutrientProfile.from_nutriments(None) == NutrientProfile()


@pytest.mark.parametrize(
    ("field", "high_bound", "concern"),
    [
        ("sugar", 22.5, "High sugar, may spike blood sugar"),
        ("fat", 17.5, "High total fat, energy dense"),
        ("saturated_fat", 5.0, "High saturated fat, unhealthy for the heart"),
        ("salt", 1.5, "High sodium, may raise blood pressure"),
    ],
)
def test_concern_starts_just_above_high_bound(
    field: str, high_bound: float, concern: str
) -> None:
    at_bound = grade_nutrients(NutrientProfile(**{field: high_bound}))
    above = grade_nutrients(NutrientProfile(**{field: high_bound + 0.01}))

    assert concern not in at_bound.concerns
    assert nutrient_levels(NutrientProfile(**{field: high_bound}))[field] == "moderate"
    assert concern in above.concerns


@pytest.mark.parametrize(
    ("field", "low_bound", "bullet"),
    [
        ("sugar", 5.0, "Low sugar, fine as a daily choice"),
        ("fat", 3.0, "Low in fat"),
        ("saturated_fat", 1.5, "Low saturated fat, kinder to the heart"),
        ("salt", 0.3, "Low salt"),
    ],
)
def test_low_bullet_includes_low_bound(field: str, low_bound: float, bullet: str) -> None:
    at_bound = grade_nutrients(NutrientProfile(**{field: low_bound}))
    above = grade_nutrients(NutrientProfile(**{field: low_bound + 0.01}))

    assert bullet in at_bound.good_aspects
    assert bullet not in above.good_aspects
