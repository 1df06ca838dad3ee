"""Heuristic nutrient scoring and grading."""

from dataclasses import dataclass

from food_scanner.domain.nutrition import (
    Grade,
    GradeResult,
    NutrientLevel,
    NutrientProfile,
)

MAX_SCORE = 100.0
MIN_SCORE = 0.0


@dataclass(frozen=True)
class ScoreWeights:
    """Per-gram weights applied to the base score of 100."""

    sugar: float
    saturated_fat: float
    salt: float
    fat: float
    protein: float
    fiber: float


CANONICAL_WEIGHTS = ScoreWeights(
    sugar=1.5, saturated_fat=2.0, salt=8.0, fat=0.8, protein=1.5, fiber=1.2
)
LEGACY_WEIGHTS = ScoreWeights(
    sugar=1.2, saturated_fat=2.0, salt=8.0, fat=1.0, protein=2.0, fiber=0.0
)

# Lower bounds are inclusive; anything below the last bound is "E".
GRADE_LADDER: tuple[tuple[float, Grade], ...] = (
    (85.0, "A"),
    (70.0, "B"),
    (55.0, "C"),
    (40.0, "D"),
)
FLOOR_GRADE: Grade = "E"

DISPLAY_HINTS: dict[Grade, str] = {
    "A": "green",
    "B": "lime",
    "C": "yellow",
    "D": "orange",
    "E": "red",
    "F": "dark-red",
}

# nutrient -> (low bound, high bound), per 100 g
TRAFFIC_LIGHTS: dict[str, tuple[float, float]] = {
    "sugar": (5.0, 22.5),
    "fat": (3.0, 17.5),
    "saturated_fat": (1.5, 5.0),
    "salt": (0.3, 1.5),
}

_GOOD_MINIMUMS = (
    ("protein", 8.0, "High in protein, helps muscle repair"),
    ("fiber", 3.0, "Contains dietary fiber, supports digestion"),
)

_LOW_MESSAGES = {
    "sugar": "Low sugar, fine as a daily choice",
    "fat": "Low in fat",
    "saturated_fat": "Low saturated fat, kinder to the heart",
    "salt": "Low salt",
}

_HIGH_MESSAGES = {
    "sugar": "High sugar, may spike blood sugar",
    "fat": "High total fat, energy dense",
    "saturated_fat": "High saturated fat, unhealthy for the heart",
    "salt": "High sodium, may raise blood pressure",
}


def compute_score(
    profile: NutrientProfile, weights: ScoreWeights = CANONICAL_WEIGHTS
) -> float:
    """Return the clamped 0-100 score for a nutrient profile."""
    raw = (
        MAX_SCORE
        - profile.sugar * weights.sugar
        - profile.saturated_fat * weights.saturated_fat
        - profile.salt * weights.salt
        - profile.fat * weights.fat
        + profile.protein * weights.protein
        + profile.fiber * weights.fiber
    )
    return min(MAX_SCORE, max(MIN_SCORE, raw))


def grade_for_score(score: float) -> Grade:
    """Map a score to its letter grade."""
    for lower_bound, grade in GRADE_LADDER:
        if score >= lower_bound:
            return grade
    return FLOOR_GRADE


def nutrient_levels(profile: NutrientProfile) -> dict[str, NutrientLevel]:
    """Classify the traffic-light nutrients as low, moderate or high."""
    levels: dict[str, NutrientLevel] = {}
    for name, (low, high) in TRAFFIC_LIGHTS.items():
        value = getattr(profile, name)
        if value <= low:
            levels[name] = "low"
        elif value <= high:
            levels[name] = "moderate"
        else:
            levels[name] = "high"
    return levels


def describe_nutrients(
    profile: NutrientProfile,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return good-aspect and concern bullets for a profile."""
    good = [
        message
        for name, minimum, message in _GOOD_MINIMUMS
        if getattr(profile, name) >= minimum
    ]
    concerns = []
    for name, level in nutrient_levels(profile).items():
        if level == "low":
            good.append(_LOW_MESSAGES[name])
        elif level == "high":
            concerns.append(_HIGH_MESSAGES[name])
    return tuple(good), tuple(concerns)


def grade_nutrients(
    profile: NutrientProfile, weights: ScoreWeights = CANONICAL_WEIGHTS
) -> GradeResult:
    """Score, grade and describe a nutrient profile."""
    score = compute_score(profile, weights)
    grade = grade_for_score(score)
    good, concerns = describe_nutrients(profile)
    return GradeResult(
        score=score,
        grade=grade,
        display_hint=DISPLAY_HINTS[grade],
        good_aspects=good,
        concerns=concerns,
        levels=nutrient_levels(profile),
    )
