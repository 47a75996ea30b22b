"""Accountability assessment scoring.

Turns the nine answer fields ``q1``..``q9`` into category scores, a total,
a percentage, the priority (lowest) category and a qualitative band.

No range checks are applied: negative or out-of-range answers pass through
and land in the extreme bands.
"""

from dataclasses import dataclass
from typing import Any, Mapping

# Canonical category order; ties on the minimum resolve to the earliest entry
CATEGORY_NAMES = [
    "Right Person, Right Role",
    "Expectations Are Clear & Confirmed",
    "Agreed Consequences for Missed Expectations",
    "Follow-Up Plan Locked In",
    "Course-Correct Quickly",
    "Show Up Consistently",
    "Clarify Before You Assume",
    "Celebrate What's Working",
    "Missed the Mark? Restart at Step 1",
]

ANSWER_KEYS = [f"q{i}" for i in range(1, len(CATEGORY_NAMES) + 1)]

MAX_CATEGORY_SCORE = 10

# (inclusive lower bound, description), evaluated high to low
BAND_THRESHOLDS = [
    (85, "Exceptional Leadership - You demonstrate mastery across the accountability framework"),
    (70, "Strong Leadership - Good foundation with opportunities for targeted improvement"),
    (55, "Developing Leadership - Several areas need attention to increase effectiveness"),
]
BAND_FLOOR = (
    "Emerging Leadership - Significant development opportunities across the framework"
)


@dataclass(frozen=True)
class CategoryScore:
    """One named category and its score."""

    name: str
    value: float


@dataclass(frozen=True)
class ScoreResult:
    """Derived view of one answer set."""

    category_scores: list[CategoryScore]
    total: float
    percentage: float
    priority: CategoryScore
    band: str

    def step_scores(self) -> dict[str, float]:
        """Category values keyed ``step1``..``step9``."""
        return {f"step{i}": c.value for i, c in enumerate(self.category_scores, start=1)}


def extract_category_scores(answers: Mapping[str, Any]) -> list[CategoryScore]:
    """Read q1..q9 in canonical order; missing or empty answers count as 0."""
    return [
        CategoryScore(name=name, value=answers.get(key) or 0)
        for name, key in zip(CATEGORY_NAMES, ANSWER_KEYS)
    ]


def find_priority_category(category_scores: list[CategoryScore]) -> CategoryScore:
    """Return the first category holding the minimum score."""
    lowest = category_scores[0]
    for current in category_scores[1:]:
        if current.value < lowest.value:
            lowest = current
    return lowest


def classify_band(percentage: float) -> str:
    """Map a percentage (any real number) onto one of the four bands."""
    for lower_bound, description in BAND_THRESHOLDS:
        if percentage >= lower_bound:
            return description
    return BAND_FLOOR


def score(answers: Mapping[str, Any]) -> ScoreResult:
    """
    Score an assessment answer set.

    Args:
        answers: Mapping with numeric (or missing) q1..q9 values

    Returns:
        ScoreResult with category scores, total, percentage, priority and band
    """
    category_scores = extract_category_scores(answers)
    total = sum(c.value for c in category_scores)
    percentage = round(total / (len(category_scores) * MAX_CATEGORY_SCORE) * 100, 1)

    return ScoreResult(
        category_scores=category_scores,
        total=total,
        percentage=percentage,
        priority=find_priority_category(category_scores),
        band=classify_band(percentage),
    )
