"""
Score Aggregation Module.

Combines raw survey answers into a per-category score (with a bonus for
completed goals) and averages category scores into one overall score.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional

from .classifier import HealthScore, MAX_SCORE, classify

logger = logging.getLogger(__name__)

GOAL_BONUS = 0.15  # points per completed goal

DEFAULT_CATEGORIES = [
    "Toxins",
    "Sugar",
    "Alkalinity",
    "Food Combining",
    "Timing",
    "Pre_probiotics",
    "Macros",
    "Gut_BrainHealth",
]


@dataclass(frozen=True)
class SurveyResponse:
    """One answered survey question."""

    question_id: str
    category: str
    points: float  # 0-8
    answered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class CategoryStats:
    """Derived statistics for one survey category."""

    total: int
    answered_count: int
    raw_score: float
    health_score: HealthScore
    points_total: float = 0.0
    completion_percentage: float = 0.0
    category: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category,
            "total": self.total,
            "answered_count": self.answered_count,
            "raw_score": self.raw_score,
            "points_total": self.points_total,
            "completion_percentage": self.completion_percentage,
            "health_score": self.health_score.to_dict(),
        }


def completion_percentage(answered_count: int, total_questions: int) -> float:
    """Share of questions answered, 0 when the category has no questions."""
    if total_questions <= 0:
        return 0.0
    return answered_count / total_questions * 100


def category_score(
    responses: Iterable[SurveyResponse],
    completed_goal_count: int,
    max_score: float = MAX_SCORE,
) -> float:
    """
    Calculate the score for a single category.

    The average of the survey points plus GOAL_BONUS per completed goal,
    capped at max_score.

    Args:
        responses: Answered questions in the category
        completed_goal_count: Number of completed goals in the category
        max_score: Score ceiling

    Returns:
        Raw score on the 0-8 scale
    """
    points = [r.points or 0 for r in responses]
    base_score = sum(points) / len(points) if points else 0.0
    goals_bonus = max(completed_goal_count, 0) * GOAL_BONUS
    return min(max_score, base_score + goals_bonus)


def aggregate_category(
    responses: List[SurveyResponse],
    completed_goal_count: int,
    total_questions: int,
    max_score: float = MAX_SCORE,
    category: Optional[str] = None,
) -> CategoryStats:
    """
    Build the statistics for one category.

    Args:
        responses: Answered questions in the category
        completed_goal_count: Number of completed goals in the category
        total_questions: Number of questions the category has
        max_score: Score ceiling
        category: Category name, carried through for display

    Returns:
        CategoryStats with the raw score and its classification
    """
    responses = list(responses)
    raw_score = category_score(responses, completed_goal_count, max_score)
    answered_count = len(responses)

    stats = CategoryStats(
        total=total_questions,
        answered_count=answered_count,
        raw_score=raw_score,
        health_score=classify(raw_score),
        points_total=sum(r.points or 0 for r in responses),
        completion_percentage=completion_percentage(answered_count, total_questions),
        category=category,
    )

    logger.debug(
        f"[SCORES] {category or 'category'}: {answered_count}/{total_questions} answered, "
        f"{completed_goal_count} goals done -> {raw_score:.2f} ({stats.health_score.label.value})"
    )
    return stats


def aggregate_overall(category_scores: Mapping[str, float]) -> float:
    """
    Average all category scores, rounded to two decimals.

    Returns 0 for an empty mapping.
    """
    scores = list(category_scores.values())
    if not scores:
        return 0.0

    mean = sum(scores) / len(scores)
    return float(Decimal(repr(mean)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def overall_health_score(category_scores: Mapping[str, float]) -> HealthScore:
    """Classify the overall score across categories."""
    return classify(aggregate_overall(category_scores))


def overall_completion(stats: Iterable[CategoryStats]) -> float:
    """Completion percentage across all categories together."""
    answered = 0
    total = 0
    for s in stats:
        answered += s.answered_count
        total += s.total
    return completion_percentage(answered, total)


def group_by_category(responses: Iterable[SurveyResponse]) -> Dict[str, List[SurveyResponse]]:
    """Bucket responses by their category."""
    grouped: Dict[str, List[SurveyResponse]] = {}
    for response in responses:
        grouped.setdefault(response.category, []).append(response)
    return grouped
