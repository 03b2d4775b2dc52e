"""
Survey Scoring Service.

Loads a user's survey responses and goal records and produces the score
summary shown on the surveys and goals page.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .aggregator import (
    DEFAULT_CATEGORIES,
    CategoryStats,
    aggregate_category,
    aggregate_overall,
    group_by_category,
    overall_completion,
)
from .classifier import HealthScore, classify
from .goal_manager import GoalLifecycleManager
from .store import GoalStore

logger = logging.getLogger(__name__)


@dataclass
class ScoreSummary:
    """Scores for every category plus the overall score."""

    user_id: str
    overall_score: float
    overall: HealthScore
    completion_percentage: float
    categories: Dict[str, CategoryStats] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "user_id": self.user_id,
            "overall_score": self.overall_score,
            "overall": self.overall.to_dict(),
            "completion_percentage": self.completion_percentage,
            "categories": {name: s.to_dict() for name, s in self.categories.items()},
        }


class ScoringService:
    """Computes category and overall scores from stored data."""

    def __init__(
        self,
        store: GoalStore,
        goals: Optional[GoalLifecycleManager] = None,
        categories: Optional[List[str]] = None,
    ):
        self.store = store
        self.goals = goals or GoalLifecycleManager(store)
        self.categories = list(categories or DEFAULT_CATEGORIES)

    async def category_stats(self, user_id: str, category: str) -> CategoryStats:
        """Statistics for a single category."""
        responses = await self.store.list_responses(user_id, category)
        total_questions = await self.store.count_questions(category)
        completed_goals = await self.goals.completed_goal_count(user_id, category)
        return aggregate_category(
            responses, completed_goals, total_questions, category=category
        )

    async def summarize(self, user_id: str) -> ScoreSummary:
        """
        Build the full score summary for a user.

        Every configured category is included, answered or not, so the
        overall score averages over the whole survey.
        """
        grouped = group_by_category(await self.store.list_responses(user_id))

        stats: Dict[str, CategoryStats] = {}
        for category in self.categories:
            total_questions = await self.store.count_questions(category)
            completed_goals = await self.goals.completed_goal_count(user_id, category)
            stats[category] = aggregate_category(
                grouped.get(category, []),
                completed_goals,
                total_questions,
                category=category,
            )

        overall_score = aggregate_overall({name: s.raw_score for name, s in stats.items()})
        summary = ScoreSummary(
            user_id=user_id,
            overall_score=overall_score,
            overall=classify(overall_score),
            completion_percentage=overall_completion(stats.values()),
            categories=stats,
        )

        logger.info(
            f"[SCORES] {user_id}: overall {overall_score:.2f} ({summary.overall.label.value}), "
            f"{summary.completion_percentage:.0f}% answered"
        )
        return summary
