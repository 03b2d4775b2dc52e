"""
Wellness Scoring Engine.

Scores the multi-category wellness survey and tracks completion of the
improvement goals generated for each category.
"""

from .classifier import HealthLabel, HealthScore, classify, format_score
from .aggregator import (
    DEFAULT_CATEGORIES,
    CategoryStats,
    SurveyResponse,
    aggregate_category,
    aggregate_overall,
    completion_percentage,
)
from .goal_codec import Goal, decode_goal, decode_goals, encode_goal, encode_goals
from .goal_manager import (
    CompletionStatus,
    GoalCompletionResult,
    GoalLifecycleManager,
    GoalProgress,
    GoalState,
    calculate_progress,
)
from .store import (
    GoalRecord,
    GoalStore,
    RecordConflictError,
    RecordNotFoundError,
    SQLiteGoalStore,
    StoreError,
)
from .scoring import ScoreSummary, ScoringService

__all__ = [
    "HealthLabel",
    "HealthScore",
    "classify",
    "format_score",
    "DEFAULT_CATEGORIES",
    "CategoryStats",
    "SurveyResponse",
    "aggregate_category",
    "aggregate_overall",
    "completion_percentage",
    "Goal",
    "decode_goal",
    "decode_goals",
    "encode_goal",
    "encode_goals",
    "CompletionStatus",
    "GoalCompletionResult",
    "GoalLifecycleManager",
    "GoalProgress",
    "GoalState",
    "calculate_progress",
    "GoalRecord",
    "GoalStore",
    "RecordConflictError",
    "RecordNotFoundError",
    "SQLiteGoalStore",
    "StoreError",
    "ScoreSummary",
    "ScoringService",
]
