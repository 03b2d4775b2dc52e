"""Pydantic models for score and goal API responses."""
from .scores import HealthScoreModel, CategoryStatsModel, ScoreSummaryModel
from .goals import GoalModel, GoalProgressModel, GoalRecordModel, GoalCompletionModel

__all__ = [
    "HealthScoreModel",
    "CategoryStatsModel",
    "ScoreSummaryModel",
    "GoalModel",
    "GoalProgressModel",
    "GoalRecordModel",
    "GoalCompletionModel",
]
