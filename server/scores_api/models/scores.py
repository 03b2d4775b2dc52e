"""Survey score models."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Literal, Optional

HealthLabelName = Literal[
    "Not Started", "Poor", "Needs Work", "Fair", "Good", "Very Good", "Excellent"
]


class HealthScoreModel(BaseModel):
    """Classified score with display metadata."""

    model_config = ConfigDict(populate_by_name=True)

    score: float = Field(ge=0, le=8)
    display_score: float = Field(ge=0, le=10, serialization_alias="displayScore")
    label: HealthLabelName
    color: str
    emoji: str


class CategoryStatsModel(BaseModel):
    """Score statistics for one survey category."""

    model_config = ConfigDict(populate_by_name=True)

    category: Optional[str] = None
    total: int = Field(ge=0)
    answered_count: int = Field(ge=0, serialization_alias="answeredCount")
    raw_score: float = Field(ge=0, le=8, serialization_alias="rawScore")
    points_total: float = Field(serialization_alias="pointsTotal")
    completion_percentage: float = Field(serialization_alias="completionPercentage")
    health_score: HealthScoreModel = Field(serialization_alias="healthScore")


class ScoreSummaryModel(BaseModel):
    """Overall score plus every category's statistics."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(serialization_alias="userId")
    overall_score: float = Field(serialization_alias="overallScore")
    overall: HealthScoreModel
    completion_percentage: float = Field(serialization_alias="completionPercentage")
    categories: dict[str, CategoryStatsModel]
