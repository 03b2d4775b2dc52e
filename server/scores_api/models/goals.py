"""Goal record models."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class GoalModel(BaseModel):
    """A decoded goal."""

    model_config = ConfigDict(populate_by_name=True)

    index: int
    text: str
    is_completed: bool = Field(serialization_alias="isCompleted")
    date_completed: Optional[str] = Field(default=None, serialization_alias="dateCompleted")


class GoalProgressModel(BaseModel):
    """Completion progress of a goal set."""

    completed: int
    total: int
    percentage: float


class GoalRecordModel(BaseModel):
    """A goal generation run with its decoded goals."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    category: str
    date_generated: str = Field(serialization_alias="dateGenerated")
    is_completed: bool = Field(serialization_alias="isCompleted")
    state: str
    goals: list[GoalModel]
    progress: GoalProgressModel


class GoalCompletionModel(BaseModel):
    """Result of completing a goal."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    written: bool
    record: GoalRecordModel
