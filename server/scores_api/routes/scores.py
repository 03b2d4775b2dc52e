"""Survey score API routes."""
from fastapi import APIRouter, Depends, HTTPException

from wellness_engine import CategoryStats, HealthScore, ScoringService

from ..models.scores import CategoryStatsModel, HealthScoreModel, ScoreSummaryModel
from ..database import get_scoring_service

router = APIRouter(prefix="/api/scores", tags=["Survey Scores"])


def _to_health_score(health_score: HealthScore) -> HealthScoreModel:
    """Convert engine HealthScore to API model."""
    return HealthScoreModel(**health_score.to_dict())


def _to_category_stats(stats: CategoryStats) -> CategoryStatsModel:
    """Convert engine CategoryStats to API model."""
    return CategoryStatsModel(
        category=stats.category,
        total=stats.total,
        answered_count=stats.answered_count,
        raw_score=stats.raw_score,
        points_total=stats.points_total,
        completion_percentage=stats.completion_percentage,
        health_score=_to_health_score(stats.health_score),
    )


@router.get("/{user_id}", response_model=ScoreSummaryModel, response_model_by_alias=True)
async def get_score_summary(
    user_id: str,
    service: ScoringService = Depends(get_scoring_service),
):
    """
    Get the overall health score and every category's statistics.

    Unanswered categories are included with a Not Started score.
    """
    summary = await service.summarize(user_id)
    return ScoreSummaryModel(
        user_id=summary.user_id,
        overall_score=summary.overall_score,
        overall=_to_health_score(summary.overall),
        completion_percentage=summary.completion_percentage,
        categories={
            name: _to_category_stats(stats) for name, stats in summary.categories.items()
        },
    )


@router.get(
    "/{user_id}/categories/{category}",
    response_model=CategoryStatsModel,
    response_model_by_alias=True,
)
async def get_category_stats(
    user_id: str,
    category: str,
    service: ScoringService = Depends(get_scoring_service),
):
    """Get score statistics for a single category."""
    if category not in service.categories:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown category '{category}'. Must be one of: {service.categories}",
        )
    stats = await service.category_stats(user_id, category)
    return _to_category_stats(stats)
