"""Goal tracking API routes."""
from fastapi import APIRouter, Depends, HTTPException, Query

from wellness_engine import (
    CompletionStatus,
    GoalLifecycleManager,
    GoalRecord,
    calculate_progress,
)

from ..models.goals import GoalCompletionModel, GoalModel, GoalProgressModel, GoalRecordModel
from ..database import get_goal_manager

router = APIRouter(tags=["Goals"])

# Completion failures and the HTTP status they map to
FAILURE_STATUS_CODES = {
    CompletionStatus.NOT_FOUND: 404,
    CompletionStatus.OUT_OF_RANGE: 400,
    CompletionStatus.CONFLICT: 409,
    CompletionStatus.PERSISTENCE_FAILED: 503,
}


def _to_goal_record(record: GoalRecord) -> GoalRecordModel:
    """Convert a stored goal record to API model with decoded goals."""
    goals = record.decoded_goals()
    progress = calculate_progress(goals)
    return GoalRecordModel(
        id=record.id,
        category=record.category,
        date_generated=record.date_generated,
        is_completed=record.is_completed,
        state=GoalLifecycleManager.state(record).value,
        goals=[
            GoalModel(
                index=i,
                text=goal.text,
                is_completed=goal.is_completed,
                date_completed=goal.date_completed,
            )
            for i, goal in enumerate(goals)
        ],
        progress=GoalProgressModel(**progress.to_dict()),
    )


@router.get(
    "/api/goals/{user_id}",
    response_model=dict[str, GoalRecordModel],
    response_model_by_alias=True,
)
async def get_all_latest_goals(
    user_id: str,
    manager: GoalLifecycleManager = Depends(get_goal_manager),
):
    """Get the current goal set of every category the user has goals for."""
    latest = await manager.fetch_all_latest(user_id)
    return {category: _to_goal_record(record) for category, record in latest.items()}


@router.get(
    "/api/goals/{user_id}/{category}",
    response_model=GoalRecordModel,
    response_model_by_alias=True,
)
async def get_latest_goals(
    user_id: str,
    category: str,
    manager: GoalLifecycleManager = Depends(get_goal_manager),
):
    """Get the most recently generated goal set for a category."""
    record = await manager.fetch_latest(user_id, category)
    if record is None:
        raise HTTPException(
            status_code=404,
            detail=f"No goals found for category '{category}'",
        )
    return _to_goal_record(record)


@router.get(
    "/api/goals/{user_id}/{category}/history",
    response_model=list[GoalRecordModel],
    response_model_by_alias=True,
)
async def get_goal_history(
    user_id: str,
    category: str,
    limit: int = Query(default=10, ge=1, le=100, description="Number of goal sets"),
    manager: GoalLifecycleManager = Depends(get_goal_manager),
):
    """Get past goal sets for a category, most recent first."""
    records = await manager.fetch_history(user_id, category, limit=limit)
    return [_to_goal_record(record) for record in records]


@router.post(
    "/api/goal-records/{record_id}/goals/{index}/complete",
    response_model=GoalCompletionModel,
    response_model_by_alias=True,
)
async def complete_goal(
    record_id: str,
    index: int,
    manager: GoalLifecycleManager = Depends(get_goal_manager),
):
    """
    Mark one goal of a goal set as completed.

    Completing a goal that is already done succeeds without changing
    its completion date. On 409 or 503 nothing was saved; re-fetch the
    goal set before retrying.
    """
    result = await manager.complete_goal(record_id, index)
    if result.status == CompletionStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail=f"Goal record '{record_id}' not found")
    if not result.success:
        raise HTTPException(
            status_code=FAILURE_STATUS_CODES.get(result.status, 500),
            detail=result.error or f"Could not complete goal {index}: {result.status.value}",
        )

    return GoalCompletionModel(
        status=result.status.value,
        written=result.written,
        record=_to_goal_record(result.record),
    )
