"""
Goal Lifecycle Module.

Reads a user's goal records for a category, computes completion progress
and marks individual goals as completed.

Completing a goal rewrites the record's whole goals array, so completions
on the same record are serialized with a per-record lock and the write
carries the version that was read. A concurrent writer elsewhere makes
the write fail with CONFLICT instead of silently overwriting.
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from .goal_codec import Goal, decode_goals, encode_goals
from .store import (
    GoalRecord,
    GoalStore,
    RecordConflictError,
    RecordNotFoundError,
    StoreError,
)

logger = logging.getLogger(__name__)


class GoalState(str, Enum):
    """Lifecycle state of a (user, category) goal set."""

    NO_RECORD = "no_record"
    GENERATED = "generated"
    ALL_COMPLETED = "all_completed"


class CompletionStatus(str, Enum):
    """Outcome of a complete_goal call."""

    COMPLETED = "completed"
    ALREADY_COMPLETED = "already_completed"
    OUT_OF_RANGE = "out_of_range"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass
class GoalProgress:
    """Completion progress of a goal set."""

    completed: int
    total: int
    percentage: float

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass
class GoalCompletionResult:
    """Result of marking a goal completed."""

    status: CompletionStatus
    record: Optional[GoalRecord] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """True when the goal is completed afterwards."""
        return self.status in (CompletionStatus.COMPLETED, CompletionStatus.ALREADY_COMPLETED)

    @property
    def written(self) -> bool:
        """True when this call persisted a change."""
        return self.status == CompletionStatus.COMPLETED

    def __bool__(self) -> bool:
        return self.success


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def calculate_progress(goals: Union[GoalRecord, Sequence[Goal]]) -> GoalProgress:
    """
    Calculate completion progress.

    Args:
        goals: A goal record (decoded on the fly) or decoded goals

    Returns:
        GoalProgress, with percentage 0 for an empty set
    """
    if isinstance(goals, GoalRecord):
        goals = goals.decoded_goals()

    completed = sum(1 for g in goals if g.is_completed)
    total = len(goals)
    percentage = completed / total * 100 if total else 0.0
    return GoalProgress(completed=completed, total=total, percentage=percentage)


class GoalLifecycleManager:
    """
    Manages goal records for users and categories.

    Generation runs are append-only, so the current goal set of a category
    is always its most recent record by date_generated.
    """

    def __init__(
        self,
        store: GoalStore,
        clock: Optional[Callable[[], str]] = None,
        history_limit: int = 10,
    ):
        """
        Initialize the manager.

        Args:
            store: Persistence collaborator
            clock: Returns the completion timestamp string (defaults to UTC now)
            history_limit: Records fetched per category for history views
        """
        self.store = store
        self.clock = clock or utc_timestamp
        self.history_limit = history_limit
        # Entries disappear once no completion holds or awaits the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, record_id: str) -> asyncio.Lock:
        lock = self._locks.get(record_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[record_id] = lock
        return lock

    async def fetch_latest(self, user_id: str, category: str) -> Optional[GoalRecord]:
        """Most recent goal record for the category, or None."""
        records = await self.store.list_records(user_id, category, limit=1)
        if not records:
            logger.debug(f"[GOALS] No goals for {user_id}/{category}")
            return None
        return records[0]

    async def fetch_history(
        self, user_id: str, category: str, limit: Optional[int] = None
    ) -> List[GoalRecord]:
        """Recent goal records for the category, most recent first."""
        return await self.store.list_records(
            user_id, category, limit=self.history_limit if limit is None else limit
        )

    async def fetch_all_latest(self, user_id: str, limit: int = 100) -> Dict[str, GoalRecord]:
        """Most recent goal record of every category the user has goals for."""
        records = await self.store.list_records(user_id, None, limit=limit)
        latest: Dict[str, GoalRecord] = {}
        for record in records:
            if record.category not in latest:
                latest[record.category] = record
        return latest

    async def completed_goal_count(self, user_id: str, category: str) -> int:
        """Completed goals across the category's recent records."""
        records = await self.fetch_history(user_id, category)
        return sum(calculate_progress(r).completed for r in records)

    @staticmethod
    def progress(record: Union[GoalRecord, Sequence[Goal]]) -> GoalProgress:
        """Completion progress of a record."""
        return calculate_progress(record)

    @staticmethod
    def state(record: Optional[GoalRecord]) -> GoalState:
        """Lifecycle state derived from the goals themselves, not the cached flag."""
        if record is None:
            return GoalState.NO_RECORD
        goals = record.decoded_goals()
        if goals and all(g.is_completed for g in goals):
            return GoalState.ALL_COMPLETED
        return GoalState.GENERATED

    async def complete_goal(
        self, record: Union[GoalRecord, str], index: int
    ) -> GoalCompletionResult:
        """
        Mark the goal at `index` of a record as completed.

        The record is re-read under the per-record lock, so the caller's
        copy may be stale. Completing an already completed goal succeeds
        without writing and keeps the original completion date.

        Args:
            record: Record containing the goal, or its id
            index: Position of the goal in the record

        Returns:
            GoalCompletionResult; on COMPLETED, `record` is the persisted state
        """
        record_id = record if isinstance(record, str) else record.id
        known = None if isinstance(record, str) else record

        async with self._lock_for(record_id):
            try:
                current = await self.store.get_record(record_id)
            except StoreError as e:
                logger.error(f"[GOALS] Could not read goal record {record_id}: {e}")
                return GoalCompletionResult(CompletionStatus.PERSISTENCE_FAILED, known, str(e))

            if current is None:
                logger.warning(f"[GOALS] Goal record {record_id} not found")
                return GoalCompletionResult(CompletionStatus.NOT_FOUND, known)

            goals = decode_goals(current.goals)
            if index < 0 or index >= len(goals):
                logger.warning(
                    f"[GOALS] Goal index {index} out of range for record {current.id} "
                    f"({len(goals)} goals)"
                )
                return GoalCompletionResult(CompletionStatus.OUT_OF_RANGE, current)

            if goals[index].is_completed:
                logger.debug(f"[GOALS] Goal {index} of {current.id} already completed")
                return GoalCompletionResult(CompletionStatus.ALREADY_COMPLETED, current)

            goals[index] = goals[index].complete(self.clock())
            all_completed = all(g.is_completed for g in goals)

            try:
                updated = await self.store.update_record(
                    current.id,
                    encode_goals(goals),
                    all_completed,
                    expected_version=current.version,
                )
            except RecordConflictError as e:
                logger.warning(f"[GOALS] Conflict completing goal {index} of {current.id}: {e}")
                return GoalCompletionResult(CompletionStatus.CONFLICT, current, str(e))
            except RecordNotFoundError as e:
                logger.warning(f"[GOALS] Goal record {current.id} disappeared before save: {e}")
                return GoalCompletionResult(CompletionStatus.NOT_FOUND, current, str(e))
            except StoreError as e:
                logger.error(f"[GOALS] Failed to save goal record {current.id}: {e}")
                return GoalCompletionResult(CompletionStatus.PERSISTENCE_FAILED, current, str(e))

        logger.info(
            f"[GOALS] Completed goal {index} of {updated.category} for {updated.user_id}"
            + (" - all goals done!" if all_completed else "")
        )
        return GoalCompletionResult(CompletionStatus.COMPLETED, updated)
