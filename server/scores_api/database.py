"""Shared store and engine services for the API process."""
import logging
from functools import lru_cache

from wellness_engine import GoalLifecycleManager, ScoringService, SQLiteGoalStore

from .config import get_settings

log = logging.getLogger(__name__)


@lru_cache
def get_store() -> SQLiteGoalStore:
    """SQLite store at the configured path, schema created on first use."""
    settings = get_settings()
    store = SQLiteGoalStore(settings.db_path)
    store.initialize()
    log.info(f"[STORE] Using database {settings.db_path}")
    return store


@lru_cache
def get_goal_manager() -> GoalLifecycleManager:
    """
    One manager per process.

    The manager owns the per-record locks that serialize goal completion,
    so every request must share it.
    """
    return GoalLifecycleManager(
        get_store(), history_limit=get_settings().goal_history_limit
    )


def get_scoring_service() -> ScoringService:
    return ScoringService(get_store(), goals=get_goal_manager())
