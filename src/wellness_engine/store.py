"""
Persistence collaborator for survey responses and goal records.

GoalStore is the contract the engine consumes. SQLiteGoalStore implements
it on a local SQLite file, with a per-record version column used for
compare-and-swap updates.
"""

import json
import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generator, List, Optional

from .aggregator import SurveyResponse
from .goal_codec import Goal, decode_goals

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A read or write against the store failed."""


class RecordNotFoundError(StoreError):
    """The addressed goal record does not exist."""


class RecordConflictError(StoreError):
    """The record changed since it was read (version mismatch)."""


@dataclass
class GoalRecord:
    """One goal generation run for a (user, category) pair."""

    id: str
    user_id: str
    category: str
    goals: List[str] = field(default_factory=list)
    date_generated: str = ""
    is_completed: bool = False
    version: int = 0

    def decoded_goals(self) -> List[Goal]:
        """Goals parsed from their stored strings."""
        return decode_goals(self.goals)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category": self.category,
            "goals": list(self.goals),
            "date_generated": self.date_generated,
            "is_completed": self.is_completed,
            "version": self.version,
        }


class GoalStore(ABC):
    """Persistence contract for the scoring and goal engine."""

    @abstractmethod
    async def list_records(
        self,
        user_id: str,
        category: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[GoalRecord]:
        """Goal records for a user, most recent date_generated first."""

    @abstractmethod
    async def get_record(self, record_id: str) -> Optional[GoalRecord]:
        """A single goal record, or None."""

    @abstractmethod
    async def update_record(
        self,
        record_id: str,
        goals: List[str],
        is_completed: bool,
        expected_version: Optional[int] = None,
    ) -> GoalRecord:
        """Replace a record's goals and completion flag in one write."""

    @abstractmethod
    async def create_record(
        self,
        user_id: str,
        category: str,
        goals: List[str],
        date_generated: Optional[str] = None,
    ) -> str:
        """Insert a new goal record and return its id."""

    @abstractmethod
    async def list_responses(
        self, user_id: str, category: Optional[str] = None
    ) -> List[SurveyResponse]:
        """Survey responses for a user, newest first."""

    @abstractmethod
    async def count_questions(self, category: str) -> int:
        """Number of survey questions in a category."""


SCHEMA = """
CREATE TABLE IF NOT EXISTS survey_questions (
    question_id TEXT PRIMARY KEY,
    category TEXT NOT NULL,
    question TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS survey_responses (
    response_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    question_id TEXT NOT NULL,
    category TEXT NOT NULL,
    points REAL NOT NULL,
    answered_at TEXT NOT NULL,
    UNIQUE (user_id, question_id)
);
CREATE TABLE IF NOT EXISTS goal_records (
    record_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    category TEXT NOT NULL,
    goals TEXT NOT NULL,
    date_generated TEXT NOT NULL,
    is_completed INTEGER NOT NULL DEFAULT 0,
    version INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_goal_records_user
    ON goal_records (user_id, category, date_generated);
"""


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_record(row) -> GoalRecord:
    """Convert SQLite row to GoalRecord."""
    return GoalRecord(
        id=row["record_id"],
        user_id=row["user_id"],
        category=row["category"],
        goals=json.loads(row["goals"] or "[]"),
        date_generated=row["date_generated"],
        is_completed=bool(row["is_completed"]),
        version=int(row["version"]),
    )


def _row_to_response(row) -> SurveyResponse:
    """Convert SQLite row to SurveyResponse."""
    answered_at = datetime.fromisoformat(row["answered_at"].replace("Z", "+00:00"))
    return SurveyResponse(
        question_id=row["question_id"],
        category=row["category"],
        points=float(row["points"] or 0),
        answered_at=answered_at,
    )


class SQLiteGoalStore(GoalStore):
    """
    SQLite-backed store.

    Opens a short-lived connection per call, like the dashboard API's
    database manager, so the store can be shared across requests.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def initialize(self) -> None:
        """Create tables if they don't exist."""
        with self._connect() as conn:
            conn.executescript(SCHEMA)
        logger.info(f"[STORE] Initialized schema at {self.db_path}")

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreError(f"Could not open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    async def list_records(
        self,
        user_id: str,
        category: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[GoalRecord]:
        query = "SELECT * FROM goal_records WHERE user_id = ?"
        params: list = [user_id]
        if category is not None:
            query += " AND category = ?"
            params.append(category)
        query += " ORDER BY date_generated DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_record(row) for row in rows]

    async def get_record(self, record_id: str) -> Optional[GoalRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM goal_records WHERE record_id = ?", (record_id,)
            ).fetchone()
        return _row_to_record(row) if row else None

    async def update_record(
        self,
        record_id: str,
        goals: List[str],
        is_completed: bool,
        expected_version: Optional[int] = None,
    ) -> GoalRecord:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM goal_records WHERE record_id = ?", (record_id,)
            ).fetchone()
            if row is None:
                raise RecordNotFoundError(f"Goal record {record_id} not found")

            current_version = int(row["version"])
            if expected_version is not None and expected_version != current_version:
                raise RecordConflictError(
                    f"Goal record {record_id} is at version {current_version}, "
                    f"expected {expected_version}"
                )

            cursor = conn.execute(
                """
                UPDATE goal_records
                SET goals = ?, is_completed = ?, version = version + 1
                WHERE record_id = ? AND version = ?
                """,
                (json.dumps(list(goals)), int(is_completed), record_id, current_version),
            )
            if cursor.rowcount != 1:
                raise RecordConflictError(f"Goal record {record_id} changed during update")

            updated = conn.execute(
                "SELECT * FROM goal_records WHERE record_id = ?", (record_id,)
            ).fetchone()

        logger.debug(f"[STORE] Updated goal record {record_id} -> v{updated['version']}")
        return _row_to_record(updated)

    async def create_record(
        self,
        user_id: str,
        category: str,
        goals: List[str],
        date_generated: Optional[str] = None,
    ) -> str:
        return self.add_record(user_id, category, goals, date_generated).id

    async def list_responses(
        self, user_id: str, category: Optional[str] = None
    ) -> List[SurveyResponse]:
        query = "SELECT * FROM survey_responses WHERE user_id = ?"
        params: list = [user_id]
        if category is not None:
            query += " AND category = ?"
            params.append(category)
        query += " ORDER BY answered_at DESC"

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_response(row) for row in rows]

    async def count_questions(self, category: str) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS cnt FROM survey_questions WHERE category = ?",
                (category,),
            ).fetchone()
        return int(row["cnt"])

    def add_record(
        self,
        user_id: str,
        category: str,
        goals: List[str],
        date_generated: Optional[str] = None,
    ) -> GoalRecord:
        """Insert a goal record and return it as stored."""
        record_id = str(uuid.uuid4())
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO goal_records
                    (record_id, user_id, category, goals, date_generated, is_completed, version)
                VALUES (?, ?, ?, ?, ?, ?, 0)
                """,
                (record_id, user_id, category, json.dumps(list(goals)),
                 date_generated or _utc_now_iso(),
                 int(bool(goals) and all(g.is_completed for g in decode_goals(goals)))),
            )
            row = conn.execute(
                "SELECT * FROM goal_records WHERE record_id = ?", (record_id,)
            ).fetchone()
        logger.info(f"[STORE] Created goal record {record_id} for {user_id}/{category}")
        return _row_to_record(row)

    def add_question(self, question_id: str, category: str, question: str) -> None:
        """Insert a survey question (seeding helper)."""
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO survey_questions (question_id, category, question) "
                "VALUES (?, ?, ?)",
                (question_id, category, question),
            )

    def add_response(
        self,
        user_id: str,
        question_id: str,
        category: str,
        points: float,
        answered_at: Optional[str] = None,
    ) -> str:
        """Insert a survey response (seeding helper); one per user and question."""
        response_id = str(uuid.uuid4())
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO survey_responses
                    (response_id, user_id, question_id, category, points, answered_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (response_id, user_id, question_id, category, points,
                 answered_at or _utc_now_iso()),
            )
        return response_id
