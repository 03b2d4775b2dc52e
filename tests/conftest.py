"""
Pytest fixtures for wellness engine tests.
"""
import sys
import pytest
from pathlib import Path
from dotenv import load_dotenv

# Ensure src/ is on sys.path so tests can import wellness_engine without installing.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Load environment variables
load_dotenv()

from wellness_engine import SQLiteGoalStore  # noqa: E402


FIXED_NOW = "2024-03-15T12:00:00.000Z"

# (category, question count, answered points)
DEMO_SURVEY = [
    ("Sugar", 3, [4, 6]),
    ("Toxins", 2, [7, 7]),
]


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh SQLite database file."""
    return str(tmp_path / "wellness.db")


@pytest.fixture
def store(db_path):
    """Empty SQLite store with the schema created."""
    goal_store = SQLiteGoalStore(db_path)
    goal_store.initialize()
    return goal_store


@pytest.fixture
def fixed_clock():
    """Clock returning a constant completion timestamp."""
    return lambda: FIXED_NOW


@pytest.fixture
def create_record(store):
    """
    Factory fixture to insert a goal record.

    Returns a function that accepts user_id, category, goal strings and
    an optional date_generated, and returns the stored GoalRecord.
    """

    def _create(user_id, category, goals, date_generated=None):
        return store.add_record(user_id, category, goals, date_generated=date_generated)

    return _create


@pytest.fixture
def seeded_store(store, create_record):
    """
    Store with the demo survey answered by user-1 and one completed Sugar goal.
    """
    for category, question_count, points in DEMO_SURVEY:
        slug = category.lower()
        for n in range(question_count):
            store.add_question(f"{slug}_q{n}", category, f"{category} question {n}")
        for n, pts in enumerate(points):
            store.add_response("user-1", f"{slug}_q{n}", category, pts)

    create_record(
        "user-1",
        "Sugar",
        [
            "Skip soda at lunch\nCompleted: true\nDateCompleted: 2024-02-01",
            "Eat fruit for dessert\nCompleted: false",
        ],
        date_generated="2024-01-20T09:00:00Z",
    )
    return store
