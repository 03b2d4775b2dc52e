#!/usr/bin/env python3
"""
Populate the wellness SQLite database with demo survey data.

Creates the schema, one question set per survey category, a demo user's
answers to part of the survey and a goal set for a few categories.

Usage:
    python scripts/populate_database.py [--db wellness.db] [--user demo-user]
"""
import argparse
import asyncio
import os
import random
import sys
from pathlib import Path

from dotenv import load_dotenv

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))

# Load environment variables
load_dotenv()

from wellness_engine import DEFAULT_CATEGORIES, Goal, SQLiteGoalStore, encode_goals  # noqa: E402

QUESTIONS_PER_CATEGORY = 5

# Goal text per category, as returned by the goal generation service
DEMO_GOALS = {
    "Sugar": [
        "Swap your afternoon soda for sparkling water with lemon",
        "Read labels and pick breakfast cereals under 5g of sugar",
        "Have fruit instead of dessert on weekdays",
    ],
    "Toxins": [
        "Wash produce thoroughly before eating",
        "Store leftovers in glass instead of plastic containers",
    ],
    "Timing": [
        "Finish dinner at least three hours before bed",
        "Eat breakfast within an hour of waking",
        "Avoid snacking after 8pm",
    ],
}


async def populate(db_path: Path, user_id: str, seed: int) -> dict:
    """
    Create and populate the database.

    Args:
        db_path: SQLite file to create (replaced if present)
        user_id: Demo user to attach responses and goals to
        seed: Random seed for reproducible answers

    Returns:
        Counts of inserted rows
    """
    rng = random.Random(seed)

    # Remove existing database file
    if db_path.exists():
        os.remove(db_path)
        print(f"  Removed existing: {db_path.name}")

    store = SQLiteGoalStore(str(db_path))
    store.initialize()

    counts = {"questions": 0, "responses": 0, "goal_records": 0}

    for category in DEFAULT_CATEGORIES:
        slug = category.lower().replace(" ", "_")
        answered = rng.randint(0, QUESTIONS_PER_CATEGORY)

        for n in range(QUESTIONS_PER_CATEGORY):
            question_id = f"{slug}_q{n + 1}"
            store.add_question(question_id, category, f"{category} question {n + 1}")
            counts["questions"] += 1

            if n < answered:
                store.add_response(user_id, question_id, category, rng.randint(0, 8))
                counts["responses"] += 1

    for category, texts in DEMO_GOALS.items():
        goals = [Goal(text=t) for t in texts]
        await store.create_record(user_id, category, encode_goals(goals))
        counts["goal_records"] += 1

    return counts


def main():
    """Populate the wellness database."""
    parser = argparse.ArgumentParser(description="Populate the wellness demo database")
    default_db = Path(os.getenv("SCORES_DATA_PATH", str(BASE_DIR))) / "wellness.db"
    parser.add_argument("--db", default=str(default_db), help="Database file")
    parser.add_argument("--user", default="demo-user", help="Demo user id")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    db_path = Path(args.db)

    print("=" * 60)
    print("Wellness Database Population Script")
    print("=" * 60)
    print(f"\nDatabase: {db_path}\n")

    counts = asyncio.run(populate(db_path, args.user, args.seed))

    for table, count in counts.items():
        print(f"  {table}: {count} rows")

    print("=" * 60)
    size_kb = db_path.stat().st_size / 1024
    print(f"Complete! {db_path} ({size_kb:.1f} KB)")
    print("=" * 60)


if __name__ == "__main__":
    main()
