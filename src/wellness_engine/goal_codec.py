"""
Goal Record Codec.

Goals are stored as plain strings with their completion state appended
as control lines:

    Drink a glass of water before each meal
    Completed: true
    DateCompleted: 2024-02-01T08:30:00Z

Decoding is permissive: strings that don't follow the format are kept
whole as the goal text and treated as incomplete.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

COMPLETED_PREFIX = "\nCompleted: "
DATE_COMPLETED_PREFIX = "\nDateCompleted: "
COMPLETED_MARKER = "Completed: true"

_COMPLETED_LINE = re.compile(r"\nCompleted: (?:true|false)(?=\n|$)")
_DATE_COMPLETED_LINE = re.compile(r"\nDateCompleted: ([^\n]*)")


@dataclass(frozen=True)
class Goal:
    """A single recommended action item."""

    text: str
    is_completed: bool = False
    date_completed: Optional[str] = None

    def complete(self, when: str) -> "Goal":
        """Return a completed copy stamped with `when`."""
        return Goal(text=self.text, is_completed=True, date_completed=when)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "is_completed": self.is_completed,
            "date_completed": self.date_completed,
        }


def encode_goal(goal: Goal) -> str:
    """Serialize a goal into its stored string form."""
    encoded = f"{goal.text}{COMPLETED_PREFIX}{'true' if goal.is_completed else 'false'}"
    if goal.date_completed:
        encoded += f"{DATE_COMPLETED_PREFIX}{goal.date_completed}"
    return encoded


def decode_goal(raw) -> Goal:
    """
    Parse a stored goal string.

    Never raises. Non-string input is coerced with str(); None becomes
    an empty goal.

    Args:
        raw: Stored goal string

    Returns:
        Decoded Goal
    """
    if raw is None:
        return Goal(text="")
    if not isinstance(raw, str):
        raw = str(raw)

    is_completed = COMPLETED_MARKER in raw

    date_completed = None
    date_match = _DATE_COMPLETED_LINE.search(raw)
    if date_match:
        date_completed = date_match.group(1) or None

    text = _DATE_COMPLETED_LINE.sub("", raw, count=1)
    text = _COMPLETED_LINE.sub("", text, count=1)

    if text == raw and not is_completed:
        logger.debug(f"[GOALS] No control lines in stored goal, kept as text: {raw[:40]!r}")

    return Goal(text=text, is_completed=is_completed, date_completed=date_completed)


def encode_goals(goals: Iterable[Goal]) -> List[str]:
    """Serialize a sequence of goals, preserving order."""
    return [encode_goal(g) for g in goals]


def decode_goals(raw_goals: Optional[Iterable]) -> List[Goal]:
    """Parse a sequence of stored goal strings, preserving order."""
    if not raw_goals:
        return []
    return [decode_goal(g) for g in raw_goals]
