"""
Score Classification Module.

Maps a category or overall score on the internal 0-8 scale to the
qualitative tier shown to the user (label, color token and emoji),
plus the same score rescaled to the 0-10 display scale.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

MAX_SCORE = 8.0
DISPLAY_MAX = 10.0


class HealthLabel(str, Enum):
    """Qualitative tier of a health score."""

    NOT_STARTED = "Not Started"
    POOR = "Poor"
    NEEDS_WORK = "Needs Work"
    FAIR = "Fair"
    GOOD = "Good"
    VERY_GOOD = "Very Good"
    EXCELLENT = "Excellent"

    @property
    def rank(self) -> int:
        """Position of the tier, lowest first."""
        return list(HealthLabel).index(self)


@dataclass(frozen=True)
class HealthScore:
    """Classification result for a single score."""

    score: float
    display_score: float
    label: HealthLabel
    color: str
    emoji: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "score": self.score,
            "display_score": self.display_score,
            "label": self.label.value,
            "color": self.color,
            "emoji": self.emoji,
        }


# (lower bound, label, color, emoji), highest band first
SCORE_BANDS = [
    (7.0, HealthLabel.EXCELLENT, "text-green-500", "\U0001F604"),
    (6.0, HealthLabel.VERY_GOOD, "text-emerald-500", "\U0001F60A"),
    (5.0, HealthLabel.GOOD, "text-blue-500", "\U0001F642"),
    (4.0, HealthLabel.FAIR, "text-yellow-500", "\U0001F610"),
    (3.0, HealthLabel.NEEDS_WORK, "text-orange-500", "\U0001F615"),
]

NOT_STARTED_STYLE = ("text-gray-500", "\U0001F636")
POOR_STYLE = ("text-red-500", "\U0001F61F")


def _clamp_score(score) -> float:
    """Coerce any input into a finite value within [0, MAX_SCORE]."""
    try:
        value = float(score)
    except (TypeError, ValueError):
        logger.debug(f"[SCORES] Non-numeric score {score!r}, treating as 0")
        return 0.0

    if math.isnan(value):
        return 0.0
    if value < 0:
        logger.debug(f"[SCORES] Score {value} below range, clamped to 0")
        return 0.0
    if value > MAX_SCORE:
        logger.debug(f"[SCORES] Score {value} above range, clamped to {MAX_SCORE}")
        return MAX_SCORE
    return value


def to_display_scale(score: float) -> float:
    """Convert an 8-point score to the 10-point display scale."""
    return score * DISPLAY_MAX / MAX_SCORE


def classify(score: Optional[float]) -> HealthScore:
    """
    Classify a score into its health tier.

    Thresholds are inclusive lower bounds. Out-of-range input is clamped
    into [0, 8] first, so the function never raises.

    Args:
        score: Score on the 0-8 scale

    Returns:
        HealthScore for the (clamped) score
    """
    value = _clamp_score(score)
    display_score = to_display_scale(value)

    if value == 0:
        color, emoji = NOT_STARTED_STYLE
        return HealthScore(0.0, 0.0, HealthLabel.NOT_STARTED, color, emoji)

    for lower_bound, label, color, emoji in SCORE_BANDS:
        if value >= lower_bound:
            return HealthScore(value, display_score, label, color, emoji)

    color, emoji = POOR_STYLE
    return HealthScore(value, display_score, HealthLabel.POOR, color, emoji)


def format_score(score: Optional[float]) -> str:
    """Format a score for display out of 10, e.g. '6.4'."""
    return f"{to_display_scale(_clamp_score(score)):.1f}"
