"""
Unit tests for survey scoring.

These tests verify:
1. Score classification bands and display scale
2. Category score aggregation with the completed-goal bonus
3. Overall score averaging and rounding
4. The scoring service over a SQLite store

Usage:
    pytest tests/test_scoring.py -v
"""
import pytest

from wellness_engine.classifier import (
    HealthLabel,
    HealthScore,
    classify,
    format_score,
    to_display_scale,
)
from wellness_engine.aggregator import (
    GOAL_BONUS,
    SurveyResponse,
    aggregate_category,
    aggregate_overall,
    category_score,
    completion_percentage,
    group_by_category,
    overall_completion,
    overall_health_score,
)
from wellness_engine.scoring import ScoringService


def _responses(category, points):
    return [
        SurveyResponse(question_id=f"{category}_q{i}", category=category, points=p)
        for i, p in enumerate(points)
    ]


# ============================================================================
# Classifier Tests
# ============================================================================


class TestClassifier:
    """Test score classification."""

    @pytest.mark.parametrize(
        "score,label",
        [
            (0, HealthLabel.NOT_STARTED),
            (0.5, HealthLabel.POOR),
            (2.99, HealthLabel.POOR),
            (3, HealthLabel.NEEDS_WORK),
            (4, HealthLabel.FAIR),
            (5, HealthLabel.GOOD),
            (5.15, HealthLabel.GOOD),
            (6, HealthLabel.VERY_GOOD),
            (6.08, HealthLabel.VERY_GOOD),
            (7, HealthLabel.EXCELLENT),
            (8, HealthLabel.EXCELLENT),
        ],
    )
    def test_band_boundaries(self, score, label):
        """Thresholds are inclusive lower bounds."""
        assert classify(score).label == label

    def test_display_score_is_ten_point_scale(self):
        """display_score should equal score * 10 / 8 across the range."""
        for tenth in range(0, 81):
            score = tenth / 10
            assert classify(score).display_score == pytest.approx(score * 10 / 8, abs=1e-9)

    def test_labels_monotonic(self):
        """Label rank never decreases as the score increases."""
        scores = [0, 0.1, 2.9, 3, 3.5, 4, 4.9, 5, 5.5, 6, 6.9, 7, 7.5, 8]
        ranks = [classify(s).label.rank for s in scores]
        assert ranks == sorted(ranks)

    def test_display_metadata(self):
        """Each band carries its color and emoji."""
        excellent = classify(7.5)
        assert excellent.color == "text-green-500"
        assert excellent.emoji == "😄"

        not_started = classify(0)
        assert not_started.color == "text-gray-500"
        assert not_started.emoji == "😶"

        poor = classify(1)
        assert poor.color == "text-red-500"
        assert poor.label.value == "Poor"

    def test_above_range_clamped(self):
        """Scores above 8 clamp to 8."""
        result = classify(12)
        assert result.score == 8
        assert result.display_score == 10
        assert result.label == HealthLabel.EXCELLENT

    def test_below_range_clamped(self):
        """Negative scores clamp to 0."""
        result = classify(-3)
        assert result.score == 0
        assert result.label == HealthLabel.NOT_STARTED

    @pytest.mark.parametrize("value", [None, "abc", float("nan")])
    def test_non_numeric_never_raises(self, value):
        """Garbage input degrades to Not Started."""
        assert classify(value).label == HealthLabel.NOT_STARTED

    def test_to_dict(self):
        """Should serialize label as its display text."""
        data = classify(5).to_dict()
        assert data["label"] == "Good"
        assert data["display_score"] == 6.25

    def test_format_score(self):
        """Should format out of 10 with one decimal."""
        assert format_score(8) == "10.0"
        assert format_score(5.15) == "6.4"
        assert format_score(0) == "0.0"
        assert to_display_scale(4) == 5


# ============================================================================
# Category Aggregator Tests
# ============================================================================


class TestCategoryAggregation:
    """Test per-category score aggregation."""

    def test_empty_category(self):
        """No responses and no goals should score 0 without errors."""
        stats = aggregate_category([], 0, 5)

        assert stats.raw_score == 0
        assert stats.answered_count == 0
        assert stats.total == 5
        assert stats.completion_percentage == 0
        assert stats.health_score.label == HealthLabel.NOT_STARTED

    def test_zero_questions(self):
        """A category without questions is valid."""
        stats = aggregate_category([], 0, 0)

        assert stats.raw_score == 0
        assert stats.completion_percentage == 0

    def test_average_plus_bonus(self):
        """Sugar: [4, 6] with one completed goal scores 5.15 (Good)."""
        stats = aggregate_category(_responses("Sugar", [4, 6]), 1, 3, category="Sugar")

        assert stats.raw_score == pytest.approx(5.15)
        assert stats.health_score.label == HealthLabel.GOOD
        assert stats.answered_count == 2
        assert stats.points_total == 10
        assert stats.completion_percentage == pytest.approx(200 / 3)
        assert stats.category == "Sugar"

    def test_bonus_per_goal(self):
        """Each completed goal adds GOAL_BONUS points."""
        base = category_score(_responses("Macros", [4]), 0)
        with_goals = category_score(_responses("Macros", [4]), 4)
        assert with_goals - base == pytest.approx(4 * GOAL_BONUS)

    @pytest.mark.parametrize("goal_count", [10, 100, 1000])
    def test_bonus_clamped_at_max(self, goal_count):
        """The score never exceeds the ceiling however many goals are done."""
        stats = aggregate_category(_responses("Sugar", [8, 7]), goal_count, 2, max_score=8)
        assert stats.raw_score == 8
        assert stats.health_score.label == HealthLabel.EXCELLENT

    def test_bonus_without_answers(self):
        """Completed goals count even before any question is answered."""
        assert category_score([], 2) == pytest.approx(0.3)

    def test_negative_goal_count_ignored(self):
        """A negative goal count adds no bonus."""
        assert category_score(_responses("Sugar", [4]), -3) == 4

    def test_to_dict(self):
        """Should serialize nested health score."""
        data = aggregate_category(_responses("Sugar", [4]), 0, 1).to_dict()
        assert data["raw_score"] == 4
        assert data["health_score"]["label"] == "Fair"

    def test_completion_percentage(self):
        assert completion_percentage(3, 4) == 75
        assert completion_percentage(0, 0) == 0

    def test_group_by_category(self):
        """Should bucket responses by category."""
        grouped = group_by_category(_responses("Sugar", [1, 2]) + _responses("Toxins", [3]))
        assert sorted(grouped) == ["Sugar", "Toxins"]
        assert len(grouped["Sugar"]) == 2


# ============================================================================
# Overall Aggregator Tests
# ============================================================================


class TestOverallAggregation:
    """Test overall score averaging."""

    def test_empty_mapping(self):
        """No categories should score 0, never NaN."""
        assert aggregate_overall({}) == 0

    def test_mean_rounded_to_two_decimals(self):
        """Sugar 5.15 and Toxins 7 average to 6.08 (Very Good)."""
        scores = {"Sugar": aggregate_category(_responses("Sugar", [4, 6]), 1, 3).raw_score,
                  "Toxins": 7}

        assert aggregate_overall(scores) == 6.08
        assert overall_health_score(scores).label == HealthLabel.VERY_GOOD

    def test_single_category(self):
        assert aggregate_overall({"Sugar": 3.333}) == 3.33

    def test_overall_completion(self):
        """Completion is pooled across categories, separate from the score."""
        stats = [
            aggregate_category(_responses("Sugar", [4, 6]), 0, 3),
            aggregate_category(_responses("Toxins", [7]), 0, 1),
        ]
        assert overall_completion(stats) == 75
        assert overall_completion([]) == 0


# ============================================================================
# Scoring Service Tests
# ============================================================================


class TestScoringService:
    """Test score summaries built from stored data."""

    @pytest.mark.asyncio
    async def test_summarize_scenario(self, seeded_store):
        """Should reproduce the Sugar/Toxins scenario end to end."""
        service = ScoringService(seeded_store, categories=["Sugar", "Toxins"])

        summary = await service.summarize("user-1")

        sugar = summary.categories["Sugar"]
        assert sugar.raw_score == pytest.approx(5.15)
        assert sugar.answered_count == 2
        assert sugar.total == 3
        assert sugar.health_score.label == HealthLabel.GOOD

        assert summary.categories["Toxins"].raw_score == 7
        assert summary.overall_score == 6.08
        assert summary.overall.label == HealthLabel.VERY_GOOD
        assert summary.completion_percentage == pytest.approx(80)

    @pytest.mark.asyncio
    async def test_summarize_includes_unanswered_categories(self, seeded_store):
        """Default categories without answers count as 0 in the overall score."""
        service = ScoringService(seeded_store)

        summary = await service.summarize("user-1")

        assert len(summary.categories) == 8
        assert summary.categories["Macros"].health_score.label == HealthLabel.NOT_STARTED
        assert summary.overall_score == aggregate_overall(
            {name: s.raw_score for name, s in summary.categories.items()}
        )

    @pytest.mark.asyncio
    async def test_unknown_user(self, seeded_store):
        """A user without data should get an all-zero summary."""
        service = ScoringService(seeded_store)

        summary = await service.summarize("nobody")

        assert summary.overall_score == 0
        assert summary.completion_percentage == 0
        assert isinstance(summary.overall, HealthScore)

    @pytest.mark.asyncio
    async def test_category_stats(self, seeded_store):
        """Should score a single category."""
        service = ScoringService(seeded_store)

        stats = await service.category_stats("user-1", "Sugar")

        assert stats.raw_score == pytest.approx(5.15)
        assert stats.to_dict()["category"] == "Sugar"
