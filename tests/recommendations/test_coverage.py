"""Tests for muscle coverage analysis."""

import pytest

from workout_recommender.models import Problem, ProblemType
from workout_recommender.recommendations.coverage import (
    analyze_muscle_coverage,
    calculate_muscle_stimulus,
    coverage_priority,
    get_muscles_needing_attention,
    summarize_coverage,
    undertrained_threshold,
)
from workout_recommender.recommendations.recovery import find_last_stimulus


def _coverage(workouts, muscles, now):
    return analyze_muscle_coverage(workouts, muscles, find_last_stimulus(workouts), now)


class TestStimulusWindows:
    """Test windowed stimulus aggregation."""

    def test_window_excludes_old_workouts(self, exercises, make_workout, days_ago, now):
        workouts = [
            make_workout("recent", days_ago(days=2), [(exercises["squat"], 100, 10)]),
            make_workout("old", days_ago(days=10), [(exercises["squat"], 100, 10)]),
        ]
        week = calculate_muscle_stimulus(workouts, 7 * 24, now)
        month = calculate_muscle_stimulus(workouts, 30 * 24, now)
        assert week["quads"] == pytest.approx(600)
        assert month["quads"] == pytest.approx(1200)


class TestThresholdAndPriority:
    """Test the undertrained threshold and fill-gap priority."""

    def test_threshold_is_half_mean_of_trained(self):
        assert undertrained_threshold({"a": 100.0, "b": 300.0, "c": 0.0}) == pytest.approx(100.0)

    def test_threshold_without_training(self):
        assert undertrained_threshold({}) == 0.0

    def test_priority_undertrained_and_neglected(self):
        assert coverage_priority(True, 400) == pytest.approx(1.0)

    def test_priority_recently_trained(self):
        assert coverage_priority(False, 10) == pytest.approx(0.2)

    def test_priority_stays_in_unit_range(self):
        for undertrained in (True, False):
            for hours in (0, 47, 48, 200, 335, 336, float("inf")):
                assert 0.0 <= coverage_priority(undertrained, hours) <= 1.0


class TestAnalyzeCoverage:
    """Test analyze_muscle_coverage."""

    def test_no_history_everything_undertrained(self, muscles, now):
        coverage = _coverage([], list(muscles.values()), now)
        assert len(coverage) == len(muscles)
        assert all(c.is_undertrained for c in coverage)
        assert all(c.priority == pytest.approx(1.0) for c in coverage)

    def test_low_volume_muscle_flagged(self, exercises, muscles, make_workout, days_ago, now):
        workouts = [
            make_workout("w1", days_ago(days=1), [
                (exercises["squat"], 150, 10),
                (exercises["bench-press"], 100, 10),
                (exercises["calf-raise"], 10, 5),
            ]),
        ]
        coverage = {c.muscle_name: c for c in _coverage(workouts, list(muscles.values()), now)}
        assert coverage["Calves"].is_undertrained
        assert not coverage["Quads"].is_undertrained
        assert coverage["Calves"].gap > 0
        assert coverage["Quads"].gap == pytest.approx(0.0)

    def test_silent_week_flags_muscle(self, exercises, muscles, make_workout, days_ago, now):
        """No stimulus in the last 7 days flags a muscle regardless of volume."""
        workouts = [make_workout("w1", days_ago(days=9), [(exercises["squat"], 200, 10)])]
        coverage = {c.muscle_name: c for c in _coverage(workouts, list(muscles.values()), now)}
        assert coverage["Quads"].is_undertrained

    def test_sorted_by_priority(self, exercises, muscles, make_workout, days_ago, now):
        workouts = [make_workout("w1", days_ago(days=1), [(exercises["bench-press"], 100, 10)])]
        coverage = _coverage(workouts, list(muscles.values()), now)
        priorities = [c.priority for c in coverage]
        assert priorities == sorted(priorities, reverse=True)
        assert coverage[-1].muscle_name in {"Chest", "Triceps", "Shoulders"}

    def test_ties_keep_muscle_order(self, muscles, now):
        order = [muscles["Quads"], muscles["Chest"], muscles["Abs"]]
        coverage = _coverage([], order, now)
        assert [c.muscle_name for c in coverage] == ["Quads", "Chest", "Abs"]


class TestAttention:
    """Test get_muscles_needing_attention."""

    def test_problem_muscles_included(self, exercises, muscles, make_workout, days_ago, now):
        workouts = [make_workout("w1", days_ago(days=1), [
            (exercises["romanian-deadlift"], 100, 10),
            (exercises["squat"], 100, 10),
        ])]
        subset = [muscles["Hamstrings"], muscles["Lower Back"], muscles["Quads"]]
        coverage = _coverage(workouts, subset, now)
        problem = Problem(type=ProblemType.WEAKNESS, name="Tight hamstrings", affected_muscles=["hamstring"])

        hamstrings = next(c for c in coverage if c.muscle_name == "Hamstrings")
        assert not hamstrings.is_undertrained
        names = {c.muscle_name for c in get_muscles_needing_attention(coverage, [problem])}
        assert "Hamstrings" in names

    def test_inactive_problem_ignored(self, exercises, muscles, make_workout, days_ago, now):
        workouts = [make_workout("w1", days_ago(days=1), [(exercises["squat"], 100, 10)])]
        coverage = _coverage(workouts, [muscles["Quads"]], now)
        problem = Problem(
            type=ProblemType.INJURY, name="Knee", affected_muscles=["quads"], is_active=False
        )
        assert get_muscles_needing_attention(coverage, [problem]) == []


class TestSummary:
    def test_summary_of_empty_coverage(self):
        summary = summarize_coverage([])
        assert summary["undertrained_count"] == 0
        assert summary["avg_stimulus_7d"] == 0.0
