"""Tests for workout type selection."""

import pytest

from workout_recommender.models import (
    FitnessGoal,
    Problem,
    ProblemType,
    SplitType,
    UserFitnessProfile,
    WorkoutType,
    collect_muscles,
)
from workout_recommender.models.checkin import EnergyLevel
from workout_recommender.recommendations.recovery import calculate_all_recoveries
from workout_recommender.recommendations.workout_type import (
    DecisionRule,
    rotate_push_pull_legs,
    select_workout_type,
)


PPL_PROFILE = UserFitnessProfile(preferred_splits=[SplitType.PUSH_PULL_LEGS])

WEDNESDAY = 3
THURSDAY = 4


@pytest.fixture
def recoveries_for(catalog, now, days_ago):
    """Factory: recoveries with the named muscles trained ``hours`` ago."""
    muscles = collect_muscles(catalog)

    def _make(trained=(), hours=6, soreness=None):
        last = {m.id: days_ago(hours=hours) for m in muscles if m.name in trained}
        return calculate_all_recoveries(muscles, last, soreness, now)

    return _make


@pytest.fixture
def fresh(recoveries_for):
    return recoveries_for()


def _problem(priority, active=True):
    return Problem(
        type=ProblemType.INJURY,
        name="Lower Back Pain",
        affected_muscles=["lower back"],
        priority=priority,
        is_active=active,
    )


class TestDecisionOrder:
    """First matching rule wins."""

    @pytest.mark.parametrize("day", range(7))
    def test_high_priority_problem_forces_pt(self, fresh, day):
        profile = UserFitnessProfile(problems=[_problem(5)])
        decision = select_workout_type(day, None, fresh, profile, WorkoutType.PUSH)
        assert decision.workout_type == WorkoutType.PT
        assert decision.rule == DecisionRule.HIGH_PRIORITY_PROBLEM

    def test_high_priority_problem_beats_rest_triggers(self, fresh, make_checkin):
        profile = UserFitnessProfile(problems=[_problem(4)])
        checkin = make_checkin(hours_slept=3)
        decision = select_workout_type(WEDNESDAY, checkin, fresh, profile, None)
        assert decision.workout_type == WorkoutType.PT

    def test_inactive_problem_ignored(self, fresh):
        profile = UserFitnessProfile(problems=[_problem(5, active=False)])
        decision = select_workout_type(WEDNESDAY, None, fresh, profile, None)
        assert decision.workout_type == WorkoutType.PUSH

    def test_short_sleep_rest(self, fresh, make_checkin):
        decision = select_workout_type(WEDNESDAY, make_checkin(hours_slept=4), fresh, None, None)
        assert decision.workout_type == WorkoutType.REST
        assert decision.rule == DecisionRule.SHORT_SLEEP

    def test_five_hours_is_enough(self, fresh, make_checkin):
        decision = select_workout_type(WEDNESDAY, make_checkin(hours_slept=5), fresh, None, None)
        assert decision.workout_type != WorkoutType.REST

    def test_severe_soreness_rest(self, fresh, make_checkin):
        checkin = make_checkin(soreness_map={"Chest": 4, "Quads": 1})
        decision = select_workout_type(WEDNESDAY, checkin, fresh, None, None)
        assert decision.rule == DecisionRule.SEVERE_SORENESS

    def test_low_energy_and_poor_sleep_rest(self, fresh, make_checkin):
        checkin = make_checkin(energy_level=EnergyLevel.LOW, sleep_quality=2)
        decision = select_workout_type(WEDNESDAY, checkin, fresh, None, None)
        assert decision.rule == DecisionRule.LOW_ENERGY_POOR_SLEEP

    def test_low_energy_alone_trains(self, fresh, make_checkin):
        checkin = make_checkin(energy_level=EnergyLevel.LOW, sleep_quality=3)
        decision = select_workout_type(WEDNESDAY, checkin, fresh, None, None)
        assert decision.workout_type != WorkoutType.REST

    def test_pt_goal_on_even_day(self, fresh):
        profile = UserFitnessProfile(goals=[FitnessGoal.PT])
        assert select_workout_type(THURSDAY, None, fresh, profile, None).rule == DecisionRule.PT_DAY
        assert select_workout_type(WEDNESDAY, None, fresh, profile, None).workout_type == WorkoutType.PUSH

    def test_low_priority_problem_on_even_day(self, fresh):
        profile = UserFitnessProfile(problems=[_problem(2)])
        assert select_workout_type(0, None, fresh, profile, None).workout_type == WorkoutType.PT

    def test_non_ppl_profile_defaults_to_push(self, fresh):
        profile = UserFitnessProfile(preferred_splits=[SplitType.FULL_BODY])
        decision = select_workout_type(WEDNESDAY, None, fresh, profile, WorkoutType.PUSH)
        assert decision.workout_type == WorkoutType.PUSH
        assert decision.rule == DecisionRule.DEFAULT

    def test_no_profile_runs_rotation(self, recoveries_for):
        recoveries = recoveries_for(trained=("Chest", "Shoulders", "Triceps"))
        decision = select_workout_type(WEDNESDAY, None, recoveries, None, WorkoutType.PUSH)
        assert decision.workout_type == WorkoutType.PULL


class TestRotation:
    """Test the push/pull/legs rotation."""

    def test_no_previous_type_starts_with_push(self, fresh):
        decision = rotate_push_pull_legs(None, fresh)
        assert decision.workout_type == WorkoutType.PUSH
        assert decision.rule == DecisionRule.ROTATION_START

    def test_push_prefers_pull_over_legs(self, recoveries_for):
        """With pull and legs both recovered, push always moves to pull."""
        recoveries = recoveries_for(trained=("Chest", "Shoulders", "Triceps"))
        for _ in range(3):
            assert rotate_push_pull_legs(WorkoutType.PUSH, recoveries).workout_type == WorkoutType.PULL

    def test_push_falls_back_to_legs(self, recoveries_for):
        recoveries = recoveries_for(trained=("Back", "Lats", "Biceps", "Rear Delts", "Lower Back"))
        assert rotate_push_pull_legs(WorkoutType.PUSH, recoveries).workout_type == WorkoutType.LEGS

    @pytest.mark.parametrize("previous,expected", [
        (WorkoutType.PULL, WorkoutType.LEGS),
        (WorkoutType.LEGS, WorkoutType.PUSH),
    ])
    def test_rotation_order(self, fresh, previous, expected):
        assert rotate_push_pull_legs(previous, fresh).workout_type == expected

    def test_pull_skips_unready_legs(self, recoveries_for):
        recoveries = recoveries_for(trained=("Quads", "Hamstrings", "Glutes", "Calves"))
        assert rotate_push_pull_legs(WorkoutType.PULL, recoveries).workout_type == WorkoutType.PUSH

    def test_nothing_ready_rests(self, catalog, recoveries_for):
        everything = {t.muscle.name for e in catalog for t in e.muscle_targets}
        recoveries = recoveries_for(trained=everything)
        decision = rotate_push_pull_legs(WorkoutType.LEGS, recoveries)
        assert decision.workout_type == WorkoutType.REST
        assert decision.rule == DecisionRule.NO_GROUP_READY

    def test_soreness_makes_group_unready(self, recoveries_for):
        recoveries = recoveries_for(soreness={"Quads": 4, "Hamstrings": 4, "Glutes": 4, "Calves": 4})
        assert rotate_push_pull_legs(WorkoutType.PULL, recoveries).workout_type == WorkoutType.PUSH

    @pytest.mark.parametrize("previous", [WorkoutType.PT, WorkoutType.REST])
    def test_outside_rotation_restarts_at_push(self, fresh, previous):
        assert rotate_push_pull_legs(previous, fresh).workout_type == WorkoutType.PUSH
