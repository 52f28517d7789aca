"""
Exercise Filtering and Scoring

Hard filters remove infeasible candidates first:
- Targets a muscle with soreness 4+ (when sore muscles are excluded)
- Needs equipment the user does not have
- On the user's avoid list

The remaining exercises get an additive score starting at 0.5:

    Component        Nominal weight
    recovery         ~0.3  (per target muscle, scaled by target weight)
    goals            0.2
    problems         problem_weight (default 0.25)
    coverage gaps    0.15
    preferences      0.1
    equipment        0.05
    variety          0.05
    workout type     0.1

The final score is clamped to [0, 1]. Sorting is stable, so ties keep
catalog order and identical inputs always give identical rankings.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, Any, Dict, List, Mapping, Optional

from ..models.catalog import Exercise, ExerciseCategory
from ..models.checkin import EnergyLevel, TimeAvailable
from ..models.history import WorkoutType
from ..models.profile import FitnessGoal, Problem
from .coverage import MuscleCoverage
from .problems import muscle_matches
from .recovery import MODERATE_SORENESS, SEVERE_SORENESS, MuscleRecoveryStatus, lookup_soreness


BASE_SCORE = 0.5

# Recovery, per unit of target weight
UNSEEN_MUSCLE_BONUS = 0.1
BLOCKED_MUSCLE_PENALTY = 0.2
RECOVERED_MUSCLE_BONUS = 0.15
SEVERE_SORENESS_PENALTY = 0.3
MODERATE_SORENESS_PENALTY = 0.1

GOAL_WEIGHT = 0.2
COVERAGE_WEIGHT = 0.15
DEFAULT_PROBLEM_WEIGHT = 0.25
DEFAULT_PREFERENCE_WEIGHT = 0.1

FAVORITE_BONUS = 0.1             # scaled by preference_weight
AVOID_PENALTY = 0.2
EQUIPMENT_BONUS = 0.05
EQUIPMENT_PENALTY = 0.1
RECENT_USE_PENALTY = 0.1
TYPE_MATCH_BONUS = 0.1

COMPOUND_CATEGORIES = {ExerciseCategory.PUSH, ExerciseCategory.PULL, ExerciseCategory.LEGS}


@dataclass
class ScoringParams:
    """Everything the scorer needs, bundled once per recommendation run."""

    # Recovery & soreness
    recoveries: Mapping[str, MuscleRecoveryStatus] = field(default_factory=dict)  # by muscle id
    soreness_map: Mapping[str, int] = field(default_factory=dict)
    exclude_sore_muscles: bool = True

    # Goals
    goals: List[str] = field(default_factory=list)
    goal_weights: Mapping[str, float] = field(default_factory=dict)

    # Problems
    problems: List[Problem] = field(default_factory=list)
    problem_weight: float = DEFAULT_PROBLEM_WEIGHT

    # Coverage
    coverage: Mapping[str, MuscleCoverage] = field(default_factory=dict)  # by muscle id
    target_undertrained_muscles: bool = True

    # Preferences
    favorite_exercise_ids: AbstractSet[str] = frozenset()
    avoid_exercise_ids: AbstractSet[str] = frozenset()
    preference_weight: float = DEFAULT_PREFERENCE_WEIGHT

    # Constraints
    available_equipment: AbstractSet[str] = frozenset()
    energy_level: Optional[EnergyLevel] = None
    time_available: Optional[TimeAvailable] = None

    # Variety
    avoid_recent_exercises: bool = True
    recent_exercise_ids: AbstractSet[str] = frozenset()

    workout_type: Optional[WorkoutType] = None


@dataclass
class ScoredExercise:
    """An exercise with its final score and per-component contributions."""

    exercise: Exercise
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercise_id": self.exercise.id,
            "exercise_name": self.exercise.name,
            "score": round(self.score, 4),
            "breakdown": {k: round(v, 4) for k, v in self.breakdown.items()},
        }


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def equipment_available(exercise: Exercise, available: AbstractSet[str]) -> bool:
    """Bodyweight exercises are always available."""
    return exercise.is_bodyweight or exercise.equipment in available


def passes_hard_filters(exercise: Exercise, params: ScoringParams) -> bool:
    """True if the exercise survives every hard exclusion."""
    if params.exclude_sore_muscles and params.soreness_map:
        for target in exercise.muscle_targets:
            soreness = lookup_soreness(params.soreness_map, target.muscle.name)
            if soreness is not None and soreness >= SEVERE_SORENESS:
                return False

    if not equipment_available(exercise, params.available_equipment):
        return False

    if exercise.id in params.avoid_exercise_ids:
        return False

    return True


def calculate_recovery_component(exercise: Exercise, params: ScoringParams) -> float:
    """Recovery and soreness contribution, summed over target muscles."""
    total = 0.0
    for target in exercise.muscle_targets:
        recovery = params.recoveries.get(target.muscle.id)

        if recovery is None:
            total += UNSEEN_MUSCLE_BONUS * target.weight
            continue

        if not recovery.can_train:
            total -= BLOCKED_MUSCLE_PENALTY * target.weight
            continue

        if recovery.never_trained:
            total += UNSEEN_MUSCLE_BONUS * target.weight
        elif recovery.is_recovered:
            total += RECOVERED_MUSCLE_BONUS * target.weight

        soreness = lookup_soreness(params.soreness_map, target.muscle.name)
        if soreness is not None:
            if soreness >= SEVERE_SORENESS:
                total -= SEVERE_SORENESS_PENALTY * target.weight
            elif soreness == MODERATE_SORENESS:
                total -= MODERATE_SORENESS_PENALTY * target.weight
    return total


def calculate_goal_alignment(
    exercise: Exercise,
    goals: List[str],
    goal_weights: Mapping[str, float],
) -> float:
    """
    How well an exercise serves the user's goals, capped at 1.

    - strength: push/pull/legs exercises, +0.3 x weight
    - hypertrophy: any exercise, +0.2 x weight
    - pt / injury_prevention: pt exercises, +0.4 x weight
    """
    alignment = 0.0

    if FitnessGoal.STRENGTH.value in goals:
        weight = goal_weights.get(FitnessGoal.STRENGTH.value, 1.0)
        if exercise.category in COMPOUND_CATEGORIES:
            alignment += 0.3 * weight

    if FitnessGoal.HYPERTROPHY.value in goals:
        weight = goal_weights.get(FitnessGoal.HYPERTROPHY.value, 1.0)
        alignment += 0.2 * weight

    if FitnessGoal.PT.value in goals or FitnessGoal.INJURY_PREVENTION.value in goals:
        weight = goal_weights.get(
            FitnessGoal.PT.value,
            goal_weights.get(FitnessGoal.INJURY_PREVENTION.value, 1.0),
        )
        if exercise.category == ExerciseCategory.PT:
            alignment += 0.4 * weight

    return min(1.0, alignment)


def calculate_problem_alignment(exercise: Exercise, problems: List[Problem]) -> float:
    """
    How well an exercise addresses active problems, capped at 1.

    Each matching target adds 0.3 x target weight x (priority / 5); an
    explicit recommendation adds 0.5 x (priority / 5).
    """
    alignment = 0.0
    for problem in problems:
        if not problem.is_active:
            continue
        severity = problem.priority / 5

        for target in exercise.muscle_targets:
            if any(muscle_matches(target.muscle.name, a) for a in problem.affected_muscles):
                alignment += 0.3 * target.weight * severity

        if exercise.id in problem.recommended_exercise_ids:
            alignment += 0.5 * severity

    return min(1.0, alignment)


def calculate_coverage_alignment(
    exercise: Exercise,
    coverage: Mapping[str, MuscleCoverage],
) -> float:
    """How well an exercise fills undertrained muscles, capped at 1."""
    alignment = 0.0
    for target in exercise.muscle_targets:
        entry = coverage.get(target.muscle.id)
        if entry is not None and entry.is_undertrained:
            alignment += 0.4 * target.weight * entry.priority
    return min(1.0, alignment)


def score_breakdown(exercise: Exercise, params: ScoringParams) -> Dict[str, float]:
    """Weighted contribution of every scoring component."""
    breakdown = {"base": BASE_SCORE}

    breakdown["recovery"] = calculate_recovery_component(exercise, params)

    if params.goals:
        breakdown["goals"] = GOAL_WEIGHT * calculate_goal_alignment(
            exercise, params.goals, params.goal_weights
        )

    if params.problems:
        breakdown["problems"] = params.problem_weight * calculate_problem_alignment(
            exercise, params.problems
        )

    if params.target_undertrained_muscles:
        breakdown["coverage"] = COVERAGE_WEIGHT * calculate_coverage_alignment(
            exercise, params.coverage
        )

    preference = 0.0
    if exercise.id in params.favorite_exercise_ids:
        preference += FAVORITE_BONUS * params.preference_weight
    # Unreachable through filter_and_score, which drops avoided exercises
    if exercise.id in params.avoid_exercise_ids:
        preference -= AVOID_PENALTY
    breakdown["preference"] = preference

    if equipment_available(exercise, params.available_equipment):
        breakdown["equipment"] = EQUIPMENT_BONUS
    else:
        breakdown["equipment"] = -EQUIPMENT_PENALTY

    if params.avoid_recent_exercises and exercise.id in params.recent_exercise_ids:
        breakdown["variety"] = -RECENT_USE_PENALTY

    if params.workout_type is not None and exercise.category.value == params.workout_type.value:
        breakdown["workout_type"] = TYPE_MATCH_BONUS

    return breakdown


def score_exercise(exercise: Exercise, params: ScoringParams) -> float:
    """Multi-factor score for one exercise, clamped to [0, 1]."""
    return clamp_unit(sum(score_breakdown(exercise, params).values()))


def filter_and_score(catalog: List[Exercise], params: ScoringParams) -> List[ScoredExercise]:
    """
    Apply hard filters, score the survivors and rank them.

    Args:
        catalog: Candidate exercises, in the order ties should keep
        params: Scoring inputs for this run

    Returns:
        ScoredExercise list sorted by descending score
    """
    scored = []
    for exercise in catalog:
        if not passes_hard_filters(exercise, params):
            continue
        breakdown = score_breakdown(exercise, params)
        scored.append(ScoredExercise(
            exercise=exercise,
            score=clamp_unit(sum(breakdown.values())),
            breakdown=breakdown,
        ))

    # sorted() is stable: equal scores keep candidate order
    return sorted(scored, key=lambda s: -s.score)
