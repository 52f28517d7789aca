"""
Recommendation Engine

Runs the daily pipeline over one snapshot:

    history -> last stimulus per muscle -> recovery -> coverage
            -> workout type -> candidate pool -> filter + score
            -> top-N plan with reasoning, confidence and feature vector

The engine is synchronous and side-effect free. It reads nothing but its
inputs and the injected ``now``, so recomputing a plan and discarding it is
always safe; persisting at most one plan per user and date is the caller's
job (see services.recommendation_service).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from ..config import Settings, get_settings
from ..models.catalog import Exercise, ExerciseCategory, collect_muscles
from ..models.checkin import DailyCheckin
from ..models.history import Workout, WorkoutType, sort_workouts_newest_first
from ..models.profile import Problem, UserFitnessProfile
from ..models.snapshot import EngineSnapshot
from .coverage import MuscleCoverage, analyze_muscle_coverage, get_muscles_needing_attention
from .features import FeatureVector, extract_features
from .problems import all_problem_exercises, exercise_targets_problem
from .recovery import MuscleRecoveryStatus, calculate_all_recoveries, find_last_stimulus
from .registry import ModelRegistry
from .scoring import ScoredExercise, ScoringParams, filter_and_score
from .volume import calculate_exercise_count, calculate_volume, round_half_up
from .workout_type import DecisionRule, WorkoutTypeDecision, select_workout_type


logger = logging.getLogger(__name__)


BASE_CONFIDENCE = 0.7
CONFIDENCE_STEP = 0.1
REST_CONFIDENCE = 0.9

RECOVERED_NOTE_HOURS = 48

REST_HEADLINE = "Rest day recommended based on recovery status"
REST_DETAILS = {
    DecisionRule.SHORT_SLEEP: "Poor sleep quality (< 5 hours)",
    DecisionRule.SEVERE_SORENESS: "High soreness or low energy levels",
    DecisionRule.LOW_ENERGY_POOR_SLEEP: "High soreness or low energy levels",
    DecisionRule.NO_GROUP_READY: "High soreness or low energy levels",
}
DEFAULT_EXERCISE_NOTE = "Good exercise for today"


@dataclass
class RecommendedExercise:
    """One planned exercise with its targets and the reasons it was picked."""

    exercise_id: str
    exercise_name: str
    category: ExerciseCategory
    equipment: Optional[str]
    reasoning: List[str]
    priority: float
    suggested_sets: int
    suggested_reps: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise_name,
            "category": self.category.value,
            "equipment": self.equipment,
            "reasoning": list(self.reasoning),
            "priority": round(self.priority, 4),
            "suggested_sets": self.suggested_sets,
            "suggested_reps": self.suggested_reps,
        }


@dataclass
class RecommendationOutput:
    """Today's plan."""

    workout_type: WorkoutType
    exercises: List[RecommendedExercise]
    reasoning: List[str]
    estimated_duration: int
    confidence: float

    @property
    def is_rest(self) -> bool:
        return self.workout_type == WorkoutType.REST

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workout_type": self.workout_type.value,
            "exercises": [e.to_dict() for e in self.exercises],
            "reasoning": list(self.reasoning),
            "estimated_duration": self.estimated_duration,
            "confidence": self.confidence,
        }


@dataclass
class EngineResult:
    """Everything one run produces: the plan plus display and model data."""

    output: RecommendationOutput
    coverage_top: List[MuscleCoverage]
    features: FeatureVector
    decision: WorkoutTypeDecision
    recoveries: List[MuscleRecoveryStatus] = field(default_factory=list)
    model_predictions: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendation": self.output.to_dict(),
            "muscle_coverage": [c.to_dict() for c in self.coverage_top],
            "features": self.features.to_dict(),
            "decision": self.decision.to_dict(),
            "model_predictions": self.model_predictions,
        }


def default_now(workouts: List[Workout]) -> datetime:
    """Current time, timezone-aware when the history is."""
    if any(w.date.tzinfo is not None for w in workouts):
        return datetime.now(timezone.utc)
    return datetime.now()


def align_now(now: datetime, workouts: List[Workout]) -> datetime:
    """
    Match ``now`` to the timezone awareness of the history.

    A naive ``now`` against aware workout dates is taken as UTC. An aware
    ``now`` against naive dates is converted to UTC and made naive.
    """
    if not workouts:
        return now
    history_aware = any(w.date.tzinfo is not None for w in workouts)
    if history_aware and now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    if not history_aware and now.tzinfo is not None:
        return now.astimezone(timezone.utc).replace(tzinfo=None)
    return now


def day_of_week_index(moment: datetime) -> int:
    """0-6 with Sunday = 0."""
    return (moment.weekday() + 1) % 7


def session_minutes(profile: Optional[UserFitnessProfile], settings: Settings) -> int:
    """Configured minutes per session, falling back to the settings default."""
    if profile is not None and profile.training_schedule is not None:
        return profile.training_schedule.time_per_session
    return settings.default_session_minutes


def recent_exercise_ids(history: List[Workout], workout_count: int) -> frozenset:
    """Exercise ids used in the most recent ``workout_count`` workouts."""
    return frozenset(
        exercise_id
        for workout in history[:workout_count]
        for exercise_id in workout.exercise_ids()
    )


def build_candidate_pool(
    workout_type: WorkoutType,
    catalog: List[Exercise],
    problems: List[Problem],
) -> List[Exercise]:
    """
    Exercises eligible for scoring today.

    A pt day with problem-matched exercises puts those first, followed by the
    rest of the catalog. Every other day (including pt without matches) keeps
    only exercises whose category equals the workout type.
    """
    if workout_type == WorkoutType.PT:
        problem_exercises = all_problem_exercises(problems, catalog)
        if problem_exercises:
            seen = {e.id for e in problem_exercises}
            return problem_exercises + [e for e in catalog if e.id not in seen]

    return [e for e in catalog if e.category.value == workout_type.value]


def build_exercise_reasoning(
    exercise: Exercise,
    recoveries: Mapping[str, MuscleRecoveryStatus],
    coverage: List[MuscleCoverage],
    problems: List[Problem],
    favorite_ids: frozenset,
) -> List[str]:
    """Reasons an exercise made the plan, in a fixed order."""
    notes = []

    for target in exercise.muscle_targets:
        recovery = recoveries.get(target.muscle.id)
        if recovery is None:
            continue
        if recovery.never_trained:
            notes.append(f"{target.muscle.name} hasn't been trained recently")
        elif recovery.is_recovered and recovery.hours_since_stimulus > RECOVERED_NOTE_HOURS:
            days = round_half_up(recovery.hours_since_stimulus / 24)
            notes.append(f"{target.muscle.name} recovered ({days} days since last training)")

    for problem in problems:
        if problem.is_active and exercise_targets_problem(exercise, problem):
            notes.append(f"Addresses {problem.name}")

    target_ids = {t.muscle.id for t in exercise.muscle_targets}
    gap = next((c for c in coverage if c.muscle_id in target_ids and c.is_undertrained), None)
    if gap is not None:
        notes.append(f"Fills gap in {gap.muscle_name} training")

    if exercise.id in favorite_ids:
        notes.append("Your favorite exercise")

    if not notes:
        notes.append(DEFAULT_EXERCISE_NOTE)
    return notes


def build_summary_reasoning(
    workout_type: WorkoutType,
    checkin: Optional[DailyCheckin],
    recoveries: List[MuscleRecoveryStatus],
    attention: List[MuscleCoverage],
    problems: List[Problem],
) -> List[str]:
    """Top-level reasons: type first, then energy, sleep, recovery, attention, problems."""
    reasoning = [f"Recommended {workout_type.value} workout based on recovery status and goals"]

    if checkin is not None and checkin.energy_level is not None:
        reasoning.append(f"Energy level: {checkin.energy_level.value}")

    if checkin is not None and checkin.hours_slept is not None:
        reasoning.append(f"Slept {checkin.hours_slept:g} hours")

    recovered = sum(1 for r in recoveries if r.is_recovered)
    if recovered:
        reasoning.append(f"{recovered} muscle groups are recovered and ready")

    if attention:
        reasoning.append(f"{len(attention)} muscles need attention (gaps or problems)")

    active = [p for p in problems if p.is_active]
    if active:
        reasoning.append(f"Addressing {len(active)} active problem(s)")

    return reasoning


def calculate_confidence(
    selected: int,
    target: int,
    has_checkin: bool,
    has_history: bool,
    has_profile: bool,
) -> float:
    """0.7 plus 0.1 per satisfied signal, capped at 1."""
    confidence = BASE_CONFIDENCE
    for signal in (selected >= target, has_checkin, has_history, has_profile):
        if signal:
            confidence += CONFIDENCE_STEP
    return round(min(1.0, confidence), 2)


class RecommendationEngine:
    """
    Builds the daily recommendation from a snapshot.

    Settings supply scoring weights and switches; an optional model registry
    receives the feature vector for shadow predictions, which are reported
    but never influence the plan.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        model_registry: Optional[ModelRegistry] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.model_registry = model_registry

    def generate(self, snapshot: EngineSnapshot, now: Optional[datetime] = None) -> EngineResult:
        """
        Generate today's recommendation.

        Args:
            snapshot: History, catalog, check-in and profile, read once
            now: Evaluation instant; the current time when omitted

        Returns:
            EngineResult with the plan, top coverage entries, feature vector
            and the workout-type decision
        """
        history = sort_workouts_newest_first(snapshot.workouts)
        if now is None:
            now = default_now(history)
        else:
            now = align_now(now, history)
        day_of_week = snapshot.day_of_week if snapshot.day_of_week is not None else day_of_week_index(now)

        checkin = snapshot.checkin
        profile = snapshot.profile
        catalog = snapshot.catalog
        problems = profile.active_problems() if profile is not None else []
        soreness_map = checkin.soreness_map if checkin is not None else None

        muscles = collect_muscles(catalog)
        last_stimulus = find_last_stimulus(history)
        recoveries = calculate_all_recoveries(muscles, last_stimulus, soreness_map, now)
        coverage = analyze_muscle_coverage(history, muscles, last_stimulus, now)
        attention = get_muscles_needing_attention(coverage, problems)

        last_type = history[0].workout_type if history else None
        decision = select_workout_type(day_of_week, checkin, recoveries, profile, last_type)
        logger.debug(f"Workout type {decision.workout_type.value} ({decision.rule.value}): {decision.reason}")

        features = extract_features(checkin, history, recoveries, coverage, profile, day_of_week, now)
        coverage_top = coverage[: self.settings.coverage_display_limit]
        predictions = self._shadow_predictions(features)

        if decision.is_rest:
            logger.info(f"Rest day recommended: {decision.reason}")
            output = RecommendationOutput(
                workout_type=WorkoutType.REST,
                exercises=[],
                reasoning=[REST_HEADLINE, REST_DETAILS.get(decision.rule, decision.reason)],
                estimated_duration=0,
                confidence=REST_CONFIDENCE,
            )
            return EngineResult(output, coverage_top, features, decision, recoveries, predictions)

        params = self._scoring_params(decision.workout_type, checkin, profile, problems, recoveries, coverage, history)
        pool = build_candidate_pool(decision.workout_type, catalog, problems)
        scored = filter_and_score(pool, params)

        duration = session_minutes(profile, self.settings)
        target_count = calculate_exercise_count(duration)
        selected = scored[:target_count]
        logger.debug(f"Scored {len(scored)} of {len(pool)} candidates, selected {len(selected)}")

        exercises = self._plan_exercises(selected, params, coverage, problems)
        output = RecommendationOutput(
            workout_type=decision.workout_type,
            exercises=exercises,
            reasoning=build_summary_reasoning(decision.workout_type, checkin, recoveries, attention, problems),
            estimated_duration=duration,
            confidence=calculate_confidence(
                selected=len(exercises),
                target=target_count,
                has_checkin=checkin is not None,
                has_history=bool(history),
                has_profile=profile is not None,
            ),
        )
        logger.info(
            f"Recommended {output.workout_type.value} workout with {len(exercises)} exercises "
            f"(confidence {output.confidence})"
        )
        return EngineResult(output, coverage_top, features, decision, recoveries, predictions)

    def _scoring_params(
        self,
        workout_type: WorkoutType,
        checkin: Optional[DailyCheckin],
        profile: Optional[UserFitnessProfile],
        problems: List[Problem],
        recoveries: List[MuscleRecoveryStatus],
        coverage: List[MuscleCoverage],
        history: List[Workout],
    ) -> ScoringParams:
        settings = self.settings
        return ScoringParams(
            recoveries={r.muscle_id: r for r in recoveries},
            soreness_map=checkin.soreness_map if checkin is not None else {},
            exclude_sore_muscles=settings.exclude_sore_muscles,
            goals=[g.value for g in profile.goals] if profile else [],
            goal_weights=dict(profile.goal_weights) if profile else {},
            problems=problems,
            problem_weight=settings.problem_weight,
            coverage={c.muscle_id: c for c in coverage},
            target_undertrained_muscles=settings.target_undertrained_muscles,
            favorite_exercise_ids=frozenset(profile.favorite_exercise_ids) if profile else frozenset(),
            avoid_exercise_ids=frozenset(profile.avoid_exercise_ids) if profile else frozenset(),
            preference_weight=settings.preference_weight,
            available_equipment=frozenset(profile.available_equipment) if profile else frozenset(),
            energy_level=checkin.energy_level if checkin is not None else None,
            time_available=checkin.time_available if checkin is not None else None,
            avoid_recent_exercises=settings.avoid_recent_exercises,
            recent_exercise_ids=recent_exercise_ids(history, settings.recent_workout_count),
            workout_type=workout_type,
        )

    def _plan_exercises(
        self,
        selected: List[ScoredExercise],
        params: ScoringParams,
        coverage: List[MuscleCoverage],
        problems: List[Problem],
    ) -> List[RecommendedExercise]:
        volume = calculate_volume(params.energy_level, params.time_available)
        favorites = frozenset(params.favorite_exercise_ids)
        planned = []
        for scored in selected:
            exercise = scored.exercise
            planned.append(RecommendedExercise(
                exercise_id=exercise.id,
                exercise_name=exercise.name,
                category=exercise.category,
                equipment=exercise.equipment,
                reasoning=build_exercise_reasoning(
                    exercise, params.recoveries, coverage, problems, favorites
                ),
                priority=scored.score,
                suggested_sets=volume.sets,
                suggested_reps=volume.reps,
            ))
        return planned

    def _shadow_predictions(self, features: FeatureVector) -> Dict[str, Dict[str, Any]]:
        """Predictions from registered models, keyed by model name."""
        if not self.model_registry:
            return {}
        predictions = {}
        for model in self.model_registry.all():
            predictions[model.name] = model.predict(features)
        return predictions


def generate_recommendation(
    workouts: List[Workout],
    catalog: List[Exercise],
    checkin: Optional[DailyCheckin] = None,
    profile: Optional[UserFitnessProfile] = None,
    day_of_week: Optional[int] = None,
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> EngineResult:
    """Convenience wrapper: build a snapshot from parts and run the engine."""
    snapshot = EngineSnapshot(
        workouts=workouts,
        catalog=catalog,
        checkin=checkin,
        profile=profile,
        day_of_week=day_of_week,
    )
    return RecommendationEngine(settings=settings).generate(snapshot, now=now)
