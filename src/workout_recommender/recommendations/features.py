"""
Feature Extraction

Projects one recommendation run onto a flat, versioned feature vector that a
future learned model can consume. Extraction is a pure function of the
snapshot and ``now``: identical inputs serialize to identical bytes.

The vector is recorded alongside each recommendation. It is never fed back
into scoring.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..models.checkin import DailyCheckin
from ..models.history import Workout, sort_workouts_newest_first
from ..models.profile import UserFitnessProfile
from ..models.recommendation import Recommendation
from .coverage import LONG_WINDOW_HOURS, SHORT_WINDOW_HOURS, MuscleCoverage, summarize_coverage
from .recovery import MuscleRecoveryStatus, finite_or_none, hours_since


FEATURE_VERSION = "1.0"

HIGH_PRIORITY_PROBLEM = 4


@dataclass
class FeatureVector:
    """Model-ready snapshot of the inputs behind one recommendation."""

    version: str

    # Recovery
    muscle_recoveries: List[Dict[str, Any]] = field(default_factory=list)

    # Check-in
    checkin: Dict[str, Any] = field(default_factory=dict)

    # Coverage
    muscle_coverage: List[Dict[str, Any]] = field(default_factory=list)
    undertrained_muscle_count: int = 0
    avg_stimulus_7d: float = 0.0
    avg_stimulus_30d: float = 0.0

    # Goals
    goals: List[str] = field(default_factory=list)
    goal_weights: Dict[str, float] = field(default_factory=dict)

    # Problems
    problems: List[Dict[str, Any]] = field(default_factory=list)
    active_problem_count: int = 0
    high_priority_problem_count: int = 0

    # History
    workout_count_7d: int = 0
    workout_count_30d: int = 0
    last_workout_type: Optional[str] = None
    hours_since_last_workout: float = 0.0

    # Temporal
    day_of_week: int = 0
    hour_of_day: int = 0

    # Profile
    preferred_splits: List[str] = field(default_factory=list)
    available_equipment: List[str] = field(default_factory=list)
    favorite_exercise_count: int = 0
    avoid_exercise_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "muscle_recoveries": self.muscle_recoveries,
            "checkin": self.checkin,
            "muscle_coverage": self.muscle_coverage,
            "undertrained_muscle_count": self.undertrained_muscle_count,
            "avg_stimulus_7d": round(self.avg_stimulus_7d, 4),
            "avg_stimulus_30d": round(self.avg_stimulus_30d, 4),
            "goals": self.goals,
            "goal_weights": self.goal_weights,
            "problems": self.problems,
            "active_problem_count": self.active_problem_count,
            "high_priority_problem_count": self.high_priority_problem_count,
            "workout_count_7d": self.workout_count_7d,
            "workout_count_30d": self.workout_count_30d,
            "last_workout_type": self.last_workout_type,
            "hours_since_last_workout": round(self.hours_since_last_workout, 4),
            "day_of_week": self.day_of_week,
            "hour_of_day": self.hour_of_day,
            "preferred_splits": self.preferred_splits,
            "available_equipment": self.available_equipment,
            "favorite_exercise_count": self.favorite_exercise_count,
            "avoid_exercise_count": self.avoid_exercise_count,
        }

    def to_json(self) -> str:
        """Canonical JSON: sorted keys, no incidental whitespace."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def _checkin_features(checkin: Optional[DailyCheckin]) -> Dict[str, Any]:
    if checkin is None:
        return {
            "hours_slept": None,
            "sleep_quality": None,
            "energy_level": None,
            "avg_soreness": None,
            "time_available": None,
        }
    return {
        "hours_slept": checkin.hours_slept,
        "sleep_quality": checkin.sleep_quality,
        "energy_level": checkin.energy_level.value if checkin.energy_level else None,
        "avg_soreness": checkin.avg_soreness,
        "time_available": checkin.time_available.value if checkin.time_available else None,
    }


def _count_since(workouts: List[Workout], cutoff: datetime) -> int:
    return sum(1 for w in workouts if w.date >= cutoff)


def extract_features(
    checkin: Optional[DailyCheckin],
    workouts: List[Workout],
    recoveries: List[MuscleRecoveryStatus],
    coverage: List[MuscleCoverage],
    profile: Optional[UserFitnessProfile],
    day_of_week: int,
    now: datetime,
) -> FeatureVector:
    """
    Build the feature vector for one run.

    Args:
        checkin: Today's check-in, if any
        workouts: Full workout history (any order)
        recoveries: Recovery status per muscle, as computed for this run
        coverage: Coverage per muscle, as computed for this run
        profile: User profile, if any
        day_of_week: 0-6, Sunday = 0
        now: Evaluation instant

    Returns:
        FeatureVector tagged with FEATURE_VERSION
    """
    history = sort_workouts_newest_first(workouts)
    last_workout = history[0] if history else None
    since_last = hours_since(last_workout.date if last_workout else None, now)

    summary = summarize_coverage(coverage)
    active_problems = profile.active_problems() if profile is not None else []

    return FeatureVector(
        version=FEATURE_VERSION,
        muscle_recoveries=[
            {
                "muscle_id": r.muscle_id,
                "hours_since_stimulus": finite_or_none(r.hours_since_stimulus),
                "is_recovered": r.is_recovered,
                "soreness_level": r.soreness_level,
                "can_train": r.can_train,
            }
            for r in recoveries
        ],
        checkin=_checkin_features(checkin),
        muscle_coverage=[c.to_dict() for c in coverage],
        undertrained_muscle_count=int(summary["undertrained_count"]),
        avg_stimulus_7d=summary["avg_stimulus_7d"],
        avg_stimulus_30d=summary["avg_stimulus_30d"],
        goals=[g.value for g in profile.goals] if profile else [],
        goal_weights=dict(sorted(profile.goal_weights.items())) if profile else {},
        problems=[
            {
                "type": p.type.value,
                "priority": p.priority,
                "affected_muscle_count": len(p.affected_muscles),
            }
            for p in active_problems
        ],
        active_problem_count=len(active_problems),
        high_priority_problem_count=sum(
            1 for p in active_problems if p.priority >= HIGH_PRIORITY_PROBLEM
        ),
        workout_count_7d=_count_since(history, now - timedelta(hours=SHORT_WINDOW_HOURS)),
        workout_count_30d=_count_since(history, now - timedelta(hours=LONG_WINDOW_HOURS)),
        last_workout_type=last_workout.type if last_workout else None,
        # No history reports 0 rather than infinity
        hours_since_last_workout=since_last if last_workout else 0.0,
        day_of_week=day_of_week,
        hour_of_day=now.hour,
        preferred_splits=[s.value for s in profile.preferred_splits] if profile else [],
        available_equipment=list(profile.available_equipment) if profile else [],
        favorite_exercise_count=len(profile.favorite_exercise_ids) if profile else 0,
        avoid_exercise_count=len(profile.avoid_exercise_ids) if profile else 0,
    )


@dataclass
class TrainingExample:
    """One labelled example: the features seen at generation time and the outcome."""

    recommendation_id: str
    features: Dict[str, Any]
    workout_type: str
    exercise_ids: List[str]
    sets: List[int]
    reps: List[int]
    feedback: Optional[str]

    @property
    def label(self) -> Optional[int]:
        """1 for positive feedback, 0 for negative, None when unlabelled."""
        if self.feedback is None:
            return None
        return 1 if self.feedback == "positive" else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendation_id": self.recommendation_id,
            "features": self.features,
            "workout_type": self.workout_type,
            "exercise_ids": self.exercise_ids,
            "sets": self.sets,
            "reps": self.reps,
            "feedback": self.feedback,
            "label": self.label,
        }


def prepare_training_data(
    recommendations: List[Recommendation],
    labelled_only: bool = True,
) -> List[TrainingExample]:
    """
    Turn stored recommendations into training examples.

    Recommendations without a stored feature vector are skipped. By default
    only recommendations that received feedback are returned.

    Args:
        recommendations: Persisted recommendations, in any order
        labelled_only: Drop recommendations without feedback

    Returns:
        TrainingExample list ordered by recommendation date, then id
    """
    examples = []
    for rec in sorted(recommendations, key=lambda r: (r.date, r.id)):
        if rec.features is None:
            continue
        if labelled_only and rec.feedback is None:
            continue
        examples.append(TrainingExample(
            recommendation_id=rec.id,
            features=rec.features,
            workout_type=rec.workout_type.value,
            exercise_ids=[e.get("exercise_id") for e in rec.exercises],
            sets=[e.get("suggested_sets", 0) for e in rec.exercises],
            reps=[e.get("suggested_reps", 0) for e in rec.exercises],
            feedback=rec.feedback.value if rec.feedback else None,
        ))
    return examples
