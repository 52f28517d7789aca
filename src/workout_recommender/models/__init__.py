"""Boundary data models for the workout recommender."""

from .catalog import (
    MuscleGroup,
    ExerciseCategory,
    Muscle,
    MuscleTarget,
    Exercise,
    infer_muscle_group,
    collect_muscles,
)
from .history import WorkoutType, Effort, WorkoutSet, Workout, sort_workouts_newest_first
from .checkin import EnergyLevel, TimeAvailable, DailyCheckin
from .profile import (
    FitnessGoal,
    SplitType,
    ProblemType,
    Problem,
    TrainingSchedule,
    UserFitnessProfile,
)
from .recommendation import Feedback, Recommendation
from .snapshot import EngineSnapshot, load_snapshot

__all__ = [
    "MuscleGroup",
    "ExerciseCategory",
    "Muscle",
    "MuscleTarget",
    "Exercise",
    "infer_muscle_group",
    "collect_muscles",
    "WorkoutType",
    "Effort",
    "WorkoutSet",
    "Workout",
    "sort_workouts_newest_first",
    "EnergyLevel",
    "TimeAvailable",
    "DailyCheckin",
    "FitnessGoal",
    "SplitType",
    "ProblemType",
    "Problem",
    "TrainingSchedule",
    "UserFitnessProfile",
    "Feedback",
    "Recommendation",
    "EngineSnapshot",
    "load_snapshot",
]
