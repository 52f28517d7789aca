"""Rule-based daily workout recommendation engine."""

from .recovery import (
    Intensity,
    MuscleRecoveryStatus,
    calculate_muscle_recovery,
    calculate_all_recoveries,
    find_last_stimulus,
    get_recovery_hours,
)
from .coverage import (
    MuscleCoverage,
    analyze_muscle_coverage,
    get_muscles_needing_attention,
)
from .problems import (
    muscle_matches,
    exercises_for_problem,
    all_problem_exercises,
    create_problem_from_description,
)
from .scoring import ScoringParams, ScoredExercise, score_exercise, filter_and_score
from .volume import SuggestedVolume, calculate_exercise_count, calculate_volume, calculate_workout_duration
from .workout_type import DecisionRule, WorkoutTypeDecision, select_workout_type, rotate_push_pull_legs
from .features import FEATURE_VERSION, FeatureVector, TrainingExample, extract_features, prepare_training_data
from .registry import ModelRegistry, RecommendationModel
from .engine import (
    RecommendedExercise,
    RecommendationOutput,
    EngineResult,
    RecommendationEngine,
    generate_recommendation,
)

__all__ = [
    # Recovery
    "Intensity",
    "MuscleRecoveryStatus",
    "calculate_muscle_recovery",
    "calculate_all_recoveries",
    "find_last_stimulus",
    "get_recovery_hours",
    # Coverage
    "MuscleCoverage",
    "analyze_muscle_coverage",
    "get_muscles_needing_attention",
    # Problems
    "muscle_matches",
    "exercises_for_problem",
    "all_problem_exercises",
    "create_problem_from_description",
    # Scoring
    "ScoringParams",
    "ScoredExercise",
    "score_exercise",
    "filter_and_score",
    # Volume
    "SuggestedVolume",
    "calculate_exercise_count",
    "calculate_volume",
    "calculate_workout_duration",
    # Workout type
    "DecisionRule",
    "WorkoutTypeDecision",
    "select_workout_type",
    "rotate_push_pull_legs",
    # Features
    "FEATURE_VERSION",
    "FeatureVector",
    "TrainingExample",
    "extract_features",
    "prepare_training_data",
    # Registry
    "ModelRegistry",
    "RecommendationModel",
    # Engine
    "RecommendedExercise",
    "RecommendationOutput",
    "EngineResult",
    "RecommendationEngine",
    "generate_recommendation",
]
