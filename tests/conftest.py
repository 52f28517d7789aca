"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta

import pytest

from workout_recommender.config import Settings
from workout_recommender.models import (
    DailyCheckin,
    Exercise,
    ExerciseCategory,
    Muscle,
    MuscleTarget,
    Workout,
    WorkoutSet,
)


# Wednesday, Sunday-based day index 3
NOW = datetime(2024, 3, 6, 9, 0)

MUSCLE_NAMES = [
    "Chest", "Shoulders", "Triceps",
    "Back", "Lats", "Biceps", "Rear Delts",
    "Quads", "Hamstrings", "Glutes", "Calves",
    "Lower Back", "Abs", "Forearms",
]


def muscle_id(name: str) -> str:
    return name.lower().replace(" ", "-")


@pytest.fixture
def now():
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def muscles():
    """Muscles by display name."""
    return {name: Muscle(id=muscle_id(name), name=name) for name in MUSCLE_NAMES}


@pytest.fixture
def make_exercise(muscles):
    """Factory: make_exercise(id, category, {"Chest": 0.7}, equipment=None)."""

    def _make(exercise_id, category, targets, equipment=None, name=None):
        return Exercise(
            id=exercise_id,
            name=name or exercise_id.replace("-", " ").title(),
            category=ExerciseCategory(category),
            equipment=equipment,
            muscle_targets=[
                MuscleTarget(muscle=muscles[m], weight=w) for m, w in targets.items()
            ],
        )

    return _make


@pytest.fixture
def catalog(make_exercise):
    """A small catalog covering every category the engine selects from."""
    return [
        make_exercise("bench-press", "push", {"Chest": 0.7, "Triceps": 0.2, "Shoulders": 0.1}, "barbell"),
        make_exercise("overhead-press", "push", {"Shoulders": 0.7, "Triceps": 0.3}, "barbell"),
        make_exercise("push-up", "push", {"Chest": 0.6, "Triceps": 0.3}),
        make_exercise("barbell-row", "pull", {"Back": 0.6, "Lats": 0.2, "Biceps": 0.2}, "barbell"),
        make_exercise("pull-up", "pull", {"Lats": 0.7, "Biceps": 0.3}),
        make_exercise("face-pull", "pull", {"Rear Delts": 0.8}, "cable"),
        make_exercise("squat", "legs", {"Quads": 0.6, "Glutes": 0.3, "Hamstrings": 0.1}, "barbell"),
        make_exercise("romanian-deadlift", "legs", {"Hamstrings": 0.6, "Glutes": 0.3, "Lower Back": 0.1}, "barbell"),
        make_exercise("calf-raise", "legs", {"Calves": 1.0}),
        make_exercise("bird-dog", "pt", {"Lower Back": 0.6, "Abs": 0.4}),
        make_exercise("wrist-curl", "pt", {"Forearms": 1.0}, "dumbbell"),
    ]


@pytest.fixture
def exercises(catalog):
    """Catalog exercises by id."""
    return {e.id: e for e in catalog}


@pytest.fixture
def make_workout():
    """Factory: make_workout(id, when, [(exercise, weight, reps), ...], type=None)."""

    def _make(workout_id, when, sets, type=None, user_id="u1"):
        return Workout(
            id=workout_id,
            user_id=user_id,
            date=when,
            type=type,
            sets=[
                WorkoutSet(exercise=exercise, set_number=i, weight=weight, reps=reps)
                for i, (exercise, weight, reps) in enumerate(sets, 1)
            ],
        )

    return _make


@pytest.fixture
def make_checkin(now):
    """Factory for today's check-in."""

    def _make(**fields):
        fields.setdefault("user_id", "u1")
        fields.setdefault("date", now.date())
        return DailyCheckin(**fields)

    return _make


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def days_ago(now):
    """Factory: instant ``days`` (and ``hours``) before now."""

    def _ago(days=0, hours=0):
        return now - timedelta(days=days, hours=hours)

    return _ago
