"""Training history models: workouts and their logged sets."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .catalog import Exercise


class WorkoutType(str, Enum):
    """Session type chosen by the daily recommendation.

    The transition table of the workout-type selector is exhaustive over
    these values.
    """
    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    PT = "pt"
    REST = "rest"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["WorkoutType"]:
        """Parse a stored type label, returning None for unknown labels."""
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Effort(str, Enum):
    """Coarse self-reported exertion for a set."""
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class WorkoutSet(CamelModel):
    """A single logged set, carrying the exercise and its muscle targets."""

    exercise: Exercise
    set_number: int = Field(1, ge=1)
    weight: float = Field(0.0, ge=0, description="Load lifted")
    reps: int = Field(0, ge=0)
    effort: Optional[Effort] = None
    rest_seconds: Optional[int] = Field(None, ge=0)

    @property
    def exercise_id(self) -> str:
        return self.exercise.id


class Workout(CamelModel):
    """A training session.

    Created when a session starts and updated when it finishes; the engine
    only ever reads it.
    """

    id: str
    user_id: str
    date: datetime = Field(..., description="Session start time")
    type: Optional[str] = Field(None, description="Stored session label, e.g. 'push'")
    sets: List[WorkoutSet] = Field(default_factory=list)
    duration_minutes: Optional[int] = Field(None, ge=0, alias="duration")
    notes: Optional[str] = None

    @property
    def workout_type(self) -> Optional[WorkoutType]:
        """The stored label as a WorkoutType, or None when absent/unknown."""
        return WorkoutType.parse(self.type)

    def exercise_ids(self) -> List[str]:
        """Exercise ids in set order (duplicates kept)."""
        return [s.exercise_id for s in self.sets]


def sort_workouts_newest_first(workouts: List[Workout]) -> List[Workout]:
    """Return workouts ordered by date, most recent first."""
    return sorted(workouts, key=lambda w: w.date, reverse=True)
