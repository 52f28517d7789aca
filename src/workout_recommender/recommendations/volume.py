"""Session sizing: exercise count, sets/reps and workout duration."""

import math
from dataclasses import dataclass
from typing import Dict, Optional

from ..models.checkin import EnergyLevel, TimeAvailable


MIN_EXERCISES = 3
MAX_EXERCISES = 8
MINUTES_PER_EXERCISE = 10

BASE_SETS = 3
BASE_REPS = 10
MIN_SETS = 2
MIN_REPS = 8


@dataclass
class SuggestedVolume:
    sets: int
    reps: int

    def to_dict(self) -> Dict[str, int]:
        return {"sets": self.sets, "reps": self.reps}


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (45 / 10 -> 5)."""
    return int(math.floor(value + 0.5))


def calculate_exercise_count(duration_minutes: float) -> int:
    """Exercises that fit a session, about ten minutes each including rest."""
    count = round_half_up(duration_minutes / MINUTES_PER_EXERCISE)
    return max(MIN_EXERCISES, min(MAX_EXERCISES, count))


def calculate_volume(
    energy_level: Optional[EnergyLevel],
    time_available: Optional[TimeAvailable],
) -> SuggestedVolume:
    """
    Suggested sets x reps per exercise.

    Energy sets the base (low 2x8, normal 3x10, high 4x12); time then adjusts
    it (short: -1 set, -2 reps with floors 2 and 8; long: +1 set, +2 reps).
    """
    sets, reps = BASE_SETS, BASE_REPS

    if energy_level == EnergyLevel.LOW:
        sets, reps = 2, 8
    elif energy_level == EnergyLevel.HIGH:
        sets, reps = 4, 12

    if time_available == TimeAvailable.SHORT:
        sets = max(MIN_SETS, sets - 1)
        reps = max(MIN_REPS, reps - 2)
    elif time_available == TimeAvailable.LONG:
        sets += 1
        reps += 2

    return SuggestedVolume(sets=sets, reps=reps)


def calculate_workout_duration(
    time_available: Optional[TimeAvailable],
    energy_level: Optional[EnergyLevel],
) -> int:
    """
    Session length in minutes from the check-in.

    Used by the surrounding application when sizing a session from a check-in
    alone; the recommendation itself uses the configured minutes per session.
    """
    duration = 45.0
    if time_available == TimeAvailable.SHORT:
        duration = 30.0
    elif time_available == TimeAvailable.LONG:
        duration = 60.0

    if energy_level == EnergyLevel.LOW:
        duration = max(20.0, duration * 0.7)
    elif energy_level == EnergyLevel.HIGH:
        duration = min(90.0, duration * 1.2)

    return round_half_up(duration)
