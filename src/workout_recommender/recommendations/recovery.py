"""
Muscle Recovery Model

Converts "time since last stimulus" plus self-reported soreness into a
per-muscle recovery status:
- Fixed expected recovery window per muscle (small 24-36h, medium 48-60h,
  large 72-96h)
- Soreness overrides (4+ vetoes training, 3 caps intensity at low)
- Elapsed-time progress through the window (<50% cannot train, 50-75% low)

Everything here is a pure function of a history snapshot and an injected
``now``; nothing reads the clock on its own.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..models.catalog import Muscle
from ..models.history import Workout


class Intensity(str, Enum):
    """Recommended training intensity for a muscle."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


# Recovery windows in hours, keyed by lower-cased muscle name
MUSCLE_RECOVERY_HOURS: Dict[str, float] = {
    # Small muscle groups
    "forearms": 24,
    "abs": 24,
    "biceps": 36,
    "triceps": 36,
    "calves": 36,

    # Medium muscle groups
    "traps": 48,
    "front delts": 48,
    "side delts": 48,
    "rear delts": 48,
    "shoulders": 60,

    # Large muscle groups
    "chest": 72,
    "back": 72,
    "upper back": 72,
    "lower back": 72,
    "lats": 72,
    "quads": 84,
    "hamstrings": 84,
    "glutes": 84,
}

DEFAULT_RECOVERY_HOURS = 48.0

# Soreness thresholds on the 0-5 scale
SEVERE_SORENESS = 4
MODERATE_SORENESS = 3
MILD_SORENESS = 2

# Fractions of the recovery window
NOT_READY_PROGRESS = 0.5
LIGHT_WORK_PROGRESS = 0.75


@dataclass
class MuscleRecoveryStatus:
    """Recovery state of one muscle at a point in time."""

    muscle_id: str
    muscle_name: str
    last_stimulus: Optional[datetime]
    hours_since_stimulus: float          # math.inf when never trained
    recovery_hours: float
    recovery_until: Optional[datetime]
    is_recovered: bool
    soreness_level: Optional[int]
    can_train: bool
    recommended_intensity: Intensity

    @property
    def never_trained(self) -> bool:
        return self.last_stimulus is None

    @property
    def days_since_stimulus(self) -> float:
        return self.hours_since_stimulus / 24

    @property
    def ready(self) -> bool:
        """Trainable and fully recovered."""
        return self.can_train and self.is_recovered

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary. Infinite durations serialize as None."""
        return {
            "muscle_id": self.muscle_id,
            "muscle_name": self.muscle_name,
            "last_stimulus": self.last_stimulus.isoformat() if self.last_stimulus else None,
            "hours_since_stimulus": finite_or_none(self.hours_since_stimulus),
            "recovery_hours": self.recovery_hours,
            "recovery_until": self.recovery_until.isoformat() if self.recovery_until else None,
            "is_recovered": self.is_recovered,
            "soreness_level": self.soreness_level,
            "can_train": self.can_train,
            "recommended_intensity": self.recommended_intensity.value,
        }


def finite_or_none(value: float) -> Optional[float]:
    """Round a finite float for output, mapping infinity to None."""
    if math.isinf(value):
        return None
    return round(value, 2)


def get_recovery_hours(muscle_name: str) -> float:
    """Expected recovery window for a muscle, defaulting to 48 hours."""
    return float(MUSCLE_RECOVERY_HOURS.get(muscle_name.strip().lower(), DEFAULT_RECOVERY_HOURS))


def hours_since(instant: Optional[datetime], now: datetime) -> float:
    """Hours elapsed from ``instant`` to ``now``; infinite when never."""
    if instant is None:
        return math.inf
    return (now - instant).total_seconds() / 3600


def lookup_soreness(soreness_map: Optional[Mapping[str, int]], muscle_name: str) -> Optional[int]:
    """
    Find the reported soreness for a muscle.

    Check-in keys are muscle display names. An exact key wins; otherwise the
    first key equal ignoring case is used.
    """
    if not soreness_map:
        return None
    if muscle_name in soreness_map:
        return soreness_map[muscle_name]
    wanted = muscle_name.strip().lower()
    for name, level in soreness_map.items():
        if name.strip().lower() == wanted:
            return level
    return None


def calculate_muscle_recovery(
    muscle: Muscle,
    last_stimulus: Optional[datetime],
    soreness_map: Optional[Mapping[str, int]],
    now: datetime,
) -> MuscleRecoveryStatus:
    """
    Calculate the recovery status of one muscle.

    Rules:
    1. Never stimulated, or a full window elapsed: recovered
    2. Soreness 4+: cannot train, regardless of elapsed time
    3. Soreness 3: low intensity
    4. Less than 50% of the window elapsed: cannot train
    5. 50-75% of the window elapsed: low intensity
    6. Two full windows elapsed with no meaningful soreness: high intensity

    Args:
        muscle: Muscle to evaluate
        last_stimulus: Most recent session that loaded this muscle, or None
        soreness_map: Today's soreness by muscle name, or None without a check-in
        now: Evaluation instant

    Returns:
        MuscleRecoveryStatus for the muscle
    """
    recovery_hours = get_recovery_hours(muscle.name)
    elapsed = hours_since(last_stimulus, now)
    soreness = lookup_soreness(soreness_map, muscle.name)

    is_recovered = last_stimulus is None or elapsed >= recovery_hours
    recovery_until = (
        last_stimulus + timedelta(hours=recovery_hours) if last_stimulus is not None else None
    )

    can_train = True
    intensity = Intensity.NORMAL

    if last_stimulus is not None and elapsed < recovery_hours:
        progress = elapsed / recovery_hours
        if progress < NOT_READY_PROGRESS:
            can_train = False
        elif progress < LIGHT_WORK_PROGRESS:
            intensity = Intensity.LOW

    if soreness is not None:
        if soreness >= SEVERE_SORENESS:
            can_train = False
        elif soreness >= MODERATE_SORENESS:
            intensity = Intensity.LOW

    if (
        can_train
        and intensity == Intensity.NORMAL
        and last_stimulus is not None
        and elapsed >= 2 * recovery_hours
        and (soreness is None or soreness < MILD_SORENESS)
    ):
        intensity = Intensity.HIGH

    return MuscleRecoveryStatus(
        muscle_id=muscle.id,
        muscle_name=muscle.name,
        last_stimulus=last_stimulus,
        hours_since_stimulus=elapsed,
        recovery_hours=recovery_hours,
        recovery_until=recovery_until,
        is_recovered=is_recovered,
        soreness_level=soreness,
        can_train=can_train,
        recommended_intensity=intensity,
    )


def extract_muscle_stimulus(workout: Workout) -> Dict[str, float]:
    """
    Total stimulus per muscle id for one workout.

    Stimulus of a set on a muscle is ``weight x reps x target weight``.
    Muscles targeted only by zero-load sets appear with 0.0.
    """
    stimulus: Dict[str, float] = {}
    for workout_set in workout.sets:
        volume = workout_set.weight * workout_set.reps
        for target in workout_set.exercise.muscle_targets:
            muscle_id = target.muscle.id
            stimulus[muscle_id] = stimulus.get(muscle_id, 0.0) + volume * target.weight
    return stimulus


def find_last_stimulus(workouts: List[Workout]) -> Dict[str, datetime]:
    """
    Most recent stimulus instant per muscle id.

    Scans the whole history rather than the last N sessions, so rarely
    trained muscles keep an accurate recovery clock. Only sessions that put
    nonzero stimulus on a muscle count.
    """
    last: Dict[str, datetime] = {}
    for workout in workouts:
        for muscle_id, stimulus in extract_muscle_stimulus(workout).items():
            if stimulus <= 0:
                continue
            previous = last.get(muscle_id)
            if previous is None or workout.date > previous:
                last[muscle_id] = workout.date
    return last


def calculate_all_recoveries(
    muscles: List[Muscle],
    last_stimulus: Mapping[str, datetime],
    soreness_map: Optional[Mapping[str, int]],
    now: datetime,
) -> List[MuscleRecoveryStatus]:
    """Recovery status for every muscle, in the order given."""
    return [
        calculate_muscle_recovery(muscle, last_stimulus.get(muscle.id), soreness_map, now)
        for muscle in muscles
    ]
