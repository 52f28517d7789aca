"""
Daily training metrics.

Summarizes one user's day: volume lifted, average effort, muscles hit and
the check-in's sleep/soreness fields. Pure computation over the workouts and
check-in passed in; storing the result is up to the caller.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterator, List, Optional

from ..models.checkin import DailyCheckin
from ..models.history import Effort, Workout


# Effort labels as numbers
EFFORT_SCORES = {
    Effort.EASY: 1,
    Effort.NORMAL: 2,
    Effort.HARD: 3,
}


@dataclass
class DailyMetrics:
    """Aggregated metrics for one user on one day."""

    user_id: str
    date: date
    total_volume: Optional[float] = None
    avg_intensity: Optional[float] = None
    workout_count: int = 0
    muscle_groups_hit: List[str] = field(default_factory=list)
    avg_soreness: Optional[float] = None
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[int] = None
    energy_level: Optional[str] = None

    @property
    def trained(self) -> bool:
        return self.workout_count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "total_volume": self.total_volume,
            "avg_intensity": self.avg_intensity,
            "workout_count": self.workout_count,
            "muscle_groups_hit": self.muscle_groups_hit,
            "avg_soreness": self.avg_soreness,
            "sleep_hours": self.sleep_hours,
            "sleep_quality": self.sleep_quality,
            "energy_level": self.energy_level,
        }


def calculate_total_volume(workout: Workout) -> float:
    """Sum of weight x reps over every set."""
    return sum(s.weight * s.reps for s in workout.sets)


def calculate_avg_intensity(workout: Workout) -> Optional[float]:
    """Mean effort score over sets with an effort label, or None."""
    scores = [EFFORT_SCORES[s.effort] for s in workout.sets if s.effort is not None]
    if not scores:
        return None
    return sum(scores) / len(scores)


def extract_muscle_names(workout: Workout) -> List[str]:
    """Distinct muscle names targeted by the workout, in first-seen order."""
    names: Dict[str, None] = {}
    for workout_set in workout.sets:
        for target in workout_set.exercise.muscle_targets:
            names.setdefault(target.muscle.name, None)
    return list(names)


def calculate_daily_metrics(
    user_id: str,
    day: date,
    workouts: List[Workout],
    checkin: Optional[DailyCheckin] = None,
) -> DailyMetrics:
    """
    Calculate metrics for one calendar day.

    Args:
        user_id: The user identifier
        day: Calendar day to summarize
        workouts: Workouts to consider; only this user's workouts on ``day`` count
        checkin: The check-in for ``day``, if any

    Returns:
        DailyMetrics for the day (volume is None when nothing was lifted)
    """
    todays = [w for w in workouts if w.user_id == user_id and w.date.date() == day]

    total_volume = 0.0
    intensities = []
    muscles: Dict[str, None] = {}
    for workout in todays:
        total_volume += calculate_total_volume(workout)
        intensity = calculate_avg_intensity(workout)
        if intensity is not None:
            intensities.append(intensity)
        for name in extract_muscle_names(workout):
            muscles.setdefault(name, None)

    return DailyMetrics(
        user_id=user_id,
        date=day,
        total_volume=total_volume if total_volume > 0 else None,
        avg_intensity=sum(intensities) / len(intensities) if intensities else None,
        workout_count=len(todays),
        muscle_groups_hit=list(muscles),
        avg_soreness=checkin.avg_soreness if checkin else None,
        sleep_hours=checkin.hours_slept if checkin else None,
        sleep_quality=checkin.sleep_quality if checkin else None,
        energy_level=checkin.energy_level.value if checkin and checkin.energy_level else None,
    )


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def calculate_metrics_for_range(
    user_id: str,
    start: date,
    end: date,
    workouts: List[Workout],
    checkins: Optional[List[DailyCheckin]] = None,
) -> List[DailyMetrics]:
    """Daily metrics for each day in an inclusive range."""
    by_day = {c.date: c for c in (checkins or []) if c.user_id == user_id}
    return [
        calculate_daily_metrics(user_id, day, workouts, by_day.get(day))
        for day in iter_days(start, end)
    ]
