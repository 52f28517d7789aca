"""
Muscle Coverage Analysis

Aggregates training stimulus per muscle over trailing 7- and 30-day windows
and flags muscles that are falling behind:
- Undertrained: 30-day stimulus below half the average of trained muscles,
  or nothing in the last 7 days
- Priority (0-1): how urgently a muscle should be filled in today
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from ..models.catalog import Muscle
from ..models.history import Workout
from ..models.profile import Problem
from .problems import muscle_matches
from .recovery import extract_muscle_stimulus, finite_or_none, hours_since


SHORT_WINDOW_HOURS = 7 * 24
LONG_WINDOW_HOURS = 30 * 24
NEGLECTED_HOURS = 14 * 24
RECENTLY_TRAINED_HOURS = 48

UNDERTRAINED_FRACTION = 0.5      # of the mean 30-day stimulus
TARGET_MULTIPLIER = 1.5          # recommended stimulus, relative to threshold

BASE_PRIORITY = 0.5
UNDERTRAINED_BOOST = 0.3
NEGLECTED_BOOST = 0.2
RECENT_PENALTY = 0.3

ATTENTION_PRIORITY = 0.7


@dataclass
class MuscleCoverage:
    """Training coverage of one muscle over the trailing windows."""

    muscle_id: str
    muscle_name: str
    last_stimulus: Optional[datetime]
    hours_since_stimulus: float          # math.inf when never trained
    stimulus_7d: float
    stimulus_30d: float
    is_undertrained: bool
    recommended_stimulus: float
    gap: float
    priority: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "muscle_id": self.muscle_id,
            "muscle_name": self.muscle_name,
            "last_stimulus": self.last_stimulus.isoformat() if self.last_stimulus else None,
            "hours_since_stimulus": finite_or_none(self.hours_since_stimulus),
            "stimulus_7d": round(self.stimulus_7d, 2),
            "stimulus_30d": round(self.stimulus_30d, 2),
            "is_undertrained": self.is_undertrained,
            "recommended_stimulus": round(self.recommended_stimulus, 2),
            "gap": round(self.gap, 2),
            "priority": round(self.priority, 3),
        }


def calculate_muscle_stimulus(
    workouts: List[Workout],
    hours_window: float,
    now: datetime,
) -> Dict[str, float]:
    """
    Summed stimulus per muscle id for workouts inside a trailing window.

    Workouts dated before ``now - hours_window`` are excluded.
    """
    cutoff = now - timedelta(hours=hours_window)
    totals: Dict[str, float] = {}
    for workout in workouts:
        if workout.date < cutoff:
            continue
        for muscle_id, stimulus in extract_muscle_stimulus(workout).items():
            totals[muscle_id] = totals.get(muscle_id, 0.0) + stimulus
    return totals


def undertrained_threshold(stimulus_30d: Mapping[str, float]) -> float:
    """
    Half the mean 30-day stimulus across muscles that received any.

    With no trained muscles the threshold is 0, so only the 7-day silence
    rule can flag a muscle.
    """
    trained = [value for value in stimulus_30d.values() if value > 0]
    if not trained:
        return 0.0
    return UNDERTRAINED_FRACTION * (sum(trained) / len(trained))


def coverage_priority(is_undertrained: bool, hours_since_stimulus: float) -> float:
    """Fill-gap priority in [0, 1]."""
    priority = BASE_PRIORITY
    if is_undertrained:
        priority += UNDERTRAINED_BOOST
    if hours_since_stimulus >= NEGLECTED_HOURS:
        priority += NEGLECTED_BOOST
    if hours_since_stimulus < RECENTLY_TRAINED_HOURS:
        priority -= RECENT_PENALTY
    return max(0.0, min(1.0, priority))


def analyze_muscle_coverage(
    workouts: List[Workout],
    muscles: List[Muscle],
    last_stimulus: Mapping[str, datetime],
    now: datetime,
) -> List[MuscleCoverage]:
    """
    Analyze coverage for every muscle and rank by fill-gap priority.

    Args:
        workouts: Full workout history snapshot
        muscles: Every muscle to report on
        last_stimulus: Most recent stimulus instant per muscle id
        now: Evaluation instant

    Returns:
        MuscleCoverage list, highest priority first (ties keep muscle order)
    """
    stimulus_7d = calculate_muscle_stimulus(workouts, SHORT_WINDOW_HOURS, now)
    stimulus_30d = calculate_muscle_stimulus(workouts, LONG_WINDOW_HOURS, now)
    threshold = undertrained_threshold(stimulus_30d)
    recommended = threshold * TARGET_MULTIPLIER

    coverage = []
    for muscle in muscles:
        last = last_stimulus.get(muscle.id)
        elapsed = hours_since(last, now)
        volume_7d = stimulus_7d.get(muscle.id, 0.0)
        volume_30d = stimulus_30d.get(muscle.id, 0.0)

        is_undertrained = volume_30d < threshold or elapsed > SHORT_WINDOW_HOURS

        coverage.append(MuscleCoverage(
            muscle_id=muscle.id,
            muscle_name=muscle.name,
            last_stimulus=last,
            hours_since_stimulus=elapsed,
            stimulus_7d=volume_7d,
            stimulus_30d=volume_30d,
            is_undertrained=is_undertrained,
            recommended_stimulus=recommended,
            gap=max(0.0, recommended - volume_30d),
            priority=coverage_priority(is_undertrained, elapsed),
        ))

    return sorted(coverage, key=lambda c: -c.priority)


def get_muscles_needing_attention(
    coverage: List[MuscleCoverage],
    problems: List[Problem],
) -> List[MuscleCoverage]:
    """
    Muscles that deserve attention today.

    A muscle qualifies if it is undertrained, named by an active problem, or
    has a fill-gap priority above 0.7.
    """
    affected = [m for p in problems if p.is_active for m in p.affected_muscles]
    result = []
    for entry in coverage:
        if (
            entry.is_undertrained
            or entry.priority > ATTENTION_PRIORITY
            or any(muscle_matches(entry.muscle_name, a) for a in affected)
        ):
            result.append(entry)
    return result


def summarize_coverage(coverage: List[MuscleCoverage]) -> Dict[str, float]:
    """Average window stimulus and undertrained count across all muscles."""
    if not coverage:
        return {"undertrained_count": 0, "avg_stimulus_7d": 0.0, "avg_stimulus_30d": 0.0}
    return {
        "undertrained_count": sum(1 for c in coverage if c.is_undertrained),
        "avg_stimulus_7d": math.fsum(c.stimulus_7d for c in coverage) / len(coverage),
        "avg_stimulus_30d": math.fsum(c.stimulus_30d for c in coverage) / len(coverage),
    }
