"""
Workout Type Selection

Chooses today's session type (push, pull, legs, pt or rest). The decision is
re-evaluated every day from the active problems, today's check-in, the
profile and the previous session's type. First matching rule wins:

1. Any active problem with priority 4+: pt
2. Check-in rest triggers: soreness 4+, under 5 hours of sleep, or low
   energy together with sleep quality 2 or worse: rest
3. A pt goal or any active problem, on an even day-of-week index: pt
4. Push/pull/legs rotation when the profile uses that split, else push

Rotation (from the previous type, first ready group wins):
    push -> pull, legs, rest
    pull -> legs, push, rest
    legs -> push, pull, rest
A group is ready when one of its muscles can train and is fully recovered.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..models.checkin import DailyCheckin, EnergyLevel
from ..models.history import WorkoutType
from ..models.profile import FitnessGoal, SplitType, UserFitnessProfile
from .recovery import SEVERE_SORENESS, MuscleRecoveryStatus


HIGH_PRIORITY_PROBLEM = 4
MIN_HOURS_SLEPT = 5
POOR_SLEEP_QUALITY = 2

# Name fragments that place a muscle in a rotation group
PUSH_MUSCLES = ("chest", "shoulders", "triceps")
PULL_MUSCLES = ("back", "lats", "biceps", "rear delts")
LEG_MUSCLES = ("quads", "hamstrings", "glutes", "calves")

ROTATION_GROUPS: Dict[WorkoutType, Tuple[str, ...]] = {
    WorkoutType.PUSH: PUSH_MUSCLES,
    WorkoutType.PULL: PULL_MUSCLES,
    WorkoutType.LEGS: LEG_MUSCLES,
}

ROTATION_ORDER: Dict[WorkoutType, Tuple[WorkoutType, WorkoutType]] = {
    WorkoutType.PUSH: (WorkoutType.PULL, WorkoutType.LEGS),
    WorkoutType.PULL: (WorkoutType.LEGS, WorkoutType.PUSH),
    WorkoutType.LEGS: (WorkoutType.PUSH, WorkoutType.PULL),
}


class DecisionRule(str, Enum):
    """Which rule produced the workout type."""
    HIGH_PRIORITY_PROBLEM = "high_priority_problem"
    SEVERE_SORENESS = "severe_soreness"
    SHORT_SLEEP = "short_sleep"
    LOW_ENERGY_POOR_SLEEP = "low_energy_poor_sleep"
    PT_DAY = "pt_day"
    ROTATION_START = "rotation_start"
    ROTATION = "rotation"
    NO_GROUP_READY = "no_group_ready"
    DEFAULT = "default"


@dataclass
class WorkoutTypeDecision:
    """Selected workout type and the rule that selected it."""

    workout_type: WorkoutType
    rule: DecisionRule
    reason: str

    @property
    def is_rest(self) -> bool:
        return self.workout_type == WorkoutType.REST

    def to_dict(self) -> dict:
        return {
            "workout_type": self.workout_type.value,
            "rule": self.rule.value,
            "reason": self.reason,
        }


def group_is_ready(recoveries: List[MuscleRecoveryStatus], fragments: Tuple[str, ...]) -> bool:
    """True if any muscle whose name contains a fragment is ready to train."""
    for recovery in recoveries:
        name = recovery.muscle_name.lower()
        if any(fragment in name for fragment in fragments) and recovery.ready:
            return True
    return False


def rotate_push_pull_legs(
    last_workout_type: Optional[WorkoutType],
    recoveries: List[MuscleRecoveryStatus],
) -> WorkoutTypeDecision:
    """
    Next step of the push/pull/legs rotation.

    No previous type starts the rotation at push. A previous type outside the
    rotation (pt, rest) also restarts at push.
    """
    if last_workout_type is None:
        return WorkoutTypeDecision(
            WorkoutType.PUSH, DecisionRule.ROTATION_START, "Starting push/pull/legs rotation"
        )

    candidates = ROTATION_ORDER.get(last_workout_type)
    if candidates is None:
        return WorkoutTypeDecision(
            WorkoutType.PUSH,
            DecisionRule.ROTATION_START,
            f"Restarting rotation after {last_workout_type.value}",
        )

    for candidate in candidates:
        if group_is_ready(recoveries, ROTATION_GROUPS[candidate]):
            return WorkoutTypeDecision(
                candidate,
                DecisionRule.ROTATION,
                f"{candidate.value.title()} muscles are recovered after {last_workout_type.value}",
            )

    return WorkoutTypeDecision(
        WorkoutType.REST, DecisionRule.NO_GROUP_READY, "No muscle group is recovered enough to train"
    )


def uses_push_pull_legs(profile: Optional[UserFitnessProfile]) -> bool:
    """Push/pull/legs is the default split when no profile exists."""
    if profile is None:
        return True
    return SplitType.PUSH_PULL_LEGS in profile.preferred_splits


def check_rest_triggers(checkin: Optional[DailyCheckin]) -> Optional[WorkoutTypeDecision]:
    """Rest decision from the check-in, or None when no trigger fires."""
    if checkin is None:
        return None

    max_soreness = checkin.max_soreness
    if max_soreness is not None and max_soreness >= SEVERE_SORENESS:
        return WorkoutTypeDecision(
            WorkoutType.REST, DecisionRule.SEVERE_SORENESS, "High soreness reported"
        )

    if checkin.hours_slept is not None and checkin.hours_slept < MIN_HOURS_SLEPT:
        return WorkoutTypeDecision(
            WorkoutType.REST, DecisionRule.SHORT_SLEEP, f"Poor sleep (< {MIN_HOURS_SLEPT} hours)"
        )

    if (
        checkin.energy_level == EnergyLevel.LOW
        and checkin.sleep_quality is not None
        and checkin.sleep_quality <= POOR_SLEEP_QUALITY
    ):
        return WorkoutTypeDecision(
            WorkoutType.REST, DecisionRule.LOW_ENERGY_POOR_SLEEP, "Low energy and poor sleep quality"
        )

    return None


def select_workout_type(
    day_of_week: int,
    checkin: Optional[DailyCheckin],
    recoveries: List[MuscleRecoveryStatus],
    profile: Optional[UserFitnessProfile],
    last_workout_type: Optional[WorkoutType],
) -> WorkoutTypeDecision:
    """
    Decide today's workout type.

    Args:
        day_of_week: 0-6, Sunday = 0
        checkin: Today's check-in, if any
        recoveries: Recovery status of every known muscle
        profile: User profile, if any
        last_workout_type: Type of the most recent workout, if known

    Returns:
        WorkoutTypeDecision naming the type and the rule that fired
    """
    problems = profile.active_problems() if profile is not None else []

    urgent = [p for p in problems if p.priority >= HIGH_PRIORITY_PROBLEM]
    if urgent:
        return WorkoutTypeDecision(
            WorkoutType.PT,
            DecisionRule.HIGH_PRIORITY_PROBLEM,
            f"High-priority problem: {urgent[0].name}",
        )

    rest = check_rest_triggers(checkin)
    if rest is not None:
        return rest

    has_pt_goal = profile is not None and profile.has_goal(FitnessGoal.PT)
    if (has_pt_goal or problems) and day_of_week % 2 == 0:
        return WorkoutTypeDecision(WorkoutType.PT, DecisionRule.PT_DAY, "Scheduled physical therapy day")

    if uses_push_pull_legs(profile):
        return rotate_push_pull_legs(last_workout_type, recoveries)

    return WorkoutTypeDecision(WorkoutType.PUSH, DecisionRule.DEFAULT, "Default workout type")
