"""User fitness profile: goals, tracked problems, preferences and equipment."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field

from .base import CamelModel


class FitnessGoal(str, Enum):
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"
    PT = "pt"
    INJURY_PREVENTION = "injury_prevention"
    ATHLETIC_PERFORMANCE = "athletic_performance"
    GENERAL_FITNESS = "general_fitness"


class SplitType(str, Enum):
    PUSH_PULL_LEGS = "push_pull_legs"
    UPPER_LOWER = "upper_lower"
    FULL_BODY = "full_body"
    PT_FOCUSED = "pt_focused"
    CUSTOM = "custom"


class ProblemType(str, Enum):
    INJURY = "injury"
    CONDITION = "condition"
    IMBALANCE = "imbalance"
    WEAKNESS = "weakness"


class Problem(CamelModel):
    """A tracked injury, condition, imbalance or weakness."""

    id: Optional[str] = None
    type: ProblemType
    name: str = Field(..., description="e.g. 'wrist pain', 'lower back pain'")
    description: Optional[str] = None
    affected_muscles: List[str] = Field(
        default_factory=list,
        description="Free-text muscle name fragments, matched by substring",
    )
    recommended_exercise_ids: List[str] = Field(default_factory=list)
    priority: int = Field(3, ge=1, le=5, description="1-5, higher = more urgent")
    is_active: bool = True


class TrainingSchedule(CamelModel):
    days_per_week: int = Field(3, ge=0, le=7)
    preferred_days: List[int] = Field(default_factory=list, description="0-6, Sunday = 0")
    time_per_session: int = Field(45, gt=0, description="Minutes per session")


class UserFitnessProfile(CamelModel):
    """Everything the engine knows about the user's intent and constraints."""

    goals: List[FitnessGoal] = Field(default_factory=list)
    goal_weights: Dict[str, float] = Field(default_factory=dict)
    problems: List[Problem] = Field(default_factory=list)
    preferred_splits: List[SplitType] = Field(default_factory=list)
    favorite_exercise_ids: List[str] = Field(default_factory=list)
    avoid_exercise_ids: List[str] = Field(default_factory=list)
    available_equipment: List[str] = Field(default_factory=list)
    training_schedule: Optional[TrainingSchedule] = None

    def active_problems(self) -> List[Problem]:
        return [p for p in self.problems if p.is_active]

    def has_goal(self, goal: FitnessGoal) -> bool:
        return goal in self.goals
