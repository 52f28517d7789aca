"""Exercise catalog reference data: muscles, exercises and their muscle targets."""

from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from .base import FrozenCamelModel


# =============================================================================
# Enums
# =============================================================================

class MuscleGroup(str, Enum):
    """Coarse body region a muscle belongs to."""
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    LEGS = "legs"
    CORE = "core"


class ExerciseCategory(str, Enum):
    """Catalog category of an exercise."""
    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    CARDIO = "cardio"
    PT = "pt"


# Equipment labels that mean no equipment is needed
BODYWEIGHT_LABELS = {"", "bodyweight"}

# Substring -> group, checked in order
_GROUP_KEYWORDS = [
    (("chest",), MuscleGroup.CHEST),
    (("back", "lat"), MuscleGroup.BACK),
    (("delt", "shoulder"), MuscleGroup.SHOULDERS),
    (("bicep", "tricep"), MuscleGroup.ARMS),
    (("quad", "hamstring", "glute", "calve"), MuscleGroup.LEGS),
    (("abs", "core"), MuscleGroup.CORE),
]


def infer_muscle_group(muscle_name: str) -> Optional[MuscleGroup]:
    """
    Infer the muscle group from a muscle name.

    "Lower Back" -> back, "Rear Delts" -> shoulders, "Calves" -> legs.

    Returns:
        MuscleGroup, or None when no keyword matches
    """
    name = muscle_name.lower()
    for keywords, group in _GROUP_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return group
    return None


# =============================================================================
# Catalog Models
# =============================================================================

class Muscle(FrozenCamelModel):
    """A trainable muscle."""

    id: str = Field(..., description="Stable muscle identifier")
    name: str = Field(..., min_length=1, description="Display name, e.g. 'Lower Back'")
    group: Optional[MuscleGroup] = Field(None, description="Body region; inferred from name if omitted")

    @model_validator(mode="before")
    @classmethod
    def _default_group(cls, data):
        if isinstance(data, dict) and data.get("group") is None and data.get("name"):
            data = dict(data)
            data["group"] = infer_muscle_group(data["name"])
        return data


class MuscleTarget(FrozenCamelModel):
    """Fraction of an exercise's training stimulus attributed to one muscle."""

    muscle: Muscle
    weight: float = Field(..., ge=0, le=1, description="Stimulus fraction 0-1")


class Exercise(FrozenCamelModel):
    """A catalog exercise with its muscle targets."""

    id: str
    name: str
    category: ExerciseCategory
    equipment: Optional[str] = Field(
        None, description="Required equipment; None or 'bodyweight' means none needed"
    )
    instructions: Optional[str] = None
    muscle_targets: List[MuscleTarget] = Field(default_factory=list)

    @property
    def is_bodyweight(self) -> bool:
        """True when the exercise needs no equipment."""
        if self.equipment is None:
            return True
        return self.equipment.strip().lower() in BODYWEIGHT_LABELS

    def muscle_names(self) -> List[str]:
        """Names of all targeted muscles, in target order."""
        return [target.muscle.name for target in self.muscle_targets]


def collect_muscles(catalog: List[Exercise]) -> List[Muscle]:
    """Distinct muscles referenced by a catalog, in first-seen order."""
    seen = {}
    for exercise in catalog:
        for target in exercise.muscle_targets:
            seen.setdefault(target.muscle.id, target.muscle)
    return list(seen.values())
