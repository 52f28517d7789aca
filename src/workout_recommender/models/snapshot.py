"""Point-in-time input bundle for one recommendation run."""

import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import Field, ValidationError as PydanticValidationError, field_validator

from ..exceptions import SnapshotError
from .base import CamelModel
from .catalog import Exercise
from .checkin import DailyCheckin
from .history import Workout
from .profile import UserFitnessProfile


class EngineSnapshot(CamelModel):
    """Workout history, catalog, today's check-in and profile, read once.

    The engine never re-queries storage; whatever is in the snapshot is the
    whole world for one computation.
    """

    workouts: List[Workout] = Field(default_factory=list)
    catalog: List[Exercise] = Field(default_factory=list)
    checkin: Optional[DailyCheckin] = None
    profile: Optional[UserFitnessProfile] = None
    day_of_week: Optional[int] = Field(None, ge=0, le=6, description="0-6, Sunday = 0")

    @field_validator("workouts")
    @classmethod
    def _consistent_timezones(cls, value: List[Workout]) -> List[Workout]:
        aware = {w.date.tzinfo is not None for w in value}
        if len(aware) > 1:
            raise ValueError("workout dates mix timezone-aware and naive timestamps")
        return value


def load_snapshot(source: Union[str, Path, dict]) -> EngineSnapshot:
    """
    Load and validate a snapshot from a JSON file path or a parsed dict.

    Raises:
        SnapshotError: If the file is unreadable or the data fails validation
    """
    label = None
    if isinstance(source, dict):
        data = source
    else:
        label = str(source)
        try:
            data = json.loads(Path(source).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Could not read snapshot: {e}", source=label) from e

    try:
        return EngineSnapshot.model_validate(data)
    except PydanticValidationError as e:
        raise SnapshotError(
            "Snapshot failed validation",
            source=label,
            details={"errors": e.errors(include_url=False)},
        ) from e
