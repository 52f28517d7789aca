"""Daily check-in model: sleep, energy, soreness and time available."""

from datetime import date as date_type
from enum import Enum
from typing import Dict, Optional

from pydantic import Field, field_validator

from .base import CamelModel


class EnergyLevel(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class TimeAvailable(str, Enum):
    SHORT = "short"
    NORMAL = "normal"
    LONG = "long"


class DailyCheckin(CamelModel):
    """Self-report for one user on one calendar day (unique on user + date)."""

    user_id: str
    date: date_type
    hours_slept: Optional[float] = Field(None, ge=0, le=24)
    sleep_quality: Optional[int] = Field(None, ge=1, le=5, description="1 (poor) - 5 (great)")
    energy_level: Optional[EnergyLevel] = None
    soreness_map: Dict[str, int] = Field(
        default_factory=dict,
        description="Muscle name -> soreness 0-5",
    )
    acute_pain: bool = False
    pain_note: Optional[str] = None
    time_available: Optional[TimeAvailable] = None

    @field_validator("soreness_map", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or {}

    @field_validator("soreness_map")
    @classmethod
    def _soreness_in_range(cls, value: Dict[str, int]) -> Dict[str, int]:
        for muscle, level in value.items():
            if not 0 <= level <= 5:
                raise ValueError(f"soreness for {muscle!r} must be between 0 and 5, got {level}")
        return value

    @property
    def max_soreness(self) -> Optional[int]:
        """Highest reported soreness, or None when nothing was reported."""
        return max(self.soreness_map.values()) if self.soreness_map else None

    @property
    def avg_soreness(self) -> Optional[float]:
        """Mean reported soreness, or None when nothing was reported."""
        if not self.soreness_map:
            return None
        values = list(self.soreness_map.values())
        return sum(values) / len(values)
