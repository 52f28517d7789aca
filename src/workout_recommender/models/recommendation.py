"""Persisted recommendation record and user feedback."""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import CamelModel
from .history import WorkoutType


class Feedback(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class Recommendation(CamelModel):
    """The stored plan for one user on one date.

    Created on the first plan view for a date and never regenerated; only
    ``feedback`` changes afterwards.
    """

    id: str
    user_id: str
    date: date_type
    workout_type: WorkoutType
    exercises: List[Dict[str, Any]] = Field(default_factory=list)
    reasoning: List[str] = Field(default_factory=list)
    estimated_duration: int = 0
    confidence: float = Field(0.0, ge=0, le=1)
    features: Optional[Dict[str, Any]] = Field(None, description="Feature vector captured at generation time")
    feedback: Optional[Feedback] = None
    created_at: datetime = Field(default_factory=datetime.now)
