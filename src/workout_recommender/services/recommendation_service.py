"""
Recommendation service.

Handles:
- Creating today's plan on first view and returning the stored plan after
- Recording positive/negative feedback against a stored plan
- Exporting labelled plans as training examples
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
import logging
import uuid

from .base import BaseService, RecommendationRepository
from ..exceptions import FeedbackError, RecommendationNotFoundError
from ..models.recommendation import Feedback, Recommendation
from ..models.snapshot import EngineSnapshot
from ..recommendations.engine import EngineResult, RecommendationEngine, default_now
from ..recommendations.features import TrainingExample, prepare_training_data


class InMemoryRecommendationRepository:
    """Dictionary-backed repository, unique on (user, date)."""

    def __init__(self) -> None:
        self._by_id: Dict[str, Recommendation] = {}
        self._by_day: Dict[Tuple[str, date], str] = {}

    def get(self, recommendation_id: str) -> Optional[Recommendation]:
        return self._by_id.get(recommendation_id)

    def find_for_date(self, user_id: str, plan_date: date) -> Optional[Recommendation]:
        recommendation_id = self._by_day.get((user_id, plan_date))
        return self._by_id.get(recommendation_id) if recommendation_id else None

    def add(self, recommendation: Recommendation) -> Recommendation:
        key = (recommendation.user_id, recommendation.date)
        existing = self._by_day.get(key)
        if existing is not None:
            return self._by_id[existing]
        self._by_id[recommendation.id] = recommendation
        self._by_day[key] = recommendation.id
        return recommendation

    def update(self, recommendation: Recommendation) -> Recommendation:
        if recommendation.id not in self._by_id:
            raise RecommendationNotFoundError(recommendation.id)
        self._by_id[recommendation.id] = recommendation
        return recommendation

    def list_for_user(self, user_id: str) -> List[Recommendation]:
        return sorted(
            (r for r in self._by_id.values() if r.user_id == user_id),
            key=lambda r: r.date,
        )

    def __len__(self) -> int:
        return len(self._by_id)


def to_recommendation(
    result: EngineResult,
    user_id: str,
    plan_date: date,
    now: datetime,
    recommendation_id: Optional[str] = None,
) -> Recommendation:
    """Convert an engine result into the persisted record."""
    output = result.output
    return Recommendation(
        id=recommendation_id or str(uuid.uuid4()),
        user_id=user_id,
        date=plan_date,
        workout_type=output.workout_type,
        exercises=[e.to_dict() for e in output.exercises],
        reasoning=list(output.reasoning),
        estimated_duration=output.estimated_duration,
        confidence=output.confidence,
        features=result.features.to_dict(),
        created_at=now,
    )


class RecommendationService(BaseService):
    """
    Service for the persisted daily recommendation.

    The engine may be recomputed freely; this service makes sure only the
    first plan for a (user, date) is stored and later views return it
    unchanged.
    """

    def __init__(
        self,
        repository: Optional[RecommendationRepository] = None,
        engine: Optional[RecommendationEngine] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(logger=logger)
        self._repository = repository if repository is not None else InMemoryRecommendationRepository()
        self._engine = engine or RecommendationEngine()

    @property
    def repository(self) -> RecommendationRepository:
        return self._repository

    def get_or_create(
        self,
        user_id: str,
        snapshot: EngineSnapshot,
        plan_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> Recommendation:
        """
        Get the user's plan for a date, generating it on first request.

        Args:
            user_id: The user identifier
            snapshot: Inputs for generation; unused when a plan already exists
            plan_date: Calendar date of the plan (defaults to ``now``'s date)
            now: Evaluation instant passed to the engine

        Returns:
            The stored recommendation for (user, date)
        """
        now = now or default_now(snapshot.workouts)
        plan_date = plan_date or now.date()

        existing = self._repository.find_for_date(user_id, plan_date)
        if existing is not None:
            self.logger.debug(f"Returning stored recommendation {existing.id} for {plan_date}")
            return existing

        result = self._engine.generate(snapshot, now=now)
        stored = self._repository.add(to_recommendation(result, user_id, plan_date, now))
        self.logger.info(
            f"Created {stored.workout_type.value} recommendation {stored.id} "
            f"for user {user_id} on {plan_date}"
        )
        return stored

    def get(self, recommendation_id: str) -> Recommendation:
        """
        Get a recommendation by ID.

        Raises:
            RecommendationNotFoundError: If the recommendation doesn't exist
        """
        recommendation = self._repository.get(recommendation_id)
        if recommendation is None:
            raise RecommendationNotFoundError(recommendation_id)
        return recommendation

    def record_feedback(self, recommendation_id: str, user_id: str, label: str) -> Recommendation:
        """
        Store a positive/negative label against a recommendation.

        The label is stored verbatim; the engine does not read it.

        Raises:
            FeedbackError: If the label is not positive or negative
            RecommendationNotFoundError: If the recommendation doesn't exist
                or belongs to another user
        """
        try:
            feedback = Feedback(label)
        except ValueError:
            raise FeedbackError(label) from None

        recommendation = self._repository.get(recommendation_id)
        if recommendation is None or recommendation.user_id != user_id:
            raise RecommendationNotFoundError(recommendation_id)

        updated = self._repository.update(
            recommendation.model_copy(update={"feedback": feedback})
        )
        self.logger.info(f"Recorded {feedback.value} feedback for recommendation {recommendation_id}")
        return updated

    def training_examples(self, user_id: str) -> List[TrainingExample]:
        """Labelled training examples from the user's stored recommendations."""
        return prepare_training_data(self._repository.list_for_user(user_id))
