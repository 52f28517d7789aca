"""Tests for the recommendation persistence service."""

from datetime import date, timedelta

import pytest

from workout_recommender.exceptions import (
    ErrorCode,
    FeedbackError,
    RecommendationNotFoundError,
)
from workout_recommender.models import EngineSnapshot, Feedback, Recommendation, WorkoutType
from workout_recommender.recommendations.engine import RecommendationEngine
from workout_recommender.services import InMemoryRecommendationRepository, RecommendationService


@pytest.fixture
def service(settings):
    return RecommendationService(engine=RecommendationEngine(settings=settings))


@pytest.fixture
def snapshot(catalog):
    return EngineSnapshot(catalog=catalog)


class TestGetOrCreate:
    """At most one stored plan per user and date."""

    def test_first_view_creates(self, service, snapshot, now):
        recommendation = service.get_or_create("u1", snapshot, now=now)
        assert recommendation.user_id == "u1"
        assert recommendation.date == now.date()
        assert recommendation.features["version"]
        assert len(service.repository) == 1

    def test_second_view_returns_stored_plan(self, service, snapshot, catalog, make_checkin, now):
        first = service.get_or_create("u1", snapshot, now=now)
        # Inputs that would now produce a rest day are ignored
        changed = EngineSnapshot(catalog=catalog, checkin=make_checkin(hours_slept=3))
        second = service.get_or_create("u1", changed, now=now + timedelta(hours=3))

        assert second.id == first.id
        assert second.workout_type == first.workout_type
        assert len(service.repository) == 1

    def test_users_and_dates_are_independent(self, service, snapshot, now):
        a = service.get_or_create("u1", snapshot, now=now)
        b = service.get_or_create("u2", snapshot, now=now)
        c = service.get_or_create("u1", snapshot, now=now + timedelta(days=1))
        assert len({a.id, b.id, c.id}) == 3

    def test_explicit_plan_date(self, service, snapshot, now):
        recommendation = service.get_or_create("u1", snapshot, plan_date=date(2024, 3, 10), now=now)
        assert recommendation.date == date(2024, 3, 10)


class TestFeedback:
    """Test record_feedback."""

    def test_positive_feedback_stored(self, service, snapshot, now):
        created = service.get_or_create("u1", snapshot, now=now)
        updated = service.record_feedback(created.id, "u1", "positive")
        assert updated.feedback == Feedback.POSITIVE
        assert service.get(created.id).feedback == Feedback.POSITIVE

    def test_feedback_leaves_plan_untouched(self, service, snapshot, now):
        created = service.get_or_create("u1", snapshot, now=now)
        updated = service.record_feedback(created.id, "u1", "negative")
        assert updated.exercises == created.exercises
        assert updated.reasoning == created.reasoning

    def test_invalid_label(self, service, snapshot, now):
        created = service.get_or_create("u1", snapshot, now=now)
        with pytest.raises(FeedbackError) as exc_info:
            service.record_feedback(created.id, "u1", "meh")
        assert exc_info.value.code == ErrorCode.FEEDBACK_INVALID
        assert service.get(created.id).feedback is None

    def test_other_users_recommendation_not_found(self, service, snapshot, now):
        created = service.get_or_create("u1", snapshot, now=now)
        with pytest.raises(RecommendationNotFoundError):
            service.record_feedback(created.id, "u2", "positive")

    def test_unknown_recommendation(self, service):
        with pytest.raises(RecommendationNotFoundError) as exc_info:
            service.record_feedback("missing", "u1", "positive")
        assert exc_info.value.details["resource_id"] == "missing"


class TestTrainingExamples:
    """Stored, labelled plans become training examples."""

    def test_only_labelled_plans(self, service, snapshot, now):
        first = service.get_or_create("u1", snapshot, now=now)
        service.get_or_create("u1", snapshot, now=now + timedelta(days=1))
        service.record_feedback(first.id, "u1", "positive")

        examples = service.training_examples("u1")
        assert [e.recommendation_id for e in examples] == [first.id]
        assert examples[0].label == 1
        assert examples[0].workout_type == first.workout_type.value


class TestInMemoryRepository:
    """Test the dictionary-backed repository."""

    def _record(self, rec_id, user_id="u1", day=date(2024, 3, 6)):
        return Recommendation(id=rec_id, user_id=user_id, date=day, workout_type=WorkoutType.PUSH)

    def test_add_is_unique_on_user_and_date(self):
        repository = InMemoryRecommendationRepository()
        first = repository.add(self._record("r1"))
        second = repository.add(self._record("r2"))
        assert second is first
        assert repository.get("r2") is None

    def test_update_unknown_raises(self):
        with pytest.raises(RecommendationNotFoundError):
            InMemoryRecommendationRepository().update(self._record("r1"))

    def test_list_for_user_sorted_by_date(self):
        repository = InMemoryRecommendationRepository()
        repository.add(self._record("r2", day=date(2024, 3, 7)))
        repository.add(self._record("r1", day=date(2024, 3, 6)))
        repository.add(self._record("r3", user_id="u2"))
        assert [r.id for r in repository.list_for_user("u1")] == ["r1", "r2"]
