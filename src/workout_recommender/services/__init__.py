"""Services around the recommendation engine."""

from .base import BaseService, RecommendationRepository
from .recommendation_service import (
    InMemoryRecommendationRepository,
    RecommendationService,
    to_recommendation,
)
from .daily_metrics import DailyMetrics, calculate_daily_metrics, calculate_metrics_for_range

__all__ = [
    # Base classes
    "BaseService",
    "RecommendationRepository",
    # Recommendations
    "InMemoryRecommendationRepository",
    "RecommendationService",
    "to_recommendation",
    # Metrics
    "DailyMetrics",
    "calculate_daily_metrics",
    "calculate_metrics_for_range",
]
