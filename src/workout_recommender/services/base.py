"""
Base service classes and protocols.

Defines the storage interface the recommendation service persists through
and the shared service base class.
"""

from abc import ABC
from datetime import date
from typing import List, Optional, Protocol, runtime_checkable
import logging

from ..models.recommendation import Recommendation


@runtime_checkable
class RecommendationRepository(Protocol):
    """
    Protocol for recommendation storage.

    Implementations must keep at most one recommendation per user and date;
    ``add`` returns the already stored record when one exists.
    """

    def get(self, recommendation_id: str) -> Optional[Recommendation]:
        """Get a recommendation by ID."""
        ...

    def find_for_date(self, user_id: str, plan_date: date) -> Optional[Recommendation]:
        """Get the user's recommendation for a date."""
        ...

    def add(self, recommendation: Recommendation) -> Recommendation:
        """Store a recommendation unless one exists for the same user and date."""
        ...

    def update(self, recommendation: Recommendation) -> Recommendation:
        """Replace a stored recommendation."""
        ...

    def list_for_user(self, user_id: str) -> List[Recommendation]:
        """All recommendations of a user, oldest first."""
        ...


class BaseService(ABC):
    """
    Abstract base class for services.

    Provides a logger named after the concrete service class.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger
