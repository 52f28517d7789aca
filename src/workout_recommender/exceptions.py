"""
Custom exceptions for the workout recommender.

The recommendation engine itself never raises: missing data degrades to
conservative defaults. These exceptions belong to the boundary around it -
snapshot loading, the persistence service and the model registry. Each
exception carries:
- A descriptive message
- An error code for callers that render errors
- Optional details for debugging
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Snapshot errors
    SNAPSHOT_INVALID = "SNAPSHOT_INVALID"

    # Recommendation errors
    RECOMMENDATION_NOT_FOUND = "RECOMMENDATION_NOT_FOUND"
    FEEDBACK_INVALID = "FEEDBACK_INVALID"

    # Model registry errors
    MODEL_ALREADY_REGISTERED = "MODEL_ALREADY_REGISTERED"


class RecommenderError(Exception):
    """
    Base exception for all workout recommender errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for display or logging."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(RecommenderError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=error_details,
        )


class SnapshotError(ValidationError):
    """Raised when an input snapshot cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if source:
            error_details["source"] = source
        super().__init__(message=message, details=error_details)
        self.code = ErrorCode.SNAPSHOT_INVALID


class FeedbackError(ValidationError):
    """Raised when a feedback label is not one of the accepted values."""

    def __init__(self, label: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=f'Feedback must be "positive" or "negative", got {label!r}',
            field="feedback",
            details=details,
        )
        self.code = ErrorCode.FEEDBACK_INVALID


# ============================================================================
# Not Found Errors
# ============================================================================

class NotFoundError(RecommenderError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} with ID '{resource_id}' not found"
        error_details = details or {}
        error_details["resource_type"] = resource_type
        error_details["resource_id"] = resource_id
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            details=error_details,
        )


class RecommendationNotFoundError(NotFoundError):
    """Raised when a recommendation is missing or belongs to another user."""

    def __init__(self, recommendation_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            resource_type="Recommendation",
            resource_id=recommendation_id,
            details=details,
        )
        self.code = ErrorCode.RECOMMENDATION_NOT_FOUND


# ============================================================================
# Model Registry Errors
# ============================================================================

class ModelRegistrationError(RecommenderError):
    """Raised when a model name is registered twice."""

    def __init__(self, model_name: str, details: Optional[Dict[str, Any]] = None) -> None:
        error_details = details or {}
        error_details["model_name"] = model_name
        super().__init__(
            message=f"Model '{model_name}' is already registered",
            code=ErrorCode.MODEL_ALREADY_REGISTERED,
            details=error_details,
        )
