"""
Model Registry

Holds learned models that may later consume the feature vector. There is no
process-wide instance: callers construct a registry and pass it to the engine
or service that needs it.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Protocol, runtime_checkable

from ..exceptions import ModelRegistrationError
from .features import FeatureVector, TrainingExample


logger = logging.getLogger(__name__)


@runtime_checkable
class RecommendationModel(Protocol):
    """Interface every registered model implements."""

    name: str
    version: str

    def predict(self, features: FeatureVector) -> Dict[str, Any]:
        ...

    def train(self, examples: List[TrainingExample]) -> None:
        ...


class ModelRegistry:
    """Name-keyed collection of models, preserving registration order."""

    def __init__(self) -> None:
        self._models: Dict[str, RecommendationModel] = {}

    def register(self, model: RecommendationModel) -> None:
        """
        Add a model.

        Raises:
            ModelRegistrationError: If a model with the same name is registered
        """
        if model.name in self._models:
            raise ModelRegistrationError(model.name)
        self._models[model.name] = model
        logger.info(f"Registered model {model.name} v{model.version}")

    def lookup(self, name: str) -> Optional[RecommendationModel]:
        """Model registered under ``name``, or None."""
        return self._models.get(name)

    def all(self) -> List[RecommendationModel]:
        return list(self._models.values())

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[RecommendationModel]:
        return iter(self._models.values())
