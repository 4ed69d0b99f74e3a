"""Name-based lookup of collision models."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from orbfrag.core.errors import ModelNotFoundError
from orbfrag.core.models.base import CollisionModel
from orbfrag.core.models.custom import CustomCollisionModel
from orbfrag.core.models.nasa import NASACollisionModel
from orbfrag.utils.constants import DEFAULT_MODEL_NAME

logger = logging.getLogger(__name__)


MODEL_DESCRIPTIONS = {
    "nasa": "NASA ORDEM-inspired model with power-law fragment distribution",
    "custom": "Custom model template for user-defined physics",
}


@dataclass(frozen=True)
class ModelInfo:
    """A registered model name and its human-readable description."""

    name: str
    description: str


class ModelRegistry:
    """Collision models keyed by name, with an optional default.

    Args:
        default: Name returned by :meth:`get` when no name is requested.
            It does not have to be registered yet.
    """

    def __init__(self, default: str | None = None) -> None:
        self.default = default
        self._models: dict[str, CollisionModel] = {}

    def register(self, name: str, model: CollisionModel) -> None:
        """Register ``model`` under ``name``, replacing any previous entry.

        Raises:
            TypeError: If ``model`` does not provide the collision model
                capability (``name``, ``simulate``, ``generate_debris``).
        """
        if not isinstance(model, CollisionModel):
            raise TypeError(f"{type(model).__name__} is not a collision model")
        if name in self._models:
            logger.debug("Replacing collision model %r", name)
        self._models[name] = model

    def resolve(self, name: str | None = None) -> tuple[str, CollisionModel]:
        """Return ``(name, model)`` for the requested or default model.

        Raises:
            ModelNotFoundError: If the name is not registered.
        """
        key = name or self.default
        if key is None or key not in self._models:
            logger.error("Collision model %r not found", name or key)
            raise ModelNotFoundError(name or key)
        return key, self._models[key]

    def get(self, name: str | None = None) -> CollisionModel:
        """Return the requested model, or the default when ``name`` is None."""
        return self.resolve(name)[1]

    def names(self) -> list[str]:
        return list(self._models)

    def list(self) -> list[ModelInfo]:
        """Registered models in registration order, with descriptions."""
        return [
            ModelInfo(name=name, description=MODEL_DESCRIPTIONS.get(name, "Unknown model"))
            for name in self._models
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)


def default_registry(default: str = DEFAULT_MODEL_NAME) -> ModelRegistry:
    """A registry with the built-in ``nasa`` and ``custom`` models."""
    registry = ModelRegistry(default=default)
    registry.register("nasa", NASACollisionModel())
    registry.register("custom", CustomCollisionModel())
    return registry
