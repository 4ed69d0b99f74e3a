"""
orbfrag — close-approach detection and collision fragmentation for Python.

Screens groups of orbiting objects for close approaches, estimates a simple
collision probability, and synthesizes debris fields from assumed impacts
with pluggable breakup models.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from orbfrag.config import Settings
from orbfrag.core.errors import ModelNotFoundError, OrbfragError, PropagationError, ValidationError
from orbfrag.core.objects import OrbitingObject, StateVector
from orbfrag.core.propagation import (
    OrbitStateProvider,
    SGP4StateProvider,
    orbital_parameters,
    propagate_range,
)
from orbfrag.core.detection import CloseApproachEvent, detect_close_approaches, find_close_approaches
from orbfrag.core.probability import attach_probabilities, collision_probability
from orbfrag.core.models.base import (
    BaseCollisionModel,
    CollisionModel,
    CollisionOutcome,
    Fragment,
    ObjectState,
)
from orbfrag.core.models.nasa import NASACollisionModel
from orbfrag.core.models.custom import CustomCollisionModel
from orbfrag.core.registry import ModelInfo, ModelRegistry, default_registry
from orbfrag.core.simulation import (
    CollisionSimulator,
    FragmentTrajectory,
    SimulationResult,
    TrajectorySample,
    propagate_fragments,
)

__all__ = [
    "__version__",
    "Settings",
    "OrbfragError",
    "ValidationError",
    "PropagationError",
    "ModelNotFoundError",
    "OrbitingObject",
    "StateVector",
    "OrbitStateProvider",
    "SGP4StateProvider",
    "orbital_parameters",
    "propagate_range",
    "CloseApproachEvent",
    "detect_close_approaches",
    "find_close_approaches",
    "collision_probability",
    "attach_probabilities",
    "CollisionModel",
    "BaseCollisionModel",
    "CollisionOutcome",
    "Fragment",
    "ObjectState",
    "NASACollisionModel",
    "CustomCollisionModel",
    "ModelInfo",
    "ModelRegistry",
    "default_registry",
    "CollisionSimulator",
    "SimulationResult",
    "FragmentTrajectory",
    "TrajectorySample",
    "propagate_fragments",
]
