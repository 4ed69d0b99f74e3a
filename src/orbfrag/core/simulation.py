"""Collision simulation: propagate two objects to an impact and break them up."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from orbfrag.config import Settings
from orbfrag.core.detection import CloseApproachEvent, detect_close_approaches
from orbfrag.core.errors import PropagationError, ValidationError
from orbfrag.core.models.base import CollisionOutcome, Fragment, ObjectState
from orbfrag.core.objects import OrbitingObject
from orbfrag.core.propagation import OrbitStateProvider, time_grid
from orbfrag.core.registry import ModelRegistry, default_registry
from orbfrag.utils.constants import DEFAULT_TIME_STEP_S

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Outcome and debris of one simulated collision.

    Attributes:
        outcome: Bulk collision result.
        fragments: Generated debris.
        model_name: Registry name of the model that was used.
        object1_id: NORAD ID of the first object.
        object2_id: NORAD ID of the second object.
        object1_name: Name of the first object.
        object2_name: Name of the second object.
    """

    outcome: CollisionOutcome
    fragments: list[Fragment]
    model_name: str
    object1_id: int
    object2_id: int
    object1_name: str
    object2_name: str


@dataclass(frozen=True)
class TrajectorySample:
    """Fragment position and velocity at one instant."""

    time: datetime
    position_km: NDArray[np.float64]
    velocity_km_s: NDArray[np.float64]


@dataclass(frozen=True)
class FragmentTrajectory:
    """A fragment and its straight-line samples."""

    fragment: Fragment
    samples: list[TrajectorySample]


def propagate_fragments(
    fragments: Sequence[Fragment],
    start: datetime,
    end: datetime,
    step_seconds: float = DEFAULT_TIME_STEP_S,
) -> list[FragmentTrajectory]:
    """Extrapolate fragments along straight lines.

    ``position(t) = position0 + velocity * (t - start)`` at every step from
    ``start`` to ``end`` inclusive; velocity is held constant. This ignores
    gravity entirely and is only meaningful over short horizons, e.g. to
    visualise the first minutes of dispersal.

    Raises:
        ValidationError: If the step is not positive or the window is reversed.
    """
    times = time_grid(start, end, step_seconds)
    elapsed = [(t - start).total_seconds() for t in times]

    trajectories = []
    for fragment in fragments:
        samples = [
            TrajectorySample(
                time=t,
                position_km=fragment.position_km + fragment.velocity_km_s * dt,
                velocity_km_s=fragment.velocity_km_s,
            )
            for t, dt in zip(times, elapsed)
        ]
        trajectories.append(FragmentTrajectory(fragment=fragment, samples=samples))

    logger.debug("Propagated %d fragments over %d samples", len(fragments), len(times))
    return trajectories


class CollisionSimulator:
    """Runs collision models against propagated object states.

    Args:
        provider: Orbit state provider for the objects' handles.
        registry: Collision models; defaults to :func:`default_registry`
            with ``settings.default_model`` as its default.
        settings: Default step, threshold and model.
    """

    def __init__(
        self,
        provider: OrbitStateProvider,
        registry: ModelRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.provider = provider
        self.settings = settings if settings is not None else Settings()
        self.registry = registry if registry is not None else default_registry(self.settings.default_model)

    def _state(self, obj: OrbitingObject, time: datetime) -> ObjectState:
        try:
            sv = self.provider.propagate(obj.orbital_state, time)
        except PropagationError as e:
            logger.error("Cannot propagate NORAD %d to %s: %s", obj.norad_id, time, e)
            raise
        return ObjectState(
            mass_kg=obj.effective_mass_kg,
            position_km=sv.position_km,
            velocity_km_s=sv.velocity_km_s,
        )

    def simulate_collision(
        self,
        object1: OrbitingObject,
        object2: OrbitingObject,
        collision_time: datetime,
        model_name: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> SimulationResult:
        """Simulate a collision between two objects at a given instant.

        Args:
            object1: First object.
            object2: Second object.
            collision_time: Assumed collision instant (UTC).
            model_name: Registry name of the model; None uses the default.
            rng: Random generator for fragment generation.

        Returns:
            The outcome, fragments and the model name used.

        Raises:
            ValidationError: If both arguments are the same object or one
                has no orbital data.
            ModelNotFoundError: If the model is not registered.
            PropagationError: If either object cannot be propagated.
        """
        if object1.norad_id == object2.norad_id:
            raise ValidationError(f"Cannot collide object {object1.norad_id} with itself")
        for obj in (object1, object2):
            if obj.orbital_state is None:
                raise ValidationError(f"Object {obj.norad_id} missing orbital data")

        name, model = self.registry.resolve(model_name)

        state1 = self._state(object1, collision_time)
        state2 = self._state(object2, collision_time)

        outcome = model.simulate(state1, state2, time=collision_time)
        fragments = model.generate_debris(outcome, rng=rng)

        logger.info("Simulated %s collision of %d and %d: %.3e J, %d fragments",
                    name, object1.norad_id, object2.norad_id, outcome.energy_j, len(fragments))
        return SimulationResult(
            outcome=outcome,
            fragments=fragments,
            model_name=name,
            object1_id=object1.norad_id,
            object2_id=object2.norad_id,
            object1_name=object1.name,
            object2_name=object2.name,
        )

    def propagate_fragments(
        self,
        fragments: Sequence[Fragment],
        start: datetime,
        end: datetime,
        step_seconds: float | None = None,
    ) -> list[FragmentTrajectory]:
        """Straight-line fragment propagation; see :func:`propagate_fragments`."""
        if step_seconds is None:
            step_seconds = self.settings.time_step_seconds
        return propagate_fragments(fragments, start, end, step_seconds)

    def detect(
        self,
        objects: Sequence[OrbitingObject],
        start: datetime,
        end: datetime,
        step_seconds: float | None = None,
        threshold_m: float | None = None,
    ) -> list[CloseApproachEvent]:
        """Run :func:`detect_close_approaches` with this simulator's provider and settings."""
        return detect_close_approaches(
            objects,
            start,
            end,
            self.provider,
            step_seconds=step_seconds if step_seconds is not None else self.settings.time_step_seconds,
            threshold_m=threshold_m if threshold_m is not None else self.settings.collision_threshold_m,
            max_workers=self.settings.max_workers,
        )
