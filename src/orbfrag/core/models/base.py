"""Collision model interface and shared breakup physics.

A collision model turns the states of two colliding objects into a
:class:`CollisionOutcome` and expands that outcome into debris
:class:`Fragment` objects. Anything with ``name``, ``simulate`` and
``generate_debris`` qualifies as a :class:`CollisionModel`; subclassing
:class:`BaseCollisionModel` gets the shared physics for free.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from orbfrag.utils.constants import (
    DEFAULT_OBJECT_MASS_KG,
    EJECTION_REFERENCE_MASS_KG,
    FRAGMENT_DENSITY_KG_M3,
    MIN_FRAGMENT_COUNT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectState:
    """Mass, position (km) and velocity (km/s) of one colliding body."""

    mass_kg: float
    position_km: NDArray[np.float64]
    velocity_km_s: NDArray[np.float64]


@dataclass(frozen=True)
class CollisionOutcome:
    """Bulk result of a collision, before fragmentation.

    Attributes:
        time: Collision instant (UTC).
        position_km: Collision point, the center of mass of both bodies.
        axis: Unit vector along the relative velocity (zero if none).
        total_mass_kg: Combined mass of both bodies.
        relative_velocity_m_s: Impact speed in m/s.
        energy_j: Reduced-mass kinetic energy of the impact in Joules.
        fragment_count: Number of fragments the model will generate.
        object1: State of the first body.
        object2: State of the second body.
    """

    time: datetime
    position_km: NDArray[np.float64]
    axis: NDArray[np.float64]
    total_mass_kg: float
    relative_velocity_m_s: float
    energy_j: float
    fragment_count: int
    object1: ObjectState
    object2: ObjectState

    @property
    def com_velocity_km_s(self) -> NDArray[np.float64]:
        """Mass-weighted mean velocity of the two bodies."""
        return (self.object1.mass_kg * self.object1.velocity_km_s
                + self.object2.mass_kg * self.object2.velocity_km_s) / self.total_mass_kg


@dataclass(frozen=True)
class Fragment:
    """A synthetic debris particle.

    Attributes:
        id: Fragment identifier, ``fragment_<index>``.
        mass_kg: Fragment mass.
        position_km: Position, close to the collision point.
        velocity_km_s: Center-of-mass velocity plus ejection kick.
        direction: Unit ejection direction.
        diameter_m: Estimated diameter of an equivalent solid sphere.
    """

    id: str
    mass_kg: float
    position_km: NDArray[np.float64]
    velocity_km_s: NDArray[np.float64]
    direction: NDArray[np.float64]
    diameter_m: float


@runtime_checkable
class CollisionModel(Protocol):
    """Capability every collision model provides."""

    name: str

    def simulate(
        self, object1: ObjectState, object2: ObjectState, time: datetime | None = None
    ) -> CollisionOutcome:
        ...

    def generate_debris(
        self, outcome: CollisionOutcome, rng: np.random.Generator | None = None
    ) -> list[Fragment]:
        ...


def estimate_diameter(mass_kg: float, density_kg_m3: float = FRAGMENT_DENSITY_KG_M3) -> float:
    """Diameter in meters of a solid sphere of the given mass and density."""
    volume = mass_kg / density_kg_m3
    return 2.0 * (3.0 * volume / (4.0 * math.pi)) ** (1.0 / 3.0)


class BaseCollisionModel(ABC):
    """Shared collision physics; subclasses decide fragment count and debris."""

    name = "Base Model"

    @abstractmethod
    def fragment_count(self, total_mass_kg: float) -> int:
        """Number of fragments produced by a collision of this total mass."""

    @abstractmethod
    def generate_debris(
        self, outcome: CollisionOutcome, rng: np.random.Generator | None = None
    ) -> list[Fragment]:
        """Expand a collision outcome into fragments."""

    def simulate(
        self, object1: ObjectState, object2: ObjectState, time: datetime | None = None
    ) -> CollisionOutcome:
        """Compute impact speed, energy, collision point and fragment count.

        A body with zero mass counts as 100 kg.

        Args:
            object1: State of the first body.
            object2: State of the second body.
            time: Collision instant; defaults to now (UTC).

        Returns:
            The collision outcome.
        """
        if time is None:
            time = datetime.now(timezone.utc)

        m1 = object1.mass_kg or DEFAULT_OBJECT_MASS_KG
        m2 = object2.mass_kg or DEFAULT_OBJECT_MASS_KG
        total_mass = m1 + m2

        dv = np.asarray(object1.velocity_km_s) - np.asarray(object2.velocity_km_s)
        dv_norm = float(np.linalg.norm(dv))
        relative_velocity = dv_norm * 1000.0

        reduced_mass = m1 * m2 / total_mass
        energy = 0.5 * reduced_mass * relative_velocity ** 2

        com = (m1 * np.asarray(object1.position_km) + m2 * np.asarray(object2.position_km)) / total_mass
        axis = dv / dv_norm if dv_norm > 0 else np.zeros(3)

        count = self.fragment_count(total_mass)

        logger.debug("%s: m=%.1f kg, v_rel=%.1f m/s, E=%.3e J, %d fragments",
                     self.name, total_mass, relative_velocity, energy, count)
        return CollisionOutcome(
            time=time,
            position_km=com,
            axis=axis,
            total_mass_kg=total_mass,
            relative_velocity_m_s=relative_velocity,
            energy_j=energy,
            fragment_count=count,
            object1=object1,
            object2=object2,
        )

    def fragment_speeds(
        self, energy_j: float, count: int, rng: np.random.Generator
    ) -> NDArray[np.float64]:
        """Ejection speeds in m/s, partitioning energy over a notional reference mass.

        Each fragment gets the average energy scaled by U[0.5, 1.5).
        """
        energies = (energy_j / count) * rng.uniform(0.5, 1.5, size=count)
        return np.sqrt(2.0 * energies / EJECTION_REFERENCE_MASS_KG)

    def fragment_directions(self, count: int, rng: np.random.Generator) -> NDArray[np.float64]:
        """Isotropic unit vectors, shape (count, 3)."""
        theta = 2.0 * math.pi * rng.random(count)
        phi = np.arccos(2.0 * rng.random(count) - 1.0)
        return np.column_stack((
            np.sin(phi) * np.cos(theta),
            np.sin(phi) * np.sin(theta),
            np.cos(phi),
        ))


def minimum_fragment_count(total_mass_kg: float, fragments_per_kg: float) -> int:
    """``floor(total_mass * fragments_per_kg)``, but never fewer than 10."""
    return max(MIN_FRAGMENT_COUNT, math.floor(total_mass_kg * fragments_per_kg))
