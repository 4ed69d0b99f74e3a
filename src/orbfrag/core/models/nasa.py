"""NASA breakup-model inspired collision model with power-law fragment masses."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from orbfrag.core.models.base import (
    BaseCollisionModel,
    CollisionOutcome,
    Fragment,
    estimate_diameter,
    minimum_fragment_count,
)
from orbfrag.utils.constants import (
    FRAGMENT_POSITION_SPREAD_KM,
    NASA_FRAGMENTS_PER_KG,
    NASA_MAX_DRAW_FRACTION,
    NASA_MAX_FRAGMENT_MASS_KG,
    NASA_MIN_FRAGMENT_MASS_KG,
    NASA_POWER_LAW_EXPONENT,
)

logger = logging.getLogger(__name__)


class NASACollisionModel(BaseCollisionModel):
    """Simplified model after NASA's orbital debris engineering models.

    Fragment masses follow a bounded Pareto law N(m) ~ m^-alpha. Ejection
    speeds come from the collision energy split evenly (with a random
    factor) over the fragments, and directions are isotropic. The collision
    axis is reported in the outcome but not used to bias directions.

    Args:
        fragments_per_kg: Fragments per kg of combined mass.
        min_fragment_mass_kg: Lower mass bound.
        max_fragment_mass_kg: Upper mass bound.
        power_law_exponent: Exponent alpha of the mass distribution.
    """

    name = "NASA Model"

    def __init__(
        self,
        fragments_per_kg: float = NASA_FRAGMENTS_PER_KG,
        min_fragment_mass_kg: float = NASA_MIN_FRAGMENT_MASS_KG,
        max_fragment_mass_kg: float = NASA_MAX_FRAGMENT_MASS_KG,
        power_law_exponent: float = NASA_POWER_LAW_EXPONENT,
    ) -> None:
        self.fragments_per_kg = fragments_per_kg
        self.min_fragment_mass_kg = min_fragment_mass_kg
        self.max_fragment_mass_kg = max_fragment_mass_kg
        self.power_law_exponent = power_law_exponent

    def fragment_count(self, total_mass_kg: float) -> int:
        return minimum_fragment_count(total_mass_kg, self.fragments_per_kg)

    def fragment_masses(
        self, count: int, total_mass_kg: float, rng: np.random.Generator
    ) -> NDArray[np.float64]:
        """Draw ``count`` fragment masses that add up to ``total_mass_kg``.

        The first ``count - 1`` masses are inverse-CDF samples of the bounded
        Pareto distribution, each capped at half the mass not yet assigned.
        The last fragment takes the remainder, floored at the minimum mass.
        """
        exponent = 1.0 - self.power_law_exponent
        low = self.min_fragment_mass_kg ** exponent
        high = self.max_fragment_mass_kg ** exponent

        masses = np.empty(count, dtype=np.float64)
        remaining = total_mass_kg
        for i in range(count - 1):
            u = rng.random()
            drawn = (low + u * (high - low)) ** (1.0 / exponent)
            mass = min(drawn, remaining * NASA_MAX_DRAW_FRACTION)
            masses[i] = mass
            remaining -= mass

        masses[-1] = max(remaining, self.min_fragment_mass_kg)
        return masses

    def generate_debris(
        self, outcome: CollisionOutcome, rng: np.random.Generator | None = None
    ) -> list[Fragment]:
        """Generate power-law fragments for a collision outcome.

        Args:
            outcome: Result of :meth:`simulate`.
            rng: Random generator; pass a seeded one for reproducible debris.

        Returns:
            ``outcome.fragment_count`` fragments.
        """
        if rng is None:
            rng = np.random.default_rng()

        count = outcome.fragment_count
        masses = self.fragment_masses(count, outcome.total_mass_kg, rng)
        speeds = self.fragment_speeds(outcome.energy_j, count, rng)
        directions = self.fragment_directions(count, rng)
        offsets = (rng.random(count) - 0.5) * FRAGMENT_POSITION_SPREAD_KM

        com_velocity = outcome.com_velocity_km_s
        fragments = []
        for i in range(count):
            direction = directions[i]
            fragments.append(Fragment(
                id=f"fragment_{i}",
                mass_kg=float(masses[i]),
                position_km=outcome.position_km + direction * offsets[i],
                velocity_km_s=com_velocity + direction * speeds[i] / 1000.0,
                direction=direction,
                diameter_m=estimate_diameter(float(masses[i])),
            ))

        logger.debug("Generated %d fragments, %.3f kg total", count, float(masses.sum()))
        return fragments
