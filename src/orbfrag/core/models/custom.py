"""Equal-mass collision model, also the starting point for user-defined models.

Subclass :class:`CustomCollisionModel` (or :class:`BaseCollisionModel`
directly) and override ``fragment_count`` / ``generate_debris`` to plug in
different physics, then register the instance with a
:class:`~orbfrag.core.registry.ModelRegistry`.
"""

from __future__ import annotations

import numpy as np

from orbfrag.core.models.base import (
    BaseCollisionModel,
    CollisionOutcome,
    Fragment,
    estimate_diameter,
    minimum_fragment_count,
)
from orbfrag.utils.constants import NASA_FRAGMENTS_PER_KG


class CustomCollisionModel(BaseCollisionModel):
    """Splits the combined mass into identical fragments.

    Args:
        fragments_per_kg: Fragments per kg of combined mass.
        ejection_speed_m_s: Speed every fragment gets along its (isotropic)
            direction. Zero keeps all fragments co-moving with the center
            of mass.
    """

    name = "Custom Model"

    def __init__(
        self,
        fragments_per_kg: float = NASA_FRAGMENTS_PER_KG,
        ejection_speed_m_s: float = 0.0,
    ) -> None:
        self.fragments_per_kg = fragments_per_kg
        self.ejection_speed_m_s = ejection_speed_m_s

    def fragment_count(self, total_mass_kg: float) -> int:
        return minimum_fragment_count(total_mass_kg, self.fragments_per_kg)

    def generate_debris(
        self, outcome: CollisionOutcome, rng: np.random.Generator | None = None
    ) -> list[Fragment]:
        if rng is None:
            rng = np.random.default_rng()

        count = outcome.fragment_count
        mass = outcome.total_mass_kg / count
        diameter = estimate_diameter(mass)
        directions = self.fragment_directions(count, rng)
        kick = self.ejection_speed_m_s / 1000.0
        com_velocity = outcome.com_velocity_km_s

        return [
            Fragment(
                id=f"fragment_{i}",
                mass_kg=mass,
                position_km=np.array(outcome.position_km, dtype=np.float64),
                velocity_km_s=com_velocity + directions[i] * kick,
                direction=directions[i],
                diameter_m=diameter,
            )
            for i in range(count)
        ]
