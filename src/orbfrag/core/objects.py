"""Orbiting objects and state vectors.

An :class:`OrbitingObject` carries an opaque orbital-state handle that only
the orbit state provider understands. For SGP4 the handle is an
``sgp4`` ``Satrec``; :meth:`OrbitingObject.from_tle` builds one from a TLE.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import numpy as np
from numpy.typing import NDArray
from sgp4.api import Satrec, WGS72

from orbfrag.core.errors import ValidationError
from orbfrag.utils.constants import DEFAULT_OBJECT_MASS_KG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateVector:
    """Position and velocity in an inertial frame (TEME for SGP4).

    Attributes:
        position_km: [x, y, z] position in km.
        velocity_km_s: [vx, vy, vz] velocity in km/s.
        epoch: Time of this state vector.
    """

    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    epoch: datetime


@dataclass(frozen=True)
class OrbitingObject:
    """A cataloged object that can be screened or collided.

    Attributes:
        norad_id: NORAD catalog number.
        name: Display name.
        orbital_state: Opaque handle consumed by the state provider.
        mass_kg: Mass in kg, or None if unknown.
    """

    norad_id: int
    name: str
    orbital_state: Any = field(repr=False, compare=False)
    mass_kg: float | None = None

    @property
    def effective_mass_kg(self) -> float:
        """Mass used in simulations; unknown or zero mass counts as 100 kg."""
        return self.mass_kg or DEFAULT_OBJECT_MASS_KG

    @classmethod
    def from_tle(
        cls,
        line1: str,
        line2: str,
        name: str = "",
        mass_kg: float | None = None,
    ) -> OrbitingObject:
        """Build an object propagated by SGP4 from a two-line element set.

        Raises:
            ValidationError: If the TLE lines are malformed.
        """
        line1 = line1.strip()
        line2 = line2.strip()

        if len(line1) != 69 or not line1.startswith("1"):
            logger.error("Invalid TLE line 1: %r", line1)
            raise ValidationError(f"Invalid TLE line 1: {line1!r}")
        if len(line2) != 69 or not line2.startswith("2"):
            logger.error("Invalid TLE line 2: %r", line2)
            raise ValidationError(f"Invalid TLE line 2: {line2!r}")

        satrec = Satrec.twoline2rv(line1, line2, WGS72)
        norad_id = int(line1[2:7].strip())

        logger.debug("Built SGP4 object for NORAD %d", norad_id)
        return cls(
            norad_id=norad_id,
            name=name.strip(),
            orbital_state=satrec,
            mass_kg=mass_kg,
        )
