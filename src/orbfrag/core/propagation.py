"""Orbit state providers.

The engine never propagates orbits itself. It asks an
:class:`OrbitStateProvider` for the state of a handle at an instant; the
default provider wraps SGP4 from the ``sgp4`` package.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from sgp4.api import Satrec, jday

from orbfrag.core.errors import PropagationError, ValidationError
from orbfrag.core.objects import StateVector
from orbfrag.utils.constants import (
    DEFAULT_TIME_STEP_S,
    EARTH_MU_KM3_S2 as MU,
    EARTH_RADIUS_KM as RE,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class OrbitStateProvider(Protocol):
    """Computes the state of an orbital-state handle at a given instant."""

    def propagate(self, handle: Any, time: datetime) -> StateVector:
        """Return position (km) and velocity (km/s) at ``time``.

        Raises:
            PropagationError: If the state cannot be computed.
        """
        ...


class SGP4StateProvider:
    """State provider backed by the SGP4/SDP4 implementation in ``sgp4``.

    Handles must be ``sgp4.api.Satrec`` instances.
    """

    def propagate(self, handle: Satrec, time: datetime) -> StateVector:
        # naive datetimes are taken as UTC
        utc = time.astimezone(timezone.utc) if time.tzinfo is not None else time
        jd, fr = jday(utc.year, utc.month, utc.day, utc.hour, utc.minute,
                      utc.second + utc.microsecond / 1e6)
        error_code, pos, vel = handle.sgp4(jd, fr)

        if error_code != 0:
            raise PropagationError(
                f"SGP4 propagation failed for NORAD {handle.satnum} at {time}: "
                f"error code {error_code}",
                norad_id=handle.satnum,
                time=time,
                code=error_code,
            )

        position = np.array(pos, dtype=np.float64)
        velocity = np.array(vel, dtype=np.float64)
        if not (np.all(np.isfinite(position)) and np.all(np.isfinite(velocity))):
            raise PropagationError(
                f"SGP4 returned a non-finite state for NORAD {handle.satnum} at {time}",
                norad_id=handle.satnum,
                time=time,
            )

        return StateVector(position_km=position, velocity_km_s=velocity, epoch=time)


def time_grid(start: datetime, end: datetime, step_seconds: float) -> list[datetime]:
    """Instants ``start + k * step`` for every k that stays at or before ``end``.

    Raises:
        ValidationError: If the step is not a positive finite number or the
            window is reversed.
    """
    if not math.isfinite(step_seconds) or step_seconds <= 0:
        raise ValidationError(f"step_seconds must be a positive finite number, got {step_seconds}")
    if end < start:
        raise ValidationError(f"end ({end}) is before start ({start})")

    steps = int((end - start).total_seconds() // step_seconds)
    grid = [start + timedelta(seconds=k * step_seconds) for k in range(steps + 1)]
    # float floor division can land one step short of an exact end
    next_time = start + timedelta(seconds=(steps + 1) * step_seconds)
    if next_time <= end:
        grid.append(next_time)
    return grid


def propagate_range(
    provider: OrbitStateProvider,
    handle: Any,
    start: datetime,
    end: datetime,
    step_seconds: float = DEFAULT_TIME_STEP_S,
) -> list[StateVector]:
    """Propagate one handle over a time window, skipping failed samples.

    Args:
        provider: State provider to query.
        handle: Orbital-state handle understood by ``provider``.
        start: First sample time.
        end: Last admissible sample time (inclusive).
        step_seconds: Sampling step in seconds.

    Returns:
        States for every sample that propagated successfully, in time order.
    """
    states = []
    for t in time_grid(start, end, step_seconds):
        try:
            states.append(provider.propagate(handle, t))
        except PropagationError as e:
            logger.warning("Propagation failed at %s: %s", t, e)
    return states


@dataclass(frozen=True)
class OrbitalParameters:
    """Two-body orbit description derived from a single state vector.

    Attributes:
        semi_major_axis_km: Semi-major axis in km (negative for hyperbolic).
        eccentricity: Orbital eccentricity.
        period_s: Orbital period in seconds (NaN when unbound).
        altitude_km: Height above the equatorial radius at this state.
        inclination_deg: Inclination in degrees.
    """

    semi_major_axis_km: float
    eccentricity: float
    period_s: float
    altitude_km: float
    inclination_deg: float


def orbital_parameters(
    position_km: NDArray[np.float64],
    velocity_km_s: NDArray[np.float64],
) -> OrbitalParameters:
    """Compute classical two-body parameters from position and velocity.

    Handy for checking whether a fragment stays bound after ejection.
    """
    r_vec = np.asarray(position_km, dtype=np.float64)
    v_vec = np.asarray(velocity_km_s, dtype=np.float64)
    r = float(np.linalg.norm(r_vec))
    v = float(np.linalg.norm(v_vec))

    h_vec = np.cross(r_vec, v_vec)
    h = float(np.linalg.norm(h_vec))

    energy = v ** 2 / 2 - MU / r
    a = -MU / (2 * energy) if energy != 0 else math.inf

    e_vec = ((v ** 2 - MU / r) * r_vec - float(np.dot(r_vec, v_vec)) * v_vec) / MU
    e = float(np.linalg.norm(e_vec))

    period = 2 * math.pi * math.sqrt(a ** 3 / MU) if 0 < a < math.inf else math.nan
    inclination = math.degrees(math.acos(min(1.0, max(-1.0, h_vec[2] / h)))) if h > 0 else 0.0

    return OrbitalParameters(
        semi_major_axis_km=a,
        eccentricity=e,
        period_s=period,
        altitude_km=r - RE,
        inclination_deg=inclination,
    )
