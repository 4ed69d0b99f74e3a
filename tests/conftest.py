"""Analytic orbit state providers so detection can be tested without SGP4."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone

import numpy as np
import pytest

from orbfrag.core.errors import PropagationError
from orbfrag.core.objects import OrbitingObject, StateVector

EPOCH = datetime(2024, 2, 14, 0, 0, 0, tzinfo=timezone.utc)


@dataclass(frozen=True)
class LinearOrbit:
    """Straight-line motion: position(t) = position + velocity * (t - epoch)."""

    position_km: tuple[float, float, float]
    velocity_km_s: tuple[float, float, float]
    epoch: datetime = EPOCH


@dataclass(frozen=True)
class CircularOrbit:
    """Circular motion in the x-y plane, lifted by ``z_offset_km``."""

    radius_km: float
    rate_rad_s: float
    phase_rad: float = 0.0
    z_offset_km: float = 0.0
    epoch: datetime = EPOCH


class AnalyticProvider:
    """Provider for LinearOrbit / CircularOrbit handles.

    Handles listed in ``failing`` always raise; ``fail_at`` is a set of
    instants at which every handle raises.
    """

    def __init__(self, failing=(), fail_at=()):
        self.failing = set(failing)
        self.fail_at = set(fail_at)
        self.calls = 0

    def propagate(self, handle, time: datetime) -> StateVector:
        self.calls += 1
        if handle in self.failing or time in self.fail_at:
            raise PropagationError(f"cannot propagate {handle} at {time}", time=time)

        dt = (time - handle.epoch).total_seconds()
        if isinstance(handle, LinearOrbit):
            velocity = np.array(handle.velocity_km_s, dtype=np.float64)
            position = np.array(handle.position_km, dtype=np.float64) + velocity * dt
        else:
            theta = handle.phase_rad + handle.rate_rad_s * dt
            r = handle.radius_km
            position = np.array([r * math.cos(theta), r * math.sin(theta), handle.z_offset_km])
            velocity = r * handle.rate_rad_s * np.array([-math.sin(theta), math.cos(theta), 0.0])
        return StateVector(position_km=position, velocity_km_s=velocity, epoch=time)


def make_object(norad_id: int, handle, name: str = "", mass_kg: float | None = None) -> OrbitingObject:
    return OrbitingObject(norad_id=norad_id, name=name or f"OBJ {norad_id}",
                          orbital_state=handle, mass_kg=mass_kg)


@pytest.fixture
def provider() -> AnalyticProvider:
    return AnalyticProvider()


@pytest.fixture
def stationary() -> OrbitingObject:
    """Object parked at (7000, 0, 0) km."""
    return make_object(1, LinearOrbit((7000.0, 0.0, 0.0), (0.0, 0.0, 0.0)), "TARGET")


def flyby(norad_id: int, closest_at_s: float, miss_km: float = 0.5, speed_km_s: float = 0.01) -> OrbitingObject:
    """Object passing ``miss_km`` from (7000, 0, 0) at ``closest_at_s`` after EPOCH."""
    start_x = 7000.0 - speed_km_s * closest_at_s
    return make_object(norad_id, LinearOrbit((start_x, miss_km, 0.0), (speed_km_s, 0.0, 0.0)))
