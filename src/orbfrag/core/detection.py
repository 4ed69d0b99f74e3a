"""Close-approach detection: find local distance minima between object pairs."""
from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from itertools import combinations
from typing import Iterator, Sequence

import numpy as np
from numpy.typing import NDArray

from orbfrag.core.errors import PropagationError, ValidationError
from orbfrag.core.objects import OrbitingObject, StateVector
from orbfrag.core.propagation import OrbitStateProvider, time_grid
from orbfrag.utils.constants import DEFAULT_COLLISION_THRESHOLD_M, DEFAULT_TIME_STEP_S

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloseApproachEvent:
    """A local minimum in the distance between two objects, below threshold.

    Attributes:
        time: Sample time of the minimum (UTC).
        distance_m: Separation at ``time`` in meters.
        object1_id: NORAD ID of the first object of the pair.
        object2_id: NORAD ID of the second object of the pair.
        object1_name: Display name of the first object.
        object2_name: Display name of the second object.
        position1_km: Position of the first object at ``time``.
        velocity1_km_s: Velocity of the first object at ``time``.
        position2_km: Position of the second object at ``time``.
        velocity2_km_s: Velocity of the second object at ``time``.
        probability: Collision probability, once estimated.
    """

    time: datetime
    distance_m: float
    object1_id: int
    object2_id: int
    object1_name: str
    object2_name: str
    position1_km: NDArray[np.float64]
    velocity1_km_s: NDArray[np.float64]
    position2_km: NDArray[np.float64]
    velocity2_km_s: NDArray[np.float64]
    probability: float | None = None

    @property
    def relative_velocity_m_s(self) -> float:
        """Relative speed of the pair at ``time`` in m/s."""
        return relative_velocity_m_s(self.velocity1_km_s, self.velocity2_km_s)


def separation_m(pos1_km: NDArray[np.float64], pos2_km: NDArray[np.float64]) -> float:
    """Euclidean distance between two km positions, in meters."""
    return float(np.linalg.norm(np.asarray(pos1_km) - np.asarray(pos2_km))) * 1000.0


def relative_velocity_m_s(vel1_km_s: NDArray[np.float64], vel2_km_s: NDArray[np.float64]) -> float:
    """Magnitude of the velocity difference of two km/s vectors, in m/s."""
    return float(np.linalg.norm(np.asarray(vel1_km_s) - np.asarray(vel2_km_s))) * 1000.0


_Sample = tuple[datetime, float, StateVector, StateVector]


def _pair_samples(
    object1: OrbitingObject,
    object2: OrbitingObject,
    times: list[datetime],
    provider: OrbitStateProvider,
) -> Iterator[_Sample | None]:
    """Yield one sample per time, or None where either object failed to propagate."""
    for t in times:
        try:
            s1 = provider.propagate(object1.orbital_state, t)
            s2 = provider.propagate(object2.orbital_state, t)
        except PropagationError as e:
            logger.debug("Skipping sample %s for pair %d/%d: %s",
                         t, object1.norad_id, object2.norad_id, e)
            yield None
            continue
        yield t, separation_m(s1.position_km, s2.position_km), s1, s2


def _validate_window(start: datetime, end: datetime, step_seconds: float, threshold_m: float) -> None:
    if not math.isfinite(threshold_m) or threshold_m <= 0:
        raise ValidationError(f"threshold_m must be a positive finite number, got {threshold_m}")
    if not math.isfinite(step_seconds) or step_seconds <= 0:
        raise ValidationError(f"step_seconds must be a positive finite number, got {step_seconds}")
    if end < start:
        raise ValidationError(f"end ({end}) is before start ({start})")


def _validate_object(obj: OrbitingObject) -> None:
    if obj.orbital_state is None:
        logger.error("Object %d (%s) has no orbital data", obj.norad_id, obj.name)
        raise ValidationError(f"Object {obj.norad_id} missing orbital data")


def find_close_approaches(
    object1: OrbitingObject,
    object2: OrbitingObject,
    start: datetime,
    end: datetime,
    provider: OrbitStateProvider,
    step_seconds: float = DEFAULT_TIME_STEP_S,
    threshold_m: float = DEFAULT_COLLISION_THRESHOLD_M,
) -> list[CloseApproachEvent]:
    """Scan one pair for local distance minima below a threshold.

    A sample is reported when it is below ``threshold_m``, the previous valid
    sample was strictly farther, and the next sample is strictly farther (or
    there is no next sample in the window). Samples where either object fails
    to propagate are skipped and do not count as "previous"; a sample whose
    look-ahead fails is skipped as well.

    Args:
        object1: First object of the pair.
        object2: Second object of the pair.
        start: Window start (UTC).
        end: Window end (UTC, inclusive).
        provider: Orbit state provider.
        step_seconds: Sampling step in seconds.
        threshold_m: Reporting threshold in meters.

    Returns:
        Events for this pair in time order.

    Raises:
        ValidationError: For a non-positive or non-finite step or threshold,
            a reversed window, or an object without orbital data.
    """
    _validate_window(start, end, step_seconds, threshold_m)
    _validate_object(object1)
    _validate_object(object2)
    return _scan_pair(object1, object2, start, end, provider, step_seconds, threshold_m)


def _scan_pair(
    object1: OrbitingObject,
    object2: OrbitingObject,
    start: datetime,
    end: datetime,
    provider: OrbitStateProvider,
    step_seconds: float,
    threshold_m: float,
) -> list[CloseApproachEvent]:
    times = time_grid(start, end, step_seconds)
    samples = _pair_samples(object1, object2, times, provider)

    events: list[CloseApproachEvent] = []
    last_distance = float("inf")
    valid_samples = 0
    current = next(samples, None)

    for index in range(len(times)):
        following = next(samples, None) if index + 1 < len(times) else None
        if current is not None:
            valid_samples += 1
            t, distance, s1, s2 = current
            if distance < threshold_m and last_distance > distance:
                is_last = index + 1 == len(times)
                if is_last or (following is not None and following[1] > distance):
                    events.append(CloseApproachEvent(
                        time=t,
                        distance_m=distance,
                        object1_id=object1.norad_id,
                        object2_id=object2.norad_id,
                        object1_name=object1.name,
                        object2_name=object2.name,
                        position1_km=s1.position_km,
                        velocity1_km_s=s1.velocity_km_s,
                        position2_km=s2.position_km,
                        velocity2_km_s=s2.velocity_km_s,
                    ))
                elif following is None:
                    # look-ahead failed, the minimum cannot be confirmed
                    current = following
                    continue
            last_distance = distance
        current = following

    if valid_samples == 0:
        logger.warning("Pair %d/%d never propagated in [%s, %s]",
                       object1.norad_id, object2.norad_id, start, end)

    logger.debug("Pair %d/%d: %d close approaches in %d samples",
                 object1.norad_id, object2.norad_id, len(events), len(times))
    return events


def detect_close_approaches(
    objects: Sequence[OrbitingObject],
    start: datetime,
    end: datetime,
    provider: OrbitStateProvider,
    step_seconds: float = DEFAULT_TIME_STEP_S,
    threshold_m: float = DEFAULT_COLLISION_THRESHOLD_M,
    max_workers: int | None = None,
) -> list[CloseApproachEvent]:
    """Scan every pair of objects for close approaches.

    Each unordered pair is scanned independently with
    :func:`find_close_approaches`. Cost grows with pairs times samples; the
    caller is responsible for keeping catalogs and step sizes reasonable.

    Args:
        objects: Objects to screen, in a meaningful order (ties in the output
            follow pair order).
        start: Window start (UTC).
        end: Window end (UTC, inclusive).
        provider: Orbit state provider, shared read-only across pairs.
        step_seconds: Sampling step in seconds.
        threshold_m: Reporting threshold in meters.
        max_workers: If greater than 1, scan pairs on a thread pool.

    Returns:
        Events from all pairs, sorted by time (stable).

    Raises:
        ValidationError: For fewer than two objects, duplicate NORAD IDs,
            objects without orbital data, or invalid window parameters.
    """
    if len(objects) < 2:
        raise ValidationError(f"At least 2 objects required, got {len(objects)}")
    _validate_window(start, end, step_seconds, threshold_m)

    seen: set[int] = set()
    for obj in objects:
        _validate_object(obj)
        if obj.norad_id in seen:
            raise ValidationError(f"Duplicate object {obj.norad_id}")
        seen.add(obj.norad_id)

    pairs = list(combinations(objects, 2))
    logger.info("detect_close_approaches: %d objects, %d pairs, %s to %s, %.0fs step, %.1fm threshold",
                len(objects), len(pairs), start.isoformat(), end.isoformat(), step_seconds, threshold_m)

    def scan(pair: tuple[OrbitingObject, OrbitingObject]) -> list[CloseApproachEvent]:
        return _scan_pair(pair[0], pair[1], start, end, provider, step_seconds, threshold_m)

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            per_pair = list(executor.map(scan, pairs))
    else:
        per_pair = [scan(pair) for pair in pairs]

    events = [event for pair_events in per_pair for event in pair_events]
    events.sort(key=lambda e: e.time)
    logger.info("detect_close_approaches: found %d close approaches", len(events))
    return events
