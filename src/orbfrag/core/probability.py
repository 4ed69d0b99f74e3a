"""Collision probability estimation for close-approach events.

The estimate is a heuristic: probability decays exponentially with the miss
distance beyond the combined radius, on a length scale set by how far the
pair travels relative to each other in a tenth of a second. It is not a
Gaussian (covariance-based) conjunction probability.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Iterable

from orbfrag.core.detection import CloseApproachEvent
from orbfrag.core.errors import ValidationError
from orbfrag.utils.constants import DEFAULT_HARD_BODY_RADIUS_M, PROBABILITY_DECAY_FACTOR_S

logger = logging.getLogger(__name__)


def collision_probability(
    event: CloseApproachEvent,
    radius1_m: float = DEFAULT_HARD_BODY_RADIUS_M,
    radius2_m: float = DEFAULT_HARD_BODY_RADIUS_M,
) -> float:
    """Estimate the probability that a close approach is a collision.

    Args:
        event: Close-approach event.
        radius1_m: Radius of the first object in meters.
        radius2_m: Radius of the second object in meters.

    Returns:
        1.0 if the bodies overlap, otherwise
        ``min(1, exp(-(distance - R) / (v_rel * 0.1)))``. A pair with no
        relative motion that does not overlap gets 0.0.

    Raises:
        ValidationError: If a radius is negative.
    """
    if radius1_m < 0 or radius2_m < 0:
        raise ValidationError(f"Radii must be non-negative, got {radius1_m} and {radius2_m}")

    combined_radius = radius1_m + radius2_m
    if event.distance_m <= combined_radius:
        return 1.0

    relative_velocity = event.relative_velocity_m_s
    if relative_velocity == 0.0:
        return 0.0

    miss_distance = event.distance_m - combined_radius
    probability = math.exp(-miss_distance / (relative_velocity * PROBABILITY_DECAY_FACTOR_S))
    return min(probability, 1.0)


def attach_probabilities(
    events: Iterable[CloseApproachEvent],
    radius1_m: float = DEFAULT_HARD_BODY_RADIUS_M,
    radius2_m: float = DEFAULT_HARD_BODY_RADIUS_M,
) -> list[CloseApproachEvent]:
    """Return copies of ``events`` with ``probability`` filled in, order kept."""
    annotated = [
        dataclasses.replace(event, probability=collision_probability(event, radius1_m, radius2_m))
        for event in events
    ]
    logger.debug("Estimated collision probability for %d events", len(annotated))
    return annotated
