"""Physical constants and default parameters for detection and fragmentation.

Distances in km and velocities in km/s unless the name says otherwise.
"""

from __future__ import annotations

# --- Earth parameters (WGS-84) ---
EARTH_RADIUS_KM: float = 6378.137
"""Equatorial radius of Earth in km."""

EARTH_MU_KM3_S2: float = 398600.4418
"""Earth gravitational parameter (GM) in km³/s²."""

# --- Close-approach detection defaults ---
DEFAULT_TIME_STEP_S: float = 60.0
"""Default sampling step for close-approach scans and fragment propagation."""

DEFAULT_COLLISION_THRESHOLD_M: float = 1000.0
"""Default miss distance below which a local minimum is reported, in meters."""

DEFAULT_HARD_BODY_RADIUS_M: float = 1.0
"""Default per-object radius used by the probability heuristic, in meters."""

PROBABILITY_DECAY_FACTOR_S: float = 0.1
"""Seconds of relative travel per e-folding of the probability heuristic."""

# --- Collision simulation defaults ---
DEFAULT_OBJECT_MASS_KG: float = 100.0
"""Mass assumed for an object whose mass is unknown."""

DEFAULT_MODEL_NAME: str = "nasa"
"""Registry name of the collision model used when none is requested."""

MIN_FRAGMENT_COUNT: int = 10
"""Every collision produces at least this many fragments."""

# --- NASA power-law breakup model ---
NASA_FRAGMENTS_PER_KG: float = 0.1
"""One fragment per 10 kg of combined mass."""

NASA_MIN_FRAGMENT_MASS_KG: float = 0.001
"""Lower bound of the fragment mass distribution."""

NASA_MAX_FRAGMENT_MASS_KG: float = 10.0
"""Upper bound of the fragment mass distribution."""

NASA_POWER_LAW_EXPONENT: float = 1.6
"""Exponent of the bounded Pareto mass distribution, N(m) ~ m^-1.6."""

NASA_MAX_DRAW_FRACTION: float = 0.5
"""A single mass draw may use at most this share of the unassigned mass."""

EJECTION_REFERENCE_MASS_KG: float = 0.001
"""Notional mass used to turn per-fragment energy into an ejection speed."""

FRAGMENT_POSITION_SPREAD_KM: float = 0.01
"""Width of the random offset applied to fragment positions along their direction."""

# --- Fragment sizing ---
FRAGMENT_DENSITY_KG_M3: float = 2700.0
"""Bulk density of fragments (aluminium) used for size estimates."""
