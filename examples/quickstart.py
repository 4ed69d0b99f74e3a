"""orbfrag Quickstart — smash two satellites together and inspect the debris."""

from datetime import datetime, timedelta, timezone

import numpy as np

from orbfrag import CollisionSimulator, OrbitingObject, SGP4StateProvider, orbital_parameters

iss = OrbitingObject.from_tle(
    "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993",
    "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596",
    name="ISS (ZARYA)",
    mass_kg=420000.0,
)
css = OrbitingObject.from_tle(
    "1 48274U 21035A   24045.50261574  .00021540  00000-0  25163-3 0  9993",
    "2 48274  41.4681 279.1498 0005372 149.8847 345.3740 15.62096269157018",
    name="CSS (TIANHE)",
)

impact = datetime(2024, 2, 14, 13, 0, tzinfo=timezone.utc)
simulator = CollisionSimulator(SGP4StateProvider())
result = simulator.simulate_collision(iss, css, impact, rng=np.random.default_rng(1))

outcome = result.outcome
print(f"Model:          {result.model_name}")
print(f"Total mass:     {outcome.total_mass_kg:.0f} kg")
print(f"Impact speed:   {outcome.relative_velocity_m_s:.0f} m/s")
print(f"Energy:         {outcome.energy_j:.3e} J")
print(f"Fragments:      {len(result.fragments)}")

largest = sorted(result.fragments, key=lambda f: f.mass_kg, reverse=True)[:5]
for fragment in largest:
    orbit = orbital_parameters(fragment.position_km, fragment.velocity_km_s)
    print(f"  {fragment.id:>14} {fragment.mass_kg:10.3f} kg  {fragment.diameter_m:6.3f} m  "
          f"e={orbit.eccentricity:.3f}")

# First ten minutes of dispersal (straight-line approximation)
trajectories = simulator.propagate_fragments(result.fragments, impact, impact + timedelta(minutes=10))
spread = max(
    np.linalg.norm(t.samples[-1].position_km - outcome.position_km) for t in trajectories
)
print(f"Debris spread after 10 min: {spread:.0f} km")
