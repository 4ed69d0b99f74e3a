"""orbfrag Batch Screening — scan a small catalog for close approaches.

Defaults (step, threshold, worker threads) come from ORBFRAG_* environment
variables, see :mod:`orbfrag.config`.
"""

import logging
from datetime import datetime, timedelta, timezone

from orbfrag import CollisionSimulator, OrbitingObject, SGP4StateProvider, Settings, attach_probabilities

logging.basicConfig(level=logging.INFO)

CATALOG = """\
ISS (ZARYA)
1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993
2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596
CSS (TIANHE)
1 48274U 21035A   24045.50261574  .00021540  00000-0  25163-3 0  9993
2 48274  41.4681 279.1498 0005372 149.8847 345.3740 15.62096269157018
HST
1 20580U 90037B   24045.55478014  .00001456  00000-0  73052-4 0  9994
2 20580  28.4701  41.0696 0002622 348.3544 140.2428 15.09435694872912
"""

lines = CATALOG.splitlines()
objects = [
    OrbitingObject.from_tle(lines[i + 1], lines[i + 2], name=lines[i])
    for i in range(0, len(lines), 3)
]

settings = Settings.from_env()
simulator = CollisionSimulator(SGP4StateProvider(), settings=settings)

start = datetime(2024, 2, 14, 13, 0, tzinfo=timezone.utc)
# a deliberately loose threshold so the demo has something to show
events = simulator.detect(objects, start, start + timedelta(hours=12), threshold_m=2_000_000)

for event in attach_probabilities(events, radius1_m=50.0, radius2_m=10.0):
    print(f"{event.time:%Y-%m-%d %H:%M} | {event.object1_name} vs {event.object2_name} | "
          f"{event.distance_m / 1000:.1f} km | {event.relative_velocity_m_s:.0f} m/s | "
          f"Pc~{event.probability:.2e}")
