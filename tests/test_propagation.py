"""Tests for orbit state providers and derived orbital parameters."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import numpy as np
import pytest

from orbfrag.core.errors import PropagationError, ValidationError
from orbfrag.core.objects import OrbitingObject, StateVector
from orbfrag.core.propagation import (
    OrbitStateProvider,
    SGP4StateProvider,
    orbital_parameters,
    propagate_range,
    time_grid,
)
from orbfrag.utils.constants import EARTH_MU_KM3_S2, EARTH_RADIUS_KM

from conftest import EPOCH, AnalyticProvider, LinearOrbit

ISS_LINE1 = "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993"
ISS_LINE2 = "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596"
ISS_EPOCH = datetime(2024, 2, 14, 13, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def iss() -> OrbitingObject:
    return OrbitingObject.from_tle(ISS_LINE1, ISS_LINE2, "ISS (ZARYA)", mass_kg=420000.0)


class TestOrbitingObject:

    def test_from_tle(self, iss):
        assert iss.norad_id == 25544
        assert iss.name == "ISS (ZARYA)"
        assert iss.mass_kg == 420000.0
        assert iss.orbital_state is not None

    def test_from_tle_invalid(self):
        with pytest.raises(ValidationError, match="line 1"):
            OrbitingObject.from_tle("1 25544U", ISS_LINE2)
        with pytest.raises(ValidationError, match="line 2"):
            OrbitingObject.from_tle(ISS_LINE1, ISS_LINE1)

    def test_effective_mass(self):
        assert OrbitingObject(1, "A", None).effective_mass_kg == 100.0
        assert OrbitingObject(1, "A", None, mass_kg=0.0).effective_mass_kg == 100.0
        assert OrbitingObject(1, "A", None, mass_kg=5.0).effective_mass_kg == 5.0

    def test_handle_excluded_from_equality(self):
        assert OrbitingObject(1, "A", object()) == OrbitingObject(1, "A", object())


class TestSGP4StateProvider:

    def test_conforms_to_protocol(self):
        assert isinstance(SGP4StateProvider(), OrbitStateProvider)

    def test_propagate_near_epoch(self, iss):
        state = SGP4StateProvider().propagate(iss.orbital_state, ISS_EPOCH)

        assert isinstance(state, StateVector)
        assert state.epoch == ISS_EPOCH
        assert state.position_km.shape == (3,)
        assert 6500 < np.linalg.norm(state.position_km) < 7000
        assert 7.0 < np.linalg.norm(state.velocity_km_s) < 8.0

    def test_non_utc_time_is_converted(self, iss):
        provider = SGP4StateProvider()
        local = ISS_EPOCH.astimezone(timezone(timedelta(hours=8)))

        np.testing.assert_allclose(provider.propagate(iss.orbital_state, local).position_km,
                                   provider.propagate(iss.orbital_state, ISS_EPOCH).position_km)

    def test_propagation_far_beyond_epoch(self, iss):
        """Far from epoch SGP4 may give up; that must surface as PropagationError."""
        try:
            state = SGP4StateProvider().propagate(iss.orbital_state, ISS_EPOCH + timedelta(days=365 * 50))
            assert np.all(np.isfinite(state.position_km))
        except PropagationError:
            pass

    def test_error_code_raises(self):
        satrec = MagicMock()
        satrec.satnum = 99999
        satrec.sgp4.return_value = (6, (math.nan,) * 3, (math.nan,) * 3)

        with pytest.raises(PropagationError, match="error code 6") as excinfo:
            SGP4StateProvider().propagate(satrec, ISS_EPOCH)
        assert excinfo.value.norad_id == 99999
        assert excinfo.value.code == 6
        assert excinfo.value.time == ISS_EPOCH

    def test_non_finite_state_raises(self):
        satrec = MagicMock()
        satrec.satnum = 99999
        satrec.sgp4.return_value = (0, (math.nan, 0.0, 0.0), (0.0, 7.5, 0.0))

        with pytest.raises(PropagationError, match="non-finite"):
            SGP4StateProvider().propagate(satrec, ISS_EPOCH)


class TestTimeGrid:

    def test_inclusive_end(self):
        grid = time_grid(EPOCH, EPOCH + timedelta(seconds=120), 60)
        assert grid == [EPOCH, EPOCH + timedelta(seconds=60), EPOCH + timedelta(seconds=120)]

    def test_single_instant(self):
        assert time_grid(EPOCH, EPOCH, 60) == [EPOCH]

    def test_fractional_step(self):
        grid = time_grid(EPOCH, EPOCH + timedelta(seconds=0.3), 0.1)
        assert len(grid) == 4

    @pytest.mark.parametrize("step", [math.nan, math.inf, 0.0])
    def test_invalid_step(self, step):
        with pytest.raises(ValidationError, match="step_seconds"):
            time_grid(EPOCH, EPOCH + timedelta(minutes=5), step)


class TestPropagateRange:

    def test_skips_failed_samples(self):
        handle = LinearOrbit((7000.0, 0.0, 0.0), (0.0, 7.5, 0.0))
        provider = AnalyticProvider(fail_at={EPOCH + timedelta(seconds=60)})
        states = propagate_range(provider, handle, EPOCH, EPOCH + timedelta(seconds=180))

        assert [s.epoch for s in states] == [
            EPOCH, EPOCH + timedelta(seconds=120), EPOCH + timedelta(seconds=180),
        ]
        np.testing.assert_allclose(states[1].position_km, [7000.0, 900.0, 0.0])

    def test_sgp4_range(self, iss):
        states = propagate_range(SGP4StateProvider(), iss.orbital_state,
                                 ISS_EPOCH, ISS_EPOCH + timedelta(hours=1), step_seconds=600)
        assert len(states) == 7
        for state in states:
            assert 200 < np.linalg.norm(state.position_km) - EARTH_RADIUS_KM < 500


class TestOrbitalParameters:

    def test_circular_equatorial_orbit(self):
        r = 7000.0
        v = math.sqrt(EARTH_MU_KM3_S2 / r)
        params = orbital_parameters(np.array([r, 0.0, 0.0]), np.array([0.0, v, 0.0]))

        assert params.semi_major_axis_km == pytest.approx(r)
        assert params.eccentricity == pytest.approx(0.0, abs=1e-9)
        assert params.period_s == pytest.approx(2 * math.pi * math.sqrt(r ** 3 / EARTH_MU_KM3_S2))
        assert params.altitude_km == pytest.approx(r - EARTH_RADIUS_KM)
        assert params.inclination_deg == pytest.approx(0.0)

    def test_polar_orbit_inclination(self):
        r = 7000.0
        v = math.sqrt(EARTH_MU_KM3_S2 / r)
        params = orbital_parameters(np.array([r, 0.0, 0.0]), np.array([0.0, 0.0, v]))
        assert params.inclination_deg == pytest.approx(90.0)

    def test_escape_velocity_is_unbound(self):
        r = 7000.0
        v = 1.1 * math.sqrt(2 * EARTH_MU_KM3_S2 / r)
        params = orbital_parameters(np.array([r, 0.0, 0.0]), np.array([0.0, v, 0.0]))

        assert params.semi_major_axis_km < 0
        assert params.eccentricity > 1.0
        assert math.isnan(params.period_s)

    def test_iss_parameters(self, iss):
        state = SGP4StateProvider().propagate(iss.orbital_state, ISS_EPOCH)
        params = orbital_parameters(state.position_km, state.velocity_km_s)

        assert params.inclination_deg == pytest.approx(51.64, abs=0.5)
        assert params.eccentricity < 0.01
        assert 5400 < params.period_s < 5700
