"""
Range Table Tests
=================
End-to-end behavior of compute_trajectory, secondary effects, input
errors and angular conversions.
Run: python -m pytest tests/ -v
"""

import sys
import os
import logging
import math
import dataclasses
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from rangecard import (
    BallisticInput, TrajectoryRow, compute_trajectory, sample_trajectory, trajectory_arrays,
    air_state, solve_zero_angle, DragFunction, ClickUnit, TwistDirection,
    BallisticInputError, InvalidRangeError, InvalidVelocityError, InvalidClickSizeError,
    InvalidAtmosphereError,
)
from rangecard.logger import logger, enable_file_logging, disable_file_logging
from rangecard.trajectory import (
    coriolis_deflection_inches, spin_drift_inches, kinetic_energy,
)
from rangecard.units import (
    inches_to_moa, inches_to_mil, moa_to_inches, mil_to_inches,
    inches_to_angular, to_clicks, clicks_to_angular,
)


def baseline(**overrides) -> BallisticInput:
    """.308-class load: 2600 fps, 0.475 G7, 168 gr, 100 yd zero, 1.75 in sight."""
    params = dict(
        muzzle_velocity_fps=2600.0,
        ballistic_coefficient=0.475,
        drag_function='G7',
        bullet_weight_grains=168.0,
        zero_range_yards=100.0,
        sight_height_inches=1.75,
        wind_speed_mph=0.0,
        wind_direction_deg=90.0,
        temperature_c=15.0,
        pressure_hpa=1013.0,
        coriolis_enabled=False,
        spin_drift_enabled=False,
        click_unit='MOA',
        click_size=0.25,
    )
    params.update(overrides)
    return BallisticInput(**params)


@pytest.fixture(scope="module")
def baseline_rows():
    return compute_trajectory(baseline())


class TestBallisticInput:
    """Verify input record coercion and immutability."""

    def test_string_tags_coerced(self):
        inp = BallisticInput(drag_function='g1', click_unit='mil', twist_direction='lh')
        assert inp.drag_function is DragFunction.G1
        assert inp.click_unit is ClickUnit.MIL
        assert inp.twist_direction is TwistDirection.LH

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValueError):
            BallisticInput(click_unit='DEG')

    def test_frozen(self):
        inp = baseline()
        with pytest.raises(dataclasses.FrozenInstanceError):
            inp.muzzle_velocity_fps = 3000.0


class TestTrajectory:
    """Verify the range table for a baseline load."""

    def test_ranges(self, baseline_rows):
        assert [r.range_yards for r in baseline_rows] == list(range(25, 1001, 25))
        assert all(isinstance(r.range_yards, int) for r in baseline_rows)

    def test_velocity_and_energy_decrease(self, baseline_rows):
        for near, far in zip(baseline_rows, baseline_rows[1:]):
            assert far.velocity_fps < near.velocity_fps
            assert far.energy_ftlb < near.energy_ftlb
        assert baseline_rows[0].velocity_fps < 2600.0

    def test_time_increases(self, baseline_rows):
        times = [r.time_s for r in baseline_rows]
        assert times[0] > 0
        assert all(a < b for a, b in zip(times, times[1:]))

    def test_on_sight_line_at_zero(self, baseline_rows):
        row = next(r for r in baseline_rows if r.range_yards == 100)
        assert abs(row.drop_inches) < 0.01

    def test_drop_grows_past_zero(self, baseline_rows):
        past_zero = [r.drop_inches for r in baseline_rows if r.range_yards >= 100]
        assert all(a <= b for a, b in zip(past_zero, past_zero[1:]))
        assert past_zero[-1] > 0

    def test_bullet_below_sight_line_near_muzzle(self, baseline_rows):
        """At 25 yd the bullet has not yet climbed the full sight height."""
        assert baseline_rows[0].drop_inches > 0
        assert baseline_rows[0].drop_inches < 1.75

    def test_angular_columns_consistent(self, baseline_rows):
        for r in baseline_rows:
            assert r.drop_moa == pytest.approx(inches_to_moa(r.drop_inches, r.range_yards))
            assert r.drop_mil == pytest.approx(inches_to_mil(r.drop_inches, r.range_yards))

    def test_energy_formula(self, baseline_rows):
        for r in baseline_rows:
            assert r.energy_ftlb == pytest.approx(168.0 * r.velocity_fps ** 2 / 450240.0)

    def test_moa_clicks(self, baseline_rows):
        for r in baseline_rows:
            assert r.clicks == math.floor(r.drop_moa / 0.25 + 0.5)

    def test_mil_clicks(self):
        rows = compute_trajectory(baseline(click_unit='MIL', click_size=0.1))
        for r in rows:
            assert r.clicks == math.floor(r.drop_mil / 0.1 + 0.5)
            assert r.windage_clicks == math.floor(r.windage_mil / 0.1 + 0.5)

    def test_repeatable(self):
        """Same input, bit-identical output."""
        assert compute_trajectory(baseline()) == compute_trajectory(baseline())

    def test_g1_differs_from_g7(self):
        g7 = compute_trajectory(baseline(drag_function='G7'))
        g1 = compute_trajectory(baseline(drag_function='G1'))
        drop_g7 = next(r.drop_inches for r in g7 if r.range_yards == 500)
        drop_g1 = next(r.drop_inches for r in g1 if r.range_yards == 500)
        assert drop_g7 != drop_g1

    def test_thin_air_retains_velocity(self):
        sea = compute_trajectory(baseline(pressure_hpa=None, density_altitude_ft=0.0))
        high = compute_trajectory(baseline(pressure_hpa=None, density_altitude_ft=8000.0))
        assert high[-1].velocity_fps > sea[-1].velocity_fps

    def test_zero_bc_is_clamped(self):
        rows = compute_trajectory(baseline(ballistic_coefficient=0.0))
        assert len(rows) > 0
        assert rows[0].range_yards == 25

    def test_negative_bc_is_clamped(self):
        assert compute_trajectory(baseline(ballistic_coefficient=-0.3)) == \
            compute_trajectory(baseline(ballistic_coefficient=0.0))

    def test_cutoff_velocity_ends_table(self):
        inp = baseline()
        air = air_state(inp)
        angle = solve_zero_angle(inp.muzzle_velocity_fps, inp.ballistic_coefficient,
                                 inp.drag_function, air.density_ratio, air.speed_of_sound,
                                 inp.zero_range_yards, inp.sight_height_feet)
        full = sample_trajectory(inp, air, angle)
        cut = sample_trajectory(inp, air, angle, cutoff_velocity_fps=2590.0)
        assert 0 < len(cut) < len(full)
        assert all(r.velocity_fps >= 2590.0 for r in cut)
        assert cut == full[:len(cut)]

    def test_slow_load_ends_below_200_fps(self, caplog):
        """A 500 fps, 0.05 G1 load drops below 200 fps well short of 1000 yd."""
        caplog.set_level(logging.DEBUG, logger='rangecard')
        rows = compute_trajectory(baseline(muzzle_velocity_fps=500.0,
                                           ballistic_coefficient=0.05,
                                           drag_function='G1'))
        assert len(rows) > 0
        assert rows[-1].range_yards < 1000
        assert [r.range_yards for r in rows] == list(range(25, rows[-1].range_yards + 1, 25))
        assert all(r.velocity_fps >= 200.0 for r in rows)
        assert "below 200.0 ft/s" in caplog.text

    def test_stall_ends_table_without_error(self, caplog):
        """When the integrator refuses a step the rows so far are returned."""
        caplog.set_level(logging.DEBUG, logger='rangecard')
        inp = baseline(muzzle_velocity_fps=500.0, ballistic_coefficient=0.0,
                       drag_function='G1')
        rows = sample_trajectory(inp, air_state(inp), 0.0, cutoff_velocity_fps=0.0)
        assert 0 < len(rows) < 40
        assert rows[-1].velocity_fps > 0
        assert "stalled" in caplog.text

    def test_custom_range_step(self):
        rows = compute_trajectory(baseline(), range_step_yards=50, max_range_yards=600)
        assert [r.range_yards for r in rows] == list(range(50, 601, 50))

    def test_invalid_range_step(self):
        inp = baseline()
        with pytest.raises(ValueError):
            sample_trajectory(inp, air_state(inp), 0.001, range_step_yards=0)


class TestWind:
    """Verify crosswind drift."""

    def test_no_wind_no_windage(self, baseline_rows):
        for r in baseline_rows:
            assert r.windage_inches == 0
            assert r.windage_moa == 0
            assert r.windage_mil == 0
            assert r.windage_clicks == 0

    def test_headwind_no_windage(self):
        rows = compute_trajectory(baseline(wind_speed_mph=10.0, wind_direction_deg=0.0))
        assert all(r.windage_inches == 0 for r in rows)

    def test_crosswind_grows_with_range(self):
        rows = compute_trajectory(baseline(wind_speed_mph=10.0, wind_direction_deg=90.0))
        drift = [abs(r.windage_inches) for r in rows]
        assert all(d > 0 for d in drift)
        assert all(a <= b for a, b in zip(drift, drift[1:]))

    def test_crosswind_is_speed_times_time(self):
        rows = compute_trajectory(baseline(wind_speed_mph=10.0, wind_direction_deg=90.0))
        for r in rows:
            assert r.windage_inches == pytest.approx(10.0 * 1.4667 * r.time_s * 12.0)

    def test_opposite_wind_opposite_drift(self):
        right = compute_trajectory(baseline(wind_speed_mph=10.0, wind_direction_deg=90.0))
        left = compute_trajectory(baseline(wind_speed_mph=10.0, wind_direction_deg=270.0))
        for r, l in zip(right, left):
            assert r.windage_inches == pytest.approx(-l.windage_inches)


class TestSecondaryEffects:
    """Verify Coriolis and spin drift terms."""

    def test_coriolis_zero_at_equator(self):
        rows = compute_trajectory(baseline(coriolis_enabled=True, latitude_deg=0.0))
        assert all(r.windage_inches == 0 for r in rows)

    def test_coriolis_hemispheres(self):
        north = compute_trajectory(baseline(coriolis_enabled=True, latitude_deg=45.0))
        south = compute_trajectory(baseline(coriolis_enabled=True, latitude_deg=-45.0))
        assert north[-1].windage_inches > 0
        assert south[-1].windage_inches == pytest.approx(-north[-1].windage_inches)

    def test_coriolis_formula(self):
        expected = 2 * 7.2921e-5 * math.sin(math.radians(30.0)) * 2500.0 * 1.2 * 12.0
        assert coriolis_deflection_inches(30.0, 2500.0, 1.2) == pytest.approx(expected)

    def test_coriolis_ignored_when_disabled(self, baseline_rows):
        rows = compute_trajectory(baseline(coriolis_enabled=False, latitude_deg=60.0))
        assert rows == baseline_rows

    def test_spin_drift_formula(self):
        mils = 0.15 * 0.5 ** 1.83
        assert spin_drift_inches(500) == pytest.approx(mils * 0.036 * 500)
        assert spin_drift_inches(0) == 0.0

    def test_spin_drift_scale_capped(self):
        capped = 0.15 * 1.5 ** 1.83
        assert spin_drift_inches(2000) == pytest.approx(capped * 0.036 * 2000)

    def test_spin_drift_direction(self):
        rh = compute_trajectory(baseline(spin_drift_enabled=True, twist_direction='RH'))
        lh = compute_trajectory(baseline(spin_drift_enabled=True, twist_direction='LH'))
        assert rh[-1].windage_inches > 0
        assert lh[-1].windage_inches == pytest.approx(-rh[-1].windage_inches)
        drift = [r.windage_inches for r in rh]
        assert all(a < b for a, b in zip(drift, drift[1:]))

    def test_kinetic_energy(self):
        assert kinetic_energy(168.0, 2600.0) == pytest.approx(2522.4, abs=0.1)


class TestInputErrors:
    """Verify rejected inputs."""

    @pytest.mark.parametrize("zero", [0.0, -100.0, 1000.5, 2000.0, float('nan'), float('inf')])
    def test_invalid_zero_range(self, zero):
        with pytest.raises(InvalidRangeError):
            compute_trajectory(baseline(zero_range_yards=zero))

    def test_zero_at_table_end_accepted(self):
        rows = compute_trajectory(baseline(zero_range_yards=1000.0))
        assert abs(rows[-1].drop_inches) < 0.01

    @pytest.mark.parametrize("v0", [0.0, -2600.0, 499.0, 4500.5, float('nan'), float('inf')])
    def test_invalid_muzzle_velocity(self, v0):
        with pytest.raises(InvalidVelocityError):
            compute_trajectory(baseline(muzzle_velocity_fps=v0))

    @pytest.mark.parametrize("v0", [500.0, 4500.0])
    def test_muzzle_velocity_band_inclusive(self, v0):
        assert len(compute_trajectory(baseline(muzzle_velocity_fps=v0))) > 0

    @pytest.mark.parametrize("click", [0.0, -0.25])
    def test_invalid_click_size(self, click):
        with pytest.raises(InvalidClickSizeError):
            compute_trajectory(baseline(click_size=click))

    @pytest.mark.parametrize("temp", [-300.0, -274.0, float('nan'), float('-inf')])
    def test_temperature_below_absolute_zero(self, temp):
        with pytest.raises(InvalidAtmosphereError) as exc_info:
            compute_trajectory(baseline(temperature_c=temp))
        assert exc_info.value.field == 'temperature_c'

    def test_temperature_checked_without_pressure(self):
        with pytest.raises(InvalidAtmosphereError):
            compute_trajectory(baseline(temperature_c=-300.0, pressure_hpa=None))

    @pytest.mark.parametrize("pressure", [0.0, -1013.0, float('nan'), float('inf')])
    def test_invalid_pressure(self, pressure):
        with pytest.raises(InvalidAtmosphereError) as exc_info:
            compute_trajectory(baseline(pressure_hpa=pressure))
        assert exc_info.value.field == 'pressure_hpa'

    def test_invalid_density_altitude(self):
        with pytest.raises(InvalidAtmosphereError):
            compute_trajectory(baseline(pressure_hpa=None, density_altitude_ft=float('nan')))

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError) as exc_info:
            compute_trajectory(baseline(zero_range_yards=-1.0))
        assert isinstance(exc_info.value, BallisticInputError)
        assert exc_info.value.field == 'zero_range_yards'


class TestUnits:
    """Verify angular conversions."""

    def test_one_moa_at_100(self):
        assert inches_to_moa(1.0471975511965976, 100) == pytest.approx(1.0)

    def test_one_mil_at_100(self):
        assert inches_to_mil(3.6, 100) == pytest.approx(1.0)

    def test_non_positive_range(self):
        assert inches_to_moa(5.0, 0) == 0.0
        assert inches_to_mil(5.0, -10) == 0.0

    def test_inverse_conversions(self):
        assert moa_to_inches(inches_to_moa(7.3, 450), 450) == pytest.approx(7.3)
        assert mil_to_inches(inches_to_mil(7.3, 450), 450) == pytest.approx(7.3)

    def test_angular_dispatch(self):
        assert inches_to_angular(10.0, 300, 'MIL') == inches_to_mil(10.0, 300)
        assert inches_to_angular(10.0, 300, ClickUnit.MOA) == inches_to_moa(10.0, 300)

    def test_clicks(self):
        assert to_clicks(1.0, 0.25) == 4
        assert to_clicks(-0.6, 0.1) == -6
        assert clicks_to_angular(8, 0.25) == 2.0

    def test_clicks_round_half_up(self):
        assert to_clicks(0.125, 0.25) == 1
        assert to_clicks(0.625, 0.25) == 3
        assert to_clicks(-0.125, 0.25) == 0
        assert isinstance(to_clicks(0.125, 0.25), int)


class TestOutputPlumbing:
    """Verify column view and logging."""

    def test_trajectory_arrays(self, baseline_rows):
        cols = trajectory_arrays(baseline_rows)
        assert set(cols) == {f.name for f in dataclasses.fields(TrajectoryRow)}
        np.testing.assert_array_equal(cols['range_yards'], np.arange(25, 1001, 25))
        assert len(cols['velocity_fps']) == len(baseline_rows)

    def test_file_logging(self, tmp_path):
        log_path = tmp_path / "solver.log"
        enable_file_logging(str(log_path))
        try:
            compute_trajectory(baseline(ballistic_coefficient=0.0))
        finally:
            disable_file_logging()
        text = log_path.read_text()
        assert "Zero angle" in text
        assert "clamped" in text

    def test_file_logging_keeps_caller_level(self, tmp_path):
        previous = logger.level
        logger.setLevel(logging.WARNING)
        try:
            enable_file_logging(str(tmp_path / "solver.log"))
            assert logger.isEnabledFor(logging.DEBUG)
            disable_file_logging()
            assert logger.level == logging.WARNING
        finally:
            disable_file_logging()
            logger.setLevel(previous)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
