"""
Trajectory Sampler
==================
Produces the range table for one shot: drop, windage, velocity, energy
and time of flight every 25 yd out to 1000 yd.

Pipeline:
    validate input → air density ratio + speed of sound → bore angle
    (bisection) → step the integrator one range increment at a time,
    emitting one row per increment.

Sampling stops, without error, when the bullet slows below 200 ft/s or
when the integrator can no longer make downrange progress; the table is
then simply shorter.

Windage collects three lateral terms:
  - crosswind drift, accumulated as crosswind speed × time per increment
  - Coriolis deflection 2·Ω·sin(latitude)·v·t (optional)
  - spin drift, an empirical power law in range (optional)
"""

import math
from dataclasses import dataclass, fields
from typing import Dict, List

import numpy as np

from .atmosphere import AirState, air_state
from .integrator import SimState, advance
from .logger import logger
from .projectile import (
    EARTH_ROTATION_RATE, BallisticInput, TwistDirection, effective_bc, validate_input,
)
from .units import ClickUnit, inches_to_mil, inches_to_moa, mil_to_inches, to_clicks
from .zeroing import FEET_PER_YARD, solve_zero_angle


# ── Range table parameters ────────────────────────────────────────────────
RANGE_STEP_YARDS    = 25
MAX_RANGE_YARDS     = 1000
CUTOFF_VELOCITY_FPS = 200.0    # below this the drag model is not trusted
FPS_PER_MPH         = 1.4667
ENERGY_DIVISOR      = 450240.0  # grains·ft²/s² → ft·lb (2 · g · 7000)

# Empirical spin drift: SPIN_DRIFT_COEFF · (range / 1000)^SPIN_DRIFT_EXPONENT mil
SPIN_DRIFT_COEFF     = 0.15
SPIN_DRIFT_EXPONENT  = 1.83
SPIN_DRIFT_MAX_SCALE = 1.5


@dataclass(frozen=True)
class TrajectoryRow:
    """One line of the range table."""
    range_yards: int
    drop_inches: float      # below the sight line, positive down
    drop_moa: float
    drop_mil: float
    windage_inches: float   # positive right
    windage_moa: float
    windage_mil: float
    clicks: int             # elevation correction in the turret's unit
    windage_clicks: int
    velocity_fps: float
    energy_ftlb: float
    time_s: float


def coriolis_deflection_inches(latitude_deg: float, velocity_fps: float,
                               time_s: float) -> float:
    """Horizontal Coriolis term 2·Ω·sin(lat)·v·t, in inches."""
    return (2.0 * EARTH_ROTATION_RATE * math.sin(math.radians(latitude_deg))
            * velocity_fps * time_s * 12.0)


def spin_drift_inches(range_yards: float, twist_direction=TwistDirection.RH) -> float:
    """Spin drift at ``range_yards``, in inches, right positive for RH twist."""
    scale = min(max(range_yards / 1000.0, 0.0), SPIN_DRIFT_MAX_SCALE)
    drift_mil = SPIN_DRIFT_COEFF * scale ** SPIN_DRIFT_EXPONENT
    return TwistDirection(twist_direction).sign * mil_to_inches(drift_mil, range_yards)


def kinetic_energy(bullet_weight_grains: float, velocity_fps: float) -> float:
    """Kinetic energy in ft·lb."""
    return bullet_weight_grains * velocity_fps ** 2 / ENERGY_DIVISOR


def _build_row(inp: BallisticInput, range_yards: int, state: SimState,
               drift_feet: float) -> TrajectoryRow:
    drop_in = (inp.sight_height_feet - state.y) * 12.0

    windage_in = drift_feet * 12.0
    if inp.coriolis_enabled:
        windage_in += coriolis_deflection_inches(inp.latitude_deg, state.v, state.time)
    if inp.spin_drift_enabled:
        windage_in += spin_drift_inches(range_yards, inp.twist_direction)

    drop_moa = inches_to_moa(drop_in, range_yards)
    drop_mil = inches_to_mil(drop_in, range_yards)
    windage_moa = inches_to_moa(windage_in, range_yards)
    windage_mil = inches_to_mil(windage_in, range_yards)

    if inp.click_unit is ClickUnit.MIL:
        drop_angular, windage_angular = drop_mil, windage_mil
    else:
        drop_angular, windage_angular = drop_moa, windage_moa

    return TrajectoryRow(
        range_yards=range_yards,
        drop_inches=drop_in,
        drop_moa=drop_moa,
        drop_mil=drop_mil,
        windage_inches=windage_in,
        windage_moa=windage_moa,
        windage_mil=windage_mil,
        clicks=to_clicks(drop_angular, inp.click_size),
        windage_clicks=to_clicks(windage_angular, inp.click_size),
        velocity_fps=state.v,
        energy_ftlb=kinetic_energy(inp.bullet_weight_grains, state.v),
        time_s=state.time,
    )


def sample_trajectory(inp: BallisticInput, air: AirState, bore_angle: float,
                      range_step_yards: int = RANGE_STEP_YARDS,
                      max_range_yards: int = MAX_RANGE_YARDS,
                      cutoff_velocity_fps: float = CUTOFF_VELOCITY_FPS) -> List[TrajectoryRow]:
    """
    Fly the shot from the muzzle at ``bore_angle`` and tabulate it.

    Rows come out in strictly increasing range, one per increment, starting
    at ``range_step_yards``.
    """
    if range_step_yards <= 0:
        raise ValueError(f"range_step_yards must be positive, got {range_step_yards!r}")

    bc = effective_bc(inp.ballistic_coefficient)
    crosswind_fps = (inp.wind_speed_mph * FPS_PER_MPH
                     * math.sin(math.radians(inp.wind_direction_deg)))

    state = SimState.at_muzzle(inp.muzzle_velocity_fps, bore_angle)
    drift_feet = 0.0
    rows = []

    for step in range(1, int(max_range_yards // range_step_yards) + 1):
        range_yards = step * range_step_yards
        dx = range_yards * FEET_PER_YARD - state.x
        nxt = advance(state, dx, bc, inp.drag_function,
                      air.density_ratio, air.speed_of_sound)
        if nxt is state:
            logger.debug("Integration stalled before %d yd; table ends at %d yd",
                         range_yards, range_yards - range_step_yards)
            break

        drift_feet += crosswind_fps * (nxt.time - state.time)
        state = nxt
        if state.v < cutoff_velocity_fps:
            logger.debug("Velocity %.1f ft/s below %.1f ft/s at %d yd; table ends",
                         state.v, cutoff_velocity_fps, range_yards)
            break

        rows.append(_build_row(inp, range_yards, state, drift_feet))

    return rows


def compute_trajectory(inp: BallisticInput,
                       range_step_yards: int = RANGE_STEP_YARDS,
                       max_range_yards: int = MAX_RANGE_YARDS) -> List[TrajectoryRow]:
    """
    Range table for ``inp``.

    Raises
    ------
    InvalidRangeError, InvalidVelocityError, InvalidClickSizeError,
    InvalidAtmosphereError
        For inputs that cannot be solved (see ``validate_input``).
    """
    validate_input(inp)

    bc = effective_bc(inp.ballistic_coefficient)
    if bc != inp.ballistic_coefficient:
        logger.debug("Ballistic coefficient %r clamped to %.4f",
                     inp.ballistic_coefficient, bc)

    air = air_state(inp)
    angle = solve_zero_angle(
        inp.muzzle_velocity_fps, bc, inp.drag_function,
        air.density_ratio, air.speed_of_sound,
        inp.zero_range_yards, inp.sight_height_feet,
    )
    return sample_trajectory(inp, air, angle,
                             range_step_yards=range_step_yards,
                             max_range_yards=max_range_yards)


def trajectory_arrays(rows: List[TrajectoryRow]) -> Dict[str, np.ndarray]:
    """
    Column view of a range table, one numpy array per ``TrajectoryRow``
    field, in row order.
    """
    return {
        f.name: np.array([getattr(row, f.name) for row in rows])
        for f in fields(TrajectoryRow)
    }
