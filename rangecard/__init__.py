"""
rangecard: Exterior Ballistics Range Tables
===========================================
Computes the range table for a small-arms shot: drop, windage, velocity,
energy and time of flight at fixed downrange increments, from:
  - muzzle velocity and a G1 or G7 ballistic coefficient
  - sight height and zero range (the bore angle is solved for)
  - air density from density altitude or pressure + temperature
  - crosswind
  - optional Coriolis deflection and spin drift

Turret corrections are reported in MOA or MIL clicks.

    >>> from rangecard import BallisticInput, compute_trajectory
    >>> rows = compute_trajectory(BallisticInput(muzzle_velocity_fps=2600,
    ...                                          ballistic_coefficient=0.475,
    ...                                          drag_function='G7'))
"""

from .atmosphere import (
    AirState, air_state, density_ratio, speed_of_sound,
)
from .drag_model import DragFunction, DragModel, drag_coefficient, drag_table
from .exceptions import (
    BallisticInputError, InvalidRangeError, InvalidVelocityError, InvalidClickSizeError,
    InvalidAtmosphereError,
)
from .projectile import BallisticInput, TwistDirection, validate_input
from .integrator import SimState, advance
from .zeroing import solve_zero_angle
from .trajectory import (
    TrajectoryRow, compute_trajectory, sample_trajectory, trajectory_arrays,
)
from .units import ClickUnit, inches_to_moa, inches_to_mil, to_clicks

__version__ = "1.0.0"
__all__ = [
    'BallisticInput', 'TrajectoryRow', 'compute_trajectory',
    'DragFunction', 'ClickUnit', 'TwistDirection',
    'DragModel', 'drag_coefficient', 'drag_table',
    'AirState', 'air_state', 'density_ratio', 'speed_of_sound',
    'SimState', 'advance', 'solve_zero_angle',
    'sample_trajectory', 'trajectory_arrays', 'validate_input',
    'inches_to_moa', 'inches_to_mil', 'to_clicks',
    'BallisticInputError', 'InvalidRangeError', 'InvalidVelocityError',
    'InvalidClickSizeError', 'InvalidAtmosphereError',
]
