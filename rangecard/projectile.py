"""
Shot Definition & Drag Retardation
==================================
Defines the ``BallisticInput`` record describing one shot (rifle, load,
sight, weather, optional secondary effects and turret) and the scalar drag
retardation the integrator applies to it.

Units follow American ballistic-table convention: feet per second, grains,
yards for ranges, inches for sight height, mph for wind; temperature and
pressure are metric (°C, hPa).

Coordinate system:
  x = downrange (horizontal)
  y = vertical, up positive, origin at the muzzle on the bore line
  windage = lateral, right positive looking downrange
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .atmosphere import GRAVITY_FPS2, RANKINE_OFFSET, celsius_to_fahrenheit
from .drag_model import DragFunction, drag_coefficient, drag_table
from .exceptions import (
    InvalidAtmosphereError, InvalidClickSizeError, InvalidRangeError, InvalidVelocityError,
)
from .units import ClickUnit


# ── Solver limits ─────────────────────────────────────────────────────────
BC_MIN               = 0.01      # floor applied to the ballistic coefficient
MIN_VELOCITY_FPS     = 1.0       # floor for speeds used as divisors
MAX_ZERO_RANGE_YARDS = 1000.0    # also the far end of the range table

# ── Accepted muzzle velocity band (fps) ───────────────────────────────────
MIN_MUZZLE_VELOCITY_FPS = 500.0
MAX_MUZZLE_VELOCITY_FPS = 4500.0

# ── Earth rotation parameters ─────────────────────────────────────────────
EARTH_ROTATION_RATE = 7.2921e-5  # rad/s


class TwistDirection(str, Enum):
    """Rifling twist; sets the side spin drift pushes the bullet to."""
    RH = 'RH'
    LH = 'LH'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None

    @property
    def sign(self) -> int:
        return 1 if self is TwistDirection.RH else -1


@dataclass(frozen=True)
class BallisticInput:
    """
    Complete specification of one trajectory calculation.

    ``pressure_hpa`` and ``density_altitude_ft`` are alternative density
    sources; when both are given the density altitude wins. Humidity is
    carried for callers but does not enter the density calculation.
    ``wind_direction_deg`` is the clock-face angle of the wind relative to
    the line of fire (90 = full value crosswind).
    """
    muzzle_velocity_fps: float = 2600.0
    ballistic_coefficient: float = 0.475
    drag_function: DragFunction = DragFunction.G7
    bullet_weight_grains: float = 168.0
    zero_range_yards: float = 100.0
    sight_height_inches: float = 1.75

    wind_speed_mph: float = 0.0
    wind_direction_deg: float = 90.0

    temperature_c: float = 15.0
    pressure_hpa: Optional[float] = None
    density_altitude_ft: Optional[float] = None
    humidity_pct: float = 50.0

    latitude_deg: float = 0.0
    azimuth_deg: float = 0.0
    coriolis_enabled: bool = False
    spin_drift_enabled: bool = False
    twist_direction: TwistDirection = TwistDirection.RH

    click_unit: ClickUnit = ClickUnit.MOA
    click_size: float = 0.25

    def __post_init__(self):
        # Accept the tags as plain strings ('G7', 'MIL', 'RH')
        object.__setattr__(self, 'drag_function', DragFunction(self.drag_function))
        object.__setattr__(self, 'click_unit', ClickUnit(self.click_unit))
        object.__setattr__(self, 'twist_direction', TwistDirection(self.twist_direction))

    @property
    def sight_height_feet(self) -> float:
        return self.sight_height_inches / 12.0

    @property
    def effective_bc(self) -> float:
        """Ballistic coefficient floored at ``BC_MIN``."""
        return effective_bc(self.ballistic_coefficient)


def effective_bc(bc: float) -> float:
    if not bc >= BC_MIN:  # also catches NaN
        return BC_MIN
    return bc


def validate_input(inp: BallisticInput) -> None:
    """
    Reject inputs the solver cannot clamp its way out of.

    Raises
    ------
    InvalidVelocityError
        Muzzle velocity outside MIN_MUZZLE_VELOCITY_FPS..MAX_MUZZLE_VELOCITY_FPS
        or not finite.
    InvalidRangeError
        Zero range <= 0, > MAX_ZERO_RANGE_YARDS or not finite.
    InvalidClickSizeError
        Click size <= 0 or not finite.
    InvalidAtmosphereError
        Temperature at or below absolute zero, pressure <= 0, or a
        non-finite temperature, pressure or density altitude.
    """
    v0 = inp.muzzle_velocity_fps
    if not math.isfinite(v0) or not MIN_MUZZLE_VELOCITY_FPS <= v0 <= MAX_MUZZLE_VELOCITY_FPS:
        raise InvalidVelocityError(
            'muzzle_velocity_fps', v0,
            f"muzzle velocity must be between {MIN_MUZZLE_VELOCITY_FPS:g} "
            f"and {MAX_MUZZLE_VELOCITY_FPS:g} fps")

    zero = inp.zero_range_yards
    if not math.isfinite(zero) or zero <= 0 or zero > MAX_ZERO_RANGE_YARDS:
        raise InvalidRangeError(
            'zero_range_yards', zero,
            f"zero range must be above 0 and at most {MAX_ZERO_RANGE_YARDS:g} yd")

    click = inp.click_size
    if not math.isfinite(click) or click <= 0:
        raise InvalidClickSizeError('click_size', click,
                                    "click size must be a positive angle")

    temp = inp.temperature_c
    if not math.isfinite(temp) or celsius_to_fahrenheit(temp) + RANKINE_OFFSET <= 0:
        raise InvalidAtmosphereError('temperature_c', temp,
                                     "temperature must be above absolute zero")

    pressure = inp.pressure_hpa
    if pressure is not None and (not math.isfinite(pressure) or pressure <= 0):
        raise InvalidAtmosphereError('pressure_hpa', pressure,
                                     "pressure must be a positive number")

    altitude = inp.density_altitude_ft
    if altitude is not None and not math.isfinite(altitude):
        raise InvalidAtmosphereError('density_altitude_ft', altitude,
                                     "density altitude must be a finite number")


def drag_retardation(speed: float, bc: float, drag_function: DragFunction,
                     density_ratio: float, speed_of_sound: float) -> float:
    """
    Scalar drag retardation (ft/s², negative) at ``speed``.

    a = -(density_ratio × g × Cd(Mach)) / BC
    """
    mach = speed / max(speed_of_sound, MIN_VELOCITY_FPS)
    cd = drag_coefficient(drag_table(drag_function), mach)
    return -(density_ratio * GRAVITY_FPS2 * cd) / effective_bc(bc)
