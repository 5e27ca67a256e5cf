"""
Bore-Angle Solver
=================
Finds the barrel inclination that puts the trajectory on the sight line at
the zero distance.

The sight sits ``sight_height`` above the bore, so at the zero range the
bullet must have climbed exactly that far above the muzzle. Height at a
fixed range increases monotonically with launch angle, which makes a plain
bisection over [0°, 5°] robust; 24 halvings narrow the bracket to about
3e-7° (well under 0.01 MOA).
"""

import math

from .drag_model import DragFunction
from .integrator import SimState, integrate_to
from .logger import logger


# ── Search parameters ─────────────────────────────────────────────────────
ZERO_ITERATIONS     = 24
MAX_BORE_ANGLE_DEG  = 5.0
ZERO_STEP_FEET      = 75.0     # same increment the range table uses
FEET_PER_YARD       = 3.0


def height_at_range(angle_rad: float, v0: float, bc: float, drag_function: DragFunction,
                    density_ratio: float, speed_of_sound: float,
                    range_feet: float) -> float:
    """Height above the muzzle (ft) at ``range_feet`` for a launch at ``angle_rad``."""
    state = SimState.at_muzzle(v0, angle_rad)
    state = integrate_to(state, range_feet, ZERO_STEP_FEET, bc, drag_function,
                         density_ratio, speed_of_sound)
    return state.y


def solve_zero_angle(v0: float, bc: float, drag_function: DragFunction,
                     density_ratio: float, speed_of_sound: float,
                     zero_range_yards: float, sight_height_feet: float,
                     iterations: int = ZERO_ITERATIONS) -> float:
    """
    Launch angle (radians) that crosses the sight line at ``zero_range_yards``.

    Each trial integrates its own ``SimState`` from the muzzle. A trial
    still above the sight line at the zero range means the angle is too
    high. Returns the midpoint of the final bracket.
    """
    low, high = 0.0, math.radians(MAX_BORE_ANGLE_DEG)
    range_feet = zero_range_yards * FEET_PER_YARD

    for _ in range(iterations):
        mid = 0.5 * (low + high)
        y = height_at_range(mid, v0, bc, drag_function, density_ratio,
                            speed_of_sound, range_feet)
        if y > sight_height_feet:
            high = mid
        else:
            low = mid

    angle = 0.5 * (low + high)
    logger.debug("Zero angle %.6f deg for %.1f yd zero (v0=%.1f ft/s, bc=%.4f %s)",
                 math.degrees(angle), zero_range_yards, v0, bc,
                 DragFunction(drag_function).value)
    return angle
