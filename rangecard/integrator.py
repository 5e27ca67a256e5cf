"""
Numerical Integration Engine
============================
Advances a 2-D point-mass trajectory across a horizontal distance.

The independent variable is downrange distance rather than time: each
call covers ``dx_feet`` in 1-20 equal substeps. Per substep the drag
retardation is applied along the velocity vector, gravity to the vertical
component only, and position/time advance with the trapezoidal average of
the start and end velocities.

The transonic band (Mach 0.8-1.2), where the drag curves bend sharply,
always gets the maximum number of substeps.

``advance`` is a pure function of its arguments: it returns a new
``SimState`` and never modifies the one passed in.
"""

import math
from dataclasses import dataclass

from .atmosphere import GRAVITY_FPS2
from .drag_model import DragFunction
from .projectile import MIN_VELOCITY_FPS, drag_retardation, effective_bc


# ── Integration parameters ────────────────────────────────────────────────
MAX_SUBSTEPS      = 20
SUBSTEP_FEET      = 15.0       # nominal substep length outside the transonic band
TRANSONIC_MACH    = (0.8, 1.2)
DISTANCE_EPSILON  = 1e-9       # ft


@dataclass
class SimState:
    """Projectile state at one point of a single integration run."""
    x: float       # downrange (ft)
    y: float       # height above the muzzle (ft)
    vx: float      # ft/s
    vy: float      # ft/s
    v: float       # speed (ft/s)
    time: float    # s

    @classmethod
    def at_muzzle(cls, muzzle_velocity: float, angle_rad: float) -> 'SimState':
        """Initial state for a launch at ``angle_rad`` above horizontal."""
        return cls(
            x=0.0,
            y=0.0,
            vx=muzzle_velocity * math.cos(angle_rad),
            vy=muzzle_velocity * math.sin(angle_rad),
            v=muzzle_velocity,
            time=0.0,
        )


def substep_count(dx_feet: float, mach: float) -> int:
    """Number of substeps for a step of ``dx_feet`` starting at ``mach``."""
    lo, hi = TRANSONIC_MACH
    if lo <= mach <= hi:
        return MAX_SUBSTEPS
    return max(1, min(MAX_SUBSTEPS, math.ceil(dx_feet / SUBSTEP_FEET)))


def advance(state: SimState, dx_feet: float, bc: float, drag_function: DragFunction,
            density_ratio: float, speed_of_sound: float) -> SimState:
    """
    Integrate ``state`` forward by ``dx_feet`` of downrange travel.

    Returns ``state`` itself, unchanged, when the step is empty or the
    horizontal velocity is (or would become) non-positive.
    """
    if dx_feet <= 0 or state.vx <= 0:
        return state

    bc = effective_bc(bc)
    mach = state.v / max(speed_of_sound, MIN_VELOCITY_FPS)
    n = substep_count(dx_feet, mach)
    h = dx_feet / n

    y, vx, vy, t = state.y, state.vx, state.vy, state.time
    for _ in range(n):
        v = math.hypot(vx, vy)
        a = drag_retardation(v, bc, drag_function, density_ratio, speed_of_sound)
        dt = h / vx

        vx_new = vx + a * (vx / v) * dt
        vy_new = vy + (a * (vy / v) - GRAVITY_FPS2) * dt
        if vx_new <= 0:
            return state

        avg_vx = 0.5 * (vx + vx_new)
        avg_vy = 0.5 * (vy + vy_new)
        step_time = h / avg_vx
        y += avg_vy * step_time
        t += step_time
        vx, vy = vx_new, vy_new

    return SimState(x=state.x + dx_feet, y=y, vx=vx, vy=vy,
                    v=math.hypot(vx, vy), time=t)


def integrate_to(state: SimState, distance_feet: float, step_feet: float, bc: float,
                 drag_function: DragFunction, density_ratio: float,
                 speed_of_sound: float) -> SimState:
    """
    Advance in steps of at most ``step_feet`` until ``distance_feet``.

    Stops early, returning the last valid state, if the integrator stalls.
    """
    while distance_feet - state.x > DISTANCE_EPSILON:
        dx = min(step_feet, distance_feet - state.x)
        nxt = advance(state, dx, bc, drag_function, density_ratio, speed_of_sound)
        if nxt is state:
            break
        state = nxt
    return state
