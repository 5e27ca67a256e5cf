"""
Atmosphere Model
================
Reduces the firing-point weather to the two numbers the integrator needs:

- the air density ratio relative to the standard atmosphere (scales drag)
- the local speed of sound (converts speed to Mach number)

Density comes from exactly one source per calculation: a density altitude
if one is given, otherwise station pressure and temperature, otherwise
standard conditions (ratio 1.0).

Standard conditions are the ICAO sea-level values in the units the
American ballistic tables use: 59 °F (518.67 °R) and 29.92126 inHg.
"""

from dataclasses import dataclass

import numpy as np


# ── Standard atmosphere constants ─────────────────────────────────────────
GRAVITY_FPS2              = 32.174     # ft/s²
STANDARD_TEMP_RANKINE     = 518.67     # °R  (59 °F)
STANDARD_PRESSURE_INHG    = 29.92126   # inHg
STANDARD_SPEED_OF_SOUND   = 1116.45    # ft/s at 59 °F
RANKINE_OFFSET            = 459.67
INHG_PER_HPA              = 0.0295299830714

# Density altitude fit (troposphere lapse-rate form)
DENSITY_ALTITUDE_LAPSE    = 6.87535e-6  # 1/ft
DENSITY_ALTITUDE_EXPONENT = 4.2561
DENSITY_ALTITUDE_MIN_FT   = -3000.0
DENSITY_ALTITUDE_MAX_FT   = 80000.0


@dataclass(frozen=True)
class AirState:
    """Atmospheric inputs to one trajectory calculation."""
    density_ratio: float      # ρ / ρ_standard
    speed_of_sound: float     # ft/s


def celsius_to_fahrenheit(temp_c: float) -> float:
    return temp_c * 9.0 / 5.0 + 32.0


def hpa_to_inhg(pressure_hpa: float) -> float:
    return pressure_hpa * INHG_PER_HPA


def speed_of_sound(temp_c: float) -> float:
    """
    Local speed of sound (ft/s).

    Scales the standard value by sqrt(T / T_standard) with T in Rankine.
    """
    temp_rankine = celsius_to_fahrenheit(temp_c) + RANKINE_OFFSET
    return float(STANDARD_SPEED_OF_SOUND * np.sqrt(temp_rankine / STANDARD_TEMP_RANKINE))


def density_ratio_from_altitude(density_altitude_ft: float) -> float:
    """Density ratio at a density altitude (ft), clamped to -3000..80000 ft."""
    altitude = float(np.clip(density_altitude_ft, DENSITY_ALTITUDE_MIN_FT,
                             DENSITY_ALTITUDE_MAX_FT))
    return (1.0 - DENSITY_ALTITUDE_LAPSE * altitude) ** DENSITY_ALTITUDE_EXPONENT


def density_ratio_from_pressure(pressure_hpa: float, temp_c: float) -> float:
    """Density ratio from station pressure (hPa) and temperature (°C)."""
    pressure_inhg = hpa_to_inhg(pressure_hpa)
    temp_rankine = celsius_to_fahrenheit(temp_c) + RANKINE_OFFSET
    return (pressure_inhg / STANDARD_PRESSURE_INHG) * (STANDARD_TEMP_RANKINE / temp_rankine)


def density_ratio(inp) -> float:
    """
    Air density ratio for a ``BallisticInput``.

    Density altitude takes precedence over pressure; with neither the
    standard atmosphere (1.0) is assumed. Humidity is not used.
    """
    if inp.density_altitude_ft is not None:
        return density_ratio_from_altitude(inp.density_altitude_ft)
    if inp.pressure_hpa is not None:
        return density_ratio_from_pressure(inp.pressure_hpa, inp.temperature_c)
    return 1.0


def air_state(inp) -> AirState:
    """Resolve density ratio and speed of sound once per calculation."""
    return AirState(
        density_ratio=density_ratio(inp),
        speed_of_sound=speed_of_sound(inp.temperature_c),
    )
