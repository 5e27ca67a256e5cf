"""
Angular Unit Conversions
========================
Linear offsets at a known range ↔ angular subtension, and angular values ↔
turret clicks.

1 MOA subtends 1.0471975511965976 in at 100 yd (exactly π/3 in);
1 MIL subtends 0.036 in per yard of range (3.6 in at 100 yd).
"""

import math
from enum import Enum


INCHES_PER_MOA_AT_100YD = 1.0471975511965976
INCHES_PER_MIL_PER_YARD = 0.036


class ClickUnit(str, Enum):
    """Angular unit of a scope turret."""
    MOA = 'MOA'
    MIL = 'MIL'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None


def inches_to_moa(inches: float, range_yards: float) -> float:
    """Angular size in MOA of ``inches`` at ``range_yards``; 0 at range <= 0."""
    if range_yards <= 0:
        return 0.0
    return inches / (INCHES_PER_MOA_AT_100YD * range_yards / 100.0)


def inches_to_mil(inches: float, range_yards: float) -> float:
    """Angular size in milliradians of ``inches`` at ``range_yards``; 0 at range <= 0."""
    if range_yards <= 0:
        return 0.0
    return inches / (INCHES_PER_MIL_PER_YARD * range_yards)


def moa_to_inches(moa: float, range_yards: float) -> float:
    return moa * INCHES_PER_MOA_AT_100YD * range_yards / 100.0


def mil_to_inches(mil: float, range_yards: float) -> float:
    return mil * INCHES_PER_MIL_PER_YARD * range_yards


def inches_to_angular(inches: float, range_yards: float, unit) -> float:
    """Convert to whichever angular unit the turret is graduated in."""
    if ClickUnit(unit) is ClickUnit.MIL:
        return inches_to_mil(inches, range_yards)
    return inches_to_moa(inches, range_yards)


def to_clicks(angular: float, click_size: float) -> int:
    """Nearest whole number of clicks for an angular correction; halves round up."""
    return math.floor(angular / click_size + 0.5)


def clicks_to_angular(clicks: int, click_size: float) -> float:
    return clicks * click_size
