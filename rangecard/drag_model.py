"""
Standard Drag Functions
=======================
Mach-dependent drag coefficients (Cd) for the two reference projectiles
that ballistic coefficients are quoted against:

- G1: flat-base Ingalls/Mayevski projectile (legacy, most published BCs)
- G7: long boat-tail projectile (modern long-range match bullets)

A BC is only meaningful together with the drag function it was measured
against, so every calculation carries a ``DragFunction`` tag and looks its
table up by value.

Lookup is piecewise-linear between tabulated Mach numbers, with flat
extrapolation past either end of the table. At every Mach number the
boat-tail curve lies below the flat-base one.
"""

from enum import Enum

import numpy as np


class DragFunction(str, Enum):
    """Reference drag function a ballistic coefficient is quoted against."""
    G1 = 'G1'
    G7 = 'G7'

    @classmethod
    def _missing_(cls, value):
        # accept 'g7' as well as 'G7'
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None


# Mach numbers at which the two curves are compared
SUPERSONIC_MACH = 1.0
TABLE_MACH_MIN = 0.0
TABLE_MACH_MAX = 5.0


# ══════════════════════════════════════════════════════════════════════════
#  Cd vs Mach tables — (Mach, Cd) pairs
# ══════════════════════════════════════════════════════════════════════════

# G1 — flat-base reference projectile (JBM mcg1)
G1_TABLE = np.array([
    [0.00, 0.2629], [0.05, 0.2558], [0.10, 0.2487], [0.15, 0.2413],
    [0.20, 0.2344], [0.25, 0.2278], [0.30, 0.2214], [0.35, 0.2155],
    [0.40, 0.2104], [0.45, 0.2061], [0.50, 0.2032], [0.55, 0.2020],
    [0.60, 0.2034], [0.70, 0.2165], [0.725, 0.2230], [0.75, 0.2313],
    [0.775, 0.2417], [0.80, 0.2546], [0.825, 0.2706], [0.85, 0.2901],
    [0.875, 0.3136], [0.90, 0.3415], [0.925, 0.3734], [0.95, 0.4084],
    [0.975, 0.4448], [1.00, 0.4805], [1.025, 0.5136], [1.05, 0.5427],
    [1.075, 0.5677], [1.10, 0.5883], [1.125, 0.6053], [1.15, 0.6191],
    [1.20, 0.6393], [1.25, 0.6518], [1.30, 0.6589], [1.35, 0.6621],
    [1.40, 0.6625], [1.45, 0.6607], [1.50, 0.6573], [1.55, 0.6528],
    [1.60, 0.6474], [1.65, 0.6413], [1.70, 0.6347], [1.75, 0.6280],
    [1.80, 0.6210], [1.85, 0.6141], [1.90, 0.6072], [1.95, 0.6003],
    [2.00, 0.5934], [2.05, 0.5867], [2.10, 0.5804], [2.15, 0.5743],
    [2.20, 0.5685], [2.25, 0.5630], [2.30, 0.5577], [2.35, 0.5527],
    [2.40, 0.5481], [2.45, 0.5438], [2.50, 0.5397], [2.60, 0.5325],
    [2.70, 0.5264], [2.80, 0.5211], [2.90, 0.5168], [3.00, 0.5133],
    [3.10, 0.5105], [3.20, 0.5084], [3.30, 0.5067], [3.40, 0.5054],
    [3.50, 0.5040], [3.60, 0.5030], [3.70, 0.5022], [3.80, 0.5016],
    [3.90, 0.5010], [4.00, 0.5006], [4.20, 0.4998], [4.40, 0.4995],
    [4.60, 0.4992], [4.80, 0.4990], [5.00, 0.4988],
])

# G7 — long boat-tail reference projectile
G7_TABLE = np.array([
    [0.00, 0.1198], [0.05, 0.1197], [0.10, 0.1196], [0.15, 0.1194],
    [0.20, 0.1193], [0.25, 0.1194], [0.30, 0.1194], [0.35, 0.1194],
    [0.40, 0.1193], [0.45, 0.1193], [0.50, 0.1194], [0.55, 0.1193],
    [0.60, 0.1194], [0.65, 0.1197], [0.70, 0.1202], [0.725, 0.1207],
    [0.75, 0.1215], [0.775, 0.1226], [0.80, 0.1242], [0.825, 0.1266],
    [0.85, 0.1306], [0.875, 0.1368], [0.90, 0.1464], [0.925, 0.1660],
    [0.95, 0.2054], [0.975, 0.2993], [1.00, 0.3803], [1.025, 0.4015],
    [1.05, 0.4043], [1.075, 0.4034], [1.10, 0.4014], [1.125, 0.3987],
    [1.15, 0.3955], [1.20, 0.3884], [1.25, 0.3810], [1.30, 0.3732],
    [1.35, 0.3657], [1.40, 0.3580], [1.50, 0.3440], [1.55, 0.3376],
    [1.60, 0.3315], [1.65, 0.3260], [1.70, 0.3209], [1.75, 0.3160],
    [1.80, 0.3117], [1.85, 0.3078], [1.90, 0.3042], [1.95, 0.3010],
    [2.00, 0.2980], [2.05, 0.2951], [2.10, 0.2922], [2.15, 0.2892],
    [2.20, 0.2864], [2.25, 0.2835], [2.30, 0.2807], [2.35, 0.2779],
    [2.40, 0.2752], [2.45, 0.2725], [2.50, 0.2697], [2.55, 0.2670],
    [2.60, 0.2643], [2.65, 0.2615], [2.70, 0.2588], [2.75, 0.2561],
    [2.80, 0.2533], [2.85, 0.2506], [2.90, 0.2479], [2.95, 0.2451],
    [3.00, 0.2424], [3.10, 0.2368], [3.20, 0.2313], [3.30, 0.2258],
    [3.40, 0.2205], [3.50, 0.2154], [3.60, 0.2106], [3.70, 0.2060],
    [3.80, 0.2017], [3.90, 0.1975], [4.00, 0.1935], [4.20, 0.1861],
    [4.40, 0.1793], [4.60, 0.1730], [4.80, 0.1672], [5.00, 0.1618],
])

ALL_DRAG_FUNCTIONS = {
    DragFunction.G1: {'name': 'G1 (flat-base)', 'table': G1_TABLE},
    DragFunction.G7: {'name': 'G7 (boat-tail)', 'table': G7_TABLE},
}


def drag_table(drag_function) -> np.ndarray:
    """Return the (Mach, Cd) table for a drag function tag or its name."""
    return ALL_DRAG_FUNCTIONS[DragFunction(drag_function)]['table']


# ══════════════════════════════════════════════════════════════════════════
#  Interpolation-based Cd lookup
# ══════════════════════════════════════════════════════════════════════════

def drag_coefficient(table: np.ndarray, mach: float) -> float:
    """
    Drag coefficient at an arbitrary Mach number.

    Below the first entry returns the first Cd, above the last entry the
    last Cd; tabulated Mach numbers return their Cd exactly. In between,
    ``cd1 + t * (cd2 - cd1)`` with ``t = (mach - m1) / (m2 - m1)``.
    """
    return float(np.interp(mach, table[:, 0], table[:, 1]))


class DragModel:
    """
    Drag coefficient model for one reference drag function.

    Wraps a validated (Mach, Cd) table; the scalar lookup is the same
    piecewise-linear interpolation as ``drag_coefficient``.
    """

    def __init__(self, drag_function='G7', table: np.ndarray = None):
        """
        Parameters
        ----------
        drag_function : DragFunction or str
            'G1' or 'G7'. Selects the standard table when ``table`` is None.
        table : np.ndarray, optional
            Custom (N, 2) array of (Mach, Cd) pairs.
        """
        self.drag_function = DragFunction(drag_function)
        self.name = ALL_DRAG_FUNCTIONS[self.drag_function]['name']
        if table is None:
            table = drag_table(self.drag_function)

        table = np.asarray(table, dtype=float)
        if table.ndim != 2 or table.shape[0] == 0 or table.shape[1] != 2:
            raise ValueError("Drag table must be a non-empty sequence of (Mach, Cd) pairs")
        if np.any(np.diff(table[:, 0]) <= 0):
            raise ValueError("Drag table Mach numbers must be strictly increasing")
        if table[0, 0] > TABLE_MACH_MIN or table[-1, 0] < TABLE_MACH_MAX:
            raise ValueError(
                f"Drag table must cover Mach {TABLE_MACH_MIN} to {TABLE_MACH_MAX}, "
                f"got {table[0, 0]} to {table[-1, 0]}"
            )
        self.table = table
        self.mach_values = table[:, 0]
        self.cd_values = table[:, 1]

    def cd(self, mach: float) -> float:
        """Return drag coefficient at the given Mach number."""
        return drag_coefficient(self.table, mach)

    def cd_array(self, mach_array: np.ndarray) -> np.ndarray:
        """Vectorized Cd lookup."""
        return np.interp(mach_array, self.mach_values, self.cd_values)

    def __repr__(self):
        return f"DragModel({self.drag_function.value!r}, points={len(self.table)})"
