# orrery/core/kepler.py
from __future__ import annotations

import math
from typing import NamedTuple

from orrery.core.constants import DEFAULT_KEPLER_ITERATIONS

__all__ = ["KeplerSolution", "solve_kepler"]


class KeplerSolution(NamedTuple):
    E: float    # eccentric anomaly [rad]
    nu: float   # true anomaly [rad]


def solve_kepler(M: float, e: float, iterations: int = DEFAULT_KEPLER_ITERATIONS) -> KeplerSolution:
    """
    Solve M = E - e·sin(E) by fixed-point iteration.

    Seeds E = M + e·sin(M) and applies exactly `iterations` refinements with
    no convergence test, so the cost is bounded and the output for a given
    (M, e, iterations) is always the same. Precision degrades for high `e`.
    """
    if not (0.0 <= e < 1.0):
        raise ValueError(f"eccentricity must be in [0, 1), got {e}")
    if iterations < 0:
        raise ValueError("iterations must be >= 0")

    E = M + e * math.sin(M)
    for _ in range(iterations):
        E = M + e * math.sin(E)

    nu = 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(E / 2.0),
        math.sqrt(1.0 - e) * math.cos(E / 2.0),
    )
    return KeplerSolution(E, nu)
