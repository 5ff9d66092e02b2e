# orrery/core/approximate.py
# -----------------------------------------------------------------------------
# Analytic heliocentric positions from mean Keplerian elements.
#
# Public API:
#   approximate_heliocentric(jd, table=ORBITAL_ELEMENTS, *, iterations=3) -> PositionSet
#
# Every orbit is projected onto one plane: inclination is ignored and the
# output lies in the x-z plane (y == 0, y being "up" for the renderer).
# Accuracy is roughly a degree in longitude for the inner planets over a few
# centuries around J2000; it is meant for display, not astrometry.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import math
from typing import Mapping

from orrery.core.constants import AU_KM, DEFAULT_KEPLER_ITERATIONS, METHOD_APPROXIMATE, PLANETS, Planet
from orrery.core.elements import ORBITAL_ELEMENTS, OrbitalElements
from orrery.core.kepler import solve_kepler
from orrery.core.models import PlanetPosition, PositionSet, position_set

__all__ = ["approximate_heliocentric", "approximate_planet"]

log = logging.getLogger(__name__)


def approximate_planet(jd: float, elem: OrbitalElements, *, iterations: int = DEFAULT_KEPLER_ITERATIONS) -> PlanetPosition:
    L = elem.mean_longitude(jd)
    M = math.radians(L - elem.w)

    E, nu = solve_kepler(M, elem.e, iterations)

    r = elem.a * (1.0 - elem.e * math.cos(E))                # AU
    lon = math.radians(elem.w + math.degrees(nu))

    return PlanetPosition(
        x=r * math.cos(lon) * AU_KM,
        y=0.0,
        z=r * math.sin(lon) * AU_KM,
        distance=r * AU_KM,
        method=METHOD_APPROXIMATE,
    )


def approximate_heliocentric(
    jd: float,
    table: Mapping[Planet, OrbitalElements] = ORBITAL_ELEMENTS,
    *,
    iterations: int = DEFAULT_KEPLER_ITERATIONS,
) -> PositionSet:
    positions = {}
    for planet in PLANETS:
        elem = table[planet]
        try:
            positions[planet] = approximate_planet(jd, elem, iterations=iterations)
        except (ArithmeticError, ValueError) as e:
            log.warning("approximate model failed for %s at jd=%s: %s", planet.value, jd, e)
            positions[planet] = PlanetPosition.failed(str(e))
    return position_set(positions)
