# orrery/core/geocentric.py
from __future__ import annotations

from typing import Mapping

from orrery.core.constants import PLANETS, REFERENCE_PLANET, Planet
from orrery.core.models import PlanetPosition, PositionSet, position_set

__all__ = ["to_geocentric"]


def to_geocentric(helio: Mapping[Planet, PlanetPosition]) -> PositionSet:
    """
    Shift a heliocentric set so Earth sits at the origin.

    - Earth itself becomes (0, 0, 0), distance 0, keeping its method tag.
    - Error entries are passed through untouched.
    - Everything else is helio(planet) - helio(earth).
    """
    earth = helio[REFERENCE_PLANET]
    ex, ey, ez = earth.vector

    out = {}
    for planet in PLANETS:
        if planet not in helio:
            continue
        pos = helio[planet]
        if planet is REFERENCE_PLANET:
            out[planet] = PlanetPosition(x=0.0, y=0.0, z=0.0, distance=0.0, method=pos.method)
        elif pos.ok:
            out[planet] = PlanetPosition.from_vector(pos.x - ex, pos.y - ey, pos.z - ez, pos.method)
        else:
            out[planet] = pos
    return position_set(out)
