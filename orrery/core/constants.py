# -*- coding: utf-8 -*-
"""
Orrery: Core constants

Purpose
-------
Single source of truth for:
- the closed set of planets (orbital order, JSON keys)
- physical constants (AU in km, J2000 epoch)
- provenance tags written into every position entry

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

__all__ = [
    "Planet", "PLANETS", "REFERENCE_PLANET",
    "AU_KM", "J2000_JD",
    "METHOD_APPROXIMATE", "METHOD_ERROR", "DEFAULT_PRECISION_LABEL",
    "DEFAULT_KEPLER_ITERATIONS",
]


# ── planets ──────────────────────────────────────────────────────────────────
class Planet(str, Enum):
    """The eight major planets; the value is the wire key."""
    MERCURY = "mercury"
    VENUS = "venus"
    EARTH = "earth"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"


# Iteration order is orbital order; keep stable.
PLANETS: Tuple[Planet, ...] = tuple(Planet)

# Origin of the geocentric frame.
REFERENCE_PLANET: Planet = Planet.EARTH

# ── physical constants ───────────────────────────────────────────────────────
AU_KM: float = 149_597_870.7       # IAU 2012, exact
J2000_JD: float = 2451545.0        # 2000-01-01 12:00 TT

# ── provenance tags ──────────────────────────────────────────────────────────
METHOD_APPROXIMATE: str = "approximate"
METHOD_ERROR: str = "error"
DEFAULT_PRECISION_LABEL: str = "precision-provider"

DEFAULT_KEPLER_ITERATIONS: int = 3
