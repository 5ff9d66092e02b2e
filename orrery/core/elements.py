# orrery/core/elements.py
# -----------------------------------------------------------------------------
# Static Keplerian elements for the eight planets (epoch J2000, JD 2451545.0).
#
#   a  semi-major axis            [AU]
#   e  eccentricity               [-]      0 <= e < 1
#   i  inclination                [deg]    stored; the planar model ignores it
#   L  mean longitude at epoch    [deg]
#   w  longitude of perihelion    [deg]
#   n  mean motion                [deg/day]
#
# The table is built once at import and exposed read-only.
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping

from orrery.core.constants import J2000_JD, PLANETS, Planet

__all__ = ["OrbitalElements", "ORBITAL_ELEMENTS", "EPOCH_JD", "elements_table_dict"]

EPOCH_JD: float = J2000_JD


@dataclass(frozen=True)
class OrbitalElements:
    a: float
    e: float
    i: float
    L: float
    w: float
    n: float

    def __post_init__(self) -> None:
        if not (0.0 <= self.e < 1.0):
            raise ValueError(f"eccentricity must be in [0, 1), got {self.e}")
        if not self.a > 0.0:
            raise ValueError(f"semi-major axis must be positive, got {self.a}")

    def mean_longitude(self, jd: float) -> float:
        """Mean longitude [deg] at `jd`, unwrapped."""
        return self.L + self.n * (jd - EPOCH_JD)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


_RAW: Dict[Planet, OrbitalElements] = {
    Planet.MERCURY: OrbitalElements(a=0.387098, e=0.205630, i=7.005, L=252.251, w=77.456, n=4.092317),
    Planet.VENUS:   OrbitalElements(a=0.723332, e=0.006772, i=3.395, L=181.980, w=131.533, n=1.602136),
    Planet.EARTH:   OrbitalElements(a=1.000000, e=0.016709, i=0.000, L=100.464, w=102.937, n=0.985608),
    Planet.MARS:    OrbitalElements(a=1.523662, e=0.093412, i=1.850, L=355.433, w=336.041, n=0.524039),
    Planet.JUPITER: OrbitalElements(a=5.204267, e=0.048775, i=1.303, L=34.351, w=14.331, n=0.083056),
    Planet.SATURN:  OrbitalElements(a=9.537070, e=0.053362, i=2.484, L=50.078, w=92.432, n=0.033371),
    Planet.URANUS:  OrbitalElements(a=19.191264, e=0.047220, i=0.773, L=314.200, w=172.884, n=0.011698),
    Planet.NEPTUNE: OrbitalElements(a=30.068963, e=0.008586, i=1.770, L=304.880, w=46.727, n=0.005965),
}

def _freeze_table(raw: Mapping[Planet, OrbitalElements]) -> Mapping[Planet, OrbitalElements]:
    """Read-only copy in planet order; the table must be exhaustive over Planet."""
    missing = [p.value for p in PLANETS if p not in raw]
    if missing:
        raise RuntimeError(f"orbital element table is missing: {', '.join(missing)}")
    return MappingProxyType({p: raw[p] for p in PLANETS})


ORBITAL_ELEMENTS: Mapping[Planet, OrbitalElements] = _freeze_table(_RAW)


def elements_table_dict(table: Mapping[Planet, OrbitalElements] = ORBITAL_ELEMENTS) -> Dict[str, Any]:
    """JSON-friendly view of the table, keyed by lowercase planet name."""
    return {
        "epoch_jd": EPOCH_JD,
        "units": {"a": "AU", "e": "-", "i": "deg", "L": "deg", "w": "deg", "n": "deg/day"},
        "planets": {p.value: table[p].to_dict() for p in PLANETS if p in table},
    }
