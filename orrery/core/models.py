# orrery/core/models.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from orrery.core.constants import AU_KM, METHOD_ERROR, PLANETS, Planet

__all__ = [
    "Vector3",
    "PlanetPosition",
    "PositionSet",
    "PlanetOutcome",
    "PositionResult",
    "position_set",
    "position_set_dict",
]

Vector3 = Tuple[float, float, float]

# Ordered mapping Planet -> PlanetPosition. Built with `position_set` so the
# iteration order always follows PLANETS.
PositionSet = Dict[Planet, "PlanetPosition"]


# ───────────────────────────── Positions ─────────────────────────────

@dataclass(frozen=True)
class PlanetPosition:
    x: float
    y: float
    z: float
    distance: float
    method: str
    error: Optional[str] = None

    @classmethod
    def from_vector(cls, x: float, y: float, z: float, method: str) -> "PlanetPosition":
        """Position in km; distance is the Euclidean norm."""
        return cls(x=x, y=y, z=z, distance=math.sqrt(x * x + y * y + z * z), method=method)

    @classmethod
    def failed(cls, message: str, method: str = METHOD_ERROR) -> "PlanetPosition":
        return cls(x=0.0, y=0.0, z=0.0, distance=0.0, method=method, error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def vector(self) -> Vector3:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "distance": self.distance,
            "method": self.method,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


def position_set(entries: Mapping[Planet, PlanetPosition] | Iterable[Tuple[Planet, PlanetPosition]]) -> PositionSet:
    pairs = dict(entries.items() if isinstance(entries, Mapping) else entries)
    return {p: pairs[p] for p in PLANETS if p in pairs}


def position_set_dict(ps: Mapping[Planet, PlanetPosition]) -> Dict[str, Dict[str, Any]]:
    return {p.value: ps[p].to_dict() for p in PLANETS if p in ps}


# ───────────────────────────── Tagged per-planet result ─────────────────────────────

@dataclass(frozen=True)
class PlanetOutcome:
    """Result of one planet on the precision path: a vector in AU, or a reason."""
    planet: Planet
    vector_au: Optional[Vector3] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, planet: Planet, vector_au: Vector3) -> "PlanetOutcome":
        return cls(planet=planet, vector_au=tuple(float(c) for c in vector_au))  # type: ignore[arg-type]

    @classmethod
    def failure(cls, planet: Planet, reason: str) -> "PlanetOutcome":
        return cls(planet=planet, error=reason or "unknown error")

    def to_position(self, method: str) -> PlanetPosition:
        if self.vector_au is None:
            return PlanetPosition.failed(self.error or "unknown error")
        x, y, z = self.vector_au
        return PlanetPosition.from_vector(x * AU_KM, y * AU_KM, z * AU_KM, method)


# ───────────────────────────── Response ─────────────────────────────

@dataclass(frozen=True)
class PositionResult:
    date: str
    heliocentric_positions: PositionSet
    positions: PositionSet
    success: bool
    library: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "positions": position_set_dict(self.positions),
            "heliocentricPositions": position_set_dict(self.heliocentric_positions),
            "success": self.success,
            "library": self.library,
        }
