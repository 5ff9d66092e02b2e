"""
Core position computation: element table, Julian Day, Kepler solver,
approximate and precision heliocentric paths, geocentric transform, service.
"""

from .constants import Planet, PLANETS
from .models import PlanetPosition, PositionResult
from .service import PositionService, create_position_service

__all__ = [
    "Planet",
    "PLANETS",
    "PlanetPosition",
    "PositionResult",
    "PositionService",
    "create_position_service",
]
