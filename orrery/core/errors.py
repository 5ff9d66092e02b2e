# orrery/core/errors.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from orrery.core.constants import Planet

__all__ = [
    "InvalidDateError",
    "PerPlanetComputationError",
    "ProviderBatchFailure",
    "InternalError",
]


class InvalidDateError(ValueError):
    """Malformed or unparseable input date. Carries pydantic-style `.errors()`."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]], provided: Any = None):
        if isinstance(details, str):
            self._details = [{"loc": ["date"], "msg": details, "type": "value_error.date"}]
        elif isinstance(details, dict):
            self._details = [details]
        else:
            self._details = list(details) or [{"loc": ["date"], "msg": "invalid date", "type": "value_error.date"}]
        self.provided = provided
        super().__init__(self._details[0]["msg"])

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


class PerPlanetComputationError(RuntimeError):
    """One planet failed on the precision path; its siblings are unaffected."""
    def __init__(self, planet: Planet, message: str):
        super().__init__(f"{planet.value}: {message}")
        self.planet = planet
        self.message = message


class ProviderBatchFailure(RuntimeError):
    """The precision provider cannot serve this request at all; fall back."""
    def __init__(self, stage: str, message: str, **context: Any):
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message
        self.context = context


class InternalError(RuntimeError):
    """Unexpected failure while computing positions; surfaced to the caller."""
    def __init__(self, message: str, date: Optional[str] = None):
        super().__init__(message)
        self.date = date
