# orrery/core/service.py
# -----------------------------------------------------------------------------
# Position service: provider selection, fallback and response assembly.
#
#   TryPrecision ──ok──────────────────────────┐
#        │ provider absent / batch failure      │
#        ▼                                      ▼
#   Approximate(JDN) ───────────────────▶ Geocentric ──▶ PositionResult
#
# The provider (or None) is injected once; the service never re-probes it.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Mapping, Optional

from orrery.core.approximate import approximate_heliocentric
from orrery.core.constants import DEFAULT_KEPLER_ITERATIONS, METHOD_APPROXIMATE, Planet
from orrery.core.elements import ORBITAL_ELEMENTS, OrbitalElements
from orrery.core.ephemeris_adapter import EphemerisProvider, ProviderConfig, precise_heliocentric, probe_provider
from orrery.core.errors import InternalError, ProviderBatchFailure
from orrery.core.geocentric import to_geocentric
from orrery.core.julian import julian_day_from_date
from orrery.core.models import PositionResult, PositionSet
from orrery.core.validators import parse_date

__all__ = ["PositionService", "create_position_service"]

log = logging.getLogger(__name__)

# Optional observer hooks, used by the HTTP layer for metrics.
FallbackHook = Callable[[str], None]
ResultHook = Callable[[PositionResult], None]


class PositionService:
    def __init__(
        self,
        provider: Optional[EphemerisProvider] = None,
        table: Mapping[Planet, OrbitalElements] = ORBITAL_ELEMENTS,
        *,
        kepler_iterations: int = DEFAULT_KEPLER_ITERATIONS,
        on_fallback: Optional[FallbackHook] = None,
        on_result: Optional[ResultHook] = None,
    ):
        self._provider = provider
        self._table = table
        self._iterations = int(kepler_iterations)
        self._on_fallback = on_fallback
        self._on_result = on_result

    @property
    def precision_available(self) -> bool:
        return self._provider is not None

    @property
    def provider(self) -> Optional[EphemerisProvider]:
        return self._provider

    @property
    def library(self) -> str:
        """Label of the preferred path (what a healthy request would report)."""
        return self._provider.name if self._provider is not None else METHOD_APPROXIMATE

    # ───────────────────────── steps ─────────────────────────
    def _fallback(self, reason: str) -> None:
        if self._on_fallback is not None:
            self._on_fallback(reason)

    def _heliocentric(self, day: date) -> tuple[PositionSet, str]:
        if self._provider is not None:
            try:
                return precise_heliocentric(self._provider, day), self._provider.name
            except ProviderBatchFailure as e:
                log.warning("%s failed for %s, using approximate: %s", self._provider.name, day.isoformat(), e)
                self._fallback(e.stage)
        else:
            self._fallback("unavailable")

        jd = julian_day_from_date(day)
        return approximate_heliocentric(jd, self._table, iterations=self._iterations), METHOD_APPROXIMATE

    # ───────────────────────── public API ─────────────────────────
    def compute(self, day: date, date_label: Optional[str] = None) -> PositionResult:
        label = date_label if date_label is not None else day.isoformat()
        try:
            helio, library = self._heliocentric(day)
            geo = to_geocentric(helio)
        except Exception as e:
            log.exception("position computation failed for %s", label)
            raise InternalError(str(e) or type(e).__name__, date=label) from e

        result = PositionResult(
            date=label,
            heliocentric_positions=helio,
            positions=geo,
            success=True,
            library=library,
        )
        if self._on_result is not None:
            self._on_result(result)
        return result

    def compute_iso(self, date_str: Any) -> PositionResult:
        """Validate a 'YYYY-MM-DD' string (InvalidDateError on failure) and compute."""
        day = parse_date(date_str)
        return self.compute(day, date_label=date_str)


def create_position_service(cfg: Optional[Mapping[str, Any]] = None, **hooks: Any) -> PositionService:
    """Factory: probe the precision provider exactly once and inject it."""
    cfg = cfg or {}
    provider = probe_provider(ProviderConfig.from_mapping(cfg.get("precision")))
    return PositionService(
        provider,
        kepler_iterations=int(cfg.get("kepler_iterations", DEFAULT_KEPLER_ITERATIONS)),
        **hooks,
    )
