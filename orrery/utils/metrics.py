# orrery/utils/metrics.py
from __future__ import annotations

from typing import Final

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from orrery.core.models import PositionResult

__all__ = ["OrreryMetrics"]


class OrreryMetrics:
    """
    Per-app Prometheus metrics. Each app owns its own registry so test apps
    can be created repeatedly without duplicate-timeseries errors.
    """
    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry: Final = registry or CollectorRegistry()
        self.requests = Counter(
            "orrery_api_requests_total", "API requests", ["route"], registry=self.registry
        )
        self.latency = Histogram(
            "orrery_request_seconds", "API request latency", ["route"], registry=self.registry
        )
        self.results = Counter(
            "orrery_position_results_total", "Position results by library", ["library"], registry=self.registry
        )
        self.fallbacks = Counter(
            "orrery_precision_fallback_total", "Requests served by the approximate model instead of the precision provider",
            ["reason"], registry=self.registry,
        )
        self.planet_errors = Counter(
            "orrery_planet_errors_total", "Per-planet computation errors", ["planet"], registry=self.registry
        )
        self.precision_up = Gauge(
            "orrery_precision_available", "1 if the precision ephemeris loaded at startup", registry=self.registry
        )
        self.app_up = Gauge("orrery_app_up", "1 if app is running", registry=self.registry)

    # hooks wired into PositionService
    def record_fallback(self, reason: str) -> None:
        self.fallbacks.labels(reason=reason).inc()

    def record_result(self, result: PositionResult) -> None:
        self.results.labels(library=result.library).inc()
        for planet, pos in result.heliocentric_positions.items():
            if not pos.ok:
                self.planet_errors.labels(planet=planet.value).inc()
