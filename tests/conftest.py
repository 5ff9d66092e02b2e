# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the Orrery suite.

- Registers Hypothesis profiles for local dev and CI.
- Provides a scriptable fake precision provider (no kernel download needed).
- Provides Flask apps/clients wired to either the fake provider or none.
"""

import math
import os
from datetime import date
from typing import Any, Iterable, Optional

import pytest
from hypothesis import settings, HealthCheck

from orrery.core.constants import PLANETS, Planet
from orrery.core.elements import ORBITAL_ELEMENTS
from orrery.core.ephemeris_adapter import EphemerisProvider
from orrery.core.errors import ProviderBatchFailure


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: needs a real JPL kernel (ORRERY_EPHEMERIS)")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Fake precision provider
# ──────────────────────────────────────────────────────────────────────────────
class FakeProvider(EphemerisProvider):
    """
    Deterministic stand-in for the Skyfield provider. Each planet sits at
    radius `a` (AU) on a slightly tilted circle, angle set by its index.
    """
    def __init__(
        self,
        name: str = "fake-ephem",
        *,
        fail_planets: Iterable[Planet] = (),
        batch_fail: bool = False,
        time_error: Optional[Exception] = None,
    ):
        self.name = name
        self.fail_planets = set(fail_planets)
        self.batch_fail = batch_fail
        self.time_error = time_error
        self.calls: list = []

    def time_for(self, day: date) -> Any:
        if self.batch_fail:
            raise ProviderBatchFailure("time", f"cannot represent {day.isoformat()}")
        if self.time_error is not None:
            raise self.time_error
        return day.toordinal()

    def heliocentric_vector(self, planet: Planet, t: Any):
        self.calls.append((planet, t))
        if planet in self.fail_planets:
            raise RuntimeError(f"{planet.value} exploded")
        a = ORBITAL_ELEMENTS[planet].a
        k = PLANETS.index(planet) + (t % 360) / 360.0
        return (a * math.cos(k), a * math.sin(k), 0.01 * a)


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


# ──────────────────────────────────────────────────────────────────────────────
# Flask app fixtures
# ──────────────────────────────────────────────────────────────────────────────
TEST_CONFIG = {
    "precision": {"enabled": False},
    "kepler_iterations": 3,
    "cors_origin": "*",
}


@pytest.fixture
def app_factory(monkeypatch):
    monkeypatch.delenv("METRICS_USER", raising=False)
    monkeypatch.delenv("METRICS_PASS", raising=False)
    from orrery.main import create_app

    def _make(provider: Optional[EphemerisProvider] = None, config: Optional[dict] = None):
        app = create_app(config=dict(config or TEST_CONFIG), provider=provider)
        app.testing = True
        return app

    return _make


@pytest.fixture
def client(app_factory):
    return app_factory().test_client()


@pytest.fixture
def precise_client(app_factory, fake_provider):
    return app_factory(fake_provider).test_client()
