# tests/test_approximate.py
from __future__ import annotations

import math
from datetime import date

import pytest
from hypothesis import given, strategies as st

from orrery.core.approximate import approximate_heliocentric, approximate_planet
from orrery.core.constants import AU_KM, J2000_JD, METHOD_APPROXIMATE, METHOD_ERROR, PLANETS, Planet
from orrery.core.elements import ORBITAL_ELEMENTS, OrbitalElements
from orrery.core.julian import julian_day_from_date, julian_day_number

JD_2005_11_01 = julian_day_number(2005, 11, 1)


def _norm(p) -> float:
    return math.sqrt(p.x ** 2 + p.y ** 2 + p.z ** 2)


def test_covers_every_planet_in_order() -> None:
    out = approximate_heliocentric(JD_2005_11_01)
    assert list(out) == list(PLANETS)
    assert all(p.method == METHOD_APPROXIMATE for p in out.values())


def test_planar_projection_y_is_zero() -> None:
    out = approximate_heliocentric(JD_2005_11_01)
    assert all(p.y == 0.0 for p in out.values())


def test_earth_near_one_au_and_neptune_far() -> None:
    out = approximate_heliocentric(JD_2005_11_01)
    earth = out[Planet.EARTH].distance
    neptune = out[Planet.NEPTUNE].distance
    assert abs(earth - AU_KM) / AU_KM < 0.02
    assert neptune >= 10.0 * earth


def test_earth_at_epoch_is_near_perihelion() -> None:
    # M = L - w = -2.473 deg at t = 0, so r ~ a(1 - e)
    p = approximate_planet(J2000_JD, ORBITAL_ELEMENTS[Planet.EARTH])
    assert p.distance / AU_KM == pytest.approx(0.98331, abs=1e-4)


def test_distances_within_perihelion_aphelion() -> None:
    out = approximate_heliocentric(JD_2005_11_01)
    for planet, pos in out.items():
        el = ORBITAL_ELEMENTS[planet]
        r = pos.distance / AU_KM
        assert el.a * (1 - el.e) - 1e-9 <= r <= el.a * (1 + el.e) + 1e-9


def test_circular_orbit_longitude_tracks_mean_longitude() -> None:
    el = OrbitalElements(a=2.0, e=0.0, i=0.0, L=30.0, w=10.0, n=1.0)
    p = approximate_planet(J2000_JD + 15.0, el)
    lon = math.degrees(math.atan2(p.z, p.x)) % 360.0
    assert lon == pytest.approx(45.0, abs=1e-9)
    assert p.distance == pytest.approx(2.0 * AU_KM)


def test_iteration_count_is_forwarded() -> None:
    a = approximate_heliocentric(JD_2005_11_01, iterations=3)
    b = approximate_heliocentric(JD_2005_11_01)
    c = approximate_heliocentric(JD_2005_11_01, iterations=40)
    assert a == b
    assert a[Planet.MERCURY] != c[Planet.MERCURY]


class _Broken:
    a = 1.0
    e = 0.1
    w = 0.0

    def mean_longitude(self, jd: float) -> float:
        raise OverflowError("mean longitude overflow")


def test_single_planet_arithmetic_failure_is_isolated() -> None:
    table = dict(ORBITAL_ELEMENTS)
    table[Planet.MARS] = _Broken()  # type: ignore[assignment]
    out = approximate_heliocentric(JD_2005_11_01, table)
    mars = out[Planet.MARS]
    assert mars.method == METHOD_ERROR
    assert mars.error == "mean longitude overflow"
    assert (mars.x, mars.y, mars.z, mars.distance) == (0.0, 0.0, 0.0, 0.0)
    others = [p for k, p in out.items() if k is not Planet.MARS]
    assert len(others) == 7
    assert all(p.ok and p.distance > 0 for p in others)


def test_missing_table_entry_propagates() -> None:
    table = {p: e for p, e in ORBITAL_ELEMENTS.items() if p is not Planet.SATURN}
    with pytest.raises(KeyError):
        approximate_heliocentric(JD_2005_11_01, table)


@given(d=st.dates(min_value=date(1000, 1, 1), max_value=date(3000, 12, 31)))
def test_distance_is_vector_norm(d: date) -> None:
    out = approximate_heliocentric(julian_day_from_date(d))
    for pos in out.values():
        assert pos.ok
        assert pos.distance == pytest.approx(_norm(pos), rel=1e-6)
