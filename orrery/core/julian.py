# orrery/core/julian.py
# -----------------------------------------------------------------------------
# Calendar → Julian Day Number (proleptic Gregorian, integer arithmetic).
#
# Public API:
#   julian_day_number(year, month, day) -> int
#   julian_day_from_date(d)             -> int
#
# No time-of-day is applied: the JDN is returned as-is, without the -0.5 shift
# to civil midnight. Callers that feed it to the orbital model accept the
# resulting half-day offset.
# -----------------------------------------------------------------------------
from __future__ import annotations

from datetime import date

__all__ = ["julian_day_number", "julian_day_from_date"]


def julian_day_number(year: int, month: int, day: int) -> int:
    if not (1 <= month <= 12):
        raise ValueError(f"month out of range: {month}")
    if not (1 <= day <= 31):
        raise ValueError(f"day out of range: {day}")
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return (
        day
        + (153 * m + 2) // 5
        + 365 * y
        + y // 4
        - y // 100
        + y // 400
        - 32045
    )


def julian_day_from_date(d: date) -> int:
    return julian_day_number(d.year, d.month, d.day)
