# orrery/core/validators.py
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, List

from orrery.core.errors import InvalidDateError

__all__ = ["parse_date", "InvalidDateError"]

_DATE_RE = re.compile(r"^\s*(?P<y>\d{4})-(?P<m>\d{2})-(?P<d>\d{2})\s*$")


def _err(loc: List[str] | str, msg: str, typ: str = "value_error.date") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}


def parse_date(s: Any, *, field: str = "date") -> date:
    """
    Strict 'YYYY-MM-DD' parser. Raises InvalidDateError with structured details.
    Only years representable by `datetime.date` (1..9999) are accepted.
    """
    if not isinstance(s, str) or not s.strip():
        raise InvalidDateError(_err(field, "date is required in YYYY-MM-DD format", "value_error.missing"), provided=s)
    m = _DATE_RE.match(s)
    if not m:
        raise InvalidDateError(_err(field, "date must be 'YYYY-MM-DD'"), provided=s)
    try:
        return datetime.strptime(s.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDateError(_err(field, f"date does not exist: {s.strip()}"), provided=s) from None
