# orrery/api/routes.py
"""
Orrery: API routes
- Positions (heliocentric + geocentric, precision or approximate)
- Orbital element table
- Ephemeris diagnostics
- Ops: /api/health

Notes:
- The PositionService is created once by the app factory and read from
  current_app.extensions; routes never probe the ephemeris themselves.
- Errors use the {ok: false, error: <code>, ...} envelope.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from orrery.core.elements import elements_table_dict
from orrery.core.errors import InternalError, InvalidDateError
from orrery.core.service import PositionService
from orrery.version import VERSION

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

SERVICE_KEY = "orrery.service"
EXAMPLE_DATE = "2005-11-01"


# ───────────────────────── helpers ─────────────────────────
def _service() -> PositionService:
    return current_app.extensions[SERVICE_KEY]


def _json_error(code: str, details: Any = None, http: int = 400, **extra: Any):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    out.update(extra)
    return jsonify(out), http


def health_payload() -> Dict[str, Any]:
    svc = _service()
    return {
        "ok": True,
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "precision_available": svc.precision_available,
        "library": svc.library,
        "version": VERSION,
    }


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify(health_payload()), 200


# ───────────────────────── positions ─────────────────────────
@api.get("/api/positions")
def positions():
    date_s = request.args.get("date")
    if not date_s:
        return _json_error(
            "missing_date",
            "Please provide a date in YYYY-MM-DD format",
            400,
            example=EXAMPLE_DATE,
        )

    log.info("Calculating positions for date: %s", date_s)
    try:
        result = _service().compute_iso(date_s)
    except InvalidDateError as e:
        return _json_error("invalid_date", e.errors(), 400, provided=date_s)
    except InternalError as e:
        return _json_error(
            "internal_error",
            str(e),
            500,
            message="Internal error calculating positions",
            date=date_s,
        )

    return jsonify(result.to_dict()), 200


# ───────────────────────── reference data ─────────────────────────
@api.get("/api/elements")
def elements():
    return jsonify({"ok": True, **elements_table_dict()}), 200


@api.get("/api/ephemeris/diagnostics")
def ephemeris_diagnostics():
    svc = _service()
    provider = svc.provider
    return jsonify({
        "ok": True,
        "precision_available": svc.precision_available,
        "library": svc.library,
        "provider": provider.diagnostics() if provider is not None else None,
    }), 200
