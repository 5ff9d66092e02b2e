# orrery/main.py
from __future__ import annotations

import logging
import os
import traceback
from time import perf_counter
from typing import Any, Mapping, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from orrery.api.routes import SERVICE_KEY, api, health_payload
from orrery.core.constants import DEFAULT_KEPLER_ITERATIONS
from orrery.core.service import PositionService, create_position_service
from orrery.utils.config import load_config
from orrery.utils.metrics import OrreryMetrics

METRICS_KEY = "orrery.metrics"

_TRACKED_ROUTES = ("/", "/health", "/healthz", "/metrics")


# ───────────────────────── helpers: logging & errors ─────────────────────────
def _configure_logging(app: Flask) -> None:
    gerr = logging.getLogger("gunicorn.error")
    if gerr.handlers:
        app.logger.handlers = gerr.handlers
        app.logger.setLevel(gerr.level)
        logging.getLogger("orrery").handlers = gerr.handlers
        logging.getLogger("orrery").setLevel(gerr.level)
    else:
        logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))


def _register_errors(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        app.logger.warning("HTTP %s at %s %s: %s", e.code, request.method, request.path, e.description)
        return jsonify(
            ok=False,
            error="http_error",
            code=e.code,
            name=e.name,
            message=e.description,
            path=request.path,
        ), e.code

    @app.errorhandler(Exception)
    def _any(e: Exception):
        tb = traceback.format_exc()
        app.logger.error("UNHANDLED %s at %s %s\n%s", type(e).__name__, request.method, request.path, tb)
        return jsonify(
            ok=False,
            error="internal_error",
            type=type(e).__name__,
            message=str(e),
            path=request.path,
        ), 500


# ───────────────────────── health & metrics ─────────────────────────
def _register_health(app: Flask) -> None:
    @app.route("/", methods=["GET"])
    def root():
        return jsonify(ok=True, service="orrery", health="/health", positions="/api/positions?date=YYYY-MM-DD"), 200

    @app.route("/health", methods=["GET"])
    @app.route("/healthz", methods=["GET"])
    def health():
        return jsonify(health_payload()), 200


def _metrics_auth_ok() -> bool:
    user = os.getenv("METRICS_USER", "")
    pw = os.getenv("METRICS_PASS", "")
    if not (user and pw):
        return True
    auth = request.authorization
    return bool(auth and auth.type == "basic" and auth.username == user and auth.password == pw)


def _register_metrics(app: Flask, metrics: OrreryMetrics) -> None:
    @app.before_request
    def _before():
        p = request.path or ""
        if p.startswith("/api/") or p in _TRACKED_ROUTES:
            metrics.requests.labels(route=p).inc()
            request._t0 = perf_counter()

    @app.after_request
    def _after(resp):
        t0 = getattr(request, "_t0", None)
        if t0 is not None and request.path != "/metrics":
            metrics.latency.labels(route=request.path).observe(perf_counter() - t0)
        return resp

    @app.route("/metrics", methods=["GET"])
    def metrics_endpoint():
        if not _metrics_auth_ok():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        metrics.app_up.set(1.0)
        return Response(generate_latest(metrics.registry), mimetype=CONTENT_TYPE_LATEST)


# ───────────────────────── app factory ─────────────────────────
_PROBE = object()


def create_app(config: Optional[Mapping[str, Any]] = None, provider: Any = _PROBE) -> Flask:
    """
    Build the Flask app. The precision provider is probed here, once. Pass
    `provider` (an EphemerisProvider, or None for approximate-only) to skip
    probing.
    """
    app = Flask(__name__)
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    _configure_logging(app)

    cfg = config if config is not None else load_config()
    app.config["ORRERY"] = cfg

    metrics = OrreryMetrics()
    hooks = {"on_fallback": metrics.record_fallback, "on_result": metrics.record_result}
    if provider is _PROBE:
        service = create_position_service(cfg, **hooks)
    else:
        service = PositionService(
            provider,
            kepler_iterations=int(cfg.get("kepler_iterations", DEFAULT_KEPLER_ITERATIONS)),
            **hooks,
        )
    app.extensions[SERVICE_KEY] = service
    app.extensions[METRICS_KEY] = metrics

    metrics.precision_up.set(1.0 if service.precision_available else 0.0)
    metrics.app_up.set(1.0)

    _register_health(app)
    _register_errors(app)
    _register_metrics(app, metrics)
    app.register_blueprint(api)

    CORS(
        app,
        resources={r"/.*": {"origins": cfg.get("cors_origin", "*")}},
        supports_credentials=False,
        send_wildcard=True,
        methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=600,
    )

    app.logger.info(
        "App initialized; precision_available=%s; library=%s",
        service.precision_available, service.library,
    )
    return app


def get_app() -> Flask:
    """WSGI entry point for gunicorn: `gunicorn 'orrery.main:get_app()'`."""
    return create_app()


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
