# tests/test_config.py
from __future__ import annotations

import runpy
from pathlib import Path
from types import SimpleNamespace

import pytest

from orrery.utils.config import DEFAULTS, load_config

_ENV = (
    "ORRERY_CONFIG",
    "ORRERY_PRECISION_ENABLED",
    "ORRERY_EPHEMERIS",
    "ORRERY_PRECISION_LABEL",
    "ORRERY_KEPLER_ITERATIONS",
    "CORS_ALLOW_ORIGIN",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path) -> None:
    cfg = load_config(str(tmp_path / "absent.yaml"))
    assert cfg == DEFAULTS
    assert cfg.precision.label == "precision-provider"
    assert cfg["kepler_iterations"] == 3


def test_yaml_merges_over_defaults(tmp_path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text("precision:\n  label: skyfield\nkepler_iterations: 6\n", encoding="utf-8")
    cfg = load_config(str(p))
    assert cfg.precision.label == "skyfield"
    assert cfg.precision.enabled is True
    assert cfg.precision.jd_min == DEFAULTS["precision"]["jd_min"]
    assert cfg.kepler_iterations == 6


def test_config_path_from_env(tmp_path, monkeypatch) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text("cors_origin: https://orrery.example\n", encoding="utf-8")
    monkeypatch.setenv("ORRERY_CONFIG", str(p))
    assert load_config().cors_origin == "https://orrery.example"


def test_env_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ORRERY_PRECISION_ENABLED", "off")
    monkeypatch.setenv("ORRERY_EPHEMERIS", "/data/de421.bsp")
    monkeypatch.setenv("ORRERY_PRECISION_LABEL", "astronomy-engine")
    monkeypatch.setenv("ORRERY_KEPLER_ITERATIONS", "8")
    monkeypatch.setenv("CORS_ALLOW_ORIGIN", "http://localhost:3000")
    cfg = load_config(str(tmp_path / "absent.yaml"))
    assert cfg.precision.enabled is False
    assert cfg.precision.ephemeris_path == "/data/de421.bsp"
    assert cfg.precision.label == "astronomy-engine"
    assert cfg.kepler_iterations == 8
    assert cfg.cors_origin == "http://localhost:3000"


def test_bad_iteration_env_raises(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ORRERY_KEPLER_ITERATIONS", "three")
    with pytest.raises(ValueError):
        load_config(str(tmp_path / "absent.yaml"))


def test_negative_iterations_rejected(tmp_path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text("kepler_iterations: -1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(p))


def test_non_mapping_root_rejected(tmp_path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(p))


def test_defaults_not_mutated(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ORRERY_PRECISION_LABEL", "other")
    load_config(str(tmp_path / "absent.yaml"))
    assert DEFAULTS["precision"]["label"] == "precision-provider"


def test_unknown_attribute_raises(tmp_path) -> None:
    cfg = load_config(str(tmp_path / "absent.yaml"))
    with pytest.raises(AttributeError):
        cfg.nope


# ---------- gunicorn settings ----------

_GUNICORN_CONF = Path(__file__).resolve().parents[1] / "gunicorn.conf.py"


def test_gunicorn_settings_follow_env(monkeypatch) -> None:
    monkeypatch.setenv("WEB_CONCURRENCY", "3")
    monkeypatch.setenv("ORRERY_WORKER_TIMEOUT", "45")
    monkeypatch.setenv("PORT", "8080")
    conf = runpy.run_path(str(_GUNICORN_CONF))
    assert conf["wsgi_app"] == "orrery.main:get_app()"
    assert conf["workers"] == 3
    assert conf["timeout"] == 45
    assert conf["bind"] == "0.0.0.0:8080"
    assert conf["preload_app"] is False


def test_gunicorn_worker_hook_logs_provider_state(app_factory) -> None:
    conf = runpy.run_path(str(_GUNICORN_CONF))
    messages = []

    class _Log:
        def info(self, msg, *args):
            messages.append(msg % args)

    worker = SimpleNamespace(wsgi=app_factory(), pid=4242, log=_Log())
    conf["post_worker_init"](worker)
    assert messages == ["worker 4242 ready; precision_available=False library=approximate"]
