# orrery/utils/config.py
import copy
import logging
import os

import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

# Baseline used when the YAML file is missing or leaves keys out.
DEFAULTS = {
    "precision": {
        "enabled": True,
        "ephemeris_path": None,
        "label": "precision-provider",
        "jd_min": 2414865.5,
        "jd_max": 2471183.5,
    },
    "kepler_iterations": 3,
    "cors_origin": "*",
}


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.precision and cfg['precision'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value


def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj


def _merge(base, override):
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_bool(name):
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip().lower() in ("1", "true", "yes", "on")


def _apply_env(data):
    precision = data.setdefault("precision", {})

    enabled = _env_bool("ORRERY_PRECISION_ENABLED")
    if enabled is not None:
        precision["enabled"] = enabled
    if os.getenv("ORRERY_EPHEMERIS"):
        precision["ephemeris_path"] = os.getenv("ORRERY_EPHEMERIS")
    if os.getenv("ORRERY_PRECISION_LABEL"):
        precision["label"] = os.getenv("ORRERY_PRECISION_LABEL")

    iters = os.getenv("ORRERY_KEPLER_ITERATIONS")
    if iters:
        try:
            data["kepler_iterations"] = int(iters)
        except ValueError:
            raise ValueError(f"ORRERY_KEPLER_ITERATIONS must be an integer, got {iters!r}")

    origin = os.getenv("CORS_ALLOW_ORIGIN")
    if origin:
        data["cors_origin"] = origin
    return data


def load_config(path: str = None):
    """
    Load YAML config from `path` (default: $ORRERY_CONFIG or config/defaults.yaml),
    merged over DEFAULTS, then apply environment overrides:
      - ORRERY_PRECISION_ENABLED   (1/true/yes/on)
      - ORRERY_EPHEMERIS           (path to a .bsp kernel)
      - ORRERY_PRECISION_LABEL
      - ORRERY_KEPLER_ITERATIONS
      - CORS_ALLOW_ORIGIN
    A missing file is not an error. Returns an AttrDict.
    """
    path = path or os.environ.get("ORRERY_CONFIG", DEFAULT_CONFIG_PATH)
    data = {}
    if path and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"config root must be a mapping: {path}")
    else:
        log.info("config file %s not found; using defaults", path)

    merged = _apply_env(_merge(DEFAULTS, data))
    if int(merged.get("kepler_iterations", 0)) < 0:
        raise ValueError("kepler_iterations must be >= 0")
    return _to_attr(merged)
