# orrery/core/ephemeris_adapter.py
# -----------------------------------------------------------------------------
# Precision ephemeris adapter (Skyfield + local JPL kernel)
#
# Contract used by the position service:
#   provider.name                                  -> provenance label
#   provider.time_for(date)                        -> opaque time object
#   provider.heliocentric_vector(planet, time)     -> (x, y, z) AU, ecliptic J2000
#
# • Availability is decided once by probe_provider() at startup; a provider
#   that was not built is simply absent (None), never re-probed per request.
# • time_for() failures are batch-level (ProviderBatchFailure): the caller
#   falls back to the analytic model for the whole request.
# • heliocentric_vector() failures are per planet and isolated by
#   precise_heliocentric().
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional
import logging
import math
import os

from orrery.core.constants import DEFAULT_PRECISION_LABEL, PLANETS, Planet
from orrery.core.errors import PerPlanetComputationError, ProviderBatchFailure
from orrery.core.julian import julian_day_from_date
from orrery.core.models import PlanetOutcome, PositionSet, Vector3, position_set

log = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Constants / environment
# ─────────────────────────────────────────────────────────────────────────────
# DE421 spans JD 2414864.5 (1899-07-29) to 2471184.5 (2053-10-09). The guard sits one
# day inside so the UTC/TT offset at civil midnight never leaves the kernel.
DE421_JD_MIN = 2414865.5  # 1899-07-30 00:00
DE421_JD_MAX = 2471183.5  # 2053-10-08 00:00

_DEFAULT_KERNEL_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "de421.bsp")

# Kernel labels; the gas giants are only available as system barycenters.
_KERNEL_KEYS: Dict[Planet, str] = {
    Planet.MERCURY: "mercury",
    Planet.VENUS: "venus",
    Planet.EARTH: "earth",
    Planet.MARS: "mars",
    Planet.JUPITER: "jupiter barycenter",
    Planet.SATURN: "saturn barycenter",
    Planet.URANUS: "uranus barycenter",
    Planet.NEPTUNE: "neptune barycenter",
}


def _truthy(val: Any, default: bool) -> bool:
    if val is None or val == "":
        return default
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in ("1", "true", "yes", "on")


# ─────────────────────────────────────────────────────────────────────────────
# Provider configuration
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ProviderConfig:
    enabled: bool = True
    ephemeris_path: Optional[str] = None
    label: str = DEFAULT_PRECISION_LABEL
    jd_min: float = DE421_JD_MIN
    jd_max: float = DE421_JD_MAX

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ProviderConfig":
        data = dict(data or {})
        return cls(
            enabled=_truthy(data.get("enabled"), True),
            ephemeris_path=(data.get("ephemeris_path") or None),
            label=str(data.get("label") or DEFAULT_PRECISION_LABEL),
            jd_min=float(data.get("jd_min", DE421_JD_MIN)),
            jd_max=float(data.get("jd_max", DE421_JD_MAX)),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Provider contract
# ─────────────────────────────────────────────────────────────────────────────
class EphemerisProvider:
    """Base class for precision sources. Subclasses implement both methods."""
    name: str = DEFAULT_PRECISION_LABEL

    def time_for(self, day: date) -> Any:
        raise NotImplementedError

    def heliocentric_vector(self, planet: Planet, t: Any) -> Vector3:
        raise NotImplementedError

    def diagnostics(self) -> Dict[str, Any]:
        return {"name": self.name}


# ─────────────────────────────────────────────────────────────────────────────
# Kernel I/O
# ─────────────────────────────────────────────────────────────────────────────
def _skyfield_available() -> bool:
    try:
        import skyfield  # noqa: F401
        return True
    except Exception:
        return False


def _resolve_kernel_path(configured: Optional[str]) -> Optional[str]:
    for path in (configured, _DEFAULT_KERNEL_PATH):
        if path and os.path.isfile(path):
            return path
    return None


def _looks_like_lfs_pointer(path: str) -> bool:
    try:
        if os.path.getsize(path) <= 512:
            with open(path, "rb") as f:
                head = f.read(128)
            return head.startswith(b"version https://git-lfs.github.com/spec/v1")
    except OSError:
        pass
    return False


# ─────────────────────────────────────────────────────────────────────────────
# Skyfield provider
# ─────────────────────────────────────────────────────────────────────────────
class SkyfieldProvider(EphemerisProvider):
    def __init__(self, kernel: Any, timescale: Any, *, kernel_path: str, cfg: ProviderConfig):
        from skyfield.framelib import ecliptic_J2000_frame

        self.name = cfg.label
        self.cfg = cfg
        self.kernel_path = kernel_path
        self._ts = timescale
        self._frame = ecliptic_J2000_frame
        try:
            self._sun = kernel["sun"]
            self._bodies = {p: kernel[_KERNEL_KEYS[p]] for p in PLANETS}
        except KeyError as e:
            raise ProviderBatchFailure("kernel", f"kernel lacks body {e}", path=kernel_path) from e

    @classmethod
    def load(cls, cfg: ProviderConfig) -> "SkyfieldProvider":
        if not _skyfield_available():
            raise ProviderBatchFailure("dependency", "Skyfield not installed")
        path = _resolve_kernel_path(cfg.ephemeris_path)
        if not path:
            raise ProviderBatchFailure("kernel", "No local kernel found (set ORRERY_EPHEMERIS or place orrery/data/de421.bsp)")
        if _looks_like_lfs_pointer(path):
            raise ProviderBatchFailure("kernel", f"Kernel looks like a Git LFS pointer: {path}")

        from skyfield.api import load, load_file
        try:
            kernel = load_file(path)
            ts = load.timescale(builtin=True)
        except Exception as e:
            raise ProviderBatchFailure("kernel", f"Skyfield failed to load kernel: {path}", error=str(e)) from e
        return cls(kernel, ts, kernel_path=path, cfg=cfg)

    def time_for(self, day: date) -> Any:
        jd = julian_day_from_date(day) - 0.5  # civil midnight, the instant ts.utc builds
        if not (self.cfg.jd_min <= jd <= self.cfg.jd_max):
            raise ProviderBatchFailure(
                "time", f"{day.isoformat()} outside kernel coverage",
                jd=jd, jd_min=self.cfg.jd_min, jd_max=self.cfg.jd_max,
            )
        try:
            return self._ts.utc(day.year, day.month, day.day)
        except Exception as e:
            raise ProviderBatchFailure("time", f"cannot build time for {day.isoformat()}", error=str(e)) from e

    def heliocentric_vector(self, planet: Planet, t: Any) -> Vector3:
        body = self._bodies.get(planet)
        if body is None:
            raise PerPlanetComputationError(planet, "not in kernel")
        x, y, z = (body - self._sun).at(t).frame_xyz(self._frame).au
        return float(x), float(y), float(z)

    def diagnostics(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kernel": os.path.basename(self.kernel_path),
            "kernel_path": self.kernel_path,
            "jd_guard": {"min": self.cfg.jd_min, "max": self.cfg.jd_max},
            "bodies": {p.value: _KERNEL_KEYS[p] for p in PLANETS},
        }


def probe_provider(cfg: Optional[ProviderConfig] = None) -> Optional[EphemerisProvider]:
    """
    One-shot startup initialization. Returns a ready provider, or None when the
    precision path is disabled or cannot be initialized (reason is logged).
    """
    cfg = cfg or ProviderConfig()
    if not cfg.enabled:
        log.info("precision ephemeris disabled by configuration")
        return None
    try:
        provider = SkyfieldProvider.load(cfg)
    except ProviderBatchFailure as e:
        log.warning("precision ephemeris unavailable (%s); using approximate model", e)
        return None
    log.info("precision ephemeris loaded: %s (%s)", provider.name, provider.kernel_path)
    return provider


# ─────────────────────────────────────────────────────────────────────────────
# Batch computation with per-planet isolation
# ─────────────────────────────────────────────────────────────────────────────
def _planet_outcome(provider: EphemerisProvider, planet: Planet, t: Any) -> PlanetOutcome:
    try:
        x, y, z = provider.heliocentric_vector(planet, t)
    except PerPlanetComputationError as e:
        return PlanetOutcome.failure(planet, e.message)
    except Exception as e:
        log.warning("precision computation failed for %s: %s", planet.value, e)
        return PlanetOutcome.failure(planet, str(e) or type(e).__name__)
    if not all(math.isfinite(c) for c in (x, y, z)):
        return PlanetOutcome.failure(planet, "non-finite vector")
    return PlanetOutcome.success(planet, (x, y, z))


def planet_outcomes(provider: EphemerisProvider, day: date) -> List[PlanetOutcome]:
    try:
        t = provider.time_for(day)
    except ProviderBatchFailure:
        raise
    except Exception as e:
        raise ProviderBatchFailure("time", str(e) or type(e).__name__) from e
    return [_planet_outcome(provider, planet, t) for planet in PLANETS]


def precise_heliocentric(provider: EphemerisProvider, day: date) -> PositionSet:
    outcomes = planet_outcomes(provider, day)
    return position_set((o.planet, o.to_position(provider.name)) for o in outcomes)


__all__ = [
    "ProviderConfig",
    "EphemerisProvider",
    "SkyfieldProvider",
    "probe_provider",
    "planet_outcomes",
    "precise_heliocentric",
]
