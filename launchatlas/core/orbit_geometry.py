"""Flat 2-D orbit ellipses for display.

Derives a renderable ellipse from (perigee, apogee, inclination) and
a point on it for a given phase angle. This is a display approximation
only: the ellipse is centered on the viewport, its focal distance comes
from the scaled apogee/perigee difference, and the orbit's inclination
is used as an in-plane rotation.
"""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np

from launchatlas.core.scales import LinearScale, orbit_scale
from launchatlas.utils.constants import (
    BASE_ANGULAR_SPEED,
    DEG_TO_RAD,
    ELLIPSE_OUTLINE_POINTS,
    ELLIPTICAL_MIN_ECCENTRICITY,
    GEO_ALT,
    GEO_ALT_TOLERANCE,
    GOLDEN_ANGLE,
    LEO_MAX_ALT,
    MAX_ANGULAR_SPEED,
    MIN_ANGULAR_SPEED,
    MIN_ELLIPSE_RADIUS_PX,
    ORBIT_MARGIN_PX,
    R_EARTH_EQUATORIAL,
    REFERENCE_SEMI_MAJOR_PX,
    TWO_PI,
)

logger = logging.getLogger(__name__)

ScaleFn = Callable[[float], float]


class OrbitClass(str, enum.Enum):
    LEO = "LEO"
    MEO = "MEO"
    GEO = "GEO"
    ELLIPTICAL = "Elliptical"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["OrbitClass"]:
        """Match a dataset label ("LEO", "elliptical", ...) or return None."""
        if not raw:
            return None
        text = str(raw).strip().upper()
        for member in cls:
            if text == member.value.upper():
                return member
        return None


@dataclass(frozen=True, slots=True)
class OrbitRecord:
    """Orbital elements of one object, read-only input to the engine."""

    object_id: str
    perigee_km: float
    apogee_km: float
    inclination_deg: float
    orbit_class: OrbitClass
    eccentricity: float = math.nan

    @property
    def is_anomalous(self) -> bool:
        """Apogee below perigee: a data-quality anomaly, rendered as given."""
        return self.apogee_km < self.perigee_km


@dataclass(frozen=True, slots=True)
class EllipseGeometry:
    """Screen-space ellipse, rotated by ``rotation_deg`` about its center."""

    semi_major_px: float
    semi_minor_px: float
    rotation_deg: float
    center_x: float
    center_y: float

    @property
    def focal_distance_px(self) -> float:
        a, b = self.semi_major_px, self.semi_minor_px
        return math.sqrt(max(0.0, a * a - b * b))


@dataclass(slots=True)
class OrbitAnimationState:
    """Phase of one animated object. ``angular_speed`` is radians per tick."""

    phase_angle: float
    angular_speed: float

    def advance(self, ticks: int = 1) -> float:
        self.phase_angle = (self.phase_angle + self.angular_speed * ticks) % TWO_PI
        return self.phase_angle


def classify_orbit_class(perigee_km: float, apogee_km: float) -> OrbitClass:
    """Orbit class from altitudes, for records that carry no class column.

    Strongly eccentric orbits are Elliptical; otherwise the mean
    altitude decides between GEO, LEO and MEO.
    """
    r_p = perigee_km + R_EARTH_EQUATORIAL
    r_a = apogee_km + R_EARTH_EQUATORIAL
    ecc = abs(r_a - r_p) / (r_a + r_p) if (r_a + r_p) > 0 else 0.0
    if ecc > ELLIPTICAL_MIN_ECCENTRICITY:
        return OrbitClass.ELLIPTICAL

    mean_alt = (perigee_km + apogee_km) / 2.0
    if abs(mean_alt - GEO_ALT) <= GEO_ALT_TOLERANCE:
        return OrbitClass.GEO
    if mean_alt < LEO_MAX_ALT:
        return OrbitClass.LEO
    return OrbitClass.MEO


def compute_ellipse(
    record: OrbitRecord,
    scale: ScaleFn,
    center_x: float = 0.0,
    center_y: float = 0.0,
) -> EllipseGeometry:
    """Derive the display ellipse of ``record`` under ``scale``.

    Args:
        record: orbital elements (km, degrees)
        scale: monotonic km -> px function with scale(0) == 0
        center_x, center_y: shared ellipse center in px

    Returns:
        EllipseGeometry with 0 < semi_minor_px <= semi_major_px. The minor
        axis is lifted to a visible size (never above the major axis).
    """
    ap = scale(record.apogee_km)
    pe = scale(record.perigee_km)

    a = (ap + pe) / 2.0
    c = (ap - pe) / 2.0
    b = math.sqrt(max(0.0, a * a - c * c))

    # Only a zero-size ellipse is inflated; any positive a is kept so sizes stay ordered.
    if not math.isfinite(a) or a <= 0.0:
        a = MIN_ELLIPSE_RADIUS_PX
        b = MIN_ELLIPSE_RADIUS_PX
    elif not math.isfinite(b) or b < MIN_ELLIPSE_RADIUS_PX:
        b = min(MIN_ELLIPSE_RADIUS_PX, a)

    rotation = record.inclination_deg if math.isfinite(record.inclination_deg) else 0.0
    return EllipseGeometry(
        semi_major_px=a,
        semi_minor_px=b,
        rotation_deg=rotation,
        center_x=center_x,
        center_y=center_y,
    )


def position_on_ellipse(geometry: EllipseGeometry, phase_angle: float) -> tuple[float, float]:
    """Point at ``phase_angle`` on the ellipse, rotated about its center."""
    dx = geometry.semi_major_px * math.cos(phase_angle)
    dy = geometry.semi_minor_px * math.sin(phase_angle)
    theta = geometry.rotation_deg * DEG_TO_RAD
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    return (
        geometry.center_x + dx * cos_t - dy * sin_t,
        geometry.center_y + dx * sin_t + dy * cos_t,
    )


def sample_ellipse(geometry: EllipseGeometry, n_points: int = ELLIPSE_OUTLINE_POINTS) -> np.ndarray:
    """Outline of the ellipse as an (n_points, 2) array of screen points."""
    n = max(3, int(n_points))
    phases = np.linspace(0.0, TWO_PI, n, endpoint=False)
    local = np.empty((n, 2), dtype=np.float64)
    local[:, 0] = geometry.semi_major_px * np.cos(phases)
    local[:, 1] = geometry.semi_minor_px * np.sin(phases)

    theta = geometry.rotation_deg * DEG_TO_RAD
    rot = np.array([
        [math.cos(theta), -math.sin(theta)],
        [math.sin(theta), math.cos(theta)],
    ])
    return local @ rot.T + np.array([geometry.center_x, geometry.center_y])


def angular_speed_for(semi_major_px: float) -> float:
    """Radians per tick: farther orbits turn slower, never stalling.

    Follows a Kepler-like a^-1.5 falloff around a reference size, clamped
    to [MIN_ANGULAR_SPEED, MAX_ANGULAR_SPEED].
    """
    a = max(semi_major_px, MIN_ELLIPSE_RADIUS_PX)
    speed = BASE_ANGULAR_SPEED * (REFERENCE_SEMI_MAJOR_PX / a) ** 1.5
    return min(MAX_ANGULAR_SPEED, max(MIN_ANGULAR_SPEED, speed))


class OrbitGeometryEngine:
    """Holds the orbit records of a dataset and their derived geometry.

    Geometry is a pure function of (records, viewport); ``set_viewport``
    re-derives every ellipse from the stored elements. Animation speeds
    are assigned once, from the geometry at construction time.
    """

    def __init__(
        self,
        records: Sequence[OrbitRecord],
        width: float,
        height: float,
        margin_px: float = ORBIT_MARGIN_PX,
    ):
        self._records: dict[str, OrbitRecord] = {}
        for record in records:
            if record.object_id in self._records:
                logger.warning("Duplicate orbit object id %s, keeping the first", record.object_id)
                continue
            if record.is_anomalous:
                logger.warning(
                    "Orbit %s has apogee %.1f km below perigee %.1f km; rendering as given",
                    record.object_id, record.apogee_km, record.perigee_km,
                )
            self._records[record.object_id] = record

        self._margin_px = margin_px
        self._width = width
        self._height = height
        self._scale: LinearScale = orbit_scale((), width, height, margin_px)
        self._geometries: dict[str, EllipseGeometry] = {}
        self._recompute()

        self._states: dict[str, OrbitAnimationState] = {
            object_id: OrbitAnimationState(
                phase_angle=(i * GOLDEN_ANGLE) % TWO_PI,
                angular_speed=angular_speed_for(geometry.semi_major_px),
            )
            for i, (object_id, geometry) in enumerate(self._geometries.items())
        }

    def _recompute(self) -> None:
        # Apogee and perigee both feed the domain so anomalous rows stay in view.
        extents: list[float] = []
        for record in self._records.values():
            extents.append(record.apogee_km)
            extents.append(record.perigee_km)
        self._scale = orbit_scale(extents, self._width, self._height, self._margin_px)
        cx, cy = self._width / 2.0, self._height / 2.0
        self._geometries = {
            object_id: compute_ellipse(record, self._scale, cx, cy)
            for object_id, record in self._records.items()
        }

    def set_viewport(self, width: float, height: float) -> None:
        """Viewport changed: rebuild the scale and every ellipse."""
        self._width = width
        self._height = height
        self._recompute()
        logger.debug("Recomputed %d ellipses for %gx%g viewport", len(self._geometries), width, height)

    @property
    def viewport(self) -> tuple[float, float]:
        return self._width, self._height

    @property
    def scale(self) -> LinearScale:
        return self._scale

    @property
    def records(self) -> dict[str, OrbitRecord]:
        return dict(self._records)

    @property
    def geometries(self) -> dict[str, EllipseGeometry]:
        return dict(self._geometries)

    @property
    def animation_states(self) -> dict[str, OrbitAnimationState]:
        return self._states

    def geometry(self, object_id: str) -> EllipseGeometry:
        return self._geometries[object_id]

    def advance(self, ticks: int = 1) -> None:
        """Move every object along its ellipse by ``ticks`` steps."""
        for state in self._states.values():
            state.advance(ticks)

    def position(self, object_id: str, phase_angle: Optional[float] = None) -> tuple[float, float]:
        """Current (or given-phase) position of one object."""
        phase = self._states[object_id].phase_angle if phase_angle is None else phase_angle
        return position_on_ellipse(self._geometries[object_id], phase)

    def positions(self) -> dict[str, tuple[float, float]]:
        return {object_id: self.position(object_id) for object_id in self._geometries}

    def __len__(self) -> int:
        return len(self._records)

