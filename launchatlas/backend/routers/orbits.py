"""Orbit ellipse geometry API routes."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from launchatlas.backend.models.schemas import (
    EllipseResponse,
    OrbitGeometryResponse,
    OutlineResponse,
    PositionResponse,
)
from launchatlas.backend.services.dataset_service import dataset_service
from launchatlas.core.orbit_geometry import OrbitGeometryEngine, position_on_ellipse, sample_ellipse
from launchatlas.utils.constants import ELLIPSE_OUTLINE_POINTS, TWO_PI

logger = logging.getLogger(__name__)
router = APIRouter()


def _engine(width: Optional[float], height: Optional[float]) -> OrbitGeometryEngine:
    """Geometry for the requested viewport, derived from the stored elements."""
    default_w, default_h = dataset_service.settings.viewport
    return dataset_service.get_dataset().orbit_engine(width or default_w, height or default_h)


def _require(engine: OrbitGeometryEngine, object_id: str) -> None:
    if object_id not in engine.records:
        raise HTTPException(status_code=404, detail=f"Unknown orbit object {object_id!r}")


@router.get("/geometry", response_model=OrbitGeometryResponse)
def get_geometry(
    width: Optional[float] = Query(default=None, gt=0, allow_inf_nan=False, description="Viewport width in px"),
    height: Optional[float] = Query(default=None, gt=0, allow_inf_nan=False, description="Viewport height in px"),
):
    """Ellipse parameters and initial animation state of every orbit."""
    engine = _engine(width, height)
    records = engine.records
    states = engine.animation_states
    orbits = []
    for object_id, geometry in engine.geometries.items():
        record = records[object_id]
        state = states[object_id]
        orbits.append(EllipseResponse(
            object_id=object_id,
            orbit_class=record.orbit_class.value,
            perigee_km=record.perigee_km,
            apogee_km=record.apogee_km,
            anomalous=record.is_anomalous,
            semi_major_px=geometry.semi_major_px,
            semi_minor_px=geometry.semi_minor_px,
            rotation_deg=geometry.rotation_deg,
            center_x=geometry.center_x,
            center_y=geometry.center_y,
            phase_angle=state.phase_angle,
            angular_speed=state.angular_speed,
        ))

    view_w, view_h = engine.viewport
    return OrbitGeometryResponse(
        width=view_w,
        height=view_h,
        domain_max_km=engine.scale.domain_max,
        range_max_px=engine.scale.range_max,
        orbits=orbits,
    )


@router.get("/{object_id}/position", response_model=PositionResponse)
def get_position(
    object_id: str,
    phase: Optional[float] = Query(default=None, allow_inf_nan=False, description="Phase angle in radians"),
    width: Optional[float] = Query(default=None, gt=0, allow_inf_nan=False),
    height: Optional[float] = Query(default=None, gt=0, allow_inf_nan=False),
):
    """Point on the object's ellipse at ``phase`` (default: its initial phase)."""
    engine = _engine(width, height)
    _require(engine, object_id)
    angle = engine.animation_states[object_id].phase_angle if phase is None else phase % TWO_PI
    x, y = position_on_ellipse(engine.geometry(object_id), angle)
    return PositionResponse(object_id=object_id, phase_angle=angle, x=x, y=y)


@router.get("/{object_id}/outline", response_model=OutlineResponse)
def get_outline(
    object_id: str,
    points: int = Query(default=ELLIPSE_OUTLINE_POINTS, ge=3, le=2000),
    width: Optional[float] = Query(default=None, gt=0, allow_inf_nan=False),
    height: Optional[float] = Query(default=None, gt=0, allow_inf_nan=False),
):
    engine = _engine(width, height)
    _require(engine, object_id)
    outline = sample_ellipse(engine.geometry(object_id), points)
    return OutlineResponse(
        object_id=object_id,
        points=[(float(x), float(y)) for x, y in outline],
    )
