"""Pydantic schemas for API responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# --- Sites ---


class SiteAggregateResponse(BaseModel):
    site_key: str
    lon: float
    lat: float
    site_name: str
    acronym: str
    country: str
    cumulative_count: int
    counts_by_category: dict[str, int]
    radius_px: float = Field(description="Circle radius, area proportional to the count")


class SnapshotResponse(BaseModel):
    year: Optional[int] = None
    total: int
    max_count: int
    sites: list[SiteAggregateResponse]


class YearsResponse(BaseModel):
    years: list[int]
    first_year: Optional[int] = None
    last_year: Optional[int] = None


class OwnershipYearResponse(BaseModel):
    year: int
    government: int
    commercial: int
    difference: int


class VehicleCountResponse(BaseModel):
    vehicle: str
    launches: int


# --- Orbits ---


class EllipseResponse(BaseModel):
    object_id: str
    orbit_class: str
    perigee_km: float
    apogee_km: float
    anomalous: bool = False
    semi_major_px: float
    semi_minor_px: float
    rotation_deg: float
    center_x: float
    center_y: float
    phase_angle: float
    angular_speed: float


class OrbitGeometryResponse(BaseModel):
    width: float
    height: float
    domain_max_km: float
    range_max_px: float
    orbits: list[EllipseResponse]


class PositionResponse(BaseModel):
    object_id: str
    phase_angle: float
    x: float
    y: float


class OutlineResponse(BaseModel):
    object_id: str
    points: list[tuple[float, float]]


class LaunchMetricResponse(BaseModel):
    year: int
    vehicle: str
    avg_launch_mass_kg: float
    avg_power_watts: float
    launches: int
    radius_px: float
