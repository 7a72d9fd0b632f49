"""Launch site aggregation API routes."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import APIRouter, HTTPException

from launchatlas.backend.models.schemas import (
    LaunchMetricResponse,
    OwnershipYearResponse,
    SiteAggregateResponse,
    SnapshotResponse,
    VehicleCountResponse,
    YearsResponse,
)
from launchatlas.backend.services.dataset_service import dataset_service
from launchatlas.core.scales import LinearScale, SqrtScale
from launchatlas.core.site_resolver import site_acronym
from launchatlas.core.temporal_aggregator import SiteAggregate
from launchatlas.utils.constants import (
    METRIC_RADIUS_MAX_PX,
    METRIC_RADIUS_MIN_PX,
    SITE_RADIUS_MAX_PX,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _radius_scale() -> SqrtScale:
    # All-time maximum keeps radii comparable from one year to the next.
    all_time = dataset_service.get_dataset().all_time
    max_count = max((s.cumulative_count for s in all_time.values()), default=0)
    return SqrtScale(domain_max=max_count, range_max=SITE_RADIUS_MAX_PX)


def _site_responses(sites: Iterable[SiteAggregate]) -> list[SiteAggregateResponse]:
    radius = _radius_scale()
    ordered = sorted(sites, key=lambda s: (-s.cumulative_count, s.site_key))
    return [
        SiteAggregateResponse(
            **site.to_dict(),
            acronym=site_acronym(site.site_name),
            radius_px=radius(site.cumulative_count),
        )
        for site in ordered
    ]


@router.get("/years", response_model=YearsResponse)
def list_years():
    """Discovered timeline: every distinct launch year, ascending."""
    years = dataset_service.get_dataset().years
    return YearsResponse(
        years=years,
        first_year=years[0] if years else None,
        last_year=years[-1] if years else None,
    )


@router.get("/snapshots/{year}", response_model=SnapshotResponse)
def get_snapshot(year: int):
    """Cumulative per-site state as of (and including) ``year``."""
    dataset = dataset_service.get_dataset()
    try:
        snapshot = dataset.snapshot_for(year)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"No launches recorded for {year}")
    return SnapshotResponse(
        year=snapshot.year,
        total=snapshot.total,
        max_count=snapshot.max_count,
        sites=_site_responses(snapshot.values()),
    )


@router.get("/all-time", response_model=SnapshotResponse)
def get_all_time():
    sites = dataset_service.get_dataset().all_time
    return SnapshotResponse(
        year=None,
        total=sum(s.cumulative_count for s in sites.values()),
        max_count=max((s.cumulative_count for s in sites.values()), default=0),
        sites=_site_responses(sites.values()),
    )


@router.get("/ownership-by-year", response_model=list[OwnershipYearResponse])
def get_ownership_by_year():
    """Government vs commercial launches per year."""
    return [
        OwnershipYearResponse(
            year=row.year,
            government=row.government,
            commercial=row.commercial,
            difference=row.difference,
        )
        for row in dataset_service.get_dataset().ownership_by_year
    ]


@router.get("/vehicles", response_model=list[VehicleCountResponse])
def get_vehicles():
    return [
        VehicleCountResponse(vehicle=name, launches=count)
        for name, count in dataset_service.get_dataset().vehicles
    ]


@router.get("/launch-metrics", response_model=list[LaunchMetricResponse])
def get_launch_metrics():
    """Average payload mass and power per vehicle and year."""
    metrics = dataset_service.get_dataset().launch_metrics
    mass_scale = LinearScale(
        domain_max=max((m.avg_launch_mass_kg for m in metrics), default=0.0),
        range_max=METRIC_RADIUS_MAX_PX - METRIC_RADIUS_MIN_PX,
    )
    return [
        LaunchMetricResponse(
            year=m.year,
            vehicle=m.vehicle,
            avg_launch_mass_kg=m.avg_launch_mass_kg,
            avg_power_watts=m.avg_power_watts,
            launches=m.launches,
            radius_px=METRIC_RADIUS_MIN_PX + mass_scale(m.avg_launch_mass_kg),
        )
        for m in metrics
    ]
