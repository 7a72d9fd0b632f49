"""Cumulative per-site launch aggregation over the discovered year axis.

The running per-site state lives in an explicit ``SiteAccumulator``
owned by the aggregator. After each year's events are applied, the
accumulator is copied into an immutable ``YearSnapshot`` of frozen
aggregates, so snapshots can be replayed, sought backwards and tested
in isolation.
"""

from __future__ import annotations

import logging
import math
from collections import Counter, defaultdict
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Optional

from launchatlas.core.record_normalizer import (
    SITE_MAP_CATEGORIES,
    Ownership,
    OwnershipPolicy,
    RawRecord,
    classify_ownership,
    coerce_number,
    normalize_record,
    pick_field,
)
from launchatlas.utils.constants import (
    LAUNCH_MASS_FIELDS,
    METRIC_YEAR_FIELDS,
    OWNERSHIP_DATE_FIELDS,
    OWNERSHIP_OWNER_FIELDS,
    POWER_FIELDS,
    VEHICLE_FIELDS,
)
from launchatlas.utils.time_utils import extract_year

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CanonicalEvent:
    """A normalized, geolocated launch. Immutable once created."""

    year: int
    site_key: str
    lon: float
    lat: float
    ownership: tuple[Ownership, ...]
    vehicle: str
    site_name: str
    country: str


def _zero_categories() -> Mapping[Ownership, int]:
    return MappingProxyType({category: 0 for category in SITE_MAP_CATEGORIES})


@dataclass(frozen=True, slots=True)
class SiteAggregate:
    """Launch counts for one site.

    Immutable: ``with_event`` returns the next state, so an aggregate
    held by a snapshot never changes afterwards.
    """

    site_key: str
    lon: float
    lat: float
    site_name: str
    country: str
    cumulative_count: int = 0
    counts_by_category: Mapping[Ownership, int] = field(default_factory=_zero_categories)

    def with_event(self, event: CanonicalEvent) -> SiteAggregate:
        counts = dict(self.counts_by_category)
        for category in event.ownership:
            counts[category] = counts.get(category, 0) + 1
        return replace(
            self,
            cumulative_count=self.cumulative_count + 1,
            counts_by_category=MappingProxyType(counts),
        )

    def category_count(self, category: Ownership) -> int:
        return self.counts_by_category.get(category, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "site_key": self.site_key,
            "lon": self.lon,
            "lat": self.lat,
            "site_name": self.site_name,
            "country": self.country,
            "cumulative_count": self.cumulative_count,
            "counts_by_category": {
                category.value: count for category, count in self.counts_by_category.items()
            },
        }


class YearSnapshot(Mapping[str, SiteAggregate]):
    """Read-only state of every site as of (and including) ``year``.

    Sites that have not launched yet are absent; the count helpers
    report them as zero.
    """

    __slots__ = ("year", "_sites")

    def __init__(self, year: int, sites: Mapping[str, SiteAggregate]):
        self.year = year
        self._sites = MappingProxyType(dict(sites))

    def __getitem__(self, key: str) -> SiteAggregate:
        return self._sites[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sites)

    def __len__(self) -> int:
        return len(self._sites)

    def cumulative_count(self, key: str) -> int:
        site = self._sites.get(key)
        return site.cumulative_count if site else 0

    def category_count(self, key: str, category: Ownership) -> int:
        site = self._sites.get(key)
        return site.category_count(category) if site else 0

    @property
    def total(self) -> int:
        return sum(site.cumulative_count for site in self._sites.values())

    @property
    def max_count(self) -> int:
        return max((site.cumulative_count for site in self._sites.values()), default=0)

    def __repr__(self) -> str:
        return f"YearSnapshot(year={self.year}, sites={len(self._sites)}, total={self.total})"


class SiteAccumulator:
    """Running ``site_key -> SiteAggregate`` map, mutated in place."""

    def __init__(self) -> None:
        self._sites: dict[str, SiteAggregate] = {}

    def apply(self, event: CanonicalEvent) -> SiteAggregate:
        """Count one event against its site, creating the site on first sight."""
        site = self._sites.get(event.site_key)
        if site is None:
            site = SiteAggregate(
                site_key=event.site_key,
                lon=event.lon,
                lat=event.lat,
                site_name=event.site_name,
                country=event.country,
            )
        site = site.with_event(event)
        self._sites[event.site_key] = site
        return site

    def snapshot(self, year: int) -> YearSnapshot:
        """Copy of the current state; the aggregates themselves are immutable."""
        return YearSnapshot(year, self._sites)

    def reset(self) -> None:
        self._sites.clear()

    def __len__(self) -> int:
        return len(self._sites)


class TemporalAggregator:
    """Builds one cumulative snapshot per distinct year in the event stream."""

    def __init__(self, accumulator: Optional[SiteAccumulator] = None):
        self._accumulator = accumulator if accumulator is not None else SiteAccumulator()
        self._events_by_year: dict[int, list[CanonicalEvent]] = {}
        self._snapshots: dict[int, YearSnapshot] = {}

    def build(self, events: Iterable[CanonicalEvent]) -> dict[int, YearSnapshot]:
        """Aggregate ``events`` into ``{year: YearSnapshot}``.

        Years are processed in ascending order regardless of input order;
        each snapshot reflects every event with ``event.year <= year``.
        """
        by_year: dict[int, list[CanonicalEvent]] = defaultdict(list)
        for event in events:
            by_year[event.year].append(event)

        self._accumulator.reset()
        self._events_by_year = {year: by_year[year] for year in sorted(by_year)}
        self._snapshots = {}
        for year, year_events in self._events_by_year.items():
            for event in year_events:
                self._accumulator.apply(event)
            self._snapshots[year] = self._accumulator.snapshot(year)

        logger.info(
            "Aggregated %d events into %d yearly snapshots across %d sites",
            sum(len(v) for v in self._events_by_year.values()),
            len(self._snapshots),
            len(self._accumulator),
        )
        return dict(self._snapshots)

    @property
    def years(self) -> list[int]:
        return list(self._snapshots)

    @property
    def snapshots(self) -> dict[int, YearSnapshot]:
        return dict(self._snapshots)

    @property
    def events_by_year(self) -> dict[int, list[CanonicalEvent]]:
        return {year: list(events) for year, events in self._events_by_year.items()}

    def snapshot_for(self, year: int) -> YearSnapshot:
        """Snapshot for ``year``; raises KeyError for years without data."""
        return self._snapshots[year]


def aggregate_all_time(events: Iterable[CanonicalEvent]) -> dict[str, SiteAggregate]:
    """Per-site totals over the whole event stream, ignoring the year axis."""
    accumulator = SiteAccumulator()
    sites: dict[str, SiteAggregate] = {}
    for event in events:
        sites[event.site_key] = accumulator.apply(event)
    return sites


@dataclass(frozen=True, slots=True)
class YearlyOwnershipCount:
    """Government vs commercial launches in a single year."""

    year: int
    government: int
    commercial: int

    @property
    def difference(self) -> int:
        return self.commercial - self.government


def aggregate_ownership_by_year(
    records: Iterable[RawRecord],
    date_fields: Sequence[str] = OWNERSHIP_DATE_FIELDS,
    owner_fields: Sequence[str] = OWNERSHIP_OWNER_FIELDS,
) -> list[YearlyOwnershipCount]:
    """Per-year government and commercial counts from raw records.

    Uses the two-category policy: dual-owned launches count for both
    sides, everything that is neither counts for nothing. Records
    without a year are dropped. No site is needed.
    """
    government: Counter[int] = Counter()
    commercial: Counter[int] = Counter()
    years: set[int] = set()
    dropped = 0

    for record in records:
        normalized = normalize_record(record, date_fields, owner_fields)
        if normalized.year is None:
            dropped += 1
            continue
        categories = classify_ownership(
            normalized.ownership_raw, OwnershipPolicy.GOV_VS_COMMERCIAL
        )
        years.add(normalized.year)
        if Ownership.GOVERNMENT in categories:
            government[normalized.year] += 1
        if Ownership.COMMERCIAL in categories:
            commercial[normalized.year] += 1

    if dropped:
        logger.info("Ownership series: dropped %d records without a launch year", dropped)

    return [
        YearlyOwnershipCount(year=y, government=government[y], commercial=commercial[y])
        for y in sorted(years)
    ]


def count_by_vehicle(events: Iterable[CanonicalEvent]) -> list[tuple[str, int]]:
    """Launch count per vehicle name, most frequent first."""
    counts = Counter(event.vehicle for event in events if event.vehicle)
    return counts.most_common()


@dataclass(frozen=True, slots=True)
class LaunchMetric:
    """Average payload mass and power for one vehicle in one year."""

    year: int
    vehicle: str
    avg_launch_mass_kg: float
    avg_power_watts: float
    launches: int


def aggregate_launch_metrics(
    records: Iterable[RawRecord],
    year_fields: Sequence[str] = METRIC_YEAR_FIELDS,
) -> list[LaunchMetric]:
    """Per (year, vehicle) averages of launch mass and power.

    A record contributes only when it has a year, a vehicle, and a finite
    mass and power that are both above zero. Rows that already carry
    ``avg_launch_mass_kg`` / ``avg_power_watts`` pass through as groups
    of one. Sorted by year, then vehicle.
    """
    mass: defaultdict[tuple[int, str], list[float]] = defaultdict(list)
    power: defaultdict[tuple[int, str], list[float]] = defaultdict(list)
    dropped = 0

    for record in records:
        year = extract_year(pick_field(record, year_fields))
        vehicle = pick_field(record, VEHICLE_FIELDS)
        mass_kg = coerce_number(pick_field(record, LAUNCH_MASS_FIELDS))
        power_w = coerce_number(pick_field(record, POWER_FIELDS))
        if (
            year is None
            or vehicle is None
            or not (math.isfinite(mass_kg) and mass_kg > 0)
            or not (math.isfinite(power_w) and power_w > 0)
        ):
            dropped += 1
            continue
        key = (year, str(vehicle).strip())
        mass[key].append(mass_kg)
        power[key].append(power_w)

    if dropped:
        logger.info("Launch metrics: dropped %d records without year, vehicle, mass or power", dropped)

    return [
        LaunchMetric(
            year=year,
            vehicle=vehicle,
            avg_launch_mass_kg=sum(mass[(year, vehicle)]) / len(mass[(year, vehicle)]),
            avg_power_watts=sum(power[(year, vehicle)]) / len(power[(year, vehicle)]),
            launches=len(mass[(year, vehicle)]),
        )
        for year, vehicle in sorted(mass)
    ]
