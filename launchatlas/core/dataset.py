"""Launch dataset loading and derivation.

Reads CSV or JSON launch records (local files or http(s) URLs cached
through the downloader), turns them into canonical launch events and
orbit records, and bundles every derived view in ``LaunchDataset``.
"""

from __future__ import annotations

import csv
import json
import logging
import math
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

from launchatlas.core.orbit_geometry import (
    OrbitClass,
    OrbitGeometryEngine,
    OrbitRecord,
    classify_orbit_class,
)
from launchatlas.core.record_normalizer import (
    OwnershipPolicy,
    RawRecord,
    classify_ownership,
    normalize_record,
    pick_field,
)
from launchatlas.core.site_resolver import SiteResolver
from launchatlas.core.temporal_aggregator import (
    CanonicalEvent,
    SiteAggregate,
    TemporalAggregator,
    YearSnapshot,
    LaunchMetric,
    YearlyOwnershipCount,
    aggregate_all_time,
    aggregate_launch_metrics,
    aggregate_ownership_by_year,
    count_by_vehicle,
)
from launchatlas.utils.constants import (
    DEFAULT_VIEWPORT,
    ORBIT_CLASS_FIELDS,
    SATELLITE_NAME_FIELDS,
    SITE_COUNTRY_FIELDS,
    SITE_LAT_FIELDS,
    SITE_LON_FIELDS,
    SITE_NAME_FIELDS,
    UNKNOWN_COUNTRY,
    VEHICLE_FIELDS,
)
from launchatlas.utils.downloader import Downloader, DownloadStatus

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".json")


class DatasetLoadError(Exception):
    """Raised when a dataset cannot be read or parsed."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        super().__init__(message)


def is_remote(source: str) -> bool:
    return urlparse(str(source)).scheme in ("http", "https")


def _read_csv(path: Path) -> list[dict[str, Any]]:
    # utf-8-sig strips the BOM that spreadsheet exports tend to add.
    with path.open(newline="", encoding="utf-8-sig") as f:
        return [dict(row) for row in csv.DictReader(f)]


def _read_json(path: Path) -> list[dict[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"Malformed JSON in {path}: {e}", str(path)) from e

    if isinstance(payload, dict):
        for key in ("records", "data"):
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break
    if not isinstance(payload, list):
        raise DatasetLoadError(
            f"Expected a list of records in {path}, got {type(payload).__name__}",
            str(path),
        )

    records = [item for item in payload if isinstance(item, dict)]
    skipped = len(payload) - len(records)
    if skipped:
        logger.info("Skipped %d non-object entries in %s", skipped, path)
    return records


def load_records(path: Path) -> list[dict[str, Any]]:
    """Parse all records from a local ``.csv`` or ``.json`` file."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DatasetLoadError(f"Unsupported dataset format: {path.name}", str(path))

    logger.info("Loading records from file: %s", path)
    try:
        if suffix == ".csv":
            records = _read_csv(path)
        else:
            records = _read_json(path)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DatasetLoadError(f"Failed to read {path}: {e}", str(path)) from e

    logger.info("Read %d raw records from %s", len(records), path.name)
    return records


def load_source(
    source: str | Path,
    cache_dir: Optional[Path] = None,
    downloader: Optional[Downloader] = None,
    force_refresh: bool = False,
) -> list[dict[str, Any]]:
    """Load records from a file path or an http(s) URL.

    Remote datasets are downloaded into ``cache_dir`` first and then
    parsed like local files.
    """
    source_text = str(source)
    if not is_remote(source_text):
        return load_records(Path(source_text))

    if downloader is None:
        if cache_dir is None:
            raise DatasetLoadError("A cache directory is required for remote datasets", source_text)
        downloader = Downloader(cache_dir)

    result = downloader.download_dataset(source_text, force_refresh=force_refresh)
    if result.status != DownloadStatus.COMPLETE or result.path is None:
        raise DatasetLoadError(result.error or f"Download failed: {source_text}", source_text)
    return load_records(result.path)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def build_launch_events(
    records: Iterable[RawRecord],
    resolver: Optional[SiteResolver] = None,
) -> list[CanonicalEvent]:
    """Normalize, geolocate and classify raw records into launch events.

    Records without a launch year or a resolvable site are dropped; the
    drop counts are logged once per call.
    """
    resolver = resolver or SiteResolver()
    events: list[CanonicalEvent] = []
    no_year = 0
    no_site = 0

    for index, record in enumerate(records):
        normalized = normalize_record(record)
        if normalized.year is None:
            no_year += 1
            logger.debug("Record %d dropped: no launch year", index)
            continue

        label = _text(pick_field(record, SITE_NAME_FIELDS))
        site = resolver.resolve(
            label,
            lat=pick_field(record, SITE_LAT_FIELDS),
            lon=pick_field(record, SITE_LON_FIELDS),
        )
        if site is None:
            no_site += 1
            logger.debug("Record %d dropped: unresolvable site %r", index, label)
            continue

        country = site.country
        if country == UNKNOWN_COUNTRY:
            country = _text(pick_field(record, SITE_COUNTRY_FIELDS)) or UNKNOWN_COUNTRY

        events.append(CanonicalEvent(
            year=normalized.year,
            site_key=site.key,
            lon=site.lon,
            lat=site.lat,
            ownership=classify_ownership(normalized.ownership_raw, OwnershipPolicy.SITE_MAP),
            vehicle=_text(pick_field(record, VEHICLE_FIELDS)),
            site_name=site.canonical_name,
            country=country,
        ))

    if no_year or no_site:
        logger.info(
            "Launch events: kept %d, dropped %d without a year and %d with an unknown site",
            len(events), no_year, no_site,
        )
    return events


def build_orbit_records(records: Iterable[RawRecord]) -> list[OrbitRecord]:
    """Orbit records for every raw record with usable perigee and apogee.

    Object ids come from the satellite name; repeated or missing names
    get a numeric suffix so ids stay unique.
    """
    orbits: list[OrbitRecord] = []
    seen: dict[str, int] = {}
    dropped = 0

    for index, record in enumerate(records):
        normalized = normalize_record(record)
        perigee, apogee = normalized.perigee_km, normalized.apogee_km
        if not (math.isfinite(perigee) and math.isfinite(apogee)) or perigee < 0 or apogee < 0:
            dropped += 1
            logger.debug("Record %d has no usable perigee/apogee", index)
            continue

        base_id = _text(pick_field(record, SATELLITE_NAME_FIELDS)) or f"object-{index}"
        count = seen.get(base_id, 0) + 1
        seen[base_id] = count
        object_id = base_id if count == 1 else f"{base_id} #{count}"

        orbit_class = OrbitClass.parse(pick_field(record, ORBIT_CLASS_FIELDS))
        if orbit_class is None:
            orbit_class = classify_orbit_class(perigee, apogee)

        orbits.append(OrbitRecord(
            object_id=object_id,
            perigee_km=perigee,
            apogee_km=apogee,
            inclination_deg=normalized.inclination_deg,
            orbit_class=orbit_class,
            eccentricity=normalized.eccentricity,
        ))

    if dropped:
        logger.info("Orbit records: kept %d, dropped %d without orbital elements", len(orbits), dropped)
    return orbits


class LaunchDataset:
    """Every derived view of one set of raw launch records.

    Views are computed once at construction; the raw records are kept
    so that the orbit engine can be rebuilt for any viewport.
    """

    def __init__(self, records: Sequence[RawRecord], resolver: Optional[SiteResolver] = None):
        self._records = list(records)
        self._events = build_launch_events(self._records, resolver)
        self._aggregator = TemporalAggregator()
        self._aggregator.build(self._events)
        self._all_time = aggregate_all_time(self._events)
        self._ownership_by_year = aggregate_ownership_by_year(self._records)
        self._vehicles = count_by_vehicle(self._events)
        self._launch_metrics = aggregate_launch_metrics(self._records)
        self._orbit_records = build_orbit_records(self._records)

    @classmethod
    def from_source(
        cls,
        source: str | Path,
        cache_dir: Optional[Path] = None,
        downloader: Optional[Downloader] = None,
    ) -> "LaunchDataset":
        return cls(load_source(source, cache_dir=cache_dir, downloader=downloader))

    @property
    def records(self) -> list[RawRecord]:
        return list(self._records)

    @property
    def events(self) -> list[CanonicalEvent]:
        return list(self._events)

    @property
    def years(self) -> list[int]:
        return self._aggregator.years

    @property
    def snapshots(self) -> dict[int, YearSnapshot]:
        return self._aggregator.snapshots

    def snapshot_for(self, year: int) -> YearSnapshot:
        return self._aggregator.snapshot_for(year)

    @property
    def all_time(self) -> dict[str, SiteAggregate]:
        return dict(self._all_time)

    @property
    def ownership_by_year(self) -> list[YearlyOwnershipCount]:
        return list(self._ownership_by_year)

    @property
    def vehicles(self) -> list[tuple[str, int]]:
        return list(self._vehicles)

    @property
    def launch_metrics(self) -> list[LaunchMetric]:
        return list(self._launch_metrics)

    @property
    def orbit_records(self) -> list[OrbitRecord]:
        return list(self._orbit_records)

    def orbit_engine(
        self, width: float = DEFAULT_VIEWPORT[0], height: float = DEFAULT_VIEWPORT[1]
    ) -> OrbitGeometryEngine:
        """A fresh geometry engine over this dataset's orbits."""
        return OrbitGeometryEngine(self._orbit_records, width, height)

    def summary(self) -> dict[str, Any]:
        years = self.years
        return {
            "records": len(self._records),
            "events": len(self._events),
            "sites": len(self._all_time),
            "first_year": years[0] if years else None,
            "last_year": years[-1] if years else None,
            "orbits": len(self._orbit_records),
        }
