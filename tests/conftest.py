"""Shared fixtures for the LaunchAtlas test suite."""

from __future__ import annotations

import pytest

from launchatlas.core.dataset import LaunchDataset, load_records
from launchatlas.core.record_normalizer import Ownership
from launchatlas.core.temporal_aggregator import CanonicalEvent
from launchatlas.utils.config import DATA_DIR
from launchatlas.utils.constants import DEFAULT_DATASET_FILE

BAIKONUR_KEY = "63.305,45.964"
KOUROU_KEY = "-52.768,5.239"


def make_event(
    year: int,
    ownership: tuple[Ownership, ...] = (Ownership.GOVERNMENT,),
    site_key: str = BAIKONUR_KEY,
    vehicle: str = "Soyuz",
) -> CanonicalEvent:
    lon, lat = (float(v) for v in site_key.split(","))
    return CanonicalEvent(
        year=year,
        site_key=site_key,
        lon=lon,
        lat=lat,
        ownership=ownership,
        vehicle=vehicle,
        site_name="Test site",
        country="Test",
    )


@pytest.fixture
def baikonur_events() -> list[CanonicalEvent]:
    """One government launch in 2015, then two commercial ones in 2016."""
    return [
        make_event(2015, (Ownership.GOVERNMENT,)),
        make_event(2016, (Ownership.COMMERCIAL,)),
        make_event(2016, (Ownership.COMMERCIAL,)),
    ]


@pytest.fixture
def sample_path():
    return DATA_DIR / DEFAULT_DATASET_FILE


@pytest.fixture
def sample_records(sample_path):
    return load_records(sample_path)


@pytest.fixture
def sample_dataset(sample_records) -> LaunchDataset:
    return LaunchDataset(sample_records)
