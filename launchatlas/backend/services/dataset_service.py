"""Dataset service holding the loaded launch dataset for the API.

Module-level singleton, loaded once on startup (or lazily on first
request). All views it hands out are computed at load time and never
mutated by request handlers.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from launchatlas.core.dataset import LaunchDataset
from launchatlas.utils.config import Settings

logger = logging.getLogger(__name__)


class DatasetService:
    """Thread-safe holder of the active ``LaunchDataset``."""

    def __init__(self):
        self._dataset: Optional[LaunchDataset] = None
        self._settings: Optional[Settings] = None
        self._lock = threading.Lock()

    def initialize(self, settings: Optional[Settings] = None) -> LaunchDataset:
        """Load the dataset named by ``settings`` (default: environment)."""
        settings = settings or Settings.from_env()
        logger.info("Loading dataset from %s", settings.data_source)
        dataset = LaunchDataset.from_source(settings.data_source, cache_dir=settings.cache_dir)
        with self._lock:
            self._settings = settings
            self._dataset = dataset
        logger.info(
            "Dataset ready: %d events over %d years, %d orbits",
            len(dataset.events), len(dataset.years), len(dataset.orbit_records),
        )
        return dataset

    def use_dataset(self, dataset: LaunchDataset) -> None:
        """Replace the active dataset, e.g. with one built in memory."""
        with self._lock:
            self._dataset = dataset

    def get_dataset(self) -> LaunchDataset:
        if self._dataset is None:
            return self.initialize(self._settings)
        return self._dataset

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = Settings.from_env()
        return self._settings

    @property
    def is_loaded(self) -> bool:
        return self._dataset is not None

    def reset(self) -> None:
        with self._lock:
            self._dataset = None
            self._settings = None


# Module-level singleton
dataset_service = DatasetService()
