"""LaunchAtlas command-line entry point.

Loads a launch dataset, prints what was derived from it and can
either replay the yearly site snapshots on a Qt timer or serve the
derived views over HTTP.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from launchatlas.utils.config import Settings
from launchatlas.utils.time_utils import year_range

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quieter libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="launchatlas",
        description="Aggregate launch records per site and year, and derive orbit geometry.",
    )
    parser.add_argument("--data", help="dataset path or http(s) URL (.csv or .json)")
    parser.add_argument("--play", action="store_true", help="replay the yearly snapshots")
    parser.add_argument("--serve", action="store_true", help="serve the HTTP API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def print_summary(dataset) -> None:
    summary = dataset.summary()
    print(f"Records:  {summary['records']}")
    print(f"Launches: {summary['events']} at {summary['sites']} sites")
    span = year_range(dataset.years)
    if span:
        print(f"Years:    {span[0]}-{span[1]} ({len(dataset.years)} snapshots)")
    print(f"Orbits:   {summary['orbits']}")
    top = dataset.vehicles[:5]
    if top:
        print("Top vehicles: " + ", ".join(f"{name} ({count})" for name, count in top))


def play(dataset, settings: Settings) -> int:
    """Replay the yearly snapshots on a Qt timer until the last year."""
    from PyQt6.QtCore import QCoreApplication

    from launchatlas.core.scheduler import (
        OrbitAnimator,
        PlaybackController,
        build_playback_scheduler,
    )
    from launchatlas.ui.qt_timer import QtTimer

    if not dataset.years:
        logger.warning("Nothing to play: the dataset has no dated, geolocated launches")
        return 1

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)

    def show_frame(year, snapshot) -> None:
        busiest = max(snapshot.values(), key=lambda s: s.cumulative_count, default=None)
        lead = f", busiest {busiest.site_name} ({busiest.cumulative_count})" if busiest else ""
        print(f"{year}: {snapshot.total} launches at {len(snapshot)} sites{lead}")

    playback = PlaybackController(dataset.years, dataset.snapshot_for, on_frame=show_frame)
    animator = OrbitAnimator(dataset.orbit_engine(*settings.viewport))
    timer = QtTimer()
    scheduler = build_playback_scheduler(
        timer,
        playback=playback,
        animator=animator,
        frame_interval_ms=settings.frame_interval_ms,
        playback_interval_ms=settings.playback_interval_ms,
    )

    class _StopWhenDone:
        def on_tick(self) -> None:
            if not playback.is_playing:
                scheduler.stop()
                app.quit()

    scheduler.subscribe(_StopWhenDone())
    show_frame(playback.current_year, playback.current_frame())
    playback.play()
    scheduler.start()
    return app.exec()


def serve(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from launchatlas.backend.main import create_app
    from launchatlas.backend.services.dataset_service import dataset_service

    dataset_service.initialize(settings)
    uvicorn.run(create_app(settings), host=host, port=port)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    if args.data:
        settings.data_source = args.data
    if args.log_level:
        settings.log_level = args.log_level.upper()

    setup_logging(settings.log_level)
    logger.info("Starting LaunchAtlas")

    from launchatlas.core.dataset import DatasetLoadError, LaunchDataset

    try:
        if args.serve:
            serve(settings, args.host, args.port)
            return 0
        dataset = LaunchDataset.from_source(settings.data_source, cache_dir=settings.cache_dir)
    except DatasetLoadError as e:
        logger.error("Could not load dataset: %s", e)
        return 2

    print_summary(dataset)
    if args.play:
        return play(dataset, settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
