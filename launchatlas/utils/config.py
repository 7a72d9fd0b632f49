"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from launchatlas.utils.constants import (
    DATASET_CACHE_DIRNAME,
    DEFAULT_DATASET_FILE,
    DEFAULT_VIEWPORT,
    FRAME_INTERVAL_MS,
    PLAYBACK_INTERVAL_MS,
)

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).parent.parent
DATA_DIR = PACKAGE_ROOT / "data"


def default_cache_dir() -> Path:
    """Per-user download cache, outside the installed package.

    ``$XDG_CACHE_HOME/launchatlas`` when set, else ``~/.cache/launchatlas``.
    Serverless hosts (``VERCEL``) only allow writes under ``/tmp``.
    """
    if os.environ.get("VERCEL"):
        return Path("/tmp") / "launchatlas" / DATASET_CACHE_DIRNAME
    base = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(base) / "launchatlas" / DATASET_CACHE_DIRNAME


def _parse_viewport(raw: str) -> tuple[int, int]:
    """Parse ``"WIDTHxHEIGHT"``; falls back to the default viewport."""
    try:
        w, h = raw.lower().split("x", 1)
        width, height = int(w), int(h)
    except ValueError:
        logger.warning("Ignoring malformed viewport %r", raw)
        return DEFAULT_VIEWPORT
    if width <= 0 or height <= 0:
        logger.warning("Ignoring non-positive viewport %r", raw)
        return DEFAULT_VIEWPORT
    return width, height


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer setting %r", raw)
        return default
    return value if value > 0 else default


@dataclass
class Settings:
    """Application settings. ``from_env`` is the usual constructor."""

    data_source: str = str(DATA_DIR / DEFAULT_DATASET_FILE)
    cache_dir: Path = field(default_factory=default_cache_dir)
    playback_interval_ms: int = PLAYBACK_INTERVAL_MS
    frame_interval_ms: int = FRAME_INTERVAL_MS
    viewport: tuple[int, int] = DEFAULT_VIEWPORT
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        settings = cls()
        env = os.environ
        if env.get("LAUNCHATLAS_DATA"):
            settings.data_source = env["LAUNCHATLAS_DATA"]
        if env.get("LAUNCHATLAS_CACHE_DIR"):
            settings.cache_dir = Path(env["LAUNCHATLAS_CACHE_DIR"])
        settings.playback_interval_ms = _parse_int(
            env.get("LAUNCHATLAS_PLAYBACK_MS"), settings.playback_interval_ms
        )
        settings.frame_interval_ms = _parse_int(
            env.get("LAUNCHATLAS_FRAME_MS"), settings.frame_interval_ms
        )
        if env.get("LAUNCHATLAS_VIEWPORT"):
            settings.viewport = _parse_viewport(env["LAUNCHATLAS_VIEWPORT"])
        if env.get("LAUNCHATLAS_CORS_ORIGINS"):
            settings.cors_origins = [
                o.strip() for o in env["LAUNCHATLAS_CORS_ORIGINS"].split(",") if o.strip()
            ]
        if env.get("LAUNCHATLAS_LOG_LEVEL"):
            settings.log_level = env["LAUNCHATLAS_LOG_LEVEL"].upper()
        return settings
