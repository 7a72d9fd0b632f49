"""HTTP downloader for launch datasets.

Fetches CSV/JSON datasets with progress callbacks, atomic file
writes, and a simple on-disk cache.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]  # (bytes_downloaded, total_bytes)


class DownloadStatus(Enum):
    PENDING = auto()
    DOWNLOADING = auto()
    COMPLETE = auto()
    FAILED = auto()


@dataclass
class DownloadResult:
    """Result of a download operation."""
    status: DownloadStatus
    path: Optional[Path] = None
    error: Optional[str] = None
    bytes_downloaded: int = 0


def cache_filename(url: str) -> str:
    """Stable cache file name for a URL, keeping its extension."""
    suffix = Path(urlparse(url).path).suffix.lower() or ".dat"
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:16]
    return f"{digest}{suffix}"


class Downloader:
    """Thread-safe file downloader with progress reporting."""

    def __init__(self, cache_dir: Path):
        self._cache_dir = cache_dir
        self._lock = threading.Lock()
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Lazy-init a requests.Session (reuses TCP connections)."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "User-Agent": "LaunchAtlas/1.0"
            })
        return self._session

    def download_dataset(
        self,
        url: str,
        force_refresh: bool = False,
        progress: Optional[ProgressCallback] = None,
        timeout: float = 30.0,
    ) -> DownloadResult:
        """Fetch a dataset into the cache. Reuses a cached copy unless forced."""
        dest = self._cache_dir / cache_filename(url)
        if dest.exists() and not force_refresh:
            logger.info("Dataset already cached at %s", dest)
            return DownloadResult(
                status=DownloadStatus.COMPLETE,
                path=dest,
                bytes_downloaded=dest.stat().st_size,
            )
        dest.parent.mkdir(parents=True, exist_ok=True)
        return self._download_file(url, dest, progress, timeout)

    def _download_file(
        self,
        url: str,
        dest: Path,
        progress: Optional[ProgressCallback],
        timeout: float,
    ) -> DownloadResult:
        """Core download logic with streaming and progress reporting."""
        logger.info("Downloading %s -> %s", url, dest)
        try:
            session = self._get_session()
            response = session.get(url, stream=True, timeout=timeout)
            response.raise_for_status()

            total = int(response.headers.get("content-length", 0))
            downloaded = 0

            # Write to temp file first for atomic operation
            fd, tmp_path = tempfile.mkstemp(
                dir=str(dest.parent), suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:
                            f.write(chunk)
                            downloaded += len(chunk)
                            if progress:
                                progress(downloaded, total)

                with self._lock:
                    os.replace(tmp_path, dest)

            except Exception:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise

            logger.info("Download complete: %s (%d bytes)", dest, downloaded)
            return DownloadResult(
                status=DownloadStatus.COMPLETE,
                path=dest,
                bytes_downloaded=downloaded,
            )

        except requests.exceptions.Timeout:
            msg = f"Download timed out after {timeout}s: {url}"
            logger.warning(msg)
            return DownloadResult(status=DownloadStatus.FAILED, error=msg)

        except requests.exceptions.ConnectionError as e:
            msg = f"Connection error downloading {url}: {e}"
            logger.warning(msg)
            return DownloadResult(status=DownloadStatus.FAILED, error=msg)

        except requests.exceptions.HTTPError as e:
            msg = f"HTTP error downloading {url}: {e}"
            logger.warning(msg)
            return DownloadResult(status=DownloadStatus.FAILED, error=msg)

        except OSError as e:
            msg = f"Could not write {dest}: {e}"
            logger.error(msg)
            return DownloadResult(status=DownloadStatus.FAILED, error=msg)
