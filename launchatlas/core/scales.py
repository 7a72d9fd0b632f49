"""Scale functions and NaN-aware statistics.

Scales map a data domain onto a pixel range. Statistics over data
fields ignore NaN entries instead of propagating them, so a single
missing apogee cannot poison the scale domain.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np


def nan_max(values: Iterable[float], default: float = 0.0) -> float:
    """Maximum of the finite entries of ``values``, or ``default``."""
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0:
        return default
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return default
    return float(finite.max())


@dataclass(frozen=True, slots=True)
class LinearScale:
    """Linear map from ``[0, domain_max]`` onto ``[0, range_max]``.

    Monotonic and ``scale(0) == 0``. A degenerate domain maps
    everything to zero.
    """

    domain_max: float
    range_max: float

    def __call__(self, value: float) -> float:
        if self.domain_max <= 0 or not math.isfinite(value):
            return 0.0
        return value / self.domain_max * self.range_max


@dataclass(frozen=True, slots=True)
class SqrtScale:
    """Square-root map from ``[0, domain_max]`` onto ``[0, range_max]``.

    Used for site circle radii so that circle area, not radius, is
    proportional to the launch count.
    """

    domain_max: float
    range_max: float

    def __call__(self, value: float) -> float:
        if self.domain_max <= 0 or not math.isfinite(value) or value <= 0:
            return 0.0
        return math.sqrt(value / self.domain_max) * self.range_max


def orbit_scale(apogees_km: Iterable[float], width: float, height: float, margin_px: float) -> LinearScale:
    """Pixel scale for orbit ellipses in a ``width`` x ``height`` viewport.

    The largest apogee in the dataset (NaN ignored) lands on the
    viewport's inscribed radius minus ``margin_px``.
    """
    radius = max(1.0, min(width, height) / 2.0 - margin_px)
    return LinearScale(domain_max=nan_max(apogees_km, default=0.0), range_max=radius)
