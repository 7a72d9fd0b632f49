"""Launch date utilities.

Launch dates arrive in whatever shape the source dataset used
("2016-07-04", "7/4/2016", "2016", 2016.0, ...). Only the year
matters downstream, so extraction is deliberately shallow.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_YEAR_RE = re.compile(r"\d{4}")


def extract_year(raw: Any) -> Optional[int]:
    """Return the first 4-digit run in ``raw`` as an int, or None.

    Floats with an integral value (as produced by some CSV readers)
    are treated as their integer text so ``2016.0`` yields 2016.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if math.isnan(raw):
            return None
        if raw.is_integer():
            raw = int(raw)
    match = _YEAR_RE.search(str(raw))
    if match is None:
        return None
    return int(match.group(0))


def year_range(years: list[int]) -> tuple[int, int] | None:
    """(first, last) of a list of years, or None when empty."""
    if not years:
        return None
    return min(years), max(years)
