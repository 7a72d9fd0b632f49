"""Raw launch record normalization.

Datasets disagree on column names ("Date of Launch", "Launch_Date",
"Date", ...) and on how ownership is spelled. Every logical field is
described by an ordered alias list and read through ``pick_field``;
missing or malformed values never raise, they become ``None`` or NaN
so that callers can filter them out.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from launchatlas.utils.constants import (
    APOGEE_FIELDS,
    COMMERCIAL_INDICATOR,
    ECCENTRICITY_FIELDS,
    GOVERNMENT_INDICATOR,
    INCLINATION_FIELDS,
    LAUNCH_DATE_FIELDS,
    MILITARY_INDICATOR,
    OWNER_FIELDS,
    OWNER_TOKEN_SEPARATORS,
    PERIGEE_FIELDS,
)
from launchatlas.utils.time_utils import extract_year

RawRecord = Mapping[str, Any]

_GOV_RE = re.compile(GOVERNMENT_INDICATOR, re.IGNORECASE)
_COM_RE = re.compile(COMMERCIAL_INDICATOR, re.IGNORECASE)
_MIL_RE = re.compile(MILITARY_INDICATOR, re.IGNORECASE)
_SEPARATOR_RE = re.compile(OWNER_TOKEN_SEPARATORS)


class Ownership(str, enum.Enum):
    GOVERNMENT = "Government"
    MILITARY = "Military"
    COMMERCIAL = "Commercial"
    CIVILIAN = "Civilian"
    UNKNOWN = "Unknown"
    OTHER = "Other"


SITE_MAP_CATEGORIES: tuple[Ownership, ...] = (
    Ownership.GOVERNMENT,
    Ownership.MILITARY,
    Ownership.COMMERCIAL,
    Ownership.CIVILIAN,
    Ownership.UNKNOWN,
)


class OwnershipPolicy(str, enum.Enum):
    """Classification policy; the two call sites fall back differently.

    SITE_MAP: full category set, unclassified owners count as Civilian.
    GOV_VS_COMMERCIAL: only Government/Commercial, everything else is Other.
    """

    SITE_MAP = "site_map"
    GOV_VS_COMMERCIAL = "gov_vs_commercial"


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    """Canonical view of a raw record. Numeric fields are NaN when missing."""

    year: Optional[int]
    ownership_raw: Optional[str]
    perigee_km: float = math.nan
    apogee_km: float = math.nan
    inclination_deg: float = math.nan
    eccentricity: float = math.nan


def is_blank(value: Any) -> bool:
    """True for None, empty/whitespace strings and float NaN."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def pick_field(record: RawRecord, aliases: Sequence[str]) -> Any:
    """Return the value of the first alias holding a non-empty value."""
    for name in aliases:
        value = record.get(name)
        if not is_blank(value):
            return value
    return None


def coerce_number(value: Any) -> float:
    """Coerce to float. Blank or non-numeric input becomes NaN, never 0."""
    if is_blank(value) or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return math.nan


def split_owner_tokens(raw: Any) -> list[str]:
    """Split an owner field on ``;``, ``,`` and ``/``; lists pass through."""
    if is_blank(raw):
        return []
    if isinstance(raw, (list, tuple)):
        parts = [str(p) for p in raw]
    else:
        parts = _SEPARATOR_RE.split(str(raw))
    return [p.strip() for p in parts if p and p.strip()]


def is_dual_attribution(tokens: Sequence[str]) -> bool:
    """More than one token, one governmental and one commercial."""
    if len(tokens) < 2:
        return False
    return any(_GOV_RE.search(t) for t in tokens) and any(
        _COM_RE.search(t) for t in tokens
    )


def classify_ownership(
    raw: Any, policy: OwnershipPolicy = OwnershipPolicy.SITE_MAP
) -> tuple[Ownership, ...]:
    """Classify an owner field into one or two ownership categories.

    Mixed government/commercial ownership counts for both categories.
    Otherwise the first matching indicator wins, in the order military,
    government, commercial, civilian, then the policy's fallback.

    Returns:
        A tuple of one category, or (GOVERNMENT, COMMERCIAL) for dual
        attribution.
    """
    tokens = split_owner_tokens(raw)
    if not tokens:
        if policy is OwnershipPolicy.SITE_MAP:
            return (Ownership.UNKNOWN,)
        return (Ownership.OTHER,)

    if is_dual_attribution(tokens):
        return (Ownership.GOVERNMENT, Ownership.COMMERCIAL)

    text = " ".join(tokens).lower()
    if policy is OwnershipPolicy.GOV_VS_COMMERCIAL:
        if _GOV_RE.search(text):
            return (Ownership.GOVERNMENT,)
        if _COM_RE.search(text):
            return (Ownership.COMMERCIAL,)
        return (Ownership.OTHER,)

    if _MIL_RE.search(text):
        return (Ownership.MILITARY,)
    if _GOV_RE.search(text):
        return (Ownership.GOVERNMENT,)
    if _COM_RE.search(text):
        return (Ownership.COMMERCIAL,)
    # Civil, research and university owners share the fallback.
    return (Ownership.CIVILIAN,)


def normalize_record(
    record: RawRecord,
    date_fields: Sequence[str] = LAUNCH_DATE_FIELDS,
    owner_fields: Sequence[str] = OWNER_FIELDS,
) -> NormalizedRecord:
    """Map a raw record to its canonical shape. Never raises.

    ``year`` is None when no accepted date field holds a 4-digit run;
    callers are expected to skip such records.
    """
    year = extract_year(pick_field(record, date_fields))
    owner = pick_field(record, owner_fields)
    if isinstance(owner, (list, tuple)):
        ownership_raw: Optional[str] = "/".join(str(o) for o in owner)
    else:
        ownership_raw = None if owner is None else str(owner).strip()

    return NormalizedRecord(
        year=year,
        ownership_raw=ownership_raw,
        perigee_km=coerce_number(pick_field(record, PERIGEE_FIELDS)),
        apogee_km=coerce_number(pick_field(record, APOGEE_FIELDS)),
        inclination_deg=coerce_number(pick_field(record, INCLINATION_FIELDS)),
        eccentricity=coerce_number(pick_field(record, ECCENTRICITY_FIELDS)),
    )
