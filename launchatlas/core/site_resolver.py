"""Launch site geolocation.

Resolves free-text launch site labels to coordinates, either from
explicit lat/lon columns or from an ordered pattern dictionary, and
derives the coordinate-based site key that joins records referring
to the same physical site.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from launchatlas.core.record_normalizer import coerce_number
from launchatlas.utils.constants import (
    SITE_DICTIONARY,
    SITE_KEY_DECIMALS,
    UNKNOWN_COUNTRY,
    UNKNOWN_SITE_NAME,
)

logger = logging.getLogger(__name__)

_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")


@dataclass(frozen=True, slots=True)
class SiteRule:
    """One dictionary entry: a case-insensitive pattern and its payload."""

    pattern: re.Pattern[str]
    lon: float
    lat: float
    name: str
    country: str = UNKNOWN_COUNTRY

    @classmethod
    def compile(
        cls, pattern: str, lon: float, lat: float, name: str, country: str = UNKNOWN_COUNTRY
    ) -> "SiteRule":
        return cls(re.compile(pattern, re.IGNORECASE), lon, lat, name, country)

    def matches(self, label: str) -> bool:
        return self.pattern.search(label) is not None


@dataclass(frozen=True, slots=True)
class ResolvedSite:
    """Geolocated launch site."""

    lon: float
    lat: float
    canonical_name: str
    country: str = UNKNOWN_COUNTRY

    @property
    def key(self) -> str:
        return site_key(self.lon, self.lat)


def _format_coord(value: float) -> str:
    # round() can produce -0.0; adding 0.0 normalizes it.
    text = f"{round(value, SITE_KEY_DECIMALS) + 0.0:.{SITE_KEY_DECIMALS}f}"
    return text.rstrip("0").rstrip(".")


def site_key(lon: float, lat: float) -> str:
    """Join key for a site: ``"{lon},{lat}"`` rounded to 4 decimals."""
    return f"{_format_coord(lon)},{_format_coord(lat)}"


def site_acronym(name: Optional[str]) -> str:
    """Two-letter map label derived from a canonical site name.

    Parenthetical content and punctuation are stripped; the label is the
    first letter of the first two words, or the first two characters of
    a single-word name.
    """
    if not name:
        return "??"
    cleaned = _PARENTHETICAL_RE.sub(" ", str(name))
    cleaned = _PUNCTUATION_RE.sub("", cleaned)
    words = cleaned.upper().split()
    if not words:
        return "??"
    if len(words) == 1:
        return words[0][:2]
    return words[0][0] + words[1][0]


def default_site_rules() -> tuple[SiteRule, ...]:
    """The built-in site dictionary, compiled."""
    return tuple(SiteRule.compile(*entry) for entry in SITE_DICTIONARY)


SITE_RULES: tuple[SiteRule, ...] = default_site_rules()


class SiteResolver:
    """First-match-wins resolution over an ordered rule list."""

    def __init__(self, rules: Optional[Iterable[SiteRule]] = None):
        self._rules: tuple[SiteRule, ...] = (
            tuple(rules) if rules is not None else SITE_RULES
        )

    @property
    def rules(self) -> tuple[SiteRule, ...]:
        return self._rules

    def match_rule(self, label: Optional[str]) -> Optional[SiteRule]:
        """Return the first rule matching ``label``, or None."""
        if not label:
            return None
        for rule in self._rules:
            if rule.matches(label):
                return rule
        return None

    def resolve(
        self,
        label: Optional[str],
        lat: Any = None,
        lon: Any = None,
    ) -> Optional[ResolvedSite]:
        """Resolve a site label (and optional explicit coordinates).

        Explicit coordinates win when both are finite numbers; the
        canonical name is then the raw label. Otherwise the dictionary
        is scanned. Returns None when the site cannot be geolocated.
        """
        label = (label or "").strip()
        lat_f = coerce_number(lat)
        lon_f = coerce_number(lon)
        rule = self.match_rule(label)

        if math.isfinite(lat_f) and math.isfinite(lon_f):
            return ResolvedSite(
                lon=lon_f,
                lat=lat_f,
                canonical_name=label or UNKNOWN_SITE_NAME,
                country=rule.country if rule else UNKNOWN_COUNTRY,
            )

        if rule is None:
            logger.debug("No site rule matches %r", label)
            return None

        return ResolvedSite(
            lon=rule.lon,
            lat=rule.lat,
            canonical_name=rule.name,
            country=rule.country,
        )
