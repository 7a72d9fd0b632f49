"""Tests for raw record normalization and ownership classification."""

import math

import pytest

from launchatlas.core.record_normalizer import (
    Ownership,
    OwnershipPolicy,
    classify_ownership,
    coerce_number,
    is_dual_attribution,
    normalize_record,
    pick_field,
    split_owner_tokens,
)
from launchatlas.utils.time_utils import extract_year, year_range


class TestPickField:
    def test_first_non_empty_alias_wins(self):
        record = {"Date of Launch": "", "Launch_Date": "2016-03-13", "Date": "1999"}
        assert pick_field(record, ("date_of_launch", "Date of Launch", "Launch_Date", "Date")) == "2016-03-13"

    def test_alias_order_not_record_order(self):
        record = {"b": "second", "a": "first"}
        assert pick_field(record, ("a", "b")) == "first"

    def test_blank_and_nan_are_skipped(self):
        record = {"a": "   ", "b": float("nan"), "c": None, "d": 0}
        assert pick_field(record, ("a", "b", "c", "d")) == 0

    def test_nothing_found(self):
        assert pick_field({"x": "1"}, ("a", "b")) is None


class TestExtractYear:
    @pytest.mark.parametrize("raw, expected", [
        ("2016-07-04", 2016),
        ("7/4/2016", 2016),
        ("Launched 1998, re-entered 2004", 1998),
        (2016, 2016),
        (2016.0, 2016),
    ])
    def test_first_four_digit_run(self, raw, expected):
        assert extract_year(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "7/4/16", "unknown", float("nan"), True])
    def test_no_year(self, raw):
        assert extract_year(raw) is None

    def test_year_range(self):
        assert year_range([2016, 2014, 2015]) == (2014, 2016)
        assert year_range([]) is None


class TestCoerceNumber:
    def test_numeric_strings(self):
        assert coerce_number(" 35786 ") == 35786.0
        assert coerce_number(42) == 42.0

    @pytest.mark.parametrize("raw", [None, "", "  ", "n/a", True])
    def test_missing_becomes_nan_not_zero(self, raw):
        assert math.isnan(coerce_number(raw))


class TestClassifyOwnership:
    def test_tokens_split_on_all_separators(self):
        assert split_owner_tokens("NASA; SpaceX, ESA/JAXA") == ["NASA", "SpaceX", "ESA", "JAXA"]

    def test_dual_attribution_counts_both(self):
        """Mixed government/commercial owners count for both categories."""
        assert classify_ownership("Government/Commercial") == (Ownership.GOVERNMENT, Ownership.COMMERCIAL)
        assert classify_ownership("NASA/SpaceX") == (Ownership.GOVERNMENT, Ownership.COMMERCIAL)

    def test_dual_attribution_needs_two_tokens(self):
        assert not is_dual_attribution(["Government Commercial"])
        assert classify_ownership("Government Commercial") == (Ownership.GOVERNMENT,)

    def test_dual_attribution_under_two_category_policy(self):
        result = classify_ownership("Commercial;Government", OwnershipPolicy.GOV_VS_COMMERCIAL)
        assert result == (Ownership.GOVERNMENT, Ownership.COMMERCIAL)

    @pytest.mark.parametrize("raw, expected", [
        ("Military", Ownership.MILITARY),
        ("Military/Commercial", Ownership.MILITARY),
        ("Government", Ownership.GOVERNMENT),
        ("Commercial", Ownership.COMMERCIAL),
        ("Civil", Ownership.CIVILIAN),
        ("University research", Ownership.CIVILIAN),
        ("Amateur radio club", Ownership.CIVILIAN),
    ])
    def test_site_map_priority(self, raw, expected):
        assert classify_ownership(raw, OwnershipPolicy.SITE_MAP) == (expected,)

    @pytest.mark.parametrize("raw, expected", [
        ("Government", Ownership.GOVERNMENT),
        ("SpaceX", Ownership.COMMERCIAL),
        ("Military", Ownership.OTHER),
        ("Civil", Ownership.OTHER),
    ])
    def test_two_category_falls_back_to_other(self, raw, expected):
        assert classify_ownership(raw, OwnershipPolicy.GOV_VS_COMMERCIAL) == (expected,)

    def test_missing_owner_per_policy(self):
        assert classify_ownership(None, OwnershipPolicy.SITE_MAP) == (Ownership.UNKNOWN,)
        assert classify_ownership("", OwnershipPolicy.GOV_VS_COMMERCIAL) == (Ownership.OTHER,)

    def test_list_owner_field(self):
        assert classify_ownership(["Government", "Commercial"]) == (Ownership.GOVERNMENT, Ownership.COMMERCIAL)


class TestNormalizeRecord:
    def test_ucs_style_record(self):
        record = {
            "Date of Launch": "2016-11-19",
            "Users": "Government",
            "Perigee (km)": "35776",
            "Apogee (km)": "35796",
            "Inclination (degrees)": "0.1",
            "Eccentricity": "",
        }
        normalized = normalize_record(record)
        assert normalized.year == 2016
        assert normalized.ownership_raw == "Government"
        assert normalized.perigee_km == 35776.0
        assert normalized.apogee_km == 35796.0
        assert normalized.inclination_deg == pytest.approx(0.1)
        assert math.isnan(normalized.eccentricity)

    def test_missing_date_yields_none_without_raising(self):
        normalized = normalize_record({"Users": "Civil"})
        assert normalized.year is None
        assert math.isnan(normalized.perigee_km)

    def test_custom_alias_lists(self):
        record = {"when": "launched 2009", "who": "ESA"}
        normalized = normalize_record(record, date_fields=("when",), owner_fields=("who",))
        assert normalized.year == 2009
        assert normalized.ownership_raw == "ESA"
