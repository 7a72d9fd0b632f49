"""Tests for orbit ellipse geometry, scales and animation state."""

import math
import random

import numpy as np
import pytest

from launchatlas.core.orbit_geometry import (
    OrbitClass,
    OrbitGeometryEngine,
    OrbitRecord,
    angular_speed_for,
    classify_orbit_class,
    compute_ellipse,
    position_on_ellipse,
    sample_ellipse,
)
from launchatlas.core.scales import LinearScale, SqrtScale, nan_max, orbit_scale
from launchatlas.utils.constants import MIN_ELLIPSE_RADIUS_PX, TWO_PI


def _record(object_id="SAT", perigee=500.0, apogee=800.0, inclination=45.0,
            orbit_class=OrbitClass.LEO):
    return OrbitRecord(
        object_id=object_id,
        perigee_km=perigee,
        apogee_km=apogee,
        inclination_deg=inclination,
        orbit_class=orbit_class,
    )


class TestScales:
    def test_nan_max_ignores_missing(self):
        assert nan_max([1.0, float("nan"), 5.0, float("inf")]) == 5.0
        assert nan_max([float("nan")], default=-1.0) == -1.0
        assert nan_max([]) == 0.0

    def test_linear_scale(self):
        scale = LinearScale(domain_max=100.0, range_max=50.0)
        assert scale(0) == 0.0
        assert scale(100) == 50.0
        assert scale(float("nan")) == 0.0
        assert LinearScale(0.0, 50.0)(10.0) == 0.0

    def test_sqrt_scale_area_proportional(self):
        scale = SqrtScale(domain_max=100.0, range_max=10.0)
        assert scale(100) == pytest.approx(10.0)
        assert scale(25) == pytest.approx(5.0)
        assert scale(0) == 0.0

    def test_orbit_scale_fits_viewport(self):
        scale = orbit_scale([35786.0, float("nan"), 500.0], 1100, 720, 20)
        assert scale.domain_max == 35786.0
        assert scale.range_max == 340.0
        assert scale(35786.0) == pytest.approx(340.0)


class TestComputeEllipse:
    def test_semi_axes(self):
        scale = LinearScale(1000.0, 100.0)
        geometry = compute_ellipse(_record(perigee=200.0, apogee=800.0, inclination=30.0), scale, 10.0, 20.0)
        # ap=80, pe=20 -> a=50, c=30, b=40
        assert geometry.semi_major_px == pytest.approx(50.0)
        assert geometry.semi_minor_px == pytest.approx(40.0)
        assert geometry.focal_distance_px == pytest.approx(30.0)
        assert geometry.rotation_deg == 30.0
        assert (geometry.center_x, geometry.center_y) == (10.0, 20.0)

    def test_circular_orbit(self):
        geometry = compute_ellipse(_record(perigee=500.0, apogee=500.0), LinearScale(1000.0, 100.0))
        assert geometry.semi_major_px == pytest.approx(geometry.semi_minor_px)

    def test_minor_never_exceeds_major(self):
        """Random valid inputs always yield finite 0 < b <= a."""
        rng = random.Random(11)
        scale = LinearScale(40000.0, 340.0)
        for _ in range(500):
            perigee = rng.uniform(0.0, 40000.0)
            apogee = rng.uniform(perigee, 40000.0)
            g = compute_ellipse(_record(perigee=perigee, apogee=apogee), scale)
            assert math.isfinite(g.semi_major_px) and math.isfinite(g.semi_minor_px)
            assert 0.0 < g.semi_minor_px <= g.semi_major_px

    def test_larger_apogee_gives_larger_ellipse(self):
        scale = LinearScale(40000.0, 340.0)
        small = compute_ellipse(_record(apogee=20000.0), scale)
        large = compute_ellipse(_record(apogee=20001.0), scale)
        assert small.semi_major_px < large.semi_major_px

    def test_monotonic_for_any_monotonic_scale(self):
        def scale(km):
            return math.log1p(km)
        assert compute_ellipse(_record(apogee=900.0), scale).semi_major_px < \
            compute_ellipse(_record(apogee=1000.0), scale).semi_major_px

    def test_small_orbits_stay_ordered(self):
        """Sub-pixel ellipses keep their apogee order instead of sharing a floor size."""
        scale = LinearScale(40000.0, 340.0)
        lower = compute_ellipse(_record(perigee=100.0, apogee=150.0), scale)
        higher = compute_ellipse(_record(perigee=100.0, apogee=250.0), scale)
        assert 0.0 < lower.semi_major_px < higher.semi_major_px < MIN_ELLIPSE_RADIUS_PX
        assert lower.semi_minor_px <= lower.semi_major_px
        assert higher.semi_minor_px <= higher.semi_major_px

    def test_degenerate_sizes_clamped(self):
        geometry = compute_ellipse(_record(perigee=0.0, apogee=0.0), LinearScale(40000.0, 340.0))
        assert geometry.semi_major_px == MIN_ELLIPSE_RADIUS_PX
        assert geometry.semi_minor_px == MIN_ELLIPSE_RADIUS_PX

    def test_very_eccentric_orbit_keeps_visible_minor_axis(self):
        # perigee 0 -> b == 0 before clamping
        geometry = compute_ellipse(_record(perigee=0.0, apogee=40000.0), LinearScale(40000.0, 340.0))
        assert geometry.semi_minor_px == MIN_ELLIPSE_RADIUS_PX
        assert geometry.semi_minor_px <= geometry.semi_major_px

    def test_missing_inclination_means_no_rotation(self):
        geometry = compute_ellipse(_record(inclination=float("nan")), LinearScale(1000.0, 100.0))
        assert geometry.rotation_deg == 0.0

    def test_anomalous_record_rendered_as_given(self):
        record = _record(perigee=800.0, apogee=200.0)
        assert record.is_anomalous
        geometry = compute_ellipse(record, LinearScale(1000.0, 100.0))
        assert geometry.semi_major_px == pytest.approx(50.0)
        assert geometry.semi_minor_px == pytest.approx(40.0)


class TestPositions:
    def test_position_at_phase_zero_is_on_major_axis(self):
        geometry = compute_ellipse(_record(perigee=200.0, apogee=800.0, inclination=0.0), LinearScale(1000.0, 100.0), 100.0, 100.0)
        assert position_on_ellipse(geometry, 0.0) == pytest.approx((150.0, 100.0))
        assert position_on_ellipse(geometry, math.pi / 2) == pytest.approx((100.0, 140.0))

    def test_rotation_applies(self):
        geometry = compute_ellipse(_record(perigee=200.0, apogee=800.0, inclination=90.0), LinearScale(1000.0, 100.0))
        x, y = position_on_ellipse(geometry, 0.0)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(50.0)

    def test_outline_points_lie_on_ellipse(self):
        geometry = compute_ellipse(_record(perigee=200.0, apogee=800.0, inclination=25.0), LinearScale(1000.0, 100.0), 5.0, 7.0)
        outline = sample_ellipse(geometry, 64)
        assert outline.shape == (64, 2)
        assert np.allclose(outline[0], position_on_ellipse(geometry, 0.0))
        expected = position_on_ellipse(geometry, TWO_PI * 16 / 64)
        assert np.allclose(outline[16], expected)


class TestAnimation:
    def test_angular_speed_positive_and_non_increasing(self):
        speeds = [angular_speed_for(a) for a in (0.0, 1.0, 10.0, 50.0, 200.0, 1000.0, 1e6)]
        assert all(s > 0 for s in speeds)
        assert all(a >= b for a, b in zip(speeds, speeds[1:]))

    def test_phase_wraps(self):
        engine = OrbitGeometryEngine([_record()], 1100, 720)
        state = engine.animation_states["SAT"]
        for _ in range(1000):
            engine.advance()
            assert 0.0 <= state.phase_angle < TWO_PI


class TestClassifyOrbitClass:
    @pytest.mark.parametrize("perigee, apogee, expected", [
        (400.0, 420.0, OrbitClass.LEO),
        (20000.0, 20200.0, OrbitClass.MEO),
        (35780.0, 35795.0, OrbitClass.GEO),
        (1000.0, 39000.0, OrbitClass.ELLIPTICAL),
    ])
    def test_classes(self, perigee, apogee, expected):
        assert classify_orbit_class(perigee, apogee) is expected

    def test_parse_labels(self):
        assert OrbitClass.parse("leo") is OrbitClass.LEO
        assert OrbitClass.parse(" Elliptical ") is OrbitClass.ELLIPTICAL
        assert OrbitClass.parse("HEO") is None
        assert OrbitClass.parse(None) is None


class TestOrbitGeometryEngine:
    @pytest.fixture
    def records(self):
        return [
            _record("ISS", 408.0, 418.0, 51.6),
            _record("GPS", 20159.0, 20211.0, 55.0, OrbitClass.MEO),
            _record("GEO", 35776.0, 35796.0, 0.1, OrbitClass.GEO),
        ]

    def test_largest_apogee_fills_viewport(self, records):
        engine = OrbitGeometryEngine(records, 1100, 720)
        assert engine.scale.domain_max == 35796.0
        geo = engine.geometry("GEO")
        assert geo.semi_major_px == pytest.approx((340.0 + engine.scale(35776.0)) / 2)
        assert (geo.center_x, geo.center_y) == (550.0, 360.0)

    def test_set_viewport_recomputes_everything(self, records):
        engine = OrbitGeometryEngine(records, 1100, 720)
        before = engine.geometries
        engine.set_viewport(550, 360)
        after = engine.geometries
        assert engine.viewport == (550, 360)
        for object_id in before:
            assert after[object_id].semi_major_px < before[object_id].semi_major_px
        assert after["GEO"].center_x == 275.0

    def test_speeds_fixed_at_construction(self, records):
        engine = OrbitGeometryEngine(records, 1100, 720)
        speeds = {k: s.angular_speed for k, s in engine.animation_states.items()}
        engine.set_viewport(200, 200)
        assert {k: s.angular_speed for k, s in engine.animation_states.items()} == speeds

    def test_inner_orbits_turn_faster(self, records):
        engine = OrbitGeometryEngine(records, 1100, 720)
        states = engine.animation_states
        assert states["ISS"].angular_speed >= states["GPS"].angular_speed >= states["GEO"].angular_speed

    def test_advance_moves_positions(self, records):
        engine = OrbitGeometryEngine(records, 1100, 720)
        before = engine.positions()
        engine.advance()
        after = engine.positions()
        assert set(after) == {"ISS", "GPS", "GEO"}
        assert all(before[k] != after[k] for k in before)

    def test_duplicate_ids_keep_first(self, records, caplog):
        duplicate = _record("ISS", 100.0, 100.0)
        engine = OrbitGeometryEngine(records + [duplicate], 1100, 720)
        assert len(engine) == 3
        assert engine.records["ISS"].perigee_km == 408.0
        assert "Duplicate orbit object id ISS" in caplog.text

    def test_anomalous_record_logged(self, caplog):
        OrbitGeometryEngine([_record("ODD", 900.0, 300.0)], 800, 600)
        assert "below perigee" in caplog.text

    def test_anomalous_perigee_stays_in_domain(self):
        engine = OrbitGeometryEngine([_record("ODD", 900.0, 300.0)], 800, 600)
        assert engine.scale.domain_max == 900.0

    def test_distant_object_keeps_leo_orbits_distinct(self):
        engine = OrbitGeometryEngine([
            _record("ISS", 408.0, 418.0),
            _record("HST", 537.0, 541.0),
            _record("TESS", 108000.0, 373000.0, orbit_class=OrbitClass.ELLIPTICAL),
        ], 1100, 720)
        assert engine.geometry("ISS").semi_major_px < engine.geometry("HST").semi_major_px

    def test_empty_engine(self):
        engine = OrbitGeometryEngine([], 800, 600)
        assert len(engine) == 0
        assert engine.positions() == {}
        engine.advance()
