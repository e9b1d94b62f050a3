"""
Tests for chart domains and coordinate mappings.
"""

import pytest

from tidewatch.charts.scales import LinearScale, build_scales, nice_domain
from tidewatch.data.parsing import parse_time_series
from tidewatch.models import Series, SeriesRole

WIDTH, HEIGHT = 410, 154


class TestNiceDomain:
    """Test outward rounding of value domains."""

    @pytest.mark.parametrize(
        "lo, hi, expected",
        [
            (0.23, 1.87, (0.2, 2.0)),
            (3, 97, (0, 100)),
            (-0.37, 0.42, (-0.4, 0.5)),
        ],
    )
    def test_rounds_outward(self, lo, hi, expected):
        assert nice_domain(lo, hi) == pytest.approx(expected)

    def test_collapsed_domain_unchanged(self):
        assert nice_domain(1.5, 1.5) == (1.5, 1.5)


class TestLinearScale:
    def test_maps_linearly(self):
        scale = LinearScale(domain=(0.0, 2.0), range=(100.0, 0.0))
        assert scale(0.0) == 100.0
        assert scale(2.0) == 0.0
        assert scale(0.5) == 75.0

    def test_collapsed_domain_maps_to_middle(self):
        scale = LinearScale(domain=(1.0, 1.0), range=(100.0, 0.0))
        assert scale(1.0) == 50.0


class TestBuildScales:
    """Test build_scales."""

    def test_no_data(self):
        empty_obs = Series.empty(SeriesRole.OBSERVED)
        empty_pred = Series.empty(SeriesRole.PREDICTED)
        assert build_scales(empty_obs, empty_pred, WIDTH, HEIGHT) is None

    def test_domains_cover_union(self, observed, predicted):
        scales = build_scales(observed, predicted, WIDTH, HEIGHT)

        t0, t1 = scales.domain.time_extent
        assert t0 == observed.readings[0].timestamp
        assert t1 == predicted.readings[-1].timestamp
        assert scales.domain.value_extent == (0.85, 1.62)
        assert scales.x(t0) == 0.0
        assert scales.x(t1) == WIDTH

    def test_every_reading_inside_surface(self, observed, predicted):
        scales = build_scales(observed, predicted, WIDTH, HEIGHT)

        for reading in list(observed) + list(predicted):
            assert 0.0 <= scales.x(reading.timestamp) <= WIDTH
            assert 0.0 <= scales.y(reading.value) <= HEIGHT

    def test_value_axis_inverted_and_nice(self, observed, predicted):
        scales = build_scales(observed, predicted, WIDTH, HEIGHT)

        lo, hi = scales.y.domain
        assert (lo, hi) == pytest.approx((0.8, 1.7))
        assert scales.y(lo) == HEIGHT
        assert scales.y(hi) == 0.0

    def test_single_series(self, observed):
        scales = build_scales(observed, Series.empty(SeriesRole.PREDICTED), WIDTH, HEIGHT)
        assert scales is not None
        assert scales.domain.time_extent[1] == observed.readings[-1].timestamp

    def test_single_reading(self):
        series = parse_time_series([{"eventDate": "2024-05-01T10:00:00Z", "value": 2}], SeriesRole.OBSERVED)
        scales = build_scales(series, Series.empty(SeriesRole.PREDICTED), WIDTH, HEIGHT)

        reading = series.readings[0]
        assert scales.x(reading.timestamp) == WIDTH / 2
        assert scales.y(reading.value) == HEIGHT / 2
