from __future__ import annotations

import pytest

from ev_dashboard.layout.scales import (
    MAX_ZOOM,
    LinearScale,
    SqrtScale,
    ZoomTransform,
    band_scale,
    point_scale,
    tick_increment,
    zero_based_domain,
)


def test_tick_increment_uses_one_two_five_steps() -> None:
    assert tick_increment(0, 97, 10) == 10
    assert tick_increment(0, 16, 10) == 2
    assert tick_increment(0, 42, 10) == 5
    assert tick_increment(0, 1, 10) == -10


def test_nice_domain_covers_the_maximum() -> None:
    scale = LinearScale(zero_based_domain(97), (100.0, 0.0)).nice()

    assert scale.domain == (0, 100)
    assert scale(0) == 100.0
    assert scale(100) == 0.0
    assert scale.ticks() == [float(value) for value in range(0, 101, 10)]


@pytest.mark.parametrize("maximum", [0, -3, float("nan")])
def test_degenerate_maximum_maps_to_unit_domain(maximum: float) -> None:
    assert zero_based_domain(maximum) == (0.0, 1.0)


def test_unit_domain_ticks_are_fractional() -> None:
    ticks = LinearScale((0.0, 1.0), (0.0, 10.0)).ticks()

    assert ticks[0] == 0.0
    assert ticks[-1] == pytest.approx(1.0)
    assert len(ticks) == 11


def test_sqrt_scale_is_area_true() -> None:
    scale = SqrtScale((0.0, 100.0), (0.0, 10.0))

    assert scale(25) == pytest.approx(5.0)
    assert scale(100) == pytest.approx(10.0)


def test_band_scale_keeps_domain_order_without_overlap() -> None:
    scale = band_scale(["TESLA", "NISSAN", "KIA"], (0.0, 100.0), 0.15)
    positions = scale.positions()

    assert list(positions) == ["TESLA", "NISSAN", "KIA"]
    ordered = list(positions.values())
    for left, right in zip(ordered, ordered[1:]):
        assert left + scale.bandwidth < right
    assert ordered[0] >= 0.0
    assert ordered[-1] + scale.bandwidth <= 100.0
    assert scale("MISSING") is None


def test_point_scale_has_zero_bandwidth() -> None:
    scale = point_scale([2019, 2020, 2021], (0.0, 300.0))

    assert scale.bandwidth == 0.0
    assert [scale(year) for year in (2019, 2020, 2021)] == pytest.approx([50.0, 150.0, 250.0])
    assert scale.center(2020) == pytest.approx(150.0)


def test_zoom_factor_is_clamped() -> None:
    assert ZoomTransform.clamped(20.0).k == MAX_ZOOM
    assert ZoomTransform.clamped(0.25).k == 1.0
    assert ZoomTransform.clamped(2.0, x=-500.0, width=100.0).x == -100.0
    assert ZoomTransform.clamped(2.0, x=30.0, width=100.0).x == 0.0


def test_zoom_rescales_band_range() -> None:
    scale = band_scale(["A", "B"], (0.0, 100.0))
    zoomed = ZoomTransform(k=2.0, x=-50.0).rescale_band(scale)

    assert zoomed.range == (-50.0, 150.0)
    assert zoomed.bandwidth == pytest.approx(scale.bandwidth * 2)
