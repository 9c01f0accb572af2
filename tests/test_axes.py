"""Tests for per-metric axis assignment."""
from pathlib import Path
import sys

import pandas as pd
import pytest

sys.path.insert(0, str((Path(__file__).parent.parent / "src").resolve()))

from datacurve.models import AxisRangeOverride, DataPoint, DimensionSet, Series
from datacurve.services.axes import (
    EMPTY_RANGE,
    default_range,
    is_irradiance_metric,
    project_axes,
    resolve_active_metric,
)


def _series(metric, values, unit="", sid=None):
    start = pd.Timestamp("2026-01-28 00:00")
    return Series(
        id=sid or metric,
        name=metric,
        metric_name=metric,
        unit=unit,
        date="2026-01-28",
        dimensions=DimensionSet(),
        data=tuple(DataPoint(start + pd.Timedelta(hours=i), float(v)) for i, v in enumerate(values)),
    )


def test_irradiance_uses_fixed_range():
    layout = project_axes([_series("辐照度", [50, 120, 300])])
    axis = layout.axis_for("辐照度")
    assert (axis.min_value, axis.max_value) == (0.0, 1000.0)
    assert is_irradiance_metric("Global Irradiance (W/m2)")


def test_positive_data_range():
    # lower: 10 - max(20*0.05, 1) = 9; upper: 30 * 1.1
    assert default_range([10, 30]) == pytest.approx((9.0, 33.0))


def test_negative_data_range():
    # lower extends by 10%, upper pads since the max is not positive.
    assert default_range([-20, -10]) == pytest.approx((-22.0, -9.0))


def test_straddling_zero():
    assert default_range([-5, 5]) == pytest.approx((-5.5, 5.5))


def test_constant_values_get_minimum_pad():
    assert default_range([0, 0]) == pytest.approx((-1.0, 1.0))


def test_no_finite_values():
    assert default_range([]) == EMPTY_RANGE
    assert default_range([float("nan")]) == EMPTY_RANGE


def test_distinct_metrics_in_first_appearance_order():
    layout = project_axes(
        [
            _series("b", [1], sid="1"),
            _series("a", [2], sid="2"),
            _series("b", [3], sid="3"),
        ]
    )
    assert [(a.metric, a.index) for a in layout.axes] == [("b", 0), ("a", 1)]
    assert layout.axis_index("a") == 1
    assert layout.axis_for("missing") is None


def test_values_are_pooled_across_series_of_a_metric():
    layout = project_axes([_series("t", [10], sid="1"), _series("t", [30], sid="2")])
    axis = layout.axis_for("t")
    assert (axis.min_value, axis.max_value) == pytest.approx((9.0, 33.0))


def test_override_replaces_only_the_given_bound():
    overrides = {"t": AxisRangeOverride(min_value=0)}
    axis = project_axes([_series("t", [10, 30])], overrides=overrides).axis_for("t")
    assert axis.min_value == 0.0
    assert axis.max_value == pytest.approx(33.0)


def test_scale_multiplies_computed_bounds_only():
    series = [_series("t", [10, 30]), _series("u", [10, 30])]
    overrides = {"u": AxisRangeOverride(min_value=5, max_value=50)}
    layout = project_axes(series, overrides=overrides, scale=2.0)
    assert (layout.axis_for("t").min_value, layout.axis_for("t").max_value) == pytest.approx((18.0, 66.0))
    assert (layout.axis_for("u").min_value, layout.axis_for("u").max_value) == (5.0, 50.0)


@pytest.mark.parametrize("scale", [0, -1, "x", float("nan")])
def test_invalid_scale_raises(scale):
    with pytest.raises(ValueError):
        project_axes([_series("t", [1])], scale=scale)


def test_active_axis_rules():
    metrics = ["a", "b", "c"]
    assert resolve_active_metric(metrics, {}, "b") == "b"
    assert resolve_active_metric(metrics, {"b": False}, "b") == "a"
    assert resolve_active_metric(metrics, {"a": False, "b": False}, None) == "c"
    assert resolve_active_metric(metrics, {m: False for m in metrics}, "b") == "a"
    assert resolve_active_metric(metrics, {}, "unknown") == "a"
    assert resolve_active_metric([], {}, "a") is None


def test_exactly_one_active_axis():
    series = [_series("a", [1]), _series("b", [2]), _series("c", [3])]
    layout = project_axes(series, focus_metric="c", visibility={"a": False})
    assert [a.active for a in layout.axes] == [False, False, True]
    assert [a.visible for a in layout.axes] == [False, True, True]
    assert layout.active_metric == "c"


def test_unit_is_taken_from_series():
    layout = project_axes([_series("温度(°C)", [1, 2], unit="°C")])
    assert layout.axes[0].unit == "°C"


def test_empty_selection():
    layout = project_axes([])
    assert layout.axes == ()
    assert layout.active_metric is None
