from pathlib import Path
import sys
import json

import pandas as pd
import pytest

sys.path.insert(0, str((Path(__file__).parent.parent / "src").resolve()))

from datacurve.models import (
    AxisRangeOverride,
    DataPoint,
    DimensionSet,
    Granularity,
    Series,
    new_series_id,
)


def test_dimension_set_key_ignores_insertion_order():
    a = DimensionSet({"city": "A", "site": "S1"})
    b = DimensionSet([("site", "S1"), ("city", "A")])
    assert a == b
    assert hash(a) == hash(b)
    assert a.key == "city:A|site:S1"
    assert list(b) == ["site", "city"]


def test_empty_dimension_set_uses_default_key():
    assert DimensionSet().key == "default"
    assert DimensionSet({}) == DimensionSet()
    assert DimensionSet() == {}


def test_series_dict_round_trip_keeps_id():
    s = Series(
        id=new_series_id(),
        name="温度(°C) (南宁) (w)",
        metric_name="温度(°C)",
        unit="°C",
        date="2026-01-28",
        dimensions=DimensionSet({"城市": "南宁"}),
        data=(DataPoint(pd.Timestamp("2026-01-28 00:00"), 12.4), DataPoint(pd.Timestamp("2026-01-28 01:00"), 12.1, 3)),
    )
    payload = json.loads(json.dumps(s.to_dict(), ensure_ascii=False))
    restored = Series.from_dict(payload)
    assert restored == s
    assert restored.id == s.id
    assert restored.data[1].sample_count == 3


def test_series_from_dict_requires_id():
    with pytest.raises(ValueError):
        Series.from_dict({"name": "x"})


def test_series_to_frame():
    s = Series(
        id="x",
        name="v",
        metric_name="v",
        unit="",
        date="2026-01-28",
        dimensions=DimensionSet(),
        data=(DataPoint(pd.Timestamp("2026-01-28 05:00"), 1.0),),
    )
    frame = s.to_frame()
    assert list(frame.columns) == ["t", "v", "n"]
    assert frame["v"].tolist() == [1.0]


def test_new_series_ids_are_unique():
    assert len({new_series_id() for _ in range(1000)}) == 1000


def test_granularity_parse():
    assert Granularity.parse(None) is Granularity.HOUR
    assert Granularity.parse("DAY") is Granularity.DAY
    assert Granularity.parse(Granularity.MONTH) is Granularity.MONTH
    with pytest.raises(ValueError):
        Granularity.parse("fortnight")


def test_axis_range_override_from_dict():
    assert AxisRangeOverride.from_dict({"min_value": "5", "max_value": "bad"}) == AxisRangeOverride(5.0, None)
    assert AxisRangeOverride.from_dict(None) == AxisRangeOverride()
    assert AxisRangeOverride(1.0, 2.0).to_dict() == {"min_value": 1.0, "max_value": 2.0}


def test_dimension_key_escapes_separators():
    packed = DimensionSet({"a": "x|b:y"})
    split = DimensionSet({"a": "x", "b": "y"})
    assert packed.key != split.key
    assert packed != split
    assert DimensionSet({"a:b": "c"}) != DimensionSet({"a": "b:c"})


@pytest.mark.parametrize(
    "point",
    [
        {"time": None, "value": 1},
        {"time": "", "value": 1},
        {"time": "2026-01-28 01:00", "value": "nan"},
        {"time": "2026-01-28 01:00", "value": float("inf")},
        {"time": "2026-01-28 01:00", "value": 1, "sample_count": 0},
    ],
)
def test_series_from_dict_rejects_invalid_points(point):
    with pytest.raises(ValueError):
        Series.from_dict({"id": "x", "date": "2026-01-28", "data": [point]})
