from __future__ import annotations
import logging
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from ..models import DataPoint, Granularity, ProjectedSeries, Series

logger = logging.getLogger(__name__)

# Shared axis for overlap mode; January so every day-of-month 1..31 exists.
REFERENCE_DATE = pd.Timestamp("2000-01-01")


def bucket_times(times: pd.Series, granularity: Granularity | str) -> pd.Series:
    """Start of the day/month bucket for every timestamp (identity for hour)."""
    g = Granularity.parse(granularity)
    times = pd.to_datetime(times, errors="coerce")
    if g is Granularity.DAY:
        return times.dt.floor("D")
    if g is Granularity.MONTH:
        return times.dt.to_period("M").dt.to_timestamp()
    return times


def aggregate_points(points: Sequence[DataPoint], granularity: Granularity | str) -> Tuple[DataPoint, ...]:
    """Collapse points to one mean per bucket, ascending by time.

    Each point counts with its ``sample_count`` so re-aggregating already
    aggregated points matches aggregating the raw points directly.
    Hour granularity returns the points unchanged.
    """
    g = Granularity.parse(granularity)
    if g is Granularity.HOUR:
        return tuple(points)
    if not points:
        return ()

    data = pd.DataFrame(
        {
            "t": pd.to_datetime([p.time for p in points]),
            "v": [float(p.value) for p in points],
            "n": [int(p.sample_count) for p in points],
        }
    )
    data = data.assign(bucket=bucket_times(data["t"], g), w=data["v"] * data["n"])
    agg = data.groupby("bucket", sort=True).agg(w=("w", "sum"), n=("n", "sum"))
    return tuple(
        DataPoint(time=pd.Timestamp(bucket), value=float(w / n), sample_count=int(n))
        for bucket, w, n in agg[["w", "n"]].itertuples(name=None)
        if n > 0
    )


def overlap_time(ts: pd.Timestamp, granularity: Granularity | str) -> pd.Timestamp:
    """Move ``ts`` onto :data:`REFERENCE_DATE`, keeping the part that matters."""
    g = Granularity.parse(granularity)
    ts = pd.Timestamp(ts)
    if g is Granularity.DAY:
        return REFERENCE_DATE.replace(day=ts.day)
    if g is Granularity.MONTH:
        return REFERENCE_DATE.replace(month=ts.month)
    return REFERENCE_DATE + (ts - ts.normalize())


def overlap_points(points: Iterable[DataPoint], granularity: Granularity | str) -> Tuple[DataPoint, ...]:
    moved = [
        DataPoint(time=overlap_time(p.time, granularity), value=p.value, sample_count=p.sample_count)
        for p in points
    ]
    return tuple(sorted(moved, key=lambda p: p.time))


def aggregate_series(
    series: Sequence[Series],
    granularity: Granularity | str = Granularity.HOUR,
    *,
    overlap: bool = False,
) -> List[ProjectedSeries]:
    """Project active series to ``granularity``.

    With ``overlap`` set and more than one distinct date among ``series``,
    every point is remapped onto the shared reference date.
    """
    g = Granularity.parse(granularity)
    dates = {s.date for s in series}
    apply_overlap = bool(overlap) and len(dates) > 1

    out: List[ProjectedSeries] = []
    for s in series:
        points = aggregate_points(s.data, g)
        if apply_overlap:
            points = overlap_points(points, g)
        out.append(
            ProjectedSeries(
                series_id=s.id,
                name=s.name,
                metric_name=s.metric_name,
                unit=s.unit,
                date=s.date,
                dimensions=s.dimensions,
                data=points,
            )
        )
    logger.debug(
        "Aggregated %d series at %s granularity (overlap=%s)", len(out), g.value, apply_overlap
    )
    return out


__all__ = [
    "REFERENCE_DATE",
    "aggregate_points",
    "aggregate_series",
    "bucket_times",
    "overlap_points",
    "overlap_time",
]
