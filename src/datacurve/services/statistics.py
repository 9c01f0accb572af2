from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

import numpy as np
import pandas as pd
import logging

from ..models import DataPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesSummary:
    """Headline numbers for one series."""

    count: int
    min: float
    max: float
    mean: float
    first_time: Optional[pd.Timestamp]
    last_time: Optional[pd.Timestamp]
    total: float


def _frame(points: Sequence[DataPoint]) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "t": pd.to_datetime([p.time for p in points]),
            "v": pd.to_numeric([p.value for p in points], errors="coerce"),
        }
    )
    return df.dropna().sort_values("t", kind="stable")


def _stat_mean(values: pd.Series, _times: pd.Series) -> float:
    return float(values.mean()) if not values.empty else np.nan


def _stat_min(values: pd.Series, _times: pd.Series) -> float:
    return float(values.min()) if not values.empty else np.nan


def _stat_max(values: pd.Series, _times: pd.Series) -> float:
    return float(values.max()) if not values.empty else np.nan


def _stat_count(values: pd.Series, _times: pd.Series) -> float:
    return float(values.count())


def _stat_total(values: pd.Series, times: pd.Series) -> float:
    if len(values) < 2:
        return 0.0
    v = values.to_numpy(dtype=float)
    hours = (times - times.iloc[0]).dt.total_seconds().to_numpy(dtype=float) / 3600.0
    return float(np.sum((v[1:] + v[:-1]) * 0.5 * np.diff(hours)))


_STATISTICS: Dict[str, Callable[[pd.Series, pd.Series], float]] = {
    "count": _stat_count,
    "min": _stat_min,
    "max": _stat_max,
    "mean": _stat_mean,
    "total": _stat_total,
}


def available_statistics() -> list[str]:
    return list(_STATISTICS)


def compute_statistic(points: Sequence[DataPoint], name: str) -> float:
    try:
        func = _STATISTICS[name]
    except KeyError as exc:
        logger.warning("Unknown statistic %r requested; available: %s", name, ", ".join(_STATISTICS))
        raise ValueError(f"Unknown statistic: {name!r}") from exc
    df = _frame(points)
    return func(df["v"], df["t"])


def series_total(points: Sequence[DataPoint]) -> float:
    """Trapezoidal integral of the points over time, in value-hours.

    Fewer than two points give 0.0.
    """
    return compute_statistic(points, "total")


def summarize_series(series) -> SeriesSummary:
    """Summary of a Series or ProjectedSeries."""
    df = _frame(series.data)
    values, times = df["v"], df["t"]
    return SeriesSummary(
        count=int(_stat_count(values, times)),
        min=_stat_min(values, times),
        max=_stat_max(values, times),
        mean=_stat_mean(values, times),
        first_time=pd.Timestamp(times.iloc[0]) if not times.empty else None,
        last_time=pd.Timestamp(times.iloc[-1]) if not times.empty else None,
        total=_stat_total(values, times),
    )


__all__ = [
    "SeriesSummary",
    "available_statistics",
    "compute_statistic",
    "series_total",
    "summarize_series",
]
