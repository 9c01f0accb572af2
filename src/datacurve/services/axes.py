"""Per-metric vertical axes for a multi-series chart.

Each distinct metric gets its own axis with a padded numeric range. Only one
axis is "active" (drawn with ticks and grid lines) at a time.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..models import AxisRangeOverride

logger = logging.getLogger(__name__)

IRRADIANCE_TOKENS: Tuple[str, ...] = ("辐照度", "irradiance")
IRRADIANCE_RANGE: Tuple[float, float] = (0.0, 1000.0)

PAD_RATIO = 0.05
MIN_PAD = 1.0
# Signed bounds grow outward by this factor instead of the absolute pad.
EXTEND_RATIO = 1.1

EMPTY_RANGE: Tuple[float, float] = (0.0, 1.0)


@dataclass(frozen=True)
class AxisAssignment:
    metric: str
    unit: str
    index: int
    min_value: float
    max_value: float
    visible: bool
    active: bool


@dataclass(frozen=True)
class AxisLayout:
    axes: Tuple[AxisAssignment, ...]
    active_metric: Optional[str]

    def axis_for(self, metric: str) -> Optional[AxisAssignment]:
        for axis in self.axes:
            if axis.metric == metric:
                return axis
        return None

    def axis_index(self, metric: str) -> Optional[int]:
        axis = self.axis_for(metric)
        return axis.index if axis is not None else None


def is_irradiance_metric(metric: str) -> bool:
    lowered = (metric or "").lower()
    return any(token in lowered for token in IRRADIANCE_TOKENS)


def distinct_metrics(series: Iterable) -> List[str]:
    """Metric names in order of first appearance."""
    seen: List[str] = []
    for s in series:
        if s.metric_name not in seen:
            seen.append(s.metric_name)
    return seen


def default_range(values: Sequence[float], metric: str = "") -> Tuple[float, float]:
    if is_irradiance_metric(metric):
        return IRRADIANCE_RANGE
    arr = np.asarray(list(values), dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return EMPTY_RANGE
    lo = float(arr.min())
    hi = float(arr.max())
    pad = max(abs(hi - lo) * PAD_RATIO, MIN_PAD)
    lower = lo * EXTEND_RATIO if lo < 0 else lo - pad
    upper = hi * EXTEND_RATIO if hi > 0 else hi + pad
    return lower, upper


def resolve_active_metric(
    metrics: Sequence[str],
    visibility: Optional[Mapping[str, bool]] = None,
    focus_metric: Optional[str] = None,
) -> Optional[str]:
    """Focused metric if visible, else first visible, else first metric."""
    if not metrics:
        return None
    visibility = visibility or {}

    def _visible(metric: str) -> bool:
        return bool(visibility.get(metric, True))

    if focus_metric in metrics and _visible(focus_metric):
        return focus_metric
    for metric in metrics:
        if _visible(metric):
            return metric
    return metrics[0]


def _check_scale(scale: float) -> float:
    try:
        value = float(scale)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"axis scale must be a number, got {scale!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"axis scale must be a positive number, got {scale!r}")
    return value


def project_axes(
    series: Sequence,
    *,
    overrides: Optional[Mapping[str, AxisRangeOverride]] = None,
    focus_metric: Optional[str] = None,
    visibility: Optional[Mapping[str, bool]] = None,
    scale: float = 1.0,
) -> AxisLayout:
    """Assign one axis per metric across ``series`` (Series or ProjectedSeries)."""
    scale = _check_scale(scale)
    overrides = overrides or {}
    visibility = visibility or {}

    metrics = distinct_metrics(series)
    values: Dict[str, List[float]] = {m: [] for m in metrics}
    units: Dict[str, str] = {}
    for s in series:
        values[s.metric_name].extend(p.value for p in s.data)
        if s.unit and s.metric_name not in units:
            units[s.metric_name] = s.unit

    active = resolve_active_metric(metrics, visibility, focus_metric)

    axes: List[AxisAssignment] = []
    for index, metric in enumerate(metrics):
        lower, upper = default_range(values[metric], metric)
        lower *= scale
        upper *= scale
        manual = overrides.get(metric)
        if manual is not None:
            if manual.min_value is not None:
                lower = float(manual.min_value)
            if manual.max_value is not None:
                upper = float(manual.max_value)
        axes.append(
            AxisAssignment(
                metric=metric,
                unit=units.get(metric, ""),
                index=index,
                min_value=lower,
                max_value=upper,
                visible=bool(visibility.get(metric, True)),
                active=metric == active,
            )
        )
    logger.debug("Projected %d axes, active=%s", len(axes), active)
    return AxisLayout(axes=tuple(axes), active_metric=active)


__all__ = [
    "AxisAssignment",
    "AxisLayout",
    "IRRADIANCE_RANGE",
    "default_range",
    "distinct_metrics",
    "is_irradiance_metric",
    "project_axes",
    "resolve_active_metric",
]
