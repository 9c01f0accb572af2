"""One call from the stored series to what a chart draws."""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models import ProjectedSeries, ProjectionOptions, Series
from .aggregation import aggregate_series
from .axes import AxisLayout, project_axes
from .store import SeriesFilters, SeriesStore, select_active

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionView:
    series: List[ProjectedSeries]
    axes: AxisLayout

    @property
    def is_empty(self) -> bool:
        return not self.series


def project_view(
    store: SeriesStore | Iterable[Series],
    filters: Optional[SeriesFilters] = None,
    options: Optional[ProjectionOptions] = None,
) -> ProjectionView:
    """Select, aggregate and lay out axes for the active series."""
    options = options or ProjectionOptions()
    active = select_active(store, filters)
    projected = aggregate_series(active, options.granularity, overlap=options.overlap)
    layout = project_axes(
        projected,
        overrides=options.range_overrides,
        focus_metric=options.focus_metric,
        visibility=options.visibility,
        scale=options.axis_scale,
    )
    logger.debug("Projected view: %d active series, %d axes", len(projected), len(layout.axes))
    return ProjectionView(series=projected, axes=layout)


__all__ = ["ProjectionView", "project_view"]
