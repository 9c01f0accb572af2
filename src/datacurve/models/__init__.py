from .options import AxisRangeOverride, Granularity, ImportOptions, ProjectionOptions
from .series import (
    DEFAULT_DIMENSION_KEY,
    DataPoint,
    DimensionSet,
    ProjectedSeries,
    Series,
    new_series_id,
)

__all__ = [
    "AxisRangeOverride",
    "DEFAULT_DIMENSION_KEY",
    "DataPoint",
    "DimensionSet",
    "Granularity",
    "ImportOptions",
    "ProjectedSeries",
    "ProjectionOptions",
    "Series",
    "new_series_id",
]
