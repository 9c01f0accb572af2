"""Normalize heterogeneous measurement tables into time series for charting.

Typical use::

    from datacurve import import_file, project_view, SeriesStore

    result = import_file("weather.csv")
    store = SeriesStore().add(result.series)
    view = project_view(store)
"""

__version__ = "0.1.0"

from .importing import (
    DataCurveError,
    DataImportError,
    ImportResult,
    import_file,
    import_records,
    import_text,
    infer_unit,
    partition_records,
    resolve_timestamp,
)
from .models import (
    AxisRangeOverride,
    DataPoint,
    DimensionSet,
    Granularity,
    ImportOptions,
    ProjectedSeries,
    ProjectionOptions,
    Series,
)
from .services.aggregation import aggregate_series
from .services.axes import AxisAssignment, AxisLayout, project_axes
from .services.projection import ProjectionView, project_view
from .services.store import SeriesFilters, SeriesStore, select_active

__all__ = [
    "AxisAssignment",
    "AxisLayout",
    "AxisRangeOverride",
    "DataCurveError",
    "DataImportError",
    "DataPoint",
    "DimensionSet",
    "Granularity",
    "ImportOptions",
    "ImportResult",
    "ProjectedSeries",
    "ProjectionOptions",
    "ProjectionView",
    "Series",
    "SeriesFilters",
    "SeriesStore",
    "__version__",
    "aggregate_series",
    "import_file",
    "import_records",
    "import_text",
    "infer_unit",
    "partition_records",
    "project_axes",
    "project_view",
    "resolve_timestamp",
    "select_active",
]
