"""Engine services with lazy imports to avoid circular dependencies."""

from importlib import import_module
from typing import Any, Dict

__all__ = [
    "AxisAssignment",
    "AxisLayout",
    "ProjectionView",
    "REFERENCE_DATE",
    "SeriesFilters",
    "SeriesStore",
    "SeriesSummary",
    "aggregate_points",
    "aggregate_series",
    "available_statistics",
    "default_range",
    "export_csv",
    "export_excel",
    "project_axes",
    "project_view",
    "resolve_active_metric",
    "select_active",
    "series_to_table",
    "series_total",
    "summarize_series",
    "table_to_records",
]

_MODULE_MAP: Dict[str, str] = {
    "AxisAssignment": ".axes",
    "AxisLayout": ".axes",
    "ProjectionView": ".projection",
    "REFERENCE_DATE": ".aggregation",
    "SeriesFilters": ".store",
    "SeriesStore": ".store",
    "SeriesSummary": ".statistics",
    "aggregate_points": ".aggregation",
    "aggregate_series": ".aggregation",
    "available_statistics": ".statistics",
    "default_range": ".axes",
    "export_csv": ".export",
    "export_excel": ".export",
    "project_axes": ".axes",
    "project_view": ".projection",
    "resolve_active_metric": ".axes",
    "select_active": ".store",
    "series_to_table": ".export",
    "series_total": ".statistics",
    "summarize_series": ".statistics",
    "table_to_records": ".export",
}


def __getattr__(name: str) -> Any:
    module_name = _MODULE_MAP.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(f"{__name__}{module_name}")
    value = getattr(module, name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:  # pragma: no cover - convenience
    return sorted(set(__all__ + list(globals().keys())))
