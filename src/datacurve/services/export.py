from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from ..core.datetime_utils import format_time
from ..importing.utils import PathLike, as_path
from ..models import Series

logger = logging.getLogger(__name__)

DATE_COLUMN = "date"
TIME_COLUMN = "time"


def series_to_table(series: Sequence[Series]) -> pd.DataFrame:
    """Flatten series into one row per (date, time, dimension values).

    Columns: ``date``, ``time``, dimension fields (sorted), then metrics in
    first-appearance order. Repeated timestamps within a group get their own
    rows so nothing is overwritten.

    A field that is a dimension in some rows and a metric in others shares
    one column: text cells re-import as the dimension, numeric cells as the
    metric. A series whose own dimensions contain its metric name cannot be
    flattened and raises ``ValueError``.
    """
    dim_cols = sorted({key for s in series for key in s.dimensions})
    metric_cols: List[str] = []
    for s in series:
        if s.metric_name in s.dimensions:
            raise ValueError(f"Series {s.name!r} uses {s.metric_name!r} as both metric and dimension")
        if s.metric_name not in metric_cols and s.metric_name not in dim_cols:
            metric_cols.append(s.metric_name)

    rows: Dict[Tuple, Dict[str, Any]] = {}
    seen: Dict[Tuple, int] = {}
    for s in series:
        # Empty cells of shared columns stay empty until the metric fills them.
        dims = tuple(s.dimensions.get(k, "") for k in dim_cols)
        for point in s.data:
            base = (s.date, format_time(point.time), dims)
            occurrence = seen.get((base, s.metric_name), 0)
            seen[(base, s.metric_name)] = occurrence + 1
            key = (base, occurrence)
            row = rows.get(key)
            if row is None:
                row = {DATE_COLUMN: base[0], TIME_COLUMN: base[1]}
                row.update({k: v for k, v in zip(dim_cols, dims)})
                rows[key] = row
            row[s.metric_name] = float(point.value)

    columns = [DATE_COLUMN, TIME_COLUMN, *dim_cols, *metric_cols]
    if not rows:
        return pd.DataFrame(columns=columns)
    table = pd.DataFrame(list(rows.values()), columns=columns)
    # Shared columns mix text and floats, so order on the text form.
    return table.sort_values(
        [DATE_COLUMN, TIME_COLUMN, *dim_cols], kind="stable", key=lambda col: col.astype(str)
    ).reset_index(drop=True)


def table_to_records(table: pd.DataFrame) -> List[Dict[str, Any]]:
    """Rows of an exported table as raw records (missing cells -> None)."""
    if table is None or table.empty:
        return []
    data = table.astype(object).where(pd.notna(table), None)
    return data.to_dict(orient="records")


def export_csv(series: Sequence[Series], file_path: PathLike) -> Path:
    path = as_path(file_path)
    table = series_to_table(series)
    path.parent.mkdir(parents=True, exist_ok=True)
    # BOM so spreadsheet tools detect UTF-8 with CJK headers.
    table.to_csv(path, index=False, encoding="utf-8-sig")
    logger.info("Exported %d series (%d rows) to %s", len(series), len(table), path)
    return path


def export_excel(series: Sequence[Series], file_path: PathLike, *, sheet_name: str = "data") -> Path:
    path = as_path(file_path)
    if path.suffix.lower() != ".xlsx":
        path = path.with_suffix(".xlsx")
    table = series_to_table(series)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        table.to_excel(writer, sheet_name=sheet_name, index=False)
    logger.info("Exported %d series (%d rows) to %s", len(series), len(table), path)
    return path


__all__ = [
    "DATE_COLUMN",
    "TIME_COLUMN",
    "export_csv",
    "export_excel",
    "series_to_table",
    "table_to_records",
]
