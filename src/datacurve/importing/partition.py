from __future__ import annotations
import logging
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.datetime_utils import format_date
from ..models import DataPoint, DimensionSet, ImportOptions, Series, new_series_id
from .classifier import ResolvedRow, resolve_record
from .units import infer_unit

logger = logging.getLogger(__name__)

MANUAL_IMPORT_LABEL = "manual import"


def source_label_from_name(name: Optional[str]) -> str:
    """File name without its extension; pasted data gets a fixed label."""
    if name is None:
        return MANUAL_IMPORT_LABEL
    text = str(name).strip()
    if not text:
        return MANUAL_IMPORT_LABEL
    pure = PurePath(text.replace("\\", "/"))
    stem = pure.stem if pure.suffix else pure.name
    return stem or MANUAL_IMPORT_LABEL


def compose_series_name(metric_name: str, dimensions: DimensionSet, source_label: str) -> str:
    parts = [metric_name]
    labels = dimensions.labels()
    if labels:
        parts.append(f"({', '.join(labels)})")
    parts.append(f"({source_label})")
    return " ".join(parts)


def resolve_records(
    records: Iterable[Mapping[str, Any]],
    options: Optional[ImportOptions] = None,
) -> Tuple[List[ResolvedRow], int]:
    """Resolve every record; returns the usable rows and how many were dropped."""
    rows: List[ResolvedRow] = []
    dropped = 0
    for record in records:
        if not isinstance(record, Mapping):
            dropped += 1
            continue
        row = resolve_record(record, options)
        if row is None:
            dropped += 1
            continue
        rows.append(row)
    return rows, dropped


def partition_rows(rows: Sequence[ResolvedRow], source_label: str) -> List[Series]:
    """Group resolved rows by (calendar date, dimension key) and split per metric.

    Groups, and metrics within a group, keep their first-appearance order;
    points keep row order.
    """
    groups: Dict[Tuple[str, str], List[ResolvedRow]] = {}
    group_dims: Dict[Tuple[str, str], DimensionSet] = {}
    for row in rows:
        key = (format_date(row.time), row.dimensions.key)
        if key not in groups:
            groups[key] = []
            group_dims[key] = row.dimensions
        groups[key].append(row)

    out: List[Series] = []
    for key, members in groups.items():
        date, _dim_key = key
        dimensions = group_dims[key]

        metrics: List[str] = []
        for row in members:
            for metric in row.values:
                if metric not in metrics:
                    metrics.append(metric)

        for metric in metrics:
            points = tuple(
                DataPoint(time=row.time, value=float(row.values[metric]))
                for row in members
                if metric in row.values
            )
            if not points:
                continue
            out.append(
                Series(
                    id=new_series_id(),
                    name=compose_series_name(metric, dimensions, source_label),
                    metric_name=metric,
                    unit=infer_unit(metric),
                    date=date,
                    dimensions=dimensions,
                    data=points,
                )
            )
    return out


def partition_records(
    records: Iterable[Mapping[str, Any]],
    source_name: Optional[str] = None,
    options: Optional[ImportOptions] = None,
) -> List[Series]:
    """Turn one import batch of raw records into named series.

    Rows without a usable timestamp or without any metric are skipped; a batch
    with nothing usable yields an empty list.
    """
    if records is None or isinstance(records, (str, bytes, Mapping)):
        return []
    options = options or ImportOptions()
    label = source_label_from_name(source_name if source_name is not None else options.source_label)
    rows, dropped = resolve_records(records, options)
    if dropped:
        logger.debug("Skipped %d unusable record(s) from %s", dropped, label)
    return partition_rows(rows, label)


__all__ = [
    "MANUAL_IMPORT_LABEL",
    "compose_series_name",
    "partition_records",
    "partition_rows",
    "resolve_records",
    "source_label_from_name",
]
