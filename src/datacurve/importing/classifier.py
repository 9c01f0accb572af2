"""Record-local field classification.

Every field of a raw record becomes a time component, a metric, a dimension
or is ignored. Time/date field names are checked before anything else, so a
field called ``date`` is never read as a metric even when its value looks
numeric. The remaining fields go through :data:`FIELD_RULES` in order.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from ..models import DimensionSet, ImportOptions
from .utils import cell_text, resolve_timestamp

logger = logging.getLogger(__name__)

DATE_FIELD_PRIORITY: Tuple[str, ...] = ("日期", "date", "Date", "day")
TIME_FIELD_PRIORITY: Tuple[str, ...] = ("时间", "time", "Time", "Timestamp", "timestamp")

# Case-insensitive substrings for the fallback scan over all field names.
FUZZY_TIME_TOKENS: Tuple[str, ...] = ("time", "date", "时间", "日期")

NA_TOKENS: FrozenSet[str] = frozenset({"-", "--", "nan", "null", "none", "n/a", "undefined"})

# Code-like fields carry no observation even when numeric (compared lower-cased).
EXCLUDED_FIELDS: FrozenSet[str] = frozenset(
    {
        "code",
        "weather_code",
        "weathercode",
        "weather code",
        "weather-code",
        "天气代码",
        "天气编码",
    }
)


class FieldRole(str, Enum):
    DATE = "date"
    TIME = "time"
    FUZZY_TIME = "fuzzy_time"
    IGNORED = "ignored"
    METRIC = "metric"
    DIMENSION = "dimension"


@dataclass(frozen=True)
class _RuleContext:
    na_tokens: FrozenSet[str]
    excluded: FrozenSet[str]
    decimal: Optional[str]


def is_na_token(value: Any, na_tokens: FrozenSet[str] = NA_TOKENS) -> bool:
    return cell_text(value).lower() in na_tokens


def parse_metric_value(value: Any, *, decimal: Optional[str] = None) -> Optional[float]:
    """Return ``value`` as a finite float, or None when it is not numeric."""
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    else:
        text = cell_text(value)
        if not text:
            return None
        if decimal == ",":
            text = text.replace(",", ".")
        number = pd.to_numeric(text, errors="coerce")
        try:
            number = float(number)
        except (TypeError, ValueError):
            return None
    return number if math.isfinite(number) else None


def _is_excluded_field(name: str, value: Any, ctx: _RuleContext) -> bool:
    return name.strip().lower() in ctx.excluded


def _is_metric_value(name: str, value: Any, ctx: _RuleContext) -> bool:
    if is_na_token(value, ctx.na_tokens):
        return False
    return parse_metric_value(value, decimal=ctx.decimal) is not None


def _is_dimension_value(name: str, value: Any, ctx: _RuleContext) -> bool:
    text = cell_text(value)
    return bool(text) and text.lower() not in ctx.na_tokens


# Evaluated top to bottom for every non-temporal field; no match -> ignored.
FIELD_RULES: Tuple[Tuple[FieldRole, Callable[[str, Any, _RuleContext], bool]], ...] = (
    (FieldRole.IGNORED, _is_excluded_field),
    (FieldRole.METRIC, _is_metric_value),
    (FieldRole.DIMENSION, _is_dimension_value),
)

CLASSIFICATION_PRECEDENCE: Tuple[FieldRole, ...] = (
    FieldRole.DATE,
    FieldRole.TIME,
    FieldRole.FUZZY_TIME,
) + tuple(role for role, _ in FIELD_RULES)


@dataclass(frozen=True)
class ClassifiedRecord:
    date_field: Optional[str] = None
    date_value: Optional[str] = None
    time_field: Optional[str] = None
    time_value: Optional[str] = None
    dimensions: DimensionSet = field(default_factory=DimensionSet)
    values: Dict[str, float] = field(default_factory=dict)

    @property
    def has_time(self) -> bool:
        return bool(self.date_value or self.time_value)

    @property
    def has_metrics(self) -> bool:
        return bool(self.values)


@dataclass(frozen=True)
class ResolvedRow:
    """A classified record anchored to a single timestamp."""

    time: pd.Timestamp
    dimensions: DimensionSet
    values: Dict[str, float]


def _context(options: Optional[ImportOptions]) -> _RuleContext:
    options = options or ImportOptions()
    na_tokens = frozenset(t.strip().lower() for t in options.na_tokens) if options.na_tokens else NA_TOKENS
    excluded = set(EXCLUDED_FIELDS)
    for name in options.excluded_fields or []:
        if name is None:
            continue
        text = str(name).strip().lower()
        if text:
            excluded.add(text)
    return _RuleContext(na_tokens=na_tokens, excluded=frozenset(excluded), decimal=options.csv_decimal)


def _first_present(record: Mapping[str, Any], names: Tuple[str, ...], na_tokens: FrozenSet[str]) -> Optional[str]:
    for name in names:
        if name not in record:
            continue
        text = cell_text(record[name])
        if text and text.lower() not in na_tokens:
            return name
    return None


def _fuzzy_time_field(record: Mapping[str, Any], na_tokens: FrozenSet[str]) -> Optional[str]:
    for name, value in record.items():
        lowered = str(name).lower()
        if not any(token in lowered for token in FUZZY_TIME_TOKENS):
            continue
        text = cell_text(value)
        if text and text.lower() not in na_tokens:
            return name
    return None


def classify_field(name: str, value: Any, options: Optional[ImportOptions] = None) -> FieldRole:
    """Role of one non-temporal field according to :data:`FIELD_RULES`."""
    return _classify_with(name, value, _context(options))


def _classify_with(name: str, value: Any, ctx: _RuleContext) -> FieldRole:
    for role, predicate in FIELD_RULES:
        if predicate(name, value, ctx):
            return role
    return FieldRole.IGNORED


def classify_record(record: Mapping[str, Any], options: Optional[ImportOptions] = None) -> ClassifiedRecord:
    ctx = _context(options)

    date_field = _first_present(record, DATE_FIELD_PRIORITY, ctx.na_tokens)
    time_field = _first_present(record, TIME_FIELD_PRIORITY, ctx.na_tokens)
    fuzzy_field = None
    if date_field is None and time_field is None:
        fuzzy_field = _fuzzy_time_field(record, ctx.na_tokens)

    temporal = set(DATE_FIELD_PRIORITY) | set(TIME_FIELD_PRIORITY)
    if fuzzy_field is not None:
        temporal.add(fuzzy_field)

    dimensions: Dict[str, str] = {}
    values: Dict[str, float] = {}
    for name, value in record.items():
        if name in temporal:
            continue
        role = _classify_with(str(name), value, ctx)
        if role is FieldRole.METRIC:
            values[str(name)] = parse_metric_value(value, decimal=ctx.decimal)
        elif role is FieldRole.DIMENSION:
            dimensions[str(name)] = cell_text(value)

    if fuzzy_field is not None:
        return ClassifiedRecord(
            time_field=fuzzy_field,
            time_value=cell_text(record[fuzzy_field]),
            dimensions=DimensionSet(dimensions),
            values=values,
        )
    return ClassifiedRecord(
        date_field=date_field,
        date_value=cell_text(record[date_field]) if date_field else None,
        time_field=time_field,
        time_value=cell_text(record[time_field]) if time_field else None,
        dimensions=DimensionSet(dimensions),
        values=values,
    )


def resolve_record(record: Mapping[str, Any], options: Optional[ImportOptions] = None) -> Optional[ResolvedRow]:
    """Classify and timestamp one record; None when it cannot yield a point."""
    options = options or ImportOptions()
    classified = classify_record(record, options)
    if not classified.has_metrics:
        logger.debug("Dropping record without metrics: %r", dict(record))
        return None
    ts = resolve_timestamp(
        classified.date_value,
        classified.time_value,
        dayfirst=options.assume_dayfirst,
        dot_time_as_colon=options.dot_time_as_colon,
    )
    if pd.isna(ts):
        logger.debug("Dropping record without a valid timestamp: %r", dict(record))
        return None
    return ResolvedRow(time=ts, dimensions=classified.dimensions, values=dict(classified.values))


__all__ = [
    "CLASSIFICATION_PRECEDENCE",
    "ClassifiedRecord",
    "DATE_FIELD_PRIORITY",
    "EXCLUDED_FIELDS",
    "FIELD_RULES",
    "FUZZY_TIME_TOKENS",
    "FieldRole",
    "NA_TOKENS",
    "ResolvedRow",
    "TIME_FIELD_PRIORITY",
    "classify_field",
    "classify_record",
    "is_na_token",
    "parse_metric_value",
    "resolve_record",
]
