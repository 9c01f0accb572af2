from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class Granularity(str, Enum):
    """Temporal resolution used when projecting series for display."""

    HOUR = "hour"  # native precision, no aggregation
    DAY = "day"
    MONTH = "month"

    @classmethod
    def parse(cls, value: "Granularity | str | None") -> "Granularity":
        if value is None or value == "":
            return cls.HOUR
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown granularity: {value!r}")


@dataclass
class ImportOptions:
    # lineage; None means pasted data
    source_label: Optional[str] = None

    # Timestamp handling
    assume_dayfirst: bool = False
    # Treat "9.00" as "9:00" etc. When False we won't rewrite dot-separated times.
    dot_time_as_colon: bool = True

    # CSV reader hints
    csv_delimiter: Optional[str] = None
    csv_decimal: Optional[str] = None
    csv_encoding: Optional[str] = None

    # Field names (case-insensitive) skipped on top of the built-in code fields.
    excluded_fields: Optional[List[str]] = None

    # Replaces the built-in not-applicable tokens when set.
    na_tokens: Optional[FrozenSet[str]] = None


@dataclass(frozen=True)
class AxisRangeOverride:
    """Manual bounds for one metric axis; None keeps the computed bound."""

    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def to_dict(self) -> dict:
        return {"min_value": self.min_value, "max_value": self.max_value}

    @classmethod
    def from_dict(cls, payload: Optional[dict]) -> "AxisRangeOverride":
        payload = dict(payload or {})
        min_value = payload.get("min_value")
        max_value = payload.get("max_value")
        try:
            if min_value is not None:
                min_value = float(min_value)
        except (TypeError, ValueError):
            min_value = None
        try:
            if max_value is not None:
                max_value = float(max_value)
        except (TypeError, ValueError):
            max_value = None
        return cls(min_value=min_value, max_value=max_value)


@dataclass
class ProjectionOptions:
    granularity: Granularity = Granularity.HOUR
    # Remap all dates onto one reference day when more than one date is shown.
    overlap: bool = False
    # Global multiplier applied to every computed axis bound.
    axis_scale: float = 1.0
    range_overrides: Dict[str, AxisRangeOverride] = field(default_factory=dict)
    # Hovered/clicked metric whose axis should be shown.
    focus_metric: Optional[str] = None
    visibility: Dict[str, bool] = field(default_factory=dict)


__all__ = [
    "AxisRangeOverride",
    "Granularity",
    "ImportOptions",
    "ProjectionOptions",
]
