from __future__ import annotations
import math
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

# Grouping key of a row without any categorical attributes.
DEFAULT_DIMENSION_KEY = "default"


def new_series_id() -> str:
    """Random identifier; unique within a store and across merged imports."""
    return uuid.uuid4().hex


def _escape_key_part(text: str) -> str:
    # Separators inside names or values must not collide with the join.
    return text.replace("\\", "\\\\").replace("|", "\\|").replace(":", "\\:")


class DimensionSet(Mapping):
    """Categorical attributes of a series (field name -> text value).

    Iteration follows insertion order, but equality and hashing use the
    sorted ``key:value`` join so two sets built in different orders match.
    """

    def __init__(self, items: Optional[Mapping | Iterable[Tuple[str, str]]] = None) -> None:
        pairs = items.items() if isinstance(items, Mapping) else (items or ())
        self._items: Dict[str, str] = {str(k): str(v) for k, v in pairs}

    def __getitem__(self, name: str) -> str:
        return self._items[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DimensionSet):
            return self.key == other.key
        if isinstance(other, Mapping):
            return self._items == {str(k): str(v) for k, v in other.items()}
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"DimensionSet({self._items!r})"

    @cached_property
    def key(self) -> str:
        if not self._items:
            return DEFAULT_DIMENSION_KEY
        return "|".join(f"{_escape_key_part(k)}:{_escape_key_part(self._items[k])}" for k in sorted(self._items))

    def labels(self) -> List[str]:
        """Values ordered by field name, as used in display names."""
        return [self._items[k] for k in sorted(self._items)]

    def to_dict(self) -> Dict[str, str]:
        return dict(self._items)


@dataclass(frozen=True)
class DataPoint:
    time: pd.Timestamp
    value: float
    # Number of raw observations folded into this point by aggregation.
    sample_count: int = 1

    def to_dict(self) -> dict:
        payload = {"time": pd.Timestamp(self.time).isoformat(), "value": float(self.value)}
        if self.sample_count != 1:
            payload["sample_count"] = int(self.sample_count)
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DataPoint":
        time = pd.Timestamp(payload.get("time")) if payload.get("time") is not None else pd.NaT
        if pd.isna(time):
            raise ValueError(f"DataPoint needs a valid time, got {payload.get('time')!r}")
        value = float(payload["value"])
        if not math.isfinite(value):
            raise ValueError(f"DataPoint needs a finite value, got {payload['value']!r}")
        sample_count = int(payload.get("sample_count", 1))
        if sample_count < 1:
            raise ValueError(f"sample_count must be at least 1, got {sample_count}")
        return cls(time=time, value=value, sample_count=sample_count)


@dataclass(frozen=True)
class Series:
    """One single-date, single-metric, single-dimension-combination curve."""

    id: str = field(compare=False)
    name: str
    metric_name: str
    unit: str
    date: str
    dimensions: DimensionSet
    data: Tuple[DataPoint, ...]

    @property
    def dimension_key(self) -> str:
        return self.dimensions.key

    def values(self) -> List[float]:
        return [p.value for p in self.data]

    def to_frame(self) -> pd.DataFrame:
        """Points as a ``t``/``v`` frame in import order."""
        return pd.DataFrame(
            {
                "t": pd.to_datetime([p.time for p in self.data]),
                "v": [float(p.value) for p in self.data],
                "n": [int(p.sample_count) for p in self.data],
            }
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "metric_name": self.metric_name,
            "unit": self.unit,
            "date": self.date,
            "dimensions": self.dimensions.to_dict(),
            "data": [p.to_dict() for p in self.data],
        }

    @classmethod
    def from_dict(cls, payload: Optional[dict]) -> "Series":
        payload = dict(payload or {})
        if not payload.get("id"):
            raise ValueError("id is required for Series")
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            metric_name=str(payload.get("metric_name", "")),
            unit=str(payload.get("unit") or ""),
            date=str(payload.get("date", "")),
            dimensions=DimensionSet(payload.get("dimensions") or {}),
            data=tuple(DataPoint.from_dict(p) for p in payload.get("data") or []),
        )


@dataclass(frozen=True)
class ProjectedSeries:
    """A series after aggregation/overlap, ready for a charting collaborator."""

    series_id: str
    name: str
    metric_name: str
    unit: str
    date: str
    dimensions: DimensionSet
    data: Tuple[DataPoint, ...]

    def values(self) -> List[float]:
        return [p.value for p in self.data]


__all__ = [
    "DEFAULT_DIMENSION_KEY",
    "DataPoint",
    "DimensionSet",
    "ProjectedSeries",
    "Series",
    "new_series_id",
]
