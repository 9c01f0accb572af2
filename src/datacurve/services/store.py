from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..models import Series

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesStore:
    """Immutable collection of imported series; edits return a new store."""

    series: Tuple[Series, ...] = ()

    def __iter__(self) -> Iterator[Series]:
        return iter(self.series)

    def __len__(self) -> int:
        return len(self.series)

    def add(self, new_series: Iterable[Series]) -> "SeriesStore":
        known = {s.id for s in self.series}
        merged = list(self.series)
        for s in new_series:
            if s.id in known:
                logger.warning("Series id %s already in store; keeping the existing one", s.id)
                continue
            known.add(s.id)
            merged.append(s)
        return SeriesStore(tuple(merged))

    def remove(self, ids: Iterable[str]) -> "SeriesStore":
        drop = set(ids)
        return SeriesStore(tuple(s for s in self.series if s.id not in drop))

    def replace(self, updated: Series) -> "SeriesStore":
        return SeriesStore(tuple(updated if s.id == updated.id else s for s in self.series))

    def clear(self) -> "SeriesStore":
        return SeriesStore()

    def get(self, series_id: str) -> Optional[Series]:
        for s in self.series:
            if s.id == series_id:
                return s
        return None

    def dates(self) -> List[str]:
        return sorted({s.date for s in self.series})

    def metrics(self) -> List[str]:
        out: List[str] = []
        for s in self.series:
            if s.metric_name not in out:
                out.append(s.metric_name)
        return out

    def dimension_values(self) -> Dict[str, List[str]]:
        values: Dict[str, set] = {}
        for s in self.series:
            for key, value in s.dimensions.items():
                values.setdefault(key, set()).add(value)
        return {key: sorted(vals) for key, vals in sorted(values.items())}


@dataclass(frozen=True)
class SeriesFilters:
    """Which stored series are on screen; None means no restriction."""

    dates: Optional[Sequence[str]] = None
    dimensions: Optional[Mapping[str, Sequence[str]]] = None
    metrics: Optional[Sequence[str]] = None
    hidden_ids: Optional[Sequence[str]] = None


def _matches_dimensions(series: Series, wanted: Mapping[str, Sequence[str]]) -> bool:
    for key, allowed in wanted.items():
        if allowed is None:
            continue
        allowed_set = {str(v) for v in allowed}
        if series.dimensions.get(key) not in allowed_set:
            return False
    return True


def select_active(store: SeriesStore | Iterable[Series], filters: Optional[SeriesFilters] = None) -> List[Series]:
    """Series passing ``filters``, in store order.

    Series lacking a dimension that the filter lists values for are excluded.
    """
    filters = filters or SeriesFilters()
    dates = set(filters.dates) if filters.dates is not None else None
    metrics = set(filters.metrics) if filters.metrics is not None else None
    hidden = set(filters.hidden_ids or ())

    out: List[Series] = []
    for s in store:
        if dates is not None and s.date not in dates:
            continue
        if metrics is not None and s.metric_name not in metrics:
            continue
        if s.id in hidden:
            continue
        if filters.dimensions and not _matches_dimensions(s, filters.dimensions):
            continue
        out.append(s)
    return out


__all__ = ["SeriesFilters", "SeriesStore", "select_active"]
