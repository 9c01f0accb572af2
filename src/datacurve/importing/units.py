"""Display units for metric names.

An explicit parenthetical in the header wins (``温度(°C)`` -> ``°C``);
otherwise the name is matched against :data:`UNIT_KEYWORDS`.
"""

from __future__ import annotations
import re
from typing import Optional, Sequence, Tuple

# Innermost-bracket contents, ASCII or full-width parentheses.
_PAREN_RE = re.compile(r"[(（]([^()（）]*)[)）]")

# Ordered: first substring hit wins.
UNIT_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("温度", "℃"),
    ("湿度", "%"),
    ("功率", "MW"),
    ("出清曲线", "MW"),
    ("短期预测", "MW"),
    ("雨量", "mm"),
    ("降水", "mm"),
    ("电压", "V"),
    ("电流", "A"),
    ("压力", "Pa"),
    ("转速", "rpm"),
    ("辐照度", "W/m²"),
    ("风速", "m/s"),
)


def unit_from_parenthetical(name: str) -> Optional[str]:
    """Contents of the first non-blank parenthetical, unchanged."""
    for contents in _PAREN_RE.findall(name or ""):
        if contents.strip():
            return contents
    return None


def unit_from_keywords(name: str, table: Sequence[Tuple[str, str]] = UNIT_KEYWORDS) -> Optional[str]:
    text = name or ""
    for keyword, unit in table:
        if keyword in text:
            return unit
    return None


def infer_unit(metric_name: str) -> str:
    """Return the display unit for ``metric_name`` ('' when unknown)."""
    return unit_from_parenthetical(metric_name) or unit_from_keywords(metric_name) or ""


def strip_unit(metric_name: str) -> str:
    """Metric name without its parenthetical unit, e.g. ``温度(°C)`` -> ``温度``."""
    base = _PAREN_RE.sub("", metric_name or "").strip()
    return base or (metric_name or "")


__all__ = [
    "UNIT_KEYWORDS",
    "infer_unit",
    "strip_unit",
    "unit_from_keywords",
    "unit_from_parenthetical",
]
