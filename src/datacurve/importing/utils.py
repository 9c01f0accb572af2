from __future__ import annotations
import math
import re
import warnings
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from ..core.datetime_utils import drop_timezone_preserving_wall

PathLike = Union[str, Path]

_EPOCH_S_LO = 10**9
_EPOCH_S_HI = 2_000_000_000
_EPOCH_MS_LO = 10**12
_EPOCH_MS_HI = 2_000_000_000_000


_DOT_TIME_RE = re.compile(
    r"""
    ^\s*
    (?P<datepart>.+?)      # anything up to a space separates date/time
    \s+
    (?P<h>\d{1,2})
    \.(?P<m>\d{2})
    (?:\.(?P<s>\d{2}))?
    \s*$
    """,
    re.VERBOSE,
)

# Also support pure time like "9.00" without date.
_PURE_DOT_TIME_RE = re.compile(r"^\s*(?P<h>\d{1,2})\.(?P<m>\d{2})(?:\.(?P<s>\d{2}))?\s*$")

# A clock time with nothing to anchor it to a calendar day.
_BARE_CLOCK_RE = re.compile(r"^\s*\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?\s*$")

_ISO_LEADING_DATE_RE = re.compile(r"^\s*\d{4}[-/.]\d{1,2}[-/.]\d{1,2}(?:\D|$)")

# Year-first dash dates; only the date separators are rewritten, never offsets.
_DASH_DATE_RE = re.compile(r"^(\s*)(\d{4})-(\d{1,2})-(\d{1,2})(?:(T)(?=\d)|(?=\D|$))")


def _rewrite_dot_time_to_colon(s: str) -> str:
    """
    Convert European style 'HH.MM' or 'H.MM.SS' into 'HH:MM[:SS]'.
    Works whether a date part precedes it or not.
    """
    if not isinstance(s, str):
        return s

    m = _DOT_TIME_RE.match(s)
    if m:
        h = m.group("h")
        mnt = m.group("m")
        sec = m.group("s")
        time_part = f"{int(h):02d}:{int(mnt):02d}" + (f":{int(sec):02d}" if sec else "")
        return f"{m.group('datepart')} {time_part}"

    pm = _PURE_DOT_TIME_RE.match(s)
    if pm:
        h = pm.group("h")
        mnt = pm.group("m")
        sec = pm.group("s")
        return f"{int(h):02d}:{int(mnt):02d}" + (f":{int(sec):02d}" if sec else "")

    return s


def normalize_date_separators(text: str) -> str:
    """Rewrite a leading ``yyyy-M-d`` (or ISO ``yyyy-M-dT``) date as ``yyyy/M/d``."""

    def _swap(m: re.Match) -> str:
        sep = " " if m.group(5) else ""
        return f"{m.group(1)}{m.group(2)}/{m.group(3)}/{m.group(4)}{sep}"

    return _DASH_DATE_RE.sub(_swap, text, count=1)


def _looks_epoch(value) -> Optional[str]:
    try:
        if value is None or pd.isna(value):
            return None
        parsed = float(str(value).strip())
        if _EPOCH_S_LO <= parsed <= _EPOCH_S_HI:
            return "s"
        if _EPOCH_MS_LO <= parsed <= _EPOCH_MS_HI:
            return "ms"
    except (TypeError, ValueError):
        return None
    return None


def _from_epoch(value, unit: str) -> pd.Timestamp:
    seconds = float(str(value).strip())
    if unit == "ms":
        seconds /= 1000.0
    # Local wall clock, matching how string timestamps are interpreted.
    return pd.Timestamp(datetime.fromtimestamp(seconds))


def _parse_single_datetime_mixed(x, *, dayfirst: bool):
    """Parse one datetime-like value with robust day/month handling."""
    if x is None:
        return pd.NaT
    if isinstance(x, float) and pd.isna(x):
        return pd.NaT

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        # For leading YYYY-MM-DD style values, prefer year-first semantics.
        if isinstance(x, str) and _ISO_LEADING_DATE_RE.match(x):
            p = pd.to_datetime(
                x,
                errors="coerce",
                dayfirst=False,
                format="mixed",
                utc=False,
            )
            if not pd.isna(p):
                return p

        p = pd.to_datetime(
            x,
            errors="coerce",
            dayfirst=dayfirst,
            format="mixed",
            utc=False,
        )
        if pd.isna(p):
            p = pd.to_datetime(
                x,
                errors="coerce",
                dayfirst=not dayfirst,
                format="mixed",
                utc=False,
            )
    return p


def cell_text(x) -> str:
    """Raw cell as stripped text; missing values become ''."""
    if x is None:
        return ""
    if isinstance(x, float) and math.isnan(x):
        return ""
    return str(x).replace("\xa0", " ").strip()


def combine_date_time(date_part, time_part) -> str:
    date_text = cell_text(date_part)
    time_text = cell_text(time_part)
    if date_text and time_text:
        return f"{date_text} {time_text}"
    return date_text or time_text


def resolve_timestamp(
    date_part=None,
    time_part=None,
    *,
    dayfirst: bool = False,
    dot_time_as_colon: bool = True,
):
    """Combine a record's date and time components into one naive timestamp.

    Returns ``pd.NaT`` when nothing parseable is present. The result keeps the
    wall-clock time written in the source; any UTC offset is discarded.
    """
    text = combine_date_time(date_part, time_part)
    if not text:
        return pd.NaT

    unit = _looks_epoch(text)
    if unit:
        try:
            return _from_epoch(text, unit)
        except (OverflowError, OSError, ValueError):
            return pd.NaT

    if dot_time_as_colon:
        text = _rewrite_dot_time_to_colon(text)
    if _BARE_CLOCK_RE.match(text):
        return pd.NaT
    text = normalize_date_separators(text)

    try:
        parsed = _parse_single_datetime_mixed(text, dayfirst=dayfirst)
    except (ValueError, OverflowError, TypeError):
        return pd.NaT
    if parsed is None or pd.isna(parsed):
        return pd.NaT
    return drop_timezone_preserving_wall(pd.Timestamp(parsed))


def as_path(p: PathLike) -> Path:
    return p if isinstance(p, Path) else Path(p)


__all__ = [
    "as_path",
    "cell_text",
    "combine_date_time",
    "normalize_date_separators",
    "resolve_timestamp",
]
