from __future__ import annotations
import io
import json
import logging
import zipfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..models import ImportOptions, Series
from .partition import (
    MANUAL_IMPORT_LABEL,
    partition_rows,
    resolve_records,
    source_label_from_name,
)
from .utils import PathLike, as_path

logger = logging.getLogger(__name__)

RawRecord = Dict[str, Any]


class DataCurveError(Exception): ...
class DataImportError(DataCurveError): ...


# Common fallback encodings; gb18030 covers GBK exports from Chinese tools.
_CSV_ENCODING_FALLBACKS = ("utf-8-sig", "utf-8", "gb18030", "cp1252", "latin-1")

_PASTE_DELIMITERS = ("\t", ",", ";")

_CSV_SUFFIXES = {".csv", ".txt", ".tsv"}
_JSON_SUFFIXES = {".json"}
_EXCEL_SUFFIXES = {".xlsx"}


@dataclass
class ImportResult:
    """Outcome of one import batch."""

    series: List[Series] = field(default_factory=list)
    source_label: str = MANUAL_IMPORT_LABEL
    total_rows: int = 0
    dropped_rows: int = 0

    @property
    def is_empty(self) -> bool:
        """True when the batch produced no usable series at all."""
        return not self.series

    @property
    def usable_rows(self) -> int:
        return self.total_rows - self.dropped_rows

    def dates(self) -> List[str]:
        return sorted({s.date for s in self.series})


def _get_encoding_candidates(user_encoding: Optional[str]) -> List[str]:
    """
    Build list of encodings to try: user-specified first, then common fallbacks.
    This enables automatic encoding detection when a file contains non-UTF-8 characters.
    """
    encodings_to_try = []
    if user_encoding:
        encodings_to_try.append(user_encoding)
    for enc in _CSV_ENCODING_FALLBACKS:
        if enc not in encodings_to_try:
            encodings_to_try.append(enc)
    return encodings_to_try


def _frame_to_records(df: pd.DataFrame) -> List[RawRecord]:
    """Header-keyed records with empty cells turned into None."""
    if df is None or df.empty:
        return []
    df = df.rename(columns=lambda c: str(c).strip())
    records: List[RawRecord] = []
    for row in df.to_dict(orient="records"):
        records.append({k: (None if v is None or v == "" else v) for k, v in row.items()})
    return records


def _read_csv_kwargs(delimiter: Optional[str]) -> dict:
    return dict(
        sep=delimiter or ",",
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        engine="python" if delimiter and len(delimiter) > 1 else "c",
    )


def read_csv_records(file_path: PathLike, options: Optional[ImportOptions] = None) -> List[RawRecord]:
    """Read a header-bearing CSV into raw records, trying several encodings."""
    options = options or ImportOptions()
    path = as_path(file_path)
    read_kwargs = _read_csv_kwargs(options.csv_delimiter)

    last_error: Optional[Exception] = None
    for encoding in _get_encoding_candidates(options.csv_encoding):
        try:
            df = pd.read_csv(path, encoding=encoding, **read_kwargs)
        except UnicodeDecodeError as exc:
            # This encoding failed, try the next one
            last_error = exc
            continue
        except pd.errors.EmptyDataError:
            return []
        except (pd.errors.ParserError, OSError) as exc:
            logger.error("Could not read CSV %s", path, exc_info=True)
            raise DataImportError(f"Could not read CSV {path.name}: {exc}") from exc
        logger.debug("Read %s with encoding %s (%d rows)", path.name, encoding, len(df))
        return _frame_to_records(df)

    raise DataImportError(f"Could not decode {path.name} with any known encoding") from last_error


def read_excel_records(file_path: PathLike, sheet_name: int | str = 0) -> List[RawRecord]:
    """Read one worksheet of an .xlsx workbook; the first row holds the field names."""
    path = as_path(file_path)
    try:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype=str, keep_default_na=False, engine="openpyxl")
    except (OSError, ValueError, KeyError, zipfile.BadZipFile) as exc:
        logger.error("Could not read workbook %s", path, exc_info=True)
        raise DataImportError(f"Could not read {path.name}: {exc}") from exc
    logger.debug("Read %s sheet %r (%d rows)", path.name, sheet_name, len(df))
    return _frame_to_records(df)


def _records_from_json_payload(payload: Any, origin: str) -> List[RawRecord]:
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        payload = payload["data"]
    if not isinstance(payload, list):
        raise DataImportError(f"{origin}: expected a JSON array of objects")
    return [item for item in payload if isinstance(item, dict)]


def read_json_records(file_path: PathLike) -> List[RawRecord]:
    path = as_path(file_path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Could not read JSON %s", path, exc_info=True)
        raise DataImportError(f"Could not read {path.name}: {exc}") from exc
    if not text.strip():
        return []
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataImportError(f"{path.name} is not valid JSON: {exc}") from exc
    return _records_from_json_payload(payload, path.name)


def _sniff_delimiter(text: str) -> str:
    header = next((line for line in text.splitlines() if line.strip()), "")
    counts = {d: header.count(d) for d in _PASTE_DELIMITERS}
    best = max(_PASTE_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def parse_text_to_records(
    text: str,
    fmt: Optional[str] = None,
    options: Optional[ImportOptions] = None,
) -> List[RawRecord]:
    """Parse pasted text (JSON or delimited) into raw records."""
    options = options or ImportOptions()
    body = (text or "").strip()
    if not body:
        return []
    kind = (fmt or "").strip().lower()
    if not kind:
        kind = "json" if body[0] in "[{" else "csv"

    if kind == "json":
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            raise DataImportError(f"Pasted data is not valid JSON: {exc}") from exc
        return _records_from_json_payload(payload, "pasted data")
    if kind != "csv":
        raise DataImportError(f"Unsupported paste format: {fmt!r}")

    delimiter = options.csv_delimiter or _sniff_delimiter(body)
    try:
        df = pd.read_csv(io.StringIO(body), **_read_csv_kwargs(delimiter))
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as exc:
        raise DataImportError(f"Could not parse pasted table: {exc}") from exc
    return _frame_to_records(df)


def import_records(records: List[RawRecord], options: Optional[ImportOptions] = None) -> ImportResult:
    """Partition already-parsed records and report what was kept."""
    options = options or ImportOptions()
    label = source_label_from_name(options.source_label)
    rows, dropped = resolve_records(records, options)
    series = partition_rows(rows, label)
    result = ImportResult(
        series=series,
        source_label=label,
        total_rows=len(records),
        dropped_rows=dropped,
    )
    if result.is_empty:
        logger.warning("No valid series produced from %s (%d row(s) read)", label, len(records))
    else:
        logger.info(
            "Imported %s: %d row(s), %d dropped, %d series across %d date(s)",
            label,
            result.total_rows,
            result.dropped_rows,
            len(series),
            len(result.dates()),
        )
    return result


def import_file(file_path: PathLike, options: Optional[ImportOptions] = None) -> ImportResult:
    """Read a CSV, JSON or .xlsx file and partition it into series."""
    path = as_path(file_path)
    options = options or ImportOptions()
    suffix = path.suffix.lower()
    if suffix in _CSV_SUFFIXES:
        if suffix == ".tsv" and not options.csv_delimiter:
            options = replace(options, csv_delimiter="\t")
        records = read_csv_records(path, options)
    elif suffix in _JSON_SUFFIXES:
        records = read_json_records(path)
    elif suffix in _EXCEL_SUFFIXES:
        records = read_excel_records(path)
    else:
        raise DataImportError(f"Unsupported file type: {path.name}")

    if options.source_label is None:
        options = replace(options, source_label=path.name)
    return import_records(records, options)


def import_text(text: str, options: Optional[ImportOptions] = None, *, fmt: Optional[str] = None) -> ImportResult:
    """Import pasted text; labelled as a manual import unless a label is given."""
    options = options or ImportOptions()
    records = parse_text_to_records(text, fmt=fmt, options=options)
    return import_records(records, options)


__all__ = [
    "DataCurveError",
    "DataImportError",
    "ImportResult",
    "import_file",
    "import_records",
    "import_text",
    "parse_text_to_records",
    "read_csv_records",
    "read_excel_records",
    "read_json_records",
]
