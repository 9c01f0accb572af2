"""Helpers for importing time-stamped measurement tables."""

from .classifier import classify_record, resolve_record
from .parsers import (
    DataCurveError,
    DataImportError,
    ImportResult,
    import_file,
    import_records,
    import_text,
    parse_text_to_records,
    read_csv_records,
    read_excel_records,
    read_json_records,
)
from .partition import MANUAL_IMPORT_LABEL, partition_records, source_label_from_name
from .units import infer_unit
from .utils import resolve_timestamp

__all__ = [
    "DataCurveError",
    "DataImportError",
    "ImportResult",
    "MANUAL_IMPORT_LABEL",
    "classify_record",
    "import_file",
    "import_records",
    "import_text",
    "infer_unit",
    "parse_text_to_records",
    "partition_records",
    "read_csv_records",
    "read_excel_records",
    "read_json_records",
    "resolve_record",
    "resolve_timestamp",
    "source_label_from_name",
]
