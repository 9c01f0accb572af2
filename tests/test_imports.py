"""Tests for reading CSV/JSON files and pasted text into series."""
from pathlib import Path
import sys
import json

import pandas as pd
import pytest

sys.path.insert(0, str((Path(__file__).parent.parent / "src").resolve()))

from datacurve.importing import (
    DataImportError,
    MANUAL_IMPORT_LABEL,
    import_file,
    import_text,
    parse_text_to_records,
    read_csv_records,
)
from datacurve.models import ImportOptions


CSV_TEXT = (
    "城市,日期,时间,温度(°C),天气代码,备注\n"
    "南宁,2026-01-28,00:00,12.4,3,\n"
    "南宁,2026-01-28,01:00,12.1,3,--\n"
    "南宁,2026-01-29,00:00,11.0,1,\n"
    "\n"
    "南宁,,,n/a,1,\n"
)


def test_import_csv_file(tmp_path):
    path = tmp_path / "weather.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")

    result = import_file(path)

    assert result.source_label == "weather"
    assert result.total_rows == 4
    assert result.dropped_rows == 1
    assert result.usable_rows == 3
    assert result.dates() == ["2026-01-28", "2026-01-29"]
    assert [len(s.data) for s in result.series] == [2, 1]
    s = result.series[0]
    assert s.name == "温度(°C) (南宁) (weather)"
    assert s.unit == "°C"
    assert dict(s.dimensions) == {"城市": "南宁"}


def test_read_csv_records_keeps_text_and_blanks(tmp_path):
    path = tmp_path / "a.csv"
    path.write_text(" a ,b\n001,\n", encoding="utf-8")
    assert read_csv_records(path) == [{"a": "001", "b": None}]


def test_gb18030_file_is_decoded(tmp_path):
    path = tmp_path / "gbk.csv"
    path.write_bytes("时间,功率\n2026-01-28 08:00,35.5\n".encode("gb18030"))

    result = import_file(path)

    assert len(result.series) == 1
    assert result.series[0].metric_name == "功率"
    assert result.series[0].unit == "MW"


def test_explicit_encoding_and_delimiter(tmp_path):
    path = tmp_path / "semi.txt"
    path.write_bytes("time;value\n2026-01-28 08:00;1,5\n".encode("cp1252"))
    options = ImportOptions(csv_encoding="cp1252", csv_delimiter=";", csv_decimal=",")

    result = import_file(path, options)

    assert result.series[0].values() == [1.5]


def test_tsv_file(tmp_path):
    path = tmp_path / "t.tsv"
    path.write_text("time\tv\n2026-01-28 08:00\t2\n", encoding="utf-8")
    assert import_file(path).series[0].values() == [2.0]


def test_import_json_file(tmp_path):
    path = tmp_path / "load.json"
    rows = [
        {"time": "2026-01-29 10:00", "value": 1},
        {"time": "2026-01-29 11:00", "value": "2"},
        {"time": "2026-01-30 09:00", "value": 3},
    ]
    path.write_text(json.dumps({"data": rows}), encoding="utf-8")

    result = import_file(path)

    assert [s.date for s in result.series] == ["2026-01-29", "2026-01-30"]
    assert result.series[0].name == "value (load)"


def test_json_must_hold_an_array(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"rows": []}), encoding="utf-8")
    with pytest.raises(DataImportError):
        import_file(path)

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DataImportError):
        import_file(path)


def test_unsupported_file_type(tmp_path):
    path = tmp_path / "data.parquet"
    path.write_bytes(b"")
    with pytest.raises(DataImportError):
        import_file(path)


def test_corrupt_workbook_raises(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(DataImportError):
        import_file(path)


def test_import_excel_file(tmp_path):
    path = tmp_path / "readings.xlsx"
    frame = pd.DataFrame(
        {"日期": ["2026-01-28", "2026-01-28"], "时间": ["08:00", "09:00"], "站点": ["S1", "S1"], "功率": [10.5, 12.0]}
    )
    frame.to_excel(path, index=False, engine="openpyxl")

    result = import_file(path)

    (s,) = result.series
    assert s.name == "功率 (S1) (readings)"
    assert s.values() == [10.5, 12.0]


def test_missing_file_raises(tmp_path):
    with pytest.raises(DataImportError):
        import_file(tmp_path / "nope.csv")


def test_empty_files_yield_empty_results(tmp_path):
    csv_path = tmp_path / "empty.csv"
    csv_path.write_text("", encoding="utf-8")
    json_path = tmp_path / "empty.json"
    json_path.write_text("[]", encoding="utf-8")

    assert import_file(csv_path).is_empty
    assert import_file(json_path).is_empty


def test_paste_delimited_text():
    text = "time\tcity\ttemp\n2026-01-28 01:00\tA\t1.5\n2026-01-28 02:00\tA\t2.5\n"
    result = import_text(text)
    assert result.source_label == MANUAL_IMPORT_LABEL
    assert result.series[0].name == f"temp (A) ({MANUAL_IMPORT_LABEL})"
    assert result.series[0].values() == [1.5, 2.5]


def test_paste_json_text():
    result = import_text('[{"Date": "2026-01-29 12:00", "RandomLabel": "X", "SecretValue": "42.5"}]')
    (s,) = result.series
    assert s.metric_name == "SecretValue"
    assert s.values() == [42.5]
    assert s.data[0].time == pd.Timestamp("2026-01-29 12:00")


def test_paste_delimiter_sniffing():
    assert parse_text_to_records("a;b\n1;2") == [{"a": "1", "b": "2"}]
    assert parse_text_to_records("a,b\n1,2") == [{"a": "1", "b": "2"}]
    assert parse_text_to_records("   ") == []


def test_paste_with_explicit_label_and_bad_format():
    result = import_text("time,v\n2026-01-28 01:00,1", ImportOptions(source_label="clipboard.csv"))
    assert result.series[0].name == "v (clipboard)"
    with pytest.raises(DataImportError):
        import_text("time,v", fmt="xml")


def test_all_na_paste_is_reported_empty():
    result = import_text("time,v\n2026-01-28 01:00,null\n2026-01-28 02:00,-")
    assert result.is_empty
    assert result.dropped_rows == 2
