"""Tests for text tables and file loaders"""
import io
import pytest
import pandas as pd

from ingest.errors import EmptyInputError, MalformedInputError
from ingest.loaders import ingest_file, ingest_text, load_csv, load_excel, load_file, load_json
from ingest.models import ColumnType
from ingest.text_parser import detect_delimiter, parse_text_table

class TestDelimiterDetection:
    def test_picks_delimiter_with_most_fields(self):
        assert detect_delimiter("a|b|c") == "|"
        assert detect_delimiter("a\tb\tc") == "\t"
        assert detect_delimiter("a;b;c,d") == ";"

    def test_ties_keep_earlier_candidate(self):
        assert detect_delimiter("a,b;c") == ","
        assert detect_delimiter("no delimiters here") == ","

def test_pipe_separated_text():
    text = "\n\nname | score | date\nann | 90 | 2024-01-02\n   \nbob | 85 | 2024-01-03\n"
    records = parse_text_table(text)
    assert len(records) == 2
    assert list(records[0].keys())[0].strip() == "name"

def test_text_needs_two_lines():
    with pytest.raises(MalformedInputError):
        parse_text_table("only a header line")

def test_ingest_tab_text_builds_typed_dataset():
    ds = ingest_text("city\tpopulation\nOslo\t700000\nBergen\t285000\n")
    assert ds.headers == ["city", "population"]
    assert ds.column_types["population"] == ColumnType.NUMBER
    assert ds.rows[0]["population"] == 700000

def test_csv_empty_cells_become_none():
    records = load_csv(b"a,b\n1,\n2,x\n")
    assert records[0] == {"a": 1, "b": None}
    assert records[1]["b"] == "x"

def test_csv_header_only_raises_empty():
    with pytest.raises(EmptyInputError):
        ingest_file("data.csv", b"a,b\n")

def test_json_array_and_single_object():
    assert load_json('[{"a": 1}, {"a": 2}]') == [{"a": 1}, {"a": 2}]
    assert load_json('{"a": 1}') == [{"a": 1}]

def test_invalid_json_is_malformed():
    with pytest.raises(MalformedInputError, match="Invalid JSON format"):
        load_json("{not json")
    with pytest.raises(MalformedInputError):
        load_json("[1, 2, 3]")

def test_empty_json_array_raises_empty():
    with pytest.raises(EmptyInputError):
        ingest_file("rows.json", b"[]")

def test_excel_first_sheet():
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame({"x": [1, 2], "y": ["a", None]}).to_excel(writer, sheet_name="first", index=False)
        pd.DataFrame({"z": [9]}).to_excel(writer, sheet_name="second", index=False)

    records = load_excel(buffer.getvalue())
    assert records == [{"x": 1, "y": "a"}, {"x": 2, "y": None}]

def test_unsupported_extension():
    with pytest.raises(MalformedInputError):
        load_file("scan.png", b"\x89PNG")

def test_ingest_file_dispatches_on_extension():
    ds = ingest_file("Sales.CSV", b"month,revenue\n2024-01-01,10\n2024-02-01,12\n")
    assert ds.column_types == {"month": ColumnType.DATE, "revenue": ColumnType.NUMBER}

def test_corrupt_xlsx_is_malformed():
    with pytest.raises(MalformedInputError):
        ingest_file("bad.xlsx", b"PK\x03\x04" + b"garbage" * 20)

def test_legacy_xls_is_unsupported():
    with pytest.raises(MalformedInputError, match="Unsupported file type"):
        load_file("old.xls", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64)

def test_extra_fields_do_not_shift_columns():
    ds = ingest_text("a,b\n1,2,3\n4,5,6\n")
    assert ds.headers == ["a", "b"]
    assert ds.rows == [{"a": 1, "b": 2}, {"a": 4, "b": 5}]

    records = load_csv(b"a,b\n1,2,3\n4,5,6\n")
    assert records == [{"a": 1, "b": 2}, {"a": 4, "b": 5}]

def test_na_like_tokens_are_values():
    ds = ingest_file("codes.csv", b"code,name\nNA,North America\nnull,Nothing\n,Blank\n")
    assert [r["code"] for r in ds.rows] == ["NA", "null", None]
    assert ds.summary.missing_values == 1

    records = parse_text_table("code|name\nN/A|x\nNone|y\n")
    assert [r["code"] for r in records] == ["N/A", "None"]
