import csv

import pytest

from device_catalog.ingestion.normalizer import normalize_record
from device_catalog.ingestion.parser import ColumnIndex, RecordReader, resolve_columns
from device_catalog.ingestion.results import (
    DeviceRecord,
    MissingColumnsError,
    RowOutcome,
    RowResult,
    SourceDecodeError,
)


@pytest.fixture
def small_field_limit():
    previous = csv.field_size_limit(40)
    yield
    csv.field_size_limit(previous)


# ── Field resolution ─────────────────────────────────────────────────────


def test_resolve_columns_standard_header():
    columns = resolve_columns(["Retail Branding", "Marketing Name", "Device", "Model"])
    assert columns == ColumnIndex(retail_branding=0, marketing_name=1, model=3)
    assert columns.min_fields == 4


def test_resolve_columns_reordered_and_cased():
    columns = resolve_columns(["Model", " RETAIL BRANDING ", "Marketing Name"])
    assert columns == ColumnIndex(retail_branding=1, marketing_name=2, model=0)


def test_resolve_columns_reports_every_missing_field():
    with pytest.raises(MissingColumnsError) as excinfo:
        resolve_columns(["Device", "Retail Branding"])
    assert excinfo.value.missing == ["marketing name", "model"]
    assert "model" in str(excinfo.value)


# ── Record reader ────────────────────────────────────────────────────────


def test_reader_numbers_lines_from_header():
    lines = ["a,b,c\n", "1,2,3\n", "\n", "4,5,6\n"]
    reader = RecordReader(lines)

    assert reader.read_header() == ["a", "b", "c"]
    rows = list(reader)

    assert [r.line for r in rows] == [2, 3]
    assert rows[1].fields == ["4", "5", "6"]


def test_reader_tolerates_stray_quotes_and_ragged_rows():
    lines = ['a,b,c\n', 'Acme,Phone 6" Plus,x\n', 'Acme,Short\n', 'Acme,Long,x,y,z\n']
    rows = list(RecordReader(lines))

    assert rows[0].fields == ["Acme", 'Phone 6" Plus', "x"]
    assert rows[1].fields == ["Acme", "Short"]
    assert len(rows[2].fields) == 5
    assert all(r.error is None for r in rows)


def test_reader_skips_malformed_row_and_continues(small_field_limit):
    lines = ["a,b\n", "ok,1\n", "x" * 100 + ",2\n", "ok,3\n"]
    rows = list(RecordReader(lines))

    assert [r.line for r in rows] == [2, 3, 4]
    assert rows[1].error is not None
    assert rows[2].fields == ["ok", "3"]


def test_reader_without_header_is_fatal():
    with pytest.raises(SourceDecodeError):
        RecordReader([]).read_header()


# ── Normalizer ───────────────────────────────────────────────────────────

COLUMNS = ColumnIndex(retail_branding=0, marketing_name=1, model=3)


def test_normalize_lowercases_keys_only():
    record = normalize_record(["Samsung", "Galaxy S21 5G", "o1s", "SM-G991B"], COLUMNS, 2)
    assert record == DeviceRecord(
        retail_branding="samsung",
        marketing_name="Galaxy S21 5G",
        model="sm-g991b",
        line=2,
    )


def test_normalize_short_row_is_skipped():
    result = normalize_record(["Samsung", "Galaxy S21 5G", "o1s"], COLUMNS, 7)
    assert isinstance(result, RowResult)
    assert result.outcome is RowOutcome.skipped_short_record
    assert result.line == 7


def test_normalize_ignores_trailing_fields():
    record = normalize_record(["Google", "Pixel 8", "shiba", "Pixel 8", "extra"], COLUMNS, 3)
    assert isinstance(record, DeviceRecord)
    assert record.model == "pixel 8"
