from __future__ import annotations

import math
from datetime import date
from pathlib import Path

import polars as pl
import pytest

from streamgraph.core.constants import DEFAULT_PALETTE
from streamgraph.core.errors import IngestError
from streamgraph.core.schema import Palette
from streamgraph.ingest import (
    dataset_schema,
    parse_csv_text,
    read_csv_bytes,
    read_csv_file,
)

HEADER = "Date,GPT-4,Gemini,PaLM-2,Claude,LLaMA-3.1\n"


def test_parse_scenario_rows_and_values(scenario_df: pl.DataFrame) -> None:
    assert scenario_df.height == 2
    assert scenario_df.columns == ["date", *DEFAULT_PALETTE.names]
    assert scenario_df.get_column("date").to_list() == [date(2024, 1, 1), date(2024, 2, 1)]
    assert scenario_df.get_column("GPT-4").to_list() == [10.0, 12.0]
    assert scenario_df.get_column("LLaMA-3.1").to_list() == [8.0, 9.0]


def test_parse_preserves_file_order_without_sorting() -> None:
    text = HEADER + "3/1/24,1,1,1,1,1\n1/1/24,2,2,2,2,2\n2/1/24,3,3,3,3,3\n"
    df = parse_csv_text(text)
    assert df.get_column("date").to_list() == [
        date(2024, 3, 1),
        date(2024, 1, 1),
        date(2024, 2, 1),
    ]
    assert df.get_column("Claude").to_list() == [1.0, 2.0, 3.0]


def test_parse_schema_is_independent_of_source_column_order() -> None:
    text = "LLaMA-3.1,Claude,Date,GPT-4,PaLM-2,Gemini,Extra\n1,2,1/5/24,3,4,5,x\n"
    df = parse_csv_text(text)
    assert dict(df.schema) == dataset_schema()
    row = df.row(0, named=True)
    assert row == {
        "date": date(2024, 1, 5),
        "LLaMA-3.1": 1.0,
        "Claude": 2.0,
        "PaLM-2": 4.0,
        "Gemini": 5.0,
        "GPT-4": 3.0,
    }


@pytest.mark.parametrize(
    "cell, expected",
    [
        ("3/14/24", date(2024, 3, 14)),
        ("03/04/24", date(2024, 3, 4)),
        ("12/31/99", date(1999, 12, 31)),
        (" 1/5/24 ", date(2024, 1, 5)),
        ("2024-03-14", None),
        ("not a date", None),
        ("2/30/24", None),
    ],
)
def test_parse_date_cells(cell: str, expected: date | None) -> None:
    df = parse_csv_text(f'Date,GPT-4\n"{cell}",1\n')
    assert df.get_column("date").to_list() == [expected]


def test_blank_cells_become_zero_and_garbage_becomes_nan() -> None:
    text = HEADER + "1/1/24,,abc, 7 ,1e1,\n"
    df = parse_csv_text(text)
    row = df.row(0, named=True)
    assert row["GPT-4"] == 0.0
    assert math.isnan(row["Gemini"])
    assert row["PaLM-2"] == 7.0
    assert row["Claude"] == 10.0
    assert row["LLaMA-3.1"] == 0.0


@pytest.mark.parametrize(
    "cell, expected",
    [
        ("+5", 5.0),
        ("0x10", 16.0),
        ("0X1f", 31.0),
        ("Infinity", math.inf),
        ("-Infinity", -math.inf),
    ],
)
def test_numeric_cells_follow_unary_plus(cell: str, expected: float) -> None:
    df = parse_csv_text(f"Date,GPT-4\n1/1/24,{cell}\n")
    assert df.get_column("GPT-4").to_list() == [expected]


@pytest.mark.parametrize("cell", ["inf", "-inf", "nan", "0x", "0xzz", "-0x10"])
def test_non_finite_or_unsupported_spellings_become_nan(cell: str) -> None:
    df = parse_csv_text(f"Date,GPT-4\n1/1/24,{cell}\n")
    assert math.isnan(df.get_column("GPT-4").item())


def test_unbalanced_quote_degrades_to_nan_cell() -> None:
    df = parse_csv_text(HEADER + '1/1/24,"10,20,5,15,8\n2/1/24,1,2,3,4,5\n')
    assert df.height == 2
    assert df.get_column("date").to_list() == [date(2024, 1, 1), date(2024, 2, 1)]
    first = df.row(0, named=True)
    assert math.isnan(first["GPT-4"])
    assert first["Gemini"] == 20.0
    assert first["LLaMA-3.1"] == 8.0
    assert df.get_column("GPT-4").to_list()[1] == 1.0


def test_missing_entity_column_is_nan_for_every_row() -> None:
    text = "Date,GPT-4,Gemini,PaLM-2,Claude\n1/1/24,1,2,3,4\n2/1/24,5,6,7,8\n"
    df = parse_csv_text(text)
    assert df.height == 2
    assert all(math.isnan(v) for v in df.get_column("LLaMA-3.1").to_list())


def test_missing_date_column_yields_null_dates() -> None:
    df = parse_csv_text("GPT-4\n1\n2\n")
    assert df.get_column("date").to_list() == [None, None]
    assert df.get_column("GPT-4").to_list() == [1.0, 2.0]


@pytest.mark.parametrize("text", ["", "   \n", HEADER])
def test_empty_or_header_only_input_yields_empty_dataset(text: str) -> None:
    df = parse_csv_text(text)
    assert df.height == 0
    assert df.columns == ["date", *DEFAULT_PALETTE.names]


def test_custom_palette_and_date_format() -> None:
    pal = Palette.from_pairs([("A", "#000000"), ("B", "#ffffff")])
    df = parse_csv_text("Date,B,A\n2024-01-05,2,1\n", pal, date_format="%Y-%m-%d")
    assert df.columns == ["date", "A", "B"]
    assert df.row(0) == (date(2024, 1, 5), 1.0, 2.0)


def test_read_csv_bytes_tolerates_bom() -> None:
    df = read_csv_bytes(("\ufeff" + HEADER + "1/1/24,1,2,3,4,5\n").encode("utf-8"))
    assert df.get_column("date").to_list() == [date(2024, 1, 1)]


def test_read_csv_bytes_rejects_non_utf8() -> None:
    with pytest.raises(IngestError):
        read_csv_bytes(b"Date,GPT-4\n\xff\xfe,1\n")


def test_read_csv_file_round_trip(tmp_path: Path) -> None:
    p = tmp_path / "models.csv"
    p.write_text(HEADER + "1/1/24,10,20,5,15,8\n2/1/24,12,18,6,14,9\n", encoding="utf-8")
    df = read_csv_file(p)
    assert df.height == 2


def test_read_csv_file_missing_raises_ingest_error(tmp_path: Path) -> None:
    with pytest.raises(IngestError):
        read_csv_file(tmp_path / "nope.csv")

