from __future__ import annotations

import math

import pytest

from app.ui.sample import sample_csv_text, sample_frame, write_sample_csv
from streamgraph.core.constants import DATE_COLUMN, DEFAULT_PALETTE
from streamgraph.core.schema import Palette
from streamgraph.ingest import parse_csv_text, read_csv_file


def test_sample_frame_layout() -> None:
    df = sample_frame(months=3)
    assert df.columns == [DATE_COLUMN, *DEFAULT_PALETTE.names]
    assert df.get_column(DATE_COLUMN).to_list() == ["1/1/24", "2/1/24", "3/1/24"]
    assert df.height == 3


def test_sample_frame_is_deterministic() -> None:
    assert sample_frame().equals(sample_frame())


def test_sample_frame_rejects_negative_months() -> None:
    with pytest.raises(ValueError):
        sample_frame(months=-1)


def test_sample_csv_parses_cleanly() -> None:
    df = parse_csv_text(sample_csv_text())
    assert df.height == 12
    assert df.get_column("date").null_count() == 0
    for name in DEFAULT_PALETTE.names:
        assert not any(math.isnan(v) for v in df.get_column(name).to_list())


def test_sample_follows_custom_palette(tmp_path) -> None:
    pal = Palette.from_pairs([("A", "#000000"), ("B", "#ffffff")])
    path = write_sample_csv(tmp_path / "nested" / "sample.csv", months=4, palette=pal)
    assert path.exists()
    df = read_csv_file(path, pal)
    assert df.columns == ["date", "A", "B"]
    assert df.height == 4
