from __future__ import annotations

import math
from datetime import date

import polars as pl
import pytest

from streamgraph.core.errors import UnknownEntityError
from streamgraph.ingest import empty_dataset, parse_csv_text
from streamgraph.tooltip import project_tooltip, tooltip_position, tooltip_series


def test_tooltip_series_for_gpt4(scenario_df: pl.DataFrame) -> None:
    assert tooltip_series(scenario_df, "GPT-4") == [
        (date(2024, 1, 1), 10.0),
        (date(2024, 2, 1), 12.0),
    ]


def test_tooltip_series_unknown_entity(scenario_df: pl.DataFrame) -> None:
    with pytest.raises(UnknownEntityError):
        tooltip_series(scenario_df, "Mistral")
    with pytest.raises(UnknownEntityError):
        tooltip_series(scenario_df, "date")


def test_project_tooltip_band_layout_and_heights(scenario_df: pl.DataFrame) -> None:
    tip = project_tooltip(scenario_df, "GPT-4")
    assert tip.color == "#e41a1c"
    assert len(tip.bars) == 2

    step = 110.0 / 2.1
    assert tip.x.bandwidth == pytest.approx(step * 0.9)
    first, second = tip.bars
    assert first.x == pytest.approx((110.0 - step * 1.9) / 2)
    assert second.x == pytest.approx(first.x + step)

    assert tip.y.domain == (0.0, 12.0)
    assert second.y == pytest.approx(0.0)
    assert second.height == pytest.approx(70.0)
    assert first.height == pytest.approx(70.0 * 10.0 / 12.0)
    assert first.y + first.height == pytest.approx(70.0)


def test_project_tooltip_heights_are_monotonic_in_values() -> None:
    text = (
        "Date,GPT-4,Gemini,PaLM-2,Claude,LLaMA-3.1\n"
        "1/1/24,0,7,1,1,1\n2/1/24,0,3,1,1,1\n3/1/24,0,11,1,1,1\n4/1/24,0,5,1,1,1\n"
    )
    tip = project_tooltip(parse_csv_text(text), "Gemini")
    pairs = sorted((b.value, b.height) for b in tip.bars)
    heights = [h for _, h in pairs]
    assert heights == sorted(heights)
    assert len(set(heights)) == len(heights)


def test_project_tooltip_labels_and_ticks(scenario_df: pl.DataFrame) -> None:
    tip = project_tooltip(scenario_df, "Claude")
    assert tip.tick_labels == ["Jan", "Feb"]
    assert tip.tick_angle == -65.0
    assert tip.y_ticks[0] == 0.0
    assert tip.y_ticks[-1] <= 15.0


def test_project_tooltip_duplicate_dates_share_a_band() -> None:
    text = "Date,GPT-4\n1/1/24,1\n1/1/24,2\n2/1/24,3\n"
    tip = project_tooltip(parse_csv_text(text), "GPT-4")
    assert len(tip.x.domain) == 2
    assert tip.bars[0].x == tip.bars[1].x


def test_project_tooltip_nan_value_keeps_bar_slot() -> None:
    text = "Date,GPT-4\n1/1/24,oops\n2/1/24,4\n"
    tip = project_tooltip(parse_csv_text(text), "GPT-4")
    assert math.isnan(tip.bars[0].height)
    assert tip.bars[1].height == pytest.approx(70.0)


def test_project_tooltip_empty_dataset_has_no_bars() -> None:
    tip = project_tooltip(empty_dataset(), "GPT-4")
    assert tip.bars == ()


def test_project_tooltip_unknown_entity(scenario_df: pl.DataFrame) -> None:
    with pytest.raises(UnknownEntityError):
        project_tooltip(scenario_df, "Mistral")


def test_tooltip_position_offsets_pointer() -> None:
    assert tooltip_position(300.0, 200.0) == (310.0, 80.0)
