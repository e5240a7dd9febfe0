from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import polars as pl

from app.charts import HOVER_PARAM, empty_chart, geometry_values, streamgraph_chart
from streamgraph.config import ChartSettings
from streamgraph.ingest import empty_dataset, parse_csv_text
from streamgraph.stack import project_streamgraph


def find_in_spec(node: Any, key: str) -> Iterator[Any]:
    """Yield every value stored under ``key`` anywhere in a Vega-Lite dict."""
    if isinstance(node, dict):
        for k, v in node.items():
            if k == key:
                yield v
            yield from find_in_spec(v, key)
    elif isinstance(node, list):
        for item in node:
            yield from find_in_spec(item, key)


def inline_rows(spec: dict[str, Any]) -> list[dict[str, Any]]:
    """Rows of a top-level chart, following consolidated datasets when present."""
    data = spec["data"]
    if "values" in data:
        return data["values"]
    return spec["datasets"][data["name"]]


def test_geometry_values_rows_and_nan_to_null() -> None:
    df = parse_csv_text("Date,GPT-4\n1/1/24,zz\n2/1/24,3\n")
    rows = geometry_values(project_streamgraph(df))
    assert len(rows) == 10
    gpt = [r for r in rows if r["entity"] == "GPT-4"]
    assert gpt[0]["date"] == "2024-01-01"
    assert gpt[0]["value"] is None
    assert gpt[1]["value"] == 3.0


def test_streamgraph_chart_spec(scenario_df: pl.DataFrame) -> None:
    settings = ChartSettings()
    spec = streamgraph_chart(project_streamgraph(scenario_df), settings).to_dict()

    assert len(spec["hconcat"]) == 2
    stream, bars = spec["hconcat"]

    marks = list(find_in_spec(stream, "mark"))
    assert marks[0]["type"] == "area"
    assert marks[0]["interpolate"] == "basis"
    assert stream["encoding"]["y2"]["field"] == "y1"
    assert stream["encoding"]["color"]["scale"]["range"][-1] == "#e41a1c"

    # hover selection is declared once and drives the tooltip filter
    names = list(find_in_spec(spec, "name"))
    assert HOVER_PARAM in names
    filters = list(find_in_spec(bars, "filter"))
    assert filters and filters[0]["param"] == HOVER_PARAM
    assert filters[0]["empty"] is False

    bar_marks = list(find_in_spec(bars, "mark"))
    assert bar_marks[0] in ("bar", {"type": "bar"})
    assert bars["encoding"]["x"]["axis"]["labelAngle"] == -65


def test_tooltip_value_axis_spans_zero_to_max(scenario_df: pl.DataFrame) -> None:
    spec = streamgraph_chart(project_streamgraph(scenario_df), ChartSettings()).to_dict()
    y_scale = spec["hconcat"][1]["encoding"]["y"]["scale"]
    assert y_scale["zero"] is True
    assert y_scale["nice"] is False


def test_streamgraph_area_has_no_order_channel(scenario_df: pl.DataFrame) -> None:
    spec = streamgraph_chart(project_streamgraph(scenario_df), ChartSettings()).to_dict()
    assert "order" not in spec["hconcat"][0]["encoding"]


def test_streamgraph_chart_follows_curve_setting(scenario_df: pl.DataFrame) -> None:
    settings = ChartSettings(curve="linear")
    spec = streamgraph_chart(project_streamgraph(scenario_df), settings).to_dict()
    marks = list(find_in_spec(spec["hconcat"][0], "mark"))
    assert marks[0]["interpolate"] == "linear"


def test_empty_geometry_yields_placeholder() -> None:
    spec = streamgraph_chart(project_streamgraph(empty_dataset()), ChartSettings()).to_dict()
    assert "hconcat" not in spec
    assert spec["mark"]["type"] == "text"
    assert inline_rows(spec) == [{"text": "Dataset has no rows"}]


def test_empty_chart_message() -> None:
    spec = empty_chart("nothing").to_dict()
    assert inline_rows(spec)[0]["text"] == "nothing"
