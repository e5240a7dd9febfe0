from __future__ import annotations

from pathlib import Path

import pytest

from streamgraph.config import ChartSettings
from streamgraph.core.constants import DEFAULT_PALETTE
from streamgraph.core.errors import ConfigError

ENV_KEYS = [
    "STREAMGRAPH_WIDTH",
    "STREAMGRAPH_HEIGHT",
    "STREAMGRAPH_TOOLTIP_WIDTH",
    "STREAMGRAPH_TOOLTIP_HEIGHT",
    "STREAMGRAPH_DATE_FORMAT",
    "STREAMGRAPH_BAND_PADDING",
    "STREAMGRAPH_CURVE",
    "STREAMGRAPH_CACHE_TTL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_toml(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def test_chart_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "streamgraph.toml",
        """
        [chart]
        width = 1000
        curve = "linear"
        band_padding = 0.2
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STREAMGRAPH_WIDTH", "1200")
    monkeypatch.setenv("STREAMGRAPH_CURVE", "basis")

    s = ChartSettings.load()

    assert s.canvas.width == 1200  # env override
    assert s.curve == "basis"  # env override
    assert s.band_padding == pytest.approx(0.2)  # TOML value kept
    assert s.canvas.margins.right == 160  # margins untouched


def test_chart_settings_toml_entities_replace_palette(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "streamgraph.toml",
        """
        [[chart.entities]]
        name = "Mistral"
        color = "#123456"

        [[chart.entities]]
        name = "Qwen"
        color = "#ABCDEF"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)

    s = ChartSettings.load()

    assert s.palette.names == ["Mistral", "Qwen"]
    assert s.palette.colors == ["#123456", "#abcdef"]


def test_chart_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "pyproject.toml",
        """
        [tool.streamgraph.chart]
        height = 500
        tooltip_width = 200
        cache_ttl = 0
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)

    s = ChartSettings.load()

    assert s.canvas.height == 500
    assert s.canvas.inner_height == 450
    assert s.tooltip.width == 200
    assert s.cache_ttl is None  # 0 disables expiry


def test_chart_settings_invalid_loose_values_are_ignored(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "streamgraph.toml",
        """
        [chart]
        band_padding = 3.0
        curve = "cardinal"

        [[chart.entities]]
        name = "Bad"
        color = "not-a-color"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STREAMGRAPH_WIDTH", "wide")

    s = ChartSettings.load()

    assert s.canvas.width == 800
    assert s.band_padding == pytest.approx(0.1)
    assert s.curve == "basis"
    assert s.palette == DEFAULT_PALETTE


def test_chart_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    s = ChartSettings.load()

    assert s.palette == DEFAULT_PALETTE
    assert (s.canvas.width, s.canvas.height) == (800, 400)
    assert (s.tooltip.width, s.tooltip.height) == (150, 100)
    assert s.date_format == "%m/%d/%y"
    assert s.curve == "basis"


def test_chart_settings_explicit_path(tmp_path: Path, monkeypatch) -> None:
    cfg = _write_toml(tmp_path, "custom.toml", 'date_format = "%Y-%m-%d"\n')
    monkeypatch.chdir(tmp_path)

    s = ChartSettings.load(cfg)

    assert s.date_format == "%Y-%m-%d"


def test_chart_settings_missing_explicit_path_warns(tmp_path: Path, monkeypatch, caplog) -> None:
    monkeypatch.chdir(tmp_path)
    missing = tmp_path / "absent.toml"

    with caplog.at_level("WARNING", logger="streamgraph.config"):
        s = ChartSettings.load(missing)

    assert s == ChartSettings()
    assert any(str(missing) in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "kwargs",
    [{"band_padding": 1.0}, {"band_padding": -0.1}, {"curve": "step"}, {"cache_ttl": -1}],
)
def test_chart_settings_explicit_invalid_values_raise(kwargs: dict) -> None:
    with pytest.raises(ConfigError):
        ChartSettings(**kwargs)
