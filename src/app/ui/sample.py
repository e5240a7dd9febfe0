"""
Sample data for the streamgraph Streamlit UI.

Provides a small deterministic CSV in the upload format so the app can be explored
without a file at hand (mirrors the demo-data bootstrap of the header).

Notes:
    - Values are smooth deterministic curves; no randomness, so reruns are stable.
    - Dates are written as M/D/YY to exercise the same parse path as uploads.
"""

from __future__ import annotations

import math
from datetime import date
from pathlib import Path

import polars as pl

from streamgraph.core.constants import DATE_COLUMN, DEFAULT_PALETTE
from streamgraph.core.schema import Palette

SAMPLE_FILENAME = "sample_models.csv"


def _month_starts(start: date, months: int) -> list[date]:
    out: list[date] = []
    y, m = start.year, start.month
    for _ in range(months):
        out.append(date(y, m, 1))
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    return out


def _short_date(d: date) -> str:
    return f"{d.month}/{d.day}/{d:%y}"


def sample_frame(
    months: int = 12,
    start: date = date(2024, 1, 1),
    palette: Palette | None = None,
) -> pl.DataFrame:
    """Build a sample table with the raw upload columns (Date as M/D/YY strings).

    Args:
        months (int): Number of monthly rows.
        start (date): First month (day is ignored).
        palette (Palette | None): Entity columns to emit; defaults to DEFAULT_PALETTE.

    Returns:
        pl.DataFrame: Columns ``Date`` followed by one integer column per entity.
    """
    if months < 0:
        raise ValueError("months must be >= 0")
    pal = palette or DEFAULT_PALETTE
    dates = _month_starts(start, months)
    data: dict[str, list[object]] = {DATE_COLUMN: [_short_date(d) for d in dates]}
    for i, name in enumerate(pal.names):
        base = 20.0 + 6.0 * i
        data[name] = [
            int(round(base + 10.0 * math.sin((j + 2 * i) / 2.0) + 1.5 * j)) for j in range(months)
        ]
    schema: dict[str, pl.DataType] = {DATE_COLUMN: pl.Utf8()}
    schema.update({n: pl.Int64() for n in pal.names})
    return pl.DataFrame(data, schema=schema)


def sample_csv_text(months: int = 12, palette: Palette | None = None) -> str:
    """Sample CSV text in the upload format."""
    return sample_frame(months=months, palette=palette).write_csv()


def write_sample_csv(path: Path, months: int = 12, palette: Palette | None = None) -> Path:
    """Write the sample CSV to ``path`` (parent directories are created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    sample_frame(months=months, palette=palette).write_csv(path)
    return path
