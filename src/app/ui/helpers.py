"""
Shared UI helper utilities for the streamgraph Streamlit application.

Small formatting and summary helpers used by the header and the page body. They
contain no Streamlit state manipulation, which keeps them testable with plain
Polars frames.
"""

from __future__ import annotations

import math
from datetime import date

import polars as pl

from streamgraph.core.schema import Palette
from streamgraph.ingest import DATE_FIELD


def format_date(d: date | None) -> str:
    """Format a date as ``YYYY-MM-DD``, or "n/a" when missing."""
    return d.isoformat() if d is not None else "n/a"


def format_value(v: float | None) -> str:
    """Compact number formatting for tables and captions (NaN shows as "NaN")."""
    if v is None:
        return "n/a"
    if math.isnan(v):
        return "NaN"
    return f"{v:,.2f}".rstrip("0").rstrip(".")


def summarize_dataset(df: pl.DataFrame, palette: Palette) -> dict[str, object]:
    """Compute quick facts about a Dataset for the header caption and Data tab.

    Computes:
        - rows: Number of records.
        - start / end: Earliest and latest valid dates (None when absent).
        - null_dates: Records whose date cell did not parse.
        - nan_cells: Entity cells that coerced to NaN.
        - totals: Per-entity sum of finite values, in palette order.

    Args:
        df (pl.DataFrame): Dataset (see streamgraph.ingest).
        palette (Palette): Entity set.

    Returns:
        dict[str, object]: Summary dictionary with the keys above.
    """
    names = [n for n in palette.names if n in df.columns]
    if df.is_empty():
        return {
            "rows": 0,
            "start": None,
            "end": None,
            "null_dates": 0,
            "nan_cells": 0,
            "totals": {n: 0.0 for n in names},
        }
    bounds = df.select(
        pl.col(DATE_FIELD).min().alias("_start"),
        pl.col(DATE_FIELD).max().alias("_end"),
        pl.col(DATE_FIELD).null_count().alias("_nulls"),
    ).row(0)
    nan_cells = int(df.select(pl.sum_horizontal(pl.col(names).is_nan().sum())).item()) if names else 0
    sums = df.select([pl.col(n).fill_nan(None).sum().alias(n) for n in names]).row(0, named=True)
    return {
        "rows": df.height,
        "start": bounds[0],
        "end": bounds[1],
        "null_dates": int(bounds[2]),
        "nan_cells": nan_cells,
        "totals": {n: float(sums[n] or 0.0) for n in names},
    }


def display_frame(df: pl.DataFrame) -> pl.DataFrame:
    """Dataset as shown in the Data tab: ISO date strings, entity columns untouched."""
    if DATE_FIELD not in df.columns:
        return df
    return df.with_columns(pl.col(DATE_FIELD).dt.strftime("%Y-%m-%d").alias(DATE_FIELD))
