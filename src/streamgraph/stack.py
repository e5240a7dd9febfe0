"""
Streamgraph projection: Dataset → wiggle-offset stacked layers.

Layers are stacked in palette order (first entity at the bottom). The baseline of the
bottom layer follows the wiggle offset (Byron & Wattenberg): at each index j ≥ 1 it
moves by

    -Σ_i v_ij · (Δv_ij / 2 + Σ_{k<i} Δv_kj) / Σ_i v_ij

which minimizes the weighted slope of all layer boundaries between consecutive
dates. NaN values count as 0 in that sum but are kept in the layer itself, so a NaN
value yields a NaN upper edge and the next layer starts from the lower edge instead.

Invariant: at every index the summed layer thickness equals the sum of the values.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import polars as pl

from .core.constants import CHART_CANVAS, DEFAULT_PALETTE
from .core.errors import UnknownEntityError
from .core.schema import Canvas, Palette
from .ingest import DATE_FIELD
from .scales import LinearScale, TimeScale

__all__ = [
    "LegendEntry",
    "StreamLayer",
    "StreamGeometry",
    "wiggle_baseline",
    "stack_values",
    "project_streamgraph",
]


@dataclass(frozen=True)
class LegendEntry:
    name: str
    color: str


@dataclass(frozen=True)
class StreamLayer:
    """One entity's band: per-record ``(lower, upper)`` in stacked value space."""

    entity: str
    color: str
    index: int
    values: tuple[float, ...]
    lower: tuple[float, ...]
    upper: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.values)

    def thickness(self, j: int) -> float:
        return self.upper[j] - self.lower[j]


def _z(v: float) -> float:
    return 0.0 if v is None or math.isnan(v) else v


def wiggle_baseline(columns: Sequence[Sequence[float]]) -> list[float]:
    """Return the bottom-layer baseline per index for layers given bottom-up.

    Args:
        columns: ``columns[i][j]`` is the value of layer ``i`` at index ``j``.

    Returns:
        list[float]: Baseline per index; starts at 0.0.
    """
    if not columns or not columns[0]:
        return []
    m = len(columns[0])
    base = [0.0] * m
    y = 0.0
    for j in range(1, m):
        s1 = 0.0
        s2 = 0.0
        below = 0.0
        for col in columns:
            cur = _z(col[j])
            delta = cur - _z(col[j - 1])
            s1 += cur
            s2 += (delta / 2 + below) * cur
            below += delta
        if s1:
            y -= s2 / s1
        base[j] = y
    return base


def stack_values(df: pl.DataFrame, palette: Palette | None = None) -> list[StreamLayer]:
    """Stack Dataset columns in palette order with the wiggle offset.

    Args:
        df (pl.DataFrame): Dataset (see streamgraph.ingest).
        palette (Palette | None): Entity set and stacking order.

    Returns:
        list[StreamLayer]: One layer per entity, bottom-up; empty for an empty Dataset.

    Raises:
        UnknownEntityError: If the Dataset lacks a palette column.
    """
    pal = palette or DEFAULT_PALETTE
    if df.height == 0:
        return []
    missing = [n for n in pal.names if n not in df.columns]
    if missing:
        raise UnknownEntityError(f"dataset has no column for: {', '.join(missing)}")

    columns = [
        [float("nan") if v is None else float(v) for v in df.get_column(n).to_list()]
        for n in pal.names
    ]
    prev_upper = wiggle_baseline(columns)
    prev_lower = prev_upper
    layers: list[StreamLayer] = []
    for i, (entity, col) in enumerate(zip(pal.entities, columns, strict=True)):
        lower = [lo if math.isnan(up) else up for lo, up in zip(prev_lower, prev_upper, strict=True)]
        upper = [lo + v for lo, v in zip(lower, col, strict=True)]
        layers.append(
            StreamLayer(
                entity=entity.name,
                color=entity.color,
                index=i,
                values=tuple(col),
                lower=tuple(lower),
                upper=tuple(upper),
            )
        )
        prev_lower, prev_upper = lower, upper
    return layers


@dataclass(frozen=True)
class StreamGeometry:
    """Projected streamgraph: layers, scales and legend.

    Attributes:
        layers (tuple[StreamLayer, ...]): Bottom-up layers (empty for an empty Dataset).
        dates (tuple[date | None, ...]): Record dates in Dataset order.
        x (TimeScale): Date → pixel, range ``[0, inner_width]``.
        y (LinearScale): Stacked value → pixel, range ``[inner_height, 0]``.
        legend (tuple[LegendEntry, ...]): Entities in stacking order.
    """

    layers: tuple[StreamLayer, ...]
    dates: tuple[date | None, ...]
    x: TimeScale
    y: LinearScale
    legend: tuple[LegendEntry, ...]

    @property
    def is_empty(self) -> bool:
        return not self.layers

    def layer(self, entity: str) -> StreamLayer:
        for lay in self.layers:
            if lay.entity == entity:
                return lay
        raise UnknownEntityError(f"no layer for entity: {entity}")

    def points(self, entity: str) -> list[tuple[float, float, float]]:
        """Pixel triples ``(x, y0, y1)`` for one entity, one per record."""
        lay = self.layer(entity)
        return [
            (self.x(d), self.y(lo), self.y(up))
            for d, lo, up in zip(self.dates, lay.lower, lay.upper, strict=True)
        ]

    def to_frame(self) -> pl.DataFrame:
        """Long-format frame (one row per entity and record) for chart specs."""
        rows: list[dict[str, object]] = []
        for lay in self.layers:
            for j, d in enumerate(self.dates):
                rows.append(
                    {
                        "date": d,
                        "entity": lay.entity,
                        "order": lay.index,
                        "value": lay.values[j],
                        "y0": lay.lower[j],
                        "y1": lay.upper[j],
                    }
                )
        schema = {
            "date": pl.Date,
            "entity": pl.Utf8,
            "order": pl.Int64,
            "value": pl.Float64,
            "y0": pl.Float64,
            "y1": pl.Float64,
        }
        return pl.DataFrame(rows, schema=schema, orient="row")


def _extent(values: Sequence[float]) -> tuple[float, float]:
    finite = [v for v in values if not math.isnan(v)]
    if not finite:
        return (0.0, 0.0)
    return (min(finite), max(finite))


def project_streamgraph(
    df: pl.DataFrame,
    palette: Palette | None = None,
    canvas: Canvas = CHART_CANVAS,
) -> StreamGeometry:
    """Project a Dataset into streamgraph geometry.

    Args:
        df (pl.DataFrame): Dataset (see streamgraph.ingest).
        palette (Palette | None): Entity set and stacking order.
        canvas (Canvas): Drawing surface; scales map onto its inner area.

    Returns:
        StreamGeometry: Layers, scales and legend. An empty Dataset yields no layers
        and degenerate scales.

    Examples:
        >>> from streamgraph.ingest import parse_csv_text
        >>> g = project_streamgraph(parse_csv_text("Date,GPT-4\\n1/1/24,4\\n"))
        >>> [e.name for e in g.legend][0]
        'LLaMA-3.1'
    """
    pal = palette or DEFAULT_PALETTE
    layers = stack_values(df, pal)
    dates: tuple[date | None, ...] = (
        tuple(df.get_column(DATE_FIELD).to_list()) if DATE_FIELD in df.columns else ()
    )

    lo, _ = _extent([v for lay in layers for v in lay.lower])
    _, hi = _extent([v for lay in layers for v in lay.upper])

    return StreamGeometry(
        layers=tuple(layers),
        dates=dates,
        x=TimeScale.from_dates(dates, (0.0, canvas.inner_width)),
        y=LinearScale((lo, hi), (canvas.inner_height, 0.0)),
        legend=tuple(LegendEntry(e.name, e.color) for e in pal.entities),
    )
