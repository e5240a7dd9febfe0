"""
Tooltip projection: Dataset + one entity → small bar chart.

Each hover over a streamgraph layer asks for the selected entity's value at every
date. The projection is independent per call: no state is kept between hovers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

import polars as pl

from .core.constants import (
    BAND_PADDING,
    DEFAULT_PALETTE,
    TICK_LABEL_ANGLE,
    TOOLTIP_CANVAS,
    TOOLTIP_OFFSET,
    TOOLTIP_TICK_FORMAT,
    TOOLTIP_Y_TICKS,
)
from .core.errors import UnknownEntityError
from .core.schema import Canvas, Palette
from .ingest import DATE_FIELD
from .scales import BandScale, LinearScale

__all__ = [
    "TooltipBar",
    "TooltipGeometry",
    "tooltip_series",
    "project_tooltip",
    "tooltip_position",
]


@dataclass(frozen=True)
class TooltipBar:
    date: date | None
    label: str
    value: float
    x: float | None
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class TooltipGeometry:
    """Bar-chart geometry for one entity.

    Attributes:
        entity (str): Selected entity.
        color (str): Fill color of every bar.
        bars (tuple[TooltipBar, ...]): One bar per record, Dataset order.
        x (BandScale): Distinct dates → band start.
        y (LinearScale): ``[0, max value]`` → ``[inner_height, 0]``.
        tick_angle (float): Rotation of the date tick labels, in degrees.
        y_ticks (list[float]): Value ticks for the left axis.
    """

    entity: str
    color: str
    bars: tuple[TooltipBar, ...]
    x: BandScale
    y: LinearScale
    tick_angle: float
    y_ticks: list[float]

    @property
    def tick_labels(self) -> list[str]:
        return [_month_label(d) for d in self.x.domain]  # type: ignore[arg-type]


def _month_label(d: date | None, fmt: str = TOOLTIP_TICK_FORMAT) -> str:
    return d.strftime(fmt) if d is not None else ""


def tooltip_series(df: pl.DataFrame, entity: str) -> list[tuple[date | None, float]]:
    """Return ``(date, value)`` pairs for one entity in Dataset order.

    Raises:
        UnknownEntityError: If the Dataset has no column for ``entity``.

    Examples:
        >>> from streamgraph.ingest import parse_csv_text
        >>> tooltip_series(parse_csv_text("Date,GPT-4\\n1/1/24,10\\n"), "GPT-4")
        [(datetime.date(2024, 1, 1), 10.0)]
    """
    if entity not in df.columns or entity == DATE_FIELD:
        raise UnknownEntityError(f"unknown entity: {entity}")
    return list(
        zip(
            df.get_column(DATE_FIELD).to_list(),
            df.get_column(entity).to_list(),
            strict=True,
        )
    )


def project_tooltip(
    df: pl.DataFrame,
    entity: str,
    palette: Palette | None = None,
    canvas: Canvas = TOOLTIP_CANVAS,
    *,
    padding: float = BAND_PADDING,
) -> TooltipGeometry:
    """Project one entity's values into tooltip bars.

    Args:
        df (pl.DataFrame): Dataset (see streamgraph.ingest).
        entity (str): Entity to show; must be in ``palette``.
        palette (Palette | None): Provides the bar color.
        canvas (Canvas): Tooltip surface; scales map onto its inner area.
        padding (float): Band padding fraction (inner and outer).

    Returns:
        TooltipGeometry: Bars whose height grows with the value on a shared scale.

    Raises:
        UnknownEntityError: If ``entity`` is not in the palette or the Dataset.
    """
    pal = palette or DEFAULT_PALETTE
    color = pal.color_of(entity)
    series = tooltip_series(df, entity)

    finite = [v for _, v in series if v is not None and not math.isnan(v)]
    top = max(finite) if finite else 0.0
    height = canvas.inner_height

    x = BandScale.padded([d for d, _ in series], (0.0, canvas.inner_width), padding)
    y = LinearScale((0.0, top), (height, 0.0))

    bars: list[TooltipBar] = []
    for d, v in series:
        value = math.nan if v is None else float(v)
        y_px = y(value)
        bars.append(
            TooltipBar(
                date=d,
                label=_month_label(d),
                value=value,
                x=x(d),
                y=y_px,
                width=x.bandwidth,
                height=height - y_px,
            )
        )

    return TooltipGeometry(
        entity=entity,
        color=color,
        bars=tuple(bars),
        x=x,
        y=y,
        tick_angle=TICK_LABEL_ANGLE,
        y_ticks=y.ticks(TOOLTIP_Y_TICKS),
    )


def tooltip_position(
    pointer_x: float, pointer_y: float, offset: tuple[float, float] = TOOLTIP_OFFSET
) -> tuple[float, float]:
    """Top-left corner of the floating tooltip panel for a pointer position."""
    return (pointer_x + offset[0], pointer_y + offset[1])
