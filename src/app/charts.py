from __future__ import annotations

from typing import Any

import altair as alt
import polars as pl

from streamgraph.config import ChartSettings
from streamgraph.core.constants import TICK_LABEL_ANGLE, TOOLTIP_TICK_FORMAT, TOOLTIP_Y_TICKS
from streamgraph.core.schema import Palette
from streamgraph.stack import StreamGeometry

# Name of the hover selection shared by the streamgraph and the tooltip panel.
HOVER_PARAM = "hover_entity"


# Uniform chart defaults
def _apply_chart_defaults(ch: alt.TopLevelMixin) -> alt.TopLevelMixin:
    try:
        return (
            ch.configure_axis(labelFontSize=11, titleFontSize=11, grid=False)
            .configure_legend(labelFontSize=10, symbolType="square", symbolSize=150)
            .configure_title(fontSize=12)
            .configure_view(strokeOpacity=0)
        )
    except Exception:
        # If configuration fails (e.g., non-top-level), return chart as-is
        return ch


# ----------------------------
# Data preparation (no inline casting in UI)
# ----------------------------


def geometry_values(geometry: StreamGeometry) -> list[dict[str, Any]]:
    """Return chart rows for a projected streamgraph.

    Dates become ISO strings and NaN becomes null so the chart serializes to JSON.

    Args:
        geometry (StreamGeometry): Projected streamgraph.

    Returns:
        list[dict[str, Any]]: Rows with keys date, entity, order, value, y0, y1.
    """
    frame = geometry.to_frame()
    if frame.is_empty():
        return []
    frame = frame.with_columns(
        pl.col("date").dt.strftime("%Y-%m-%d"),
        pl.col("value", "y0", "y1").fill_nan(None),
    )
    return frame.to_dicts()


def _color_scale(palette: Palette) -> alt.Scale:
    return alt.Scale(domain=palette.names, range=palette.colors)


def hover_selection() -> Any:
    """Point selection on the entity field; empty when the pointer leaves a layer."""
    return alt.selection_point(
        name=HOVER_PARAM,
        fields=["entity"],
        on="mouseover",
        clear="mouseout",
        empty=False,
    )


def empty_chart(message: str = "No data loaded") -> alt.TopLevelMixin:
    return _apply_chart_defaults(
        alt.Chart(alt.Data(values=[{"text": message}]))
        .mark_text(size=14, color="#666")
        .encode(text="text:N")
    )


# ----------------------------
# Streamgraph
# ----------------------------


def streamgraph_layer(
    values: list[dict[str, Any]],
    geometry: StreamGeometry,
    settings: ChartSettings,
    hover: Any | None = None,
) -> alt.Chart:
    """Area marks over precomputed wiggle bounds (y0 lower edge, y1 upper edge)."""
    lo, hi = geometry.y.domain
    ch = (
        alt.Chart(alt.Data(values=values))
        .mark_area(interpolate=settings.curve)
        .encode(
            x=alt.X("date:T", title=None, scale=alt.Scale(nice=False)),
            y=alt.Y("y0:Q", axis=None, scale=alt.Scale(domain=[lo, hi], nice=False, zero=False)),
            y2="y1:Q",
            color=alt.Color(
                "entity:N",
                scale=_color_scale(settings.palette),
                legend=alt.Legend(title=None, orient="right"),
            ),
        )
        .properties(width=settings.canvas.inner_width, height=settings.canvas.inner_height)
    )
    if hover is not None:
        ch = ch.add_params(hover)
    return ch


# ----------------------------
# Tooltip bars
# ----------------------------


def tooltip_bars(
    values: list[dict[str, Any]],
    settings: ChartSettings,
    hover: Any,
) -> alt.Chart:
    """Bar chart of the hovered entity's value per date (data order, banded x)."""
    pad = settings.band_padding
    return (
        alt.Chart(alt.Data(values=values))
        .transform_filter(hover)
        .mark_bar()
        .encode(
            x=alt.X(
                "date:O",
                sort=None,
                title=None,
                scale=alt.Scale(paddingInner=pad, paddingOuter=pad),
                axis=alt.Axis(
                    labelExpr=f"utcFormat(toDate(datum.value), '{TOOLTIP_TICK_FORMAT}')",
                    labelAngle=TICK_LABEL_ANGLE,
                    labelFontSize=8,
                ),
            ),
            y=alt.Y(
                "value:Q",
                title=None,
                scale=alt.Scale(zero=True, nice=False),
                axis=alt.Axis(tickCount=TOOLTIP_Y_TICKS, labelFontSize=8),
            ),
            color=alt.Color("entity:N", scale=_color_scale(settings.palette), legend=None),
            tooltip=[
                alt.Tooltip("entity:N", title="Model"),
                alt.Tooltip("date:N", title="Date"),
                alt.Tooltip("value:Q", title="Value"),
            ],
        )
        .properties(width=settings.tooltip.inner_width, height=settings.tooltip.inner_height)
    )


def streamgraph_chart(geometry: StreamGeometry, settings: ChartSettings) -> alt.TopLevelMixin:
    """Streamgraph with a hover-driven tooltip panel beside it.

    Args:
        geometry (StreamGeometry): Projected streamgraph (see streamgraph.stack).
        settings (ChartSettings): Palette, canvas sizes, curve and band padding.

    Returns:
        alt.TopLevelMixin: Concatenated chart; a text placeholder for empty geometry.

    Notes:
        The tooltip panel is filtered by the hover selection with ``empty=False``, so
        it shows nothing until the pointer is over a layer and clears on mouse-out.
    """
    if geometry.is_empty:
        return empty_chart("Dataset has no rows")
    values = geometry_values(geometry)
    hover = hover_selection()
    stream = streamgraph_layer(values, geometry, settings, hover)
    bars = tooltip_bars(values, settings, hover)
    return _apply_chart_defaults(alt.hconcat(stream, bars, spacing=24))
