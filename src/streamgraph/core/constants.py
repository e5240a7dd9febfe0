"""
Default entity palette and chart geometry.

Defines the entity set, stacking order, colors and canvas sizes consumed by the
projectors and the app. ChartSettings starts from these values and applies TOML/env
overrides on top.

Notes:
    - Stacking order is fixed by configuration, never sorted by value or name.
    - The first entity in DEFAULT_ENTITY_ORDER is the bottom-most layer.
"""

from __future__ import annotations

from .schema import Canvas, Margins, Palette

__all__ = [
    "DATE_COLUMN",
    "DATE_FORMAT",
    "DEFAULT_ENTITY_ORDER",
    "DEFAULT_COLORS",
    "DEFAULT_PALETTE",
    "CHART_CANVAS",
    "TOOLTIP_CANVAS",
    "BAND_PADDING",
    "TOOLTIP_OFFSET",
    "TICK_LABEL_ANGLE",
    "TOOLTIP_TICK_FORMAT",
    "TOOLTIP_Y_TICKS",
    "LEGEND_OFFSET",
    "LEGEND_ROW_HEIGHT",
    "LEGEND_SWATCH_SIZE",
]

# Source column holding the row date, and its cell pattern (e.g. 3/14/24).
DATE_COLUMN: str = "Date"
DATE_FORMAT: str = "%m/%d/%y"

DEFAULT_ENTITY_ORDER: tuple[str, ...] = ("LLaMA-3.1", "Claude", "PaLM-2", "Gemini", "GPT-4")

DEFAULT_COLORS: dict[str, str] = {
    "GPT-4": "#e41a1c",
    "Gemini": "#377eb8",
    "PaLM-2": "#4daf4a",
    "Claude": "#984ea3",
    "LLaMA-3.1": "#ff7f00",
}

DEFAULT_PALETTE: Palette = Palette.from_mapping(DEFAULT_ENTITY_ORDER, DEFAULT_COLORS)

CHART_CANVAS: Canvas = Canvas(
    width=800, height=400, margins=Margins(top=20, right=160, bottom=30, left=50)
)
TOOLTIP_CANVAS: Canvas = Canvas(
    width=150, height=100, margins=Margins(top=10, right=10, bottom=20, left=30)
)

# Band scale padding (inner and outer) for the tooltip bars.
BAND_PADDING: float = 0.1

# Tooltip panel offset from the pointer (x, y) in logical pixels.
TOOLTIP_OFFSET: tuple[float, float] = (10.0, -120.0)

TICK_LABEL_ANGLE: float = -65.0
TOOLTIP_TICK_FORMAT: str = "%b"
TOOLTIP_Y_TICKS: int = 5

# Legend block sits right of the plot area: one row per entity.
LEGEND_OFFSET: float = 10.0
LEGEND_ROW_HEIGHT: float = 20.0
LEGEND_SWATCH_SIZE: float = 15.0
