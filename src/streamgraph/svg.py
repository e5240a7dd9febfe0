"""
Standalone SVG rendering of projected geometry.

Each call returns a complete document for the whole surface; nothing is patched
incrementally, so a render never mixes stale and fresh elements. Used by the app for
the SVG download and the static tooltip preview.
"""

from __future__ import annotations

import math
from datetime import date
from html import escape

from .core.constants import (
    CHART_CANVAS,
    LEGEND_OFFSET,
    LEGEND_ROW_HEIGHT,
    LEGEND_SWATCH_SIZE,
    TOOLTIP_CANVAS,
)
from .core.schema import Canvas
from .curves import area_path, fmt_number
from .stack import StreamGeometry
from .tooltip import TooltipGeometry

__all__ = ["month_ticks", "render_streamgraph_svg", "render_tooltip_svg"]


def month_ticks(start: date, end: date) -> list[date]:
    """First-of-month dates within ``[start, end]``."""
    if end < start:
        return []
    y, m = start.year, start.month
    if start.day != 1:
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    out: list[date] = []
    while (d := date(y, m, 1)) <= end:
        out.append(d)
        y, m = (y + 1, 1) if m == 12 else (y, m + 1)
    return out


def _tick_label(d: date) -> str:
    return str(d.year) if d.month == 1 else d.strftime("%b")


def _open(canvas: Canvas) -> list[str]:
    w, h = fmt_number(canvas.width), fmt_number(canvas.height)
    return [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">',
        f'<g transform="translate({fmt_number(canvas.margins.left)},{fmt_number(canvas.margins.top)})">',
    ]


def render_streamgraph_svg(
    geometry: StreamGeometry, canvas: Canvas = CHART_CANVAS, *, curve: str = "basis"
) -> str:
    """Render layers, bottom time axis and legend as an SVG document."""
    inner_w, inner_h = canvas.inner_width, canvas.inner_height
    parts = _open(canvas)

    for lay in geometry.layers:
        pts = geometry.points(lay.entity)
        top = [(x, y1) for x, _, y1 in pts]
        bottom = [(x, y0) for x, y0, _ in pts]
        parts.append(
            f'<path class="layer" data-entity="{escape(lay.entity)}" '
            f'fill="{lay.color}" d="{area_path(top, bottom, curve)}"/>'
        )

    parts.append(f'<g class="axis x" transform="translate(0,{fmt_number(inner_h)})">')
    parts.append(f'<path stroke="currentColor" fill="none" d="M0,0H{fmt_number(inner_w)}"/>')
    if geometry.x.domain is not None:
        for d in month_ticks(*geometry.x.domain):
            x = fmt_number(geometry.x(d))
            parts.append(
                f'<g class="tick" transform="translate({x},0)">'
                f'<line stroke="currentColor" y2="6"/>'
                f'<text y="9" dy="0.71em" text-anchor="middle" font-size="10">'
                f"{_tick_label(d)}</text></g>"
            )
    parts.append("</g>")

    parts.append('<g class="legend" font-size="10" text-anchor="start">')
    for i, entry in enumerate(geometry.legend):
        parts.append(
            f'<g transform="translate({fmt_number(inner_w + LEGEND_OFFSET)},{fmt_number(i * LEGEND_ROW_HEIGHT)})">'
            f'<rect width="{fmt_number(LEGEND_SWATCH_SIZE)}" height="{fmt_number(LEGEND_SWATCH_SIZE)}" '
            f'fill="{entry.color}"/>'
            f'<text x="20" y="{fmt_number(LEGEND_SWATCH_SIZE / 2)}" dy="0.32em">{escape(entry.name)}</text>'
            "</g>"
        )
    parts.append("</g></g></svg>")
    return "".join(parts)


def render_tooltip_svg(geometry: TooltipGeometry, canvas: Canvas = TOOLTIP_CANVAS) -> str:
    """Render tooltip bars with rotated month labels and a left value axis."""
    inner_h = canvas.inner_height
    parts = _open(canvas)
    for bar in geometry.bars:
        if bar.x is None or math.isnan(bar.value):
            continue
        parts.append(
            f'<rect x="{fmt_number(bar.x)}" y="{fmt_number(bar.y)}" width="{fmt_number(bar.width)}" '
            f'height="{fmt_number(bar.height)}" fill="{geometry.color}"/>'
        )

    parts.append(f'<g class="axis x" transform="translate(0,{fmt_number(inner_h)})" font-size="8">')
    half = geometry.x.bandwidth / 2
    for d, label in zip(geometry.x.domain, geometry.tick_labels, strict=True):
        pos = geometry.x(d)
        if pos is None:
            continue
        parts.append(
            f'<text transform="translate({fmt_number(pos + half)},0) rotate({fmt_number(geometry.tick_angle)})" '
            f'text-anchor="end" dx="-.8em" dy=".15em">{escape(label)}</text>'
        )
    parts.append("</g>")

    parts.append('<g class="axis y" font-size="8" text-anchor="end">')
    for t in geometry.y_ticks:
        parts.append(f'<text x="-3" y="{fmt_number(geometry.y(t))}" dy="0.32em">{fmt_number(t)}</text>')
    parts.append("</g></g></svg>")
    return "".join(parts)
