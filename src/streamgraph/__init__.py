"""
streamgraph — Ingest, layout and render helpers for entity streamgraphs.

## Responsibilities
- Parse uploaded CSV text into a Polars Dataset (one row per date, one column per entity).
- Project a Dataset into wiggle-offset stacked layers and a per-entity tooltip bar chart.
- Emit SVG path data for the projected geometry.

## Public API
- ingest — CSV text/bytes/file → Dataset.
- stack — Streamgraph projection (layers, scales, legend).
- tooltip — Tooltip projection for one entity.
- scales — Linear, time and band scales.
- curves — Basis-spline path generation.
- svg — Standalone SVG render of a projected streamgraph.
- config — ChartSettings (env > TOML > defaults).

## Import DAG discipline
- Depends on: polars, pydantic (and stdlib).
- Must not import streamlit or altair; the app package owns presentation.
"""

from __future__ import annotations

from .config import ChartSettings
from .core.constants import DEFAULT_PALETTE
from .core.schema import EntitySpec, Palette
from .ingest import parse_csv_text, read_csv_bytes, read_csv_file
from .stack import StreamGeometry, StreamLayer, project_streamgraph, stack_values
from .tooltip import TooltipGeometry, project_tooltip, tooltip_series

__all__ = [
    "ChartSettings",
    "DEFAULT_PALETTE",
    "EntitySpec",
    "Palette",
    "parse_csv_text",
    "read_csv_bytes",
    "read_csv_file",
    "StreamGeometry",
    "StreamLayer",
    "project_streamgraph",
    "stack_values",
    "TooltipGeometry",
    "project_tooltip",
    "tooltip_series",
]

__version__ = "0.1.0"
