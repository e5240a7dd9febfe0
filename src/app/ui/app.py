"""
Streamlit application orchestrator for the streamgraph viewer.

This module composes the global header and the page tabs while delegating
supporting concerns to focused modules under app.ui.* (header, helpers, sample).

Responsibilities:
    - Configure the Streamlit page and load ChartSettings once per session.
    - Route new uploads through the session UploadSlot (stale results are dropped,
      failed reads keep the previous Dataset).
    - Project the Dataset and mount the tabs (Streamgraph, Inspect, Data).

Notes:
    - Every rerun rebuilds the charts from the committed Dataset; nothing drawn by
      a previous run is patched in place.
    - Charts come from app.charts; SVG previews from streamgraph.svg.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

import streamlit as st

from app import charts as app_charts
from app.data import CacheConfig, UploadSlot, load_dataset, load_dataset_file
from streamgraph.config import ChartSettings
from streamgraph.core.errors import IngestError
from streamgraph.stack import project_streamgraph
from streamgraph.svg import render_streamgraph_svg, render_tooltip_svg
from streamgraph.tooltip import project_tooltip, tooltip_series

from .header import UploadRequest, render_header
from .helpers import display_frame, format_date, format_value, summarize_dataset

logger = logging.getLogger(__name__)


def get_upload_slot() -> UploadSlot:
    """Return the session's UploadSlot, creating it on first use."""
    if "upload_slot" not in st.session_state:
        st.session_state["upload_slot"] = UploadSlot()
    return cast(UploadSlot, st.session_state["upload_slot"])


def get_settings(config_path: str | None) -> ChartSettings:
    """Load ChartSettings once per session (env > TOML > defaults)."""
    if "chart_settings" not in st.session_state:
        st.session_state["chart_settings"] = ChartSettings.load(config_path)
    return cast(ChartSettings, st.session_state["chart_settings"])


def ingest_request(
    slot: UploadSlot,
    request: UploadRequest,
    settings: ChartSettings,
    cache_cfg: CacheConfig,
) -> bool:
    """Parse one upload into the slot. Returns True if a new Dataset was committed."""
    generation = slot.begin(request.token)
    if generation is None:
        return False
    try:
        df = load_dataset(
            request.data,
            palette=settings.palette,
            date_format=settings.date_format,
            cfg=cache_cfg,
        )
    except IngestError as e:
        slot.fail(generation, f"{request.name}: {e}")
        return False
    return slot.commit(generation, df, source=request.name)


def preload_file(
    slot: UploadSlot, path: str, settings: ChartSettings, cache_cfg: CacheConfig
) -> None:
    """Load a CSV given on the command line into an empty slot."""
    generation = slot.begin(f"file:{Path(path).resolve()}")
    if generation is None:
        return
    try:
        df = load_dataset_file(
            path, palette=settings.palette, date_format=settings.date_format, cfg=cache_cfg
        )
    except IngestError as e:
        slot.fail(generation, str(e))
        return
    slot.commit(generation, df, source=Path(path).name)


def streamlit_app(default_csv: str | None = None, config_path: str | None = None) -> None:
    """Render the streamgraph Streamlit application.

    Args:
        default_csv (str | None): Optional CSV path loaded when nothing is uploaded yet.
        config_path (str | None): Optional TOML settings path; defaults are searched
            in the working directory (streamgraph.toml, pyproject.toml).

    Returns:
        None
    """
    st.set_page_config(page_title="LLM Streamgraph", layout="wide")

    settings = get_settings(config_path)
    slot = get_upload_slot()

    request, cache_cfg = render_header(settings=settings, slot=slot)
    if request is not None:
        if ingest_request(slot, request, settings, cache_cfg):
            st.rerun()
    elif default_csv and not slot.has_data and slot.token is None:
        preload_file(slot, default_csv, settings, cache_cfg)

    if slot.error:
        st.error(f"Could not read file: {slot.error}")
    if slot.dataset is None:
        st.info("No dataset loaded yet.")
        return

    df = slot.dataset
    palette = settings.palette
    geometry = project_streamgraph(df, palette, settings.canvas)

    tab_stream, tab_inspect, tab_data = st.tabs(["Streamgraph", "Inspect", "Data"])

    # ----------------------------
    # Streamgraph
    # ----------------------------
    with tab_stream:
        st.caption("Hover a layer to see that model's values per date.")
        try:
            ch = app_charts.streamgraph_chart(geometry, settings)
            st.altair_chart(cast(Any, ch), theme=None, use_container_width=False)
        except Exception as e:  # pragma: no cover - defensive UX
            logger.exception("streamgraph render failed")
            st.error(f"Failed to render streamgraph: {e}")

        st.download_button(
            "Download SVG",
            data=render_streamgraph_svg(geometry, settings.canvas, curve=settings.curve),
            file_name="streamgraph.svg",
            mime="image/svg+xml",
            disabled=geometry.is_empty,
            key="download_svg",
        )

    # ----------------------------
    # Inspect (static tooltip for one entity)
    # ----------------------------
    with tab_inspect:
        entity = st.selectbox("Model", options=palette.names, index=0, key="inspect_entity")
        if df.is_empty():
            st.caption("Dataset has no rows.")
        else:
            tip = project_tooltip(
                df, entity, palette, settings.tooltip, padding=settings.band_padding
            )
            c1, c2 = st.columns([0.35, 0.65])
            with c1:
                st.markdown(render_tooltip_svg(tip, settings.tooltip), unsafe_allow_html=True)
            with c2:
                st.table(
                    [
                        {"date": format_date(d), "value": format_value(v)}
                        for d, v in tooltip_series(df, entity)
                    ]
                )

    # ----------------------------
    # Data (table viewer)
    # ----------------------------
    with tab_data:
        summary = summarize_dataset(df, palette)
        c1, c2, c3 = st.columns(3)
        with c1:
            st.metric("Rows", f"{summary['rows']}")
        with c2:
            st.metric("Unparsed dates", f"{summary['null_dates']}")
        with c3:
            st.metric("NaN cells", f"{summary['nan_cells']}")
        st.dataframe(display_frame(df), width="stretch")
        totals = cast(dict[str, float], summary["totals"])
        st.table([{"model": n, "total": format_value(totals.get(n))} for n in palette.names])
