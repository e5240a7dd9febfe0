"""
Header (global controls) for the streamgraph Streamlit application.

This module renders the top-of-page controls, including:
- Title and a caption describing the loaded Dataset.
- CSV file picker (``.csv`` only) and a sample-data button.
- Cache preferences panel and construction of the CacheConfig used by loaders.

Notes:
    - Does not parse anything itself; it only turns widget state into an
      UploadRequest that app.ui.app hands to the UploadSlot.
    - A request is emitted only when the picked file changes, so reruns caused by
      other widgets never re-open an upload generation.
"""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from app.data import CacheConfig, UploadSlot, get_date_bounds
from streamgraph.config import ChartSettings

from .helpers import format_date
from .sample import SAMPLE_FILENAME, sample_csv_text


@dataclass(frozen=True)
class UploadRequest:
    """A file to ingest: opaque identity token, display name and raw bytes."""

    token: str
    name: str
    data: bytes


def render_header(
    *,
    settings: ChartSettings,
    slot: UploadSlot,
) -> tuple[UploadRequest | None, CacheConfig]:
    """Render the global header and return a pending upload and the cache config.

    Args:
        settings (ChartSettings): Active settings (palette drives the help text,
            cache_ttl seeds the cache preferences).
        slot (UploadSlot): Current upload slot, used for the status caption.

    Returns:
        tuple[UploadRequest | None, CacheConfig]: (new_upload_or_none, cache_config)
    """
    st.markdown("### LLM Streamgraph")

    # Session defaults
    if "last_upload_token" not in st.session_state:
        st.session_state["last_upload_token"] = None
    if "sample_bump" not in st.session_state:
        st.session_state["sample_bump"] = 0
    if "cache_ttl" not in st.session_state:
        st.session_state["cache_ttl"] = int(settings.cache_ttl or 0)
    if "cache_persist" not in st.session_state:
        st.session_state["cache_persist"] = False

    request: UploadRequest | None = None
    c1, c2, c3 = st.columns([0.55, 0.25, 0.20])

    with c1:
        uploaded = st.file_uploader(
            "CSV file",
            type=["csv"],
            accept_multiple_files=False,
            help="Columns: Date (M/D/YY) and " + ", ".join(settings.palette.names),
            key="csv_uploader",
        )
        if uploaded is not None:
            token = f"upload:{uploaded.file_id}"
            if token != st.session_state["last_upload_token"]:
                st.session_state["last_upload_token"] = token
                request = UploadRequest(token=token, name=uploaded.name, data=uploaded.getvalue())

        if slot.dataset is not None:
            bounds = get_date_bounds(slot.dataset)
            st.caption(
                f"Loaded {slot.source or 'dataset'}: {slot.dataset.height} rows"
                + (f", {format_date(bounds[0])} to {format_date(bounds[1])}" if bounds else "")
            )
        else:
            st.caption("Upload a CSV file to draw the streamgraph.")

    with c2:
        if st.button("Load sample data", key="load_sample"):
            st.session_state["sample_bump"] += 1
            request = UploadRequest(
                token=f"sample:{st.session_state['sample_bump']}",
                name=SAMPLE_FILENAME,
                data=sample_csv_text(palette=settings.palette).encode("utf-8"),
            )

    with c3:
        with st.expander("Cache", expanded=False):
            ttl = st.number_input(
                "Cache TTL (seconds)",
                min_value=0,
                value=int(st.session_state["cache_ttl"]),
                step=60,
                help="0 disables TTL",
                key="cache_ttl_header",
            )
            persist = st.checkbox(
                "Persist to disk",
                value=bool(st.session_state["cache_persist"]),
                key="cache_persist_header",
            )
            st.session_state["cache_ttl"] = int(ttl)
            st.session_state["cache_persist"] = bool(persist)

    cache_cfg = CacheConfig(
        ttl=int(st.session_state["cache_ttl"]) if int(st.session_state["cache_ttl"]) > 0 else None,
        persist=bool(st.session_state["cache_persist"]),
    )
    return request, cache_cfg
