"""
Streamgraph App UI package.

This package contains the Streamlit UI for the streamgraph viewer, split into
focused modules for separate concerns.

Modules:
    - app: Streamlit application orchestrator (streamlit_app).
    - header: Title, CSV picker, sample data and cache preferences.
    - sample: Deterministic sample CSV used to demo the app without a file.
    - helpers: Small cross-cutting helpers (dataset summary, formatting).

Usage:
    from app.ui import streamlit_app
    streamlit_app(default_csv="data/models.csv")
"""

from __future__ import annotations

from .app import streamlit_app
from .header import UploadRequest, render_header

__all__ = [
    "streamlit_app",
    "render_header",
    "UploadRequest",
]
