from __future__ import annotations

"""
Top-level Streamlit app package.

This package hosts the interactive streamgraph viewer (Streamlit) decoupled from
the streamgraph.* library modules. Ingest and layout stay under streamgraph.*; the
Streamlit UI shell, chart specs and upload handling live here.

CLI entrypoint (configured in pyproject.toml):
    streamgraph-app = app.main:main
"""
