"""
streamgraph.core — Zero-IO constants, errors and configuration models.

## Responsibilities
- Single source of truth for the default entity palette and chart geometry.
- Typed exceptions for ingest, configuration and projection failures.
- Pydantic models describing the entity palette and canvas geometry.

## Import DAG discipline
- Depends on: stdlib + pydantic only; no file IO.
"""

from __future__ import annotations

from .constants import DEFAULT_PALETTE
from .errors import ConfigError, IngestError, StreamgraphError, UnknownEntityError
from .schema import Canvas, EntitySpec, Margins, Palette

__all__ = [
    "DEFAULT_PALETTE",
    "StreamgraphError",
    "IngestError",
    "ConfigError",
    "UnknownEntityError",
    "Canvas",
    "EntitySpec",
    "Margins",
    "Palette",
]
