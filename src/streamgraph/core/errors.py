"""
Exception types raised by ingest, configuration and projection code.

Provides typed exceptions for streamgraph failures:
- IngestError when an uploaded or local CSV cannot be read or decoded at all.
- ConfigError for invalid palettes or chart settings passed explicitly.
- UnknownEntityError when a projection is asked for an entity outside the palette.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Malformed cells are never errors; ingest coerces them (see streamgraph.ingest).
    - Loose env/TOML values are ignored by ChartSettings rather than raising.

Examples:
    >>> from streamgraph.core.errors import StreamgraphError, UnknownEntityError
    >>> issubclass(UnknownEntityError, StreamgraphError)
    True
"""

from __future__ import annotations

__all__ = [
    "StreamgraphError",
    "IngestError",
    "ConfigError",
    "UnknownEntityError",
]


class StreamgraphError(Exception):
    """Base class for streamgraph failures."""


class IngestError(StreamgraphError):
    """
    Raised when a CSV source cannot be read at all.

    Examples:
        - Path does not exist or is not readable
        - Bytes are not valid UTF-8
    """


class ConfigError(StreamgraphError, ValueError):
    """Invalid palette, canvas or chart settings."""


class UnknownEntityError(StreamgraphError, KeyError):
    """Entity name is not part of the configured palette."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
