"""
Pydantic v2 models for the entity palette and chart geometry.

Responsibilities
- Describe the configured entity set as an ordered list of {name, color}.
- Describe a drawing canvas (outer size plus margins) and derive its inner plot area.
- Validate colors (``#rrggbb``), unique entity names and positive plot areas.

Style
- Zero-IO (stdlib + pydantic only).
- Models are frozen so they hash and can key Streamlit caches.

References
- constants: src/streamgraph/core/constants.py (default palette and canvases)
- errors: src/streamgraph/core/errors.py
- tests: tests/core/test_schema_palette.py
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ConfigError, UnknownEntityError

__all__ = [
    "EntitySpec",
    "Palette",
    "Margins",
    "Canvas",
]

_HEX_COLOR = re.compile(r"^#[0-9a-f]{6}$")


class EntitySpec(BaseModel):
    """
    One named series and its display color.

    Attributes:
        name (str): Column name in the uploaded CSV (case-sensitive).
        color (str): Display color as ``#rrggbb`` (normalized to lower case).

    Raises:
        pydantic.ValidationError: If name is empty or color is not ``#rrggbb``.

    Examples:
        >>> from streamgraph.core.schema import EntitySpec
        >>> EntitySpec(name="GPT-4", color="#E41A1C").color
        '#e41a1c'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    color: str

    @field_validator("color")
    @classmethod
    def _normalize_color(cls, v: str) -> str:
        lo = v.strip().lower()
        if not _HEX_COLOR.match(lo):
            raise ConfigError(f"color must be #rrggbb, got {v!r}")
        return lo


class Palette(BaseModel):
    """
    Ordered entity set. Order is the stacking order: the first entity is the
    bottom-most layer and the first legend row.

    Attributes:
        entities (tuple[EntitySpec, ...]): At least one entity, unique names.

    Raises:
        pydantic.ValidationError: If empty or if names repeat.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    entities: tuple[EntitySpec, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_unique(self) -> Palette:
        seen: set[str] = set()
        for e in self.entities:
            if e.name in seen:
                raise ConfigError(f"duplicate entity name: {e.name}")
            seen.add(e.name)
        return self

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> Palette:
        """Build a palette from ``(name, color)`` pairs in stacking order."""
        return cls(entities=tuple(EntitySpec(name=n, color=c) for n, c in pairs))

    @classmethod
    def from_mapping(cls, order: Iterable[str], colors: Mapping[str, str]) -> Palette:
        """Build a palette from a stacking order and a name → color mapping."""
        missing = [n for n in order if n not in colors]
        if missing:
            raise ConfigError(f"no color configured for: {', '.join(missing)}")
        return cls.from_pairs((n, colors[n]) for n in order)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.entities]

    @property
    def colors(self) -> list[str]:
        return [e.color for e in self.entities]

    def color_of(self, name: str) -> str:
        for e in self.entities:
            if e.name == name:
                return e.color
        raise UnknownEntityError(f"unknown entity: {name}")

    def __contains__(self, name: object) -> bool:
        return any(e.name == name for e in self.entities)


class Margins(BaseModel):
    """Margins around a plot area, in logical pixels."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    top: float = Field(0.0, ge=0.0)
    right: float = Field(0.0, ge=0.0)
    bottom: float = Field(0.0, ge=0.0)
    left: float = Field(0.0, ge=0.0)


class Canvas(BaseModel):
    """
    Outer drawing surface and its margins.

    Attributes:
        width (float): Outer width in logical pixels.
        height (float): Outer height in logical pixels.
        margins (Margins): Space reserved for axes and legend.

    Notes:
        Scales map onto the inner area: ``[0, inner_width]`` horizontally and
        ``[inner_height, 0]`` vertically.

    Examples:
        >>> from streamgraph.core.schema import Canvas, Margins
        >>> c = Canvas(width=800, height=400, margins=Margins(top=20, right=160, bottom=30, left=50))
        >>> (c.inner_width, c.inner_height)
        (590.0, 350.0)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: float = Field(..., gt=0.0)
    height: float = Field(..., gt=0.0)
    margins: Margins = Field(default_factory=Margins)

    @model_validator(mode="after")
    def _check_inner_area(self) -> Canvas:
        if self.inner_width <= 0 or self.inner_height <= 0:
            raise ConfigError("margins leave no room for the plot area")
        return self

    @property
    def inner_width(self) -> float:
        return float(self.width - self.margins.left - self.margins.right)

    @property
    def inner_height(self) -> float:
        return float(self.height - self.margins.top - self.margins.bottom)
