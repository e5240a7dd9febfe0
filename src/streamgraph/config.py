"""
Configuration for the streamgraph package and app.

Defines ChartSettings, a frozen dataclass carrying the entity palette, canvas geometry
and rendering options. Defaults are sourced from streamgraph.core.constants (the single
source of truth); TOML files and environment variables layer on top.

Source of truth
- streamgraph.core.constants.DEFAULT_PALETTE, CHART_CANVAS, TOOLTIP_CANVAS
- Palette/Canvas validation lives in streamgraph.core.schema

Import DAG discipline
- Depends only on stdlib, pydantic and streamgraph.core.
- Does not import the app package.

Notes
- Precedence is env > TOML > defaults.
- Loose values from env/TOML that fail to parse are ignored (logged at WARNING);
  explicit constructor arguments are validated and raise ConfigError.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError

from .core.constants import (
    BAND_PADDING,
    CHART_CANVAS,
    DATE_FORMAT,
    DEFAULT_PALETTE,
    TOOLTIP_CANVAS,
)
from .core.errors import ConfigError
from .core.schema import Canvas, EntitySpec, Margins, Palette

__all__ = ["ChartSettings", "Curve"]

logger = logging.getLogger(__name__)

Curve = Literal["basis", "linear"]
_CURVES = ("basis", "linear")


@dataclass(frozen=True)
class ChartSettings:
    """
    Runtime settings for ingest, projection and rendering.

    Attributes:
        palette (Palette): Ordered entity set (stacking order) with display colors.
        canvas (Canvas): Streamgraph drawing surface (default 800x400).
        tooltip (Canvas): Tooltip bar-chart surface (default 150x100).
        date_format (str): strptime pattern for the Date column (default "%m/%d/%y").
        band_padding (float): Inner/outer padding fraction of the tooltip band scale.
        curve (Literal["basis", "linear"]): Area boundary interpolation.
        cache_ttl (int | None): Streamlit cache TTL for parsed uploads (None = no expiry).

    Examples:
        >>> from streamgraph.config import ChartSettings
        >>> ChartSettings().palette.names[0]
        'LLaMA-3.1'
    """

    palette: Palette = field(default=DEFAULT_PALETTE)
    canvas: Canvas = field(default=CHART_CANVAS)
    tooltip: Canvas = field(default=TOOLTIP_CANVAS)
    date_format: str = DATE_FORMAT
    band_padding: float = BAND_PADDING
    curve: Curve = "basis"
    cache_ttl: int | None = 600

    def __post_init__(self) -> None:
        if not 0.0 <= self.band_padding < 1.0:
            raise ConfigError(f"band_padding must be in [0, 1), got {self.band_padding}")
        if self.curve not in _CURVES:
            raise ConfigError(f"curve must be one of {_CURVES}, got {self.curve!r}")
        if self.cache_ttl is not None and self.cache_ttl < 0:
            raise ConfigError("cache_ttl must be >= 0")
        if not self.date_format:
            raise ConfigError("date_format must not be empty")

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: ChartSettings, cfg: dict[str, Any] | None) -> ChartSettings:
        """Apply a loose config mapping onto ChartSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _try(label: str, fn: Any) -> None:
            nonlocal s
            try:
                s = fn(s)
            except (ConfigError, ValidationError, TypeError, ValueError) as e:
                logger.warning("ignoring invalid chart setting %s: %s", label, e)

        def _canvas(curr: Canvas, width: Any, height: Any, margins: Any) -> Canvas:
            m = curr.margins
            if isinstance(margins, dict):
                m = Margins(**{**m.model_dump(), **margins})
            return Canvas(
                width=float(width) if width is not None else curr.width,
                height=float(height) if height is not None else curr.height,
                margins=m,
            )

        if any(k in cfg for k in ("width", "height", "margins")):
            _try(
                "canvas",
                lambda x: replace(
                    x,
                    canvas=_canvas(x.canvas, cfg.get("width"), cfg.get("height"), cfg.get("margins")),
                ),
            )

        if any(k in cfg for k in ("tooltip_width", "tooltip_height", "tooltip_margins")):
            _try(
                "tooltip",
                lambda x: replace(
                    x,
                    tooltip=_canvas(
                        x.tooltip,
                        cfg.get("tooltip_width"),
                        cfg.get("tooltip_height"),
                        cfg.get("tooltip_margins"),
                    ),
                ),
            )

        if "entities" in cfg and isinstance(cfg["entities"], list):
            entries = cfg["entities"]
            _try(
                "entities",
                lambda x: replace(
                    x,
                    palette=Palette(entities=tuple(EntitySpec(**dict(e)) for e in entries)),
                ),
            )

        if "date_format" in cfg and isinstance(cfg["date_format"], str):
            _try("date_format", lambda x: replace(x, date_format=cfg["date_format"]))

        if "band_padding" in cfg:
            _try("band_padding", lambda x: replace(x, band_padding=float(cfg["band_padding"])))

        if "curve" in cfg and isinstance(cfg["curve"], str):
            _try("curve", lambda x: replace(x, curve=cfg["curve"].strip().lower()))

        if "cache_ttl" in cfg:
            # 0 disables expiry
            _try(
                "cache_ttl",
                lambda x: replace(x, cache_ttl=int(cfg["cache_ttl"]) or None),
            )

        return s

    @classmethod
    def from_env(
        cls, base: ChartSettings | None = None, prefix: str = "STREAMGRAPH_"
    ) -> ChartSettings:
        """
        Build ChartSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - STREAMGRAPH_WIDTH, STREAMGRAPH_HEIGHT
            - STREAMGRAPH_TOOLTIP_WIDTH, STREAMGRAPH_TOOLTIP_HEIGHT
            - STREAMGRAPH_DATE_FORMAT
            - STREAMGRAPH_BAND_PADDING
            - STREAMGRAPH_CURVE ("basis" | "linear")
            - STREAMGRAPH_CACHE_TTL (seconds; 0 disables expiry)

        The entity palette is not configurable via env; provide it via TOML.
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for name in (
            "width",
            "height",
            "tooltip_width",
            "tooltip_height",
            "date_format",
            "band_padding",
            "curve",
            "cache_ttl",
        ):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ChartSettings:
        """
        Build ChartSettings from a TOML file.

        Search order when `path` is None:
            1) ./streamgraph.toml (with either a [chart] table or top-level keys)
            2) ./pyproject.toml under [tool.streamgraph.chart]

        Returns defaults if no file is present or none parses.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning("could not read %s: %s", p, e)
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "streamgraph.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                if path is not None:
                    logger.warning("chart settings file %s does not exist; using defaults", p)
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("streamgraph", {}).get("chart", {}) if isinstance(tool, dict) else None
            else:
                chart = data.get("chart")
                cfg = chart if isinstance(chart, dict) else data
            if cfg:
                logger.debug("chart settings loaded from %s", p)
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ChartSettings:
        """
        Load ChartSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (streamgraph.toml, pyproject.toml).

        Returns:
            ChartSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
