from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import polars as pl
import streamlit as st

from streamgraph.core.schema import Palette
from streamgraph.ingest import DATE_FIELD, read_csv_bytes, read_csv_file

__all__ = [
    "CacheConfig",
    "UploadSlot",
    "load_dataset",
    "load_dataset_file",
    "get_date_bounds",
]

logger = logging.getLogger(__name__)

# ---------- Cache configuration (factory of cached callables) ----------


@dataclass(frozen=True)
class CacheConfig:
    """Hashable cache configuration for Streamlit @st.cache_data.

    Note: Streamlit's decorator parameters (ttl, persist) are fixed at decoration
    time. We build and memoize decorated callables per (name, ttl, persist) so the
    app can switch these at runtime while still benefiting from caching.
    """

    ttl: int | None = None
    persist: bool = False


# Registry of decorated functions by (loader_name, CacheConfig)
_CACHE_REGISTRY: dict[tuple[str, CacheConfig], Callable[..., Any]] = {}


def _get_cached(loader_name: str, cfg: CacheConfig, fn: Callable[..., Any]) -> Callable[..., Any]:
    key = (loader_name, cfg)
    if key in _CACHE_REGISTRY:
        return _CACHE_REGISTRY[key]
    if cfg.persist:
        wrapped = st.cache_data(persist="disk", ttl=cfg.ttl)(fn)
    else:
        wrapped = st.cache_data(ttl=cfg.ttl)(fn)
    _CACHE_REGISTRY[key] = wrapped
    return wrapped


# ---------- Loaders (internal implementations) ----------

# Palettes travel as (name, color) pairs so Streamlit can hash the cache key.
PalettePairs = tuple[tuple[str, str], ...]


def _pairs(palette: Palette) -> PalettePairs:
    return tuple((e.name, e.color) for e in palette.entities)


def _load_dataset_impl(data: bytes, pairs: PalettePairs, date_format: str) -> pl.DataFrame:
    return read_csv_bytes(data, Palette.from_pairs(pairs), date_format=date_format)


def _load_dataset_file_impl(path: str, pairs: PalettePairs, date_format: str) -> pl.DataFrame:
    return read_csv_file(path, Palette.from_pairs(pairs), date_format=date_format)


# ---------- Public loader APIs (dispatch to cached implementations) ----------


def load_dataset(
    data: bytes,
    *,
    palette: Palette,
    date_format: str,
    cfg: CacheConfig = CacheConfig(),
) -> pl.DataFrame:
    """Parse uploaded CSV bytes into a Dataset (cached by content)."""
    fn = _get_cached("load_dataset", cfg, _load_dataset_impl)
    return fn(data, _pairs(palette), date_format)  # type: ignore[no-any-return]


def load_dataset_file(
    path: str | Path,
    *,
    palette: Palette,
    date_format: str,
    cfg: CacheConfig = CacheConfig(),
) -> pl.DataFrame:
    """Read a local CSV into a Dataset (cached by path)."""
    fn = _get_cached("load_dataset_file", cfg, _load_dataset_file_impl)
    return fn(str(path), _pairs(palette), date_format)  # type: ignore[no-any-return]


# ---------- Upload slot (single-slot request generations) ----------


@dataclass
class UploadSlot:
    """Holds the current Dataset and guards it against stale uploads.

    Every new upload token opens a new generation; only the newest generation may
    commit a result, so a slow read that finishes after a newer upload started is
    dropped. A failed read leaves the previously committed Dataset in place.

    Attributes:
        generation (int): Latest issued generation (0 before the first upload).
        token (str | None): Identity of the upload that opened ``generation``.
        dataset (pl.DataFrame | None): Last committed Dataset.
        source (str | None): Display name of the committed Dataset's file.
        error (str | None): Message of the latest failed read, cleared on commit.
        loaded_at (float | None): UNIX time of the last commit.
    """

    generation: int = 0
    token: str | None = None
    dataset: pl.DataFrame | None = None
    source: str | None = None
    error: str | None = None
    loaded_at: float | None = None

    def begin(self, token: str) -> int | None:
        """Open a generation for ``token``; None if that token is already current."""
        if token == self.token:
            return None
        self.generation += 1
        self.token = token
        logger.debug("upload generation %d opened for %s", self.generation, token)
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def commit(self, generation: int, dataset: pl.DataFrame, source: str | None = None) -> bool:
        """Replace the Dataset wholesale if ``generation`` is still current."""
        if not self.is_current(generation):
            logger.info(
                "dropping stale upload result (generation %d, current %d)",
                generation,
                self.generation,
            )
            return False
        self.dataset = dataset
        self.source = source
        self.error = None
        self.loaded_at = time.time()
        return True

    def fail(self, generation: int, message: str) -> bool:
        """Record a failed read for ``generation``; the Dataset is left untouched."""
        if not self.is_current(generation):
            return False
        logger.warning("upload generation %d failed: %s", generation, message)
        self.error = message
        return True

    @property
    def has_data(self) -> bool:
        return self.dataset is not None


# ---------- Date bounds ----------


def get_date_bounds(df: pl.DataFrame) -> tuple[date, date] | None:
    """Return (min date, max date) of a Dataset, or None if it has no valid dates."""
    if DATE_FIELD not in df.columns:
        raise ValueError(f"get_date_bounds requires a '{DATE_FIELD}' column")
    if df.height == 0:
        return None
    agg = df.select(
        pl.col(DATE_FIELD).min().alias("d_min"), pl.col(DATE_FIELD).max().alias("d_max")
    )
    d_min, d_max = agg.row(0)
    if d_min is None or d_max is None:
        return None
    return (d_min, d_max)
