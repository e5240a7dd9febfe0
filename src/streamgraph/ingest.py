"""
CSV ingest: raw text/bytes/files → Dataset.

A Dataset is a Polars DataFrame with one row per source row (file order, never
re-sorted) and the columns ``date`` (pl.Date) followed by one Float64 column per
palette entity in stacking order.

Coercion rules
- ``Date`` cells are parsed with the configured pattern (default ``%m/%d/%y``); a cell
  that does not match yields a null date.
- Entity cells are stripped and cast to float. Blank cells become 0.0, non-numeric
  cells become NaN. Hex literals (``0x1f``) are read as integers and only the
  spelled-out ``Infinity`` is infinite; ``inf``, ``nan`` and other non-finite
  spellings become NaN. An entity column absent from the header is NaN for every row.
- NaN values are passed through untouched into layout; nothing is rejected.

Errors
- IngestError only when the source cannot be read or decoded. A file whose quoting is
  broken is re-read with quoting disabled, so stray quotes end up in (NaN) cells
  instead of failing the upload.
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path

import polars as pl

from .core.constants import DATE_COLUMN, DATE_FORMAT, DEFAULT_PALETTE
from .core.errors import IngestError
from .core.schema import Palette

__all__ = [
    "DATE_FIELD",
    "dataset_schema",
    "empty_dataset",
    "parse_csv_text",
    "read_csv_bytes",
    "read_csv_file",
]

logger = logging.getLogger(__name__)

# Column name of the parsed date in a Dataset.
DATE_FIELD = "date"


def dataset_schema(palette: Palette | None = None) -> dict[str, pl.DataType]:
    """Return the Polars schema of a Dataset for the given palette."""
    pal = palette or DEFAULT_PALETTE
    schema: dict[str, pl.DataType] = {DATE_FIELD: pl.Date()}
    for name in pal.names:
        schema[name] = pl.Float64()
    return schema


def empty_dataset(palette: Palette | None = None) -> pl.DataFrame:
    return pl.DataFrame(schema=dataset_schema(palette))


def _date_parser(fmt: str) -> Callable[[str], date | None]:
    def parse(cell: str) -> date | None:
        try:
            return datetime.strptime(cell.strip(), fmt).date()
        except ValueError:
            return None

    return parse


def _coerce_number(name: str) -> pl.Expr:
    # mirrors JavaScript's unary plus on a cell
    s = pl.col(name).str.strip_chars()
    lower = s.str.to_lowercase()
    num = s.cast(pl.Float64, strict=False)
    hex_value = (
        lower.str.strip_prefix("0x").str.to_integer(base=16, strict=False).cast(pl.Float64)
    )
    return (
        pl.when(s.is_null() | (s == ""))
        .then(pl.lit(0.0, dtype=pl.Float64))
        .when(lower.str.starts_with("0x"))
        .then(hex_value.fill_null(float("nan")))
        .when(s.str.contains(r"^[+-]?Infinity$"))
        .then(
            pl.when(s.str.starts_with("-"))
            .then(pl.lit(float("-inf"), dtype=pl.Float64))
            .otherwise(pl.lit(float("inf"), dtype=pl.Float64))
        )
        .when(num.is_infinite())
        .then(pl.lit(float("nan"), dtype=pl.Float64))
        .otherwise(num.fill_null(float("nan")))
        .alias(name)
    )


def _read_raw(text: str) -> pl.DataFrame:
    data = text.encode("utf-8")
    try:
        return pl.read_csv(io.BytesIO(data), infer_schema_length=0, truncate_ragged_lines=True)
    except pl.exceptions.PolarsError as e:
        logger.warning("CSV quoting is malformed (%s); re-reading with quoting disabled", e)
    try:
        return pl.read_csv(
            io.BytesIO(data),
            infer_schema_length=0,
            truncate_ragged_lines=True,
            quote_char=None,
        )
    except pl.exceptions.PolarsError as e:
        raise IngestError(f"CSV could not be parsed: {e}") from e


def parse_csv_text(
    text: str,
    palette: Palette | None = None,
    *,
    date_format: str = DATE_FORMAT,
) -> pl.DataFrame:
    """Parse CSV text into a Dataset.

    Args:
        text (str): CSV text with a header row containing ``Date`` and the entity columns.
        palette (Palette | None): Entity set; defaults to DEFAULT_PALETTE.
        date_format (str): strptime pattern for the ``Date`` column.

    Returns:
        pl.DataFrame: Dataset with columns ``date`` then palette entities in order.

    Raises:
        IngestError: If the text cannot be tokenized as CSV at all.

    Examples:
        >>> df = parse_csv_text("Date,GPT-4\\n1/5/24,3\\n")
        >>> df.height
        1
    """
    pal = palette or DEFAULT_PALETTE
    if not text.strip():
        return empty_dataset(pal)

    raw = _read_raw(text)

    cols = set(raw.columns)
    exprs: list[pl.Expr] = []
    if DATE_COLUMN in cols:
        exprs.append(
            pl.col(DATE_COLUMN)
            .map_elements(_date_parser(date_format), return_dtype=pl.Date, skip_nulls=True)
            .alias(DATE_FIELD)
        )
    else:
        exprs.append(pl.lit(None, dtype=pl.Date).alias(DATE_FIELD))

    for name in pal.names:
        if name in cols:
            exprs.append(_coerce_number(name))
        else:
            exprs.append(pl.lit(float("nan"), dtype=pl.Float64).alias(name))

    # literal columns broadcast to the height of the raw frame
    df = raw.with_columns(exprs).select([DATE_FIELD, *pal.names])
    df = df.cast(dataset_schema(pal))  # type: ignore[arg-type]

    if df.height:
        nan_cells = int(
            df.select(pl.sum_horizontal(pl.col(pal.names).is_nan().sum())).item()
        )
        null_dates = df.get_column(DATE_FIELD).null_count()
        missing = [n for n in pal.names if n not in cols]
        logger.info(
            "parsed %d rows (unparseable dates=%d, NaN cells=%d, missing columns=%s)",
            df.height,
            null_dates,
            nan_cells,
            missing or "none",
        )
    return df


def read_csv_bytes(
    data: bytes,
    palette: Palette | None = None,
    *,
    date_format: str = DATE_FORMAT,
) -> pl.DataFrame:
    """Decode uploaded bytes (UTF-8, BOM tolerated) and parse them into a Dataset."""
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise IngestError(f"file is not valid UTF-8 text: {e}") from e
    return parse_csv_text(text, palette, date_format=date_format)


def read_csv_file(
    path: str | os.PathLike[str],
    palette: Palette | None = None,
    *,
    date_format: str = DATE_FORMAT,
) -> pl.DataFrame:
    """Read a local CSV file into a Dataset.

    Raises:
        IngestError: If the file cannot be read or decoded.
    """
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise IngestError(f"could not read {p}: {e}") from e
    logger.debug("read %d bytes from %s", len(data), p)
    return read_csv_bytes(data, palette, date_format=date_format)
