"""
Position scales used by the projectors.

Semantics follow the usual visualization-grammar scales:
- LinearScale maps a numeric domain onto a pixel range; a degenerate domain maps
  every value to the middle of the range.
- TimeScale is a LinearScale over calendar days.
- BandScale splits a pixel range into one band per distinct domain value with
  inner/outer padding, centred in the range.

Scales are frozen dataclasses: pure values that can be compared in tests.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

__all__ = ["LinearScale", "TimeScale", "BandScale", "nice_ticks"]


@dataclass(frozen=True)
class LinearScale:
    """Continuous linear mapping from ``domain`` to ``range``.

    Examples:
        >>> LinearScale(domain=(0.0, 10.0), range=(100.0, 0.0))(5.0)
        50.0
    """

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        if math.isnan(span):
            return math.nan
        if span == 0:
            t = 0.5
        else:
            t = (value - d0) / span
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = 5) -> list[float]:
        return nice_ticks(self.domain[0], self.domain[1], count)


@dataclass(frozen=True)
class TimeScale:
    """Linear mapping from calendar dates (day resolution) to pixels."""

    domain: tuple[date, date] | None
    range: tuple[float, float]

    def __call__(self, value: date | None) -> float:
        if value is None or self.domain is None:
            return math.nan
        d0, d1 = self.domain
        inner = LinearScale((float(d0.toordinal()), float(d1.toordinal())), self.range)
        return inner(float(value.toordinal()))

    @classmethod
    def from_dates(cls, dates: Iterable[date | None], range: tuple[float, float]) -> TimeScale:
        """Build a scale whose domain is the extent of ``dates`` (nulls ignored)."""
        valid = [d for d in dates if d is not None]
        if not valid:
            return cls(domain=None, range=range)
        return cls(domain=(min(valid), max(valid)), range=range)


@dataclass(frozen=True)
class BandScale:
    """Discrete band scale over distinct domain values in first-seen order.

    Attributes:
        domain (tuple): Distinct values; duplicates in the input are collapsed.
        range (tuple[float, float]): Pixel extent covered by the bands.
        padding_inner (float): Fraction of the step left empty between bands.
        padding_outer (float): Fraction of the step left empty at each end.
        align (float): Distribution of the outer slack (0.5 centres the bands).
    """

    domain: tuple[Hashable, ...]
    range: tuple[float, float]
    padding_inner: float = 0.0
    padding_outer: float = 0.0
    align: float = 0.5
    _index: dict[Hashable, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        distinct = tuple(dict.fromkeys(self.domain))
        object.__setattr__(self, "domain", distinct)
        object.__setattr__(self, "_index", {v: i for i, v in enumerate(distinct)})

    @classmethod
    def padded(
        cls, domain: Sequence[Hashable], range: tuple[float, float], padding: float
    ) -> BandScale:
        return cls(tuple(domain), range, padding_inner=padding, padding_outer=padding)

    @property
    def step(self) -> float:
        n = len(self.domain)
        lo, hi = sorted(self.range)
        return (hi - lo) / max(1.0, n - self.padding_inner + self.padding_outer * 2)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding_inner)

    def _start(self) -> float:
        n = len(self.domain)
        lo, hi = sorted(self.range)
        return lo + (hi - lo - self.step * (n - self.padding_inner)) * self.align

    def __call__(self, value: Hashable) -> float | None:
        i = self._index.get(value)
        if i is None:
            return None
        n = len(self.domain)
        start = self._start()
        if self.range[1] < self.range[0]:
            i = n - 1 - i
        return start + self.step * i


def nice_ticks(lo: float, hi: float, count: int = 5) -> list[float]:
    """Return round tick values covering ``[lo, hi]`` (1/2/5 × 10^k steps)."""
    if count <= 0 or math.isnan(lo) or math.isnan(hi):
        return []
    if lo == hi:
        return [lo]
    if lo > hi:
        lo, hi = hi, lo
    raw = (hi - lo) / count
    power = 10 ** math.floor(math.log10(raw))
    err = raw / power
    if err >= 7.07:
        step = 10 * power
    elif err >= 3.16:
        step = 5 * power
    elif err >= 1.41:
        step = 2 * power
    else:
        step = power
    first = math.ceil(lo / step)
    last = math.floor(hi / step)
    return [round(k * step, 12) for k in range(first, last + 1)]
