"""
SVG path data for lines and areas, with basis-spline or linear interpolation.

The basis curve is the uniform cubic B-spline emitted as Bézier segments: it passes
near, not through, interior points and ends exactly on the first and last point.
Point runs containing non-finite coordinates are split into separate sub-paths.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

__all__ = ["Point", "PathBuilder", "fmt_number", "line_path", "area_path"]

Point = tuple[float, float]


def fmt_number(v: float) -> str:
    s = f"{v:.3f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


class PathBuilder:
    """Accumulates SVG path commands."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def move_to(self, x: float, y: float) -> None:
        self._parts.append(f"M{fmt_number(x)},{fmt_number(y)}")

    def line_to(self, x: float, y: float) -> None:
        self._parts.append(f"L{fmt_number(x)},{fmt_number(y)}")

    def bezier_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        self._parts.append(
            f"C{fmt_number(x1)},{fmt_number(y1)},{fmt_number(x2)},{fmt_number(y2)},{fmt_number(x)},{fmt_number(y)}"
        )

    def close(self) -> None:
        self._parts.append("Z")

    def __str__(self) -> str:
        return "".join(self._parts)


def _linear(path: PathBuilder, pts: Sequence[Point], *, join: bool) -> None:
    for i, (x, y) in enumerate(pts):
        if i == 0 and not join:
            path.move_to(x, y)
        else:
            path.line_to(x, y)


def _basis(path: PathBuilder, pts: Sequence[Point], *, join: bool) -> None:
    # join=True continues the current sub-path (second edge of an area)
    x0 = y0 = x1 = y1 = math.nan

    def segment(x: float, y: float) -> None:
        path.bezier_to(
            (2 * x0 + x1) / 3,
            (2 * y0 + y1) / 3,
            (x0 + 2 * x1) / 3,
            (y0 + 2 * y1) / 3,
            (x0 + 4 * x1 + x) / 6,
            (y0 + 4 * y1 + y) / 6,
        )

    for i, (x, y) in enumerate(pts):
        if i == 0:
            if join:
                path.line_to(x, y)
            else:
                path.move_to(x, y)
        elif i == 2:
            path.line_to((5 * x0 + x1) / 6, (5 * y0 + y1) / 6)
            segment(x, y)
        elif i > 2:
            segment(x, y)
        x0, x1 = x1, x
        y0, y1 = y1, y

    n = len(pts)
    if n >= 3:
        segment(x1, y1)
    if n >= 2:
        path.line_to(x1, y1)


def _runs(pts: Sequence[Point]) -> list[list[Point]]:
    runs: list[list[Point]] = []
    cur: list[Point] = []
    for x, y in pts:
        if math.isfinite(x) and math.isfinite(y):
            cur.append((x, y))
        elif cur:
            runs.append(cur)
            cur = []
    if cur:
        runs.append(cur)
    return runs


def _draw(curve: str):
    if curve == "basis":
        return _basis
    if curve == "linear":
        return _linear
    raise ValueError(f"unknown curve: {curve!r}")


def line_path(points: Sequence[Point], curve: str = "basis") -> str:
    """Return SVG path data for an open line through ``points``."""
    draw = _draw(curve)
    path = PathBuilder()
    for run in _runs(points):
        draw(path, run, join=False)
    return str(path)


def area_path(top: Sequence[Point], bottom: Sequence[Point], curve: str = "basis") -> str:
    """Return SVG path data for the region between two boundaries.

    The upper boundary is drawn forward, the lower boundary backward, and the
    region is closed. ``top[j]`` and ``bottom[j]`` share an x position; indices where
    either boundary is non-finite split the area into separate regions.

    Examples:
        >>> area_path([(0, 0), (10, 0)], [(0, 5), (10, 5)], curve="linear")
        'M0,0L10,0L10,5L0,5Z'
    """
    if len(top) != len(bottom):
        raise ValueError("top and bottom boundaries must have the same length")
    draw = _draw(curve)
    path = PathBuilder()
    ok = [
        all(math.isfinite(c) for c in (*t, *b)) for t, b in zip(top, bottom, strict=True)
    ]
    j = 0
    n = len(top)
    while j < n:
        if not ok[j]:
            j += 1
            continue
        k = j
        while k < n and ok[k]:
            k += 1
        draw(path, top[j:k], join=False)
        draw(path, list(reversed(bottom[j:k])), join=True)
        path.close()
        j = k
    return str(path)
