"""
Pure-Python polygon geometry utilities.

All coordinates in model units, origin bottom-left, X = site width,
Y = site length.  Polygons are open point lists (the first point is not
repeated at the end).
"""

from __future__ import annotations

import math
from typing import Sequence

from modplan.config import LAYOUT_RULES

Point = tuple[float, float]
Loop = list[Point]


# ── core primitives ─────────────────────────────────────────────────


def polygon_area(points: Sequence[Point]) -> float:
    """Signed area via shoelace formula (positive = CCW)."""
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        x0, y0 = points[i]
        x1, y1 = points[(i + 1) % n]
        area += x0 * y1 - x1 * y0
    return area / 2.0


def ensure_ccw(points: Sequence[Point]) -> Loop:
    """Return a copy with counter-clockwise winding."""
    if polygon_area(points) < 0:
        return list(reversed(points))
    return list(points)


def _cross(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _close(a: Point, b: Point, tol: float) -> bool:
    return abs(a[0] - b[0]) <= tol and abs(a[1] - b[1]) <= tol


def _drop_repeats(points: Sequence[Point], tol: float) -> Loop:
    """Remove consecutive near-duplicate points (including wrap-around)."""
    out: Loop = []
    for p in points:
        if not out or not _close(out[-1], p, tol):
            out.append(p)
    while len(out) > 1 and _close(out[0], out[-1], tol):
        out.pop()
    return out


# ── Sutherland–Hodgman clipping ─────────────────────────────────────


def _line_intersection(
    p: Point, q: Point, a: Point, b: Point,
) -> Point | None:
    """Intersection of line p→q with line a→b, or None if parallel."""
    a1 = q[1] - p[1]
    b1 = p[0] - q[0]
    c1 = a1 * p[0] + b1 * p[1]
    a2 = b[1] - a[1]
    b2 = a[0] - b[0]
    c2 = a2 * a[0] + b2 * a[1]
    det = a1 * b2 - a2 * b1
    if abs(det) < 1e-12:
        return None
    return ((b2 * c1 - b1 * c2) / det, (a1 * c2 - a2 * c1) / det)


def clip_polygon(
    subject: Sequence[Point],
    clip: Sequence[Point],
    tol: float = LAYOUT_RULES.tolerance,
) -> Loop:
    """Intersection of *subject* with the convex polygon *clip*.

    The subject is clipped successively against the half-plane to the
    left of every edge of the (counter-clockwise) clip polygon.  A
    clockwise clip polygon is re-wound first.  Returns an empty list
    when the intersection has fewer than three distinct points.
    """
    clip_ccw = _drop_repeats(ensure_ccw(clip), tol)
    output = _drop_repeats(subject, tol)
    if len(clip_ccw) < 3 or len(output) < 3:
        return []

    n = len(clip_ccw)
    for i in range(n):
        a = clip_ccw[i]
        b = clip_ccw[(i + 1) % n]
        if math.hypot(b[0] - a[0], b[1] - a[1]) < tol:
            continue  # degenerate clip edge

        source = output
        output = []
        m = len(source)
        for j in range(m):
            p = source[j]
            q = source[(j + 1) % m]
            p_in = _cross(a, b, p) >= -tol
            q_in = _cross(a, b, q) >= -tol
            if p_in and q_in:
                output.append(q)
            elif p_in and not q_in:
                hit = _line_intersection(p, q, a, b)
                if hit is not None:
                    output.append(hit)
            elif not p_in and q_in:
                hit = _line_intersection(p, q, a, b)
                if hit is not None:
                    output.append(hit)
                output.append(q)
        output = _drop_repeats(output, tol)
        if len(output) < 3:
            return []

    return output


# ── convex hull ─────────────────────────────────────────────────────


def convex_hull(
    points: Sequence[Point],
    tol: float = LAYOUT_RULES.tolerance,
) -> Loop:
    """Monotone-chain convex hull, counter-clockwise, no repeated endpoint.

    Points closer than *tol* are merged before sorting, and collinear
    points on the hull are dropped.  Fewer than three distinct input
    points are returned as-is (a degenerate hull).
    """
    unique: Loop = []
    for p in points:
        if not any(_close(p, u, tol) for u in unique):
            unique.append((float(p[0]), float(p[1])))
    unique.sort()
    if len(unique) < 3:
        return unique

    lower: Loop = []
    for p in unique:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= tol:
            lower.pop()
        lower.append(p)

    upper: Loop = []
    for p in reversed(unique):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= tol:
            upper.pop()
        upper.append(p)

    return lower[:-1] + upper[:-1]
