"""Arrangement deduplication — by placement signature and by silhouette."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable

from modplan.geometry import Loop, Point, convex_hull

from .models import Arrangement, HULL_DECIMALS, TOLERANCE


log = logging.getLogger(__name__)

Segment = tuple[Point, Point]


def dedup_by_signature(arrangements: Iterable[Arrangement]) -> list[Arrangement]:
    """Keep the first arrangement per placement signature, in input order."""
    seen: set = set()
    out: list[Arrangement] = []
    for arr in arrangements:
        if arr.signature not in seen:
            seen.add(arr.signature)
            out.append(arr)
    return out


def outline_segments(arr: Arrangement, decimals: int = HULL_DECIMALS) -> list[Segment]:
    """Module edges that are not shared with a neighbour.

    Every rectangle contributes its four edges counter-clockwise.  An
    interior edge shows up once in each direction; those pairs cancel.
    Edges that are only partly shared survive.
    """
    net: Counter[Segment] = Counter()
    for rect in arr.rects:
        corners = [(round(x, decimals) + 0.0, round(y, decimals) + 0.0)
                   for x, y in rect.corners]
        for i in range(4):
            a, b = corners[i], corners[(i + 1) % 4]
            if a == b:
                continue
            if a < b:
                net[(a, b)] += 1
            else:
                net[(b, a)] -= 1
    return [seg for seg, count in net.items() if count != 0]


def silhouette_hull(arr: Arrangement, decimals: int = HULL_DECIMALS,
                    tol: float = TOLERANCE) -> Loop:
    points = [p for seg in outline_segments(arr, decimals) for p in seg]
    return convex_hull(points, tol)


def dedup_by_perimeter(
    arrangements: Iterable[Arrangement],
    decimals: int = HULL_DECIMALS,
) -> tuple[list[Arrangement], list[Loop]]:
    """One representative arrangement per distinct outer silhouette.

    Returns
    -------
    (list[Arrangement], list[Loop])
        The first arrangement seen for each distinct hull and, at the
        same index, that hull (CCW, no repeated endpoint).
    """
    seen: set[tuple[Point, ...]] = set()
    kept: list[Arrangement] = []
    hulls: list[Loop] = []
    total = 0
    for arr in arrangements:
        total += 1
        hull = silhouette_hull(arr, decimals)
        key = tuple((round(x, decimals) + 0.0, round(y, decimals) + 0.0) for x, y in hull)
        if key in seen:
            continue
        seen.add(key)
        kept.append(arr)
        hulls.append(hull)
    log.info("Perimeter dedup: %d → %d arrangement(s)", total, len(kept))
    return kept, hulls
