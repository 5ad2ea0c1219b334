"""Arrangement scoring — contact length, outer perimeter, centring."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from shapely.geometry import box as shapely_box
from shapely.ops import unary_union

from .models import Arrangement, PlacedModule, TOLERANCE


def attachment_length(arr: Arrangement, tol: float = TOLERANCE) -> float:
    """Total length of edges shared between pairs of modules."""
    rects = arr.rects
    total = 0.0
    for i in range(len(rects)):
        for j in range(i + 1, len(rects)):
            total += rects[i].shared_edge_length(rects[j], tol)
    return total


def perimeter(arr: Arrangement, tol: float = TOLERANCE) -> float:
    """Outer perimeter: module perimeters minus both sides of every contact."""
    module_sum = sum(2 * (r.width + r.height) for r in arr.rects)
    return module_sum - 2 * attachment_length(arr, tol)


def footprint(arr: Arrangement):
    """Shapely union of the module rectangles."""
    return unary_union([
        shapely_box(r.min_x, r.min_y, r.max_x, r.max_y) for r in arr.rects
    ])


def select_optimal(arrangements: Sequence[Arrangement],
                   tol: float = TOLERANCE) -> list[Arrangement]:
    """Arrangements with the most contact, then the smallest perimeter.

    Ties within *tol* are all kept, in input order.
    """
    if not arrangements:
        return []
    scored = [(attachment_length(a, tol), perimeter(a, tol), a) for a in arrangements]
    best_contact = max(s[0] for s in scored)
    scored = [s for s in scored if s[0] >= best_contact - tol]
    best_perimeter = min(s[1] for s in scored)
    return [a for _, p, a in scored if p <= best_perimeter + tol]


def overall_center(arr: Arrangement) -> tuple[float, float]:
    """Centre of the arrangement's bounding box."""
    return arr.bounds().center


def center_arrangement(arr: Arrangement, center: tuple[float, float]) -> Arrangement:
    """Copy of *arr* translated so its bounding-box centre is *center*."""
    cx, cy = overall_center(arr)
    dx, dy = center[0] - cx, center[1] - cy
    moved = tuple(
        PlacedModule(m.instance, m.x + dx, m.y + dy) for m in arr.modules
    )
    return replace(arr, modules=moved)
