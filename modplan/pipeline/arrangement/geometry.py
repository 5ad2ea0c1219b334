"""Low-level helpers for checking a set of placed rectangles."""

from __future__ import annotations

from typing import Sequence

from modplan.geometry import Rect

from .models import Arrangement, Boundary, PlacedModule, TOLERANCE


def overlapping_pairs(rects: Sequence[Rect],
                      tol: float = TOLERANCE) -> list[tuple[int, int]]:
    """Index pairs whose interiors overlap with positive area."""
    return [
        (i, j)
        for i in range(len(rects))
        for j in range(i + 1, len(rects))
        if rects[i].overlaps(rects[j], tol)
    ]


def contact_graph(rects: Sequence[Rect],
                  tol: float = TOLERANCE) -> dict[int, set[int]]:
    """Adjacency map: i → indices sharing a positive-length edge with i."""
    graph: dict[int, set[int]] = {i: set() for i in range(len(rects))}
    for i in range(len(rects)):
        for j in range(i + 1, len(rects)):
            if rects[i].shares_edge(rects[j], tol):
                graph[i].add(j)
                graph[j].add(i)
    return graph


def is_edge_connected(rects: Sequence[Rect], tol: float = TOLERANCE) -> bool:
    if len(rects) <= 1:
        return True
    graph = contact_graph(rects, tol)
    seen = {0}
    stack = [0]
    while stack:
        for nb in graph[stack.pop()]:
            if nb not in seen:
                seen.add(nb)
                stack.append(nb)
    return len(seen) == len(rects)


def validate_placements(
    modules: Sequence[PlacedModule],
    boundary: Boundary,
    tol: float = TOLERANCE,
) -> list[str]:
    """Return a list of human-readable problems (empty = valid)."""
    errors: list[str] = []
    rects = [m.rect for m in modules]
    site = boundary.rect
    for i, r in enumerate(rects):
        if not site.contains(r, tol):
            errors.append(f"module {i} extends outside the boundary")
    for i, j in overlapping_pairs(rects, tol):
        errors.append(f"modules {i} and {j} overlap")
    if not is_edge_connected(rects, tol):
        errors.append("modules are not edge-connected")
    return errors


def validate_arrangement(arr: Arrangement, boundary: Boundary,
                         tol: float = TOLERANCE) -> list[str]:
    return validate_placements(arr.modules, boundary, tol)
