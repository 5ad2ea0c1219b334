"""Packing strategies — turn one ordering of oriented modules into placements.

Each strategy receives the instances in placement order and yields every
complete placement it can find inside the boundary.  The search driver
(:mod:`.engine`) handles orientation masks, orderings and deduplication.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from modplan.geometry import Rect

from .geometry import is_edge_connected
from .models import Boundary, ModuleInstance, PlacedModule, TOLERANCE

Placement = tuple[PlacedModule, ...]


class PackingStrategy:
    """Base class for packers."""

    name = ""

    def place(
        self,
        ordering: Sequence[ModuleInstance],
        boundary: Boundary,
        tol: float = TOLERANCE,
    ) -> Iterator[Placement]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AdjacencyBacktracking(PackingStrategy):
    """Grow a connected cluster from the boundary's top-left corner.

    The first module sits flush with the top and left edges.  Every later
    module is tried directly right of, left of, above and below each
    module already placed; a candidate survives if it stays inside the
    boundary, overlaps nothing and shares an edge with the cluster.
    """

    name = "adjacency"

    def place(self, ordering, boundary, tol=TOLERANCE):
        if not ordering:
            return
        first = ordering[0]
        if first.extent_x > boundary.width + tol or first.extent_y > boundary.height + tol:
            return
        placed = [PlacedModule(first, boundary.min_x, boundary.max_y - first.extent_y)]
        yield from self._extend(ordering, 1, placed, boundary.rect, tol)

    def _extend(
        self,
        ordering: Sequence[ModuleInstance],
        index: int,
        placed: list[PlacedModule],
        site: Rect,
        tol: float,
    ) -> Iterator[Placement]:
        if index == len(ordering):
            yield tuple(placed)
            return

        inst = ordering[index]
        w, h = inst.extent_x, inst.extent_y
        rects = [p.rect for p in placed]
        tried: set[tuple[float, float]] = set()

        for anchor in rects:
            for x, y in (
                (anchor.max_x, anchor.min_y),       # right
                (anchor.min_x - w, anchor.min_y),   # left
                (anchor.min_x, anchor.max_y),       # above
                (anchor.min_x, anchor.min_y - h),   # below
            ):
                key = (round(x, 9), round(y, 9))
                if key in tried:
                    continue
                tried.add(key)

                cand = Rect.from_origin(x, y, w, h)
                if not site.contains(cand, tol):
                    continue
                if any(cand.overlaps(r, tol) for r in rects):
                    continue
                if not any(cand.shares_edge(r, tol) for r in rects):
                    continue

                placed.append(PlacedModule(inst, x, y))
                yield from self._extend(ordering, index + 1, placed, site, tol)
                placed.pop()


class RowPartition(PackingStrategy):
    """Split the ordering into consecutive rows and stack them bottom-up.

    Every module in a row must have the row's height, the row's total
    width must fit the boundary, and the stacked rows must fit its
    height.  Rows start at the boundary's left edge.
    """

    name = "rows"

    def place(self, ordering, boundary, tol=TOLERANCE):
        if not ordering:
            return
        for rows in self._partitions(list(ordering), boundary, tol):
            placed: list[PlacedModule] = []
            y = boundary.min_y
            for row in rows:
                x = boundary.min_x
                for inst in row:
                    placed.append(PlacedModule(inst, x, y))
                    x += inst.extent_x
                y += row[0].extent_y
            if is_edge_connected([p.rect for p in placed], tol):
                yield tuple(placed)

    def _partitions(
        self,
        items: list[ModuleInstance],
        boundary: Boundary,
        tol: float,
        used_height: float = 0.0,
    ) -> Iterator[list[list[ModuleInstance]]]:
        """Yield row splits of *items* that fit the boundary."""
        if not items:
            yield []
            return
        height = items[0].extent_y
        if used_height + height > boundary.height + tol:
            return
        width = 0.0
        for end in range(1, len(items) + 1):
            inst = items[end - 1]
            if abs(inst.extent_y - height) > tol:
                break
            width += inst.extent_x
            if width > boundary.width + tol:
                break
            for rest in self._partitions(items[end:], boundary, tol, used_height + height):
                yield [items[:end], *rest]


STRATEGIES: dict[str, type[PackingStrategy]] = {
    AdjacencyBacktracking.name: AdjacencyBacktracking,
    RowPartition.name: RowPartition,
}


def get_strategy(strategy: str | PackingStrategy | None) -> PackingStrategy:
    """Resolve a strategy name (or instance) to a strategy object."""
    if strategy is None:
        return AdjacencyBacktracking()
    if isinstance(strategy, PackingStrategy):
        return strategy
    try:
        return STRATEGIES[strategy]()
    except KeyError:
        raise ValueError(
            f"Unknown packing strategy '{strategy}', expected one of {sorted(STRATEGIES)}"
        ) from None
