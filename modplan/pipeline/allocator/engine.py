"""
Cell allocator — hands module grid cells to spaces under area budgets.

Each space's budget is its ``trimmed_area`` (the part of its square not
covered by modules, see :func:`modplan.pipeline.grid.trim_space`).
Taking a cell costs the cell area the space's square does not cover.

A space only receives a cell while the area already handed to it is
below its required ``area``, so no space ends with more than its
required area plus one cell.

Phases:
  0. Cells covered by exactly one space and lying fully inside its
     square go to that space at no cost.
  A. Per space, in input order: its partly covered uncontested cells,
     largest overlap first, while its budget is positive.  The last cell
     taken may push the budget below zero.
  B. Cells covered by two or more spaces, resolved by a
     :class:`ContestPolicy` among the contenders that still have room.
  C. (opt-in) Cells nobody owns are grown from their assigned
     neighbours.

Budgets are mutated in place on the SpaceNode objects passed in.  A
stalled contest is reported on the result, never raised.
"""

from __future__ import annotations

import logging
from typing import Sequence

from modplan.pipeline.grid.models import CoverageRecord, GridCell
from modplan.pipeline.spaces.models import SpaceNode

from .models import AllocationResult, Assignment, ContestPolicy, Phase, AREA_TOLERANCE, TOLERANCE


log = logging.getLogger(__name__)


class _State:
    """Ownership bookkeeping for one allocate() call."""

    def __init__(self, spaces: Sequence[SpaceNode]) -> None:
        self.spaces = list(spaces)
        self.by_name = {s.name: s for s in self.spaces}
        self.owner: dict[GridCell, str] = {}
        self.assigned: dict[str, float] = {s.name: 0.0 for s in self.spaces}
        self.assignments: list[Assignment] = []

    def has_room(self, space: SpaceNode) -> bool:
        """True while the space holds less than its required area."""
        return self.assigned[space.name] < space.area

    def assign(self, cell: GridCell, space: SpaceNode, overlap: float,
               phase: Phase, cost: float) -> None:
        self.owner[cell] = space.name
        self.assigned[space.name] += cell.area
        self.assignments.append(Assignment(cell, space.name, cell.area, overlap, phase))
        space.trimmed_area -= cost


def _coverage_map(
    cells: Sequence[GridCell],
    coverage: Sequence[CoverageRecord],
    names: set[str],
) -> dict[GridCell, dict[str, float]]:
    """cell → {space name: overlap} for cells in *cells* only."""
    canonical = {c: c for c in cells}
    cover: dict[GridCell, dict[str, float]] = {}
    for rec in coverage:
        if rec.target not in names or rec.overlap_area <= AREA_TOLERANCE:
            continue
        cell = canonical.get(rec.cell)
        if cell is None:
            continue
        per_space = cover.setdefault(cell, {})
        per_space[rec.target] = per_space.get(rec.target, 0.0) + rec.overlap_area
    return cover


# ── Phases 0 and A ────────────────────────────────────────────────


def _fill_uncontested(state: _State, ordered: list[GridCell],
                      cover: dict[GridCell, dict[str, float]]) -> None:
    single = [
        (cell, *next(iter(cover[cell].items())))
        for cell in ordered
        if len(cover.get(cell, {})) == 1
    ]

    for cell, name, overlap in single:
        space = state.by_name[name]
        if overlap >= cell.area - AREA_TOLERANCE and state.has_room(space):
            state.assign(cell, space, overlap, Phase.FULL, 0.0)

    for space in state.spaces:
        candidates = [
            (cell, overlap) for cell, name, overlap in single
            if name == space.name and cell not in state.owner
        ]
        candidates.sort(key=lambda c: c[1], reverse=True)
        for cell, overlap in candidates:
            if space.trimmed_area <= 0 or not state.has_room(space):
                break
            state.assign(cell, space, overlap, Phase.UNCONTESTED, cell.area - overlap)


# ── Phase B ────────────────────────────────────────────────────────


def _contenders(state: _State, overlaps: dict[str, float]) -> list[SpaceNode]:
    """Covering spaces that can still take a cell, in input order."""
    return [s for s in state.spaces if s.name in overlaps and state.has_room(s)]


def _contest_strict(state: _State, contested: list[GridCell],
                    cover: dict[GridCell, dict[str, float]]) -> list[GridCell]:
    for cell in contested:
        overlaps = cover[cell]
        contenders = _contenders(state, overlaps)
        if not contenders:
            continue
        funded = [s for s in contenders if s.trimmed_area > 0]
        if funded:
            winner = max(funded, key=lambda s: s.trimmed_area)
        else:
            winner = max(contenders, key=lambda s: overlaps[s.name])
        overlap = overlaps[winner.name]
        state.assign(cell, winner, overlap, Phase.CONTESTED, cell.area - overlap)
    return []


def _contest_credit_back(state: _State, contested: list[GridCell],
                         cover: dict[GridCell, dict[str, float]]) -> list[GridCell]:
    remaining = list(contested)
    while remaining:
        remaining = [c for c in remaining if _contenders(state, cover[c])]
        claim: tuple[GridCell, SpaceNode] | None = None
        for space in sorted(state.spaces, key=lambda s: s.trimmed_area, reverse=True):
            if not state.has_room(space):
                continue
            for cell in remaining:
                overlaps = cover[cell]
                if space.name not in overlaps:
                    continue
                if all(space.trimmed_area >= other.trimmed_area
                       for other in _contenders(state, overlaps) if other is not space):
                    claim = (cell, space)
                    break
            if claim is not None:
                break

        if claim is None:
            return remaining

        cell, winner = claim
        overlaps = cover[cell]
        state.assign(cell, winner, overlaps[winner.name], Phase.CONTESTED,
                     cell.area - overlaps[winner.name])
        for name, overlap in overlaps.items():
            if name != winner.name:
                state.by_name[name].trimmed_area += overlap
        remaining.remove(cell)
    return []


# ── Phase C ────────────────────────────────────────────────────────


def _neighbour_map(cells: Sequence[GridCell], tol: float) -> dict[GridCell, list[GridCell]]:
    """Orthogonally adjacent cells of equal size."""
    nbrs: dict[GridCell, list[GridCell]] = {c: [] for c in cells}
    for i, a in enumerate(cells):
        for b in cells[i + 1:]:
            if abs(a.size - b.size) > tol:
                continue
            dx = abs(a.origin[0] - b.origin[0])
            dy = abs(a.origin[1] - b.origin[1])
            if (dx <= tol and abs(dy - a.size) <= tol) or (dy <= tol and abs(dx - a.size) <= tol):
                nbrs[a].append(b)
                nbrs[b].append(a)
    return nbrs


def _fill_empty(state: _State, ordered: list[GridCell],
                cover: dict[GridCell, dict[str, float]], tol: float) -> None:
    nbrs = _neighbour_map(ordered, tol)
    empties = [c for c in ordered if c not in state.owner]

    def _score(cell: GridCell) -> tuple[int, int, int]:
        owners = [state.owner[n] for n in nbrs[cell] if n in state.owner]
        return (len(owners), -len(set(owners)), -cell.global_index)

    while empties:
        open_spaces = [s for s in state.spaces if state.has_room(s)]
        if not open_spaces:
            break
        best = max(empties, key=_score)
        around = {state.owner[n] for n in nbrs[best] if n in state.owner}
        pool = [s for s in open_spaces if s.name in around] or open_spaces
        winner = max(pool, key=lambda s: s.trimmed_area)
        overlap = cover.get(best, {}).get(winner.name, 0.0)
        state.assign(best, winner, overlap, Phase.EMPTY, best.area)
        empties.remove(best)


# ── Entry point ────────────────────────────────────────────────────


def allocate(
    cells: Sequence[GridCell],
    spaces: Sequence[SpaceNode],
    coverage: Sequence[CoverageRecord],
    policy: ContestPolicy | str = ContestPolicy.STRICT,
    fill_empty: bool = False,
    tol: float = TOLERANCE,
) -> AllocationResult:
    """Assign module grid cells to spaces.

    Parameters
    ----------
    cells : Sequence[GridCell]
        Module grid cells (from ``decompose_arrangement``).
    spaces : Sequence[SpaceNode]
        Spaces with their budgets in ``trimmed_area``; mutated in place.
    coverage : Sequence[CoverageRecord]
        Cell/space overlaps (from ``compute_coverage(cells, spaces)``).
        Records for unknown cells or targets are ignored.
    policy : ContestPolicy | str
        Contested-cell resolution; STRICT by default.
    fill_empty : bool
        Also hand out cells that are still unowned after phase B.
    tol : float
        Length tolerance for cell adjacency in phase C.

    Returns
    -------
    AllocationResult
        Assignments in the order they were made, plus the stall flag,
        cells left unresolved by phase B, and budgets before and after.
        No space receives more than its ``area`` plus one cell.

    Raises
    ------
    ValueError
        If two spaces share a name or *policy* is unknown.
    """
    policy = ContestPolicy(policy)
    state = _State(spaces)
    if len(state.by_name) != len(state.spaces):
        raise ValueError("Space names must be unique")

    initial = {s.name: s.trimmed_area for s in state.spaces}
    ordered = sorted(cells, key=lambda c: c.global_index)
    cover = _coverage_map(ordered, coverage, set(state.by_name))

    _fill_uncontested(state, ordered, cover)
    n_uncontested = len(state.assignments)

    contested = [
        c for c in ordered
        if len(cover.get(c, {})) >= 2 and c not in state.owner
    ]
    if policy is ContestPolicy.STRICT:
        unresolved = _contest_strict(state, contested, cover)
    else:
        unresolved = _contest_credit_back(state, contested, cover)
    stalled = bool(unresolved)
    if stalled:
        log.warning(
            "Contested-cell resolution stalled with %d cell(s) unresolved",
            len(unresolved),
        )
    n_contested = len(state.assignments) - n_uncontested

    if fill_empty:
        _fill_empty(state, ordered, cover, tol)

    log.info(
        "Allocated %d/%d cell(s): %d uncontested, %d contested, %d filled",
        len(state.assignments), len(ordered), n_uncontested, n_contested,
        len(state.assignments) - n_uncontested - n_contested,
    )
    return AllocationResult(
        assignments=state.assignments,
        stalled=stalled,
        unresolved=unresolved,
        initial_budgets=initial,
        final_budgets={s.name: s.trimmed_area for s in state.spaces},
    )
