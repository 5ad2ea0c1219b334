"""
Grid decomposer — lays square cell grids over modules and spaces.

Module grids use one cell size for the whole arrangement (by default a
third of the first module type's width) so cells line up across
modules.  A module contributes ``floor(extent / size)`` columns and rows;
any sliver left at the top or right is not gridded.  Space grids are
always 3 × 3 over the space's square region.

Cells are numbered row-major (row 0 at the bottom) with a running
``global_index`` that continues across owners.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from modplan.geometry import Rect
from modplan.pipeline.arrangement.models import Arrangement
from modplan.pipeline.spaces.models import SpaceNode

from .models import (
    CellTrim, CoverageRecord, GridCell,
    AREA_TOLERANCE, MODULE_GRID_DIVISIONS, SPACE_GRID_DIVISIONS, TOLERANCE,
)


log = logging.getLogger(__name__)


# ── Cell generation ────────────────────────────────────────────────


def _lay_cells(
    rect: Rect,
    owner: int | str,
    cell_size: float,
    rows: int,
    cols: int,
    start_index: int,
) -> list[GridCell]:
    cells: list[GridCell] = []
    index = start_index
    for row in range(rows):
        for col in range(cols):
            cells.append(GridCell(
                owner=owner,
                row=row,
                col=col,
                origin=(rect.min_x + col * cell_size, rect.min_y + row * cell_size),
                size=cell_size,
                global_index=index,
            ))
            index += 1
    return cells


def default_cell_size(arrangement: Arrangement) -> float:
    """A third of the first placed module type's width."""
    return arrangement.modules[0].instance.type.width / MODULE_GRID_DIVISIONS


def decompose_rect(
    rect: Rect,
    owner: int | str,
    cell_size: float,
    start_index: int = 0,
    tol: float = TOLERANCE,
) -> list[GridCell]:
    """Whole cells of side *cell_size* that fit inside *rect*."""
    cols = math.floor((rect.width + tol) / cell_size)
    rows = math.floor((rect.height + tol) / cell_size)
    return _lay_cells(rect, owner, cell_size, rows, cols, start_index)


def decompose_arrangement(
    arrangement: Arrangement,
    cell_size: float | None = None,
) -> list[GridCell]:
    """Module grid cells for every placed module, in placement order.

    Parameters
    ----------
    arrangement : Arrangement
        The chosen arrangement.
    cell_size : float | None
        Cell side; defaults to :func:`default_cell_size`.

    Returns
    -------
    list[GridCell]
        Cells owned by module index, numbered globally from 0.

    Raises
    ------
    ValueError
        If *cell_size* is not positive.
    """
    if not arrangement.modules:
        return []
    size = default_cell_size(arrangement) if cell_size is None else cell_size
    if size <= 0:
        raise ValueError(f"cell_size must be > 0, got {size}")

    cells: list[GridCell] = []
    for index, module in enumerate(arrangement.modules):
        cells.extend(decompose_rect(module.rect, index, size, start_index=len(cells)))
    log.debug("Decomposed %d module(s) into %d cell(s) of %.3f",
              len(arrangement.modules), len(cells), size)
    return cells


def decompose_space(
    space: SpaceNode,
    start_index: int = 0,
    divisions: int = SPACE_GRID_DIVISIONS,
) -> list[GridCell]:
    """A fixed ``divisions × divisions`` grid over the space's square."""
    size = space.side / divisions
    return _lay_cells(space.square, space.name, size, divisions, divisions, start_index)


def decompose_spaces(spaces: Sequence[SpaceNode]) -> list[GridCell]:
    cells: list[GridCell] = []
    for space in spaces:
        cells.extend(decompose_space(space, start_index=len(cells)))
    return cells


# ── Overlap ────────────────────────────────────────────────────────


def trim_cells(
    cells: Sequence[GridCell],
    rects: Sequence[Rect],
) -> list[CellTrim]:
    """Per-cell covered (``inside``) and uncovered (``trimmed``) area."""
    trims: list[CellTrim] = []
    for cell in cells:
        box = cell.rect
        inside = sum(box.intersection_area(r) for r in rects)
        trims.append(CellTrim(cell, inside, max(0.0, cell.area - inside)))
    return trims


def trim_space(space: SpaceNode, arrangement: Arrangement) -> list[CellTrim]:
    """Trim a space's grid against the modules and store its budget.

    ``space.trimmed_area`` becomes the total uncovered area of the
    space's cells.
    """
    trims = trim_cells(decompose_space(space), arrangement.rects)
    space.trimmed_area = sum(t.trimmed_area for t in trims)
    log.debug("Space '%s': trimmed area %.3f of %.3f",
              space.name, space.trimmed_area, space.square_area)
    return trims


def compute_coverage(
    cells: Sequence[GridCell],
    target: Arrangement | Sequence[SpaceNode],
    area_tol: float = AREA_TOLERANCE,
) -> list[CoverageRecord]:
    """Overlap of every cell with every target rectangle.

    *target* is either an arrangement (records name the module index) or
    a list of spaces (records name the space and use its square).  Only
    overlaps larger than *area_tol* are recorded.
    """
    if isinstance(target, Arrangement):
        targets: list[tuple[int | str, Rect]] = list(enumerate(target.rects))
    else:
        targets = [(space.name, space.square) for space in target]

    records: list[CoverageRecord] = []
    for cell in cells:
        box = cell.rect
        for key, rect in targets:
            overlap = box.intersection_area(rect)
            if overlap > area_tol:
                records.append(CoverageRecord(cell, key, overlap))
    return records
