"""Grid dataclasses — cells, trim results and coverage records."""

from __future__ import annotations

from dataclasses import dataclass, field

from modplan.geometry import Loop, Rect


@dataclass(frozen=True)
class GridCell:
    """One square cell of a module grid or a space grid.

    ``owner`` is the placed-module index for arrangement grids and the
    space name for space grids.  Cells compare and hash by
    ``(owner, row, col)`` only.
    """

    owner: int | str
    row: int
    col: int
    origin: tuple[float, float] = field(compare=False)     # lower-left corner
    size: float = field(compare=False)
    global_index: int = field(compare=False, default=0)

    @property
    def key(self) -> tuple[int | str, int, int]:
        return (self.owner, self.row, self.col)

    @property
    def rect(self) -> Rect:
        return Rect.from_origin(self.origin[0], self.origin[1], self.size, self.size)

    @property
    def area(self) -> float:
        return self.size * self.size

    @property
    def center(self) -> tuple[float, float]:
        return (self.origin[0] + self.size / 2, self.origin[1] + self.size / 2)

    @property
    def loop(self) -> Loop:
        """The four corners, counter-clockwise from the lower-left."""
        return self.rect.corners


@dataclass
class CellTrim:
    """How much of a cell is covered by module rectangles."""

    cell: GridCell
    inside_area: float
    trimmed_area: float     # cell area not covered (>= 0)


@dataclass(frozen=True)
class CoverageRecord:
    """Overlap between one cell and one target (space name or module index)."""

    cell: GridCell
    target: int | str
    overlap_area: float


# ── Configuration ──────────────────────────────────────────────────

from modplan.config import LAYOUT_RULES

TOLERANCE = LAYOUT_RULES.tolerance
AREA_TOLERANCE = LAYOUT_RULES.area_tolerance
MODULE_GRID_DIVISIONS = LAYOUT_RULES.module_grid_divisions
SPACE_GRID_DIVISIONS = LAYOUT_RULES.space_grid_divisions
