"""Allocator dataclasses and contest policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from modplan.pipeline.grid.models import GridCell


class ContestPolicy(str, Enum):
    """How cells covered by two or more spaces are resolved."""

    STRICT = "strict"
    """Global-index order; the largest positive budget wins, else the
    largest overlap.  Losers keep their budgets."""

    CREDIT_BACK = "credit_back"
    """Spaces in descending budget order claim cells they lead; each
    loser is credited the overlap it gave up."""


class Phase(str, Enum):
    FULL = "0"          # uncontested, fully inside one square
    UNCONTESTED = "A"   # uncontested, partly inside one square
    CONTESTED = "B"
    EMPTY = "C"


@dataclass(frozen=True)
class Assignment:
    """One cell handed to one space."""

    cell: GridCell
    space: str
    cell_area: float
    overlap_area: float
    phase: Phase

    @property
    def covered_area(self) -> float:
        """The whole cell goes to the space."""
        return self.cell_area

    @property
    def extra_area(self) -> float:
        """Area given beyond what the space's square actually covers."""
        return self.cell_area - self.overlap_area


@dataclass
class AllocationResult:
    """Output of one :func:`allocate` call."""

    assignments: list[Assignment] = field(default_factory=list)
    stalled: bool = False
    unresolved: list[GridCell] = field(default_factory=list)
    initial_budgets: dict[str, float] = field(default_factory=dict)
    final_budgets: dict[str, float] = field(default_factory=dict)

    def by_cell(self) -> dict[GridCell, Assignment]:
        return {a.cell: a for a in self.assignments}

    def cells_for(self, space: str) -> list[GridCell]:
        return [a.cell for a in self.assignments if a.space == space]

    def assigned_area(self, space: str) -> float:
        return sum(a.covered_area for a in self.assignments if a.space == space)


# ── Configuration ──────────────────────────────────────────────────

from modplan.config import LAYOUT_RULES

TOLERANCE = LAYOUT_RULES.tolerance
AREA_TOLERANCE = LAYOUT_RULES.area_tolerance
