"""Grid — decomposes arrangements and spaces into square cells.

Submodules:
  models        GridCell, CellTrim, CoverageRecord and grid constants.
  decompose     Cell generation, trimming and coverage computation.
"""

from .models import GridCell, CellTrim, CoverageRecord
from .decompose import (
    default_cell_size, decompose_rect, decompose_arrangement,
    decompose_space, decompose_spaces,
    trim_cells, trim_space, compute_coverage,
)

__all__ = [
    # Models
    "GridCell", "CellTrim", "CoverageRecord",
    # Decompose
    "default_cell_size", "decompose_rect", "decompose_arrangement",
    "decompose_space", "decompose_spaces",
    "trim_cells", "trim_space", "compute_coverage",
]
