"""Shared numeric rules for the layout pipeline.

The arrangement search, the grid decomposer and the cell allocator all
compare floating-point coordinates and round them into dedup keys.  They
derive their tolerances and grid resolutions from this single source of
truth so the stages agree on what "equal", "touching" and "inside" mean.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutRules:
    """Numeric rules for packing, gridding and allocation.

    All lengths are in model units (whatever unit the boundary and module
    catalogue are given in).
    """

    tolerance: float = 1e-6
    """Absolute tolerance for on-boundary, equality and containment tests."""

    signature_decimals: int = 2
    """Decimal places used when rounding placements into a dedup signature."""

    hull_decimals: int = 2
    """Decimal places used when rounding silhouette hulls into a dedup key."""

    module_grid_divisions: int = 3
    """Module grid cell side = module width / this."""

    space_grid_divisions: int = 3
    """Each space square is split into this many rows and columns."""

    max_modules: int = 10
    """Upper bound on module instances accepted by the exhaustive search."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def area_tolerance(self) -> float:
        """Overlaps smaller than this area are treated as touching only."""
        return self.tolerance * self.tolerance


# Shared rules instance.
LAYOUT_RULES = LayoutRules()
