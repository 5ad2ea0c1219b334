"""Small-site test fixture — hardcoded catalogues, boundaries and jobs.

Catalogue ``make_catalogue()`` is the standard 15-unit series:

  - Module_Type 1: 15 × 15  (area 225)
  - Module_Type 2: 15 × 30  (area 450)
  - Module_Type 3: 15 × 45  (area 675)

``make_job_dict()`` places two Module_Type 1 and one Module_Type 2 in a
60 × 45 site with two spaces, small enough for the exhaustive search to
run in a few milliseconds.
"""

from __future__ import annotations

from modplan.catalog import ModuleType, build_module_types
from modplan.pipeline.arrangement import (
    Arrangement, Boundary, ModuleInstance, PlacedModule,
)
from modplan.pipeline.grid import GridCell


def make_catalogue() -> list[ModuleType]:
    return build_module_types(15, 45)


def make_boundary(width: float = 60, height: float = 45) -> Boundary:
    return Boundary.from_size(width, height)


def make_arrangement(*rects: tuple[float, float, float, float]) -> Arrangement:
    """Arrangement of unrotated modules at (x, y) with extents (w, h).

    Each rectangle gets its own module type of width ``h`` and length
    ``w``, so the default grid cell is a third of the first height.
    """
    modules = tuple(
        PlacedModule(ModuleInstance(ModuleType(id=i, width=h, length=w)), x, y)
        for i, (x, y, w, h) in enumerate(rects)
    )
    return Arrangement(modules, orientation="0" * len(rects), strategy="test")


def make_cell(x: float, y: float, size: float, index: int,
              owner: int | str = 0, row: int = 0, col: int | None = None) -> GridCell:
    return GridCell(
        owner=owner, row=row, col=index if col is None else col,
        origin=(x, y), size=size, global_index=index,
    )


def make_job_dict() -> dict:
    return {
        "boundary": {"width": 60, "height": 45},
        "catalogue": {"min_width": 15, "max_length": 45},
        "combination": "2 x Module_Type 1 + 1 x Module_Type 2 = 900 ft²",
        "spaces": [
            {"name": "Living", "area": 300, "position": [0, 0], "color": "#f4a261"},
            {"name": "Bed", "area": 200, "position": [20, 0], "color": "#2a9d8f"},
        ],
    }
