"""Arrangement dataclasses and configuration constants."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Iterable

from modplan.catalog.models import ModuleType
from modplan.geometry import Rect, Loop

if TYPE_CHECKING:
    from modplan.pipeline.grid.models import GridCell


# ── Input dataclasses ──────────────────────────────────────────────


@dataclass(frozen=True)
class Boundary:
    """The site rectangle every placement must lie within."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_size(cls, width: float, height: float,
                  x: float = 0.0, y: float = 0.0) -> Boundary:
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def rect(self) -> Rect:
        return Rect(self.min_x, self.min_y, self.max_x, self.max_y)

    @property
    def polygon(self) -> Loop:
        return self.rect.corners


@dataclass(frozen=True)
class ModuleInstance:
    """A module type with a fixed orientation.

    Unrotated, the module spans its length along X and its width along
    Y.  Rotation swaps the two.
    """

    type: ModuleType
    rotated: bool = False

    @property
    def extent_x(self) -> float:
        return self.type.width if self.rotated else self.type.length

    @property
    def extent_y(self) -> float:
        return self.type.length if self.rotated else self.type.width


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass(frozen=True)
class PlacedModule:
    """A module instance with its lower-left corner resolved."""

    instance: ModuleInstance
    x: float
    y: float

    @property
    def type_id(self) -> int:
        return self.instance.type.id

    @property
    def width(self) -> float:
        return self.instance.extent_x

    @property
    def height(self) -> float:
        return self.instance.extent_y

    @property
    def rect(self) -> Rect:
        return Rect.from_origin(self.x, self.y, self.width, self.height)


def placement_signature(
    modules: Iterable[PlacedModule],
    decimals: int = 2,
) -> tuple[tuple[float, float, float, float], ...]:
    """Canonical, order-independent key of a set of placements."""
    def _r(v: float) -> float:
        return round(v, decimals) + 0.0     # folds -0.0 into 0.0
    return tuple(sorted(
        (_r(m.x), _r(m.y), _r(m.width), _r(m.height)) for m in modules
    ))


@dataclass(frozen=True, eq=False)
class Arrangement:
    """One complete placement of every module in a combination.

    Two arrangements are equal when their placement signatures match,
    whatever order the modules were placed in and whatever orientation
    tag produced them.
    """

    modules: tuple[PlacedModule, ...]
    orientation: str = ""       # bitmask, most-significant bit first
    strategy: str = ""

    @cached_property
    def signature(self) -> tuple[tuple[float, float, float, float], ...]:
        return placement_signature(self.modules, SIGNATURE_DECIMALS)

    @cached_property
    def grid_cells(self) -> list[GridCell]:
        """Module grid at the default resolution, built on first access."""
        from modplan.pipeline.grid.decompose import decompose_arrangement
        return decompose_arrangement(self)

    @property
    def rects(self) -> list[Rect]:
        return [m.rect for m in self.modules]

    @property
    def total_area(self) -> float:
        return sum(m.rect.area for m in self.modules)

    def bounds(self) -> Rect:
        """Bounding box of all placed modules."""
        rects = self.rects
        return Rect(
            min(r.min_x for r in rects), min(r.min_y for r in rects),
            max(r.max_x for r in rects), max(r.max_y for r in rects),
        )

    def __len__(self) -> int:
        return len(self.modules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Arrangement):
            return NotImplemented
        return self.signature == other.signature

    def __hash__(self) -> int:
        return hash(self.signature)


# ── Configuration ──────────────────────────────────────────────────

from modplan.config import LAYOUT_RULES

TOLERANCE = LAYOUT_RULES.tolerance
SIGNATURE_DECIMALS = LAYOUT_RULES.signature_decimals
HULL_DECIMALS = LAYOUT_RULES.hull_decimals
MAX_MODULES = LAYOUT_RULES.max_modules
