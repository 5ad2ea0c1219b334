"""Space dataclasses — circular area requirements and their square regions."""

from __future__ import annotations

import math
from dataclasses import dataclass

from modplan.geometry import Loop, Rect


@dataclass
class SpaceNode:
    """A required room, laid out as a circle and gridded as a square.

    ``trimmed_area`` is the spendable budget used by the cell allocator.
    It is set by the grid decomposer and mutated in place by
    :func:`modplan.pipeline.allocator.allocate`.
    """

    name: str
    area: float
    position: tuple[float, float] = (0.0, 0.0)     # circle centre
    function: str = ""
    color: str = ""
    priority: int = 0
    trimmed_area: float = 0.0

    @property
    def radius(self) -> float:
        return math.sqrt(self.area / math.pi)

    @property
    def side(self) -> float:
        """Side of the square region (the circle's diameter)."""
        return 2 * self.radius

    @property
    def square(self) -> Rect:
        cx, cy = self.position
        r = self.radius
        return Rect(cx - r, cy - r, cx + r, cy + r)

    @property
    def square_area(self) -> float:
        return self.side * self.side

    @property
    def square_loop(self) -> Loop:
        return self.square.corners
