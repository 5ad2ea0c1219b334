"""Axis-aligned rectangles — the footprint type shared by every stage."""

from __future__ import annotations

from dataclasses import dataclass

from modplan.config import LAYOUT_RULES

from .polygon import Loop


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its min/max corners."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_origin(cls, x: float, y: float, width: float, height: float) -> Rect:
        """Build from the lower-left corner plus extents."""
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def corners(self) -> Loop:
        """The four corners, counter-clockwise from the lower-left."""
        return [
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
        ]

    # ── Pairwise tests ─────────────────────────────────────────────

    def intersection_area(self, other: Rect) -> float:
        """Overlap area by min/max interval intersection (0 if disjoint)."""
        w = min(self.max_x, other.max_x) - max(self.min_x, other.min_x)
        h = min(self.max_y, other.max_y) - max(self.min_y, other.min_y)
        if w <= 0 or h <= 0:
            return 0.0
        return w * h

    def overlaps(self, other: Rect, tol: float = LAYOUT_RULES.tolerance) -> bool:
        """True if the interiors intersect with positive area.

        Rectangles that only touch along an edge or at a corner do not
        overlap.
        """
        return (
            self.min_x < other.max_x - tol
            and self.max_x > other.min_x + tol
            and self.min_y < other.max_y - tol
            and self.max_y > other.min_y + tol
        )

    def contains(self, other: Rect, tol: float = LAYOUT_RULES.tolerance) -> bool:
        """True if *other* lies entirely within this rectangle."""
        return (
            other.min_x >= self.min_x - tol
            and other.min_y >= self.min_y - tol
            and other.max_x <= self.max_x + tol
            and other.max_y <= self.max_y + tol
        )

    def shared_edge_length(
        self, other: Rect, tol: float = LAYOUT_RULES.tolerance,
    ) -> float:
        """Length of the colinear edge contact between two rectangles.

        Returns 0 when the rectangles only meet at a corner or do not
        touch at all.
        """
        if abs(self.max_x - other.min_x) < tol or abs(other.max_x - self.min_x) < tol:
            span = min(self.max_y, other.max_y) - max(self.min_y, other.min_y)
            if span > tol:
                return span
        if abs(self.max_y - other.min_y) < tol or abs(other.max_y - self.min_y) < tol:
            span = min(self.max_x, other.max_x) - max(self.min_x, other.min_x)
            if span > tol:
                return span
        return 0.0

    def shares_edge(self, other: Rect, tol: float = LAYOUT_RULES.tolerance) -> bool:
        return self.shared_edge_length(other, tol) > 0.0
