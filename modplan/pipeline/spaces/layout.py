"""Positioning spaces over an arrangement and trimming them to the site."""

from __future__ import annotations

from typing import Sequence

from shapely.geometry import Polygon

from modplan.config import LAYOUT_RULES
from modplan.geometry import Loop, ensure_ccw

from .models import SpaceNode


def layout_center(spaces: Sequence[SpaceNode]) -> tuple[float, float]:
    """Centre of the bounding box around every space's circle."""
    boxes = [s.square for s in spaces]
    min_x = min(b.min_x for b in boxes)
    min_y = min(b.min_y for b in boxes)
    max_x = max(b.max_x for b in boxes)
    max_y = max(b.max_y for b in boxes)
    return ((min_x + max_x) / 2, (min_y + max_y) / 2)


def center_spaces_on(spaces: Sequence[SpaceNode], center: tuple[float, float]) -> None:
    """Translate all spaces together so their layout centre is *center*."""
    if not spaces:
        return
    cx, cy = layout_center(spaces)
    dx, dy = center[0] - cx, center[1] - cy
    for space in spaces:
        space.position = (space.position[0] + dx, space.position[1] + dy)


def trim_space_to_site(
    space: SpaceNode,
    site: Loop,
    area_tol: float = LAYOUT_RULES.area_tolerance,
) -> list[Loop]:
    """The parts of the space's square inside the site polygon.

    Parameters
    ----------
    space : SpaceNode
        Space whose square region is trimmed.
    site : Loop
        Simple site outline, convex or not, in either winding.
    area_tol : float
        Pieces with less area than this are dropped.

    Returns
    -------
    list[Loop]
        One CCW loop per connected piece; empty when the square lies
        outside the site.  A concave site can split the square.
    """
    overlap = _site_overlap(space, site)
    pieces = getattr(overlap, "geoms", [overlap])
    return [
        ensure_ccw([(x, y) for x, y in piece.exterior.coords[:-1]])
        for piece in pieces
        if isinstance(piece, Polygon) and piece.area > area_tol
    ]


def usable_square_area(space: SpaceNode, site: Loop) -> float:
    """Area of the space's square that lies inside the site."""
    return _site_overlap(space, site).area


def _site_overlap(space: SpaceNode, site: Loop):
    if len(site) < 3:
        return Polygon()
    return Polygon(space.square_loop).intersection(Polygon(site))
