"""Layout evaluation — how well an allocation meets the space requirements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from modplan.pipeline.spaces.models import SpaceNode

from .models import AllocationResult


@dataclass
class LayoutEvaluation:
    assigned_areas: dict[str, float]
    missing_spaces: list[str]       # spaces that received no cell
    size_penalty: float


def assigned_area_map(result: AllocationResult) -> dict[str, float]:
    """Total cell area handed to each space."""
    areas: dict[str, float] = {}
    for a in result.assignments:
        areas[a.space] = areas.get(a.space, 0.0) + a.covered_area
    return areas


def check_space_coverage(
    spaces: Sequence[SpaceNode],
    assigned: dict[str, float],
) -> list[str]:
    """Names of spaces that ended up with no area (empty = all covered)."""
    return [s.name for s in spaces if assigned.get(s.name, 0.0) <= 0]


def size_penalty(spaces: Sequence[SpaceNode], assigned: dict[str, float]) -> float:
    """Sum of relative shortfalls ``(required − actual) / required``.

    Spaces that reach their required area contribute nothing.
    """
    total = 0.0
    for space in spaces:
        actual = assigned.get(space.name, 0.0)
        if space.area > 0 and actual < space.area:
            total += (space.area - actual) / space.area
    return total


def evaluate(result: AllocationResult, spaces: Sequence[SpaceNode]) -> LayoutEvaluation:
    areas = assigned_area_map(result)
    return LayoutEvaluation(
        assigned_areas=areas,
        missing_spaces=check_space_coverage(spaces, areas),
        size_penalty=size_penalty(spaces, areas),
    )
