"""Allocation serialization — JSON conversion."""

from __future__ import annotations

from modplan.pipeline.grid.models import GridCell

from .evaluation import LayoutEvaluation
from .models import AllocationResult


def cell_to_dict(cell: GridCell) -> dict:
    return {
        "owner": cell.owner,
        "row": cell.row,
        "col": cell.col,
        "global_index": cell.global_index,
        "origin": list(cell.origin),
        "size": cell.size,
    }


def allocation_to_dict(result: AllocationResult) -> dict:
    """Serialize an AllocationResult to a JSON-safe dict."""
    return {
        "assignments": [
            {
                "cell": cell_to_dict(a.cell),
                "space": a.space,
                "phase": a.phase.value,
                "cell_area": a.cell_area,
                "overlap_area": a.overlap_area,
                "extra_area": a.extra_area,
            }
            for a in result.assignments
        ],
        "stalled": result.stalled,
        "unresolved": [cell_to_dict(c) for c in result.unresolved],
        "initial_budgets": dict(result.initial_budgets),
        "final_budgets": dict(result.final_budgets),
    }


def evaluation_to_dict(ev: LayoutEvaluation) -> dict:
    return {
        "assigned_areas": dict(ev.assigned_areas),
        "missing_spaces": list(ev.missing_spaces),
        "size_penalty": ev.size_penalty,
    }
