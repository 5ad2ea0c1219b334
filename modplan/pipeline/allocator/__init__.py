"""Allocator — assigns module grid cells to spaces under area budgets.

Submodules:
  models        Assignment, AllocationResult, ContestPolicy, Phase.
  engine        Phase 0/A/B/C allocation (allocate).
  evaluation    Assigned-area map, coverage check, size penalty.
  serialization JSON conversion (allocation_to_dict, evaluation_to_dict).
"""

from .models import Assignment, AllocationResult, ContestPolicy, Phase
from .engine import allocate
from .evaluation import (
    LayoutEvaluation, assigned_area_map, check_space_coverage, size_penalty, evaluate,
)
from .serialization import allocation_to_dict, evaluation_to_dict, cell_to_dict

__all__ = [
    # Models
    "Assignment", "AllocationResult", "ContestPolicy", "Phase",
    # Engine
    "allocate",
    # Evaluation
    "LayoutEvaluation", "assigned_area_map", "check_space_coverage",
    "size_penalty", "evaluate",
    # Serialization
    "allocation_to_dict", "evaluation_to_dict", "cell_to_dict",
]
