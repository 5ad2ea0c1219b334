"""Arrangement — packs a module combination into the site boundary.

Submodules:
  models        Boundary, module instances, placements and Arrangement.
  geometry      Containment, overlap and edge-contact checks.
  strategies    Packing strategies (adjacency backtracking, row partition).
  engine        Orientation × ordering search driver.
  dedup         Signature and silhouette (perimeter) deduplication.
  scoring       Contact length, perimeter, optimal filter, centring.
  serialization JSON conversion (arrangement_to_dict, parse_arrangement).
"""

from .models import Boundary, ModuleInstance, PlacedModule, Arrangement, placement_signature
from .geometry import (
    validate_placements, validate_arrangement, is_edge_connected, overlapping_pairs,
)
from .strategies import PackingStrategy, AdjacencyBacktracking, RowPartition, get_strategy
from .engine import ArrangementSearch, search, distinct_orderings
from .dedup import dedup_by_signature, dedup_by_perimeter, outline_segments
from .scoring import (
    attachment_length, perimeter, footprint, select_optimal,
    overall_center, center_arrangement,
)
from .serialization import (
    arrangement_to_dict, parse_arrangement, boundary_to_dict, parse_boundary,
)


__all__ = [
    # Models
    "Boundary", "ModuleInstance", "PlacedModule", "Arrangement", "placement_signature",
    # Geometry
    "validate_placements", "validate_arrangement", "is_edge_connected", "overlapping_pairs",
    # Strategies
    "PackingStrategy", "AdjacencyBacktracking", "RowPartition", "get_strategy",
    # Engine
    "ArrangementSearch", "search", "distinct_orderings",
    # Dedup
    "dedup_by_signature", "dedup_by_perimeter", "outline_segments",
    # Scoring
    "attachment_length", "perimeter", "footprint", "select_optimal",
    "overall_center", "center_arrangement",
    # Serialization
    "arrangement_to_dict", "parse_arrangement", "boundary_to_dict", "parse_boundary",
]
