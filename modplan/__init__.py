"""modplan — rectangular module packing and grid-based space allocation.

Packages:
  config     Shared numeric rules (LayoutRules, LAYOUT_RULES).
  geometry   Rectangles, polygon clipping, convex hull, shoelace area.
  catalog    Module types and combinations.
  pipeline   arrangement → grid → allocator stages, plus the job runner.
"""
