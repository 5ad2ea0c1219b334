"""Spaces — circular room requirements and their square grid regions."""

from .models import SpaceNode
from .layout import layout_center, center_spaces_on, trim_space_to_site, usable_square_area
from .serialization import space_to_dict, parse_spaces

__all__ = [
    # Models
    "SpaceNode",
    # Layout
    "layout_center", "center_spaces_on", "trim_space_to_site", "usable_square_area",
    # Serialization
    "space_to_dict", "parse_spaces",
]
