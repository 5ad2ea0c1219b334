from .polygon import (
    Point,
    Loop,
    polygon_area,
    ensure_ccw,
    clip_polygon,
    convex_hull,
)
from .rect import Rect
