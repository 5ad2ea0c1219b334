"""Arrangement serialization — JSON conversion."""

from __future__ import annotations

from modplan.catalog.models import ModuleType

from .models import Arrangement, Boundary, ModuleInstance, PlacedModule


def boundary_to_dict(b: Boundary) -> dict:
    return {"min_x": b.min_x, "min_y": b.min_y, "max_x": b.max_x, "max_y": b.max_y}


def parse_boundary(data: dict) -> Boundary:
    """Accept either corner form or ``{"width", "height"[, "x", "y"]}``."""
    if "width" in data:
        return Boundary.from_size(
            float(data["width"]), float(data["height"]),
            float(data.get("x", 0.0)), float(data.get("y", 0.0)),
        )
    return Boundary(
        float(data["min_x"]), float(data["min_y"]),
        float(data["max_x"]), float(data["max_y"]),
    )


def arrangement_to_dict(arr: Arrangement) -> dict:
    """Serialize an Arrangement to a JSON-safe dict."""
    return {
        "orientation": arr.orientation,
        "strategy": arr.strategy,
        "modules": [
            {
                "type_id": m.type_id,
                "rotated": m.instance.rotated,
                "x": m.x,
                "y": m.y,
                "width": m.width,
                "height": m.height,
            }
            for m in arr.modules
        ],
    }


def parse_arrangement(data: dict, module_types: list[ModuleType]) -> Arrangement:
    """Parse an arrangement dict back into an Arrangement.

    Module extents are recomputed from *module_types*; the stored
    ``width`` / ``height`` are informational only.
    """
    modules = tuple(
        PlacedModule(
            ModuleInstance(module_types[m["type_id"]], bool(m["rotated"])),
            float(m["x"]),
            float(m["y"]),
        )
        for m in data["modules"]
    )
    return Arrangement(
        modules=modules,
        orientation=data.get("orientation", ""),
        strategy=data.get("strategy", ""),
    )
