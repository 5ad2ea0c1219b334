"""Space serialization — JSON conversion."""

from __future__ import annotations

from .models import SpaceNode


def space_to_dict(space: SpaceNode) -> dict:
    return {
        "name": space.name,
        "area": space.area,
        "position": list(space.position),
        "function": space.function,
        "color": space.color,
        "priority": space.priority,
        "trimmed_area": space.trimmed_area,
    }


def parse_spaces(data: list[dict]) -> list[SpaceNode]:
    """Parse a list of space dicts.  Names must be unique."""
    spaces: list[SpaceNode] = []
    names: set[str] = set()
    for entry in data:
        name = str(entry["name"])
        if name in names:
            raise ValueError(f"Duplicate space name '{name}'")
        names.add(name)
        area = float(entry["area"])
        if area <= 0:
            raise ValueError(f"Space '{name}': area must be > 0")
        pos = entry.get("position", [0.0, 0.0])
        spaces.append(SpaceNode(
            name=name,
            area=area,
            position=(float(pos[0]), float(pos[1])),
            function=entry.get("function", ""),
            color=entry.get("color", ""),
            priority=int(entry.get("priority", 0)),
            trimmed_area=float(entry.get("trimmed_area", 0.0)),
        ))
    return spaces
