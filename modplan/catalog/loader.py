"""Catalogue loader — generates, parses and validates module types."""

from __future__ import annotations

import math

from .models import ModuleType, ValidationError


# ── Generation ─────────────────────────────────────────────────────

def build_module_types(min_width: float, max_length: float) -> list[ModuleType]:
    """Generate the standard catalogue for a minimum module width.

    Type *i* (0-based) measures ``min_width`` by ``(i + 1) * min_width``,
    for every multiple that does not exceed *max_length*.

    Raises
    ------
    ValueError
        If either dimension is non-positive or *max_length* is shorter
        than *min_width*.
    """
    if min_width <= 0 or max_length <= 0:
        raise ValueError("min_width and max_length must be > 0")
    n = math.floor(max_length / min_width + 1e-9)
    if n < 1:
        raise ValueError(
            f"max_length {max_length} is shorter than min_width {min_width}"
        )
    return [
        ModuleType(id=i, width=min_width, length=min_width * (i + 1))
        for i in range(n)
    ]


# ── Validation ─────────────────────────────────────────────────────

def validate_module_types(types: list[ModuleType]) -> list[ValidationError]:
    """Run all validation checks on a catalogue."""
    errs: list[ValidationError] = []
    for index, mt in enumerate(types):
        if mt.id != index:
            errs.append(ValidationError(index, "id", f"Expected {index}, got {mt.id}"))
        if mt.width <= 0:
            errs.append(ValidationError(index, "width", "Must be > 0"))
        if mt.length <= 0:
            errs.append(ValidationError(index, "length", "Must be > 0"))
        if 0 < mt.length < mt.width:
            errs.append(ValidationError(index, "length", "Must be >= width"))
    return errs


# ── Parsing ────────────────────────────────────────────────────────

def parse_module_types(data: list[dict]) -> list[ModuleType]:
    """Parse a list of ``{"width", "length"}`` dicts into module types.

    Ids are taken from list position.  Raises ``ValueError`` listing
    every validation problem found.
    """
    types = [
        ModuleType(id=i, width=float(entry["width"]), length=float(entry["length"]))
        for i, entry in enumerate(data)
    ]
    errs = validate_module_types(types)
    if errs:
        raise ValueError("; ".join(str(e) for e in errs))
    return types


def module_type_to_dict(mt: ModuleType) -> dict:
    return {"id": mt.id, "name": mt.name, "width": mt.width,
            "length": mt.length, "area": mt.area}
