"""Module combinations — enumerate, validate and convert count maps.

A *count map* is a ``dict[int, int]`` from 0-based module type index to
the number of instances of that type.  Combination strings number the
types from 1::

    "2 x Module_Type 1 + 1 x Module_Type 2 = 300"
"""

from __future__ import annotations

import math
import re
from typing import Mapping

from modplan.config import LAYOUT_RULES

from .models import ModuleType, InvalidCombinationError


_TERM_RE = re.compile(r"(\d+)\s*x\s*Module_Type\s*(\d+)", re.IGNORECASE)


# ── Validation ─────────────────────────────────────────────────────

def validate_counts(
    counts: Mapping[int, int],
    module_types: list[ModuleType],
    max_modules: int = LAYOUT_RULES.max_modules,
) -> None:
    """Check that a count map can be searched.

    Raises
    ------
    InvalidCombinationError
        On an unknown type index, a negative or non-integer count, an
        empty combination, or more than *max_modules* instances.
    """
    total = 0
    for index, count in counts.items():
        if not isinstance(index, int) or not 0 <= index < len(module_types):
            raise InvalidCombinationError(index, count, "unknown module type index")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidCombinationError(index, count, "count must be a non-negative integer")
        total += count
    if total == 0:
        raise InvalidCombinationError(None, 0, "combination contains no modules")
    if total > max_modules:
        raise InvalidCombinationError(
            None, total, f"{total} modules exceeds the limit of {max_modules}",
        )


def expand_counts(counts: Mapping[int, int]) -> list[int]:
    """Flatten a count map into type indices, ordered by type index."""
    out: list[int] = []
    for index in sorted(counts):
        out.extend([index] * counts[index])
    return out


def combination_area(counts: Mapping[int, int], module_types: list[ModuleType]) -> float:
    return sum(module_types[i].area * c for i, c in counts.items())


# ── Enumeration ────────────────────────────────────────────────────

def find_combinations(
    module_types: list[ModuleType],
    required_area: float,
    variance: float | None = None,
) -> list[dict[int, int]]:
    """Every count map whose total area lies within ``required_area ± variance``.

    Parameters
    ----------
    module_types : list[ModuleType]
        The catalogue (must be non-empty).
    required_area : float
        Target total module area.
    variance : float | None
        Allowed deviation; defaults to the square of the narrowest type
        width.

    Returns
    -------
    list[dict[int, int]]
        Count maps (zero counts omitted), sorted by total area.
    """
    if not module_types:
        return []
    if variance is None:
        width = min(mt.width for mt in module_types)
        variance = width * width
    lower = required_area - variance
    upper = required_area + variance
    smallest = min(mt.area for mt in module_types)
    limit = math.ceil(upper / smallest) if upper > 0 else 0

    results: list[tuple[float, dict[int, int]]] = []
    counts = [0] * len(module_types)

    def _recurse(start: int, used: int, total: float) -> None:
        if used > 0 and lower <= total <= upper:
            results.append(
                (total, {i: c for i, c in enumerate(counts) if c > 0})
            )
        if used >= limit or total > upper:
            return
        for i in range(start, len(module_types)):
            counts[i] += 1
            _recurse(i, used + 1, total + module_types[i].area)
            counts[i] -= 1

    _recurse(0, 0, 0.0)
    results.sort(key=lambda item: item[0])
    return [combo for _, combo in results]


# ── Text form ──────────────────────────────────────────────────────

def _fmt_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def format_combination(
    counts: Mapping[int, int],
    module_types: list[ModuleType] | None = None,
) -> str:
    """Render a count map; the ``= area`` suffix needs *module_types*."""
    text = " + ".join(
        f"{counts[i]} x Module_Type {i + 1}"
        for i in sorted(counts) if counts[i] > 0
    )
    if module_types is not None:
        text += f" = {_fmt_number(combination_area(counts, module_types))}"
    return text


def parse_combination(
    text: str,
    module_types: list[ModuleType] | None = None,
) -> dict[int, int]:
    """Parse a combination string into a 0-based count map.

    Repeated terms for the same type are summed.  Anything after the
    terms (``= 300 ft²``) is ignored.  When *module_types* is given the
    result is also checked with :func:`validate_counts`.
    """
    counts: dict[int, int] = {}
    for count_s, type_s in _TERM_RE.findall(text):
        number = int(type_s)
        if number < 1:
            raise InvalidCombinationError(number - 1, int(count_s), "module types are numbered from 1")
        counts[number - 1] = counts.get(number - 1, 0) + int(count_s)
    if not counts:
        raise InvalidCombinationError(None, None, f"no 'N x Module_Type K' terms in {text!r}")
    if module_types is not None:
        validate_counts(counts, module_types)
    return counts
