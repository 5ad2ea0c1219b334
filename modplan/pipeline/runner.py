"""Pipeline runner — drives the stages from a JSON job description.

A job file looks like::

    {
      "boundary": {"width": 60, "height": 45},
      "catalogue": {"min_width": 15, "max_length": 45},
      "combination": "2 x Module_Type 1 + 1 x Module_Type 2",
      "spaces": [{"name": "Living", "area": 900}, ...]
    }

``module_types`` (a list of ``{"width", "length"}``) may replace
``catalogue``, and ``counts`` (``{"0": 2, "1": 1}``, 0-based) may replace
``combination``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from modplan.catalog import (
    ModuleType, build_module_types, parse_module_types, parse_combination,
    validate_counts, format_combination, module_type_to_dict,
)
from modplan.pipeline.allocator import (
    ContestPolicy, allocate, evaluate, allocation_to_dict, evaluation_to_dict,
)
from modplan.pipeline.arrangement import (
    Arrangement, Boundary, search, select_optimal, dedup_by_perimeter,
    center_arrangement, overall_center, arrangement_to_dict, parse_boundary,
)
from modplan.pipeline.grid import decompose_arrangement, trim_space, compute_coverage
from modplan.pipeline.spaces import SpaceNode, center_spaces_on, parse_spaces, space_to_dict


log = logging.getLogger(__name__)


class JobError(ValueError):
    """Raised when a job description cannot be used."""


@dataclass
class Job:
    boundary: Boundary
    module_types: list[ModuleType]
    counts: dict[int, int]
    spaces: list[SpaceNode] = field(default_factory=list)


# ── Parsing ────────────────────────────────────────────────────────


def parse_job(data: dict) -> Job:
    """Parse a job dict.  Raises JobError on any structural problem."""
    try:
        boundary = parse_boundary(data["boundary"])
        if "module_types" in data:
            module_types = parse_module_types(data["module_types"])
        elif "catalogue" in data:
            cat = data["catalogue"]
            module_types = build_module_types(float(cat["min_width"]), float(cat["max_length"]))
        else:
            raise JobError("job needs 'module_types' or 'catalogue'")

        if "counts" in data:
            counts = {int(k): v for k, v in data["counts"].items()}
            validate_counts(counts, module_types)
        elif "combination" in data:
            counts = parse_combination(data["combination"], module_types)
        else:
            raise JobError("job needs 'counts' or 'combination'")

        spaces = parse_spaces(data.get("spaces", []))
    except KeyError as e:
        raise JobError(f"missing key {e}") from e
    except (TypeError, ValueError) as e:
        if isinstance(e, JobError):
            raise
        raise JobError(str(e)) from e

    if boundary.width <= 0 or boundary.height <= 0:
        raise JobError("boundary must have positive width and height")
    return Job(boundary, module_types, counts, spaces)


def load_job(path: Path) -> Job:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise JobError(f"cannot read job file {path}: {e}") from e
    if not isinstance(data, dict):
        raise JobError("job file must contain a JSON object")
    return parse_job(data)


# ── Stages ─────────────────────────────────────────────────────────


def find_arrangements(
    job: Job,
    strategy: str = "adjacency",
    workers: int = 1,
    optimal: bool = False,
) -> list[Arrangement]:
    arrangements = search(job.counts, job.boundary, job.module_types,
                          strategy=strategy, workers=workers)
    if optimal:
        arrangements = select_optimal(arrangements)
    return arrangements


def run_search(
    job: Job,
    strategy: str = "adjacency",
    workers: int = 1,
    optimal: bool = False,
    by_perimeter: bool = False,
) -> dict:
    """Search (and optionally filter) arrangements; JSON-safe result."""
    arrangements = find_arrangements(job, strategy, workers, optimal)
    out: dict = {
        "combination": format_combination(job.counts, job.module_types),
        "module_types": [module_type_to_dict(mt) for mt in job.module_types],
    }
    if by_perimeter:
        arrangements, hulls = dedup_by_perimeter(arrangements)
        out["hulls"] = [[list(p) for p in hull] for hull in hulls]
    out["count"] = len(arrangements)
    out["arrangements"] = [arrangement_to_dict(a) for a in arrangements]
    return out


def run_layout(
    job: Job,
    index: int = 0,
    strategy: str = "adjacency",
    policy: ContestPolicy | str = ContestPolicy.STRICT,
    fill_empty: bool = False,
    optimal: bool = True,
) -> dict:
    """Full pipeline for one arrangement.

    The arrangement at *index* (after the optimal filter, if enabled) is
    centred in the boundary, the spaces are centred on it, each space is
    trimmed against the modules to set its budget, and the module grid
    is allocated.

    Raises
    ------
    JobError
        If no arrangement fits or *index* is out of range.
    """
    arrangements = find_arrangements(job, strategy, optimal=optimal)
    if not arrangements:
        raise JobError("no arrangement fits the boundary")
    if not 0 <= index < len(arrangements):
        raise JobError(f"arrangement index {index} out of range 0..{len(arrangements) - 1}")

    chosen = center_arrangement(arrangements[index], job.boundary.rect.center)
    spaces = job.spaces
    if spaces:
        center_spaces_on(spaces, overall_center(chosen))
    for space in spaces:
        trim_space(space, chosen)

    cells = decompose_arrangement(chosen)
    coverage = compute_coverage(cells, spaces)
    result = allocate(cells, spaces, coverage, policy=policy, fill_empty=fill_empty)
    evaluation = evaluate(result, spaces)
    log.info("Layout %d: size penalty %.3f", index, evaluation.size_penalty)

    return {
        "arrangement": arrangement_to_dict(chosen),
        "cell_count": len(cells),
        "spaces": [space_to_dict(s) for s in spaces],
        "allocation": allocation_to_dict(result),
        "evaluation": evaluation_to_dict(evaluation),
    }
