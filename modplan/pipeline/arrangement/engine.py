"""
Arrangement search engine — exhaustive orientation × ordering search.

For a combination of n module instances the engine walks all 2ⁿ
orientation masks.  Character *i* of the mask string (most-significant
bit first) says whether instance *i* is rotated.  For each mask it feeds
every distinct ordering of the oriented instances to a packing strategy
and collects the complete placements the strategy finds.

Algorithm:
  1. Validate the count map and expand it into instances ordered by
     type index.
  2. Per mask, fix orientations.
  3. Orderings: the natural order when every instance is of one type,
     otherwise every distinct permutation (swapping two identical
     oriented instances yields the same placements, so it is done once).
  4. The strategy (adjacency backtracking by default) yields placements.
  5. Candidates are deduplicated by placement signature.

The search is finite and deterministic.  Infeasible inputs produce an
empty list, never an exception.
"""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from typing import Hashable, Iterable, Iterator, Mapping, Sequence, TypeVar

from modplan.catalog.combinations import expand_counts, validate_counts
from modplan.catalog.models import ModuleType

from .dedup import dedup_by_signature
from .models import Arrangement, Boundary, ModuleInstance, MAX_MODULES, TOLERANCE
from .strategies import PackingStrategy, get_strategy


log = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


# ── Orderings ──────────────────────────────────────────────────────


def distinct_orderings(items: Sequence[T]) -> Iterator[tuple[T, ...]]:
    """Yield each distinct permutation of *items* exactly once.

    Values are tried in order of first appearance.
    """
    remaining = Counter(items)
    keys = list(dict.fromkeys(items))
    n = len(items)
    current: list[T] = []

    def _walk() -> Iterator[tuple[T, ...]]:
        if len(current) == n:
            yield tuple(current)
            return
        for key in keys:
            if remaining[key]:
                remaining[key] -= 1
                current.append(key)
                yield from _walk()
                current.pop()
                remaining[key] += 1

    yield from _walk()


def orientation_tag(mask: int, n: int) -> str:
    return format(mask, f"0{n}b") if n else ""


# ── Search driver ──────────────────────────────────────────────────


class ArrangementSearch:
    """Lazy, restartable enumeration of candidate arrangements.

    Iterating yields every complete placement found, before
    deduplication.  Each ``iter()`` starts the walk afresh.

    Raises
    ------
    InvalidCombinationError
        From the constructor, if *module_counts* is malformed.
    """

    def __init__(
        self,
        module_counts: Mapping[int, int],
        boundary: Boundary,
        module_types: list[ModuleType],
        strategy: str | PackingStrategy | None = None,
        masks: Iterable[int] | None = None,
        max_modules: int = MAX_MODULES,
        tol: float = TOLERANCE,
    ) -> None:
        validate_counts(module_counts, module_types, max_modules)
        self.boundary = boundary
        self.module_types = module_types
        self.strategy = get_strategy(strategy)
        self.tol = tol
        self.types = [module_types[i] for i in expand_counts(module_counts)]
        self.masks = list(range(1 << len(self.types))) if masks is None else list(masks)

    @property
    def n(self) -> int:
        return len(self.types)

    def instances(self, mask: int) -> list[ModuleInstance]:
        """Oriented instances for one mask."""
        tag = orientation_tag(mask, self.n)
        return [ModuleInstance(mt, tag[i] == "1") for i, mt in enumerate(self.types)]

    def orderings(self, instances: list[ModuleInstance]) -> Iterator[tuple[ModuleInstance, ...]]:
        if len({inst.type.id for inst in instances}) <= 1:
            yield tuple(instances)
        else:
            yield from distinct_orderings(instances)

    def for_mask(self, mask: int) -> Iterator[Arrangement]:
        tag = orientation_tag(mask, self.n)
        for ordering in self.orderings(self.instances(mask)):
            for modules in self.strategy.place(ordering, self.boundary, self.tol):
                yield Arrangement(modules, orientation=tag, strategy=self.strategy.name)

    def __iter__(self) -> Iterator[Arrangement]:
        for mask in self.masks:
            yield from self.for_mask(mask)


def _search_mask(job: tuple[ArrangementSearch, int]) -> list[Arrangement]:
    """Worker entry point: deduplicated candidates for a single mask."""
    runner, mask = job
    found = dedup_by_signature(runner.for_mask(mask))
    log.debug("Mask %s: %d arrangement(s)", orientation_tag(mask, runner.n), len(found))
    return found


def search(
    module_counts: Mapping[int, int],
    boundary: Boundary,
    module_types: list[ModuleType],
    strategy: str | PackingStrategy | None = None,
    workers: int = 1,
    max_modules: int = MAX_MODULES,
) -> list[Arrangement]:
    """Every valid, duplicate-free arrangement of a module combination.

    Parameters
    ----------
    module_counts : Mapping[int, int]
        0-based module type index → number of instances.
    boundary : Boundary
        Site rectangle.
    module_types : list[ModuleType]
        Catalogue the indices refer to.
    strategy : str | PackingStrategy | None
        ``"adjacency"`` (default) or ``"rows"``.
    workers : int
        Process count for the mask loop; 1 runs in-process.
    max_modules : int
        Upper bound on the total instance count.

    Returns
    -------
    list[Arrangement]
        Unique arrangements in mask order; ``[]`` if nothing fits.

    Raises
    ------
    InvalidCombinationError
        If *module_counts* references an unknown type, has a bad count,
        or exceeds *max_modules*.
    """
    runner = ArrangementSearch(
        module_counts, boundary, module_types,
        strategy=strategy, max_modules=max_modules,
    )
    log.info(
        "Searching %d module(s), %d mask(s), strategy '%s'",
        runner.n, len(runner.masks), runner.strategy.name,
    )

    if workers > 1 and len(runner.masks) > 1:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            per_mask = list(pool.map(_search_mask, [(runner, m) for m in runner.masks]))
    else:
        per_mask = [_search_mask((runner, m)) for m in runner.masks]

    result = dedup_by_signature(arr for batch in per_mask for arr in batch)
    if result:
        log.info("Found %d unique arrangement(s)", len(result))
    else:
        log.info("No arrangement fits boundary %.2f x %.2f",
                 boundary.width, boundary.height)
    return result
