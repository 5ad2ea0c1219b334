"""Tests for the cell allocator (phases 0, A, B, C) and layout evaluation.

Small cases build cells and coverage records by hand so every budget
change can be checked exactly.  ``TestPipelineInvariants`` runs the full
trim → decompose → coverage → allocate chain on a real arrangement.
"""

from __future__ import annotations

import json
import math
import unittest

from modplan.pipeline.allocator import (
    AllocationResult, Assignment, ContestPolicy, Phase,
    allocate, assigned_area_map, check_space_coverage, size_penalty, evaluate,
    allocation_to_dict, evaluation_to_dict,
)
from modplan.pipeline.grid import (
    CoverageRecord, compute_coverage, decompose_arrangement, trim_space,
)
from modplan.pipeline.spaces import SpaceNode
from tests.site_fixture import make_arrangement, make_cell


def _space(name: str, budget: float, area: float = 100.0) -> SpaceNode:
    return SpaceNode(name, area=area, trimmed_area=budget)


class TestContestStrict(unittest.TestCase):
    """One cell of area 30, covered 20 by A and 10 by B."""

    def setUp(self):
        self.cell = make_cell(0, 0, math.sqrt(30), 0)
        self.coverage = [
            CoverageRecord(self.cell, "A", 20.0),
            CoverageRecord(self.cell, "B", 10.0),
        ]

    def test_larger_budget_wins(self):
        a, b = _space("A", 50), _space("B", 40)
        result = allocate([self.cell], [a, b], self.coverage)
        self.assertEqual(len(result.assignments), 1)
        won = result.assignments[0]
        self.assertEqual((won.space, won.phase), ("A", Phase.CONTESTED))
        self.assertAlmostEqual(a.trimmed_area, 40)
        self.assertAlmostEqual(b.trimmed_area, 40)
        self.assertFalse(result.stalled)
        self.assertEqual(result.unresolved, [])

    def test_budget_beats_overlap(self):
        a, b = _space("A", 40), _space("B", 50)
        result = allocate([self.cell], [a, b], self.coverage)
        self.assertEqual(result.assignments[0].space, "B")
        self.assertAlmostEqual(b.trimmed_area, 30)
        self.assertAlmostEqual(a.trimmed_area, 40)

    def test_no_funds_falls_back_to_overlap(self):
        a, b = _space("A", 0), _space("B", -5)
        result = allocate([self.cell], [a, b], self.coverage)
        self.assertEqual(result.assignments[0].space, "A")
        self.assertAlmostEqual(a.trimmed_area, -10)

    def test_equal_budgets_first_space_wins(self):
        a, b = _space("A", 50), _space("B", 50)
        result = allocate([self.cell], [a, b], self.coverage)
        self.assertEqual(result.assignments[0].space, "A")
        self.assertAlmostEqual(a.trimmed_area, 50 - (30 - 20))
        self.assertAlmostEqual(b.trimmed_area, 50)

    def test_equal_budgets_follow_input_order(self):
        a, b = _space("A", 50), _space("B", 50)
        result = allocate([self.cell], [b, a], self.coverage)
        self.assertEqual(result.assignments[0].space, "B")
        self.assertAlmostEqual(b.trimmed_area, 50 - (30 - 10))
        self.assertAlmostEqual(a.trimmed_area, 50)

    def test_budgets_recorded(self):
        result = allocate([self.cell], [_space("A", 50), _space("B", 40)], self.coverage)
        self.assertEqual(result.initial_budgets, {"A": 50, "B": 40})
        self.assertAlmostEqual(result.final_budgets["A"], 40)


class TestContestCreditBack(unittest.TestCase):

    def setUp(self):
        self.cell = make_cell(0, 0, math.sqrt(30), 0)
        self.coverage = [
            CoverageRecord(self.cell, "A", 20.0),
            CoverageRecord(self.cell, "B", 10.0),
        ]

    def test_loser_credited(self):
        a, b = _space("A", 50), _space("B", 40)
        result = allocate([self.cell], [a, b], self.coverage, policy="credit_back")
        self.assertEqual(result.assignments[0].space, "A")
        self.assertAlmostEqual(a.trimmed_area, 40)
        self.assertAlmostEqual(b.trimmed_area, 50)
        self.assertFalse(result.stalled)

    def test_equal_budgets_first_space_wins(self):
        a, b = _space("A", 50), _space("B", 50)
        result = allocate([self.cell], [a, b], self.coverage, policy="credit_back")
        self.assertEqual(result.assignments[0].space, "A")
        self.assertAlmostEqual(a.trimmed_area, 50 - (30 - 20))
        self.assertAlmostEqual(b.trimmed_area, 50 + 10)
        self.assertFalse(result.stalled)

    def test_equal_budgets_follow_input_order(self):
        a, b = _space("A", 50), _space("B", 50)
        result = allocate([self.cell], [b, a], self.coverage, policy="credit_back")
        self.assertEqual(result.assignments[0].space, "B")
        self.assertAlmostEqual(b.trimmed_area, 50 - (30 - 10))
        self.assertAlmostEqual(a.trimmed_area, 50 + 20)

    def test_credit_changes_later_contests(self):
        second = make_cell(math.sqrt(30), 0, math.sqrt(30), 1, col=1)
        coverage = self.coverage + [
            CoverageRecord(second, "A", 20.0),
            CoverageRecord(second, "B", 10.0),
        ]
        a, b = _space("A", 50), _space("B", 40)
        result = allocate([self.cell, second], [a, b], coverage,
                          policy=ContestPolicy.CREDIT_BACK)
        self.assertEqual([x.space for x in result.assignments], ["A", "B"])

    def test_stall_reported(self):
        a, b = _space("A", math.nan), _space("B", math.nan)
        with self.assertLogs("modplan.pipeline.allocator.engine", level="WARNING"):
            result = allocate([self.cell], [a, b], self.coverage,
                              policy=ContestPolicy.CREDIT_BACK)
        self.assertTrue(result.stalled)
        self.assertEqual(result.unresolved, [self.cell])
        self.assertEqual(result.assignments, [])


class TestUncontested(unittest.TestCase):

    def test_full_cell_is_free(self):
        cell = make_cell(0, 0, 5, 0)
        a = _space("A", 10)
        result = allocate([cell], [a], [CoverageRecord(cell, "A", 25.0)])
        self.assertEqual(result.assignments[0].phase, Phase.FULL)
        self.assertEqual(a.trimmed_area, 10)

    def test_full_cell_taken_without_budget(self):
        cell = make_cell(0, 0, 5, 0)
        a = _space("A", 0)
        result = allocate([cell], [a], [CoverageRecord(cell, "A", 25.0)])
        self.assertEqual(len(result.assignments), 1)

    def test_largest_overlap_first_until_overdrawn(self):
        cells = [make_cell(3 * i, 0, 3, i) for i in range(3)]
        coverage = [
            CoverageRecord(cells[0], "A", 2.0),
            CoverageRecord(cells[1], "A", 8.0),
            CoverageRecord(cells[2], "A", 5.0),
        ]
        a = _space("A", 4)
        result = allocate(cells, [a], coverage)
        self.assertEqual([x.cell.global_index for x in result.assignments], [1, 2])
        self.assertTrue(all(x.phase is Phase.UNCONTESTED for x in result.assignments))
        self.assertAlmostEqual(a.trimmed_area, -1)
        self.assertAlmostEqual(result.assignments[1].extra_area, 4)

    def test_no_budget_takes_nothing(self):
        cell = make_cell(0, 0, 3, 0)
        result = allocate([cell], [_space("A", 0)], [CoverageRecord(cell, "A", 5.0)])
        self.assertEqual(result.assignments, [])


class TestFillEmpty(unittest.TestCase):
    """A row of four cells: A owns the first, B the last."""

    def setUp(self):
        self.cells = [make_cell(3 * i, 0, 3, i) for i in range(4)]
        self.coverage = [
            CoverageRecord(self.cells[0], "A", 9.0),
            CoverageRecord(self.cells[3], "B", 9.0),
        ]

    def test_off_by_default(self):
        result = allocate(self.cells, [_space("A", 10), _space("B", 20)], self.coverage)
        self.assertEqual(len(result.assignments), 2)

    def test_grows_from_neighbours(self):
        a, b = _space("A", 10), _space("B", 20)
        result = allocate(self.cells, [a, b], self.coverage, fill_empty=True)
        owners = {x.cell.global_index: x.space for x in result.assignments}
        self.assertEqual(owners, {0: "A", 1: "A", 2: "B", 3: "B"})
        filled = [x for x in result.assignments if x.phase is Phase.EMPTY]
        self.assertEqual(len(filled), 2)
        self.assertAlmostEqual(a.trimmed_area, 1)
        self.assertAlmostEqual(b.trimmed_area, 11)

    def test_isolated_cell_goes_to_richest(self):
        lone = make_cell(100, 100, 3, 9)
        a, b = _space("A", 10), _space("B", 20)
        result = allocate([lone], [a, b], [], fill_empty=True)
        self.assertEqual(result.assignments[0].space, "B")


class TestInputs(unittest.TestCase):

    def test_duplicate_space_names(self):
        with self.assertRaises(ValueError):
            allocate([], [_space("A", 1), _space("A", 2)], [])

    def test_unknown_policy(self):
        with self.assertRaises(ValueError):
            allocate([], [_space("A", 1)], [], policy="lottery")

    def test_module_records_ignored(self):
        cell = make_cell(0, 0, 5, 0)
        result = allocate([cell], [_space("A", 10)], [CoverageRecord(cell, 0, 25.0)])
        self.assertEqual(result.assignments, [])

    def test_overlap_thresholds_are_areas(self):
        cell = make_cell(0, 0, 5, 0)
        small = allocate([cell], [_space("A", 10)], [CoverageRecord(cell, "A", 1e-8)])
        self.assertEqual(len(small.assignments), 1)
        tiny = allocate([cell], [_space("A", 10)], [CoverageRecord(cell, "A", 1e-13)])
        self.assertEqual(tiny.assignments, [])

    def test_records_for_unknown_cells_ignored(self):
        cell = make_cell(0, 0, 5, 0)
        stray = make_cell(50, 50, 5, 1)
        result = allocate([cell], [_space("A", 10)], [CoverageRecord(stray, "A", 25.0)])
        self.assertEqual(result.assignments, [])

    def test_empty_inputs(self):
        result = allocate([], [], [])
        self.assertEqual(result.assignments, [])
        self.assertFalse(result.stalled)


class TestPipelineInvariants(unittest.TestCase):
    """Real trim budgets over a 45 × 30 arrangement with two spaces."""

    def _run(self, policy):
        arr = make_arrangement((0, 0, 45, 15), (0, 15, 45, 15))
        spaces = [
            SpaceNode("Living", 300, position=(12, 15)),
            SpaceNode("Bed", 200, position=(26, 12)),
        ]
        for space in spaces:
            trim_space(space, arr)
        cells = decompose_arrangement(arr)
        result = allocate(cells, spaces, compute_coverage(cells, spaces), policy=policy)
        return cells, spaces, result

    def test_each_cell_assigned_once(self):
        for policy in ContestPolicy:
            cells, _, result = self._run(policy)
            assigned = [a.cell for a in result.assignments]
            self.assertEqual(len(assigned), len(set(assigned)))
            self.assertTrue(set(assigned) <= set(cells))
            self.assertFalse(result.stalled)

    def test_assigned_cells_touch_their_space(self):
        _, spaces, result = self._run(ContestPolicy.STRICT)
        squares = {s.name: s.square for s in spaces}
        for a in result.assignments:
            self.assertGreater(a.cell.rect.intersection_area(squares[a.space]), 0)
            self.assertAlmostEqual(
                a.overlap_area, a.cell.rect.intersection_area(squares[a.space]),
            )

    def test_assigned_area_within_one_cell_of_required(self):
        for policy in ContestPolicy:
            _, spaces, result = self._run(policy)
            cell_area = result.assignments[0].cell_area
            for space in spaces:
                self.assertLessEqual(result.assigned_area(space.name),
                                     space.area + cell_area)

    def test_contested_cells_resolved_while_room_remains(self):
        cells, spaces, result = self._run(ContestPolicy.STRICT)
        coverage = compute_coverage(cells, spaces)
        per_cell: dict = {}
        for rec in coverage:
            per_cell.setdefault(rec.cell, set()).add(rec.target)
        contested = {c for c, names in per_cell.items() if len(names) > 1}
        self.assertTrue(contested)
        owned = result.by_cell()
        for cell in contested - set(owned):
            for space in spaces:
                if space.name in per_cell[cell]:
                    self.assertGreaterEqual(result.assigned_area(space.name), space.area)


class TestAreaCap(unittest.TestCase):
    """A 900 sq unit space lying wholly on one 45 × 45 module.

    More than 900 units of whole cells fall inside its square, so only
    the required area may be handed out, whatever the phase.
    """

    def _run(self, policy, fill_empty):
        arr = make_arrangement((-22.5, -22.5, 45, 45))
        hall = SpaceNode("Hall", 900)
        trim_space(hall, arr)
        cells = decompose_arrangement(arr, cell_size=3.0)
        full = [c for c in cells if hall.square.contains(c.rect)]
        self.assertGreater(sum(c.area for c in full), hall.area)
        result = allocate(cells, [hall], compute_coverage(cells, [hall]),
                          policy=policy, fill_empty=fill_empty)
        return hall, result

    def test_full_cells_stop_at_required_area(self):
        hall, result = self._run(ContestPolicy.STRICT, False)
        self.assertTrue(all(a.phase is Phase.FULL for a in result.assignments))
        self.assertAlmostEqual(result.assigned_area("Hall"), 900)
        self.assertAlmostEqual(hall.trimmed_area, 0)

    def test_bound_holds_for_every_policy(self):
        for policy in ContestPolicy:
            for fill_empty in (False, True):
                _, result = self._run(policy, fill_empty)
                self.assertLessEqual(result.assigned_area("Hall"), 900 + 9)

    def test_full_space_takes_no_contested_cell(self):
        cell = make_cell(0, 0, math.sqrt(30), 0)
        coverage = [CoverageRecord(cell, "A", 20.0), CoverageRecord(cell, "B", 10.0)]
        a, b = _space("A", 50, area=20), _space("B", 10, area=100)
        first = make_cell(20, 20, math.sqrt(30), 1, col=1)
        coverage.append(CoverageRecord(first, "A", 30.0))
        result = allocate([first, cell], [a, b], coverage)
        self.assertEqual(result.by_cell()[cell].space, "B")


class TestEvaluation(unittest.TestCase):

    def setUp(self):
        cells = [make_cell(0, 0, 5, 0), make_cell(5, 0, 5, 1)]
        self.result = AllocationResult(assignments=[
            Assignment(c, "A", 25.0, 25.0, Phase.FULL) for c in cells
        ])
        self.spaces = [_space("A", 0, area=100), _space("B", 0, area=40)]

    def test_assigned_area_map(self):
        self.assertEqual(assigned_area_map(self.result), {"A": 50.0})
        self.assertEqual(self.result.assigned_area("A"), 50.0)
        self.assertEqual(len(self.result.cells_for("A")), 2)

    def test_missing_spaces(self):
        self.assertEqual(check_space_coverage(self.spaces, {"A": 50.0}), ["B"])

    def test_size_penalty(self):
        self.assertAlmostEqual(size_penalty(self.spaces, {"A": 50.0}), 1.5)
        self.assertEqual(size_penalty(self.spaces, {"A": 120.0, "B": 40.0}), 0.0)

    def test_evaluate_and_serialize(self):
        ev = evaluate(self.result, self.spaces)
        self.assertEqual(ev.missing_spaces, ["B"])
        data = json.loads(json.dumps(evaluation_to_dict(ev)))
        self.assertAlmostEqual(data["size_penalty"], 1.5)
        alloc = json.loads(json.dumps(allocation_to_dict(self.result)))
        self.assertEqual([a["phase"] for a in alloc["assignments"]], ["0", "0"])
        self.assertEqual(alloc["assignments"][0]["cell"]["global_index"], 0)
        self.assertEqual(alloc["assignments"][0]["extra_area"], 0.0)


if __name__ == "__main__":
    unittest.main()
