"""Tests for taskwaves.graph — edges, dangling references, cycle detection."""

from __future__ import annotations

from taskwaves.errors import CyclicDependency, DanglingDependency
from taskwaves.graph import build, find_cycle


# ═══════════════════════════════════════════════════════════════════
#  Edges
# ═══════════════════════════════════════════════════════════════════


class TestBuildEdges:
    def test_forward_and_reverse_edges(self, make_task):
        graph, diagnostics = build([
            make_task("A"),
            make_task("B", dependencies=["A"]),
            make_task("C", dependencies=["A", "B"]),
        ])
        assert diagnostics == []
        assert graph.order == ["A", "B", "C"]
        assert graph.dependencies["C"] == ("A", "B")
        assert graph.dependents["A"] == ["B", "C"]
        assert graph.dependents["C"] == []
        assert graph.is_valid

    def test_empty_task_list(self):
        graph, diagnostics = build([])
        assert graph.order == []
        assert diagnostics == []
        assert graph.is_valid

    def test_duplicate_id_first_record_wins(self, make_task):
        graph, _ = build([make_task("A"), make_task("A", dependencies=["B"]), make_task("B")])
        assert graph.order == ["A", "B"]
        assert graph.dependencies["A"] == ()


# ═══════════════════════════════════════════════════════════════════
#  Dangling dependencies
# ═══════════════════════════════════════════════════════════════════


class TestDanglingDependencies:
    def test_missing_id_reported_not_fatal(self, make_task):
        graph, diagnostics = build([make_task("1", dependencies=["99"]), make_task("2")])
        assert diagnostics == [DanglingDependency(task_id="1", missing_id="99")]
        assert graph.missing == {"1": ("99",)}
        assert graph.dependencies["1"] == ()
        assert graph.is_valid

    def test_dangling_message(self):
        assert str(DanglingDependency("1", "99")) == "Task 1: dependency 99 not found"

    def test_dangling_edges_ignored_by_cycle_check(self, make_task):
        graph, diagnostics = build([
            make_task("A", dependencies=["B", "ghost"]),
            make_task("B", dependencies=["ghost"]),
        ])
        assert graph.is_valid
        assert all(isinstance(d, DanglingDependency) for d in diagnostics)
        assert len(diagnostics) == 2


# ═══════════════════════════════════════════════════════════════════
#  Cycles
# ═══════════════════════════════════════════════════════════════════


class TestCycles:
    def test_two_node_cycle(self, make_task):
        graph, diagnostics = build([
            make_task("1", dependencies=["2"]),
            make_task("2", dependencies=["1"]),
        ])
        assert not graph.is_valid
        assert graph.cycle == ("1", "2")
        assert CyclicDependency(cycle_ids=("1", "2")) in diagnostics

    def test_self_cycle(self, make_task):
        graph, _ = build([make_task("A", dependencies=["A"])])
        assert graph.cycle == ("A",)

    def test_indirect_cycle_behind_a_prefix(self, make_task):
        graph, _ = build([
            make_task("X", dependencies=["A"]),
            make_task("A", dependencies=["C"]),
            make_task("B", dependencies=["A"]),
            make_task("C", dependencies=["B"]),
        ])
        assert graph.cycle == ("A", "C", "B")

    def test_diamond_no_cycle(self, make_task):
        graph, _ = build([
            make_task("A"),
            make_task("B", dependencies=["A"]),
            make_task("C", dependencies=["A"]),
            make_task("D", dependencies=["B", "C"]),
        ])
        assert graph.is_valid

    def test_cycle_message(self):
        assert str(CyclicDependency(("1", "2"))) == "Cycle detected: 1 -> 2 -> 1"


class TestFindCycle:
    def test_long_chain_does_not_recurse(self):
        deps = {str(i): (str(i - 1),) if i else () for i in range(5000)}
        assert find_cycle(deps, reversed(list(deps))) == []

    def test_long_chain_closed_into_cycle(self):
        deps = {str(i): (str(i - 1),) for i in range(1, 3000)}
        deps["0"] = ("2999",)
        cycle = find_cycle(deps, ["0"])
        assert len(cycle) == 3000
        assert cycle[0] == "0"

    def test_unknown_ids_ignored(self):
        assert find_cycle({"A": ("B",)}, ["A"]) == []
