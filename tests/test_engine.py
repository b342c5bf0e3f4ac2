"""Tests for graphsolve.engine: outcomes, budgets, seeds and diagnostics."""
from dataclasses import dataclass
from datetime import timedelta

import networkx as nx
import pytest

from graphsolve import (
    EdgeConstraint,
    Exhausted,
    Graph,
    Infeasible,
    InvalidInput,
    MostConstrainedOrder,
    NodePattern,
    PuzzleState,
    SolveSettings,
    Solution,
    Solved,
    solve,
    validate,
)
from graphsolve.checker import partial_multiset
from graphsolve.selector import union_domain


def _assert_locally_exact(solution, self_loop_weight=1):
    g, s = solution.graph, solution.state
    assert s.is_complete()
    for i, node in enumerate(g.nodes):
        assert partial_multiset(g, s, i, self_loop_weight=self_loop_weight) == node.requirement()


def _assert_symmetric(state):
    for i in range(state.size):
        for j in range(state.size):
            assert state.get(i, j) == state.get(j, i)


def _cube_graph():
    return Graph.replicate(NodePattern.regular(3), 8, no_triangles=True)


# --- basic outcomes ---

def test_empty_graph_is_solved():
    out = solve(Graph())
    assert isinstance(out, Solved)
    assert out.solution.state.size == 0


def test_triangle_allowed_without_rule():
    out = solve(Graph.replicate(NodePattern.regular(2), 3))
    assert isinstance(out, Solved)
    assert len(out.solution.edges()) == 3


def test_odd_degree_sum_is_infeasible():
    out = solve(Graph.replicate(NodePattern.regular(1), 3))
    assert isinstance(out, Infeasible)
    assert out.stats.backtracks > 0


def test_unwrap():
    assert solve(Graph.replicate(NodePattern.regular(1), 2)).unwrap().state.get(0, 1) == 2
    with pytest.raises(RuntimeError):
        solve(Graph.replicate(NodePattern.regular(1), 3)).unwrap()


def test_solution_is_a_frozen_copy():
    sol = solve(Graph.replicate(NodePattern.regular(1), 2)).unwrap()
    assert sol.state.frozen
    assert sol.rows() == ((1, 2), (2, 1))
    with pytest.raises(ValueError):
        sol.state.set(0, 1, 1)

    mine = PuzzleState.from_rows([[1, 2], [2, 1]])
    built = Solution(graph=sol.graph, state=mine)
    mine.set(0, 1, 1)
    assert built.rows() == ((1, 2), (2, 1))
    assert not mine.frozen


def test_two_edge_colors():
    g = Graph(nodes=[
        NodePattern(color=0, edges=[EdgeConstraint(2, 1), EdgeConstraint(3, 1)]),
        NodePattern(color=1, edges=[EdgeConstraint(2, 0)]),
        NodePattern(color=1, edges=[EdgeConstraint(3, 0)]),
    ])
    sol = solve(g).unwrap()
    assert sol.state.get(0, 1) == 2
    assert sol.state.get(0, 2) == 3
    assert sol.state.get(1, 2) == 1
    _assert_locally_exact(sol)


def test_node_colors_constrain_neighbors():
    # Two black nodes each want a white neighbor; the white node wants both.
    g = Graph(nodes=[
        NodePattern(color=0, edges=[EdgeConstraint(2, 1)]),
        NodePattern(color=0, edges=[EdgeConstraint(2, 1)]),
        NodePattern(color=1, edges=[EdgeConstraint(2, 0), EdgeConstraint(2, 0)]),
    ])
    sol = solve(g).unwrap()
    assert sol.state.get(0, 1) == 1
    assert sol.state.edges() == [(0, 2, 2), (1, 2, 2)]


# --- self-loops ---

def test_self_loop_weight_one():
    node = NodePattern(color=0, edges=[EdgeConstraint(2, 0)], self_connected=True)
    sol = solve(Graph(nodes=[node])).unwrap()
    assert sol.state.get(0, 0) == 2


def test_self_loop_weight_two():
    node = NodePattern(color=0, edges=[EdgeConstraint(2, 0)] * 2, self_connected=True)
    g = Graph(nodes=[node])
    assert isinstance(solve(g), Infeasible)
    sol = solve(g, SolveSettings(self_loop_weight=2)).unwrap()
    assert sol.state.get(0, 0) == 2
    _assert_locally_exact(sol, self_loop_weight=2)


def test_no_self_loops_without_flag():
    sol = solve(Graph.replicate(NodePattern.regular(2), 5)).unwrap()
    for i in range(5):
        assert sol.state.get(i, i) == 1


# --- optional rules ---

def test_required_pair():
    g = Graph.replicate(NodePattern.regular(2), 6, pairs=[(2, 3)])
    sol = solve(g).unwrap()
    assert sol.state.get(2, 3) >= 2
    _assert_locally_exact(sol)


def test_connected_forces_hexagon():
    g = Graph.replicate(NodePattern.regular(2), 6, connected=True)
    sol = solve(g).unwrap()
    assert nx.is_isomorphic(sol.to_networkx(), nx.cycle_graph(6))


def test_meet_quad_rejects_hexagon():
    g = Graph.replicate(NodePattern.regular(2), 6, connected=True, meet_quad=True)
    assert isinstance(solve(g), Infeasible)


def test_commuting_square():
    node = NodePattern(color=0, edges=[EdgeConstraint(2, 0), EdgeConstraint(4, 0)])
    g = Graph.replicate(node, 4, commute_quad=True, connected=True)
    sol = solve(g).unwrap()
    G = sol.to_networkx()
    assert nx.is_isomorphic(G, nx.cycle_graph(4))
    for u, v, data in G.edges(data=True):
        # Opposite edges of the square share a color.
        opposite = [(a, b) for a, b in G.edges() if {a, b}.isdisjoint({u, v})]
        assert len(opposite) == 1
        assert G.edges[opposite[0]]["color"] == data["color"]


# --- budgets ---

def test_step_budget_exhausts():
    out = solve(_cube_graph(), SolveSettings(max_steps=1))
    assert isinstance(out, Exhausted)
    assert out.stats.steps == 1
    with pytest.raises(RuntimeError):
        out.unwrap()


def test_zero_step_budget():
    out = solve(Graph.replicate(NodePattern.regular(1), 2), SolveSettings(max_steps=0))
    assert isinstance(out, Exhausted)


def test_generous_budget_solves():
    out = solve(Graph.replicate(NodePattern.regular(1), 4), SolveSettings(max_steps=10_000, max_time=60.0))
    assert isinstance(out, Solved)


def _slow_cubic_graph():
    # Too large to settle within a 50 ms budget.
    return Graph.replicate(NodePattern.regular(3), 14, no_triangles=True, connected=True, meet_quad=True)


@pytest.mark.parametrize("limit", [0.05, timedelta(milliseconds=50)])
def test_time_budget_exhausts(limit):
    out = solve(_slow_cubic_graph(), SolveSettings(max_time=limit))
    assert isinstance(out, Exhausted)
    assert out.stats.elapsed >= 0.05
    assert out.stats.steps > 0
    with pytest.raises(RuntimeError):
        out.unwrap()


def test_settings_validation():
    assert SolveSettings(max_time=timedelta(seconds=2)).time_limit == 2.0
    with pytest.raises(ValueError):
        SolveSettings(max_steps=-1)
    with pytest.raises(ValueError):
        SolveSettings(self_loop_weight=3)
    s = SolveSettings().with_budget(max_steps=5)
    assert s.max_steps == 5


# --- invalid input ---

def test_reserved_color_is_invalid():
    g = Graph(nodes=[NodePattern(color=0, edges=[EdgeConstraint(0, 0)])] * 2)
    out = solve(g)
    assert isinstance(out, InvalidInput)
    assert "reserved" in out.reason
    assert out.stats.steps == 0


def test_seed_size_mismatch():
    g = Graph.replicate(NodePattern.regular(1), 4)
    out = solve(g, SolveSettings(seed=PuzzleState(3)))
    assert isinstance(out, InvalidInput)
    assert "size" in out.reason


def test_seed_forbidden_self_loop():
    g = Graph.replicate(NodePattern.regular(2), 3)
    seed = PuzzleState(3)
    seed.set(1, 1, 2)
    out = solve(g, SolveSettings(seed=seed))
    assert isinstance(out, InvalidInput)
    assert "self-loop" in out.reason


def test_seed_with_triangle():
    g = Graph.replicate(NodePattern.regular(2), 4, no_triangles=True)
    seed = PuzzleState(4)
    for i, j in [(0, 1), (1, 2), (0, 2)]:
        seed.set(i, j, 2)
    out = solve(g, SolveSettings(seed=seed))
    assert isinstance(out, InvalidInput)
    assert "triangle" in out.reason


def test_seed_breaking_local_rule():
    g = Graph.replicate(NodePattern.regular(1), 4)
    seed = PuzzleState(4)
    seed.set(0, 1, 2)
    seed.set(0, 2, 2)
    reason = validate(g, SolveSettings(seed=seed))
    assert reason is not None
    assert "node 0" in reason


def test_reference_size_mismatch():
    g = Graph.replicate(NodePattern.regular(1), 2)
    assert isinstance(solve(g, SolveSettings(reference=PuzzleState(5))), InvalidInput)


@pytest.mark.parametrize(
    "graph, text",
    [
        (Graph(nodes=[NodePattern(color=-1)]), "negative color"),
        (Graph(nodes=[NodePattern(color=0, edges=[EdgeConstraint(-2, 0)])]), "negative edge color"),
        (Graph(nodes=[NodePattern(color=0, edges=[EdgeConstraint(2, -1)])]), "negative target color"),
        (Graph.replicate(NodePattern.regular(1), 4, pairs=[(0, 9)]), "out of range"),
        (Graph.replicate(NodePattern.regular(1), 4, pairs=[(1, 1)]), "requires a self-loop"),
    ],
)
def test_bad_description_is_invalid(graph, text):
    out = solve(graph)
    assert isinstance(out, InvalidInput)
    assert text in out.reason
    assert out.stats.steps == 0


def test_seed_breaking_required_pair():
    g = Graph.replicate(NodePattern.regular(1), 4, pairs=[(0, 1)])
    seed = PuzzleState(4)
    seed.set(0, 1, 1)
    out = solve(g, SolveSettings(seed=seed))
    assert isinstance(out, InvalidInput)
    assert "required pair" in out.reason
    assert out.stats.steps == 0


@dataclass(frozen=True)
class _FixedCellOrder:
    """Always picks cell (0, 1), determined or not."""

    def select(self, graph, state, self_loop_weight=1):
        return (0, 1) if state.undetermined_count(0) else None

    def domain(self, graph, state, cell, self_loop_weight=1):
        return union_domain(graph, state, cell, self_loop_weight)


def test_order_selecting_determined_cell_is_rejected():
    g = Graph.replicate(NodePattern.regular(1), 3, pairs=[(0, 1)])
    seed = PuzzleState(3)
    seed.set(0, 1, 2)
    with pytest.raises(ValueError, match="already determined"):
        solve(g, SolveSettings(order=_FixedCellOrder(), seed=seed))


# --- seeds ---

def test_seed_cells_are_kept():
    g = Graph.replicate(NodePattern.regular(1), 4)
    seed = PuzzleState(4)
    seed.set(0, 2, 2)
    sol = solve(g, SolveSettings(seed=seed)).unwrap()
    assert sol.state.get(0, 2) == 2
    assert sol.state.get(1, 3) == 2


def test_seed_consistency_with_known_solution():
    g = _cube_graph()
    known = solve(g).unwrap().state
    seed = PuzzleState(8)
    for j in range(1, 8):
        seed.set(0, j, known.get(0, j))
    seed.set(5, 6, known.get(5, 6))
    sol = solve(g, SolveSettings(seed=seed)).unwrap()
    for i, j in seed.assigned():
        assert sol.state.get(i, j) == seed.get(i, j)


def test_seed_is_not_mutated():
    g = Graph.replicate(NodePattern.regular(1), 4)
    seed = PuzzleState(4)
    seed.set(0, 3, 2)
    before = seed.rows()
    solve(g, SolveSettings(seed=seed))
    assert seed.rows() == before


# --- determinism ---

@pytest.mark.parametrize("order", [None, MostConstrainedOrder()])
def test_repeated_solves_are_identical(order):
    settings = SolveSettings() if order is None else SolveSettings(order=order)
    a = solve(_cube_graph(), settings).unwrap()
    b = solve(_cube_graph(), settings).unwrap()
    assert a.state == b.state


def test_most_constrained_order_solves():
    sol = solve(_cube_graph(), SolveSettings(order=MostConstrainedOrder())).unwrap()
    _assert_locally_exact(sol)
    _assert_symmetric(sol.state)


# --- diagnostics ---

def test_reference_differences_go_to_stderr(capsys):
    g = Graph.replicate(NodePattern.regular(1), 4)
    reference = PuzzleState.from_rows([
        [1, 1, 1, 2],
        [1, 1, 2, 1],
        [1, 2, 1, 1],
        [2, 1, 1, 1],
    ])
    plain = solve(g).unwrap()
    traced = solve(g, SolveSettings(reference=reference)).unwrap()
    assert plain.state == traced.state
    err = capsys.readouterr().err
    assert "differ from reference" in err


def test_debug_reports_progress(capsys):
    solve(Graph.replicate(NodePattern.regular(1), 2), SolveSettings(debug=True))
    err = capsys.readouterr().err
    assert "[graphsolve]" in err
    assert "set (0, 1)" in err
