"""
Feasibility predicates over a (possibly partial) PuzzleState.

Every predicate here is pure: it reads the state and never writes it, so the
engine may call them speculatively after a tentative assignment.
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Set

from .model import NO_EDGE, UNDETERMINED, Graph
from .state import Cell, PuzzleState, canon_cell
from .utils.connectivity import connected_components_edges, is_connected_edges


# ---------------------------------------------------------------------------
# Local rule: per-node edge multiset
# ---------------------------------------------------------------------------

def partial_multiset(
    graph: Graph,
    state: PuzzleState,
    i: int,
    *,
    self_loop_weight: int = 1,
) -> Counter:
    """
    Multiset of (edge_color, neighbor_color) over the present edges of node i.

    A self-loop contributes ``self_loop_weight`` entries of
    (loop_color, color(i)).
    """
    got: Counter = Counter()
    row = state.row(i)
    for j, c in enumerate(row):
        if c == UNDETERMINED or c == NO_EDGE:
            continue
        got[(c, graph.color(j))] += self_loop_weight if j == i else 1
    return got


def missing_edges(
    graph: Graph,
    state: PuzzleState,
    i: int,
    *,
    self_loop_weight: int = 1,
) -> Counter:
    """Requirement of node i minus what is already present (never negative)."""
    need = graph.nodes[i].requirement()
    need.subtract(partial_multiset(graph, state, i, self_loop_weight=self_loop_weight))
    return +need


def local_feasible(
    graph: Graph,
    state: PuzzleState,
    i: int,
    *,
    self_loop_weight: int = 1,
) -> bool:
    """
    Pruning test while node i still has undetermined cells: the present edges
    must fit inside the requirement. Completion test once the row is fully
    determined: present edges must equal the requirement exactly.
    """
    got = partial_multiset(graph, state, i, self_loop_weight=self_loop_weight)
    need = graph.nodes[i].requirement()
    if state.undetermined_count(i) == 0:
        return got == need
    return all(count <= need[key] for key, count in got.items())


# ---------------------------------------------------------------------------
# Global rule: triangle freeness
# ---------------------------------------------------------------------------

def _present(state: PuzzleState, i: int, j: int) -> bool:
    return state.get(i, j) > NO_EDGE


def has_triangle(state: PuzzleState, cell: Optional[Cell] = None) -> bool:
    """
    Whether three distinct, mutually connected nodes exist.

    With ``cell`` given, only the triples containing that cell are inspected.
    """
    n = state.size
    if cell is not None:
        i, j = cell
        if i == j or not _present(state, i, j):
            return False
        for k in range(n):
            if k == i or k == j:
                continue
            if _present(state, i, k) and _present(state, j, k):
                return True
        return False

    for i in range(n):
        for j in range(i + 1, n):
            if not _present(state, i, j):
                continue
            for k in range(j + 1, n):
                if _present(state, i, k) and _present(state, j, k):
                    return True
    return False


def global_feasible(graph: Graph, state: PuzzleState, cell: Optional[Cell] = None) -> bool:
    """The no-triangle rule, when enabled on ``graph``."""
    if graph.no_triangles:
        return not has_triangle(state, cell)
    return True


# ---------------------------------------------------------------------------
# Optional graph-wide rules
# ---------------------------------------------------------------------------

def pairs_feasible(graph: Graph, state: PuzzleState) -> bool:
    """Required pairs are never confirmed absent."""
    return all(state.get(i, j) != NO_EDGE for i, j in graph.pairs)


def _quad_ok(ab: int, cd: int, bc: int, da: int, commute: bool) -> bool:
    """Check a 4-cycle a-b-c-d with opposite edge pairs (ab, cd) and (bc, da)."""
    if commute:
        return ab == cd and bc == da
    x_flip = (ab ^ 1) == cd
    y_flip = (bc ^ 1) == da
    if not (x_flip or ab == cd) or not (y_flip or bc == da):
        return False
    # Exactly one opposite pair changes sign.
    return x_flip != y_flip


def _neighbors(state: PuzzleState, i: int) -> List[int]:
    return [j for j, c in enumerate(state.row(i)) if j != i and c > NO_EDGE]


def _quads_through_ok(state: PuzzleState, a: int, b: int, commute: bool) -> bool:
    ab = state.get(a, b)
    nbr_a = _neighbors(state, a)
    for c in _neighbors(state, b):
        if c == a:
            continue
        bc = state.get(b, c)
        for d in nbr_a:
            if d == b or d == c:
                continue
            cd = state.get(c, d)
            if cd <= NO_EDGE:
                continue
            if not _quad_ok(ab, cd, bc, state.get(d, a), commute):
                return False
    return True


def commute_feasible(graph: Graph, state: PuzzleState, cell: Optional[Cell] = None) -> bool:
    """
    Every 4-cycle of present edges satisfies ``graph.commute_quad``.

    With ``cell`` given, only the 4-cycles through that cell are inspected.
    """
    if graph.commute_quad is None:
        return True
    if cell is not None:
        a, b = cell
        if a == b or not _present(state, a, b):
            return True
        return _quads_through_ok(state, a, b, graph.commute_quad)
    for a, b, _c in state.edges():
        if a != b and not _quads_through_ok(state, a, b, graph.commute_quad):
            return False
    return True


def connected_feasible(state: PuzzleState) -> bool:
    """
    False once some component is closed off: all of its nodes are fully
    determined while other nodes remain outside it. On a complete state this
    is exactly connectivity.
    """
    n = state.size
    comps = connected_components_edges(state.edge_pairs(), set(range(n)))
    if len(comps) <= 1:
        return True
    for comp in comps:
        if all(state.undetermined_count(i) == 0 for i in comp):
            return False
    return True


def is_connected_state(state: PuzzleState) -> bool:
    return is_connected_edges(state.edge_pairs(), set(range(state.size)))


def meet_quad_satisfied(state: PuzzleState) -> bool:
    """Every node lies on a cycle of length 3 or 4."""
    n = state.size
    adj: Dict[int, Set[int]] = {i: set(_neighbors(state, i)) for i in range(n)}
    for i in range(n):
        nbrs = sorted(adj[i])
        found = False
        for x, j in enumerate(nbrs):
            for k in nbrs[x + 1:]:
                if k in adj[j] or (adj[j] & adj[k]) - {i, j, k}:
                    found = True
                    break
            if found:
                break
        if not found:
            return False
    return True


# ---------------------------------------------------------------------------
# Bundled checker used by the engine
# ---------------------------------------------------------------------------

class FeasibilityChecker:
    """All rules of one Graph, with the self-loop weight fixed."""

    def __init__(self, graph: Graph, *, self_loop_weight: int = 1) -> None:
        self.graph = graph
        self.self_loop_weight = self_loop_weight
        self._pairs = set(graph.pairs)

    def local(self, state: PuzzleState, i: int) -> bool:
        return local_feasible(self.graph, state, i, self_loop_weight=self.self_loop_weight)

    def after_assignment(self, state: PuzzleState, cell: Cell) -> bool:
        """Incremental check after ``cell`` was assigned."""
        i, j = canon_cell(*cell)
        g = self.graph
        if not self.local(state, i):
            return False
        if j != i and not self.local(state, j):
            return False
        if not global_feasible(g, state, (i, j)):
            return False
        if (i, j) in self._pairs and state.get(i, j) == NO_EDGE:
            return False
        if not commute_feasible(g, state, (i, j)):
            return False
        if g.connected and not connected_feasible(state):
            return False
        return True

    def violation(self, state: PuzzleState) -> Optional[str]:
        """
        Describe the first rule a partial state already breaks, or None.

        Only nodes with at least one assigned cell (besides a fixed
        NO_EDGE self-loop) are checked locally.
        """
        g = self.graph
        for i, node in enumerate(g.nodes):
            row = state.row(i)
            touched = any(c != UNDETERMINED for j, c in enumerate(row) if j != i)
            if node.self_connected and row[i] != UNDETERMINED:
                touched = True
            if touched and not self.local(state, i):
                return f"edges of node {i} do not fit its requirement"
        if not global_feasible(g, state):
            return "state contains a triangle"
        if not pairs_feasible(g, state):
            return "a required pair is marked as having no edge"
        if not commute_feasible(g, state):
            return "a 4-cycle violates the commute rule"
        if g.connected and not connected_feasible(state):
            return "a component is closed off from the rest of the graph"
        return None

    def is_solved(self, state: PuzzleState) -> bool:
        """Full final check on a complete state."""
        g = self.graph
        if not state.is_complete():
            return False
        if not all(self.local(state, i) for i in range(len(g.nodes))):
            return False
        if not global_feasible(g, state):
            return False
        if not pairs_feasible(g, state):
            return False
        if g.connected and not is_connected_state(state):
            return False
        if g.meet_quad and not meet_quad_satisfied(state):
            return False
        return commute_feasible(g, state)
