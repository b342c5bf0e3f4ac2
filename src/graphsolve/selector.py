"""
Cell ordering and candidate domains.

A strategy picks the next undetermined cell and proposes the colors to try
there. Domains are always finite, sorted ascending, and contain NO_EDGE.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .checker import missing_edges
from .model import NO_EDGE, Color, Graph
from .state import Cell, PuzzleState


def _consumed_edge_colors(state: PuzzleState, i: int, self_loop_weight: int) -> Counter:
    used: Counter = Counter()
    for j, c in enumerate(state.row(i)):
        if c > NO_EDGE:
            used[c] += self_loop_weight if j == i else 1
    return used


def _open_edge_colors(graph: Graph, state: PuzzleState, i: int, self_loop_weight: int) -> set:
    need = graph.nodes[i].edge_colors()
    used = _consumed_edge_colors(state, i, self_loop_weight)
    return {c for c, k in need.items() if used[c] < k}


def union_domain(
    graph: Graph,
    state: PuzzleState,
    cell: Cell,
    self_loop_weight: int = 1,
) -> List[Color]:
    """
    NO_EDGE plus every edge color still unconsumed at node i or at node j.
    """
    i, j = cell
    colors = _open_edge_colors(graph, state, i, self_loop_weight)
    if j != i:
        colors |= _open_edge_colors(graph, state, j, self_loop_weight)
    colors.add(NO_EDGE)
    return sorted(colors)


def mutual_domain(
    graph: Graph,
    state: PuzzleState,
    cell: Cell,
    self_loop_weight: int = 1,
) -> List[Color]:
    """
    NO_EDGE plus every edge color that both endpoints still miss toward each
    other's color. Any other edge color would break an endpoint's requirement
    at once, so nothing that could complete a solution is dropped.
    """
    i, j = cell
    ci, cj = graph.color(i), graph.color(j)
    miss_i = missing_edges(graph, state, i, self_loop_weight=self_loop_weight)
    colors = {NO_EDGE}
    if i == j:
        for (edge, target), k in miss_i.items():
            if target == ci and k >= self_loop_weight:
                colors.add(edge)
        return sorted(colors)
    miss_j = missing_edges(graph, state, j, self_loop_weight=self_loop_weight)
    for edge, target in miss_i:
        if target == cj and miss_j[(edge, ci)] > 0:
            colors.add(edge)
    return sorted(colors)


class CellOrder(Protocol):
    """Pluggable branching strategy."""

    def select(self, graph: Graph, state: PuzzleState, self_loop_weight: int = 1) -> Optional[Cell]:
        ...

    def domain(self, graph: Graph, state: PuzzleState, cell: Cell, self_loop_weight: int = 1) -> List[Color]:
        ...


@dataclass(frozen=True)
class RowMajorOrder:
    """First undetermined cell in row-major order; union domain."""

    def select(self, graph: Graph, state: PuzzleState, self_loop_weight: int = 1) -> Optional[Cell]:
        return next(state.undetermined(), None)

    def domain(self, graph: Graph, state: PuzzleState, cell: Cell, self_loop_weight: int = 1) -> List[Color]:
        return union_domain(graph, state, cell, self_loop_weight)


@dataclass(frozen=True)
class MostConstrainedOrder:
    """
    Undetermined cell with the fewest candidate colors (mutual domain),
    ties broken row-major. Stops scanning at the first forced cell.
    """

    def select(self, graph: Graph, state: PuzzleState, self_loop_weight: int = 1) -> Optional[Cell]:
        best: Optional[Cell] = None
        best_size = 0
        for cell in state.undetermined():
            size = len(mutual_domain(graph, state, cell, self_loop_weight))
            if best is None or size < best_size:
                best, best_size = cell, size
                if size == 1:
                    break
        return best

    def domain(self, graph: Graph, state: PuzzleState, cell: Cell, self_loop_weight: int = 1) -> List[Color]:
        return mutual_domain(graph, state, cell, self_loop_weight)
