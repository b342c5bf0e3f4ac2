"""
Symmetric node-pair matrix holding the partial assignment of a search.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

import networkx as nx

from .model import NO_EDGE, UNDETERMINED, Color, Graph

Cell = Tuple[int, int]


def canon_cell(i: int, j: int) -> Cell:
    return (i, j) if i <= j else (j, i)


class PuzzleState:
    """
    Symmetric matrix of edge colors over node pairs.

    cell(i, j) == 0 means undetermined, 1 means no edge, >= 2 is an edge color.
    Both halves of the matrix are written on every ``set`` so that
    cell(i, j) == cell(j, i) always holds.
    """

    __slots__ = ("_m", "_frozen")

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must be >= 0.")
        self._m: List[List[Color]] = [[UNDETERMINED] * size for _ in range(size)]
        self._frozen = False

    @classmethod
    def for_graph(cls, graph: Graph) -> "PuzzleState":
        """Fresh state for ``graph`` with forbidden self-loops fixed to NO_EDGE."""
        state = cls(len(graph.nodes))
        for i, node in enumerate(graph.nodes):
            if not node.self_connected:
                state.set(i, i, NO_EDGE)
        return state

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Color]]) -> "PuzzleState":
        """
        Build a state from a square matrix. Only the upper triangle
        (j >= i) is read; the lower triangle is mirrored from it.
        """
        n = len(rows)
        state = cls(n)
        for i, row in enumerate(rows):
            if len(row) != n:
                raise ValueError(f"row {i} has length {len(row)}, expected {n}.")
            for j in range(i, n):
                state.set(i, j, row[j])
        return state

    @property
    def size(self) -> int:
        return len(self._m)

    def __len__(self) -> int:
        return len(self._m)

    def _check_index(self, i: int, j: int) -> None:
        n = len(self._m)
        if not (0 <= i < n and 0 <= j < n):
            raise ValueError(f"cell ({i}, {j}) is out of range for size {n}.")

    def get(self, i: int, j: int) -> Color:
        self._check_index(i, j)
        return self._m[i][j]

    def set(self, i: int, j: int, color: Color) -> None:
        self._check_index(i, j)
        if self._frozen:
            raise ValueError("state is frozen; copy() it to make changes.")
        if color < 0:
            raise ValueError(f"color must be >= 0, got {color}.")
        self._m[i][j] = color
        self._m[j][i] = color

    def row(self, i: int) -> Tuple[Color, ...]:
        return tuple(self._m[i])

    def rows(self) -> Tuple[Tuple[Color, ...], ...]:
        return tuple(tuple(r) for r in self._m)

    def copy(self) -> "PuzzleState":
        other = PuzzleState(0)
        other._m = [list(r) for r in self._m]
        return other

    def freeze(self) -> "PuzzleState":
        """Make this state read-only. Returns self. Copies are writable again."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def cells(self) -> Iterator[Cell]:
        """All cells (i, j) with i <= j, row-major."""
        n = len(self._m)
        for i in range(n):
            for j in range(i, n):
                yield (i, j)

    def undetermined(self) -> Iterator[Cell]:
        return (c for c in self.cells() if self._m[c[0]][c[1]] == UNDETERMINED)

    def assigned(self) -> Iterator[Cell]:
        return (c for c in self.cells() if self._m[c[0]][c[1]] != UNDETERMINED)

    def is_complete(self) -> bool:
        return all(UNDETERMINED not in r for r in self._m)

    def undetermined_count(self, i: int) -> int:
        """Number of undetermined cells in row i (the self-loop cell included)."""
        return self._m[i].count(UNDETERMINED)

    def edges(self) -> List[Tuple[int, int, Color]]:
        """Present edges as (i, j, color) with i <= j."""
        return [(i, j, self._m[i][j]) for i, j in self.cells() if self._m[i][j] > NO_EDGE]

    def edge_pairs(self) -> List[Tuple[int, int]]:
        return [(i, j) for i, j, _c in self.edges()]

    def to_networkx(self, graph: Optional[Graph] = None) -> nx.Graph:
        """
        Present edges as a networkx Graph. Edges carry a ``color`` attribute;
        nodes carry one too when ``graph`` is given.
        """
        G = nx.Graph()
        for i in range(len(self._m)):
            if graph is not None:
                G.add_node(i, color=graph.color(i))
            else:
                G.add_node(i)
        for i, j, c in self.edges():
            G.add_edge(i, j, color=c)
        return G

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzleState):
            return NotImplemented
        return self._m == other._m

    def __repr__(self) -> str:
        return f"PuzzleState(size={len(self._m)}, rows={self.rows()!r})"
