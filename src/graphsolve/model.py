"""Input descriptions: edge constraints, node patterns and graphs."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

Color = int

# Reserved cell values. Edge colors start at 2.
UNDETERMINED: Color = 0
NO_EDGE: Color = 1


@dataclass(frozen=True)
class EdgeConstraint:
    """One required edge: an edge of ``edge_color`` to a neighbor of ``target_color``."""

    edge_color: Color
    target_color: Color

    def key(self) -> Tuple[Color, Color]:
        return (self.edge_color, self.target_color)


@dataclass(frozen=True)
class NodePattern:
    """
    Local description of a single node.

    color:          the node's own color.
    edges:          the exact multiset of edges the node must carry, in any order.
                    Its length is the node's required degree.
    self_connected: whether the node carries a self-loop. Nodes without it
                    always have cell(i, i) == NO_EDGE.
    """

    color: Color
    edges: Tuple[EdgeConstraint, ...] = ()
    self_connected: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "edges", tuple(self.edges))

    @property
    def degree(self) -> int:
        return len(self.edges)

    def requirement(self) -> Counter:
        """Required multiset keyed by (edge_color, target_color)."""
        return Counter(e.key() for e in self.edges)

    def edge_colors(self) -> Counter:
        """Required multiplicity per edge color, ignoring target colors."""
        return Counter(e.edge_color for e in self.edges)

    @classmethod
    def regular(
        cls,
        degree: int,
        *,
        edge_color: Color = 2,
        target_color: Color = 0,
        color: Color = 0,
        self_connected: bool = False,
    ) -> "NodePattern":
        """A node with ``degree`` identical edges."""
        return cls(
            color=color,
            edges=(EdgeConstraint(edge_color, target_color),) * degree,
            self_connected=self_connected,
        )


def _normalize_pair(pair: Iterable[int]) -> Tuple[int, int]:
    i, j = pair
    return (min(i, j), max(i, j))


@dataclass(frozen=True)
class Graph:
    """
    A graph description to be solved.

    Node identity is positional: ``nodes[i]`` describes node i. Repeating a
    pattern creates independent nodes sharing the same constraints.

    no_triangles: forbid any three mutually connected nodes.
    pairs:        index pairs that must carry an edge in every solution.
    connected:    every node must be reachable from every other node.
    meet_quad:    every node must lie on a cycle of length 3 or 4.
    commute_quad: None disables the rule. True requires every 4-cycle to
                  commute (opposite edges share a color). False requires every
                  4-cycle to anticommute: opposite edges share a dimension
                  (colors equal up to the lowest bit) and exactly one
                  opposite pair differs in sign, e.g. 2 and 3.
    """

    nodes: Tuple[NodePattern, ...] = ()
    no_triangles: bool = False
    pairs: Tuple[Tuple[int, int], ...] = ()
    connected: bool = False
    meet_quad: bool = False
    commute_quad: Optional[bool] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "pairs", tuple(_normalize_pair(p) for p in self.pairs))

    def __len__(self) -> int:
        return len(self.nodes)

    def color(self, i: int) -> Color:
        return self.nodes[i].color

    @classmethod
    def replicate(cls, pattern: NodePattern, count: int, **flags) -> "Graph":
        """Graph of ``count`` nodes that all share ``pattern``."""
        return cls(nodes=(pattern,) * count, **flags)

    def problems(self) -> list[str]:
        """
        Return human-readable reasons why this description cannot be solved
        as given. An empty list means the description is well-formed.
        """
        out: list[str] = []
        n = len(self.nodes)
        for i, node in enumerate(self.nodes):
            if node.color < 0:
                out.append(f"node {i} has negative color {node.color}")
            for e in node.edges:
                if e.edge_color == UNDETERMINED:
                    out.append(f"node {i} requires reserved edge color 0 (to color {e.target_color})")
                elif e.edge_color < 0:
                    out.append(f"node {i} requires negative edge color {e.edge_color}")
                if e.target_color < 0:
                    out.append(f"node {i} requires negative target color {e.target_color}")
        for i, j in self.pairs:
            if i < 0 or j >= n:
                out.append(f"pair ({i}, {j}) is out of range for {n} nodes")
            elif i == j and not self.nodes[i].self_connected:
                out.append(f"pair ({i}, {j}) requires a self-loop on node {i}, which is not self-connected")
        return out
