#!/usr/bin/env python3
"""
Find a cube from local rules only: 8 nodes, each with three edges to nodes
of its own color, and no triangles anywhere.

Usage: python3 cube.py [--bipartite]

Without --bipartite the solver may return the Wagner graph, the other cubic
triangle-free graph on 8 vertices. Coloring the nodes black and white and
requiring every edge to cross colors leaves only the cube.
"""

import sys

import networkx as nx

from graphsolve import Graph, NodePattern, Solved, solve


EDGE = 2  # 0 is undetermined and 1 is no-edge.


def main():
    if "--bipartite" in sys.argv[1:]:
        black = NodePattern.regular(3, edge_color=EDGE, color=0, target_color=1)
        white = NodePattern.regular(3, edge_color=EDGE, color=1, target_color=0)
        g = Graph(nodes=[black, white] * 4, no_triangles=True)
    else:
        g = Graph.replicate(NodePattern.regular(3, edge_color=EDGE), 8, no_triangles=True)

    out = solve(g)
    if not isinstance(out, Solved):
        print(f"<no solution: {type(out).__name__}>", file=sys.stderr)
        return 1

    G = out.solution.to_networkx()
    for u, v, data in G.edges(data=True):
        print(f"{u} -- {v}  color={data['color']}")
    print("cube:", nx.is_isomorphic(G, nx.hypercube_graph(3)))
    print(f"steps={out.stats.steps} backtracks={out.stats.backtracks}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
